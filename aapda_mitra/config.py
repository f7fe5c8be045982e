"""Centralized configuration for the Aapda Mitra backend."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
_project_root = Path(__file__).parent.parent
load_dotenv(_project_root / ".env")


# API Keys
ANTHROPIC_API_KEY: str = os.getenv("ANTHROPIC_API_KEY", "")

# Data paths
DATA_DIR: Path = Path(__file__).parent / "data"

# Database
DATABASE_URL: str = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR / 'aapda_mitra.db'}")

# Claude model settings
CLAUDE_MODEL: str = os.getenv("CLAUDE_MODEL", "claude-sonnet-4-5-20250929")
CLAUDE_MAX_TOKENS: int = int(os.getenv("CLAUDE_MAX_TOKENS", "1024"))
CHAT_TEMPERATURE: float = float(os.getenv("CHAT_TEMPERATURE", "0.7"))

# Mesh relay simulation timing
MESH_HOP_DELAY_SEC: float = float(os.getenv("MESH_HOP_DELAY_SEC", "1.5"))
MESH_DISCOVERY_DELAY_SEC: float = float(os.getenv("MESH_DISCOVERY_DELAY_SEC", "2.0"))
MESH_MAX_RELAY_HOPS: int = int(os.getenv("MESH_MAX_RELAY_HOPS", "2"))

# User-facing notifications auto-dismiss after this many seconds
NOTIFICATION_TTL_SEC: float = float(os.getenv("NOTIFICATION_TTL_SEC", "3.0"))

# Mock API server
API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "3001"))
