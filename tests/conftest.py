"""Shared fixtures for the test suite."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from aapda_mitra.assistant import TextOracle
from aapda_mitra.database import Database
from aapda_mitra.errors import GenerationError
from aapda_mitra.utils.notifications import NotificationCenter


class FakeOracle(TextOracle):
    """Deterministic oracle that records every call."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.guide_calls: list = []
        self.chat_calls: list = []

    def generate_survival_guide(self, disaster_type):
        self.guide_calls.append(disaster_type)
        if self.fail:
            raise GenerationError("oracle offline")
        return f"### Before the {disaster_type.value}\n* Pack an emergency kit"

    def get_chatbot_response(self, history, new_message):
        self.chat_calls.append((list(history), new_message))
        if self.fail:
            raise GenerationError("oracle offline")
        return f"You said: {new_message}"


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
def db(db_url):
    """A fully upgraded store in a temporary SQLite file."""
    database = Database(db_url)
    database.create_tables()
    yield database
    database.close()


@pytest.fixture
def bare_db(db_url):
    """A store whose schema was never created."""
    database = Database(db_url)
    yield database
    database.close()


@pytest.fixture
def notifications():
    return NotificationCenter()


@pytest.fixture
def oracle():
    return FakeOracle()
