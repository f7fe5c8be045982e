from .main import app, create_app, AppServices

__all__ = ["app", "create_app", "AppServices"]
