from .alerts import AlertFeed, badge_label
from .contacts import ContactBook, NATIONAL_HELPLINES
from .guides import GuideLibrary, GuideResult
from .profile import ProfileManager, DEFAULT_PROFILE
from .seed import seed_offline_data, seed_if_empty, INITIAL_ALERTS, INITIAL_SHELTERS
from .shelters import ShelterDirectory

__all__ = [
    "AlertFeed",
    "badge_label",
    "ContactBook",
    "NATIONAL_HELPLINES",
    "GuideLibrary",
    "GuideResult",
    "ProfileManager",
    "DEFAULT_PROFILE",
    "seed_offline_data",
    "seed_if_empty",
    "INITIAL_ALERTS",
    "INITIAL_SHELTERS",
    "ShelterDirectory",
]
