"""Singleton user profile."""

import logging

from aapda_mitra.database import Database, Gender
from aapda_mitra.errors import StorageError
from aapda_mitra.utils.notifications import NotificationCenter

logger = logging.getLogger(__name__)

PROFILE_ID = 1

DEFAULT_PROFILE: dict = {
    "id": PROFILE_ID,
    "name": "New User",
    "phone": "1234567890",
    "age": 25,
    "gender": Gender.PREFER_NOT_TO_SAY.value,
}


def _coerce_age(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


class ProfileManager:
    """Loads and saves the profile stored under id 1."""

    def __init__(self, db: Database, notifications: NotificationCenter):
        self.db = db
        self.notifications = notifications

    def load(self) -> dict | None:
        """Return the profile, creating it with defaults on first view."""
        try:
            profile = self.db.user_profile.get(PROFILE_ID)
            if profile is None:
                profile = dict(DEFAULT_PROFILE)
                self.db.user_profile.put(profile)
                logger.info("Created default user profile")
            return profile
        except StorageError as e:
            logger.error("Failed to load profile: %s", e)
            self.notifications.error("Could not load your profile.")
            return None

    def save(self, profile: dict) -> dict | None:
        """
        Replace the stored profile.

        Raises:
            ValueError: if the gender is not one of the offered choices
        """
        updated = {
            "id": PROFILE_ID,
            "name": profile.get("name", ""),
            "phone": profile.get("phone", ""),
            "age": _coerce_age(profile.get("age")),
            "gender": Gender(profile.get("gender", Gender.PREFER_NOT_TO_SAY)).value,
        }

        try:
            self.db.user_profile.put(updated)
        except StorageError as e:
            logger.error("Failed to save profile: %s", e)
            self.notifications.error("Failed to save your profile.")
            return None

        self.notifications.success("Profile updated successfully!")
        return updated
