"""Personal emergency contacts and national helplines."""

import logging

from aapda_mitra.database import Database
from aapda_mitra.errors import StorageError
from aapda_mitra.utils.notifications import NotificationCenter

logger = logging.getLogger(__name__)


NATIONAL_HELPLINES: list[dict] = [
    {"name": "National Emergency Number", "number": "112"},
    {"name": "Police", "number": "100"},
    {"name": "Fire", "number": "101"},
    {"name": "Ambulance", "number": "102"},
    {"name": "Disaster Management Services", "number": "108"},
    {"name": "Women Helpline", "number": "1091"},
    {"name": "Child Helpline", "number": "1098"},
]


class ContactBook:
    """CRUD over the user's personal contacts."""

    def __init__(self, db: Database, notifications: NotificationCenter):
        self.db = db
        self.notifications = notifications

    def list(self) -> list[dict]:
        try:
            return self.db.personal_contacts.get_all()
        except StorageError as e:
            logger.error("Failed to fetch contacts: %s", e)
            self.notifications.error("Could not load personal contacts.")
            return []

    def add(self, name: str, number: str) -> dict | None:
        """
        Save a new contact.

        Raises:
            ValueError: if the name or number is blank
        """
        name = (name or "").strip()
        number = (number or "").strip()
        if not name or not number:
            raise ValueError("Both a name and a phone number are required.")

        contact = {"name": name, "number": number}
        try:
            contact["id"] = self.db.personal_contacts.put(contact)
        except StorageError as e:
            logger.error("Failed to add contact: %s", e)
            self.notifications.error("Failed to save contact.")
            return None

        self.notifications.success("Contact saved successfully!")
        return contact

    def delete(self, contact_id: int) -> bool:
        try:
            self.db.personal_contacts.delete(contact_id)
        except StorageError as e:
            logger.error("Failed to delete contact: %s", e)
            self.notifications.error("Failed to delete contact.")
            return False
        return True
