"""Alert feed with seeding and user incident reports."""

import logging

from aapda_mitra.database import Database, Severity, USER_REPORT_TYPE
from aapda_mitra.errors import StorageError
from aapda_mitra.utils.notifications import NotificationCenter
from .seed import INITIAL_ALERTS, seed_if_empty

logger = logging.getLogger(__name__)

UNKNOWN_AREA = "Location Reported by User"


def badge_label(alert: dict) -> str:
    """Label for an alert's badge. User reports skip severity styling."""
    if alert.get("type") == USER_REPORT_TYPE:
        return USER_REPORT_TYPE
    return f"{alert.get('severity')} Severity"


def report_area(lat: float | None, lon: float | None) -> str:
    if lat is None or lon is None:
        return UNKNOWN_AREA
    return f"Lat: {lat:.4f}, Lon: {lon:.4f}"


class AlertFeed:
    """Alerts shown on the feed, newest first."""

    def __init__(self, db: Database, notifications: NotificationCenter):
        self.db = db
        self.notifications = notifications

    def load(self) -> list[dict]:
        """Seed the feed on first run, then return every alert newest first."""
        try:
            seed_if_empty(self.db.alerts, INITIAL_ALERTS)
            alerts = self.db.alerts.get_all(order_by="id", reverse=True)
        except StorageError as e:
            logger.error("Failed to load or seed offline alerts: %s", e)
            self.notifications.error("Could not load alerts.")
            return []

        for alert in alerts:
            alert["badge"] = badge_label(alert)
        return alerts

    def report_incident(
        self,
        description: str,
        image: str | None = None,
        lat: float | None = None,
        lon: float | None = None,
    ) -> dict | None:
        """
        Store a user-submitted incident as a high-severity alert.

        Returns:
            The stored alert, or None if it could not be saved
        """
        description = (description or "").strip()
        if not description:
            raise ValueError("Please provide a description of the incident.")

        alert = {
            "type": USER_REPORT_TYPE,
            "area": report_area(lat, lon),
            "severity": Severity.HIGH.value,
            "message": description,
            "time": "Just now",
            "image": image,
        }

        try:
            alert["id"] = self.db.alerts.put(alert)
        except StorageError as e:
            logger.error("Failed to save alert: %s", e)
            self.notifications.error(
                "There was an error reporting the incident. Please try again."
            )
            return None

        logger.info("Stored user report %d for %s", alert["id"], alert["area"])
        self.notifications.success(
            "Incident reported successfully! It will now appear in the alerts feed."
        )
        alert["badge"] = badge_label(alert)
        return alert
