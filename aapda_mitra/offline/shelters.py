"""Offline shelter directory."""

from __future__ import annotations

import logging

from aapda_mitra.database import Database
from aapda_mitra.errors import StorageError
from aapda_mitra.utils.geo import format_distance, haversine_km
from aapda_mitra.utils.notifications import NotificationCenter

logger = logging.getLogger(__name__)


class ShelterDirectory:
    """
    Shelters available from the local store.

    ``available <= capacity`` is not enforced; rows that break it are
    returned as stored and logged.
    """

    def __init__(self, db: Database, notifications: NotificationCenter):
        self.db = db
        self.notifications = notifications

    def list(self) -> list[dict]:
        try:
            shelters = self.db.shelters.get_all()
        except StorageError as e:
            logger.error("Failed to load shelters: %s", e)
            self.notifications.error("Could not load shelter information.")
            return []

        for shelter in shelters:
            if (shelter.get("available") or 0) > (shelter.get("capacity") or 0):
                logger.warning(
                    "Shelter %s reports %s available of %s capacity",
                    shelter.get("name"), shelter.get("available"), shelter.get("capacity"),
                )
        return shelters

    def nearest(self, lat: float, lng: float, limit: int | None = None) -> list[dict]:
        """Shelters sorted by great-circle distance from (lat, lng)."""
        ranked = []
        for shelter in self.list():
            if shelter.get("lat") is None or shelter.get("lng") is None:
                continue
            km = haversine_km(lat, lng, shelter["lat"], shelter["lng"])
            ranked.append({**shelter, "distance_km": km, "distance": format_distance(km)})

        ranked.sort(key=lambda s: s["distance_km"])
        return ranked[:limit] if limit is not None else ranked
