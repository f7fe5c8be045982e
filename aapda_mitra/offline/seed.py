"""First-run seed data for offline collections."""

import logging

from aapda_mitra.database import Database

logger = logging.getLogger(__name__)


INITIAL_ALERTS: list[dict] = [
    {
        "type": "Flood Warning",
        "area": "Guwahati, Assam",
        "severity": "High",
        "message": (
            "River Brahmaputra is flowing above the danger level. People in "
            "low-lying areas are advised to move to safer places."
        ),
        "time": "2 hours ago",
    },
    {
        "type": "Cyclone Alert",
        "area": "Coastal Odisha",
        "severity": "Medium",
        "message": (
            "A cyclone is expected to make landfall in the next 48 hours. "
            "Fishermen are advised not to venture into the sea."
        ),
        "time": "8 hours ago",
    },
    {
        "type": "Heatwave",
        "area": "Jaipur, Rajasthan",
        "severity": "Low",
        "message": (
            "Temperatures are expected to rise above 45°C. Stay hydrated and "
            "avoid outdoor activities during peak hours."
        ),
        "time": "1 day ago",
    },
]

INITIAL_SHELTERS: list[dict] = [
    {"name": "Govt. High School Relief Camp", "location": "Bhubaneswar", "distance": "2.5 km",
     "capacity": 250, "available": 80, "lat": 20.2961, "lng": 85.8245},
    {"name": "Community Hall, Sector 12", "location": "Guwahati", "distance": "4.1 km",
     "capacity": 150, "available": 25, "lat": 26.1445, "lng": 91.7362},
    {"name": "Red Cross Shelter", "location": "Dehradun", "distance": "5.8 km",
     "capacity": 100, "available": 90, "lat": 30.3165, "lng": 78.0322},
    {"name": "City Stadium", "location": "Jaipur", "distance": "10.2 km",
     "capacity": 1000, "available": 450, "lat": 26.9124, "lng": 75.7873},
]


def seed_if_empty(collection, records: list[dict]) -> int:
    """
    Seed ``collection`` only when it holds no records.

    Returns:
        Number of records inserted (0 when the collection was not empty)
    """
    if collection.count() != 0:
        return 0
    collection.bulk_seed(records)
    logger.info("Seeded %s with %d record(s)", collection.name, len(records))
    return len(records)


def seed_offline_data(db: Database) -> dict[str, int]:
    """Seed alerts and shelters on first run."""
    return {
        "alerts": seed_if_empty(db.alerts, INITIAL_ALERTS),
        "shelters": seed_if_empty(db.shelters, INITIAL_SHELTERS),
    }
