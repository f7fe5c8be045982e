from .geo import haversine_km, format_distance
from .notifications import Notification, NotificationCenter, NotificationKind

__all__ = [
    "haversine_km",
    "format_distance",
    "Notification",
    "NotificationCenter",
    "NotificationKind",
]
