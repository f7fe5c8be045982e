from .schema import (
    Base,
    PersonalContact,
    UserProfile,
    Alert,
    Shelter,
    SurvivalGuideCache,
    DisasterType,
    Gender,
    Severity,
    USER_REPORT_TYPE,
    COLLECTIONS,
    LATEST_SCHEMA_VERSION,
)
from .db import Collection, Database

__all__ = [
    "Base",
    "PersonalContact",
    "UserProfile",
    "Alert",
    "Shelter",
    "SurvivalGuideCache",
    "DisasterType",
    "Gender",
    "Severity",
    "USER_REPORT_TYPE",
    "COLLECTIONS",
    "LATEST_SCHEMA_VERSION",
    "Collection",
    "Database",
]
