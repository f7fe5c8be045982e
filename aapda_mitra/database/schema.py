"""Database schema for the Aapda Mitra offline store."""

from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Column,
    Integer,
    String,
    Float,
    DateTime,
    Text,
    Index,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Gender(str, Enum):
    """Gender choices offered on the profile form."""
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"
    PREFER_NOT_TO_SAY = "Prefer not to say"


class Severity(str, Enum):
    """Severity levels for official alerts."""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class DisasterType(str, Enum):
    """Disaster types a survival guide can be generated for."""
    EARTHQUAKE = "Earthquake"
    FLOOD = "Flood"
    CYCLONE = "Cyclone"
    LANDSLIDE = "Landslide"
    HEATWAVE = "Heatwave"
    TSUNAMI = "Tsunami"


USER_REPORT_TYPE = "User Report"


class RecordMixin:
    """Plain-dict view of a row, keyed by column name."""

    def to_dict(self) -> dict:
        return {column.name: getattr(self, column.key) for column in self.__table__.columns}


class SchemaVersion(Base):
    """Single-row table recording the applied schema generation."""

    __tablename__ = "schema_version"

    id = Column(Integer, primary_key=True, autoincrement=False)
    version = Column(Integer, nullable=False, default=0)
    upgraded_at = Column(DateTime, default=datetime.utcnow)


# ---------------------------------------------------------------------------
# Generation 1
# ---------------------------------------------------------------------------


class PersonalContact(RecordMixin, Base):
    """A user-added emergency contact."""

    __tablename__ = "personal_contacts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    number = Column(String(50), nullable=False)

    __table_args__ = (
        Index("idx_contact_name", "name"),
        {"sqlite_autoincrement": True},
    )


class UserProfile(RecordMixin, Base):
    """The local user's profile. Always stored under id 1."""

    __tablename__ = "user_profile"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(255))
    phone = Column(String(50))
    age = Column(Integer)
    gender = Column(String(30))


# ---------------------------------------------------------------------------
# Generation 2
# ---------------------------------------------------------------------------


class Alert(RecordMixin, Base):
    """Official alerts and user-submitted incident reports."""

    __tablename__ = "alerts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(String(100), nullable=False)
    area = Column(String(255))
    severity = Column(String(20))  # High, Medium, Low
    message = Column(Text)
    time = Column(String(50))  # display label, e.g. "2 hours ago"
    image = Column(Text)  # data URL for user reports

    __table_args__ = (
        Index("idx_alert_type", "type"),
        Index("idx_alert_area", "area"),
        Index("idx_alert_severity", "severity"),
        {"sqlite_autoincrement": True},
    )


class Shelter(RecordMixin, Base):
    """Relief shelter with capacity and coordinates."""

    __tablename__ = "shelters"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    location = Column(String(255))  # city name
    distance = Column(String(50))  # display label, e.g. "2.5 km"
    capacity = Column(Integer, default=0)
    available = Column(Integer, default=0)
    lat = Column(Float)
    lng = Column(Float)

    __table_args__ = (
        Index("idx_shelter_name", "name"),
        Index("idx_shelter_location", "location"),
        {"sqlite_autoincrement": True},
    )


class SurvivalGuideCache(RecordMixin, Base):
    """Last generated survival guide per disaster type."""

    __tablename__ = "survival_guides"

    disaster_type = Column(String(30), primary_key=True, autoincrement=False)
    guide = Column(Text, nullable=False)
    timestamp = Column(DateTime, default=datetime.utcnow)


# Additive schema generations. Later generations only introduce new tables.
SCHEMA_GENERATIONS: dict[int, list] = {
    1: [PersonalContact.__table__, UserProfile.__table__],
    2: [Alert.__table__, Shelter.__table__, SurvivalGuideCache.__table__],
}

LATEST_SCHEMA_VERSION: int = max(SCHEMA_GENERATIONS)

COLLECTIONS: dict[str, type] = {
    "personal_contacts": PersonalContact,
    "user_profile": UserProfile,
    "alerts": Alert,
    "shelters": Shelter,
    "survival_guides": SurvivalGuideCache,
}
