"""Cache-aside access to AI-generated survival guides."""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from aapda_mitra.assistant.oracle import TextOracle
from aapda_mitra.database import Database, DisasterType
from aapda_mitra.errors import GenerationError, StorageError

logger = logging.getLogger(__name__)

OFFLINE_NOTICE = "Could not connect to the server. Displaying offline version."
FETCH_FAILED_MESSAGE = (
    "An error occurred while fetching the guide. Please check your connection "
    "and try again."
)


@dataclass
class GuideResult:
    """A guide as shown to the user."""
    disaster_type: DisasterType
    guide: str
    is_cached: bool = False
    notice: str | None = None
    timestamp: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "disaster_type": self.disaster_type.value,
            "guide": self.guide,
            "is_cached": self.is_cached,
            "notice": self.notice,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }


class GuideLibrary:
    """
    Survival guides served from the local cache, generated on a miss.

    The oracle is consulted only when no cached guide exists (or on an
    explicit refresh). When generation fails, any cached copy is served
    with an offline notice.
    """

    def __init__(self, db: Database, oracle: TextOracle):
        self.db = db
        self.oracle = oracle

    def _cached(self, disaster_type: DisasterType) -> dict | None:
        try:
            return self.db.survival_guides.get(disaster_type)
        except StorageError as e:
            logger.error("Failed to read cached guide for %s: %s", disaster_type.value, e)
            return None

    def _from_cache(self, record: dict, notice: str | None = None) -> GuideResult:
        return GuideResult(
            disaster_type=DisasterType(record["disaster_type"]),
            guide=record["guide"],
            is_cached=True,
            notice=notice,
            timestamp=record.get("timestamp"),
        )

    def _generate(self, disaster_type: DisasterType) -> GuideResult:
        try:
            guide = self.oracle.generate_survival_guide(disaster_type)
        except GenerationError:
            cached = self._cached(disaster_type)
            if cached is not None:
                logger.warning("Serving cached %s guide after generation failure", disaster_type.value)
                return self._from_cache(cached, notice=OFFLINE_NOTICE)
            raise GenerationError(FETCH_FAILED_MESSAGE)

        result = GuideResult(disaster_type=disaster_type, guide=guide)
        try:
            self.db.survival_guides.put({
                "disaster_type": disaster_type,
                "guide": guide,
                "timestamp": result.timestamp,
            })
        except StorageError as e:
            logger.error("Failed to cache %s guide: %s", disaster_type.value, e)
        return result

    def fetch(self, disaster_type: DisasterType | str) -> GuideResult:
        """
        Return the cached guide, generating and caching one on a miss.

        Raises:
            GenerationError: if nothing is cached and generation fails
        """
        disaster_type = DisasterType(disaster_type)
        cached = self._cached(disaster_type)
        if cached is not None:
            return self._from_cache(cached)
        return self._generate(disaster_type)

    def refresh(self, disaster_type: DisasterType | str) -> GuideResult:
        """Regenerate a guide and overwrite the cached copy."""
        return self._generate(DisasterType(disaster_type))
