"""End-to-end demo of the offline store, guide cache and mesh relay."""

import asyncio
import json
import logging

from aapda_mitra.assistant import ClaudeOracle
from aapda_mitra.database import Database, DisasterType
from aapda_mitra.errors import GenerationError
from aapda_mitra.mesh import MeshSimulator
from aapda_mitra.offline import AlertFeed, GuideLibrary, ShelterDirectory, seed_offline_data
from aapda_mitra.utils.notifications import NotificationCenter

# Configure verbose logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)-30s | %(levelname)-7s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("demo")


def pretty_print(label: str, data: dict | list | str) -> None:
    """Pretty-print a section with a header."""
    print(f"\n{'='*70}")
    print(f"  {label}")
    print(f"{'='*70}")
    if isinstance(data, (dict, list)):
        print(json.dumps(data, indent=2, default=str))
    else:
        print(data)


async def run_demo():
    """Run the full offline-core demo."""

    print("\n" + "#" * 70)
    print("#  AAPDA MITRA - OFFLINE CORE DEMO")
    print("#" * 70)

    # ------------------------------------------------------------------
    # 1. Open the local store and seed it
    # ------------------------------------------------------------------
    db = Database()
    db.create_tables()
    logger.info("Store schema version: %d", db.current_version())
    seeded = seed_offline_data(db)
    logger.info("Seeded on this run: %s", seeded)

    notifications = NotificationCenter()

    # ------------------------------------------------------------------
    # 2. Alerts and shelters
    # ------------------------------------------------------------------
    alerts = AlertFeed(db, notifications).load()
    pretty_print("ALERTS", [f"[{a['badge']}] {a['type']} - {a['area']}" for a in alerts])

    nearest = ShelterDirectory(db, notifications).nearest(26.1445, 91.7362, limit=2)
    pretty_print("NEAREST SHELTERS (Guwahati)", [
        {"name": s["name"], "distance": s["distance"], "available": s["available"]}
        for s in nearest
    ])

    # ------------------------------------------------------------------
    # 3. Survival guide (cache first, Claude on a miss)
    # ------------------------------------------------------------------
    oracle = ClaudeOracle()
    claude_status = "CONNECTED" if oracle.client else "UNAVAILABLE"
    logger.info("Claude API: %s", claude_status)

    guides = GuideLibrary(db, oracle)
    try:
        result = guides.fetch(DisasterType.FLOOD)
        pretty_print(
            f"FLOOD GUIDE ({'cached' if result.is_cached else 'generated'})",
            result.guide[:600],
        )
    except GenerationError as e:
        logger.warning("No guide available: %s", e)

    # ------------------------------------------------------------------
    # 4. Mesh relay SOS
    # ------------------------------------------------------------------
    simulator = MeshSimulator(delay_unit=0.3, discovery_delay=0.5)
    await simulator.enable()
    send = await simulator.send_sos("Trapped in building, need medical aid.")
    pretty_print("MESH SIMULATION LOG", simulator.snapshot()["log"])
    logger.info("SOS outcome: %s", send.state.value if send else "not sent")
    simulator.disable()

    # ------------------------------------------------------------------
    # Done
    # ------------------------------------------------------------------
    db.close()
    print("\n" + "#" * 70)
    print("#  DEMO COMPLETE")
    print("#" * 70 + "\n")


def main():
    asyncio.run(run_demo())


if __name__ == "__main__":
    main()
