"""Command-line demo of the offline mesh SOS relay."""

import asyncio
import logging
import sys

from .peers import MOCK_PEERS
from .simulator import MeshSimulator

DEFAULT_MESSAGE = "Trapped in building, need medical aid."


def print_header():
    """Print CLI header."""
    print("\n" + "=" * 60)
    print("  PEER-TO-PEER MESH NETWORK")
    print("  Offline SOS relay simulation")
    print("=" * 60 + "\n")


def print_peers(peers: list[dict]):
    """Print discovered peers."""
    print("\n📡 NEARBY PEERS")
    print("-" * 40)
    for peer in peers:
        label = "Online Gateway" if peer["status"] == "online-gateway" else "Offline"
        print(f"  • {peer['name']:<14} {label:<15} signal {peer['signal']}%")
    print()


class LogPrinter:
    """Prints simulation log lines as they are appended."""

    def __init__(self):
        self._printed = 0

    def __call__(self, snapshot: dict) -> None:
        log = snapshot["log"]
        if len(log) < self._printed:
            self._printed = 0
        for line in log[self._printed:]:
            print(f"> {line}")
        self._printed = len(log)


async def run_simulation(message: str, with_gateway: bool = True, fast: bool = False):
    """Run discovery followed by one SOS send."""
    print_header()

    peers = [p for p in MOCK_PEERS if with_gateway or not p.is_gateway]
    kwargs = {"delay_unit": 0.2, "discovery_delay": 0.3} if fast else {}
    simulator = MeshSimulator(peers=peers, **kwargs)
    simulator.subscribe(LogPrinter())

    await simulator.enable()
    print_peers(simulator.snapshot()["peers"])

    result = await simulator.send_sos(message)
    if result is None:
        print("SOS was not sent.")
        return 1

    print("\n" + "=" * 60)
    print(f"Outcome: {result.state.value.upper()}")
    simulator.disable()
    return 0 if result.delivered else 2


def run_cli():
    """Main CLI entry point."""
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s | %(name)-30s | %(levelname)-7s | %(message)s",
        datefmt="%H:%M:%S",
    )

    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    message = " ".join(args) or DEFAULT_MESSAGE

    exit_code = asyncio.run(
        run_simulation(
            message,
            with_gateway="--no-gateway" not in sys.argv,
            fast="--fast" in sys.argv,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":
    run_cli()
