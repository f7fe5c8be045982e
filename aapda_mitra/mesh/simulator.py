"""Offline mesh-relay SOS simulation."""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable

from aapda_mitra.config import (
    MESH_DISCOVERY_DELAY_SEC,
    MESH_HOP_DELAY_SEC,
    MESH_MAX_RELAY_HOPS,
)
from aapda_mitra.errors import NoGatewayError
from .peers import MOCK_PEERS, MeshPeer, ShuffleFn, format_path, plan_hops, random_shuffle

logger = logging.getLogger(__name__)

SEARCHING_LINE = "Offline mode activated. Searching for nearby peers..."
NO_GATEWAY_LINE = "ERROR: No online gateway found nearby. Cannot send message."
RELAYING_LINE = "Relaying SOS to emergency services..."
SUCCESS_LINE = "SUCCESS: SOS message delivered to authorities!"


class SimulationState(str, Enum):
    IDLE = "idle"
    DISCOVERING = "discovering"
    READY = "ready"
    SENDING = "sending"
    DELIVERED = "delivered"
    FAILED = "failed"


@dataclass
class SendResult:
    """Outcome of one SOS send attempt."""
    state: SimulationState
    message: str
    hops: list[MeshPeer] = field(default_factory=list)
    cancelled: bool = False

    @property
    def delivered(self) -> bool:
        return self.state == SimulationState.DELIVERED

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "message": self.message,
            "hops": [hop.to_dict() for hop in self.hops],
            "cancelled": self.cancelled,
        }


SleepFn = Callable[[float], Awaitable[None]]
Listener = Callable[[dict], None]


class MeshSimulator:
    """
    One simulation session of SOS delivery over nearby offline peers.

    Every simulated delay is an ``await`` of ``sleep``. A session generation
    counter is checked after each suspension, so toggling the simulation off
    stops a pending discovery or send from appending anything further.
    """

    def __init__(
        self,
        peers: list[MeshPeer] | tuple[MeshPeer, ...] = MOCK_PEERS,
        delay_unit: float = MESH_HOP_DELAY_SEC,
        discovery_delay: float = MESH_DISCOVERY_DELAY_SEC,
        max_relay_hops: int = MESH_MAX_RELAY_HOPS,
        shuffle: ShuffleFn = random_shuffle,
        sleep: SleepFn = asyncio.sleep,
    ):
        self.available_peers: list[MeshPeer] = list(peers)
        self.delay_unit = delay_unit
        self.discovery_delay = discovery_delay
        self.max_relay_hops = max_relay_hops
        self._shuffle = shuffle
        self._sleep = sleep
        self._listeners: list[Listener] = []
        self._generation = 0
        self._reset()

    def _reset(self) -> None:
        self.enabled = False
        self.peers: list[MeshPeer] = []
        self.log: list[str] = []
        self.message = ""
        self.is_sending = False
        self.state = SimulationState.IDLE
        self._discovering = False

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        """Call ``listener`` with a snapshot after every state change."""
        self._listeners.append(listener)

    def snapshot(self) -> dict:
        return {
            "enabled": self.enabled,
            "state": self.state.value,
            "is_sending": self.is_sending,
            "message": self.message,
            "peers": [peer.to_dict() for peer in self.peers],
            "log": list(self.log),
        }

    def _changed(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in self._listeners:
            listener(snapshot)

    def _append(self, *lines: str) -> None:
        self.log.extend(lines)
        for line in lines:
            logger.debug("mesh: %s", line)
        self._changed()

    # ------------------------------------------------------------------
    # Toggle
    # ------------------------------------------------------------------

    def activate(self) -> bool:
        """
        Turn the simulation on and start searching for peers.

        Returns:
            False if the simulation was already on
        """
        if self.enabled:
            return False
        self._generation += 1
        self._reset()
        self.enabled = True
        self.state = SimulationState.DISCOVERING
        self._append(SEARCHING_LINE)
        return True

    async def discover(self) -> None:
        """
        Populate the peer list once the discovery delay elapses.

        Only one discovery runs per session; later calls are no-ops.
        """
        generation = self._generation
        if (
            not self.enabled
            or self.state != SimulationState.DISCOVERING
            or self._discovering
        ):
            return

        self._discovering = True
        await self._sleep(self.discovery_delay)
        if generation != self._generation or self.state != SimulationState.DISCOVERING:
            return

        self._discovering = False
        self.peers = list(self.available_peers)
        self.state = SimulationState.READY
        self._append(f"Found {len(self.peers)} peers.")

    async def enable(self) -> None:
        self.activate()
        await self.discover()

    def disable(self) -> None:
        """Turn the simulation off, discarding peers, log and any send in flight."""
        self._generation += 1
        was_sending = self.is_sending
        self._reset()
        if was_sending:
            logger.info("Mesh simulation disabled during a send; remaining hops dropped")
        self._changed()

    # ------------------------------------------------------------------
    # Sending
    # ------------------------------------------------------------------

    def can_send(self, message: str) -> bool:
        return (
            self.enabled
            and self.state == SimulationState.READY
            and not self.is_sending
            and bool(message.strip())
        )

    async def send_sos(self, message: str) -> SendResult | None:
        """
        Relay ``message`` hop by hop towards a gateway.

        Returns None when the send was not started (blank message, simulation
        off, peers not yet discovered, or a send already in flight).
        """
        if not self.can_send(message):
            return None

        text = message.strip()
        generation = self._generation
        self.message = text
        self.is_sending = True
        self.state = SimulationState.SENDING
        self._append(f'Sending SOS: "{text}"')

        try:
            hops = plan_hops(self.peers, self._shuffle, self.max_relay_hops)
        except NoGatewayError as e:
            logger.info("SOS not sent: %s", e)
            await self._sleep(self.delay_unit)
            if generation != self._generation:
                return SendResult(SimulationState.IDLE, text, cancelled=True)
            self._append(NO_GATEWAY_LINE)
            return self._finish(SimulationState.FAILED, text)

        *relays, gateway = hops
        path: list[MeshPeer] = []

        for hop in relays:
            await self._sleep(self.delay_unit)
            if generation != self._generation:
                return SendResult(SimulationState.IDLE, text, hops=path, cancelled=True)
            path.append(hop)
            self._append(f"Message relayed to {hop.name} (Offline). Finding next hop...")

        # Gateway: arrival, hand-off to authorities, acknowledgment
        steps = [
            [f"Message reached {gateway.name} (Online Gateway)!"],
            [RELAYING_LINE],
            [SUCCESS_LINE, format_path([*path, gateway])],
        ]
        for step, lines in enumerate(steps):
            await self._sleep(self.delay_unit)
            if generation != self._generation:
                return SendResult(SimulationState.IDLE, text, hops=path, cancelled=True)
            if step == 0:
                path.append(gateway)
            self._append(*lines)

        return self._finish(SimulationState.DELIVERED, text, path)

    def _finish(
        self,
        outcome: SimulationState,
        text: str,
        hops: list[MeshPeer] | None = None,
    ) -> SendResult:
        self.is_sending = False
        self.message = ""
        self.state = SimulationState.READY
        self._changed()
        logger.info("SOS send finished: %s", outcome.value)
        return SendResult(outcome, text, hops=hops or [])

    def __repr__(self) -> str:
        return (
            f"MeshSimulator(state='{self.state.value}', peers={len(self.peers)}, "
            f"log={len(self.log)})"
        )
