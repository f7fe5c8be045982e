"""Simulated nearby devices and hop planning."""

import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from aapda_mitra.errors import NoGatewayError


class PeerStatus(str, Enum):
    OFFLINE = "offline"
    ONLINE_GATEWAY = "online-gateway"


@dataclass(frozen=True)
class MeshPeer:
    """A nearby device running the app."""
    id: str
    name: str
    status: PeerStatus
    signal: int  # 0-100, display only

    @property
    def is_gateway(self) -> bool:
        return self.status == PeerStatus.ONLINE_GATEWAY

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status.value,
            "signal": self.signal,
        }


MOCK_PEERS: tuple[MeshPeer, ...] = (
    MeshPeer("peer-a", "Device 7C:B8", PeerStatus.OFFLINE, 85),
    MeshPeer("peer-b", "Device A1:4F", PeerStatus.OFFLINE, 92),
    MeshPeer("peer-c", "Device 3D:E2", PeerStatus.ONLINE_GATEWAY, 60),
    MeshPeer("peer-d", "Device B9:11", PeerStatus.OFFLINE, 75),
)

ShuffleFn = Callable[[list[MeshPeer]], list[MeshPeer]]


def random_shuffle(peers: list[MeshPeer]) -> list[MeshPeer]:
    return random.sample(peers, len(peers))


def find_gateway(peers: list[MeshPeer]) -> MeshPeer | None:
    return next((p for p in peers if p.is_gateway), None)


def plan_hops(
    peers: list[MeshPeer],
    shuffle: ShuffleFn = random_shuffle,
    max_relay_hops: int = 2,
) -> list[MeshPeer]:
    """
    Choose the relay path for one send.

    Up to ``max_relay_hops`` distinct offline peers in shuffled order,
    followed by the gateway.

    Raises:
        NoGatewayError: if no gateway peer is present
    """
    gateway = find_gateway(peers)
    if gateway is None:
        raise NoGatewayError("No online gateway found nearby")

    offline = shuffle([p for p in peers if p.status == PeerStatus.OFFLINE])
    return [*offline[:max_relay_hops], gateway]


def format_path(hops: list[MeshPeer]) -> str:
    names = " -> ".join(hop.name for hop in hops)
    return f"Path: You -> {names} -> Emergency Services"
