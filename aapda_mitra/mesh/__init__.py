from .peers import MeshPeer, PeerStatus, MOCK_PEERS, plan_hops, format_path, find_gateway
from .simulator import MeshSimulator, SendResult, SimulationState

__all__ = [
    "MeshPeer",
    "PeerStatus",
    "MOCK_PEERS",
    "plan_hops",
    "format_path",
    "find_gateway",
    "MeshSimulator",
    "SendResult",
    "SimulationState",
]
