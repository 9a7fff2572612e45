"""GSO search: glowworms, the swarm and the optimizer driver."""

from glowdock.search.glowworm import Glowworm
from glowdock.search.gso import GSO
from glowdock.search.swarm import Swarm, SwarmSnapshot

__all__ = [
    "GSO",
    "Glowworm",
    "Swarm",
    "SwarmSnapshot",
]
