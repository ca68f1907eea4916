"""mljboard client module."""

from .dispatcher import LocalDispatcher
from .session import TunnelSession
from .supervisor import ConnectionSupervisor, SupervisorState

__all__ = [
    "ConnectionSupervisor",
    "SupervisorState",
    "TunnelSession",
    "LocalDispatcher",
]
