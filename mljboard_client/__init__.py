"""mljboard client - expose a local HTTP service through an HOS relay."""

__version__ = "0.2.0"

from .client.dispatcher import LocalDispatcher
from .client.session import TunnelSession
from .client.supervisor import ConnectionSupervisor, SupervisorState
from .core.config import ClientConfig, PairingContext
from .core.exceptions import (
    ConfigurationError,
    ConnectionError,
    DecodeError,
    LocalRequestError,
    MljboardError,
    ProtocolError,
)
from .core.protocol import ClientEnvelope, ServerEnvelope

__all__ = [
    "ClientConfig",
    "PairingContext",
    "ConnectionSupervisor",
    "SupervisorState",
    "TunnelSession",
    "LocalDispatcher",
    "ClientEnvelope",
    "ServerEnvelope",
    "MljboardError",
    "ConfigurationError",
    "ConnectionError",
    "ProtocolError",
    "DecodeError",
    "LocalRequestError",
    "__version__",
]
