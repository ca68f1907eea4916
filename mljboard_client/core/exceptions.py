"""mljboard client exceptions."""


class MljboardError(Exception):
    """Base exception for all mljboard client errors."""

    pass


class ConfigurationError(MljboardError):
    """Invalid or missing startup configuration."""

    pass


class ConnectionError(MljboardError):
    """Relay transport errors (connect, read, write)."""

    pass


class ProtocolError(MljboardError):
    """Protocol/message errors."""

    pass


class DecodeError(ProtocolError):
    """Inbound frame is not a well-formed server envelope."""

    pass


class LocalRequestError(MljboardError):
    """Local HTTP call failed."""

    def __init__(self, message: str, url: str = ""):
        super().__init__(message)
        self.url = url
