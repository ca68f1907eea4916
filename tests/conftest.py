"""Shared fixtures for mljboard client tests."""

from typing import Iterable, List, Optional

import pytest

from mljboard_client.core.config import PairingContext
from mljboard_client.core.exceptions import ConnectionError

LOCAL = "http://127.0.0.1:42010"
HOS = "ws://127.0.0.1:9003/ws"


class FakeConnection:
    """In-memory stand-in for RelayConnection."""

    def __init__(
        self,
        frames: Iterable = (),
        error: Optional[Exception] = None,
        connect_error: Optional[Exception] = None,
        url: str = HOS,
    ):
        self.url = url
        self.inbound = list(frames)
        self.error = error
        self.connect_error = connect_error
        self.sent: List[str] = []
        self.closed = False
        self.connected = False

    async def connect(self) -> None:
        if self.connect_error:
            raise self.connect_error
        self.connected = True

    def __aiter__(self):
        return self._frames()

    async def _frames(self):
        for frame in self.inbound:
            yield frame
        if self.error:
            raise self.error

    async def send(self, data: str) -> None:
        if self.closed:
            raise ConnectionError("Not connected")
        self.sent.append(data)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def context():
    return PairingContext(
        hos_addr=HOS,
        local_target=LOCAL,
        pairing_code="abc123",
    )


@pytest.fixture
def anonymous_context():
    return PairingContext(hos_addr=HOS, local_target=LOCAL)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Keep user config and MLJBOARD_* variables out of tests."""
    for name in (
        "MLJBOARD_HOS_ADDR",
        "MLJBOARD_LOCAL_ADDR",
        "MLJBOARD_PAIRING_CODE",
        "MLJBOARD_RETRY_DELAY",
        "MLJBOARD_LOCAL_TIMEOUT",
        "MLJBOARD_LOG_LEVEL",
        "MLJBOARD_LOG_FILE",
        "MLJBOARD_QUIET",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("MLJBOARD_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.chdir(tmp_path)
