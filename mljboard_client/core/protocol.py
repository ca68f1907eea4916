"""
Message definitions for the HOS tunnel protocol
"""

import base64
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import DecodeError

PAIRING = "pairing"
RESPONSE = "response"
REQUEST = "request"


class Envelope(BaseModel):
    """Base class for all protocol messages"""

    model_config = ConfigDict(populate_by_name=True)

    kind: str = Field(alias="type")


class ClientEnvelope(Envelope):
    """Message from client to HOS (pairing or response)"""

    id: Optional[str] = None
    code: Optional[str] = None
    status: Optional[int] = None
    content: Optional[str] = None


class ServerEnvelope(Envelope):
    """Command from HOS to client"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    method: str
    url: str
    id: Optional[str] = None


def pairing_envelope(code: Optional[str]) -> ClientEnvelope:
    """Build the pairing message sent once per connection"""
    return ClientEnvelope(kind=PAIRING, code=code)


def response_envelope(
    id: Optional[str], code: Optional[str], status: int, body: bytes
) -> ClientEnvelope:
    """Build the reply to a forwarded request"""
    return ClientEnvelope(
        kind=RESPONSE,
        id=id,
        code=code,
        status=status,
        content=encode_content(body),
    )


def encode_content(body: bytes) -> str:
    """Standard base64 so arbitrary bytes survive a text frame"""
    return base64.b64encode(body).decode("ascii")


def encode_message(msg: Envelope) -> str:
    """Serialize a message to a JSON text frame.

    Absent optional fields are left out entirely; the relay treats key
    presence as meaningful.
    """
    return msg.model_dump_json(by_alias=True, exclude_none=True)


def decode_message(data: Union[str, bytes]) -> ServerEnvelope:
    """Deserialize a text (or UTF-8 binary) frame into a server envelope"""
    if isinstance(data, (bytes, bytearray)):
        try:
            data = bytes(data).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Frame is not valid UTF-8: {e}") from e

    try:
        # Only the wire name "type" is accepted on input
        return ServerEnvelope.model_validate_json(
            data, by_alias=True, by_name=False
        )
    except ValidationError as e:
        raise DecodeError(str(e)) from e
