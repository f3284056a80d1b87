"""A client for the Minecraft Java Edition Server List Ping."""

from .config import DEFAULT_PORT, DEFAULT_TIMEOUT, LATEST_PROTOCOL_VERSION
from .logger import Logger
from .pinger import async_ping, ping
from .pycraft import (
    REQUEST_PACKET,
    ConnectError,
    ErrorKind,
    MalformedResponse,
    MalformedVarint,
    PingError,
    ReadError,
    TruncatedPayload,
    UnexpectedPacketId,
    WriteError,
    build_handshake_packet,
    build_request_packet,
    decode_varint,
    encode_varint,
    read_response_packet,
    read_varint,
)
from .response import Player, Players, Response, Version

__version__ = "1.0.0"
