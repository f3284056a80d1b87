from .errors import (
    ConnectError,
    ErrorKind,
    MalformedResponse,
    MalformedVarint,
    PingError,
    ReadError,
    TruncatedPayload,
    UnexpectedPacketId,
    WriteError,
)
from .framer import (
    REQUEST_PACKET,
    build_handshake_packet,
    build_request_packet,
    read_response_packet,
)
from .packet import decode_varint, encode_varint, read_varint
