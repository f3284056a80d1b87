class ErrorKind:
    CONNECTION = "connection"
    WRITE = "write"
    READ = "read"
    UNEXPECTED_PACKET_ID = "unexpected_packet_id"
    TRUNCATED_PAYLOAD = "truncated_payload"
    MALFORMED_VARINT = "malformed_varint"
    MALFORMED_RESPONSE = "malformed_response"


class PingError(Exception):
    """Base class for every failure of a single ping attempt.

    Args:
        message (str): Human-readable description
        timed_out (bool, optional): Whether the shared deadline expired. Default to False
    """

    kind = None

    def __init__(self, message: str, *, timed_out: bool = False):
        super().__init__(message)
        self.timed_out = timed_out

    def __repr__(self):
        return f"{self.__class__.__name__}(kind={self.kind}, timed_out={self.timed_out}, message={str(self)!r})"


class ConnectError(PingError):
    kind = ErrorKind.CONNECTION


class WriteError(PingError):
    kind = ErrorKind.WRITE


class ReadError(PingError):
    kind = ErrorKind.READ


class UnexpectedPacketId(ReadError):
    kind = ErrorKind.UNEXPECTED_PACKET_ID

    def __init__(self, packet_id: int, message: str = None):
        super().__init__(
            message or f"Expected status response (0x00), got {hex(packet_id)}"
        )
        self.packet_id = packet_id


class TruncatedPayload(ReadError):
    kind = ErrorKind.TRUNCATED_PAYLOAD

    def __init__(self, expected: int, received: int, *, timed_out: bool = False):
        super().__init__(
            f"{'Timed out' if timed_out else 'Connection closed'} with {expected - received} bytes remaining",
            timed_out=timed_out,
        )
        self.expected = expected
        self.received = received


class MalformedVarint(ReadError, ValueError):
    kind = ErrorKind.MALFORMED_VARINT


class MalformedResponse(PingError, ValueError):
    kind = ErrorKind.MALFORMED_RESPONSE
