import asyncio
import struct
from ctypes import c_uint32 as unsigned_int32

from .errors import MalformedVarint, TruncatedPayload, UnexpectedPacketId

# a 32-bit varint never needs more than five 7-bit groups
VARINT_MAX_BYTES = 5


class States:
    HANDSHAKE = 0
    STATUS = 1


class DataTypes:
    VARINT = "VarInt"
    STRING = "String"
    USHORT = "Unsigned Short"


def encode_varint(value: int) -> bytes:
    """Encode ``value`` as a varint.

    :param value: The Maximum is ``2 ** 32-1`` the minimum is ``-(2 ** 31)``,
        negative values are sent as their 32-bit two's complement.
    :raises ValueError: If value is out of range.
    """
    if value > 2**32 - 1 or value < -(2**31):
        raise ValueError(f'The value "{value}" is too big to send in a varint')

    remaining = unsigned_int32(value).value
    out = b""
    for _ in range(VARINT_MAX_BYTES):
        if not remaining & -0x80:  # remaining & ~0x7F == 0:
            return out + struct.pack("!B", remaining)
        out += struct.pack("!B", remaining & 0x7F | 0x80)
        remaining >>= 7
    raise ValueError(f'The value "{value}" is too big to send in a varint')


def _add_group(result: int, part: int, i: int) -> int:
    if i == VARINT_MAX_BYTES - 1 and part & 0x70:
        raise MalformedVarint("VarInt is too big")
    return result | (part & 0x7F) << 7 * i


def decode_varint(data: bytes) -> tuple[int, int]:
    """Decode the varint at the start of ``data``.

    :param data: The buffer to read from.
    :returns: The decoded value and the number of bytes it took.
    :raises MalformedVarint: If the buffer ends early or the value overflows 32 bits.
    """
    result = 0
    for i in range(VARINT_MAX_BYTES):
        if i >= len(data):
            raise MalformedVarint(f"Buffer ended after {i} bytes of a VarInt")
        part = data[i]
        result = _add_group(result, part, i)
        if not part & 0x80:
            return result, i + 1
    raise MalformedVarint("VarInt is too big")


async def read_varint(reader) -> int:
    """Read one varint from a stream exposing ``async read(n)``."""
    result = 0
    for i in range(VARINT_MAX_BYTES):
        part = await reader.read(1)
        if not part:
            raise MalformedVarint(f"Connection closed after {i} bytes of a VarInt")
        part = part[0]
        result = _add_group(result, part, i)
        if not part & 0x80:
            return result
    raise MalformedVarint("VarInt is too big")


async def read_exactly(reader, length: int) -> bytes:
    """Read exactly ``length`` bytes, accumulating short reads.

    :raises TruncatedPayload: If the stream ends or the deadline expires first.
    """
    result = bytearray()
    while len(result) < length:
        try:
            new = await reader.read(length - len(result))
        except asyncio.TimeoutError as err:
            raise TruncatedPayload(length, len(result), timed_out=True) from err
        if not new:
            raise TruncatedPayload(length, len(result))
        result += new
    return bytes(result)


def encode_string(string: str) -> bytes:
    """Encode ``string`` as utf-8 prefixed by its byte length."""
    data = string.encode("utf-8")
    return encode_varint(len(data)) + data


def encode_ushort(value: int) -> bytes:
    """Encode an unsigned short, big-endian.

    :param value: The Maximum is 2 ** 16-1 `` the minimum is 0.
    :raises ValueError: If value is out of range.
    """
    if value < 0 or value > 2**16 - 1:
        raise ValueError(f"The value {value} is out of range for an unsigned short")
    return struct.pack("!H", value)


# https://wiki.vg/Protocol#Packet_format
class C2SPacket:
    """Base for packets sent by the client.

    Subclasses describe themselves through ``_info`` and ``_dataTypes``,
    the field values are passed as keyword arguments.
    """

    def __init__(self, **kwargs):
        self.__data = kwargs
        self.name = self._info()["name"]
        self.id = self._info()["id"]
        self.state = self._info()["state"]

    def _info(self):
        raise NotImplementedError

    def _dataTypes(self):
        return {}

    def __str__(self):
        return f"{self.name}({', '.join([f'{k}={v}' for k, v in self.__data.items()]) if self.__data else ''})"

    def toDict(self):
        return {
            "id": self.id,
            "name": self.name,
            "data": self.__data,
        }

    def toBytes(self) -> bytes:
        b = encode_varint(self.id)

        for k, v in self._dataTypes().items():
            match v:
                case DataTypes.VARINT:
                    b += encode_varint(self.__data[k])
                case DataTypes.STRING:
                    b += encode_string(self.__data[k])
                case DataTypes.USHORT:
                    b += encode_ushort(self.__data[k])
                case _:
                    raise ValueError(f"Unknown data type: {v}")

        return encode_varint(len(b)) + b


class S2CPacket:
    """Base for packets received from the server.

    ``String`` fields are kept as raw bytes, decoding them is up to the caller.
    """

    def __init__(self):
        self.name = self._info()["name"]
        self.id = self._info()["id"]
        self.state = self._info()["state"]
        self.length = None
        self.fields = {}

    def _info(self):
        raise NotImplementedError

    def _dataTypes(self):
        return {}

    async def read_response(self, reader):
        """Read one frame of this packet from ``reader``.

        The outer packet length is read but not checked against the
        bytes that follow, servers in the wild are not strict about it.

        :raises UnexpectedPacketId: If the frame is a different packet.
        :raises TruncatedPayload: If the stream ends inside a field.
        :raises MalformedVarint: If a varint is corrupt or cut short.
        """
        self.length = await read_varint(reader)

        packet_id = await read_varint(reader)
        if packet_id != self.id:
            if self.length == ord("H") and packet_id == ord("T"):
                raise UnexpectedPacketId(
                    packet_id, "This is a web server, not a minecraft server"
                )
            raise UnexpectedPacketId(packet_id)

        for k, v in self._dataTypes().items():
            match v:
                case DataTypes.VARINT:
                    self.fields[k] = await read_varint(reader)
                case DataTypes.STRING:
                    length = await read_varint(reader)
                    self.fields[k] = await read_exactly(reader, length)
                case _:
                    raise ValueError(f"Unknown data type: {v}")
        return self
