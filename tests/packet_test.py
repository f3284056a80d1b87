import asyncio
import importlib
import os.path

import pytest

from mcping import (
    MalformedVarint,
    ReadError,
    TruncatedPayload,
    UnexpectedPacketId,
    build_handshake_packet,
    build_request_packet,
    decode_varint,
    encode_varint,
    read_response_packet,
)
from mcping.pycraft import Status, packet
from helpers import ChunkReader, frame

packetDir = os.path.dirname(packet.__file__)


def check_packets(name: str):
    directory = os.path.join(packetDir, name)

    for file in os.listdir(directory):
        if not file.endswith(".py") or file == "__init__.py":
            continue

        expected_name = file.split(".")[0]
        expected_id = int(expected_name[-4:], 16)

        module = importlib.import_module(f"mcping.pycraft.{name}.{expected_name}")
        cls = getattr(module, expected_name, None)
        assert cls is not None, f"Expected class {expected_name} to be in {file}"

        base = packet.C2SPacket if expected_name.startswith("C2S") else packet.S2CPacket
        assert issubclass(cls, base), f"Expected {expected_name} to extend {base.__name__}"
        assert (
            cls._info(cls)["id"] == expected_id
        ), f"Expected id to be {hex(expected_id)} in {file}"

    return 1


def test_Status_packets():
    assert check_packets("Status")


def test_Handshake_packets():
    assert check_packets("Handshake")


def test_handshake_is_length_prefixed():
    data = build_handshake_packet("x", 25565, 0)
    length, consumed = decode_varint(data)

    assert length == len(data) - consumed
    assert data == b"\x07\x00\x00\x01x\x63\xdd\x01"


def test_handshake_fields():
    data = build_handshake_packet("localhost", 25565, 498)

    body = (
        b"\x00"  # packet id
        + b"\xf2\x03"  # protocol version 498
        + b"\x09localhost"
        + b"\x63\xdd"  # port, big-endian
        + b"\x01"  # next state: status
    )
    assert data == encode_varint(len(body)) + body


def test_handshake_address_length_counts_bytes():
    data = build_handshake_packet("é.example", 25565, 498)
    address = "é.example".encode("utf-8")

    assert encode_varint(len(address)) + address in data
    length, consumed = decode_varint(data)
    assert length == len(data) - consumed


def test_handshake_is_deterministic():
    assert build_handshake_packet("mc.example.com", 25570, 754) == build_handshake_packet(
        "mc.example.com", 25570, 754
    )


def test_request_packet():
    assert build_request_packet() == b"\x01\x00"
    assert build_request_packet() == b"\x01\x00"
    assert Status.C2S_0x00().toBytes() == b"\x01\x00"


def test_packet_str():
    p = Status.C2S_0x00()
    assert str(p) == "Status Request()"
    assert p.toDict() == {"id": 0x00, "name": "Status Request", "data": {}}


def test_read_response():
    payload = b'{"version":{"name":"1.14.4","protocol":498}}'
    reader = ChunkReader(frame(payload), chunk=4096)

    assert asyncio.run(read_response_packet(reader)) == payload


def test_read_response_one_byte_at_a_time():
    payload = b"{" + b'"x":' * 300 + b"}"
    reader = ChunkReader(frame(payload), chunk=1)

    result = asyncio.run(read_response_packet(reader))

    assert result == payload
    assert len(result) == len(payload)
    assert reader.reads > len(payload)


def test_outer_length_is_not_checked():
    payload = b'{"a":1}'
    body = encode_varint(0) + encode_varint(len(payload)) + payload
    reader = ChunkReader(encode_varint(500) + body, chunk=3)

    assert asyncio.run(read_response_packet(reader)) == payload


def test_unexpected_packet_id():
    reader = ChunkReader(encode_varint(2) + encode_varint(5) + encode_varint(0))

    with pytest.raises(UnexpectedPacketId) as exc:
        asyncio.run(read_response_packet(reader))

    assert exc.value.packet_id == 5
    assert isinstance(exc.value, ReadError)
    assert exc.value.kind == "unexpected_packet_id"


def test_web_server_reply():
    reader = ChunkReader(b"HTTP/1.1 400 Bad Request\r\n\r\n", chunk=64)

    with pytest.raises(UnexpectedPacketId, match="web server"):
        asyncio.run(read_response_packet(reader))


def test_truncated_payload():
    data = frame(b"0123456789")[:-6]

    with pytest.raises(TruncatedPayload) as exc:
        asyncio.run(read_response_packet(ChunkReader(data, chunk=2)))

    assert exc.value.expected == 10
    assert exc.value.received == 4
    assert exc.value.timed_out is False
    assert isinstance(exc.value, ReadError)


def test_truncated_header():
    with pytest.raises(MalformedVarint):
        asyncio.run(read_response_packet(ChunkReader(b"\x0a\x00")))


def test_empty_stream():
    with pytest.raises(MalformedVarint):
        asyncio.run(read_response_packet(ChunkReader(b"")))
