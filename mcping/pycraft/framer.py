"""Builds the outbound status packets and reads the inbound status response.

More information: https://wiki.vg/Server_List_Ping
"""
from . import Handshake, Status

# length (1) and packet ID (0), no body
REQUEST_PACKET = Status.C2S_0x00().toBytes()

# next state requested in the handshake
NEXT_STATE_STATUS = 1


def build_handshake_packet(address: str, port: int, protocol_version: int) -> bytes:
    """Build the length-prefixed Handshake packet asking for the status state.

    Args:
        address (str): The host used to connect, its utf-8 length must fit a varint
        port (int): The port used to connect
        protocol_version (int): The protocol version to ping with

    Returns:
        bytes: The packet, ready to be written
    """
    return Handshake.C2S_0x00(
        protocol_version=protocol_version,
        server_address=address,
        server_port=port,
        next_state=NEXT_STATE_STATUS,
    ).toBytes()


def build_request_packet() -> bytes:
    """Returns the Status Request packet, it never changes."""
    return REQUEST_PACKET


async def read_response_packet(reader) -> bytes:
    """Read a Status Response frame and return its JSON payload bytes.

    Args:
        reader: Any object with ``async read(n)`` returning at most ``n`` bytes,
            and ``b""`` once the stream is closed

    Returns:
        bytes: The undecoded payload, exactly as long as the server declared

    Raises:
        UnexpectedPacketId: The server answered with another packet
        TruncatedPayload: The stream ended before the payload was complete
        MalformedVarint: A length or ID varint was corrupt or cut short
    """
    response = await Status.S2C_0x00().read_response(reader)
    return response.fields["json_response"]
