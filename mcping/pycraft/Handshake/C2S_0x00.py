from ..packet import C2SPacket, States, DataTypes


class C2S_0x00(C2SPacket):
    """
    Handshake packet (0x00) sent by the client to the server.

    Data:
        - Protocol Version | VarInt | See protocol version numbers (498 in Minecraft 1.14.4).
        - Server Address | String (255) | Hostname or IP, e.g., localhost or 127.0.0.1, that was used to connect. The Notchian server does not use this information.
        - Server Port | Unsigned Short | Default is 25565. The Notchian server does not use this information.
        - Next State | VarInt Enum | 1 for Status, 2 for Login.
    """

    def _info(self):
        return {
            "name": "Handshake",
            "id": 0x00,
            "state": States.HANDSHAKE,
        }

    def _dataTypes(self):
        return {
            "protocol_version": DataTypes.VARINT,
            "server_address": DataTypes.STRING,
            "server_port": DataTypes.USHORT,
            "next_state": DataTypes.VARINT,
        }
