"""Decoded Server List Ping status response.

More information: https://wiki.vg/Server_List_Ping#Status_Response
"""
import base64
import binascii
import json
from typing import Any, Optional

from .pycraft.errors import MalformedResponse


def _field(obj: dict, key: str, kind: type, where: str, default=None, required=True):
    if key not in obj or obj[key] is None:
        if required:
            raise MalformedResponse(f"Missing {where}.{key}")
        return default

    value = obj[key]
    # bool is an int subclass, it is never a valid count
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise MalformedResponse(
            f"Expected {where}.{key} to be {kind.__name__}, got {type(value).__name__}"
        )
    return value


class Version:
    def __init__(self, name: str, protocol: int):
        self.name = name
        self.protocol = protocol

    @classmethod
    def from_dict(cls, data: dict) -> "Version":
        return cls(
            name=_field(data, "name", str, "version"),
            protocol=_field(data, "protocol", int, "version"),
        )

    def __str__(self):
        return f"Version(name={self.name}, protocol={self.protocol})"

    def __repr__(self):
        return self.__str__()

    def toDict(self):
        return {"name": self.name, "protocol": self.protocol}


class Player:
    def __init__(self, name: str, id: str):
        self.name = name
        self.id = id

    @classmethod
    def from_dict(cls, data: Any) -> "Player":
        if not isinstance(data, dict):
            raise MalformedResponse(
                f"Expected players.sample entries to be objects, got {type(data).__name__}"
            )
        return cls(
            name=_field(data, "name", str, "players.sample"),
            id=_field(data, "id", str, "players.sample"),
        )

    def __str__(self):
        return f"Player(name={self.name}, id={self.id})"

    def __repr__(self):
        return self.__str__()

    def toDict(self):
        return {"name": self.name, "id": self.id}


class Players:
    def __init__(self, max: int, online: int, sample: list[Player] = None):
        self.max = max
        self.online = online
        self.sample = sample if sample is not None else []

    @classmethod
    def from_dict(cls, data: dict) -> "Players":
        sample = _field(data, "sample", list, "players", default=[], required=False)
        return cls(
            max=_field(data, "max", int, "players"),
            online=_field(data, "online", int, "players"),
            sample=[Player.from_dict(p) for p in sample],
        )

    def __str__(self):
        return f"Players(online={self.online}, max={self.max}, sample={self.sample})"

    def __repr__(self):
        return self.__str__()

    def toDict(self):
        return {
            "max": self.max,
            "online": self.online,
            "sample": [p.toDict() for p in self.sample],
        }


class Response:
    """A server's status response.

    ``description`` is the chat component exactly as the server sent it,
    a str, dict or list that is never interpreted here.
    """

    def __init__(
        self,
        version: Version,
        players: Players,
        description: Any = None,
        favicon: str = "",
    ):
        self.version = version
        self.players = players
        self.description = description
        self.favicon = favicon

    @classmethod
    def from_dict(cls, data: Any) -> "Response":
        """Build a response from the decoded JSON document

        Args:
            data (Any): The decoded payload

        Returns:
            Response: The response

        Raises:
            MalformedResponse: If the document does not have the status shape
        """
        if not isinstance(data, dict):
            raise MalformedResponse(
                f"Expected a JSON object, got {type(data).__name__}"
            )

        return cls(
            version=Version.from_dict(_field(data, "version", dict, "response")),
            players=Players.from_dict(_field(data, "players", dict, "response")),
            description=data.get("description"),
            favicon=_field(data, "favicon", str, "response", default="", required=False),
        )

    @classmethod
    def from_bytes(cls, payload: bytes) -> "Response":
        """Decode the utf-8 JSON payload of a status response

        Raises:
            MalformedResponse: If the payload is not utf-8 JSON of the status shape
        """
        try:
            data = json.loads(payload.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as err:
            raise MalformedResponse(f"Failed to decode JSON: {err}") from err
        return cls.from_dict(data)

    @property
    def description_raw(self) -> str:
        """The description as JSON text"""
        return json.dumps(self.description, ensure_ascii=False)

    def favicon_bytes(self) -> Optional[bytes]:
        """Decode a ``data:image/png;base64,...`` favicon

        Returns:
            Optional[bytes]: The image, None if the server has no favicon

        Raises:
            MalformedResponse: If the favicon is not a base64 data URI
        """
        if not self.favicon:
            return None

        header, sep, data = self.favicon.partition(",")
        if not sep or not header.startswith("data:") or not header.endswith(";base64"):
            raise MalformedResponse("Favicon is not a base64 data URI")
        try:
            # some servers wrap the base64 text
            return base64.b64decode(data.replace("\n", ""), validate=True)
        except binascii.Error as err:
            raise MalformedResponse(f"Favicon is not valid base64: {err}") from err

    def __str__(self):
        return f"Response(version={self.version}, players={self.players}, description={self.description_raw}, hasFavicon={bool(self.favicon)})"

    def __repr__(self):
        return self.__str__()

    def toDict(self):
        return {
            "version": self.version.toDict(),
            "players": self.players.toDict(),
            "description": self.description,
            "favicon": self.favicon,
        }
