import asyncio
import contextlib
import time

from ..config import DEFAULT_PORT, DEFAULT_TIMEOUT
from ..logger import Logger
from .errors import ConnectError, PingError, ReadError, WriteError
from .framer import build_handshake_packet, build_request_packet, read_response_packet


class AsyncObj:
    def __init__(self, *args, **kwargs):
        """
        Standard constructor used for arguments pass
        Do not override. Use __ainit__ instead
        """
        self.__storedargs = args, kwargs
        self.async_initialized = False

    async def __ainit__(self, *args, **kwargs):
        """Async constructor, you should implement this"""

    async def __initobj(self):
        """Crutch used for __await__ after spawning"""
        assert not self.async_initialized
        self.async_initialized = True
        await self.__ainit__(
            *self.__storedargs[0], **self.__storedargs[1]
        )  # pass the parameters to __ainit__ that passed to __init__
        return self

    def __await__(self):
        return self.__initobj().__await__()

    def __init_subclass__(cls, **kwargs):
        assert asyncio.iscoroutinefunction(cls.__ainit__)  # __ainit__ must be async


def parse_address(host: str, port: int = None) -> tuple[str, int]:
    """Split a ``host:port`` string, ``[v6]:port`` is accepted too.

    Args:
        host (str): The host, optionally carrying a port
        port (int, optional): The port to use when ``host`` has none. Default to 25565

    Returns:
        tuple[str, int]: The host and the port
    """
    if port is None:
        port = DEFAULT_PORT

    if host.startswith("["):
        addr, _, rest = host[1:].partition("]")
        if rest.startswith(":"):
            port = int(rest[1:])
        return addr, int(port)

    if host.count(":") == 1:
        addr, p = host.split(":")
        return addr, int(p)

    return host, int(port)


class MCSocket(AsyncObj):
    """
    One status connection to a Minecraft server.

    A single deadline is taken when the object is created, connecting,
    writing and reading all have to finish before it.

    **NB:** This class is an async class, you should await the initialization of the object.

    Example:

    ```python
    from mcping.pycraft.connector import MCSocket
    import asyncio

    async def main():
        async with await MCSocket("localhost", 25565, timeout=5) as mc:
            await mc.handshake_status(498)
            payload = await mc.status_request()

    asyncio.run(main())
    ```
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.reader = None
        self.writer = None
        self.deadline = None

    async def __ainit__(
        self,
        host: str,
        port: int = None,
        timeout: float = DEFAULT_TIMEOUT,
        logger: Logger = None,
    ):
        """
        Connect to a Minecraft server.

        ``host`` and ``port`` are used as given, ``host:port`` is only
        split when ``port`` is None.

        Raises:
            ConnectError: If the host can't be resolved or reached in time
        """
        if port is None:
            host, port = parse_address(host)

        self.loop = asyncio.get_running_loop()
        self.deadline = self.loop.time() + timeout
        self.addr = (host, port)
        self.timeout = timeout
        self.logger = logger or Logger("mcping.connector")

        try:
            self.reader, self.writer = await asyncio.wait_for(
                asyncio.open_connection(host, port), timeout=timeout
            )
        except asyncio.TimeoutError as err:
            raise ConnectError(
                f"Timed out connecting to {host}:{port}", timed_out=True
            ) from err
        except OSError as err:
            raise ConnectError(f"Failed to connect to {host}:{port}: {err}") from err

        self.logger.debug(f"Connected to {host}:{port}")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    def remaining(self) -> float:
        """Seconds left before the deadline."""
        return max(0.0, self.deadline - self.loop.time())

    async def read(self, n: int) -> bytes:
        """Read at most ``n`` bytes before the deadline.

        Raises:
            asyncio.TimeoutError: The deadline elapsed
        """
        remaining = self.remaining()
        if remaining <= 0:
            raise asyncio.TimeoutError()
        return await asyncio.wait_for(self.reader.read(n), timeout=remaining)

    async def send(self, data: bytes) -> None:
        """Write ``data`` and wait for it to be flushed before the deadline.

        Raises:
            WriteError: On a socket error or when the deadline elapses
        """
        try:
            remaining = self.remaining()
            if remaining <= 0:
                raise asyncio.TimeoutError()
            self.writer.write(data)
            await asyncio.wait_for(self.writer.drain(), timeout=remaining)
        except asyncio.TimeoutError as err:
            raise WriteError(
                f"Timed out writing to {self.addr[0]}:{self.addr[1]}", timed_out=True
            ) from err
        except OSError as err:
            raise WriteError(
                f"Failed to write to {self.addr[0]}:{self.addr[1]}: {err}"
            ) from err

    async def close(self):
        if self.writer is None or self.writer.is_closing():
            return
        self.writer.close()
        # the peer may already have reset the connection
        with contextlib.suppress(ConnectionError):
            await self.writer.wait_closed()
        self.logger.debug(f"Closed connection to {self.addr[0]}:{self.addr[1]}")

    # Connection methods

    async def handshake_status(self, version_id: int):
        """
        Send a handshake packet asking for the status state

        Args:
            version_id (int): The version of the protocol.
        """
        tStart = time.perf_counter()
        await self.send(build_handshake_packet(self.addr[0], self.addr[1], version_id))

        tEnd = time.perf_counter()
        self.logger.debug(f"Sent handshake in {tEnd - tStart:.2f} seconds")

    async def status_request(self) -> bytes:
        """
        Send a status request to the server and read the response frame

        Returns:
            bytes: The JSON payload of the status response

        Raises:
            WriteError: If the request could not be sent
            ReadError: If the response could not be read, the framing
                errors (UnexpectedPacketId, TruncatedPayload, MalformedVarint)
                are subclasses
        """
        await self.send(build_request_packet())

        tStart = time.perf_counter()
        try:
            payload = await read_response_packet(self)
        except PingError:
            raise
        except asyncio.TimeoutError as err:
            raise ReadError(
                f"Timed out reading from {self.addr[0]}:{self.addr[1]}", timed_out=True
            ) from err
        except OSError as err:
            raise ReadError(
                f"Failed to read from {self.addr[0]}:{self.addr[1]}: {err}"
            ) from err

        tEnd = time.perf_counter()
        self.logger.debug(
            f"Received {len(payload)} payload bytes in {tEnd - tStart:.2f} seconds"
        )
        return payload
