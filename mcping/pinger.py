import asyncio

from .config import DEFAULT_PORT, DEFAULT_TIMEOUT, LATEST_PROTOCOL_VERSION
from .logger import Logger
from .pycraft.connector import MCSocket
from .pycraft.errors import PingError
from .response import Response


async def _exchange(address, port, protocol_version, timeout, logger) -> bytes:
    async with await MCSocket(address, port, timeout=timeout, logger=logger) as mc:
        await mc.handshake_status(protocol_version)
        return await mc.status_request()


async def async_ping(
    address: str,
    port: int = DEFAULT_PORT,
    protocol_version: int = LATEST_PROTOCOL_VERSION,
    timeout: float = DEFAULT_TIMEOUT,
    logger: Logger = None,
) -> Response:
    """Ping a Minecraft Java Edition server once.

    The response depends on ``protocol_version``, a server that does not
    speak it may answer with its own version instead.

    Args:
        address (str): The host to connect to, also sent in the handshake
        port (int, optional): The port to connect to. Default to 25565
        protocol_version (int, optional): The protocol version to ping with. Default to 498
        timeout (float, optional): Seconds for the whole exchange. Default to 5.0
        logger (Logger, optional): The logger to use. Default to None

    Returns:
        Response: The decoded status response

    Raises:
        ConnectError: The server could not be reached
        WriteError: The handshake or request could not be sent
        ReadError: The response could not be read (see its subclasses)
        MalformedResponse: The payload is not a valid status document
    """
    logger = logger or Logger("mcping")

    try:
        payload = await logger.async_timer(
            _exchange, address, port, protocol_version, timeout, logger
        )
        return Response.from_bytes(payload)
    except PingError as err:
        logger.debug(
            f"Ping to {address}:{port} failed ({err.kind}, timed_out={err.timed_out}): {err}"
        )
        raise


def ping(
    address: str,
    port: int = DEFAULT_PORT,
    protocol_version: int = LATEST_PROTOCOL_VERSION,
    timeout: float = DEFAULT_TIMEOUT,
    logger: Logger = None,
) -> Response:
    """Blocking version of :func:`async_ping`, runs it in a new event loop.

    Must not be called from a running event loop, await ``async_ping`` there.
    """
    return asyncio.run(
        async_ping(
            address,
            port=port,
            protocol_version=protocol_version,
            timeout=timeout,
            logger=logger,
        )
    )
