import asyncio
import json
import threading

from mcping import encode_varint

EXAMPLE_STATUS = {
    "version": {"name": "1.14.4", "protocol": 498},
    "players": {"max": 20, "online": 3, "sample": []},
    "description": "A server",
    "favicon": "",
}


def frame(payload: bytes, packet_id: int = 0) -> bytes:
    """A status response frame carrying ``payload``"""
    body = encode_varint(packet_id) + encode_varint(len(payload)) + payload
    return encode_varint(len(body)) + body


def status_frame(status: dict = None) -> bytes:
    return frame(json.dumps(status or EXAMPLE_STATUS).encode("utf-8"))


class ChunkReader:
    """A stream handing out at most ``chunk`` bytes per read"""

    def __init__(self, data: bytes, chunk: int = 1):
        self.data = data
        self.chunk = chunk
        self.pos = 0
        self.reads = 0

    async def read(self, n: int) -> bytes:
        self.reads += 1
        out = self.data[self.pos : self.pos + min(n, self.chunk)]
        self.pos += len(out)
        return out


class MockServer:
    """A status server running its own event loop in a thread.

    Args:
        response (bytes, optional): Sent once the request packet arrived. None to stay silent
        close_after (bool, optional): Close right after sending the response
    """

    def __init__(self, response: bytes = None, close_after: bool = False):
        self.response = response
        self.close_after = close_after
        self.received = []
        self.connections = 0
        self.closed = threading.Event()
        self.loop = asyncio.new_event_loop()
        self.thread = threading.Thread(target=self.loop.run_forever, daemon=True)
        self.server = None
        self.port = None

    def start(self):
        self.thread.start()
        self.server = asyncio.run_coroutine_threadsafe(
            asyncio.start_server(self.handle, "127.0.0.1", 0), self.loop
        ).result(5)
        self.port = self.server.sockets[0].getsockname()[1]
        return self

    def stop(self):
        self.server.close()
        asyncio.run_coroutine_threadsafe(self.server.wait_closed(), self.loop).result(5)
        self.loop.call_soon_threadsafe(self.loop.stop)
        self.thread.join(5)
        self.loop.close()

    async def handle(self, reader, writer):
        self.connections += 1
        try:
            length = (await reader.readexactly(1))[0]
            handshake = bytes([length]) + await reader.readexactly(length)
            request = await reader.readexactly(2)
            self.received.append(handshake + request)

            if self.response is not None:
                writer.write(self.response)
                await writer.drain()

            if not self.close_after:
                # hold the connection until the client hangs up
                while await reader.read(1024):
                    pass
        except (asyncio.IncompleteReadError, ConnectionError):
            pass
        finally:
            writer.close()
            self.closed.set()
