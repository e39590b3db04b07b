"""
Live topology push.

Each connected client gets two tasks: one pushing a topology summary every
interval, one draining whatever the client sends. Whichever ends first
(send failure, client close) tears down the other.
"""
import asyncio
import logging

from fastapi import WebSocket, WebSocketDisconnect

from flowscope.domain.errors import UpstreamUnavailable
from flowscope.schemas.updates import TopologyUpdate, to_wire
from flowscope.services.container_service import ContainerService

logger = logging.getLogger(__name__)


class LiveUpdateBroadcaster:
    def __init__(self, service: ContainerService, interval: float = 5.0):
        self.service = service
        self.interval = interval

    async def topology_message(self) -> dict:
        return to_wire(TopologyUpdate.from_snapshot(await self.service.topology()))

    async def serve(self, websocket: WebSocket) -> None:
        await websocket.accept()
        logger.info(f"WebSocket connected: {websocket.client}")

        tasks = {
            asyncio.create_task(self._send_loop(websocket)),
            asyncio.create_task(self._receive_loop(websocket)),
        }
        try:
            await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info(f"WebSocket closed: {websocket.client}")

    async def _send_loop(self, websocket: WebSocket) -> None:
        """Push now, then every interval; no retry and no catch-up once a send fails."""
        while True:
            try:
                message = await self.topology_message()
            except UpstreamUnavailable as e:
                logger.error(f"Failed to get topology for WS update: {e}")
                await asyncio.sleep(self.interval)
                continue
            except Exception as e:
                # a bad tick is skipped, the connection stays open
                logger.exception(f"Error building topology for WS update: {e}")
                await asyncio.sleep(self.interval)
                continue
            try:
                await websocket.send_json(message)
            except (WebSocketDisconnect, RuntimeError, OSError) as e:
                logger.info(f"Stopping updates for {websocket.client}: {e}")
                return
            await asyncio.sleep(self.interval)

    async def _receive_loop(self, websocket: WebSocket) -> None:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                logger.info(f"WebSocket closed by client: {websocket.client}")
                return
            logger.debug(f"Received WS frame: {message.get('text') or message.get('bytes')}")
