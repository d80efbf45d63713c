#!/usr/bin/env python3
"""
Chat Relay Server - Main Entry Point

This module wires the session registry, the command handlers and the
broadcaster to a WebSocket transport.
"""

import argparse
import asyncio
from typing import Hashable, Optional

from websockets.asyncio.server import serve
from websockets.exceptions import ConnectionClosed

from chat_relay.common.constants import DEFAULT_SERVER_HOST, DEFAULT_PORT, LOG_LEVEL
from chat_relay.common.protocol_definitions import DecodeError, decode_command
from chat_relay.server.chat.broadcaster import Broadcaster
from chat_relay.server.chat.chat_server import ChatServer
from chat_relay.server.chat.registry import SendCapability, SessionExistsError, SessionRegistry
from chat_relay.server.utils.config import ServerConfig
from chat_relay.server.utils.logger import logger


class ChatRelayServer:
    """
    Main server class.

    Owns the single session registry for its lifetime and exposes the
    transport callbacks ``on_connect``, ``on_receive`` and ``on_disconnect``
    plus the outbound ``send`` primitive. ``handle_client`` adapts a
    WebSocket connection onto those callbacks.
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        self.config = config or ServerConfig()
        self.registry = SessionRegistry()
        self.broadcaster = Broadcaster(self.registry)
        self.chat_server = ChatServer(self.registry, self.broadcaster)
        self._server = None

    async def on_connect(self, connection_id: Hashable, send: SendCapability) -> bool:
        """Register a new connection. Returns False if the identity is taken."""
        try:
            await self.chat_server.handle_connect(connection_id, send)
        except SessionExistsError as e:
            logger.log_error("connect", e)
            return False
        return True

    async def on_receive(self, connection_id: Hashable, frame):
        """Decode one inbound frame and dispatch it."""
        try:
            command = decode_command(frame)
        except DecodeError as e:
            logger.warning(f"Malformed frame from connection_id={connection_id}: {e}")
            await self.chat_server.send_error(connection_id, str(e))
            return

        logger.debug(f"Received from connection_id={connection_id}: {type(command).__name__}")

        try:
            await self.chat_server.handle_command(connection_id, command)
        except Exception:
            # One bad frame must not take down the connection
            logger.exception(f"Error processing frame from connection_id={connection_id}")

    async def on_disconnect(self, connection_id: Hashable):
        await self.chat_server.handle_disconnect(connection_id)

    async def send(self, connection_id: Hashable, frame: str) -> bool:
        """Push an encoded frame to one connection."""
        return await self.broadcaster.send(connection_id, frame)

    async def handle_client(self, websocket):
        """Handle individual WebSocket connection."""
        connection_id = websocket.id
        addr = websocket.remote_address

        if not await self.on_connect(connection_id, websocket.send):
            await websocket.close()
            return

        logger.log_connection(addr, connection_id)

        try:
            async for frame in websocket:
                await self.on_receive(connection_id, frame)
        except ConnectionClosed as e:
            logger.info(f"Connection closed for connection_id={connection_id}: {e}")
        finally:
            await self.on_disconnect(connection_id)

    async def start(self):
        """Start the server and serve until cancelled."""
        info = self.config.get_connection_info()
        try:
            async with serve(self.handle_client, info['host'], info['port'],
                             **self.config.get_transport_settings()) as server:
                self._server = server
                addr = ', '.join(str(sock.getsockname()) for sock in server.sockets)
                logger.info(f"Server listening on {addr}")
                await server.serve_forever()
        finally:
            self._server = None
            await self.registry.clear()

    async def stop(self):
        """Close the listener and drop every session."""
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()
            self._server = None
        await self.registry.clear()


def main(argv=None):
    parser = argparse.ArgumentParser(description='Chat Relay Server')
    parser.add_argument('--host', type=str, default=DEFAULT_SERVER_HOST,
                        help=f'Host to bind to (default: {DEFAULT_SERVER_HOST})')
    parser.add_argument('--port', type=int, default=DEFAULT_PORT,
                        help=f'WebSocket port (default: {DEFAULT_PORT})')
    parser.add_argument('--log-level', type=str, default=LOG_LEVEL,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help=f'Logging level (default: {LOG_LEVEL})')
    parser.add_argument('--logs-dir', type=str, default=None,
                        help='Also write logs to server.log in this directory')

    args = parser.parse_args(argv)

    config = ServerConfig(host=args.host, port=args.port,
                          log_level=args.log_level, logs_dir=args.logs_dir)
    logger.configure(**config.get_log_settings())

    server = ChatRelayServer(config)
    try:
        asyncio.run(server.start())
    except KeyboardInterrupt:
        logger.info("Server shutting down...")


if __name__ == "__main__":
    main()
