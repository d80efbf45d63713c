"""
Chat server module.

This module holds the command handlers: it decides which responses a command
produces and who receives them.
"""

from typing import Hashable

from chat_relay.common.constants import NAME_MIN_EXCLUSIVE, NAME_MAX_EXCLUSIVE, INVALID_NAME_ERROR
from chat_relay.common.protocol_definitions import (
    Command, RegisterCommand, MessageCommand, RenameCommand, Response,
    create_connection_response, create_disconnect_response, create_message_response,
    create_name_change_response, create_user_count_response, create_error_response,
    encode_response
)
from chat_relay.server.chat.broadcaster import Broadcaster
from chat_relay.server.chat.registry import SendCapability, SessionRegistry
from chat_relay.server.utils.logger import logger


def validate_name(name: str) -> bool:
    """Names of 4 to 24 characters are accepted."""
    return NAME_MIN_EXCLUSIVE < len(name) < NAME_MAX_EXCLUSIVE


class ChatServer:
    """Server-side chat functionality."""

    def __init__(self, registry: SessionRegistry, broadcaster: Broadcaster):
        self.registry = registry
        self.broadcaster = broadcaster

    async def broadcast(self, response: Response):
        """Encode a response and send it to every live session."""
        logger.debug(f"Broadcasting {type(response).__name__} to {len(self.registry)} sessions")
        return await self.broadcaster.broadcast(encode_response(response))

    async def send_error(self, connection_id: Hashable, message: str):
        """Send an error to the originating connection only."""
        logger.warning(f"Error for {connection_id}: {message}")
        return await self.broadcaster.send(connection_id, encode_response(create_error_response(message)))

    async def broadcast_name_list(self):
        """Broadcast the roster of registered names to everyone."""
        users = await self.registry.names()
        await self.broadcast(create_user_count_response(users))

    async def handle_connect(self, connection_id: Hashable, send: SendCapability):
        """Add an anonymous session. Nothing is broadcast until it registers."""
        await self.registry.add(connection_id, send)

    async def handle_command(self, connection_id: Hashable, command: Command):
        """Dispatch a decoded command to its handler."""
        if isinstance(command, RegisterCommand):
            await self.handle_register(connection_id, command.name)
        elif isinstance(command, MessageCommand):
            await self.handle_chat(connection_id, command.text)
        elif isinstance(command, RenameCommand):
            await self.handle_name_change(connection_id, command.new_name)
        else:
            raise TypeError(f"Unsupported command {command!r}")

    async def handle_register(self, connection_id: Hashable, name: str):
        """Process register command."""
        if await self.registry.lookup(connection_id) is None:
            logger.debug(f"Register from unknown connection {connection_id} ignored")
            return

        if not validate_name(name):
            await self.send_error(connection_id, INVALID_NAME_ERROR)
            return

        await self.registry.set_name(connection_id, name)
        logger.log_register(name, connection_id)

        await self.broadcast(create_connection_response(name))
        await self.broadcast_name_list()

    async def handle_chat(self, connection_id: Hashable, text: str):
        """Process chat message and broadcast to all."""
        session = await self.registry.lookup(connection_id)
        if session is None:
            logger.debug(f"Message from unknown connection {connection_id} ignored")
            return

        # Anonymous sessions may chat; their name goes out empty
        name = session.display_name or ''
        logger.log_chat(name, connection_id, text)

        await self.broadcast(create_message_response(name, text))

    async def handle_name_change(self, connection_id: Hashable, new_name: str):
        """
        Process rename command.

        The announcement uses the name held before the change; the roster
        that follows already carries the new one.
        """
        session = await self.registry.lookup(connection_id)
        if session is None:
            logger.debug(f"Rename from unknown connection {connection_id} ignored")
            return

        if not validate_name(new_name):
            await self.send_error(connection_id, INVALID_NAME_ERROR)
            return

        old_name = session.display_name or ''
        await self.broadcast(create_name_change_response(old_name, new_name))

        await self.registry.set_name(connection_id, new_name)
        logger.log_rename(old_name, new_name, connection_id)

        await self.broadcast_name_list()

    async def handle_disconnect(self, connection_id: Hashable):
        """Remove the session and notify the others."""
        session = await self.registry.remove(connection_id)
        if session is None:
            logger.debug(f"Disconnect for unknown connection {connection_id} ignored")
            return

        logger.log_disconnect(session.display_name, connection_id)

        if session.is_named:
            await self.broadcast(create_disconnect_response(session.display_name))

        await self.broadcast_name_list()
