"""
Protocol definitions for the chat relay.

This module defines the command and response structures exchanged between
browser clients and the server, and the JSON codec for both directions.

Inbound frames look like ``{"Type": 0, "Name": "Alice"}``; outbound frames
look like ``{"Type": 4, "Data": {"Users": ["Alice"]}}``. Keys inside ``Data``
are case-sensitive and must match what the browser client reads.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from chat_relay.common.constants import CommandTypes, ResponseTypes, MAX_FRAME_SIZE


class DecodeError(ValueError):
    """Raised when an inbound frame is not a valid command."""


# Commands (client to server)

@dataclass(frozen=True)
class RegisterCommand:
    """Register a display name for the sending connection."""
    name: str


@dataclass(frozen=True)
class MessageCommand:
    """Chat text to relay to everyone."""
    text: str


@dataclass(frozen=True)
class RenameCommand:
    """Replace the sender's display name."""
    new_name: str


Command = Union[RegisterCommand, MessageCommand, RenameCommand]


# Responses (server to client)

@dataclass(frozen=True)
class ConnectionResponse:
    name: str
    type: int = field(default=ResponseTypes.CONNECTION, init=False)

    def payload(self) -> Dict[str, Any]:
        return {"Name": self.name}


@dataclass(frozen=True)
class DisconnectResponse:
    name: str
    type: int = field(default=ResponseTypes.DISCONNECT, init=False)

    def payload(self) -> Dict[str, Any]:
        return {"Name": self.name}


@dataclass(frozen=True)
class MessageResponse:
    name: str
    message: str
    type: int = field(default=ResponseTypes.MESSAGE, init=False)

    def payload(self) -> Dict[str, Any]:
        return {"Name": self.name, "Message": self.message}


@dataclass(frozen=True)
class NameChangeResponse:
    """Carries pre-formatted text, e.g. ``"Alice is now known as Bob"``."""
    message: str
    type: int = field(default=ResponseTypes.NAME_CHANGE, init=False)

    def payload(self) -> Dict[str, Any]:
        return {"Message": self.message}


@dataclass(frozen=True)
class UserCountResponse:
    users: List[str]
    type: int = field(default=ResponseTypes.USER_COUNT, init=False)

    def payload(self) -> Dict[str, Any]:
        return {"Users": list(self.users)}


@dataclass(frozen=True)
class ErrorResponse:
    message: str
    type: int = field(default=ResponseTypes.ERROR, init=False)

    def payload(self) -> Dict[str, Any]:
        return {"Message": self.message}


Response = Union[
    ConnectionResponse, DisconnectResponse, MessageResponse,
    NameChangeResponse, UserCountResponse, ErrorResponse
]


def _require_string(obj: Dict[str, Any], key: str) -> str:
    value = obj.get(key)
    if value is None:
        raise DecodeError(f"Missing required field '{key}'")
    if not isinstance(value, str):
        raise DecodeError(f"Field '{key}' must be a string")
    return value


def decode_command(frame: Union[str, bytes]) -> Command:
    """
    Parse an inbound frame into a command.

    Raises DecodeError for anything that is not a well-formed command:
    oversize frames, bad JSON, a missing or unknown ``Type``, or a missing
    field. No other exception escapes.
    """
    if len(frame) > MAX_FRAME_SIZE:
        raise DecodeError("Message too large")

    try:
        obj = json.loads(frame)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"Malformed JSON: {e}") from e

    if not isinstance(obj, dict):
        raise DecodeError("Command must be a JSON object")

    msg_type = obj.get('Type')
    # bool is an int subclass but never a valid tag
    if msg_type is None:
        raise DecodeError("Missing required field 'Type'")
    if isinstance(msg_type, bool) or not isinstance(msg_type, int):
        raise DecodeError("Field 'Type' must be an integer")

    if msg_type == CommandTypes.REGISTER:
        return RegisterCommand(name=_require_string(obj, 'Name'))
    elif msg_type == CommandTypes.MESSAGE:
        return MessageCommand(text=_require_string(obj, 'Message'))
    elif msg_type == CommandTypes.NAME_CHANGE:
        return RenameCommand(new_name=_require_string(obj, 'Name'))

    raise DecodeError(f"Unknown command type {msg_type}")


def encode_response(response: Response) -> str:
    """Serialize a response into an outbound ``{"Type", "Data"}`` frame."""
    return json.dumps({"Type": response.type, "Data": response.payload()})


def create_connection_response(name: str) -> ConnectionResponse:
    """Create a user joined response."""
    return ConnectionResponse(name=name)


def create_disconnect_response(name: str) -> DisconnectResponse:
    """Create a user left response."""
    return DisconnectResponse(name=name)


def create_message_response(name: str, message: str) -> MessageResponse:
    """Create a chat message response."""
    return MessageResponse(name=name, message=message)


def create_name_change_response(old_name: str, new_name: str) -> NameChangeResponse:
    """Create a name change response with the announcement text."""
    return NameChangeResponse(message=f"{old_name} is now known as {new_name}")


def create_user_count_response(users: List[str]) -> UserCountResponse:
    """Create a roster response."""
    return UserCountResponse(users=list(users))


def create_error_response(message: str) -> ErrorResponse:
    """Create an error response."""
    return ErrorResponse(message=message)
