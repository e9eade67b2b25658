from __future__ import annotations


class RoomError(Exception):
    """A transition the registry refuses to apply; nothing was changed or broadcast."""

    code = "ROOM_ERROR"

    def __init__(self, msg: str) -> None:
        super().__init__(msg)
        self.msg = msg


class RoomNotFoundError(RoomError):
    code = "ROOM_NOT_FOUND"


class UserNotFoundError(RoomError):
    code = "USER_NOT_FOUND"


class InvalidSelectionError(RoomError):
    code = "INVALID_SELECTION"
