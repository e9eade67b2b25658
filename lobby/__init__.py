"""Lobby package: serves Set rooms to WebSocket clients."""

from .server import LobbyServer

__all__ = ["LobbyServer"]
