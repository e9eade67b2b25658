import argparse
import asyncio
import logging

from setgame.models import GameConfig
from setgame.registry import RoomRegistry

from .server import LobbyServer


def main() -> None:
    parser = argparse.ArgumentParser(description="Set multiplayer lobby server")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=3001)
    parser.add_argument("--board-size", type=int, default=12, help="Number of visible cards per room")
    parser.add_argument(
        "--hide-deck",
        action="store_true",
        help="Send only the remaining deck size in game updates instead of the full deck",
    )
    parser.add_argument(
        "--keep-points-on-rejoin",
        action="store_true",
        help="Keep a player's points when the same connection joins a room again",
    )
    parser.add_argument("--seed", type=int, default=None, help="Fixed shuffle seed (demos and debugging)")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))

    config = GameConfig(
        board_size=args.board_size,
        expose_deck=not args.hide_deck,
        rejoin_resets_points=not args.keep_points_on_rejoin,
        seed=args.seed,
    )

    server = LobbyServer(RoomRegistry(config))
    asyncio.run(server.start(host=args.host, port=args.port))


if __name__ == "__main__":
    main()
