"""
Cardlobby CLI - Command-line interface for the server.

Usage:
    cardlobby serve [--host H] [--port P]    Run the lobby server
    cardlobby deal tl|xd [--seed N]          Print a sample deal

`serve` reads HOST and PORT from the environment when the flags are
omitted (PORT defaults to 8080).
"""

import argparse
import os
import random
import sys

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080


def _env_port() -> int:
    try:
        return int(os.getenv("PORT", DEFAULT_PORT))
    except ValueError:
        print(f"Error: PORT must be an integer, got {os.getenv('PORT')!r}")
        sys.exit(2)


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Cardlobby - Lobby and relay server for turn-based card games",
        prog="cardlobby",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the lobby server")
    serve_parser.add_argument("--host", default=os.getenv("HOST", DEFAULT_HOST), help="Bind address")
    serve_parser.add_argument("--port", type=int, default=None, help="Listening port (default: $PORT or 8080)")
    serve_parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ERROR")

    # Deal command
    deal_parser = subparsers.add_parser("deal", help="Print a sample deal")
    deal_parser.add_argument("game", choices=["tl", "xd"], help="Game variant")
    deal_parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible deal")

    args = parser.parse_args(argv)

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "deal":
        cmd_deal(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_serve(args):
    """Run the ASGI app under uvicorn."""
    import uvicorn

    from .logging_utils import LOG_LEVEL, get_logger, setup_logging

    level = (args.log_level or LOG_LEVEL).upper()
    setup_logging(level)
    port = args.port if args.port is not None else _env_port()

    get_logger("cli").info("Card games server listening on %s:%d", args.host, port)
    uvicorn.run(
        "cardlobby.api.app:app",
        host=args.host,
        port=port,
        log_level=level.lower(),
    )


def cmd_deal(args):
    """Print one deal in human-readable form."""
    from .deal import deal_tien_len, deal_xi_dach

    rng = random.Random(args.seed)
    if args.game == "tl":
        deal = deal_tien_len(rng)
        for seat, hand in enumerate(deal.hands):
            marker = "  <- first turn" if seat == deal.first_turn else ""
            print(f"Seat {seat}: {' '.join(str(c) for c in hand)}{marker}")
    else:
        deal = deal_xi_dach(rng)
        print(f"Player: {' '.join(str(c) for c in deal.player)}")
        print(f"Dealer: {' '.join(str(c) for c in deal.dealer)}")


if __name__ == "__main__":
    main()
