"""
Cardlobby - Lobby and relay server for turn-based card games.

Clients connect over a WebSocket, create or join short-coded rooms and
exchange game messages that the server relays without interpreting.
The server itself owns:
- Fair shuffling and dealing of a standard 52-card deck
- Room lifecycle (membership, host privilege, capacity, bot backfill)
- Start gating and move relay addressed by seat
"""

__version__ = "0.1.0"
