"""
Bowl - Session engine for a team party card-guessing game.

Three rounds (describe, one word, charades) replay the same deck from a
fresh shuffle. The engine provides:
- An immutable session model with JSON round-tripping
- Pure commands that advance a session (turns, scoring, undo, phases)
- Migration of persisted sessions from every earlier rule generation
- A session store that owns the current game and persists it
"""

__version__ = "0.1.0"
