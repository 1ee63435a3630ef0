"""
Session Module - Owns the current game and keeps it on disk.

- SessionStore: the single owner of the current GameSession
- GameStorage: namespaced persistence over a key-value backend
- TurnTimer: the once-per-second turn clock
- WizardState: new-game setup
"""

from .storage import FileKeyValueStore, GameStorage, InMemoryKeyValueStore, KeyValueStore
from .timer import TurnTimer
from .wizard import WizardState
from .store import SessionStore

__all__ = [
    "FileKeyValueStore",
    "GameStorage",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "TurnTimer",
    "WizardState",
    "SessionStore",
]
