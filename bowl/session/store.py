"""
Session Store - Owns the one current game and is its only mutation surface.

LIFECYCLE:
1. Wizard collects teams, players and cards
2. create_new_session() builds the session and persists it
3. During play every UI event maps to one method here:
   - the matching pure command runs on the current session
   - the result replaces the session
   - signalled follow-ups run (turn ended -> check phase completion)
   - the session is saved
4. reset_all() wipes every stored session

A process runs one store; there is never more than one command in flight.
Saving is fire-and-forget: a failed write is logged and play continues on
the in-memory session.
"""

from __future__ import annotations
import logging
from typing import Callable

from ..engine_core.action import CommandResult
from ..engine_core.schemas import MIN_CARDS
from ..engine_core.selectors import select_is_turn_running
from ..engine_core.session_commands import (
    SessionDeps,
    create_session_from_wizard,
    hydrate_running_turn,
)
from ..engine_core.state import GameSession
from ..engine_core.turn_commands import (
    advance_phase_if_complete_command,
    dismiss_game_over_modal_command,
    dismiss_phase_complete_modal_command,
    end_turn_command,
    got_it_command,
    now_ms,
    pass_command,
    start_turn_command,
    tick_turn_command,
    undo_command,
)
from .storage import GameStorage
from .timer import TurnTimer
from .wizard import WizardState

logger = logging.getLogger(__name__)


END_REASONS = ("time", "manual")
APP_STATES = ("background", "active")


class SessionStore:
    """
    Holds the current GameSession and runs commands against it.

    Usage:
        store = SessionStore(GameStorage(FileKeyValueStore()))
        if not store.hydrate_last_game():
            store.wizard.add_card("Giraffe")
            ...
            store.create_new_session()

        store.start_turn()
        store.got_it()
        store.timer.pump(now_ms)  # from the host loop
    """

    def __init__(
        self,
        storage: GameStorage | None = None,
        deps: SessionDeps | None = None,
        clock: Callable[[], int] = now_ms,
    ):
        self.storage = storage if storage is not None else GameStorage()
        self.deps = deps or SessionDeps()
        self.clock = clock

        self.current_game: GameSession | None = None
        self.last_active_game_id: str | None = None

        self.wizard = WizardState(generate_id=self.deps.generate_id)
        self.timer = TurnTimer(self.tick)

    # =========================================================================
    # Wizard and lifecycle
    # =========================================================================

    def reset_wizard(self) -> None:
        self.wizard = WizardState(generate_id=self.deps.generate_id)

    def create_new_session(self, turn_seconds: int | None = None) -> GameSession:
        """
        Build a session from the wizard, make it current and save it.

        Raises:
            ValueError: if the wizard holds fewer than MIN_CARDS cards
        """
        if not self.wizard.can_review:
            raise ValueError(
                f"At least {MIN_CARDS} cards are needed, got {len(self.wizard.cards)}"
            )
        session = create_session_from_wizard(self.wizard.to_input(turn_seconds), self.deps)
        logger.info("create_new_session(): %s (%d cards)", session.id, len(session.deck))
        self.set_current_game(session)
        self.persist_current_game()
        return session

    def set_current_game(self, session: GameSession | None) -> None:
        self.current_game = session
        self._sync_timer()

    def persist_current_game(self) -> None:
        """Save the current session and mark it as the one to resume."""
        session = self.current_game
        if session is None:
            return
        try:
            self.storage.save_session(session)
            self.storage.save_last_active_id(session.id)
        except OSError:
            logger.warning("persist_current_game(): save of %s failed", session.id, exc_info=True)
            return
        self.last_active_game_id = session.id
        logger.debug("persist_current_game(): %s", session.id)

    def hydrate_last_game(self) -> bool:
        """
        Resume the last active session.

        A pointer to a session that is no longer stored is cleared.
        A turn left running is reconciled with the time spent away.

        Returns:
            True if a session is now current
        """
        session_id = self.storage.load_last_active_id()
        if not session_id:
            self.last_active_game_id = None
            self.set_current_game(None)
            return False

        session = self.storage.load_session(session_id)
        if session is None:
            logger.info("hydrate_last_game(): %s not found, clearing pointer", session_id)
            self.storage.save_last_active_id(None)
            self.last_active_game_id = None
            self.set_current_game(None)
            return False

        self.last_active_game_id = session_id
        self.set_current_game(hydrate_running_turn(session, self.clock()))
        logger.info("hydrate_last_game(): %s", session_id)
        return True

    def reset_all(self) -> None:
        """Forget every stored game and start the wizard over."""
        self.storage.clear_all()
        self.last_active_game_id = None
        self.set_current_game(None)
        self.reset_wizard()
        logger.info("reset_all()")

    def reset_game(self) -> None:
        """Drop the in-memory game; storage is untouched."""
        self.set_current_game(None)
        logger.info("reset_game()")

    def handle_app_state(self, state: str, now: int | None = None) -> None:
        """
        Host visibility changes.

        background: save and stop ticking.
        active: fold the time spent away into a running turn, save, resume ticking.
        """
        if state not in APP_STATES:
            raise ValueError(f"Unknown app state: {state}")
        if state == "background":
            self.timer.clear()
            self.persist_current_game()
            return

        if self.current_game is not None:
            now = now if now is not None else self.clock()
            self.current_game = hydrate_running_turn(self.current_game, now)
        self.persist_current_game()
        self._sync_timer(now)

    # =========================================================================
    # Gameplay
    # =========================================================================

    def start_turn(self, now: int | None = None) -> bool:
        if self.current_game is None:
            return False
        now = now if now is not None else self.clock()
        turn = self.current_game.turn
        if turn is not None and not turn.is_running:
            # Left stopped by a clock that ran out while away
            self.end_turn("time")
        result = start_turn_command(self.current_game, now)
        if result.should_advance_phase:
            return self.advance_phase_if_complete()
        self._apply(result, now)
        if result.changed:
            logger.info("start_turn(): %s", result.session.turn.active_team_id)
        return result.changed

    def tick(self) -> bool:
        """
        One second of the turn clock.

        Running out ends the turn with reason "time". Ticks are not saved;
        the turn start moves forward with every tick so a saved turn can
        always be reconciled against the wall clock.
        """
        if self.current_game is None:
            return False
        result = tick_turn_command(self.current_game)
        if result.should_end_turn:
            return self.end_turn("time")
        if result.changed:
            turn = result.session.turn
            self.current_game = result.session._copy_with(
                turn=turn._copy_with(started_at=turn.started_at + 1000)
            )
        return result.changed

    def end_turn(self, reason: str = "manual") -> bool:
        if reason not in END_REASONS:
            raise ValueError(f"Unknown end reason: {reason}")
        if self.current_game is None:
            return False
        result = end_turn_command(self.current_game)
        self._apply(result)
        if result.changed:
            logger.info("end_turn(): %s", reason)
        if result.should_advance_phase:
            self.advance_phase_if_complete()
        return result.changed

    def got_it(self) -> bool:
        return self._resolve(got_it_command)

    def pass_card(self) -> bool:
        return self._resolve(pass_command)

    def undo(self) -> bool:
        if self.current_game is None:
            return False
        result = undo_command(self.current_game)
        self._apply(result)
        return result.changed

    def advance_phase_if_complete(self) -> bool:
        if self.current_game is None:
            return False
        result = advance_phase_if_complete_command(self.current_game)
        self._apply(result)
        if result.changed:
            session = result.session
            if session.phase_complete_modal is not None:
                logger.info("Phase complete: %s", session.phase_complete_modal.value)
            else:
                logger.info("Game over: %s", session.id)
        return result.changed

    def dismiss_phase_complete_modal(self) -> bool:
        if self.current_game is None:
            return False
        result = dismiss_phase_complete_modal_command(self.current_game, self.deps.shuffler)
        self._apply(result)
        return result.changed

    def dismiss_game_over_modal(self) -> bool:
        if self.current_game is None:
            return False
        result = dismiss_game_over_modal_command(self.current_game)
        self._apply(result)
        return result.changed

    # =========================================================================
    # Internals
    # =========================================================================

    def _resolve(self, command: Callable[[GameSession], CommandResult]) -> bool:
        """Got-it and pass: apply, then close the phase if the bowl ran dry."""
        if self.current_game is None:
            return False
        result = command(self.current_game)
        self._apply(result)
        if result.should_advance_phase:
            self.advance_phase_if_complete()
        return result.changed

    def _apply(self, result: CommandResult, now: int | None = None) -> None:
        if not result.changed:
            return
        self.current_game = result.session
        self.persist_current_game()
        self._sync_timer(now)

    def _sync_timer(self, now: int | None = None) -> None:
        running = self.current_game is not None and select_is_turn_running(self.current_game)
        self.timer.sync(running, now if now is not None else self.clock())
