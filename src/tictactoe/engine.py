"""Stateful game engine: board, turn order, outcome, and the computer opponent."""

from __future__ import annotations

from typing import List, Optional
import logging
import random

from .ai import ComputerPlayer
from .game import (
    EMPTY,
    O,
    X,
    Board,
    Cell,
    Difficulty,
    Mode,
    Outcome,
    Player,
    evaluate,
    in_bounds,
    opponent,
)

logger = logging.getLogger(__name__)


class GameEngine:
    """Owns a single game of tic-tac-toe.

    X always opens. In ``Mode.HUMAN_VS_COMPUTER`` the computer plays O.
    Illegal moves are rejected by returning ``False``; nothing here raises
    for caller input.

    A human move can be played as two explicit steps::

        engine.apply_human_move(row, col)
        engine.apply_computer_move_if_due()

    or with :meth:`apply_move`, which does both.

    Mode and difficulty changes take effect at once on an untouched board;
    otherwise they are held until the next :meth:`reset`.
    """

    computer_mark: Player = O

    def __init__(
        self,
        mode: Mode = Mode.HUMAN_VS_HUMAN,
        difficulty: Difficulty = Difficulty.MEDIUM,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._board = Board()
        self._turn: Player = X
        self._outcome = Outcome.ONGOING
        self._mode = Mode(mode)
        self._difficulty = Difficulty(difficulty)
        self._pending_mode: Optional[Mode] = None
        self._pending_difficulty: Optional[Difficulty] = None

    @classmethod
    def from_board(
        cls,
        board: Board,
        turn: Optional[Player] = None,
        **kwargs,
    ) -> "GameEngine":
        """Start from an arbitrary position; the board is copied.

        When ``turn`` is omitted X moves if both marks are level, else O.
        """
        engine = cls(**kwargs)
        engine._board = board.copy()
        if turn is None:
            xs = board.cells.count(X)
            turn = X if xs <= board.cells.count(O) else O
        elif turn not in (X, O):
            raise ValueError(f"Unknown mark {turn!r}")
        engine._turn = turn
        engine.evaluate()
        return engine

    # ---- state queries ----

    @property
    def current_turn(self) -> Player:
        return self._turn

    @property
    def outcome(self) -> Outcome:
        return self._outcome

    @property
    def winner(self) -> Optional[Player]:
        if self._outcome is Outcome.X_WINS:
            return X
        if self._outcome is Outcome.O_WINS:
            return O
        return None

    @property
    def move_count(self) -> int:
        return sum(1 for c in self._board.cells if c != EMPTY)

    @property
    def human_turn(self) -> bool:
        """True when a tap on the board should be accepted."""
        if self._outcome.finished:
            return False
        return not self._computer_due()

    @property
    def mode(self) -> Mode:
        return self._mode

    @mode.setter
    def mode(self, value: Mode) -> None:
        value = Mode(value)
        if self.move_count == 0:
            self._mode = value
            self._pending_mode = None
            logger.info("Mode set to %s", value.value)
        else:
            self._pending_mode = value
            logger.info("Mode %s staged until reset", value.value)

    @property
    def difficulty(self) -> Difficulty:
        return self._difficulty

    @difficulty.setter
    def difficulty(self, value: Difficulty) -> None:
        value = Difficulty(value)
        if self.move_count == 0:
            self._difficulty = value
            self._pending_difficulty = None
            logger.info("Difficulty set to %s", value.value)
        else:
            self._pending_difficulty = value
            logger.info("Difficulty %s staged until reset", value.value)

    def board_snapshot(self) -> List[List[str]]:
        return self._board.snapshot()

    # ---- commands ----

    def reset(self) -> None:
        if self._pending_mode is not None:
            self._mode, self._pending_mode = self._pending_mode, None
        if self._pending_difficulty is not None:
            self._difficulty, self._pending_difficulty = self._pending_difficulty, None
        self._board.reset()
        self._turn = X
        self._outcome = Outcome.ONGOING
        logger.info(
            "New game: mode=%s difficulty=%s",
            self._mode.value,
            self._difficulty.value,
        )

    def evaluate(self) -> Outcome:
        self._outcome = evaluate(self._board)
        return self._outcome

    def illegal_move_reason(self, row: int, col: int) -> Optional[str]:
        """Why ``(row, col)`` cannot be played right now, or None if it can."""
        if self._outcome.finished:
            return "Game already finished"
        if not in_bounds(row, col):
            return f"Cell ({row}, {col}) is off the board"
        if not self._board.is_empty(row, col):
            return "Cell already occupied"
        return None

    def apply_human_move(self, row: int, col: int) -> bool:
        """Play one ply for the mark whose turn it is."""
        reason = self.illegal_move_reason(row, col)
        if reason is not None:
            logger.debug("Rejected move (%s, %s): %s", row, col, reason)
            return False
        self._commit(row, col)
        return True

    def apply_computer_move_if_due(self) -> Optional[Cell]:
        if not self._computer_due():
            return None
        return self.select_computer_move()

    def apply_move(self, row: int, col: int) -> bool:
        """Human ply followed, when due, by the computer's reply.

        Returns whether the requested move itself was legal.
        """
        if not self.apply_human_move(row, col):
            return False
        self.apply_computer_move_if_due()
        return True

    def select_computer_move(self) -> Optional[Cell]:
        """Choose and play a cell for the side to move at the current difficulty.

        Does nothing once the game is over.
        """
        if self._outcome.finished:
            return None
        player = ComputerPlayer(
            player=self._turn, difficulty=self._difficulty, rng=self._rng
        )
        row, col = player.choose(self._board)
        self._commit(row, col)
        return row, col

    # ---- helpers ----

    def _computer_due(self) -> bool:
        return (
            self._mode is Mode.HUMAN_VS_COMPUTER
            and self._outcome is Outcome.ONGOING
            and self._turn == self.computer_mark
        )

    def _commit(self, row: int, col: int) -> None:
        mark = self._turn
        self._board.place(mark, row, col)
        logger.debug("%s played (%s, %s)", mark, row, col)
        if self.evaluate() is Outcome.ONGOING:
            self._turn = opponent(mark)
        else:
            logger.info("Game over: %s", self._outcome.value)

    def __repr__(self) -> str:
        rows = "/".join("".join(r).replace(EMPTY, ".") for r in self._board.rows())
        return (
            f"GameEngine(board={rows!r}, turn={self._turn!r}, "
            f"outcome={self._outcome.value!r}, mode={self._mode.value!r}, "
            f"difficulty={self._difficulty.value!r})"
        )
