"""Computer opponent with three difficulty tiers for tic-tac-toe."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional
import logging
import random

from .game import (
    CENTER,
    CORNERS,
    Board,
    Cell,
    Difficulty,
    Player,
    completes_line,
    is_corner,
    opponent,
)

logger = logging.getLogger(__name__)

# Chance that Easy restricts itself to edges/center when any are free.
EASY_NON_CORNER_BIAS = 0.7
# Chance that Medium plays the Hard heuristic instead of a random cell.
MEDIUM_HARD_CHANCE = 0.5


@dataclass
class ComputerPlayer:
    """Picks a cell for ``player`` on a board; never mutates the board it is given.

      - ComputerPlayer(player="O", difficulty=Difficulty.HARD)
      - choose(board) -> (row, col)

    Randomness is drawn from ``rng`` so tests can pass a seeded source.
    """

    player: Player
    difficulty: Difficulty = Difficulty.MEDIUM
    rng: random.Random = field(default_factory=random.Random, repr=False)

    # ---- public API ----

    def choose(self, board: Board) -> Cell:
        empty = board.empty_cells()
        if not empty:
            raise RuntimeError("No valid moves available")

        if self.difficulty is Difficulty.EASY:
            move = self._easy(empty)
        elif self.difficulty is Difficulty.MEDIUM:
            move = self._medium(board, empty)
        else:
            move = self._hard(board, empty)
        logger.debug("%s (%s) chose %s", self.player, self.difficulty.value, move)
        return move

    # ---- tiers ----

    def _easy(self, empty: List[Cell]) -> Cell:
        # Corners are the strong squares, so Easy mostly avoids them.
        non_corner = [cell for cell in empty if not is_corner(cell)]
        if non_corner and self.rng.random() < EASY_NON_CORNER_BIAS:
            return self.rng.choice(non_corner)
        return self.rng.choice(empty)

    def _medium(self, board: Board, empty: List[Cell]) -> Cell:
        if self.rng.random() < MEDIUM_HARD_CHANCE:
            return self._hard(board, empty)
        return self.rng.choice(empty)

    def _hard(self, board: Board, empty: List[Cell]) -> Cell:
        """Win, block, center, random corner, first free cell; in that order."""
        # Work on a copy so speculative placements never leak.
        scratch = board.copy()

        move = self._find_completing(scratch, self.player, empty)
        if move is not None:
            return move

        move = self._find_completing(scratch, opponent(self.player), empty)
        if move is not None:
            return move

        if scratch.is_empty(*CENTER):
            return CENTER

        corners = list(CORNERS)
        self.rng.shuffle(corners)
        for corner in corners:
            if scratch.is_empty(*corner):
                return corner

        return empty[0]

    @staticmethod
    def _find_completing(
        board: Board, player: Player, empty: List[Cell]
    ) -> Optional[Cell]:
        for row, col in empty:
            if completes_line(board, player, row, col):
                return row, col
        return None
