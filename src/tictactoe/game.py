"""Core rules for classic 3x3 tic-tac-toe."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple

Player = str  # "X" or "O"
Cell = Tuple[int, int]  # (row, col)

X: Player = "X"
O: Player = "O"
EMPTY = " "

SIZE = 3

# Scan order matters for determinism: rows, then columns, then diagonals.
WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)

CENTER: Cell = (1, 1)
CORNERS: Tuple[Cell, ...] = ((0, 0), (0, 2), (2, 0), (2, 2))


class Mode(str, Enum):
    HUMAN_VS_HUMAN = "human_vs_human"
    HUMAN_VS_COMPUTER = "human_vs_computer"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Outcome(str, Enum):
    ONGOING = "ongoing"
    X_WINS = "x_wins"
    O_WINS = "o_wins"
    DRAW = "draw"

    @property
    def finished(self) -> bool:
        return self is not Outcome.ONGOING


def opponent(player: Player) -> Player:
    return O if player == X else X


def in_bounds(row: int, col: int) -> bool:
    for v in (row, col):
        if not isinstance(v, int) or isinstance(v, bool):
            return False
    return 0 <= row < SIZE and 0 <= col < SIZE


def is_corner(cell: Cell) -> bool:
    return cell in CORNERS


# ---------- Board ----------


@dataclass
class Board:
    # Row-major: 'X', 'O', or ' ' (space) for empty
    cells: List[str] = field(default_factory=lambda: [EMPTY] * (SIZE * SIZE))

    def __getitem__(self, cell: Cell) -> str:
        row, col = cell
        return self.cells[row * SIZE + col]

    def is_empty(self, row: int, col: int) -> bool:
        return self.cells[row * SIZE + col] == EMPTY

    def is_full(self) -> bool:
        return all(c != EMPTY for c in self.cells)

    def empty_cells(self) -> List[Cell]:
        """Empty cells in row-major order."""
        return [divmod(i, SIZE) for i, c in enumerate(self.cells) if c == EMPTY]

    def place(self, player: Player, row: int, col: int) -> None:
        if not in_bounds(row, col):
            raise ValueError(f"Cell ({row}, {col}) is off the board")
        if not self.is_empty(row, col):
            raise ValueError("Cell already occupied")
        self.cells[row * SIZE + col] = player

    def clear(self, row: int, col: int) -> None:
        self.cells[row * SIZE + col] = EMPTY

    def reset(self) -> None:
        self.cells[:] = [EMPTY] * (SIZE * SIZE)

    def rows(self) -> Iterator[List[str]]:
        for r in range(SIZE):
            yield self.cells[r * SIZE : (r + 1) * SIZE]

    def snapshot(self) -> List[List[str]]:
        """Independent 3x3 copy; mutating it never touches the board."""
        return [list(row) for row in self.rows()]

    def copy(self) -> "Board":
        return Board(cells=self.cells.copy())

    @classmethod
    def from_rows(cls, rows: List[str]) -> "Board":
        """Build a board from three strings such as ``"XO."`` (``.`` is empty)."""
        if len(rows) != SIZE or any(len(r) != SIZE for r in rows):
            raise ValueError("Expected three rows of three cells")
        cells = [EMPTY if ch in ".- " else ch.upper() for r in rows for ch in r]
        for ch in cells:
            if ch not in (X, O, EMPTY):
                raise ValueError(f"Unknown mark {ch!r}")
        return cls(cells=cells)


# ---------- Rules ----------


def winner(board: Board) -> Optional[Player]:
    """Mark owning the first complete line, or None."""
    for a, b, c in WINNING_LINES:
        v = board.cells[a]
        if v != EMPTY and v == board.cells[b] == board.cells[c]:
            return v
    return None


def evaluate(board: Board) -> Outcome:
    won = winner(board)
    if won == X:
        return Outcome.X_WINS
    if won == O:
        return Outcome.O_WINS
    if board.is_full():
        return Outcome.DRAW
    return Outcome.ONGOING


def completes_line(board: Board, player: Player, row: int, col: int) -> bool:
    """Would placing ``player`` at an empty cell win the game right away?

    The placement is hypothetical; the board is restored before returning.
    """
    if not board.is_empty(row, col):
        return False
    board.place(player, row, col)
    try:
        return winner(board) == player
    finally:
        board.clear(row, col)
