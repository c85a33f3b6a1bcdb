from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Iterator, List, Optional, Tuple

BOARD_SIZE = 8


class Player(IntEnum):
    """Side of the game. Values are opposing signs so negation flips ownership."""

    HUMAN = 1
    AI = -1

    @property
    def opponent(self) -> "Player":
        return Player(-self.value)

    @property
    def forward(self) -> int:
        # Human starts on rows 5-7 and moves toward row 0
        return -1 if self is Player.HUMAN else 1

    @property
    def far_row(self) -> int:
        return 0 if self is Player.HUMAN else BOARD_SIZE - 1

    @property
    def label(self) -> str:
        return "human" if self is Player.HUMAN else "ai"


@dataclass
class Piece:
    owner: Player
    king: bool = False

    def promote(self) -> None:
        self.king = True

    def to_dict(self) -> Dict[str, object]:
        return {"owner": self.owner.label, "king": self.king}


class Board:
    """8x8 grid of optional pieces indexed by (row, col).

    Row 0 is the AI's back rank, row 7 the human's. Pieces only ever stand on
    dark squares, where (row + col) is odd.
    """

    def __init__(self, grid: Optional[List[List[Optional[Piece]]]] = None) -> None:
        if grid is None:
            grid = [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]
        self.grid = grid

    @classmethod
    def empty(cls) -> "Board":
        return cls()

    @classmethod
    def initial(cls) -> "Board":
        board = cls()
        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                if (row + col) % 2 == 0:
                    continue
                if row < 3:
                    board.place(row, col, Piece(Player.AI))
                elif row > 4:
                    board.place(row, col, Piece(Player.HUMAN))
        return board

    @staticmethod
    def is_on_board(row: int, col: int) -> bool:
        return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE

    def piece_at(self, row: int, col: int) -> Optional[Piece]:
        return self.grid[row][col]

    def place(self, row: int, col: int, piece: Optional[Piece]) -> None:
        self.grid[row][col] = piece

    def remove(self, row: int, col: int) -> Optional[Piece]:
        piece = self.grid[row][col]
        self.grid[row][col] = None
        return piece

    def pieces(self, player: Optional[Player] = None) -> Iterator[Tuple[int, int, Piece]]:
        """Yield (row, col, piece) in row-major order, optionally for one owner."""
        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                piece = self.grid[row][col]
                if piece is None:
                    continue
                if player is None or piece.owner == player:
                    yield row, col, piece

    def count(self, player: Player) -> int:
        return sum(1 for _ in self.pieces(player))

    def clone(self) -> "Board":
        # New Piece instances so search mutations never reach the live board
        return Board(
            [
                [Piece(cell.owner, cell.king) if cell else None for cell in row]
                for row in self.grid
            ]
        )

    def to_grid(self) -> List[List[Optional[Dict[str, object]]]]:
        return [[cell.to_dict() if cell else None for cell in row] for row in self.grid]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.grid == other.grid

    def __repr__(self) -> str:
        symbols = {
            (Player.HUMAN, False): "h",
            (Player.HUMAN, True): "H",
            (Player.AI, False): "a",
            (Player.AI, True): "A",
        }
        rows = [
            "".join(symbols[(cell.owner, cell.king)] if cell else "." for cell in row)
            for row in self.grid
        ]
        return "Board(\n  " + "\n  ".join(rows) + "\n)"
