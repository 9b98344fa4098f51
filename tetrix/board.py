"""The game board: falling piece, settled squares, scoring and levels."""

from __future__ import annotations

import random
from collections.abc import Callable
from enum import Enum, auto

from tetrix.piece import TetrixPiece, TetrixShape

Listener = Callable[[int], None]

LINE_CLEAR_DELAY_MS = 500


class Key(Enum):
    """Game controls."""

    LEFT = auto()
    RIGHT = auto()
    DOWN = auto()
    UP = auto()
    SPACE = auto()
    D = auto()


class TetrixBoard:
    """Game state of a Tetrix board, driven by keys and timer ticks.

    The drop timer is modelled by ``timer_interval``: the number of
    milliseconds until the next ``tick`` is due, or ``None`` when stopped.
    """

    WIDTH = 10
    HEIGHT = 22

    def __init__(
        self,
        rng: random.Random | None = None,
        on_score_changed: Listener | None = None,
        on_level_changed: Listener | None = None,
        on_lines_removed_changed: Listener | None = None,
    ) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._on_score_changed = on_score_changed
        self._on_level_changed = on_level_changed
        self._on_lines_removed_changed = on_lines_removed_changed

        self.is_started = False
        self.is_paused = False
        self.is_waiting_after_line = False
        self.cur_piece = TetrixPiece()
        self.next_piece = TetrixPiece()
        self.cur_x = 0
        self.cur_y = 0
        self.lines_removed = 0
        self.pieces_dropped = 0
        self.score = 0
        self.level = 1
        self.timer_interval: int | None = None
        self._cells: list[TetrixShape] = []
        self._clear_board()

        self.next_piece.set_random_shape(self._rng)

    @staticmethod
    def _emit(listener: Listener | None, value: int) -> None:
        if listener is not None:
            listener(value)

    def _index(self, x: int, y: int) -> int:
        if not (0 <= x < self.WIDTH and 0 <= y < self.HEIGHT):
            raise IndexError(f"square ({x}, {y}) is off the board")
        return y * self.WIDTH + x

    def shape_at(self, x: int, y: int) -> TetrixShape:
        """Shape of the settled square at column x, row y (row 0 is the bottom)."""
        return self._cells[self._index(x, y)]

    def _set_shape_at(self, x: int, y: int, shape: TetrixShape) -> None:
        self._cells[self._index(x, y)] = shape

    def timeout_time(self) -> int:
        """Milliseconds between drops at the current level."""
        return 1000 // (1 + self.level)

    def _clear_board(self) -> None:
        self._cells = [TetrixShape.NO_SHAPE] * (self.WIDTH * self.HEIGHT)

    def start(self) -> None:
        """Begin a new game, unless the current one is paused."""
        if self.is_paused:
            return

        self.is_started = True
        self.is_waiting_after_line = False
        self.lines_removed = 0
        self.pieces_dropped = 0
        self.score = 0
        self.level = 1
        self._clear_board()

        self._emit(self._on_lines_removed_changed, self.lines_removed)
        self._emit(self._on_score_changed, self.score)
        self._emit(self._on_level_changed, self.level)

        self._new_piece()
        self.timer_interval = self.timeout_time()

    def pause(self) -> None:
        """Toggle pause of a running game."""
        if not self.is_started:
            return
        self.is_paused = not self.is_paused
        self.timer_interval = None if self.is_paused else self.timeout_time()

    def _accepts_keys(self) -> bool:
        return (
            self.is_started
            and not self.is_paused
            and self.cur_piece.shape != TetrixShape.NO_SHAPE
        )

    def _apply_key(self, key: Key) -> bool:
        if key is Key.LEFT:
            self.try_move(self.cur_piece, self.cur_x - 1, self.cur_y)
        elif key is Key.RIGHT:
            self.try_move(self.cur_piece, self.cur_x + 1, self.cur_y)
        elif key is Key.DOWN:
            self.try_move(self.cur_piece.rotated_right(), self.cur_x, self.cur_y)
        elif key is Key.UP:
            self.try_move(self.cur_piece.rotated_left(), self.cur_x, self.cur_y)
        elif key is Key.SPACE:
            self.drop_down()
        else:
            return False
        return True

    def key_press(self, key: Key) -> bool:
        """Handle a keyboard key; return whether it was consumed."""
        if not self._accepts_keys():
            return False
        if key is Key.D:
            self.one_line_down()
            return True
        return self._apply_key(key)

    def send_kb_key(self, key: Key) -> bool:
        """Handle a key from the button panel; D drops the piece two lines."""
        if not self._accepts_keys():
            return False
        if key is Key.D:
            self.one_line_down()
            self.one_line_down()
            return True
        return self._apply_key(key)

    def tick(self) -> bool:
        """Handle the drop timer firing; return False if the timer is stopped."""
        if self.timer_interval is None:
            return False
        if self.is_waiting_after_line:
            self.is_waiting_after_line = False
            self._new_piece()
            if self.is_started:
                self.timer_interval = self.timeout_time()
        else:
            self.one_line_down()
        return True

    def current_squares(self) -> list[tuple[int, int]]:
        """Board positions of the falling piece's squares."""
        if self.cur_piece.shape == TetrixShape.NO_SHAPE:
            return []
        return [(self.cur_x + x, self.cur_y - y) for x, y in self.cur_piece.coords]

    def try_move(self, piece: TetrixPiece, new_x: int, new_y: int) -> bool:
        """Place ``piece`` at the given position if it fits there."""
        for dx, dy in piece.coords:
            x, y = new_x + dx, new_y - dy
            if not (0 <= x < self.WIDTH and 0 <= y < self.HEIGHT):
                return False
            if self.shape_at(x, y) != TetrixShape.NO_SHAPE:
                return False
        self.cur_piece = piece
        self.cur_x = new_x
        self.cur_y = new_y
        return True

    def drop_down(self) -> None:
        """Drop the falling piece as far as it goes and settle it."""
        drop_height = 0
        new_y = self.cur_y
        while new_y > 0 and self.try_move(self.cur_piece, self.cur_x, new_y - 1):
            new_y -= 1
            drop_height += 1
        self._piece_dropped(drop_height)

    def one_line_down(self) -> None:
        """Move the falling piece down one row, settling it if it cannot move."""
        if not self.try_move(self.cur_piece, self.cur_x, self.cur_y - 1):
            self._piece_dropped(0)

    def _piece_dropped(self, drop_height: int) -> None:
        for x, y in self.current_squares():
            self._set_shape_at(x, y, self.cur_piece.shape)

        self.pieces_dropped += 1
        if self.pieces_dropped % 25 == 0:
            self.level += 1
            self.timer_interval = self.timeout_time()
            self._emit(self._on_level_changed, self.level)

        self.score += drop_height + 7
        self._emit(self._on_score_changed, self.score)
        self._remove_full_lines()

        if not self.is_waiting_after_line:
            self._new_piece()

    def _row_is_full(self, y: int) -> bool:
        return all(
            self.shape_at(x, y) != TetrixShape.NO_SHAPE for x in range(self.WIDTH)
        )

    def _remove_full_lines(self) -> None:
        full_lines = 0
        for row in reversed(range(self.HEIGHT)):
            if not self._row_is_full(row):
                continue
            full_lines += 1
            start = row * self.WIDTH
            del self._cells[start:start + self.WIDTH]
            self._cells.extend([TetrixShape.NO_SHAPE] * self.WIDTH)

        if full_lines > 0:
            self.lines_removed += full_lines
            self.score += 10 * full_lines
            self._emit(self._on_lines_removed_changed, self.lines_removed)
            self._emit(self._on_score_changed, self.score)

            self.timer_interval = LINE_CLEAR_DELAY_MS
            self.is_waiting_after_line = True
            self.cur_piece.set_shape(TetrixShape.NO_SHAPE)

    def _new_piece(self) -> None:
        self.cur_piece = self.next_piece
        self.next_piece = TetrixPiece()
        self.next_piece.set_random_shape(self._rng)
        self.cur_x = self.WIDTH // 2 + 1
        self.cur_y = self.HEIGHT - 1 + self.cur_piece.min_y()

        if not self.try_move(self.cur_piece, self.cur_x, self.cur_y):
            self.cur_piece = TetrixPiece()
            self.timer_interval = None
            self.is_started = False