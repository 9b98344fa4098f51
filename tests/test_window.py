import os
import random

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame  # noqa: E402

from tetrix.board import TetrixBoard  # noqa: E402
from tetrix.gpio import GpioButtons  # noqa: E402
from tetrix.piece import TetrixShape  # noqa: E402
from tetrix.window import TetrixWindow, square_color  # noqa: E402


def _window(started=True, gpio_dir=None):
    board = TetrixBoard(rng=random.Random(3))
    if started:
        board.start()
    gpio = GpioButtons(board, gpio_dir) if gpio_dir is not None else None
    return TetrixWindow(board, gpio)


def _count_color(surface, color):
    mask = pygame.mask.from_threshold(surface, color, (2, 2, 2, 255))
    return mask.count()


def test_square_color_table():
    assert square_color(TetrixShape.NO_SHAPE) == (0, 0, 0)
    assert square_color(TetrixShape.Z_SHAPE) == (0xCC, 0x66, 0x66)
    assert square_color(TetrixShape.MIRRORED_L_SHAPE) == (0xDA, 0xAA, 0x00)


def test_square_colors_are_distinct():
    colors = {square_color(shape) for shape in TetrixShape}
    assert len(colors) == len(TetrixShape)


def test_left_key_moves_piece():
    window = _window()
    x0 = window.board.cur_x
    consumed = window.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_LEFT))
    assert consumed is True
    assert window.board.cur_x == x0 - 1


def test_up_key_rotates_left():
    window = _window()
    expected = window.board.cur_piece.rotated_left()
    window.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_UP))
    assert window.board.cur_piece == expected


def test_space_drops_piece():
    window = _window()
    window.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_SPACE))
    assert window.board.pieces_dropped == 1
    assert window.board.score >= 7


def test_keys_ignored_before_start():
    window = _window(started=False)
    consumed = window.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_LEFT))
    assert consumed is False
    assert window.board.current_squares() == []


def test_unmapped_key_not_consumed():
    window = _window()
    y0 = window.board.cur_y
    consumed = window.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_q))
    assert consumed is False
    assert window.board.cur_y == y0


def test_mouse_motion_shows_cursor():
    window = _window()
    event = pygame.event.Event(pygame.MOUSEMOTION, pos=(3, 4), rel=(1, 1), buttons=(0, 0, 0))
    assert window.cursor_visible is False
    assert window.handle_event(event) is False
    assert window.cursor_visible is True


def test_update_ticks_after_interval():
    window = _window()
    y0 = window.board.cur_y
    window.update(window.board.timeout_time())
    assert window.board.cur_y == y0 - 1


def test_update_before_interval_does_nothing():
    window = _window()
    y0 = window.board.cur_y
    window.update(window.board.timeout_time() - 1)
    assert window.board.cur_y == y0


def test_update_accumulates_time():
    window = _window()
    y0 = window.board.cur_y
    half = window.board.timeout_time() // 2 + 1
    window.update(half)
    window.update(half)
    assert window.board.cur_y == y0 - 1


def test_update_paused_does_not_tick():
    window = _window()
    window.board.pause()
    y0 = window.board.cur_y
    window.update(10 * 1000)
    assert window.board.cur_y == y0


def test_update_without_game_keeps_timer_stopped():
    window = _window(started=False)
    window.update(10 * 1000)
    assert window.board.timer_interval is None
    assert window.board.is_started is False


def test_update_polls_gpio(tmp_path):
    pin_dir = tmp_path / "gpio132"
    pin_dir.mkdir()
    (pin_dir / "value").write_text("1")
    window = _window(started=False, gpio_dir=tmp_path)
    window.update(100)
    assert window.board.is_started is False
    window.update(100)
    assert window.board.is_started is True


def test_board_fits_inside_window():
    window = _window()
    outer = pygame.Rect((0, 0), window.size)
    assert outer.contains(window.board_rect)
    assert window.square_width * TetrixBoard.WIDTH <= window.contents_rect.width
    assert window.square_height * TetrixBoard.HEIGHT <= window.contents_rect.height


def test_draw_shows_falling_piece():
    window = _window()
    surface = pygame.Surface(window.size)
    window.draw(surface)
    color = square_color(window.board.cur_piece.shape)
    assert _count_color(surface.subsurface(window.board_rect), color) > 0


def test_draw_paused_hides_piece():
    window = _window()
    window.board.pause()
    surface = pygame.Surface(window.size)
    window.draw(surface)
    color = square_color(window.board.cur_piece.shape)
    assert _count_color(surface.subsurface(window.board_rect), color) == 0


def test_draw_shows_next_piece():
    window = _window()
    surface = pygame.Surface(window.size)
    window.draw(surface)
    color = square_color(window.board.next_piece.shape)
    assert _count_color(surface.subsurface(window.next_rect), color) > 0