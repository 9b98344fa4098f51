import random

import pytest

from tetrix.board import TetrixBoard
from tetrix.gpio import GpioButtons, read_gpio_value


def _set_pin(base, pin, value):
    directory = base / f"gpio{pin}"
    directory.mkdir(exist_ok=True)
    (directory / "value").write_text(value)


def _board():
    return TetrixBoard(rng=random.Random(7))


def test_read_low_value(tmp_path):
    _set_pin(tmp_path, 132, "0\n")
    assert read_gpio_value(132, tmp_path) == 0


def test_read_high_value(tmp_path):
    _set_pin(tmp_path, 135, "1\n")
    assert read_gpio_value(135, tmp_path) == 1


def test_read_missing_pin_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_gpio_value(140, tmp_path)


def test_refresh_without_files_reports_nothing(tmp_path):
    board = _board()
    buttons = GpioButtons(board, tmp_path)
    assert buttons.refresh() == []
    assert board.is_started is False


def test_start_pin_starts_game(tmp_path):
    board = _board()
    buttons = GpioButtons(board, tmp_path)
    _set_pin(tmp_path, 132, "1")
    assert buttons.refresh() == [132]
    assert board.is_started is True
    assert board.score == 0


def test_low_pins_do_nothing(tmp_path):
    board = _board()
    buttons = GpioButtons(board, tmp_path)
    for pin in range(132, 139):
        _set_pin(tmp_path, pin, "0")
    assert buttons.refresh() == []
    assert board.is_started is False


def test_left_pin_moves_piece(tmp_path):
    board = _board()
    board.start()
    x0 = board.cur_x
    buttons = GpioButtons(board, tmp_path)
    _set_pin(tmp_path, 134, "1")
    assert buttons.refresh() == [134]
    assert board.cur_x == x0 - 1


def test_right_pin_moves_piece(tmp_path):
    board = _board()
    board.start()
    x0 = board.cur_x
    buttons = GpioButtons(board, tmp_path)
    _set_pin(tmp_path, 135, "1")
    buttons.refresh()
    assert board.cur_x == x0 + 1


def test_down_pin_drops_two_lines(tmp_path):
    board = _board()
    board.start()
    y0 = board.cur_y
    buttons = GpioButtons(board, tmp_path)
    _set_pin(tmp_path, 133, "1")
    buttons.refresh()
    assert board.cur_y == y0 - 2


def test_rotate_pin_rotates_right(tmp_path):
    board = _board()
    board.start()
    expected = board.cur_piece.rotated_right()
    buttons = GpioButtons(board, tmp_path)
    _set_pin(tmp_path, 136, "1")
    buttons.refresh()
    assert board.cur_piece == expected


def test_spare_pins_are_reported_in_order(tmp_path):
    board = _board()
    buttons = GpioButtons(board, tmp_path)
    _set_pin(tmp_path, 138, "1")
    _set_pin(tmp_path, 137, "1")
    assert buttons.refresh() == [137, 138]
    assert board.is_started is False


def test_buttons_ignored_before_start(tmp_path):
    board = _board()
    buttons = GpioButtons(board, tmp_path)
    _set_pin(tmp_path, 134, "1")
    buttons.refresh()
    assert board.is_started is False
    assert board.current_squares() == []