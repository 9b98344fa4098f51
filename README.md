# tetrix

A classic falling-block puzzle game. Pieces drop onto a 10 × 22 board; fill a
row to clear it. It runs in a pygame window (600 × 1024 pixels) and is meant to
be driven by push buttons wired to Linux sysfs GPIO pins, as on a small arcade
cabinet, with the keyboard for moving pieces.

## Installing

```
pip install .
```

This installs `pygame` as the only runtime dependency.

## Playing

```
tetrix
```

Options:

| Option             | Meaning                                                   |
|--------------------|-----------------------------------------------------------|
| `--gpio-dir DIR`   | Directory holding the GPIO pins (default `/sys/class/gpio`) |
| `--no-gpio`        | Do not poll the button panel                              |

Close the window to quit. The mouse cursor is hidden until the mouse moves.

Keyboard controls while a game is running:

| Key         | Action                      |
|-------------|-----------------------------|
| Left/Right  | Move the piece sideways     |
| Down        | Rotate right                |
| Up          | Rotate left                 |
| Space       | Drop the piece to the floor |
| D           | Move the piece one row down |

Scoring: each piece that lands is worth 7 points plus one per row it fell when
dropped with Space; every cleared line adds 10. The level rises every 25
pieces, and the drop interval is `1000 // (1 + level)` milliseconds. After
lines are cleared there is a 500 ms pause before the next piece appears.

## GPIO buttons

Unless `--no-gpio` is given, pins 132–138 are read every 200 ms from
`<gpio-dir>/gpio<N>/value`. A pin whose value does not start with `0` counts
as pressed:

| GPIO | Action                    |
|------|---------------------------|
| 132  | Start a new game          |
| 133  | Down (two rows per press) |
| 134  | Left                      |
| 135  | Right                     |
| 136  | Rotate right              |

Pins 137 and 138 are read but do nothing. A pin that cannot be read is logged
as a warning and treated as not pressed.

## What it does not do

There is no keyboard key or on-screen button to start or pause a game. A game
is started only by GPIO pin 132, so with `--no-gpio` (or without the pins) the
window shows an empty board. Pausing exists only as `TetrixBoard.pause()` in
code. Scores are not saved.

## Using the game logic in code

The rules live apart from the display and can be used without a window:

```python
from tetrix.board import Key, TetrixBoard

board = TetrixBoard()
board.start()
board.key_press(Key.LEFT)
board.tick()                 # one timer step: the piece falls a row
print(board.score, board.level, board.lines_removed)
```

`TetrixBoard` also takes an optional `random.Random` and callbacks
`on_score_changed`, `on_level_changed` and `on_lines_removed_changed`.
`tetrix.piece.TetrixPiece` holds a single piece and its rotations,
`tetrix.gpio.GpioButtons` maps GPIO pins to board actions, and
`tetrix.window.TetrixWindow` draws a board and runs the game loop.

## Running the tests

```
pip install .[test]
pytest
```