"""The game window: layout, drawing, input and the main loop."""

from __future__ import annotations

import argparse
import colorsys
import logging

import pygame

from tetrix.board import Key, TetrixBoard
from tetrix.gpio import POLL_INTERVAL_MS, SYSFS_GPIO_DIR, GpioButtons
from tetrix.piece import TetrixShape

logger = logging.getLogger(__name__)

Color = tuple[int, int, int]

BLACK: Color = (0, 0, 0)
WHITE: Color = (255, 255, 255)
CYAN: Color = (0, 255, 255)

_COLOR_TABLE = (
    0x000000, 0xCC6666, 0x66CC66, 0x6666CC,
    0xCCCC66, 0xCC66CC, 0x66CCCC, 0xDAAA00,
)

_KEY_MAP = {
    pygame.K_LEFT: Key.LEFT,
    pygame.K_RIGHT: Key.RIGHT,
    pygame.K_DOWN: Key.DOWN,
    pygame.K_UP: Key.UP,
    pygame.K_SPACE: Key.SPACE,
    pygame.K_d: Key.D,
}


def square_color(shape: TetrixShape) -> Color:
    """RGB colour used to draw squares of the given shape."""
    value = _COLOR_TABLE[TetrixShape(shape)]
    return ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)


def _to_hsv(rgb: Color) -> tuple[float, float, float]:
    r, g, b = (c / 255 for c in rgb)
    return colorsys.rgb_to_hsv(r, g, b)


def _to_rgb(h: float, s: float, v: float) -> Color:
    r, g, b = colorsys.hsv_to_rgb(h, s, v)
    return (round(r * 255), round(g * 255), round(b * 255))


def _lighter(rgb: Color, factor: int = 150) -> Color:
    h, s, v = _to_hsv(rgb)
    v *= factor / 100
    if v > 1.0:
        s = max(0.0, s - (v - 1.0))
        v = 1.0
    return _to_rgb(h, s, v)


def _darker(rgb: Color, factor: int = 200) -> Color:
    h, s, v = _to_hsv(rgb)
    return _to_rgb(h, s, v * 100 / factor)


class TetrixWindow:
    """Lays out and draws the board, the next piece and the counters."""

    TITLE = "Butkon-TetriX"
    CAPTION = "°º°°º° TETRIS °º°°º°"
    MARGIN = 10

    def __init__(
        self,
        board: TetrixBoard | None = None,
        gpio: GpioButtons | None = None,
        size: tuple[int, int] = (600, 1024),
    ) -> None:
        self.board = board if board is not None else TetrixBoard()
        self.gpio = gpio
        self.size = size
        self.cursor_visible = False
        self._timer_interval = self.board.timer_interval
        self._timer_elapsed = 0
        self._gpio_elapsed = 0
        self._fonts: dict[int, pygame.font.Font] = {}
        self._layout()

    def _layout(self) -> None:
        width, height = self.size
        m = self.MARGIN
        self.caption_rect = pygame.Rect(m, m, width - 2 * m, 90)
        top = self.caption_rect.bottom + m
        unit = max(1, (height - top - m) // 9)
        inner = width - 2 * m
        left_w = inner * 2 // 6 - m // 2
        right_x = m + inner * 2 // 6 + m // 2
        right_w = width - m - right_x

        def row(index: int, span: int = 1, x: int = m, w: int = left_w) -> pygame.Rect:
            return pygame.Rect(x, top + (index - 1) * unit, w, span * unit)

        self.label_rects = {
            "Sonraki / Next": row(1),
            "Seviye / Level": row(4),
            "Puan / Score": row(6),
            "Silinen / Removed": row(8),
            "Oyun Alan / Game Board": row(1, x=right_x, w=right_w),
        }
        self.next_rect = row(2, 2)
        self.level_rect = row(5)
        self.score_rect = row(7)
        self.lines_rect = row(9)
        self.board_rect = row(2, 8, x=right_x, w=right_w)
        self.contents_rect = self.board_rect.inflate(-2, -2)
        self.square_width = self.contents_rect.width // TetrixBoard.WIDTH
        self.square_height = self.contents_rect.height // TetrixBoard.HEIGHT

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Handle one input event; return whether the board consumed it."""
        if event.type == pygame.MOUSEMOTION:
            x, y = event.pos
            logger.info("Moved! (%d,%d)", x, y)
            if pygame.display.get_init():
                pygame.mouse.set_visible(True)
            self.cursor_visible = True
            return False
        if event.type == pygame.KEYDOWN:
            key = _KEY_MAP.get(event.key)
            if key is None:
                return False
            return self.board.key_press(key)
        return False

    def update(self, elapsed_ms: int) -> None:
        """Advance the drop timer and the button polling by elapsed_ms."""
        self._advance_timer(elapsed_ms)
        self._poll_gpio(elapsed_ms)

    def _sync_timer(self) -> None:
        interval = self.board.timer_interval
        if interval != self._timer_interval:
            self._timer_interval = interval
            self._timer_elapsed = 0

    def _advance_timer(self, elapsed_ms: int) -> None:
        self._sync_timer()
        if self._timer_interval is None:
            return
        self._timer_elapsed += elapsed_ms
        while (
            self._timer_interval is not None
            and self._timer_elapsed >= max(self._timer_interval, 1)
        ):
            self._timer_elapsed -= max(self._timer_interval, 1)
            self.board.tick()
            self._sync_timer()

    def _poll_gpio(self, elapsed_ms: int) -> None:
        if self.gpio is None:
            return
        self._gpio_elapsed += elapsed_ms
        if self._gpio_elapsed >= POLL_INTERVAL_MS:
            self._gpio_elapsed %= POLL_INTERVAL_MS
            self.gpio.refresh()

    def _font(self, size: int) -> pygame.font.Font:
        if not pygame.font.get_init():
            pygame.font.init()
        font = self._fonts.get(size)
        if font is None:
            font = pygame.font.Font(None, size)
            self._fonts[size] = font
        return font

    def _text(
        self,
        surface: pygame.Surface,
        text: str,
        rect: pygame.Rect,
        size: int,
        align: str = "center",
    ) -> None:
        image = self._font(size).render(text, True, WHITE)
        placed = image.get_rect()
        if align == "top":
            placed.midtop = rect.midtop
        elif align == "bottom":
            placed.midbottom = rect.midbottom
        else:
            placed.center = rect.center
        surface.blit(image, placed)

    def _draw_square(
        self, surface: pygame.Surface, x: int, y: int, shape: TetrixShape
    ) -> None:
        sw, sh = self.square_width, self.square_height
        color = square_color(shape)
        pygame.draw.rect(surface, color, (x + 1, y + 1, sw - 2, sh - 2))
        light = _lighter(color)
        pygame.draw.line(surface, light, (x, y + sh - 1), (x, y))
        pygame.draw.line(surface, light, (x, y), (x + sw - 1, y))
        dark = _darker(color)
        pygame.draw.line(surface, dark, (x + 1, y + sh - 1), (x + sw - 1, y + sh - 1))
        pygame.draw.line(surface, dark, (x + sw - 1, y + sh - 1), (x + sw - 1, y + 1))

    def _draw_board(self, surface: pygame.Surface) -> None:
        pygame.draw.rect(surface, CYAN, self.board_rect, 1)
        rect = self.contents_rect
        if self.board.is_paused:
            self._text(surface, "Pause", rect, 40)
            return

        sw, sh = self.square_width, self.square_height
        height = TetrixBoard.HEIGHT
        board_top = rect.bottom - height * sh
        for y in range(height):
            for x in range(TetrixBoard.WIDTH):
                shape = self.board.shape_at(x, y)
                if shape != TetrixShape.NO_SHAPE:
                    self._draw_square(
                        surface, rect.left + x * sw, board_top + (height - y - 1) * sh, shape
                    )
        shape = self.board.cur_piece.shape
        for x, y in self.board.current_squares():
            self._draw_square(
                surface, rect.left + x * sw, board_top + (height - y - 1) * sh, shape
            )

    def _draw_next_piece(self, surface: pygame.Surface) -> None:
        pygame.draw.rect(surface, CYAN, self.next_rect, 1)
        piece = self.board.next_piece
        if piece.shape == TetrixShape.NO_SHAPE:
            return
        sw, sh = self.square_width, self.square_height
        dx = piece.max_x() - piece.min_x() + 1
        dy = piece.max_y() - piece.min_y() + 1
        pixmap = pygame.Surface((dx * sw, dy * sh))
        pixmap.fill(BLACK)
        for x, y in piece.coords:
            self._draw_square(
                pixmap, (x - piece.min_x()) * sw, (y - piece.min_y()) * sh, piece.shape
            )
        placed = pixmap.get_rect(center=self.next_rect.center)
        surface.blit(pixmap, placed)

    def _draw_counter(self, surface: pygame.Surface, rect: pygame.Rect, value: int) -> None:
        pygame.draw.rect(surface, CYAN, rect, 1)
        self._text(surface, str(value), rect, max(12, rect.height * 3 // 4))

    def draw(self, surface: pygame.Surface) -> None:
        """Draw the whole window onto surface."""
        surface.fill(BLACK)
        self._text(surface, self.CAPTION, self.caption_rect.inflate(0, -10), 60, "top")
        pygame.draw.rect(surface, CYAN, self.caption_rect, 5)
        for text, rect in self.label_rects.items():
            self._text(surface, text, rect, 28, "bottom")
        self._draw_next_piece(surface)
        self._draw_counter(surface, self.level_rect, self.board.level)
        self._draw_counter(surface, self.score_rect, self.board.score)
        self._draw_counter(surface, self.lines_rect, self.board.lines_removed)
        self._draw_board(surface)

    def run(self) -> None:
        """Open the window and run the game loop until it is closed."""
        pygame.init()
        try:
            info = pygame.display.Info()
            logger.info(
                "Original Screen Size : Width: %d Height: %d",
                info.current_w,
                info.current_h,
            )
            screen = pygame.display.set_mode(self.size)
            pygame.display.set_caption(self.TITLE)
            pygame.mouse.set_visible(False)
            self.cursor_visible = False
            clock = pygame.time.Clock()
            running = True
            while running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        running = False
                    else:
                        self.handle_event(event)
                self.update(clock.tick(60))
                self.draw(screen)
                pygame.display.flip()
        finally:
            pygame.quit()


def main(argv: list[str] | None = None) -> int:
    """Start the game."""
    parser = argparse.ArgumentParser(description="Falling-blocks puzzle game.")
    parser.add_argument(
        "--gpio-dir", default=SYSFS_GPIO_DIR, help="directory of the GPIO pins"
    )
    parser.add_argument(
        "--no-gpio", action="store_true", help="do not poll the button panel"
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    board = TetrixBoard()
    gpio = None if args.no_gpio else GpioButtons(board, args.gpio_dir)
    TetrixWindow(board, gpio).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())