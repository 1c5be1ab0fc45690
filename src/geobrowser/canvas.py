"""Braille character raster for drawing frames in a terminal cell grid.

Each terminal cell holds a 2x4 block of dots, so a ``cols`` x ``rows`` canvas
has a ``2*cols`` x ``4*rows`` dot surface.
"""

from __future__ import annotations

from typing import Iterable

from .models import Frame, Segment

BRAILLE_BASE = 0x2800
DOTS_X = 2
DOTS_Y = 4

# Bit for the dot at (x, y) inside one cell.
_DOT_BITS = (
    (0x01, 0x08),
    (0x02, 0x10),
    (0x04, 0x20),
    (0x40, 0x80),
)


class BrailleCanvas:
    def __init__(self, cols: int, rows: int) -> None:
        if cols <= 0 or rows <= 0:
            raise ValueError(f"Canvas size must be positive, got {cols}x{rows}")
        self.cols = cols
        self.rows = rows
        self._bits = [[0] * cols for _ in range(rows)]
        self._marks = [[False] * cols for _ in range(rows)]
        self._text: dict[tuple[int, int], str] = {}

    @property
    def dot_width(self) -> int:
        return self.cols * DOTS_X

    @property
    def dot_height(self) -> int:
        return self.rows * DOTS_Y

    @property
    def surface_size(self) -> tuple[float, float]:
        """Projection target size; the far edge lands on the last dot."""
        return (float(self.dot_width - 1), float(self.dot_height - 1))

    def set_dot(self, x: int, y: int, highlighted: bool = False) -> None:
        if not (0 <= x < self.dot_width and 0 <= y < self.dot_height):
            return
        col, dx = divmod(x, DOTS_X)
        row, dy = divmod(y, DOTS_Y)
        self._bits[row][col] |= _DOT_BITS[dy][dx]
        if highlighted:
            self._marks[row][col] = True

    def draw_line(self, x1: float, y1: float, x2: float, y2: float, highlighted: bool = False) -> None:
        """Bresenham line between two surface points; off-canvas dots are dropped."""
        x, y = int(round(x1)), int(round(y1))
        x_end, y_end = int(round(x2)), int(round(y2))
        dx = abs(x_end - x)
        dy = -abs(y_end - y)
        step_x = 1 if x < x_end else -1
        step_y = 1 if y < y_end else -1
        err = dx + dy
        while True:
            self.set_dot(x, y, highlighted)
            if x == x_end and y == y_end:
                break
            e2 = 2 * err
            if e2 >= dy:
                err += dy
                x += step_x
            if e2 <= dx:
                err += dx
                y += step_y

    def draw_segments(self, segments: Iterable[Segment]) -> None:
        for segment in segments:
            self.draw_line(segment.x1, segment.y1, segment.x2, segment.y2, segment.highlighted)

    def draw_frame(self, frame: Frame) -> None:
        self.draw_segments(frame.segments)

    def put_text(self, col: int, row: int, text: str) -> None:
        """Overlay plain characters starting at a cell; clipped at the edge."""
        if not 0 <= row < self.rows:
            return
        for offset, ch in enumerate(text):
            target = col + offset
            if 0 <= target < self.cols:
                self._text[(row, target)] = ch

    def cells(self) -> list[list[tuple[str, bool]]]:
        """Rows of ``(character, highlighted)`` pairs."""
        out: list[list[tuple[str, bool]]] = []
        for row in range(self.rows):
            line: list[tuple[str, bool]] = []
            for col in range(self.cols):
                text = self._text.get((row, col))
                if text is not None:
                    line.append((text, False))
                    continue
                bits = self._bits[row][col]
                ch = chr(BRAILLE_BASE + bits) if bits else " "
                line.append((ch, self._marks[row][col]))
            out.append(line)
        return out

    def to_text(self) -> str:
        return "\n".join("".join(ch for ch, _ in line).rstrip() for line in self.cells())
