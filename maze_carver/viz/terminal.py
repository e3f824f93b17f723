import sys
from maze_carver.core.events import EventSink
from maze_carver.core.grid import Grid

# ANSI escape sequences
CSI = "\x1b["
CLEAR = CSI + "2J"
HIDE_CURSOR = CSI + "?25l"
SHOW_CURSOR = CSI + "?25h"
UNDERLINE = CSI + "4m"
NO_UNDERLINE = CSI + "24m"


class TerminalRenderer(EventSink):
    """
    Draws a Grid in the terminal and keeps it current by redrawing single
    wall units as change events come in.
    """
    VERTICAL = '│'

    def __init__(self, stream=None):
        self.stream = stream if stream is not None else sys.stdout
        self.grid = None

    def move_to(self, fx: int, fy: int) -> str:
        return f"{CSI}{fy + 1};{fx + 1}H"

    def render_unit(self, fx: int, fy: int) -> str:
        grid = self.grid
        kind = grid.get_wall(fx, fy)

        if fy > 0 and fx % 2 == 0:
            # Separators carry no glyph, an opened one keeps the floor line going
            if kind != Grid.OPEN:
                return self.VERTICAL
            if grid.get_wall(fx - 1, fy) == Grid.BLOCKING and grid.get_wall(fx + 1, fy) == Grid.BLOCKING:
                return f"{UNDERLINE} {NO_UNDERLINE}"
            return ' '

        glyph = grid.get_overlay(fx, fy) or ' '
        if kind == Grid.BLOCKING:
            return f"{UNDERLINE}{glyph}{NO_UNDERLINE}"
        return glyph

    def draw(self, grid: Grid):
        """Full redraw from the top-left corner."""
        self.grid = grid
        out = [HIDE_CURSOR, CLEAR, self.move_to(0, 0)]
        for fy in range(grid.frame_height):
            out.extend(self.render_unit(fx, fy) for fx in range(grid.frame_width))
            out.append("\n")
        self.stream.write("".join(out))
        self.stream.flush()

    def redraw(self, fx: int, fy: int):
        if self.grid is None:
            return
        out = []
        # Neighboring separators depend on this unit's floor line
        for x in (fx - 1, fx, fx + 1):
            if 0 <= x < self.grid.frame_width:
                out.append(self.move_to(x, fy) + self.render_unit(x, fy))
        self.stream.write("".join(out))
        self.stream.flush()

    def finish(self):
        """Park the cursor below the maze and show it again."""
        rows = self.grid.frame_height if self.grid is not None else 0
        self.stream.write(self.move_to(0, rows) + SHOW_CURSOR)
        self.stream.flush()

    # EventSink hooks

    def write_header(self, rows: int, columns: int):
        self.grid = None
        self.stream.write(HIDE_CURSOR + CLEAR)
        self.stream.flush()

    def log_wall_opened(self, fx: int, fy: int):
        self.redraw(fx, fy)

    def log_overlay_set(self, fx: int, fy: int, glyph: str):
        self.redraw(fx, fy)

    def log_overlay_cleared(self, fx: int, fy: int):
        self.redraw(fx, fy)
