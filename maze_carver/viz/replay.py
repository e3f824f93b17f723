from typing import Iterable, Iterator, Tuple
from maze_carver.core.grid import Grid
from maze_carver.core.events import EVT_WALL_OPENED, EVT_OVERLAY_SET, EVT_OVERLAY_CLEARED


class EventAdapter:
    """
    Adapts a recorded event stream to look like a Generator for the renderers.
    Applies changes to the Grid as it iterates, so the grid's own sink sees them again.
    """
    def __init__(self, grid: Grid, events: Iterable[Tuple[int, Tuple]]):
        self.grid = grid
        self.events = events
        self.step_count = 0

    def run(self) -> Iterator[str]:
        for type_code, data in self.events:
            self.step_count += 1

            if type_code == EVT_WALL_OPENED:
                x, y = data
                self.grid.set_wall(x, y, Grid.OPEN)

            elif type_code == EVT_OVERLAY_SET:
                x, y, glyph = data
                self.grid.set_overlay(x, y, glyph)

            elif type_code == EVT_OVERLAY_CLEARED:
                x, y = data
                self.grid.clear_overlay(x, y)

            yield "Replay"

        yield "Done"

    def run_all(self):
        for _ in self.run():
            pass
