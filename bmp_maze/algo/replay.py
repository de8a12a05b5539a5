from typing import Iterator
from bmp_maze.core.grid import Grid
from bmp_maze.core.bitmap import PixelBuffer
from bmp_maze.core.events import EventReader, EVT_VISIT, EVT_CARVE

class EventAdapter:
    """
    Adapts an EventReader stream to look like a Generator.
    Applies each recorded visit/carve to the grid and pixel buffer as it iterates.
    """
    def __init__(self, grid: Grid, pixels: PixelBuffer, reader: EventReader):
        self.grid = grid
        self.pixels = pixels
        self.reader = reader
        self.step_count = 0

    def run(self) -> Iterator[str]:
        count = 0
        for type_code, data in self.reader.stream_events():
            count += 1

            if type_code == EVT_VISIT:
                (index,) = data
                self.grid.set_visited(index)
                self.pixels.mark_cell(index)

            elif type_code == EVT_CARVE:
                index, d = data
                if self.grid.carve_path(index, d) is None:
                    raise ValueError(f"Carve event leaves the grid at cell {index}")
                self.pixels.mark_passage(index, d)
                self.step_count += 1

            # Yield every N steps
            if count % 100 == 0:
                yield "Replay"

        yield "Done"

    def run_all(self):
        for _ in self.run():
            pass
