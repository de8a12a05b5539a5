from typing import Dict, Set, Tuple

import numpy as np

from bmp_maze.core.grid import Grid
from bmp_maze.core.bitmap import PixelBuffer

Passage = Tuple[int, int]

def popcount_passages(val: int) -> int:
    c = 0
    if val & Grid.NORTH: c += 1
    if val & Grid.EAST: c += 1
    if val & Grid.SOUTH: c += 1
    if val & Grid.WEST: c += 1
    return c

class MazeInspector:
    @staticmethod
    def passages(grid: Grid) -> Set[Passage]:
        """Open passages as (a, b) index pairs with a < b, read from the cell masks."""
        found = set()
        for i in range(grid.size):
            # East and south are enough to see every passage exactly once
            if grid.cells[i] & Grid.EAST:
                found.add((i, i + 1))
            if grid.cells[i] & Grid.SOUTH:
                found.add((i, i + grid.width))
        return found

    @staticmethod
    def decode_passages(pixels: PixelBuffer) -> Set[Passage]:
        """Rebuilds the passage set from the bitmap alone."""
        img = pixels.to_array()
        w = pixels.maze_width

        found = set()
        # Pixels between horizontally adjacent cells: (2r+1, 2c+2)
        rows, cols = np.nonzero(img[1:-1:2, 2:-1:2])
        for r, c in zip(rows.tolist(), cols.tolist()):
            i = r * w + c
            found.add((i, i + 1))
        # Pixels between vertically adjacent cells: (2r+2, 2c+1)
        rows, cols = np.nonzero(img[2:-1:2, 1:-1:2])
        for r, c in zip(rows.tolist(), cols.tolist()):
            i = r * w + c
            found.add((i, i + w))
        return found

    @staticmethod
    def expected_image(grid: Grid) -> np.ndarray:
        """The 0/1 image the cell masks describe, in bitmap storage order."""
        cells = np.frombuffer(grid.cells.tobytes(), dtype=np.uint8).reshape(grid.height, grid.width)
        img = np.zeros((2 * grid.height + 1, 2 * grid.width + 1), dtype=np.uint8)
        img[1::2, 1::2] = (cells & Grid.VISITED) != 0
        img[1::2, 2:-1:2] = (cells[:, :-1] & Grid.EAST) != 0
        img[2:-1:2, 1::2] = (cells[:-1, :] & Grid.SOUTH) != 0
        return img

    @staticmethod
    def matches_bitmap(grid: Grid, pixels: PixelBuffer) -> bool:
        """True when the bitmap holds exactly the visited cells and open passages."""
        return bool(np.array_equal(MazeInspector.expected_image(grid), pixels.to_array())) \
            and pixels.padding_is_clear()

    @staticmethod
    def is_connected(grid: Grid) -> bool:
        seen = bytearray(grid.size)
        seen[0] = 1
        stack = [0]
        reached = 1
        while stack:
            current = stack.pop()
            for other in grid.get_open_neighbors(current):
                if not seen[other]:
                    seen[other] = 1
                    reached += 1
                    stack.append(other)
        return reached == grid.size

    @staticmethod
    def is_perfect(grid: Grid) -> bool:
        """Spanning tree check: every cell visited, n-1 passages, one component."""
        if not all(grid.is_visited(i) for i in range(grid.size)):
            return False
        if len(MazeInspector.passages(grid)) != grid.size - 1:
            return False
        return MazeInspector.is_connected(grid)

    @staticmethod
    def grid_from_bitmap(pixels: PixelBuffer) -> Grid:
        """Grid whose masks and visited flags are read back from the pixels."""
        grid = Grid(pixels.maze_width, pixels.maze_height)
        img = pixels.to_array()
        for i in range(grid.size):
            row, col = grid.to_row_col(i)
            if img[2 * row + 1, 2 * col + 1]:
                grid.cells[i] |= Grid.VISITED
        for a, b in MazeInspector.decode_passages(pixels):
            grid.carve_path(a, Grid.EAST if b == a + 1 else Grid.SOUTH)
        return grid

    @staticmethod
    def calculate_stats(grid: Grid) -> Dict[str, float]:
        dead_ends = 0
        corridors = 0
        junctions = 0

        for i in range(grid.size):
            exits = popcount_passages(grid.cells[i])
            if exits == 1: dead_ends += 1
            elif exits == 2: corridors += 1
            elif exits >= 3: junctions += 1

        total = grid.size
        return {
            "passages": len(MazeInspector.passages(grid)),
            "dead_ends": dead_ends,
            "corridors": corridors,
            "junctions": junctions,
            "dead_end_percent": (dead_ends / total) * 100 if total > 0 else 0
        }
