import random
from abc import ABC, abstractmethod
from typing import Iterator
from bmp_maze.core.grid import Grid
from bmp_maze.core.bitmap import PixelBuffer

class Generator(ABC):
    def __init__(self, grid: Grid, pixels: PixelBuffer = None, seed: int = None, rng=None):
        """
        rng: any object with randrange(n) returning a uniform int in [0, n).
        Defaults to random.Random(seed).
        """
        self.grid = grid
        self.pixels = pixels if pixels is not None else PixelBuffer.for_grid(grid)
        if (self.pixels.maze_width, self.pixels.maze_height) != (grid.width, grid.height):
            raise ValueError("Pixel buffer does not match grid dimensions")
        self.seed = seed
        self.rng = rng if rng is not None else random.Random(seed)
        self.step_count = 0

    @abstractmethod
    def run(self) -> Iterator[str]:
        """
        Yields status strings or progress updates.
        The grid and pixel buffer are modified in place.
        """
        pass

    def run_all(self):
        """Helper to run the generator to completion."""
        for _ in self.run():
            pass
