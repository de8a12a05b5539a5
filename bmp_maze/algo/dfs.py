from typing import Iterator, List, Tuple
from bmp_maze.core.grid import Grid
from bmp_maze.algo.base import Generator

class RecursiveBacktracker(Generator):
    """
    Randomized depth-first search that carves the maze and paints the bitmap
    in the same step. Every cell gets its own freshly shuffled direction order.

    Recursion is kept on an explicit stack of (cell, remaining directions)
    frames, so a 32k x 32k grid needs heap, not interpreter stack.
    """

    def shuffled_directions(self) -> List[int]:
        # Fisher-Yates over N, E, S, W
        dirs = list(Grid.DIRECTIONS)
        for i in range(len(dirs) - 1, 0, -1):
            j = self.rng.randrange(i + 1)
            dirs[i], dirs[j] = dirs[j], dirs[i]
        return dirs

    def run(self) -> Iterator[str]:
        grid = self.grid
        pixels = self.pixels

        stack: List[Tuple[int, Iterator[int]]] = []

        def visit(index: int):
            grid.set_visited(index)
            pixels.mark_cell(index)
            stack.append((index, iter(self.shuffled_directions())))

        start = self.rng.randrange(grid.size)
        visit(start)

        while stack:
            current, dirs = stack[-1]

            carved = False
            for dir_bit in dirs:
                nxt = grid.neighbor(current, dir_bit)
                if nxt is None or grid.is_visited(nxt):
                    continue

                grid.carve_path(current, dir_bit)
                pixels.mark_passage(current, dir_bit)
                visit(nxt)
                carved = True
                break

            if carved:
                self.step_count += 1
                # Yield every N steps to keep callers responsive without spamming
                if self.step_count % 100 == 0:
                    yield f"Carving... Stack: {len(stack)}"
            else:
                # Backtrack
                stack.pop()

        yield "Done"
