import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from bmp_maze.algo.dfs import RecursiveBacktracker

from bmp_maze.core.grid import Grid
from bmp_maze.core.bitmap import PixelBuffer

from bmp_maze.core.analysis import MazeInspector

class TestAnalysis(unittest.TestCase):
    def test_stats(self):
        w, h = 20, 20
        grid = Grid(w, h)
        RecursiveBacktracker(grid, seed=42).run_all()

        stats = MazeInspector.calculate_stats(grid)
        self.assertGreater(stats["dead_ends"], 0)
        self.assertEqual(stats["passages"], w * h - 1)
        self.assertEqual(stats["dead_ends"] + stats["corridors"] + stats["junctions"], w * h)

    def test_fresh_grid_is_not_perfect(self):
        self.assertFalse(MazeInspector.is_perfect(Grid(3, 3)))

    def test_loop_breaks_perfection(self):
        grid = Grid(6, 6)
        RecursiveBacktracker(grid, seed=11).run_all()
        self.assertTrue(MazeInspector.is_perfect(grid))

        # Open one closed wall; now there is a cycle
        for i in range(grid.size):
            if grid.neighbor(i, Grid.EAST) is not None and not grid.has_passage(i, Grid.EAST):
                grid.carve_path(i, Grid.EAST)
                break
        self.assertFalse(MazeInspector.is_perfect(grid))

    def test_disconnected_is_not_perfect(self):
        grid = Grid(2, 2)
        for i in range(4):
            grid.set_visited(i)
        grid.carve_path(0, Grid.EAST)
        grid.carve_path(2, Grid.EAST)
        grid.carve_path(0, Grid.SOUTH)
        self.assertTrue(MazeInspector.is_perfect(grid))

        split = Grid(2, 2)
        for i in range(4):
            split.set_visited(i)
        split.carve_path(0, Grid.EAST)
        split.carve_path(2, Grid.EAST)
        self.assertFalse(MazeInspector.is_connected(split))
        self.assertFalse(MazeInspector.is_perfect(split))

    def test_decode_from_bitmap_only(self):
        grid = Grid(7, 9)
        algo = RecursiveBacktracker(grid, seed=21)
        algo.run_all()

        rebuilt = MazeInspector.grid_from_bitmap(algo.pixels)
        self.assertEqual(rebuilt.cells.tobytes(), grid.cells.tobytes())

    def test_stray_pixel_detected(self):
        grid = Grid(4, 4)
        algo = RecursiveBacktracker(grid, seed=1)
        algo.run_all()
        self.assertTrue(MazeInspector.matches_bitmap(grid, algo.pixels))

        # Corner pixel (0, 0) is always wall
        algo.pixels.set_bit(0, 0)
        self.assertFalse(MazeInspector.matches_bitmap(grid, algo.pixels))

    def test_expected_image_of_empty_grid(self):
        img = MazeInspector.expected_image(Grid(3, 2))
        self.assertEqual(img.shape, (5, 7))
        self.assertEqual(int(img.sum()), 0)
        self.assertTrue(MazeInspector.matches_bitmap(Grid(3, 2), PixelBuffer(3, 2)))

if __name__ == '__main__':
    unittest.main()
