import unittest
import sys
import os

# Headless SDL so the surface code runs without a display
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pygame

from bmp_maze.core.grid import Grid
from bmp_maze.algo.dfs import RecursiveBacktracker
from bmp_maze.viz.viewer import BitmapViewer

class TestViewer(unittest.TestCase):
    def test_surface_matches_bitmap(self):
        grid = Grid(5, 4)
        algo = RecursiveBacktracker(grid, seed=8)
        algo.run_all()

        viewer = BitmapViewer(algo.pixels)
        try:
            surface = viewer.build_surface()
        except pygame.error as e:
            self.skipTest(f"pygame surface unavailable: {e}")

        self.assertEqual(surface.get_size(), (11, 9))
        # Outer frame is wall, every cell pixel is open
        self.assertEqual(tuple(surface.get_at((0, 0)))[:3], (0, 0, 0))
        # Storage row 1 (cell row 0) is the second row from the bottom on screen
        self.assertEqual(tuple(surface.get_at((1, 7)))[:3], (255, 255, 255))

    def test_fit_to_screen(self):
        grid = Grid(4, 4)
        algo = RecursiveBacktracker(grid, seed=1)
        viewer = BitmapViewer(algo.pixels, generator=algo, width=1280, height=720)
        viewer.fit_to_screen()
        self.assertAlmostEqual(viewer.scale, 640 / 9)
        self.assertAlmostEqual(viewer.offset_y, 40.0)

    def test_finish_completes_generation(self):
        grid = Grid(6, 6)
        algo = RecursiveBacktracker(grid, seed=2)
        viewer = BitmapViewer(algo.pixels, generator=algo)
        viewer.finish()
        self.assertTrue(viewer.gen_finished)
        self.assertEqual(algo.step_count, 35)

if __name__ == '__main__':
    unittest.main()
