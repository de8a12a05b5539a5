import unittest
import sys
import os
import shutil

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from bmp_maze.main import main, EXIT_SUCCESS, EXIT_FAILURE, EXIT_USAGE

class TestCLI(unittest.TestCase):
    def setUp(self):
        os.makedirs("test_out", exist_ok=True)

    def tearDown(self):
        shutil.rmtree("test_out", ignore_errors=True)

    def test_generate_and_inspect(self):
        path = "test_out/cli.bmp"
        status = main(["generate", "--width", "8", "--height", "6", "--seed", "1", "--out", path])
        self.assertEqual(status, EXIT_SUCCESS)

        # 17 px -> 3 bytes -> 4 per row, 13 rows
        self.assertEqual(os.path.getsize(path), 32 + 4 * 13)
        self.assertEqual(main(["inspect", path]), EXIT_SUCCESS)

    def test_generate_is_repeatable_with_seed(self):
        a, b = "test_out/a.bmp", "test_out/b.bmp"
        main(["generate", "--width", "9", "--height", "9", "--seed", "77", "--out", a])
        main(["generate", "--width", "9", "--height", "9", "--seed", "77", "--out", b])
        with open(a, "rb") as fa, open(b, "rb") as fb:
            self.assertEqual(fa.read(), fb.read())

    def test_unwritable_output(self):
        status = main(["generate", "--width", "4", "--height", "4", "--out", "test_out/missing/maze.bmp"])
        self.assertEqual(status, EXIT_FAILURE)
        self.assertFalse(os.path.exists("test_out/missing"))

    def test_invalid_size(self):
        status = main(["generate", "--width", "0", "--height", "4", "--out", "test_out/zero.bmp"])
        self.assertEqual(status, EXIT_USAGE)
        self.assertFalse(os.path.exists("test_out/zero.bmp"))

    def test_replay(self):
        original, events, replayed = "test_out/orig.bmp", "test_out/gen.events", "test_out/replayed.bmp"
        status = main(["generate", "--width", "12", "--height", "5", "--seed", "3",
                       "--out", original, "--record-events", events])
        self.assertEqual(status, EXIT_SUCCESS)
        self.assertEqual(main(["replay", events, "--out", replayed]), EXIT_SUCCESS)

        with open(original, "rb") as fa, open(replayed, "rb") as fb:
            self.assertEqual(fa.read(), fb.read())

    def test_inspect_rejects_garbage(self):
        path = "test_out/garbage.bmp"
        with open(path, "wb") as f:
            f.write(b"not a bitmap at all, just some bytes")
        self.assertEqual(main(["inspect", path]), EXIT_FAILURE)
        self.assertEqual(main(["inspect", "test_out/nope.bmp"]), EXIT_FAILURE)

    def test_no_command(self):
        self.assertEqual(main([]), EXIT_USAGE)

if __name__ == '__main__':
    unittest.main()
