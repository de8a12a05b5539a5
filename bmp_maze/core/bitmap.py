"""
Packed 1-bit pixel buffer for the maze image.

The image is (2W+1) x (2H+1) pixels. Odd rows/columns hold cells, even ones
hold walls, so grid cell (row, col) sits at storage pixel (2*row+1, 2*col+1)
and the passage between two neighbours is the pixel between their cell pixels.

Rows are packed most-significant-bit first and padded to a 4 byte boundary,
which is the layout BMP expects for pixel data. Storage rows are kept in file
order (BMP stores the bottom image row first); nothing here flips them.
"""
import logging
from typing import Tuple

import numpy as np

from bmp_maze.core.grid import Grid

logger = logging.getLogger(__name__)

BITS_PER_PIXEL = 1


def image_size(maze_width: int, maze_height: int) -> Tuple[int, int]:
    return 2 * maze_width + 1, 2 * maze_height + 1


def packed_row_stride(image_width: int) -> int:
    """Bytes per stored row: ceil(bits / 8) rounded up to a multiple of 4."""
    return ((image_width * BITS_PER_PIXEL + 31) // 32) * 4


def cell_bit_address(index: int, maze_width: int, row_stride: int) -> Tuple[int, int]:
    """
    (byte offset, bit in byte) of the pixel that represents cell 'index'.
    Bit 0 is the most significant bit of the byte.
    """
    row, col = divmod(index, maze_width)
    bit = (2 * row + 1) * row_stride * 8 + (2 * col + 1)
    return divmod(bit, 8)


def passage_bit_address(byte: int, bit: int, dir_bit: int, row_stride: int) -> Tuple[int, int]:
    """
    Address of the passage pixel next to the cell pixel at (byte, bit).
    North/south move one packed row, east/west one bit with carry across bytes.
    """
    if dir_bit == Grid.NORTH:
        return byte - row_stride, bit
    if dir_bit == Grid.SOUTH:
        return byte + row_stride, bit
    if dir_bit == Grid.EAST:
        if bit == 7:
            return byte + 1, 0
        return byte, bit + 1
    if dir_bit == Grid.WEST:
        if bit == 0:
            return byte - 1, 7
        return byte, bit - 1
    raise ValueError(f"Unknown direction bit {dir_bit}")


class PixelBuffer:
    __slots__ = ('maze_width', 'maze_height', 'image_width', 'image_height',
                 'row_stride', 'data')

    def __init__(self, maze_width: int, maze_height: int):
        if not (1 <= maze_width <= Grid.MAX_SIDE and 1 <= maze_height <= Grid.MAX_SIDE):
            raise ValueError(f"Maze size {maze_width}x{maze_height} cannot be encoded")
        self.maze_width = maze_width
        self.maze_height = maze_height
        self.image_width, self.image_height = image_size(maze_width, maze_height)
        self.row_stride = packed_row_stride(self.image_width)
        self.data = bytearray(self.row_stride * self.image_height)
        logger.debug(
            "Pixel buffer %dx%d px, stride %d, %d bytes",
            self.image_width, self.image_height, self.row_stride, len(self.data),
        )

    @classmethod
    def for_grid(cls, grid: Grid) -> "PixelBuffer":
        return cls(grid.width, grid.height)

    @classmethod
    def from_bytes(cls, maze_width: int, maze_height: int, data: bytes) -> "PixelBuffer":
        pixels = cls(maze_width, maze_height)
        if len(data) != len(pixels.data):
            raise ValueError(
                f"Pixel data is {len(data)} bytes, expected {len(pixels.data)}"
            )
        pixels.data[:] = data
        return pixels

    def set_bit(self, byte: int, bit: int):
        self.data[byte] |= 0x80 >> bit

    def is_set(self, byte: int, bit: int) -> bool:
        return (self.data[byte] & (0x80 >> bit)) != 0

    def mark_cell(self, index: int) -> Tuple[int, int]:
        byte, bit = cell_bit_address(index, self.maze_width, self.row_stride)
        self.set_bit(byte, bit)
        return byte, bit

    def mark_passage(self, index: int, dir_bit: int) -> Tuple[int, int]:
        byte, bit = cell_bit_address(index, self.maze_width, self.row_stride)
        byte, bit = passage_bit_address(byte, bit, dir_bit, self.row_stride)
        self.set_bit(byte, bit)
        return byte, bit

    def get_pixel(self, x: int, y: int) -> int:
        """Pixel value at column x of storage row y."""
        if not (0 <= x < self.image_width and 0 <= y < self.image_height):
            raise IndexError(f"Pixel ({x}, {y}) out of bounds")
        byte, bit = divmod(y * self.row_stride * 8 + x, 8)
        return 1 if self.is_set(byte, bit) else 0

    def to_array(self) -> np.ndarray:
        """uint8 array (image_height, image_width) of 0/1 values in storage order."""
        rows = np.frombuffer(bytes(self.data), dtype=np.uint8).reshape(
            self.image_height, self.row_stride
        )
        return np.unpackbits(rows, axis=1)[:, :self.image_width]

    def padding_is_clear(self) -> bool:
        rows = np.frombuffer(bytes(self.data), dtype=np.uint8).reshape(
            self.image_height, self.row_stride
        )
        return not np.unpackbits(rows, axis=1)[:, self.image_width:].any()
