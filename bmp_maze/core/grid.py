from array import array
from typing import Iterator, Optional, Tuple

class Grid:
    # Passage bits (set = open towards that neighbour)
    NORTH = 0b00000001
    EAST  = 0b00000010
    SOUTH = 0b00000100
    WEST  = 0b00001000

    # Flags
    VISITED = 0b00010000

    ALL_PASSAGES = NORTH | EAST | SOUTH | WEST

    # Order used before shuffling
    DIRECTIONS = (NORTH, EAST, SOUTH, WEST)

    DROW = {NORTH: -1, SOUTH: 1, EAST: 0, WEST: 0}
    DCOL = {NORTH: 0, SOUTH: 0, EAST: 1, WEST: -1}
    OPPOSITE = {NORTH: SOUTH, SOUTH: NORTH, EAST: WEST, WEST: EAST}

    # Image side is 2n+1 pixels and must fit an unsigned 16-bit header field
    MAX_SIDE = 32767

    __slots__ = ('width', 'height', 'cells', 'event_writer')

    def __init__(self, width: int, height: int, event_writer=None):
        if not (1 <= width <= self.MAX_SIDE and 1 <= height <= self.MAX_SIDE):
            raise ValueError(
                f"Maze size {width}x{height} out of range (1..{self.MAX_SIDE} per side)"
            )
        self.width = width
        self.height = height
        self.event_writer = event_writer
        # 'B' (unsigned char) -> 1 byte per cell, everything closed and unvisited
        self.cells = array('B', [0] * (width * height))

        if self.event_writer:
            self.event_writer.write_header(width, height)

    @property
    def size(self) -> int:
        return self.width * self.height

    def get_index(self, row: int, col: int) -> int:
        if 0 <= row < self.height and 0 <= col < self.width:
            return row * self.width + col
        raise IndexError(f"Cell (row={row}, col={col}) out of bounds")

    def to_row_col(self, index: int) -> Tuple[int, int]:
        return divmod(index, self.width)

    def neighbor(self, index: int, dir_bit: int) -> Optional[int]:
        """Index of the neighbour in 'dir_bit', or None at the grid edge."""
        row, col = divmod(index, self.width)
        if dir_bit == self.NORTH:
            return index - self.width if row > 0 else None
        if dir_bit == self.SOUTH:
            return index + self.width if row < self.height - 1 else None
        if dir_bit == self.EAST:
            return index + 1 if col < self.width - 1 else None
        if dir_bit == self.WEST:
            return index - 1 if col > 0 else None
        raise ValueError(f"Unknown direction bit {dir_bit}")

    def carve_path(self, index: int, dir_bit: int) -> Optional[int]:
        """
        Opens the passage between cell 'index' and its neighbour in 'dir_bit'.
        The neighbour gets the OPPOSITE bit. Returns the neighbour index,
        or None when there is no neighbour in that direction.
        """
        other = self.neighbor(index, dir_bit)
        if other is None:
            return None # Cannot carve into void

        if self.event_writer:
            self.event_writer.log_carve(index, dir_bit)

        self.cells[index] |= dir_bit
        self.cells[other] |= self.OPPOSITE[dir_bit]
        return other

    def has_passage(self, index: int, dir_bit: int) -> bool:
        return (self.cells[index] & dir_bit) != 0

    def set_visited(self, index: int):
        self.cells[index] |= self.VISITED
        if self.event_writer:
            self.event_writer.log_visit(index)

    def is_visited(self, index: int) -> bool:
        return (self.cells[index] & self.VISITED) != 0

    def get_neighbors(self, index: int) -> Iterator[Tuple[int, int]]:
        """
        Yields (neighbor_index, direction_to_neighbor) for all valid grid neighbours.
        Does NOT check passages.
        """
        for dir_bit in self.DIRECTIONS:
            other = self.neighbor(index, dir_bit)
            if other is not None:
                yield (other, dir_bit)

    def get_open_neighbors(self, index: int) -> Iterator[int]:
        """Yields neighbour indices reachable through an open passage."""
        for other, dir_bit in self.get_neighbors(index):
            if self.cells[index] & dir_bit:
                yield other
