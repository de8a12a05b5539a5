import struct
from typing import Iterator, Tuple

# Event Types
EVT_VISIT = 0x02
EVT_CARVE = 0x03

MAGIC = b"BMPMAZE"

class EventWriter:
    def __init__(self, filename: str):
        self.filename = filename
        self.file = open(filename, "wb")

    def write_header(self, width: int, height: int):
        # Header: Magic "BMPMAZE" + Width (4b) + Height (4b)
        self.file.write(MAGIC)
        self.file.write(struct.pack(">II", width, height))

    def log_visit(self, index: int):
        # 1 byte type + 4 byte cell index
        self.file.write(struct.pack(">BI", EVT_VISIT, index))

    def log_carve(self, index: int, direction: int):
        # 1 byte type + 4 byte cell index + 1 byte direction bit
        self.file.write(struct.pack(">BIB", EVT_CARVE, index, direction))

    def close(self):
        if self.file:
            self.file.close()
            self.file = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

class EventReader:
    def __init__(self, filename: str):
        self.filename = filename
        self.file = open(filename, "rb")
        self.width = 0
        self.height = 0

    def read_header(self) -> Tuple[int, int]:
        magic = self.file.read(len(MAGIC))
        if magic != MAGIC:
            raise ValueError("Invalid event log file")
        data = self.file.read(8)
        if len(data) != 8:
            raise ValueError("Truncated event log header")
        self.width, self.height = struct.unpack(">II", data)
        return self.width, self.height

    def stream_events(self) -> Iterator[Tuple[int, Tuple]]:
        while True:
            type_byte = self.file.read(1)
            if not type_byte:
                break

            type_code = ord(type_byte)

            if type_code == EVT_VISIT:
                data = self.file.read(4)
                if len(data) != 4:
                    raise ValueError("Truncated visit event")
                (index,) = struct.unpack(">I", data)
                yield (type_code, (index,))

            elif type_code == EVT_CARVE:
                data = self.file.read(5)
                if len(data) != 5:
                    raise ValueError("Truncated carve event")
                index, d = struct.unpack(">IB", data)
                yield (type_code, (index, d))

            else:
                raise ValueError(f"Unknown event type 0x{type_code:02x}")

    def close(self):
        if self.file:
            self.file.close()
            self.file = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
