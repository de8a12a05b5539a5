import logging
import struct
from bmp_maze.core.bitmap import PixelBuffer, BITS_PER_PIXEL

logger = logging.getLogger(__name__)

class BitmapSerializer:
    MAGIC = b"BM"

    FILE_HEADER_SIZE = 14
    INFO_HEADER_SIZE = 12 # OS/2 BITMAPCOREHEADER
    PLANES = 1

    # Entry 0 = background (black), entry 1 = foreground (white). B, G, R order.
    COLOR_TABLE = bytes((0x00, 0x00, 0x00, 0xFF, 0xFF, 0xFF))

    PIXEL_OFFSET = FILE_HEADER_SIZE + INFO_HEADER_SIZE + len(COLOR_TABLE)

    @staticmethod
    def file_size(pixels: PixelBuffer) -> int:
        return BitmapSerializer.PIXEL_OFFSET + len(pixels.data)

    @staticmethod
    def encode(pixels: PixelBuffer) -> bytes:
        """
        Builds the complete file image.
        Format (little-endian):
        - MAGIC "BM" (2 bytes)
        - FILE_SIZE (4 bytes)
        - RESERVED (4 bytes, zero)
        - PIXEL_OFFSET (4 bytes)
        - INFO_HEADER_SIZE (4 bytes, 12)
        - WIDTH, HEIGHT, PLANES, BPP (2 bytes each)
        - COLOR_TABLE (2 x B,G,R)
        - PIXEL DATA (rows bottom-to-top, 4 byte aligned)
        """
        file_header = struct.pack(
            "<2sIHHI",
            BitmapSerializer.MAGIC,
            BitmapSerializer.file_size(pixels),
            0, 0,
            BitmapSerializer.PIXEL_OFFSET,
        )
        info_header = struct.pack(
            "<IHHHH",
            BitmapSerializer.INFO_HEADER_SIZE,
            pixels.image_width,
            pixels.image_height,
            BitmapSerializer.PLANES,
            BITS_PER_PIXEL,
        )
        return b"".join((file_header, info_header, BitmapSerializer.COLOR_TABLE, bytes(pixels.data)))

    @staticmethod
    def save(pixels: PixelBuffer, filepath: str) -> int:
        """
        Writes the bitmap in a single write call. Returns the number of bytes written.
        OSError from opening or writing the destination propagates to the caller.
        """
        data = BitmapSerializer.encode(pixels)
        with open(filepath, "wb") as f:
            f.write(data)
        logger.debug("Wrote %d bytes to %s", len(data), filepath)
        return len(data)

    @staticmethod
    def decode(data: bytes) -> PixelBuffer:
        if len(data) < BitmapSerializer.PIXEL_OFFSET:
            raise ValueError("File too short for a bitmap header")

        magic, size, _, _, offset = struct.unpack_from("<2sIHHI", data, 0)
        if magic != BitmapSerializer.MAGIC:
            raise ValueError("Invalid file format")
        if size != len(data):
            raise ValueError(f"Header says {size} bytes, file has {len(data)}")

        header_size, width, height, planes, bpp = struct.unpack_from(
            "<IHHHH", data, BitmapSerializer.FILE_HEADER_SIZE
        )
        if header_size != BitmapSerializer.INFO_HEADER_SIZE:
            raise ValueError(f"Unsupported info header size {header_size}")
        if planes != BitmapSerializer.PLANES or bpp != BITS_PER_PIXEL:
            raise ValueError(f"Unsupported image: {planes} planes, {bpp} bpp")
        if width % 2 == 0 or height % 2 == 0 or width < 3 or height < 3:
            raise ValueError(f"{width}x{height} px is not a maze image")

        pixels = PixelBuffer.from_bytes((width - 1) // 2, (height - 1) // 2, data[offset:])
        return pixels

    @staticmethod
    def load(filepath: str) -> PixelBuffer:
        with open(filepath, "rb") as f:
            data = f.read()
        return BitmapSerializer.decode(data)
