# bytebuffer.py: Bounds-checked reading from an in-memory byte buffer
#
# All multi-byte integers are little endian, as in the DFU specification.
# The read position can never move beyond the end of the buffer, which is
# what keeps the decoders from reading out of bounds.

import struct
from typing import *

from .errors import Truncated

class ByteIterator(object):
    """Reads bytes and little endian integers from <data>, starting at
       position 0. Slices are returned as memoryviews into <data>, not
       copies. <base> is the file offset of data[0], used in error messages.
    """
    def __init__(self, data, base : int = 0):
        self._data = memoryview(data)
        if self._data.format != 'B' or self._data.ndim != 1:
            self._data = self._data.cast('B')
        self._pos = 0
        self._base = base
        # Positions of savepoints, with the newest savepoint at the end
        self._locations : List[int] = []

    @property
    def position(self) -> int:
        "Absolute file offset of the next byte to read"
        return self._base + self._pos

    def remaining(self) -> int:
        return len(self._data) - self._pos

    def _require(self, size):
        if size < 0:
            raise ValueError("Negative size %d" % size)
        if self.remaining() < size:
            raise Truncated("Need %d bytes but only %d are left" % (size, self.remaining()),
                            offset=self.position)

    #########################################
    ## Reading

    def seek(self, offset : int):
        "Moves to the absolute file offset <offset>"
        pos = offset - self._base
        if pos < 0 or pos > len(self._data):
            raise Truncated("Cannot seek to 0x%X, outside the buffer" % offset,
                            offset=self.position)
        self._pos = pos

    def skip(self, size):
        self._require(size)
        self._pos += size

    def peek_bytes(self, size) -> memoryview:
        self._require(size)
        return self._data[self._pos:self._pos + size]

    def read_bytes(self, size) -> memoryview:
        view = self.peek_bytes(size)
        self._pos += size
        return view

    def read_uint8(self) -> int:
        self._require(1)
        byte = self._data[self._pos]
        self._pos += 1
        return byte

    def read_uint16(self) -> int:
        return self.read_struct(_UINT16)[0]

    def read_uint32(self) -> int:
        return self.read_struct(_UINT32)[0]

    def read_struct(self, fmt : struct.Struct) -> tuple:
        "Decodes one fixed-size record described by <fmt>"
        return fmt.unpack(self.read_bytes(fmt.size))

    def __len__(self):
        "Returns the remaining number of bytes"
        return self.remaining()

    def __repr__(self):
        return "ByteIterator(position=0x%X, remaining=%d)" % (self.position, self.remaining())

    #########################################
    # Debugging

    def push_savepoint(self):
        self._locations.append(self._pos)
    def pop_savepoint(self) -> memoryview:
        "Returns the data consumed since push_savepoint()"
        saved = self._locations.pop()
        return self._data[saved:self._pos]
    def pop_savepoint_hex(self) -> str:
        "Returns the data consumed since push_savepoint() as a hex string"
        return '0x' + ''.join("%02X" % ch for ch in self.pop_savepoint())

_UINT16 = struct.Struct('<H')
_UINT32 = struct.Struct('<I')
