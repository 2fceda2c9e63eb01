import struct
import unittest

from .bytebuffer import ByteIterator
from .errors import Truncated

class TestByteIterator(unittest.TestCase):
    def setUp(self):
        self.it = ByteIterator(b'\x01\x34\x12\x78\x56\x34\x12\xAB')

    def test_little_endian(self):
        self.assertEqual(self.it.read_uint8(), 0x01)
        self.assertEqual(self.it.read_uint16(), 0x1234)
        self.assertEqual(self.it.read_uint32(), 0x12345678)
        self.assertEqual(self.it.position, 7)
        self.assertEqual(self.it.remaining(), 1)
        self.assertEqual(len(self.it), 1)

    def test_peek_does_not_advance(self):
        self.assertEqual(bytes(self.it.peek_bytes(3)), b'\x01\x34\x12')
        self.assertEqual(self.it.position, 0)
        view = self.it.read_bytes(3)
        self.assertIsInstance(view, memoryview)
        self.assertEqual(bytes(view), b'\x01\x34\x12')
        self.assertEqual(self.it.position, 3)

    def test_truncated(self):
        self.it.skip(6)
        with self.assertRaises(Truncated):
            self.it.read_uint32()
        # A failed read doesn't move the position
        self.assertEqual(self.it.position, 6)
        self.assertEqual(self.it.read_uint16(), 0xAB12)
        with self.assertRaises(Truncated):
            self.it.read_uint8()
        with self.assertRaises(Truncated):
            self.it.peek_bytes(1)
        self.assertEqual(self.it.position, 8)

    def test_seek(self):
        self.it.seek(8)
        self.assertEqual(self.it.remaining(), 0)
        self.it.seek(3)
        self.assertEqual(self.it.read_uint8(), 0x78)
        with self.assertRaises(Truncated):
            self.it.seek(9)
        with self.assertRaises(Truncated):
            self.it.seek(-1)
        self.assertEqual(self.it.position, 4)

    def test_base_offset(self):
        it = ByteIterator(b'\x00\x00\x00', base=0x100)
        self.assertEqual(it.position, 0x100)
        it.seek(0x102)
        self.assertEqual(it.remaining(), 1)
        with self.assertRaises(Truncated) as cm:
            it.read_uint16()
        self.assertEqual(cm.exception.offset, 0x102)

    def test_read_struct(self):
        self.assertEqual(self.it.read_struct(struct.Struct("<BH")), (0x01, 0x1234))

    def test_savepoint(self):
        self.it.skip(1)
        self.it.push_savepoint()
        self.it.read_uint16()
        self.assertEqual(self.it.pop_savepoint_hex(), '0x3412')

    def test_empty(self):
        it = ByteIterator(b'')
        self.assertEqual(it.remaining(), 0)
        self.assertEqual(bytes(it.read_bytes(0)), b'')
        with self.assertRaises(Truncated):
            it.read_uint8()

if __name__ == '__main__':
    unittest.main()
