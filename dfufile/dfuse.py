# dfuse.py: DfuSe extensions from STMicroelectronics (UM0391)
#
# A DfuSe file starts with an 11 byte prefix, followed by <target_count>
# targets. Each target is a 274 byte header followed by elements, each an
# 8 byte header (address, size) and <size> bytes of data.

import struct
import logging
from typing import *

from .bytebuffer import ByteIterator
from .errors import (UnsupportedFormatVersion, SizeMismatch, MissingData, InvalidTargetSignature,
                     ElementCountMismatch, ElementSizeOverflow)

log = logging.getLogger("dfufile.dfuse")

PREFIX_SIGNATURE = b'DfuSe'
SUPPORTED_FORMAT_VERSIONS = (1,)
TARGET_SIGNATURE = b'Target'
TARGET_NAME_LENGTH = 255

_PREFIX_STRUCT = struct.Struct("<5sBIB")
_TARGET_STRUCT = struct.Struct("<6sBI%dsII" % TARGET_NAME_LENGTH)
_ELEMENT_STRUCT = struct.Struct("<II")

PREFIX_LENGTH = _PREFIX_STRUCT.size    # 11
TARGET_HEADER_LENGTH = _TARGET_STRUCT.size  # 274
ELEMENT_HEADER_LENGTH = _ELEMENT_STRUCT.size  # 8

class Prefix(NamedTuple):
    signature : bytes
    format_version : int
    total_size : int  # Whole file, including the suffix
    target_count : int

class Element(NamedTuple):
    "A block of firmware data to be loaded at <address>"
    address : int
    size : int
    offset : int  # File offset of the first data byte
    data : memoryview

    @property
    def end_address(self) -> int:
        return self.address + self.size

    def read_at(self, position : int, size : int) -> memoryview:
        """Returns up to <size> bytes of data starting at <position> within
           the element. Fewer bytes are returned at the element border.
        """
        if position < 0 or size < 0:
            raise ValueError("Negative position or size")
        return self.data[position:position + size]

    def __repr__(self):
        return "Element(address=0x%08X, size=%d, offset=0x%X)" % (self.address, self.size, self.offset)

class Target(NamedTuple):
    "Elements intended for one alternate setting of the device"
    alternate_setting : int
    has_name : bool
    name : str
    target_size : int  # Bytes of element headers and data, excluding the target header
    element_count : int
    elements : Tuple[Element, ...]

def _c_string(raw) -> str:
    "Text up to the first null byte. The rest of the buffer is often garbage."
    raw = bytes(raw)
    return raw.split(b'\0', 1)[0].decode('utf-8', errors='replace')

def decode_prefix(cursor : ByteIterator, file_size : int) -> Optional[Prefix]:
    """Returns the prefix at the position of <cursor>, or None if the data
       doesn't start with the DfuSe signature. <file_size> is the length
       of the complete file.
    """
    if cursor.remaining() < len(PREFIX_SIGNATURE) or \
       bytes(cursor.peek_bytes(len(PREFIX_SIGNATURE))) != PREFIX_SIGNATURE:
        return None
    offset = cursor.position
    if cursor.remaining() < PREFIX_LENGTH:
        raise MissingData("DfuSe prefix needs %d bytes but only %d precede the suffix" %
                          (PREFIX_LENGTH, cursor.remaining()), offset=offset)
    cursor.push_savepoint()
    prefix = Prefix(*cursor.read_struct(_PREFIX_STRUCT))
    log.debug("Prefix %s (%s)", prefix, cursor.pop_savepoint_hex())
    if prefix.format_version not in SUPPORTED_FORMAT_VERSIONS:
        raise UnsupportedFormatVersion(prefix.format_version, offset=offset + 5)
    if prefix.total_size != file_size:
        raise SizeMismatch(prefix.total_size, file_size, offset=offset + 6)
    return prefix

def decode_element(cursor : ByteIterator, room : int) -> Element:
    """Decodes one element. <room> is the number of bytes left in the
       current target.
    """
    offset = cursor.position
    if room < ELEMENT_HEADER_LENGTH:
        raise ElementSizeOverflow("Element header needs %d bytes but only %d are left in the target" %
                                  (ELEMENT_HEADER_LENGTH, room), offset=offset)
    (address, size) = cursor.read_struct(_ELEMENT_STRUCT)
    if size > room - ELEMENT_HEADER_LENGTH:
        raise ElementSizeOverflow("Element at 0x%08X has %d bytes but only %d are left in the target" %
                                  (address, size, room - ELEMENT_HEADER_LENGTH), offset=offset + 4)
    if size > cursor.remaining():
        raise ElementSizeOverflow("Element at 0x%08X has %d bytes but only %d precede the suffix" %
                                  (address, size, cursor.remaining()), offset=offset + 4)
    data_offset = cursor.position
    data = cursor.read_bytes(size)
    element = Element(address, size, data_offset, data)
    log.debug("%r", element)
    return element

def decode_target(cursor : ByteIterator) -> Target:
    offset = cursor.position
    (signature, alternate_setting, named, raw_name,
     target_size, element_count) = cursor.read_struct(_TARGET_STRUCT)
    if signature != TARGET_SIGNATURE:
        raise InvalidTargetSignature("Target signature is %r, expected %r" % (signature, TARGET_SIGNATURE),
                                     offset=offset)
    has_name = named != 0
    name = _c_string(raw_name) if has_name else ''
    if has_name and not name:
        log.warning("Target at 0x%X is flagged as named but the name is empty", offset)
    log.debug("Target alt=%d name=%r size=%d elements=%d", alternate_setting, name,
              target_size, element_count)

    elements : List[Element] = []
    consumed = 0
    while consumed < target_size:
        if len(elements) == element_count:
            raise ElementCountMismatch("Target declares %d elements but %d bytes of its %d remain" %
                                       (element_count, target_size - consumed, target_size),
                                       offset=cursor.position)
        element = decode_element(cursor, target_size - consumed)
        consumed += ELEMENT_HEADER_LENGTH + element.size
        elements.append(element)
    if len(elements) != element_count:
        raise ElementCountMismatch("Target declares %d elements but its %d bytes hold %d" %
                                   (element_count, target_size, len(elements)),
                                   offset=cursor.position)
    return Target(alternate_setting, has_name, name, target_size, element_count, tuple(elements))

def decode_targets(cursor : ByteIterator, target_count : int) -> Tuple[Target, ...]:
    "Decodes <target_count> consecutive targets, in file order"
    return tuple(decode_target(cursor) for _ in range(target_count))
