# suffix.py: The 16 byte suffix found at the end of every DFU file

import struct
import logging
from typing import *

from . import crc
from .errors import InvalidSignature, InvalidLength, ChecksumMismatch, TooShort

log = logging.getLogger("dfufile.suffix")

SUFFIX_LENGTH = 16
SUFFIX_SIGNATURE = b'UFD'  # "DFU" in reversed order

DFU_SPEC_STANDARD = 0x0100
DFU_SPEC_DFUSE = 0x011A

WILDCARD_ID = 0xFFFF

_SUFFIX_STRUCT = struct.Struct("<HHHH3sBI")

class Suffix(NamedTuple):
    "Identification and integrity data of a DFU file"
    device_bcd : int    # Firmware version, or 0xFFFF if ignored
    product_id : int    # 0xFFFF if ignored
    vendor_id : int     # 0xFFFF if ignored
    dfu_spec_bcd : int  # 0x0100 for standard files, 0x011A for DfuSe
    signature : bytes
    length : int
    checksum : int

    @property
    def is_dfuse(self) -> bool:
        return self.dfu_spec_bcd == DFU_SPEC_DFUSE

def decode_suffix(buffer) -> Suffix:
    """Decodes the last 16 bytes of the complete file <buffer> and verifies
       the signature, the length field and the CRC, in that order.
    """
    if len(buffer) < SUFFIX_LENGTH:
        raise TooShort("File has %d bytes, smaller than the %d byte suffix" % (len(buffer), SUFFIX_LENGTH))
    offset = len(buffer) - SUFFIX_LENGTH
    suffix = Suffix(*_SUFFIX_STRUCT.unpack(memoryview(buffer)[offset:]))
    log.debug("Suffix %s", suffix)

    if suffix.signature != SUFFIX_SIGNATURE:
        raise InvalidSignature("Suffix signature is %r, expected %r" % (suffix.signature, SUFFIX_SIGNATURE),
                               offset=offset + 8)
    if suffix.length != SUFFIX_LENGTH:
        raise InvalidLength("Suffix length is %d, expected %d" % (suffix.length, SUFFIX_LENGTH),
                            offset=offset + 11)
    if not crc.verify(buffer, suffix.checksum):
        raise ChecksumMismatch(suffix.checksum, crc.dfu_crc(crc.covered(buffer)),
                               offset=offset + 12)
    return suffix
