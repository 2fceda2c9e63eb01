# testdata.py: Builds DFU files byte by byte for the tests

import binascii
import struct

from .suffix import WILDCARD_ID, DFU_SPEC_DFUSE

def crc32(data) -> int:
    return binascii.crc32(data) & 0xFFFFFFFF

def with_suffix(body, device=WILDCARD_ID, product=0xDF11, vendor=0x0483, dfu_spec=DFU_SPEC_DFUSE,
                signature=b'UFD', length=16, checksum=None, dfu_form=True):
    """Appends a suffix to <body>. By default the CRC is stored the way
       dfu-util does (without final complement). dfu_form=False stores the
       standard CRC-32 instead.
    """
    head = body + struct.pack("<HHHH3sB", device, product, vendor, dfu_spec, signature, length)
    if checksum is None:
        checksum = crc32(head)
        if dfu_form:
            checksum ^= 0xFFFFFFFF
    return head + struct.pack("<I", checksum)

def element(address, data):
    return struct.pack("<II", address, len(data)) + data

def target(elements, alternate=0, name=None, target_size=None, element_count=None,
           signature=b'Target', named=None):
    """<elements> is a list of encoded elements. The named flag follows
       <name> unless <named> is given."""
    body = b''.join(elements)
    if target_size is None:
        target_size = len(body)
    if element_count is None:
        element_count = len(elements)
    if named is None:
        named = 1 if name else 0
    raw_name = (name or '').encode('utf-8').ljust(255, b'\0')
    header = struct.pack("<6sBI255sII", signature, alternate, named, raw_name,
                         target_size, element_count)
    return header + body

def dfuse(targets, version=1, target_count=None, total_size=None, trailing=b'', **suffix_args):
    "A complete DfuSe file with the encoded <targets>"
    body = b''.join(targets) + trailing
    if target_count is None:
        target_count = len(targets)
    if total_size is None:
        total_size = 11 + len(body) + 16
    prefix = struct.pack("<5sBIB", b'DfuSe', version, total_size, target_count)
    return with_suffix(prefix + body, **suffix_args)

def sample_dfuse():
    "Two targets, the first named with two elements, the second unnamed and empty"
    return dfuse([target([element(0x08000000, b'\x01\x02\x03\x04'),
                          element(0x08004000, b'\xAA' * 10)],
                         alternate=0, name='Internal Flash'),
                  target([], alternate=1)])
