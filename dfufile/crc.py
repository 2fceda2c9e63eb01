# crc.py: CRC-32 of the DFU suffix
#
# The CRC is the reflected CRC-32 (polynomial 0xEDB88320, initial value
# 0xFFFFFFFF, final complement) over every byte of the file except the
# four bytes of the CRC field itself. binascii.crc32 is that algorithm.
#
# dfu-util and the DfuSe tools store the value without the final
# complement, so verify() accepts both forms.

import binascii

CRC_LENGTH = 4

def compute(data) -> int:
    "Standard CRC-32 of <data>"
    return binascii.crc32(data) & 0xFFFFFFFF

def dfu_crc(data) -> int:
    "The CRC of <data> as DFU tools write it into the suffix"
    return compute(data) ^ 0xFFFFFFFF

def covered(buffer):
    "The part of a complete file that the CRC covers"
    return memoryview(buffer)[:-CRC_LENGTH]

def verify(buffer, stored_checksum : int) -> bool:
    "True if <stored_checksum> matches the CRC of the complete file <buffer>"
    crc = compute(covered(buffer))
    return stored_checksum == crc or stored_checksum == crc ^ 0xFFFFFFFF
