# parse.py: Decode a complete DFU file into an immutable Plain or DfuSe value
#
# The CRC covers the whole file, so parsing starts from a buffer holding
# the complete file.

import logging
from typing import *

from .bytebuffer import ByteIterator
from .suffix import Suffix, SUFFIX_LENGTH, decode_suffix
from .dfuse import Prefix, Target, decode_prefix, decode_targets
from .errors import TooShort, TrailingData

log = logging.getLogger("dfufile.parse")

class Plain(NamedTuple):
    "Standard DFU file, where everything before the suffix is the firmware"
    payload : memoryview
    suffix : Suffix

    kind = "Plain"

    def __str__(self):
        return self.kind

class DfuSe(NamedTuple):
    "DfuSe file with named targets holding addressed elements"
    prefix : Prefix
    targets : Tuple[Target, ...]
    suffix : Suffix

    kind = "DfuSe"

    def __str__(self):
        return "DfuSe v%d" % self.prefix.format_version

    def find_target_by_alt(self, alternate_setting : int) -> Optional[Target]:
        for target in self.targets:
            if target.alternate_setting == alternate_setting:
                return target
        return None

    def find_target_by_name(self, name : str) -> Optional[Target]:
        """Returns the first target named <name>. Targets without the named
           flag never match, even for name ''.
        """
        for target in self.targets:
            if target.has_name and target.name == name:
                return target
        return None

DfuFile = Union[Plain, DfuSe]

def parse(buffer) -> DfuFile:
    """Decodes and validates the complete DFU file in <buffer> (bytes-like).
       Raises a DfuError subclass for the first problem found.
    """
    if not isinstance(buffer, bytes):
        # Own an immutable copy, since the result keeps views into it
        buffer = bytes(buffer)
    if len(buffer) < SUFFIX_LENGTH:
        raise TooShort("File has %d bytes, smaller than the %d byte suffix" % (len(buffer), SUFFIX_LENGTH))

    suffix = decode_suffix(buffer)
    suffix_offset = len(buffer) - SUFFIX_LENGTH
    # Decoders may only read up to the suffix
    cursor = ByteIterator(memoryview(buffer)[:suffix_offset])

    prefix = decode_prefix(cursor, len(buffer))
    if prefix is None:
        log.debug("No DfuSe prefix, %d byte payload", suffix_offset)
        return Plain(cursor.read_bytes(suffix_offset), suffix)

    if not suffix.is_dfuse:
        log.warning("DfuSe prefix but the suffix declares DFU version 0x%04X", suffix.dfu_spec_bcd)
    targets = decode_targets(cursor, prefix.target_count)
    if cursor.remaining():
        raise TrailingData("%d bytes follow the last target" % cursor.remaining(),
                           offset=cursor.position)
    log.debug("DfuSe file with %d targets", len(targets))
    return DfuSe(prefix, targets, suffix)

def parse_file(path) -> DfuFile:
    "Reads the file at <path> and parses it"
    with open(path, 'rb') as f:
        data = f.read()
    return parse(data)
