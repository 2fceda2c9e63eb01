# errors.py: Exceptions raised when a DFU file cannot be decoded
#
# Every decoder raises the first problem it finds. Callers can tell the
# kinds apart by class, for example to inspect a file with a broken
# checksum while still refusing a file with a broken signature.

class DfuError(Exception):
    "Base class of all errors raised while decoding a DFU file"
    def __init__(self, text, offset=None):
        if offset is not None:
            text = "offset 0x%X: %s" % (offset, text)
        Exception.__init__(self, text)
        self.offset = offset

class Truncated(DfuError):
    "A decode step needs more bytes than remain in the buffer"
    pass

class TooShort(DfuError):
    "The file is smaller than the mandatory suffix"
    pass

class InvalidSignature(DfuError):
    "The suffix marker is not 'UFD'"
    pass

class InvalidTargetSignature(DfuError):
    "A target header does not start with 'Target'"
    pass

class InvalidLength(DfuError):
    "The length byte of the suffix is not 16"
    pass

class ChecksumMismatch(DfuError):
    def __init__(self, stored, computed, offset=None):
        DfuError.__init__(self, "Stored CRC 0x%08X does not match calculated 0x%08X" % (stored, computed),
                          offset)
        self.stored = stored
        self.computed = computed

class UnsupportedFormatVersion(DfuError):
    def __init__(self, version, offset=None):
        DfuError.__init__(self, "Unsupported DfuSe format version %d" % version, offset)
        self.version = version

class SizeMismatch(DfuError):
    def __init__(self, declared, actual, offset=None):
        DfuError.__init__(self, "DfuSe prefix declares %d bytes but the file has %d bytes" % (declared, actual),
                          offset)
        self.declared = declared
        self.actual = actual

class ElementCountMismatch(DfuError):
    "A target holds fewer or more elements than its header declares"
    pass

class ElementSizeOverflow(DfuError):
    "An element extends past its target or past the end of the data"
    pass

class TrailingData(DfuError):
    "Bytes remain between the last target and the suffix"
    pass

class MissingData(DfuError):
    "The declared structure needs bytes that overlap the suffix"
    pass
