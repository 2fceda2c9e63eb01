# dfufile: Decoding of USB DFU 1.1 and DfuSe firmware files
#
# Use parse() on the complete content of a file, or parse_file() on a path.
# The result is a Plain or DfuSe value; problems raise a DfuError subclass.

from .errors import *
from .suffix import Suffix, SUFFIX_LENGTH
from .dfuse import Prefix, Target, Element
from .parse import Plain, DfuSe, DfuFile, parse, parse_file
