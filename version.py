VERSION = "1.0.0"
# Versioning adhers to Semantic Versioning: https://semver.org/spec/v2.0.0.html

"""
Version history:

1.0.0  Decode DFU 1.1 and DfuSe files into immutable Plain and DfuSe values.
       Verify suffix signature, length and CRC, and the DfuSe byte accounting.
       Accept the CRC both as standard CRC-32 and as written by dfu-util.
       dfu_dump.py prints files, extracts elements and saves JSON metadata.
"""
