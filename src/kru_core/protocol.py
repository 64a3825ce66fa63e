"""Kafka segment protocol constants.

Single source of truth for the on-disk message layout (magic v0 / v1).
Keep this file stable. Codec, patcher and verifier must remain synchronized.

    offset         : 8 bytes
    message length : 4 bytes (4 + 1 + 1 + 8 if magic > 0 + 4 + K + 4 + V)
    crc            : 4 bytes
    magic value    : 1 byte
    attributes     : 1 byte
    timestamp      : 8 bytes (only when magic value > 0)
    key length     : 4 bytes
    key            : K bytes
    value length   : 4 bytes
    value          : V bytes
"""

# Head: [Offset(8) | Length(4) | CRC(4) | Magic(1) | Attributes(1)] = 18 bytes
HEAD_FMT = ">QiIbB"
HEAD_LEN = 18

# Position of the CRC field relative to the start of a record
CRC_POS = 12

TIMESTAMP_FMT = ">q"
TIMESTAMP_LEN = 8

LENGTH_FMT = ">i"
LENGTH_LEN = 4

CRC_FMT = ">I"

# Key/value length marking an absent key (or a tombstone value)
NULL_LENGTH = -1

# Magic values: 0 = no timestamp, > 0 = timestamp present
MAGIC_V0 = 0
MAGIC_V1 = 1

# Data directory layout
META_PROPERTIES = "meta.properties"
SEGMENT_SUFFIX = ".log"

# Default fill byte for the destroy strategies
DEFAULT_BLANK_CHAR = "*"
