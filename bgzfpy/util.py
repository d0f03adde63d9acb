SIGNATURE = b'\x1F\x8B\x08\x04'
"""bytes: ID1, ID2, CM and FLG bytes every BGZF block starts with"""

MAX_DATA_SIZE = 2 ** 16
"""int: Maximum number of uncompressed bytes a single BGZF block may hold."""

EMPTY_BLOCK = b'\x1f\x8b\x08\x04\x00\x00\x00\x00\x00\xff\x06\x00\x42\x43\x02\x00\x1b\x00\x03\x00\x00\x00\x00\x00\x00\x00\x00\x00'
"""bytes: This is the byte data representing an empty block. This is used as an EOF marker at the end of BGZF compressed files."""

SIZEOF_EMPTY_BLOCK = len(EMPTY_BLOCK)
"""int: Number of bytes that the empty block occupies."""


def is_bgzf(buffer, offset=0):
    """
    Helper to determine if passed buffer contains a BGZF block.
    :param buffer: Buffer containing unknown data.
    :param offset: Offset into buffer to being reading.
    :return: True if offset points to beginning of a BGZF block, False otherwise.
    """
    return bytes(buffer[offset:offset + len(SIGNATURE)]) == SIGNATURE


class OpenError(OSError):
    """
    Exception to indicate the BGZF source could not be opened for reading.
    Always chained from the OSError raised by the platform.
    """
    pass


class InvalidBGZF(ValueError):
    """
    Exception to indicate invalid or unexpected data was read while trying to parse BGZF data.
    """
    pass


class FramingError(InvalidBGZF):
    """
    A fixed size field was cut short by the end of the stream, or the block sizes declared in the header contradict each other.
    """
    pass


class UnsupportedHeaderError(InvalidBGZF):
    """Member header does not carry the ID1, ID2, CM and FLG values required by BGZF."""

    def __init__(self, header):
        self.header = header
        super().__init__("Unsupported block header: {!r}".format(header))


class UnsupportedExtraFieldError(InvalidBGZF):
    """Extra field does not start with the BGZF 'BC' block size subfield."""

    def __init__(self, subfield, extra_length):
        self.subfield = subfield
        self.extra_length = extra_length
        super().__init__("Unsupported extra subfield (XLEN: {}): {!r}".format(extra_length, subfield))


class InflateError(InvalidBGZF):
    """zlib rejected the compressed data of a block."""

    def __init__(self, code, message=None):
        self.code = code
        self.message = message
        super().__init__("Failed to inflate block data (Code: {}): {}".format(code, message))


class IntegrityError(InvalidBGZF):
    """Inflated data does not match the CRC32 or ISIZE recorded in the block trailer."""

    def __init__(self, expected_crc, actual_crc, expected_size, actual_size):
        self.expected_crc = expected_crc
        self.actual_crc = actual_crc
        self.expected_size = expected_size
        self.actual_size = actual_size
        super().__init__("Block data failed verification: CRC32 {:#010x} != {:#010x}, ISIZE {} != {}".format(
            expected_crc, actual_crc, expected_size, actual_size))


class MissingEofMarkerError(InvalidBGZF):
    """
    The stream ended without the empty block used as the BGZF EOF marker.
    Usually means the file was truncated.
    """

    def __init__(self, last_block):
        self.last_block = last_block
        super().__init__("Missing EOF marker, last block: {!r}".format(last_block))
