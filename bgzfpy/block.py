import ctypes as C
from collections import namedtuple
from enum import IntFlag

from .util import EMPTY_BLOCK, FramingError, UnsupportedExtraFieldError, UnsupportedHeaderError


# Taken from RFC 1952
class BlockFlags(IntFlag):
    FTEXT = 1 << 0
    FHCRC = 1 << 1
    FEXTRA = 1 << 2
    FNAME = 1 << 3
    FCOMMENT = 1 << 4


class _Struct(C.LittleEndianStructure):
    """
    Base for the fixed layout block structures.
    Compares by packed bytes and reports field values in its repr for diagnostics.
    """

    @classmethod
    def from_stream(cls, stream, allow_eof=False):
        """
        Read exactly one structure from a stream.
        :param stream: Stream to read from.
        :param allow_eof: Return None instead of raising if the stream is already exhausted.
        :return: Structure instance.
        """
        buffer = read_exact(stream, C.sizeof(cls), cls.__name__, allow_eof)
        return None if buffer is None else cls.from_buffer(buffer)

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return bytes(self) == bytes(other)

    def __repr__(self):
        return "{}({})".format(type(self).__name__, ", ".join(
            "{}={}".format(name, getattr(self, name)) for name, _ in self._fields_))


class Header(_Struct):
    """
    Represents BGZF/GZIP block header.
    """
    _pack_ = 1
    _fields_ = [
        ("id1", C.c_uint8),  # ID1   gzip IDentifier1            uint8 31
        ("id2", C.c_uint8),  # ID2   gzip IDentifier2            uint8 139
        ("compression_method", C.c_uint8),  # CM    gzip Compression Method     uint8 8
        ("flag", C.c_uint8),  # FLG   gzip FLaGs                  uint8 4
        ("modification_time", C.c_uint32),  # MTIME gzip Modification TIME      uint32
        ("extra_flags", C.c_uint8),  # XFL   gzip eXtra FLags            uint8
        ("os", C.c_uint8),  # OS    gzip Operating System       uint8
        ("extra_length", C.c_uint16)  # XLEN  gzip eXtra LENgth           uint16
    ]

    def is_supported(self):
        return (self.id1, self.id2, self.compression_method, self.flag) == (31, 139, 8, BlockFlags.FEXTRA)


SIZEOF_HEADER = C.sizeof(Header)


class BSIZE(_Struct):
    """
    Represents the BGZF required block size subfield, the 'BC' subfield of the gzip extra field.
    """
    _pack_ = 1
    _fields_ = [
        ("SI1", C.c_uint8),  # SI1 Subfield Identifier1        uint8 66
        ("SI2", C.c_uint8),  # SI2 Subfield Identifier2        uint8 67
        ("SLEN", C.c_uint16),  # SLEN Subfield LENgth uint16 2
        ("value", C.c_uint16)  # BSIZE total Block SIZE minus 1  uint16
    ]

    def is_supported(self):
        return (self.SI1, self.SI2, self.SLEN) == (66, 67, 2)


SIZEOF_BSIZE = C.sizeof(BSIZE)


class Trailer(_Struct):
    """
    Represents BGZF/GZIP block trailer.
    """
    _pack_ = 1
    _fields_ = [
        ("CRC32", C.c_uint32),  # CRC32 CRC-32                      uint32
        ("uncompressed_size", C.c_uint32)  # ISIZE Input SIZE (length of uncompressed data) uint32
    ]


SIZEOF_TRAILER = C.sizeof(Trailer)

# Fixed bytes of a block besides the extra field and compressed data.
# BSIZE + 1 == SIZEOF_HEADER + XLEN + len(cdata) + SIZEOF_TRAILER
SIZEOF_FRAMING = SIZEOF_HEADER + SIZEOF_TRAILER


LastBlock = namedtuple('LastBlock', 'header bsize trailer')
LastBlock.__doc__ = """Header, block size subfield and trailer of the most recently parsed block."""

EOF_MARKER = LastBlock(
    Header.from_buffer_copy(EMPTY_BLOCK),
    BSIZE.from_buffer_copy(EMPTY_BLOCK, SIZEOF_HEADER),
    Trailer.from_buffer_copy(EMPTY_BLOCK, len(EMPTY_BLOCK) - SIZEOF_TRAILER),
)
"""LastBlock: Profile of the empty block that must terminate every BGZF stream."""


def read_exact(stream, size, what='data', allow_eof=False):
    """
    Read exactly size bytes from a stream.
    :param stream: Stream to read from. Must provide readinto() or read().
    :param size: Number of bytes to read.
    :param what: Name of the field being read, used in the error message.
    :param allow_eof: Return None instead of raising if the stream ends before the first byte.
    :return: bytearray of length size.
    """
    buffer = bytearray(size)
    view = memoryview(buffer)
    offset = 0
    while offset < size:
        if hasattr(stream, 'readinto'):
            n = stream.readinto(view[offset:])
        else:
            chunk = stream.read(size - offset)
            n = len(chunk)
            view[offset:offset + n] = chunk
        if not n:
            if allow_eof and not offset:
                return None
            raise FramingError("Unexpected end of stream reading {}: got {} of {} bytes.".format(what, offset, size))
        offset += n
    return buffer


class Block:
    """
    Represents a BGZF/GZIP block as it is parsed from a stream.
    """
    __slots__ = 'header', 'bsize', 'trailer'

    def __init__(self, header: Header, bsize: BSIZE, trailer: Trailer = None):
        """
        Constructor.
        :param header: Header object instance.
        :param bsize: BSIZE subfield instance.
        :param trailer: Trailer object instance, None until it has been read.
        """
        self.header = header
        self.bsize = bsize
        self.trailer = trailer

    @property
    def size(self):
        """Total size of the block in bytes."""
        return self.bsize.value + 1

    @property
    def cdata_size(self):
        """Size of the compressed data in bytes."""
        return self.size - SIZEOF_FRAMING - self.header.extra_length

    @property
    def CRC32(self):
        return self.trailer.CRC32

    @property
    def uncompressed_size(self):
        return self.trailer.uncompressed_size

    def __len__(self):
        return self.size

    def profile(self) -> LastBlock:
        return LastBlock(self.header, self.bsize, self.trailer)

    def is_eof_marker(self):
        """
        :return: True if this block is exactly the BGZF EOF marker.
        """
        return self.profile() == EOF_MARKER

    def is_eof_framed(self):
        """
        Two bytes of compressed data can not hold anything but an empty block,
        so a block framed like the EOF marker is one, whatever its trailer says.
        :return: True if the header and block size match the EOF marker.
        """
        return self.header == EOF_MARKER.header and self.bsize == EOF_MARKER.bsize

    @staticmethod
    def from_stream(stream) -> 'Block':
        """
        Load and validate a block header and extra field from a stream.
        The stream is left positioned at the start of the compressed data.
        :param stream: Stream to read from.
        :return: Block instance without trailer, or None if the stream is exhausted.
        """
        header = Header.from_stream(stream, allow_eof=True)
        if header is None:
            return None
        if not header.is_supported():
            raise UnsupportedHeaderError(header)

        extra = read_exact(stream, header.extra_length, 'extra field')
        if header.extra_length < SIZEOF_BSIZE:
            raise UnsupportedExtraFieldError(None, header.extra_length)
        bsize = BSIZE.from_buffer(extra)
        if not bsize.is_supported():
            raise UnsupportedExtraFieldError(bsize, header.extra_length)

        block = Block(header, bsize)
        if block.cdata_size < 0:
            raise FramingError("Block size {} too small for extra field length {}.".format(
                block.size, header.extra_length))
        return block

    def read_trailer(self, stream) -> Trailer:
        self.trailer = Trailer.from_stream(stream)
        return self.trailer
