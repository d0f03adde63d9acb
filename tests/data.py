"""
BGZF fixtures built with the standard library zlib as a reference encoder.
"""

import struct
import zlib


def deflate(data, level=6):
    compressor = zlib.compressobj(level, zlib.DEFLATED, -zlib.MAX_WBITS)
    return compressor.compress(data) + compressor.flush()


def make_block(data=b'', cdata=None, mtime=0, xfl=0, os=255, header=None, extra=None, bsize=None, crc=None,
               isize=None):
    """
    Build one BGZF block. Any field may be overridden to produce a malformed block.
    :param data: Uncompressed data.
    :param cdata: Compressed data, defaults to data deflated.
    :param header: Replaces the first four header bytes (ID1, ID2, CM, FLG).
    :param extra: Replaces the whole extra field.
    :return: bytes of the block.
    """
    if cdata is None:
        cdata = deflate(data)
    if extra is None:
        if bsize is None:
            bsize = 12 + 6 + len(cdata) + 8 - 1
        extra = struct.pack('<BBHH', 66, 67, 2, bsize)
    ids = header if header is not None else b'\x1f\x8b\x08\x04'
    block = ids + struct.pack('<IBBH', mtime, xfl, os, len(extra)) + extra + cdata
    return block + struct.pack('<II', zlib.crc32(data) if crc is None else crc, len(data) if isize is None else isize)


def make_bgzf(*chunks):
    return b''.join(make_block(chunk) for chunk in chunks) + EOF


EOF = make_block(b'')

BLOCK_HELLO = make_block(b'hello')

FILE_HELLO = BLOCK_HELLO + EOF

FILE_FOO_BAR = make_bgzf(b'foo', b'bar')
