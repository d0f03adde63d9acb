"""
Python reader for BGZF compressed data.

BGZF is a series of gzip members, each holding at most 64KiB of uncompressed data and recording its own size in a 'BC'
extra subfield, followed by an empty member marking the end of the file.
Every block is validated and its CRC32 and size checked before its data is handed to the caller.

Classes:
    Reader: Iterates over the decompressed data of each block in a file or stream.
    Block: Represents a BGZF/GZIP block.

Functions:
    open: Convenience function passing each block of a file to a callback as a readable buffer.
    is_bgzf: Used to determine if a buffer begins with a BGZF block.

Constants:
    EMPTY_BLOCK bytes: This is the byte data representing an empty block. This is used as an EOF marker at the end of BGZF compressed files.
    MAX_DATA_SIZE int: The maximum number of uncompressed bytes held by a single block.

Example 1:
    from bgzfpy import Reader
    for data in Reader("data.bam"):
        ***Your logic here***

Example 2:
    import bgzfpy

    def handle(buffer):
        ***Your logic here***

    bgzfpy.open("data.bam", handle)

For more:
    >> help(bgzfpy.reader) for more information on the Reader object.
    >> help(bgzfpy.block) for more information on the Block object.
    >> help(bgzfpy.util) for more information on constants and exceptions.
    >> help(bgzfpy.zlib) for more information on the zlib wrapper.
"""

from .__version import __version__
from .block import Block, EOF_MARKER
from .reader import Reader, open
from .util import EMPTY_BLOCK, MAX_DATA_SIZE, SIZEOF_EMPTY_BLOCK, is_bgzf
from .util import (InvalidBGZF, OpenError, FramingError, UnsupportedHeaderError, UnsupportedExtraFieldError,
                   InflateError, IntegrityError, MissingEofMarkerError)
