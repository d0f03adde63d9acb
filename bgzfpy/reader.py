"""
Provides the block reader for BGZF compressed data.
"""

import builtins
import ctypes as C
import io
import logging
import os
from contextlib import closing

from . import zlib
from .block import Block, read_exact
from .util import MAX_DATA_SIZE, InflateError, IntegrityError, MissingEofMarkerError, OpenError

log = logging.getLogger(__name__)


def _open(path):
    try:
        return builtins.open(path, 'rb')
    except OSError as e:
        raise OpenError(e.errno, "Can not open BGZF file: {}".format(e.strerror), e.filename) from e


def inflate(cdata: bytearray) -> bytes:
    """
    Decompress the raw DEFLATE data of a block.
    :param cdata: Compressed data.
    :return: Decompressed data.
    """
    src = (C.c_ubyte * len(cdata)).from_buffer(cdata)
    # One spare byte so data overrunning a full size block is reported as a size mismatch
    dest = (C.c_ubyte * (MAX_DATA_SIZE + 1))()
    res, state = zlib.raw_decompress(src, dest)
    if res != zlib.Z_STREAM_END:
        raise InflateError(res, state.msg.decode('ascii', 'replace') if state.msg else None)
    return C.string_at(dest, state.total_out)


def verify(block: Block, data: bytes):
    """
    Check decompressed data against the CRC32 and ISIZE in the block trailer.
    :param block: Block with trailer loaded.
    :param data: Decompressed data of the block.
    :return: None
    """
    crc = zlib.crc32(data)
    if crc != block.CRC32 or len(data) != block.uncompressed_size:
        raise IntegrityError(block.CRC32, crc, block.uncompressed_size, len(data))


class Reader:
    """
    Reads the blocks of a BGZF file in order.
    Provides Iterable interface yielding the decompressed data of each non-empty block.

    A path is opened at the start of each iteration and closed when it ends.
    A stream is owned by the reader and is closed once it has been iterated, whether or not iteration succeeded.
    """

    def __init__(self, input):
        """
        Constructor.
        :param input: Path to a BGZF file or binary stream containing BGZF data.
        """
        self.total_in = 0
        self.total_out = 0
        self.block_count = 0
        if isinstance(input, (str, bytes, os.PathLike)):
            self._path = input
            self._input = None
            _open(input).close()
        else:
            self._path = None
            self._input = input

    def _stream(self):
        if self._path is not None:
            return _open(self._path)
        if self._input is None:
            raise ValueError("Stream has already been consumed.")
        stream, self._input = self._input, None
        return stream

    def blocks(self):
        """
        Generator over the decompressed data of each non-empty block.
        Validates every block and finally that the stream ended with the EOF marker.
        :return: Generator of bytes.
        """
        self.total_in = 0
        self.total_out = 0
        self.block_count = 0
        last = None
        with closing(self._stream()) as stream:
            log.debug("Reading BGZF blocks from %r", self._path or stream)
            while True:
                block = Block.from_stream(stream)
                if block is None:
                    break
                cdata = read_exact(stream, block.cdata_size, 'compressed data')
                data = inflate(cdata)
                block.read_trailer(stream)
                try:
                    verify(block, data)
                except IntegrityError as e:
                    # A damaged block framed like the EOF marker at the end of the stream is a broken marker
                    if block.is_eof_framed() and read_exact(stream, 1, allow_eof=True) is None:
                        raise MissingEofMarkerError(block.profile()) from e
                    raise
                log.debug("Block %d at offset %d: BSIZE %d, ISIZE %d",
                          self.block_count, self.total_in, block.bsize.value, block.uncompressed_size)

                last = block
                self.block_count += 1
                self.total_in += block.size
                self.total_out += len(data)
                if data:
                    yield data

        if last is None or not last.is_eof_marker():
            raise MissingEofMarkerError(last and last.profile())
        log.debug("Read %d blocks: %d bytes in, %d bytes out", self.block_count, self.total_in, self.total_out)

    def __iter__(self):
        return self.blocks()

    def for_each_block(self, consumer):
        """
        Pass the decompressed data of each non-empty block to consumer, in file order.
        Any error raised by the consumer aborts the iteration and is propagated.
        :param consumer: Callable receiving one bytes argument per block.
        :return: None
        """
        with closing(self.blocks()) as blocks:
            for data in blocks:
                consumer(data)


def open(path, consumer):
    """
    Convenience function to read each block of a BGZF file as a readable buffer.
    :param path: Path to the BGZF file.
    :param consumer: Callable receiving an io.BytesIO positioned at the start of each non-empty block.
    :return: None
    """
    Reader(path).for_each_block(lambda data: consumer(io.BytesIO(data)))
