"""
Provides a basic wrapper for the zlib library.

This uses ctypes to load the zlib dll from the system.
Set the BGZFPY_ZLIB environment variable to a path or soname to load a specific zlib build.
If this is run on a Windows system and ctypes.util.find() can not find zlib1.dll it will look for zlibwapi.dll in the
folder this code is stored in.
"""

import ctypes as C
import logging
import os
import platform
from ctypes import util

log = logging.getLogger(__name__)

# Special thanks to Mark Nottingham https://gist.github.com/mnot/242459
# and the zlib example source for reference implementations.

# Constants taken from zlib.h
MAX_WBITS = 15
ZLIB_VERSION = C.c_char_p(b"1.2.3")

# Allowed flush values; see inflate()
Z_FINISH = 4

# Return codes for the decompression functions. Negative values
# are errors, positive values are used for special but normal events.
Z_OK = 0
Z_STREAM_END = 1
Z_NEED_DICT = 2
Z_ERRNO = -1
Z_STREAM_ERROR = -2
Z_DATA_ERROR = -3
Z_MEM_ERROR = -4
Z_BUF_ERROR = -5
Z_VERSION_ERROR = -6


def _find_zlib():
    path = os.getenv('BGZFPY_ZLIB')
    if path:
        return path
    if platform.system() == 'Windows':
        path = util.find_library("zlib1.dll")
        if not path:
            path = os.path.join(os.path.dirname(os.path.realpath(__file__)), 'zlibwapi.dll')
        return path
    path = util.find_library("z")
    if not path:
        # find_library() needs ldconfig or a compiler, fall back to the usual soname
        path = 'libz.dylib' if platform.system() == 'Darwin' else 'libz.so.1'
    return path


_path = _find_zlib()
log.debug("Loading zlib from %s", _path)
if platform.system() == 'Windows':
    _zlib = C.windll.LoadLibrary(_path)
else:
    _zlib = C.cdll.LoadLibrary(_path)


class zState(C.Structure):
    """
    Represents the zlib internal state object used during inflate
    :ivar next_in: C._Pointer   next input byte
    :ivar avail_in: C.c_uint    number of bytes available at next_in
    :ivar total_in: C.c_ulong   total number of input bytes read so far
    :ivar next_out: C._Pointer  next output byte will go here
    :ivar avail_out: C.c_uint   remaining free space at next_out
    :ivar total_out: C.c_ulong  total number of bytes output so far
    :ivar msg: C.c_char_p       last error message, NULL if no error
    :ivar state: C.c_void_p     not visible by applications
    :ivar zalloc: C.c_void_p    used to allocate the internal state
    :ivar zfree: C.c_void_p     used to free the internal state
    :ivar opaque: C.c_void_p    private data object passed to zalloc and zfree
    :ivar data_type: C.c_int    best guess about the data type, or the decoding state for inflate
    :ivar adler: C.c_ulong      Adler-32 or CRC-32 value of the uncompressed data
    :ivar reserved: C.c_ulong   reserved for future use
    """
    _fields_ = [
        ("next_in", C.POINTER(C.c_ubyte)),
        ("avail_in", C.c_uint),
        ("total_in", C.c_ulong),
        ("next_out", C.POINTER(C.c_ubyte)),
        ("avail_out", C.c_uint),
        ("total_out", C.c_ulong),
        ("msg", C.c_char_p),
        ("state", C.c_void_p),
        ("zalloc", C.c_void_p),
        ("zfree", C.c_void_p),
        ("opaque", C.c_void_p),
        ("data_type", C.c_int),
        ("adler", C.c_ulong),
        ("reserved", C.c_ulong),
    ]


SIZEOF_ZSTATE = C.sizeof(zState)

_zlib.inflateInit2_.argtypes = [C.POINTER(zState), C.c_int, C.c_char_p, C.c_int]
_zlib.inflateInit2_.restype = C.c_int
_zlib.inflate.argtypes = [C.POINTER(zState), C.c_int]
_zlib.inflate.restype = C.c_int
_zlib.inflateEnd.argtypes = [C.POINTER(zState)]
_zlib.inflateEnd.restype = C.c_int
# crc32() returns an unsigned long, the default c_int restype would wrap values above 2**31
_zlib.crc32.argtypes = [C.c_ulong, C.c_char_p, C.c_uint]
_zlib.crc32.restype = C.c_ulong


def raw_decompress(src, dest, mode=Z_FINISH, wbits=MAX_WBITS) -> (int, zState):
    """
    Wraps zlib.inflate() for raw DEFLATE data, without a zlib or gzip header and trailer.
    Inflates all of src into dest in one call and releases the zlib state before returning.
    :param src: ctypes array containing the compressed data.
    :param dest: ctypes array receiving the decompressed data.
    :param mode: Decompression flush mode. Defaults to Z_FINISH. See zlib documentation for full description.
    :param wbits: Compression window bit size. Defaults to MAX_WBITS, do not change unless you REALLY know what you are doing.
    :return: Tuple containing (Error code, zlib state object). The state holds total_out and msg after the call.
    """
    state = zState()
    state.next_in = C.cast(src, C.POINTER(C.c_ubyte))
    state.avail_in = len(src)
    state.next_out = C.cast(dest, C.POINTER(C.c_ubyte))
    state.avail_out = len(dest)

    err = _zlib.inflateInit2_(C.byref(state), -wbits, ZLIB_VERSION, SIZEOF_ZSTATE)
    if err != Z_OK:
        return err, state

    try:
        err = _zlib.inflate(C.byref(state), mode)
    finally:
        _zlib.inflateEnd(C.byref(state))

    return err, state


def crc32(src, crc=0) -> int:
    """
    Calculate the CRC32 value of the input data.
    :param src: Bytes to evaluate.
    :param crc: Existing CRC to add to. Defaults to the initial CRC value.
    :return: CRC32 value of src as an unsigned integer.
    """
    return _zlib.crc32(crc, bytes(src), len(src))
