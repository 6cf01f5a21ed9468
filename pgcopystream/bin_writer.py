#!/usr/bin/env python
"""Writer for PostgreSQL's binary COPY format

The output of a PgCopyBinWriter can be handed to CopyTarget.copy_from with
format='binary'.  Every value is written as a big-endian, length-prefixed
field; None becomes a NULL field.
"""

import logging
import struct
import time

import numpy

from . import errors

__author__ = "Christian Kellner"

logger = logging.getLogger(__name__)

# element type oids for arrays
type_map = {'int16': 21, 'int32': 23, 'int64': 20, 'float64': 701}

# network byte order dtypes of the array elements
be_dtype_map = {'int16': '>i2', 'int32': '>i4', 'int64': '>i8', 'float64': '>f8'}


class PgCopyBinWriter(object):
    signature = b'PGCOPY\n\377\r\n\0'

    def writeNull(self):
        self.writeData(struct.pack(">i", -1))

    def writeBool(self, val):
        data = struct.pack(">i?", 1, bool(val))
        self.writeData(data)

    def writeInt16(self, num):
        data = struct.pack(">ih", 2, num)
        self.writeData(data)

    def writeInt32(self, num):
        data = struct.pack(">ii", 4, num)
        self.writeData(data)

    def writeInt64(self, num):
        data = struct.pack(">iq", 8, num)
        self.writeData(data)

    def writeFloat32(self, num):
        data = struct.pack(">if", 4, num)
        self.writeData(data)

    def writeFloat64(self, num):
        data = struct.pack(">id", 8, num)
        self.writeData(data)

    def writeBytes(self, buf):
        self.writeData(struct.pack(">i", len(buf)) + bytes(buf))

    def writeText(self, s):
        self.writeBytes(s.encode('utf-8'))

    def writeNdArray(self, a):
        if a.ndim != 1 or a.dtype.name not in type_map:
            raise errors.TypeUnsupported("array of %s with %d dimensions not supported"
                                         % (a.dtype.name, a.ndim))
        has_null = False
        type_id = type_map[a.dtype.name]
        data = struct.pack(">iii", a.ndim, has_null, type_id)
        data += struct.pack(">ii", a.size, 1) #dim, lower_bound
        size = len(data) + a.nbytes + a.size * 4
        data = struct.pack(">i", size) + data
        self.writeData(data)

        tic = time.time()
        # every element is prefixed with its own length
        items = numpy.empty(a.size, dtype=[('len', '>i4'), ('val', be_dtype_map[a.dtype.name])])
        items['len'] = a.itemsize
        items['val'] = a
        self.writeData(items.tobytes())
        logger.debug("formatting array of %d items took %f s", a.size, time.time() - tic)

    def __init__(self, fd, close_handle=False, flags=0, header_ext=0):
        self.fd = fd
        self.flags = flags
        self.header_ext = header_ext
        self.close_handle = close_handle
        self.rows = 0
        self.writer_map = {type(None): lambda _: self.writeNull(),
                           bool: self.writeBool,
                           int: self.writeInt64,
                           float: self.writeFloat64,
                           str: self.writeText,
                           bytes: self.writeBytes,
                           numpy.bool_: self.writeBool,
                           numpy.int16: self.writeInt16,
                           numpy.int32: self.writeInt32,
                           numpy.int64: self.writeInt64,
                           numpy.float32: self.writeFloat32,
                           numpy.float64: self.writeFloat64,
                           numpy.ndarray: self.writeNdArray}

    def writeData(self, data):
        self.fd.write(data)

    def writeTuple(self, tu):
        self.writeData(struct.pack(">h", len(tu)))
        for field in tu:
            self.writeField(field)
        self.rows += 1

    def writeField(self, data):
        data_type = type(data)
        if data_type not in self.writer_map:
            raise errors.TypeUnsupported("type %r not supported" % data_type)
        writer = self.writer_map[data_type]
        writer(data)

    def write(self, row):
        if not isinstance(row, tuple):
            row = tuple(row)
        self.writeTuple(row)

    def start(self):
        self.writeData(self.signature + struct.pack(">ii", self.flags, self.header_ext))

    def finish(self):
        # field count -1 marks the end of the data
        self.writeData(struct.pack(">h", -1))
        if self.close_handle:
            self.fd.close()
