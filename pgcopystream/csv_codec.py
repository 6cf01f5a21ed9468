"""Parsing and generating single CSV records

COPY tells NULL from the empty string by quoting: an unquoted empty field
is NULL, a quoted one ("") is ''.  Both directions keep that distinction
by mapping NULL to None.
"""

import csv
import io

from . import errors


def _dialect_args(delimiter, quote):
    return {'delimiter': delimiter, 'quotechar': quote, 'strict': True}


def _unquoted_empty(line, delimiter, quote):
    """For each field of a valid record, whether it is empty and unquoted"""
    flags = []
    in_quotes = False
    length = 0
    for c in line:
        if in_quotes:
            if c == quote:
                in_quotes = False
            length += 1
        elif c == quote:
            in_quotes = True
            length += 1
        elif c == delimiter:
            flags.append(length == 0)
            length = 0
        elif c in '\r\n':
            break
        else:
            length += 1
    flags.append(length == 0)
    return flags


def parse_line(line, delimiter=',', quote='"'):
    """Split one CSV record into its fields.

    Quoted fields may contain the delimiter and line breaks.  An unquoted
    empty field is returned as None, which is how COPY reads it; a quoted
    empty field is returned as ''.
    """
    reader = csv.reader(io.StringIO(line), **_dialect_args(delimiter, quote))
    try:
        row = next(reader, [])
        if next(reader, None) is not None:
            raise errors.EncodingFailure("More than one record in line", line)
    except csv.Error as e:
        raise errors.EncodingFailure("Malformed CSV line: %s" % e, line) from e
    if not row:
        return row
    nulls = _unquoted_empty(line, delimiter, quote)
    return [None if null else field for field, null in zip(row, nulls)]


def generate_line(fields, delimiter=',', quote='"'):
    """Build one CSV record, terminated by a newline, from fields.

    None is written as a bare empty field and '' as a quoted one.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator='\n', **_dialect_args(delimiter, quote))
    out = []
    try:
        for field in fields:
            if field is None:
                out.append('')
            elif field == '':
                out.append(quote * 2)
            else:
                buf.seek(0)
                buf.truncate()
                writer.writerow([field])
                out.append(buf.getvalue()[:-1])
    except csv.Error as e:
        raise errors.EncodingFailure("Cannot write CSV record: %s" % e) from e
    return delimiter.join(out) + '\n'


class CsvCopyWriter(object):
    """Write rows as CSV records that copy_from can read back

    The header, if any, is written by start(); it must use the same column
    names the import expects.  copy_from splits the header on the bare
    delimiter, so names containing the delimiter, the quote character or a
    line break are rejected.
    """

    def __init__(self, fd, close_handle=False, delimiter=',', quote='"', header=None):
        self.fd = fd
        self.close_handle = close_handle
        self.delimiter = delimiter
        self.quote = quote
        self.header = header
        self.rows = 0

    def writeData(self, data):
        self.fd.write(data)

    def start(self):
        if self.header:
            for name in self.header:
                if any(c in name for c in (self.delimiter, self.quote, '\r', '\n')):
                    raise errors.ConfigurationError("Column name %r cannot be written "
                                                    "to a header line" % name)
            self.writeData(self.delimiter.join(self.header) + '\n')

    def write(self, row):
        self.writeData(generate_line(row, self.delimiter, self.quote))
        self.rows += 1

    def finish(self):
        if self.close_handle:
            self.fd.close()
