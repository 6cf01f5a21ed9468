"""Streaming a table or query in and out of PostgreSQL with COPY

A CopyTarget stands for one table, optionally narrowed to a query.  Exports
either let the server write a file itself or relay the rows line by line;
imports relay a file or stream to COPY ... FROM STDIN, optionally running
every record through a transform on the way.
"""

import logging
import os
import time
from contextlib import ExitStack, closing

from . import errors
from .chunker import chunk_lines
from .connection import CopyConnection
from .csv_codec import parse_line, generate_line
from .options import CopyOptions, options_format, COPY_TO, COPY_FROM

logger = logging.getLogger(__name__)

BINARY_CHUNK_SIZE = 10240


class CopyTarget(object):

    def __init__(self, connection, table, query=None):
        if not isinstance(connection, CopyConnection):
            connection = CopyConnection(connection)
        self.connection = connection
        self.table = table
        self.query = query

    def __repr__(self):
        return "<CopyTarget %s>" % self.table

    @property
    def quoted_table_name(self):
        return self.connection.quote_table_name(self.table)

    def default_query(self):
        return self.query or "SELECT * FROM %s" % self.quoted_table_name

    def copy_to(self, path=None, options=None, consumer=None, **kwargs):
        """Export the rows to a file on the server or to a line consumer.

        With a path the server writes the file itself, so the path must be
        writable by the server process.  Without one, every line read from
        the COPY is handed to consumer (str for csv, bytes for binary) or
        dropped if there is no consumer.  Returns self.
        """
        if path is not None and consumer is not None:
            raise errors.ConflictingDestination(path)

        options = CopyOptions.for_export(options, **kwargs)

        if path is not None:
            statement = self._copy_to_file_statement(path, options)
            tic = time.time()
            self.connection.execute(statement)
            logger.debug("%r exported to %s in %f s", self, path, time.time() - tic)
        else:
            with closing(self._iter_lines(options)) as lines:
                for line in lines:
                    if consumer is not None:
                        consumer(line)
        return self

    def copy_to_enumerator(self, options=None, **kwargs):
        """Return a lazy iterator over the exported lines.

        With buffer_lines set every element joins that many lines, which
        is much cheaper to hand on to e.g. a streaming response than one
        element per line.  The export only starts once the first element
        is requested and cannot be restarted.
        """
        options = CopyOptions.for_export(options, **kwargs)
        lines = self._iter_lines(options)
        if options.buffer_lines:
            return chunk_lines(lines, options.buffer_lines)
        return lines

    def copy_to_string(self, options=None, **kwargs):
        """Return the whole export as one value.

        bytes for the binary format, str otherwise.  The complete result
        is held in memory, so only use this for small exports.
        """
        options = CopyOptions.for_export(options, **kwargs)
        data = []
        self.copy_to(None, options, data.append)
        if options.is_binary:
            return b''.join(data)
        return ''.join(data)

    def _copy_to_file_statement(self, path, options):
        return "COPY (%s) TO %s WITH %s" % (
            options.query or self.default_query(),
            self.connection.quote_literal(os.fspath(path)),
            options_format(COPY_TO, options))

    def _copy_to_stdout_statement(self, options):
        return "COPY (%s) TO STDOUT WITH %s" % (
            options.query or self.default_query(),
            options_format(COPY_TO, options))

    def _iter_lines(self, options):
        statement = self._copy_to_stdout_statement(options)
        encoding = None if options.is_binary else self.connection.encoding
        count = 0
        tic = time.time()
        with self.connection.channel(statement) as channel:
            while True:
                line = channel.read_line()
                if line is None:
                    break
                count += 1
                yield line.decode(encoding) if encoding else line
        logger.debug("%r exported %d lines in %f s", self, count, time.time() - tic)

    def copy_from(self, source, options=None, transform=None, **kwargs):
        """Import a CSV or binary COPY file into the table.

        source is a path, opened and closed here, or an open file object,
        which is left open.  For csv with a header the first line names the
        columns; map translates file column names to table column names.
        transform, if given, is called with the list of fields of every
        record and may change it in place or return a new sequence.  It is
        not called for the binary format.
        """
        options = CopyOptions.for_import(options, **kwargs)

        with ExitStack() as stack:
            if isinstance(source, (str, os.PathLike)):
                if options.is_binary:
                    source = stack.enter_context(open(source, 'rb'))
                else:
                    source = stack.enter_context(
                        open(source, 'r', encoding=self.connection.encoding, newline=''))

            columns = self._map_columns(self.define_columns_list(options, source), options)
            statement = "COPY %s %sFROM STDIN %s" % (
                self.define_table(options),
                self._columns_string(columns),
                options_format(COPY_FROM, options))

            tic = time.time()
            with self.connection.channel(statement) as channel:
                if options.is_binary:
                    sent = self._copy_from_binary(channel, source)
                    unit = "bytes"
                else:
                    sent = self._copy_from_csv(channel, source, options, transform)
                    unit = "lines"
            logger.debug("%r imported %d %s in %f s", self, sent, unit, time.time() - tic)

    def define_columns_list(self, options, source):
        if options.is_binary:
            return list(options.columns or [])
        elif options.header:
            line = self._decode(source.readline()).strip()
            if options.columns:
                return list(options.columns)
            return line.split(options.delimiter) if line else []
        else:
            return list(options.columns or [])

    def define_table(self, options):
        if options.table:
            return self.connection.quote_table_name(options.table)
        return self.quoted_table_name

    def _map_columns(self, columns, options):
        if not options.map:
            return columns
        try:
            return [options.map[str(c)] for c in columns]
        except KeyError as e:
            raise errors.ConfigurationError("Column %s has no entry in map" % e) from e

    def _columns_string(self, columns):
        if not columns:
            return ""
        return "(%s) " % ", ".join(self.connection.quote_column_name(c) for c in columns)

    def _decode(self, line):
        if isinstance(line, bytes):
            return line.decode(self.connection.encoding)
        return line

    def _copy_from_binary(self, channel, source):
        sent = 0
        while True:
            data = source.read(BINARY_CHUNK_SIZE)
            if not data:
                break
            channel.write(data)
            sent += len(data)
        return sent

    def _copy_from_csv(self, channel, source, options, transform):
        sent = 0
        for line in source:
            line = self._decode(line)
            if not line.strip():
                continue

            if transform is not None:
                row = parse_line(line.strip(), options.delimiter, options.quote)
                result = transform(row)
                if result is not None:
                    row = list(result)
                if not all(field is None for field in row):
                    line = generate_line(row, options.delimiter, options.quote)

            channel.write(line)
            sent += 1
        return sent
