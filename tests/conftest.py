"""Pytest fixtures: an in-memory stand-in for the database connection"""

from contextlib import contextmanager

import pytest

from pgcopystream import errors
from pgcopystream.connection import CopyConnection


class FakeChannel(object):

    def __init__(self, lines, fail_after=None):
        self.lines = list(lines)
        self.written = []
        self.reads = 0
        self.fail_after = fail_after

    def read_line(self):
        if self.fail_after is not None and self.reads >= self.fail_after:
            raise errors.ChannelFailure("connection lost")
        if self.reads >= len(self.lines):
            return None
        line = self.lines[self.reads]
        self.reads += 1
        return line

    def write(self, data):
        self.written.append(data)


class FakeConnection(CopyConnection):
    """Records statements and replays canned COPY output

    output holds the raw (bytes) lines the next channel returns.
    """

    def __init__(self, output=(), encoding='utf-8'):
        self.raw = None
        self.output = list(output)
        self.statements = []
        self.channels = []
        self.closed = []
        self.aborted = []
        self.fail_after = None
        self._encoding = encoding

    @property
    def encoding(self):
        return self._encoding

    def quote_table_name(self, name):
        return ".".join(self.quote_column_name(part) for part in name.split('.'))

    def quote_column_name(self, name):
        return '"%s"' % name.replace('"', '""')

    def quote_literal(self, value):
        return "'%s'" % value.replace("'", "''")

    def execute(self, statement):
        self.statements.append(statement)

    @contextmanager
    def channel(self, statement):
        self.statements.append(statement)
        channel = FakeChannel(self.output, self.fail_after)
        self.channels.append(channel)
        try:
            yield channel
        except BaseException:
            self.aborted.append(channel)
            raise
        else:
            self.closed.append(channel)

    @property
    def written(self):
        return self.channels[-1].written


@pytest.fixture
def connection():
    return FakeConnection()
