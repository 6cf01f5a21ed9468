"""The database side of a COPY: statements, channels and quoting

Everything that talks to psycopg lives here.  A CopyChannel is only valid
inside the block of CopyConnection.channel(); leaving the block with an
exception makes psycopg abort the COPY on the server.
"""

import logging
from contextlib import contextmanager

import psycopg
from psycopg import sql

from . import errors

logger = logging.getLogger(__name__)


class CopyChannel(object):

    def __init__(self, copy):
        self.copy = copy

    def read_line(self):
        """Return the next row sent by the server, None once it is done"""
        data = self.copy.read()
        if not data:
            return None
        return bytes(data)

    def write(self, data):
        self.copy.write(data)


class CopyConnection(object):
    """Wrap a psycopg connection for use by a CopyTarget

    Transactions are left to the caller: nothing here commits.
    """

    def __init__(self, raw):
        self.raw = raw

    @property
    def encoding(self):
        return self.raw.info.encoding

    def quote_table_name(self, name):
        return sql.Identifier(*name.split('.')).as_string(self.raw)

    def quote_column_name(self, name):
        return sql.Identifier(name).as_string(self.raw)

    def quote_literal(self, value):
        return sql.Literal(value).as_string(self.raw)

    def execute(self, statement):
        logger.debug("executing %s", statement)
        try:
            self.raw.execute(statement)
        except psycopg.Error as e:
            raise errors.ChannelFailure(str(e), statement) from e

    @contextmanager
    def channel(self, statement):
        logger.debug("opening COPY channel: %s", statement)
        try:
            with self.raw.cursor() as cursor:
                with cursor.copy(statement) as copy:
                    yield CopyChannel(copy)
        except psycopg.Error as e:
            raise errors.ChannelFailure(str(e), statement) from e
