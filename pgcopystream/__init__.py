__doc__ = """Stream data in and out of PostgreSQL with the COPY command

pgcopystream is a set of tools, i.e. functions and classes, built
to export and import (large amounts of) data from and into a
PostgreSQL server by using the COPY command, either in CSV or in
the binary format.
"""

from . import errors
from .options import CopyOptions, options_format
from .csv_codec import parse_line, generate_line, CsvCopyWriter
from .chunker import chunk_lines
from .connection import CopyConnection, CopyChannel
from .target import CopyTarget
from .bin_writer import PgCopyBinWriter
from .factory import create_writer
