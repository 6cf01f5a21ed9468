import sys

from . import bin_writer
from . import csv_codec


def create_writer(file_handle=None, binary=True, **kwargs):
    if not file_handle:
        file_handle = sys.stdout.buffer if binary else sys.stdout
        kwargs.setdefault('close_handle', False)
    else:
        kwargs.setdefault('close_handle', True)

    if binary:
        return bin_writer.PgCopyBinWriter(file_handle, **kwargs)
    return csv_codec.CsvCopyWriter(file_handle, **kwargs)
