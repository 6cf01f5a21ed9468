from itertools import islice


def _chunks(lines, buffer_lines):
    while True:
        batch = list(islice(lines, buffer_lines))
        if not batch:
            return
        yield batch[0][:0].join(batch)


def chunk_lines(lines, buffer_lines):
    """Lazily join every buffer_lines consecutive lines into one chunk.

    Lines keep their own terminators, so nothing is inserted between them.
    Works for str as well as bytes lines; the last chunk may be shorter.
    """
    if buffer_lines < 1:
        raise ValueError("buffer_lines must be at least 1, got %r" % buffer_lines)
    return _chunks(iter(lines), buffer_lines)
