"""Options of a COPY call and the format clause derived from them"""

from dataclasses import dataclass, fields, replace

from . import errors

CSV = 'csv'
BINARY = 'binary'

COPY_TO = 'copy_to'
COPY_FROM = 'copy_from'


def export_defaults():
    return {'delimiter': ',', 'format': CSV, 'header': True}


def import_defaults():
    defaults = export_defaults()
    defaults['quote'] = '"'
    return defaults


@dataclass(frozen=True)
class CopyOptions(object):
    """Options accepted by copy_to and copy_from.

    delimiter, header, quote and null only apply to the csv format.
    columns, table and map are only used when importing, query and
    buffer_lines only when exporting.
    """
    format: str = CSV
    delimiter: str = ','
    header: bool = True
    quote: str = '"'
    null: str = None
    columns: tuple = None
    table: str = None
    map: dict = None
    query: str = None
    buffer_lines: int = None

    def __post_init__(self):
        fmt = str(self.format).lower()
        if fmt not in (CSV, BINARY):
            raise errors.UnsupportedError("Unknown COPY format %r" % self.format)
        object.__setattr__(self, 'format', fmt)

        for name in ('delimiter', 'quote'):
            value = getattr(self, name)
            if not isinstance(value, str) or len(value) != 1:
                raise errors.ConfigurationError(
                    "%s must be a single character, got %r" % (name, value))

        if self.columns is not None:
            object.__setattr__(self, 'columns', tuple(self.columns))

        if self.buffer_lines is not None:
            if isinstance(self.buffer_lines, bool) or \
               not isinstance(self.buffer_lines, int) or self.buffer_lines < 0:
                raise errors.ConfigurationError(
                    "buffer_lines must be a non-negative integer, got %r" % (self.buffer_lines,))

    @property
    def is_binary(self):
        return self.format == BINARY

    @classmethod
    def build(cls, defaults, options=None, **overrides):
        """Merge options and keyword overrides over a fresh set of defaults.

        A CopyOptions instance is taken as complete: only the overrides are
        applied to it.  Options given as None fall back to the default.
        """
        if isinstance(options, CopyOptions):
            base, values = options, overrides
        else:
            base, values = None, dict(options or {})
            values.update(overrides)

        unknown = sorted(set(values) - set(f.name for f in fields(cls)))
        if unknown:
            raise errors.ConfigurationError("Unknown COPY option(s): %s" % ", ".join(unknown))

        if base is not None:
            return replace(base, **values)
        merged = dict(defaults)
        merged.update((k, v) for k, v in values.items() if v is not None)
        return cls(**merged)

    @classmethod
    def for_export(cls, options=None, **overrides):
        return cls.build(export_defaults(), options, **overrides)

    @classmethod
    def for_import(cls, options=None, **overrides):
        return cls.build(import_defaults(), options, **overrides)


def _literal(value):
    return "'%s'" % str(value).replace("'", "''")


def options_format(direction, options):
    """Return the format clause of a COPY statement.

    direction is COPY_TO for exports and COPY_FROM for imports.  HEADER is
    never emitted for imports: the header line is consumed while working out
    the column list and never reaches the server.
    """
    if options.is_binary:
        return "BINARY"

    if direction == COPY_TO:
        tokens = ["DELIMITER", _literal(options.delimiter), "CSV"]
        if options.header:
            tokens.append("HEADER")
    elif direction == COPY_FROM:
        tokens = ["DELIMITER", _literal(options.delimiter),
                  "QUOTE", _literal(options.quote)]
        if options.null is not None:
            tokens.extend(["NULL", _literal(options.null)])
        tokens.append("CSV")
    else:
        raise ValueError("Unknown COPY direction %r" % direction)

    return " ".join(tokens)
