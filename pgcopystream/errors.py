"""Exceptions raised by pgcopystream"""


class CopyError(Exception):
    """Base class of all errors raised by this package"""


class ConfigurationError(CopyError):
    pass


class UnsupportedError(CopyError):
    pass


class TypeUnsupported(UnsupportedError):
    """A value handed to a payload writer has no encoder"""


class ConflictingDestination(CopyError):
    """copy_to was asked to write to a file and to a line consumer at once"""

    def __init__(self, path):
        CopyError.__init__(self,
                           "You have to choose between exporting to a file (%s) "
                           "or receiving the lines in a consumer" % path)
        self.path = path


class ChannelFailure(CopyError):
    """The server or the driver rejected or aborted a COPY operation"""

    def __init__(self, message, statement=None):
        CopyError.__init__(self, message)
        self.statement = statement


class EncodingFailure(CopyError):
    """A CSV record could not be parsed"""

    def __init__(self, message, line=None):
        CopyError.__init__(self, message)
        self.line = line
