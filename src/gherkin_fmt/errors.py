class FormatError(Exception):
    """Base for everything that causes a single file to be skipped."""


class FileAccessError(FormatError):
    pass


class ParseError(FormatError):
    pass


class EmptyDocument(FormatError):
    def __init__(self, message: str = 'empty feature body') -> None:
        super().__init__(message)


class UnsupportedNode(FormatError):
    pass


class UnsupportedArgument(FormatError):
    pass


class EncodingError(FormatError):
    pass
