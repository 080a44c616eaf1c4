"""Error types raised by the SecretProviderClass conversion pipeline."""


class SpcToSecretError(Exception):
    """Base class for every conversion failure."""
    pass


class UsageError(SpcToSecretError):
    """Invalid command-line usage."""
    pass


class FileIOError(SpcToSecretError):
    """Reading the descriptor or writing the manifest failed."""
    pass


class ConfigError(SpcToSecretError):
    """Configuration error exception."""
    pass


class ParseError(SpcToSecretError):
    """The SecretProviderClass document is malformed."""
    pass


class ObjectListError(ParseError):
    """The embedded `spec.parameters.objects` document is malformed."""
    pass


class SecretFetchError(SpcToSecretError):
    """The secret store call failed (not found, denied, network)."""
    pass


class InvalidSecretFormat(SpcToSecretError):
    """The fetched payload is not a UTF-8 JSON object."""
    pass


class QuerySyntaxError(SpcToSecretError):
    """A JMESPath expression could not be compiled or evaluated."""
    pass


class TypeMismatchError(SpcToSecretError):
    """A JMESPath expression did not yield a single string."""

    def __init__(self, path: str, actual: str, expected: str = "string"):
        self.path = path
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {expected} at path '{path}', got {actual}")


class OutputEncodeError(SpcToSecretError):
    """The Secret manifest could not be serialized."""
    pass
