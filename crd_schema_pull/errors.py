"""Fatal errors raised while pulling CRD schemas.

Each error names the operation that failed so the single line printed by the
command line is enough to tell which step to look at.
"""


class PullError(Exception):
    """Base class for errors that abort a schema pull."""

    def __init__(self, operation: str, cause: object):
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation}: {cause}")


class ConfigurationError(PullError):
    """The home directory or the cluster credentials could not be resolved."""


class TransportError(PullError):
    """Listing CRDs from the API server failed."""


class SchemaWriteError(PullError):
    """A schema could not be serialized or written below the schema root."""


class MalformedCRDError(PullError):
    """The API server returned a CRD without a field every CRD carries."""
