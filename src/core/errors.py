"""
Pipeline error taxonomy.

Row-level validation failures are NOT errors: they are recorded on the
record itself via ``is_valid`` and never raised. The exceptions below cover
configuration, decoding and storage problems at the batch or scan level.
"""


class PipelineError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(PipelineError):
    """Raised when a required configuration option is missing or malformed."""

    def __init__(self, option: str, message: str):
        self.option = option
        self.message = message
        super().__init__(f"{option}: {message}")


class DecodeError(PipelineError):
    """Raised when a stored partition cannot be decoded as a JSON array of records."""

    def __init__(self, location: str, message: str):
        self.location = location
        self.message = message
        super().__init__(f"Cannot decode '{location}': {message}")


class StorageError(PipelineError):
    """Raised when the object store fails to fetch, persist, delete or list."""

    def __init__(self, location: str, message: str):
        self.location = location
        self.message = message
        super().__init__(f"Storage failure at '{location}': {message}")


class NotFoundError(StorageError):
    """Raised when an object does not exist at the requested location."""

    def __init__(self, location: str):
        super().__init__(location, "object not found")
