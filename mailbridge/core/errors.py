"""Exception types raised by mailbridge.

Decode helpers degrade to zero values instead of raising where the
message as a whole can still be decoded; these exceptions mark the cases
where a caller has to decide what to do.
"""


class MailbridgeError(Exception):
    """Base class for all mailbridge errors."""

    pass


class ConfigError(MailbridgeError):
    """A configuration value is missing or invalid.

    Attributes:
        field: Name of the offending field, or "" when not field-specific.
        message: Human readable description.
    """

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.field:
            return f"config error [{self.field}]: {self.message}"
        return f"config error: {self.message}"


class ValidationError(ConfigError):
    """A draft precondition was violated before composition."""

    def __str__(self) -> str:
        return self.message


class EncodingError(MailbridgeError, ValueError):
    """No byte-decoding strategy accepted the input."""

    pass


class MimeDepthError(EncodingError):
    """A MIME part tree is nested deeper than the configured limit."""

    pass


class DateFormatError(MailbridgeError, ValueError):
    """No supported date format matched. Non-fatal on the decode path."""

    pass


class ComposeError(MailbridgeError):
    """Serializing a validated draft failed at a named stage."""

    def __init__(self, stage: str, cause: Exception | str):
        self.stage = stage
        self.cause = cause
        super().__init__(f"failed to {stage}: {cause}")


class BatchPartialFailure(MailbridgeError):
    """One or more ids failed during a batch operation.

    Attributes:
        operation: Label of the operation (e.g. "trash").
        failures: ``(message_id, exception)`` pairs in input order.
    """

    def __init__(self, operation: str, failures: list[tuple[str, Exception]]):
        self.operation = operation
        self.failures = failures
        details = "; ".join(f"{message_id}: {error}" for message_id, error in failures)
        super().__init__(f"failed to {operation} {len(failures)} messages: {details}")

    @property
    def failed_ids(self) -> list[str]:
        return [message_id for message_id, _ in self.failures]
