"""
Custom Exceptions.

Every failure that reaches a controller is an ApplicationError. Its
`message` is safe to show to the user; `code` is a stable identifier for
logs and tests.

    VAL_VALIDATION_ERROR  - a draft the editor refuses to save
    RES_CONFLICT          - a note id that is already taken
    SYS_DATABASE_ERROR    - any other storage failure
    SYS_CHANNEL_CLOSED    - an effect receiver outlived its controller
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ValidationError(ApplicationError):
    """A note draft failed an editor rule. `details` names the offending fields."""

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class ConflictError(ApplicationError):
    """Insert of a note whose id already exists."""

    def __init__(self, message: str = "Note already exists") -> None:
        super().__init__(message, code="RES_CONFLICT")


class DatabaseError(ApplicationError):
    """Storage failure, translated from SQLAlchemy by the use case layer."""

    def __init__(self, message: str = "Database error") -> None:
        super().__init__(message, code="SYS_DATABASE_ERROR")


class ChannelClosedError(ApplicationError):
    """Receive on an effect channel that was closed."""

    def __init__(self, message: str = "Channel closed") -> None:
        super().__init__(message, code="SYS_CHANNEL_CLOSED")
