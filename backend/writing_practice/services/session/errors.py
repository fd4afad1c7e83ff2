class PracticeError(Exception):
    """Base class for recoverable practice-session errors."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidPromptError(PracticeError):
    """Custom prompt was empty after trimming."""


class SessionLockedError(PracticeError):
    """Response edit arrived while no editable session was active."""

    status_code = 409
