"""Exceptions raised by the prr merge workflow."""


class PrrError(Exception):
    """Base exception for all prr errors."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.details:
            return f"{self.message}\n  Details: {self.details}"
        return self.message


class ConfigurationError(PrrError):
    """Raised when git config, ~/.prrconfig or credentials are unusable."""

    pass


class PreconditionError(PrrError):
    """Raised when the pull request cannot be merged in its current state."""

    pass


class UserAbortError(PrrError):
    """Raised when the user quits the commit message loop."""

    def __init__(self, message: str = "Aborted, pull request was not merged"):
        super().__init__(message)


class EditorError(PrrError):
    """Raised when the editor cannot be started or exits with an error."""

    def __init__(self, editor: str, message: str, exit_code: int | None = None):
        self.editor = editor
        self.exit_code = exit_code
        super().__init__(message)


class CommitMessageError(PrrError):
    """Raised when the commit message file cannot be written or read back."""

    pass


class StageError(PrrError):
    """Raised when a pipeline stage fails.

    Attributes:
        stage: Human readable stage description, e.g. "gather commits".
        original_error: The exception that made the stage fail.
    """

    def __init__(self, stage: str, target: str, original_error: Exception):
        self.stage = stage
        self.target = target
        self.original_error = original_error
        super().__init__(f"Unable to {stage} for {target}", str(original_error))
