"""Exceptions raised by the dialog driver."""


class HBCIError(Exception):
    """Base class for dialog driver errors."""


class ConstraintViolation(HBCIError):
    """A task is missing required parameters or violates its own limits."""


class CannotAddTaskError(HBCIError):
    """A task could not be added to a dialog."""

    def __init__(self, task_name: str, reason: str = ""):
        self.task_name = task_name
        message = f"cannot add task {task_name}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class DialogBusyError(HBCIError):
    """do_it() was called while the dialog was already running."""


class InstituteMessageMissing(HBCIError):
    """No institute message exists under the requested header."""
