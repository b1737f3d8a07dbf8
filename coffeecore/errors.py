class ValidationFailed(ValueError):
    """Malformed or missing input caught before anything is sent."""

    def __init__(self, field: str, reason: str):
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


class SubmissionBusy(RuntimeError):
    """A surface already has a submission in flight."""


class ModalClosed(RuntimeError):
    """Email capture submitted with no product modal open."""
