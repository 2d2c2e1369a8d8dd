class ConstraintViolation(ValueError):
    """Raised when a caller passes input that breaks a core precondition (a programming error, not a data error)."""
    pass


class FeatureDisabledError(RuntimeError):
    """Raised when a disabled feature is invoked."""

    def __init__(self, feature: str, code: str, message: str) -> None:
        super().__init__(message)
        self.feature = feature
        self.code = code
        self.message = message
