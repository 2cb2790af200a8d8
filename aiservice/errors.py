"""
Error types surfaced to callers of the AI service.
"""


class ApplicationError(Exception):
    """Base error for failures the caller should see as-is."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ProviderNotConfiguredError(ApplicationError):
    """Raised when a prompting call is made without a configured AI provider."""

    def __init__(self, message: str = "No AI provider has been configured."):
        super().__init__(message)
