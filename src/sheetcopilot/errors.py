"""Exceptions raised while generating a formula."""

from typing import Optional


class SheetCopilotError(Exception):
    """Base class for failures surfaced to the user."""

    code = "error"
    fatal = True


class NoSelectionError(SheetCopilotError):
    """Exception raised when no range is selected."""

    code = "no_selection"

    def __init__(self, message: str = "No range selected"):
        super().__init__(message)


class EmptySelectionError(SheetCopilotError):
    """Exception raised when the selected range has no rows or columns."""

    code = "empty_selection"

    def __init__(self, message: str = "No data in selected range"):
        super().__init__(message)


class HostError(SheetCopilotError):
    """Exception raised when the spreadsheet host cannot be read or written."""

    code = "host_error"


class AuthenticationMissingError(SheetCopilotError):
    """Exception raised when no API credential is configured."""

    code = "authentication_missing"

    def __init__(self, provider: str, env_var: str):
        self.provider = provider
        self.env_var = env_var
        super().__init__(
            f"{env_var} is required when LLM_PROVIDER is '{provider}'. "
            "Set it in the environment or a .env file."
        )


class UpstreamError(SheetCopilotError):
    """Exception raised when the completion service fails or returns garbage."""

    code = "upstream_error"

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class ExtractionFailure(SheetCopilotError):
    """Exception raised when no formula can be recovered from a reply."""

    code = "extraction_failure"

    def __init__(self, reply: str):
        self.reply = reply
        super().__init__("Could not extract formula from AI response")


class InsertionError(SheetCopilotError):
    """Exception raised when the host rejects a formula write."""

    code = "insertion_error"
    fatal = False

    def __init__(self, cell_address: str, reason: str):
        self.cell_address = cell_address
        self.reason = reason
        super().__init__(f"Formula generated but insertion into {cell_address} failed: {reason}")
