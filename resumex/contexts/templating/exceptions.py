"""Custom exceptions for the templating context."""

from typing import Optional


class TemplateLoadError(Exception):
    """
    Exception raised when a template variant module cannot be loaded.

    Attributes:
        message: Error description
        template_id: Requested template id
        attempts: Number of load attempts made
        original_error: Last underlying error
    """

    def __init__(
        self,
        message: str,
        template_id: Optional[str] = None,
        attempts: int = 1,
        original_error: Optional[BaseException] = None,
    ):
        self.message = message
        self.template_id = template_id
        self.attempts = attempts
        self.original_error = original_error

        parts = [message]
        if template_id:
            parts.append(f"Template: {template_id}")
        if attempts > 1:
            parts.append(f"Attempts: {attempts}")
        if original_error is not None:
            parts.append(f"Original error: {original_error!r}")

        super().__init__("\n".join(parts))


class TemplateRenderError(Exception):
    """
    Exception raised when a variant fails while rendering a document.

    Attributes:
        message: Error description
        template_id: Variant that failed
        original_error: The exception raised by the variant
    """

    def __init__(
        self,
        message: str,
        template_id: Optional[str] = None,
        original_error: Optional[BaseException] = None,
    ):
        self.message = message
        self.template_id = template_id
        self.original_error = original_error

        parts = [message]
        if template_id:
            parts.append(f"Template: {template_id}")
        if original_error is not None:
            parts.append(f"Original error: {original_error!r}")

        super().__init__("\n".join(parts))
