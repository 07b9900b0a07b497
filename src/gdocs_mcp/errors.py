"""Error types for gdocs-mcp.

Every failure a tool can report is a DocsMCPError subclass. Tools catch these
at the MCP boundary and convert them into error results; nothing below the
tool layer swallows them.
"""

from typing import Optional


class DocsMCPError(Exception):
    """Base class for all gdocs-mcp failures.

    Attributes:
        message: User-facing description of the failure
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidIntent(DocsMCPError):
    """Raised when a tool call supplies no usable style or content attribute."""


class UnsupportedFeature(DocsMCPError):
    """Raised when an intent asks for something the planner cannot express.

    Attributes:
        feature: Short name of the unsupported capability
    """

    def __init__(self, feature: str, detail: str = ""):
        self.feature = feature
        message = f"{feature} is not supported"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class AnchorNotFound(DocsMCPError):
    """Raised when the requested occurrence of a target text does not exist.

    Attributes:
        text: The searched text
        instance: The requested 1-based occurrence
        scope: "text" for character anchors, "paragraph" for paragraph anchors
    """

    def __init__(self, text: str, instance: int, scope: str = "text"):
        self.text = text
        self.instance = instance
        self.scope = scope
        where = "the document" if scope == "text" else "any paragraph"
        super().__init__(
            f'Could not find instance {instance} of text "{text}" in {where}'
        )


class InvalidRange(DocsMCPError):
    """Raised for a content range whose end does not lie after its start.

    Attributes:
        start_index: Requested range start (inclusive)
        end_index: Requested range end (exclusive)
    """

    def __init__(self, start_index: int, end_index: int, message: Optional[str] = None):
        self.start_index = start_index
        self.end_index = end_index
        super().__init__(
            message
            or f"End index ({end_index}) must be greater than start index ({start_index})"
        )


class StoreError(DocsMCPError):
    """Base class for failures reported by, or on the way to, the Google APIs."""


class StoreUnavailable(StoreError):
    """Raised when the store cannot be reached or credentials cannot be obtained."""


class StoreRejected(StoreError):
    """Raised when the store answers a request with an API-level error.

    Attributes:
        status: HTTP status code returned by the API
        reason: Error message reported by the API
    """

    def __init__(self, status: int, reason: str, message: Optional[str] = None):
        self.status = status
        self.reason = reason
        super().__init__(message or f"Google API error {status}: {reason}")


class DocumentNotFound(StoreRejected):
    """Raised when the document id does not resolve to an accessible document."""

    def __init__(self, document_id: str, reason: str = "Requested entity was not found."):
        self.document_id = document_id
        super().__init__(404, reason, f"Document not found: {document_id} ({reason})")
