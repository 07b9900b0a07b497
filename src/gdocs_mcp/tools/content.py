"""Index-based content tools for Google Docs.

Insert text, delete a range, insert a page break. These take explicit
document offsets (1-based, as reported by read-doc-advanced in json format)
and are validated locally before any request is sent.
"""

from mcp.server.fastmcp.exceptions import ToolError

from ..docs_store import DocsStore
from ..errors import DocsMCPError
from ..logging_config import get_logger
from ..planner import plan_delete_range, plan_insert_text, plan_page_break

logger = get_logger(__name__)


def insert_text_at_index(store: DocsStore, doc_id: str, text_to_insert: str, index: int) -> str:
    """Insert text at a 1-based document index."""
    try:
        plan = plan_insert_text(text_to_insert, index)
        store.batch_update(doc_id, plan.requests)
    except DocsMCPError as e:
        logger.error("tool_operation_failed", tool="insert_text_at_index", doc_id=doc_id, error=str(e), error_type=type(e).__name__)
        raise ToolError(f"Error inserting text: {e}") from e

    return (
        f"Text inserted successfully at index {index}!\n"
        f"Document ID: {doc_id}\n"
        f'Text inserted: "{text_to_insert}"'
    )


def delete_range(store: DocsStore, doc_id: str, start_index: int, end_index: int) -> str:
    """Delete the content in [start_index, end_index).

    An end index that does not lie after the start index is rejected without
    contacting the API.
    """
    try:
        plan = plan_delete_range(start_index, end_index)
        store.batch_update(doc_id, plan.requests)
    except DocsMCPError as e:
        logger.error("tool_operation_failed", tool="delete_range", doc_id=doc_id, error=str(e), error_type=type(e).__name__)
        raise ToolError(f"Error deleting range: {e}") from e

    return (
        f"Content deleted successfully!\n"
        f"Document ID: {doc_id}\n"
        f"Range deleted: {start_index}-{end_index}"
    )


def insert_page_break(store: DocsStore, doc_id: str, index: int) -> str:
    try:
        plan = plan_page_break(index)
        store.batch_update(doc_id, plan.requests)
    except DocsMCPError as e:
        logger.error("tool_operation_failed", tool="insert_page_break", doc_id=doc_id, error=str(e), error_type=type(e).__name__)
        raise ToolError(f"Error inserting page break: {e}") from e

    return f"Page break inserted successfully at index {index}!\nDocument ID: {doc_id}"
