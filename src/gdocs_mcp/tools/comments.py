"""Comment tools for Google Docs.

Comments live in the Drive API, not the Docs API. New comments quote the
target text; the text is resolved against the document first so a comment is
never created for text that is not there.

NOTE: Drive does not anchor API-created comments to a document range in the
Docs editor. The quoted text is shown with the comment, but the comment is
listed as unanchored.
"""

from mcp.server.fastmcp.exceptions import ToolError

from ..anchors import resolve_text
from ..docs_store import DocsStore
from ..document_model import flatten, parse_document
from ..errors import DocsMCPError, InvalidIntent
from ..logging_config import get_logger

logger = get_logger(__name__)


def list_comments(store: DocsStore, doc_id: str) -> str:
    """List the document's comments with author, status and quoted text.

    Example output:
        Comments in document 1AbC...: 2 comment(s)
        [AAAA1] Jane Smith (2026-02-13T10:30:00.000Z, open): This needs revision
            Quoted: "quarterly results"
        [AAAA2] Bob Wilson (2026-02-13T11:45:00.000Z, resolved): Done
    """
    try:
        comments = store.list_comments(doc_id)
    except DocsMCPError as e:
        logger.error("tool_operation_failed", tool="list_comments", doc_id=doc_id, error=str(e), error_type=type(e).__name__)
        raise ToolError(f"Error listing comments: {e}") from e

    if not comments:
        return f"No comments found in document {doc_id}."

    lines = [f"Comments in document {doc_id}: {len(comments)} comment(s)"]
    for comment in comments:
        author = (comment.get("author") or {}).get("displayName") or "Unknown"
        status = "resolved" if comment.get("resolved") else "open"
        created = comment.get("createdTime") or "no date"
        lines.append(f"[{comment.get('id', '?')}] {author} ({created}, {status}): {comment.get('content', '')}")

        quoted = (comment.get("quotedFileContent") or {}).get("value")
        if quoted:
            lines.append(f'    Quoted: "{quoted}"')

    return "\n".join(lines)


def add_comment(
    store: DocsStore,
    doc_id: str,
    text_to_find: str,
    comment_text: str,
    match_instance: int = 1,
) -> str:
    """Add a comment quoting the n-th occurrence of text_to_find."""
    try:
        if not comment_text:
            raise InvalidIntent("Comment text must not be empty")
        document = parse_document(store.get_document(doc_id))
        anchor = resolve_text(flatten(document), text_to_find, match_instance)
        comment = store.create_comment(doc_id, comment_text, text_to_find)
    except DocsMCPError as e:
        logger.error("tool_operation_failed", tool="add_comment", doc_id=doc_id, error=str(e), error_type=type(e).__name__)
        raise ToolError(f"Error adding comment: {e}") from e

    return (
        f"Comment added successfully!\n"
        f"Comment ID: {comment.get('id')}\n"
        f'Quoted text: "{text_to_find}" (instance {match_instance}, range {anchor})'
    )
