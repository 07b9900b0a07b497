"""
Document lifecycle tools for gdocs-mcp.

This module provides MCP tool functions for whole-document operations:
create, update (append or replace), search, delete and read.

Append and replace always re-read the document first: the insertion point
depends on the live length of the body, which earlier edits may have changed.
"""

import json
from typing import Dict, List, Optional

from mcp.server.fastmcp.exceptions import ToolError

from ..docs_store import DocsStore
from ..document_model import document_length, parse_document, plain_text, to_markdown
from ..errors import DocsMCPError, StoreError
from ..logging_config import get_logger
from ..planner import plan_append, plan_insert_text, plan_replace

logger = get_logger(__name__)

READ_FORMATS = ("text", "json", "markdown")
SEARCH_PAGE_SIZE = 10


def format_file_list(files: List[Dict]) -> str:
    """Render Drive file entries as Title/ID/Created/Last Modified blocks."""
    blocks = []
    for file in files:
        blocks.append(
            f"Title: {file.get('name')}\n"
            f"ID: {file.get('id')}\n"
            f"Created: {file.get('createdTime')}\n"
            f"Last Modified: {file.get('modifiedTime')}"
        )
    return "\n\n".join(blocks)


def create_doc(store: DocsStore, title: str, content: str = "") -> str:
    """
    Create a new Google Doc, optionally with initial content.

    Args:
        store: Docs API gateway
        title: Title of the new document
        content: Optional text inserted at the start of the body

    Returns:
        Success message with the new document id and its resource URI

    Examples:
        >>> create_doc(store, "Q4 Report")
        "Document created successfully!\\nTitle: Q4 Report\\nDocument ID: 1AbC...\\n..."
    """
    try:
        document = store.create_document(title)
        document_id = document.get("documentId")
        if not document_id:
            raise StoreError("Failed to create document - no document ID returned")
        if content:
            store.batch_update(document_id, plan_insert_text(content, 1).requests)
    except DocsMCPError as e:
        logger.error("tool_operation_failed", tool="create_doc", title=title, error=str(e), error_type=type(e).__name__)
        raise ToolError(f"Error creating document: {e}") from e

    return (
        f"Document created successfully!\n"
        f"Title: {title}\n"
        f"Document ID: {document_id}\n"
        f"You can now reference this document using: googledocs://{document_id}"
    )


def update_doc(store: DocsStore, doc_id: str, content: str, replace_all: bool = False) -> str:
    """
    Append content to a document, or replace its entire body.

    Replace deletes the current body text and inserts content at index 1 in a
    single batch; append inserts at the current end of the body.
    """
    try:
        document = parse_document(store.get_document(doc_id))
        length = document_length(document)
        if replace_all:
            plan = plan_replace(content, length)
        else:
            plan = plan_append(content, length)
        store.batch_update(doc_id, plan.requests)
    except DocsMCPError as e:
        logger.error("tool_operation_failed", tool="update_doc", doc_id=doc_id, error=str(e), error_type=type(e).__name__)
        raise ToolError(f"Error updating document: {e}") from e

    mode = "replaced" if replace_all else "appended"
    logger.info("document_updated", doc_id=doc_id, mode=mode, previous_length=length)

    return f"Document updated successfully!\nDocument ID: {doc_id}\nContent {mode} ({len(content)} characters)"


def search_docs(store: DocsStore, query: str) -> str:
    """Full-text search over the user's Google Docs (first 10 results)."""
    try:
        files = store.list_documents(query=query, page_size=SEARCH_PAGE_SIZE)
    except DocsMCPError as e:
        logger.error("tool_operation_failed", tool="search_docs", query=query, error=str(e), error_type=type(e).__name__)
        raise ToolError(f"Error searching documents: {e}") from e

    header = f'Search results for "{query}":\n\n'
    if not files:
        return header + "No documents found matching your query."
    return header + format_file_list(files)


def delete_doc(store: DocsStore, doc_id: str) -> str:
    """Delete a document. The title is read first so the confirmation can name it."""
    try:
        title = store.get_document(doc_id, fields="title").get("title")
        store.delete_document(doc_id)
    except DocsMCPError as e:
        logger.error("tool_operation_failed", tool="delete_doc", doc_id=doc_id, error=str(e), error_type=type(e).__name__)
        raise ToolError(f"Error deleting document: {e}") from e

    return f'Document "{title}" (ID: {doc_id}) has been successfully deleted.'


def _truncate(text: str, max_length: Optional[int], note: str) -> str:
    if max_length is None or len(text) <= max_length:
        return text
    return text[:max_length] + note.format(total=len(text))


def read_doc_advanced(
    store: DocsStore,
    doc_id: str,
    format: str = "text",
    max_length: Optional[int] = None,
) -> str:
    """
    Read a document as plain text, raw JSON structure, or Markdown.

    Args:
        store: Docs API gateway
        doc_id: Google Docs document id
        format: "text", "json" (the documents.get response, with offsets) or "markdown"
        max_length: Optional character limit; longer output is truncated with a note

    Returns:
        Document content in the requested format
    """
    if format not in READ_FORMATS:
        raise ToolError(f"Error reading document: format must be one of {', '.join(READ_FORMATS)}")
    if max_length is not None and max_length < 1:
        raise ToolError("Error reading document: max_length must be 1 or greater")

    try:
        raw = store.get_document(doc_id)
    except DocsMCPError as e:
        logger.error("tool_operation_failed", tool="read_doc_advanced", doc_id=doc_id, error=str(e), error_type=type(e).__name__)
        raise ToolError(f"Error reading document: {e}") from e

    if format == "json":
        return _truncate(
            json.dumps(raw, indent=2),
            max_length,
            "\n... [JSON truncated: {total} total chars]",
        )

    document = parse_document(raw)

    if format == "markdown":
        return _truncate(
            to_markdown(document),
            max_length,
            "\n\n... [Markdown truncated: {total} total chars]",
        )

    text = plain_text(document)
    if max_length is not None and len(text) > max_length:
        return (
            f"Content (truncated to {max_length} chars of {len(text)} total):\n---\n"
            f"{text[:max_length]}\n\n"
            f"... [Document continues for {len(text) - max_length} more characters]"
        )
    return f"Content ({len(text)} characters):\n---\n{text}"
