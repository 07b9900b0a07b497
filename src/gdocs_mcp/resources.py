"""MCP resources for gdocs-mcp.

- googledocs://list     the user's Google Docs (up to 50)
- googledocs://{doc_id} one document's title and plain text
"""

from mcp.server.fastmcp.exceptions import ResourceError

from .docs_store import DocsStore
from .document_model import parse_document, plain_text
from .errors import DocsMCPError
from .logging_config import get_logger
from .tools.documents import format_file_list

logger = get_logger(__name__)

LIST_PAGE_SIZE = 50


def list_docs(store: DocsStore) -> str:
    try:
        files = store.list_documents(page_size=LIST_PAGE_SIZE)
    except DocsMCPError as e:
        logger.error("resource_read_failed", resource="list-docs", error=str(e), error_type=type(e).__name__)
        raise ResourceError(f"Error listing documents: {e}") from e

    if not files:
        return "Google Docs in your Drive:\n\nNo Google Docs found."
    return "Google Docs in your Drive:\n\n" + format_file_list(files)


def get_doc(store: DocsStore, doc_id: str) -> str:
    try:
        document = parse_document(store.get_document(doc_id))
    except DocsMCPError as e:
        logger.error("resource_read_failed", resource="get-doc", doc_id=doc_id, error=str(e), error_type=type(e).__name__)
        raise ResourceError(f"Error getting document {doc_id}: {e}") from e

    return f"Document: {document.title}\n\n{plain_text(document)}"
