"""
Google Docs / Drive access for gdocs-mcp.

This module provides the DocsStore class, the only code that talks to Google.
It wraps the discovery-based Docs v1 and Drive v3 clients built once at server
start, executes requests, and translates API and transport failures into the
gdocs-mcp error hierarchy.

Key behaviors:
- No document state: every read goes to the API, nothing is cached
- Atomic edits: batch_update submits one documents.batchUpdate call, which
  Google applies all-or-nothing
- Error translation: 404 -> DocumentNotFound, other 4xx -> StoreRejected,
  429/5xx and transport/credential failures -> StoreUnavailable
- Lifecycle counters (requests, failures) for the health report
"""

import threading
from typing import Dict, List, Optional

import httplib2
from google.auth.exceptions import RefreshError, TransportError
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from .errors import DocumentNotFound, StoreRejected, StoreUnavailable
from .logging_config import get_logger

logger = get_logger(__name__)

DOCS_MIME_TYPE = "application/vnd.google-apps.document"
FILE_FIELDS = "files(id, name, createdTime, modifiedTime)"
COMMENT_FIELDS = (
    "nextPageToken, comments(id, content, createdTime, resolved, "
    "author(displayName), quotedFileContent(value))"
)


def escape_query_value(value: str) -> str:
    """Escape a value for use inside a single-quoted Drive query string."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


class DocsStore:
    """
    Thin, stateless gateway to the Docs and Drive APIs.

    Created once in the server lifespan and handed to every tool call through
    the lifespan context. The service objects are never reassigned after
    construction; only the metrics counters change, under a lock.

    Usage:
        store = DocsStore.from_credentials(credentials)
        raw = store.get_document(document_id)
        store.batch_update(document_id, plan.requests)
    """

    def __init__(self, docs_service, drive_service):
        self._docs = docs_service
        self._drive = drive_service
        self._lock = threading.Lock()

        # Metrics
        self.total_requests = 0
        self.total_failed = 0

    @classmethod
    def from_credentials(cls, credentials) -> "DocsStore":
        """Build Docs v1 and Drive v3 clients that share one set of credentials."""
        docs = build("docs", "v1", credentials=credentials, cache_discovery=False)
        drive = build("drive", "v3", credentials=credentials, cache_discovery=False)
        return cls(docs, drive)

    def _execute(self, operation: str, request, document_id: Optional[str] = None):
        with self._lock:
            self.total_requests += 1

        try:
            return request.execute()
        except HttpError as e:
            self._record_failure()
            status = e.resp.status
            reason = e.reason or str(e)
            logger.error(
                "store_request_failed",
                operation=operation,
                document_id=document_id,
                status=status,
                error=reason,
            )
            if status == 404 and document_id is not None:
                raise DocumentNotFound(document_id, reason) from e
            if status == 429 or status >= 500:
                raise StoreUnavailable(
                    f"Google API temporarily unavailable ({status}): {reason}"
                ) from e
            raise StoreRejected(status, reason) from e
        except RefreshError as e:
            self._record_failure()
            logger.error("credential_refresh_failed", operation=operation, error=str(e))
            raise StoreUnavailable(f"Could not obtain Google credentials: {e}") from e
        except (TransportError, httplib2.HttpLib2Error, OSError) as e:
            self._record_failure()
            logger.error(
                "store_unreachable",
                operation=operation,
                document_id=document_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise StoreUnavailable(f"Could not reach Google API: {e}") from e

    def _record_failure(self) -> None:
        with self._lock:
            self.total_failed += 1

    def get_document(self, document_id: str, fields: Optional[str] = None) -> Dict:
        """
        Fetch the structural JSON of a document.

        Args:
            document_id: Google Docs document id
            fields: Optional partial-response field mask

        Returns:
            The documents.get response

        Raises:
            DocumentNotFound: If the id does not resolve to an accessible document
            StoreRejected, StoreUnavailable: On other failures
        """
        params = {"documentId": document_id}
        if fields:
            params["fields"] = fields
        document = self._execute(
            "documents.get", self._docs.documents().get(**params), document_id
        )
        logger.debug("document_fetched", document_id=document_id)
        return document

    def batch_update(self, document_id: str, requests: List[Dict]) -> Dict:
        """
        Apply an ordered list of requests as one atomic documents.batchUpdate.

        Google applies either every request or none of them.

        Returns:
            The batchUpdate response (replies per request)
        """
        response = self._execute(
            "documents.batchUpdate",
            self._docs.documents().batchUpdate(
                documentId=document_id, body={"requests": requests}
            ),
            document_id,
        )
        logger.info("batch_update_applied", document_id=document_id, request_count=len(requests))
        return response

    def create_document(self, title: str) -> Dict:
        """Create an empty document and return the documents.create response."""
        document = self._execute(
            "documents.create", self._docs.documents().create(body={"title": title})
        )
        logger.info("document_created", document_id=document.get("documentId"), title=title)
        return document

    def delete_document(self, document_id: str) -> None:
        """Delete the document's Drive file."""
        self._execute(
            "files.delete",
            self._drive.files().delete(fileId=document_id, supportsAllDrives=True),
            document_id,
        )
        logger.info("document_deleted", document_id=document_id)

    def list_documents(self, query: Optional[str] = None, page_size: int = 50) -> List[Dict]:
        """
        List Google Docs visible to the user, optionally filtered by full text.

        Args:
            query: Optional full-text search string
            page_size: Maximum number of files to return

        Returns:
            List of Drive file dicts with id, name, createdTime, modifiedTime
        """
        q = f"mimeType='{DOCS_MIME_TYPE}' and trashed=false"
        if query:
            q += f" and fullText contains '{escape_query_value(query)}'"

        response = self._execute(
            "files.list",
            self._drive.files().list(
                q=q,
                fields=FILE_FIELDS,
                pageSize=page_size,
                supportsAllDrives=True,
                includeItemsFromAllDrives=True,
                corpora="allDrives",
            ),
        )
        return response.get("files") or []

    def list_comments(self, document_id: str) -> List[Dict]:
        """Return every non-deleted comment on the document, following pagination."""
        comments: List[Dict] = []
        page_token = None
        while True:
            params = {"fileId": document_id, "fields": COMMENT_FIELDS, "includeDeleted": False}
            if page_token:
                params["pageToken"] = page_token
            response = self._execute(
                "comments.list", self._drive.comments().list(**params), document_id
            )
            comments.extend(response.get("comments") or [])
            page_token = response.get("nextPageToken")
            if not page_token:
                return comments

    def create_comment(self, document_id: str, content: str, quoted_text: str) -> Dict:
        """Create a comment that quotes quoted_text from the document."""
        body = {
            "content": content,
            "quotedFileContent": {"mimeType": "text/plain", "value": quoted_text},
        }
        comment = self._execute(
            "comments.create",
            self._drive.comments().create(
                fileId=document_id, body=body, fields="id, content, createdTime"
            ),
            document_id,
        )
        logger.info("comment_created", document_id=document_id, comment_id=comment.get("id"))
        return comment

    def get_metrics(self) -> Dict[str, int]:
        """Request counters for the health report."""
        with self._lock:
            return {
                "total_requests": self.total_requests,
                "total_failed": self.total_failed,
            }
