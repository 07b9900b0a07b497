"""Tests for DocsStore request building and error translation."""

import json
from unittest.mock import MagicMock

import httplib2
import pytest
from google.auth.exceptions import RefreshError
from googleapiclient.errors import HttpError

from gdocs_mcp.docs_store import DocsStore, escape_query_value
from gdocs_mcp.errors import DocumentNotFound, StoreRejected, StoreUnavailable


def http_error(status, message="boom"):
    content = json.dumps({"error": {"code": status, "message": message}}).encode("utf-8")
    return HttpError(httplib2.Response({"status": status}), content)


@pytest.fixture()
def docs():
    return MagicMock()


@pytest.fixture()
def drive():
    return MagicMock()


@pytest.fixture()
def gateway(docs, drive):
    return DocsStore(docs, drive)


class TestRequests:
    """Requests are built with the expected parameters."""

    def test_get_document(self, gateway, docs):
        docs.documents.return_value.get.return_value.execute.return_value = {"documentId": "d1"}

        assert gateway.get_document("d1") == {"documentId": "d1"}
        docs.documents.return_value.get.assert_called_once_with(documentId="d1")

    def test_get_document_with_fields(self, gateway, docs):
        gateway.get_document("d1", fields="title")

        docs.documents.return_value.get.assert_called_once_with(documentId="d1", fields="title")

    def test_batch_update_wraps_requests(self, gateway, docs):
        requests = [{"insertText": {"location": {"index": 1}, "text": "Hi"}}]

        gateway.batch_update("d1", requests)

        docs.documents.return_value.batchUpdate.assert_called_once_with(
            documentId="d1", body={"requests": requests}
        )

    def test_create_document(self, gateway, docs):
        docs.documents.return_value.create.return_value.execute.return_value = {"documentId": "new"}

        assert gateway.create_document("Title")["documentId"] == "new"
        docs.documents.return_value.create.assert_called_once_with(body={"title": "Title"})

    def test_delete_document(self, gateway, drive):
        gateway.delete_document("d1")

        drive.files.return_value.delete.assert_called_once_with(fileId="d1", supportsAllDrives=True)

    def test_list_documents_query(self, gateway, drive):
        drive.files.return_value.list.return_value.execute.return_value = {"files": [{"id": "d1"}]}

        assert gateway.list_documents(query="Bob's plan", page_size=10) == [{"id": "d1"}]

        kwargs = drive.files.return_value.list.call_args.kwargs
        assert kwargs["q"] == (
            "mimeType='application/vnd.google-apps.document' and trashed=false"
            " and fullText contains 'Bob\\'s plan'"
        )
        assert kwargs["pageSize"] == 10

    def test_list_documents_without_query(self, gateway, drive):
        drive.files.return_value.list.return_value.execute.return_value = {}

        assert gateway.list_documents() == []
        assert "fullText" not in drive.files.return_value.list.call_args.kwargs["q"]

    def test_list_comments_follows_pages(self, gateway, drive):
        drive.comments.return_value.list.return_value.execute.side_effect = [
            {"comments": [{"id": "a"}], "nextPageToken": "p2"},
            {"comments": [{"id": "b"}]},
        ]

        assert gateway.list_comments("d1") == [{"id": "a"}, {"id": "b"}]
        second_call = drive.comments.return_value.list.call_args_list[1]
        assert second_call.kwargs["pageToken"] == "p2"

    def test_create_comment_quotes_text(self, gateway, drive):
        drive.comments.return_value.create.return_value.execute.return_value = {"id": "c1"}

        gateway.create_comment("d1", "Check this", "Hello")

        kwargs = drive.comments.return_value.create.call_args.kwargs
        assert kwargs["fileId"] == "d1"
        assert kwargs["body"] == {
            "content": "Check this",
            "quotedFileContent": {"mimeType": "text/plain", "value": "Hello"},
        }


class TestErrorTranslation:
    """API and transport failures become gdocs-mcp errors."""

    def test_not_found(self, gateway, docs):
        docs.documents.return_value.get.return_value.execute.side_effect = http_error(
            404, "Requested entity was not found."
        )

        with pytest.raises(DocumentNotFound) as exc_info:
            gateway.get_document("missing")

        assert exc_info.value.document_id == "missing"
        assert exc_info.value.status == 404
        assert "Document not found: missing" in str(exc_info.value)

    def test_bad_request(self, gateway, docs):
        docs.documents.return_value.batchUpdate.return_value.execute.side_effect = http_error(
            400, "Invalid requests[0].deleteContentRange"
        )

        with pytest.raises(StoreRejected) as exc_info:
            gateway.batch_update("d1", [])

        assert not isinstance(exc_info.value, DocumentNotFound)
        assert exc_info.value.status == 400
        assert exc_info.value.reason == "Invalid requests[0].deleteContentRange"

    @pytest.mark.parametrize("status", [429, 500, 503])
    def test_retryable_statuses(self, gateway, docs, status):
        docs.documents.return_value.get.return_value.execute.side_effect = http_error(status)

        with pytest.raises(StoreUnavailable):
            gateway.get_document("d1")

    def test_refresh_failure(self, gateway, docs):
        docs.documents.return_value.get.return_value.execute.side_effect = RefreshError("invalid_grant")

        with pytest.raises(StoreUnavailable, match="Could not obtain Google credentials"):
            gateway.get_document("d1")

    def test_network_failure(self, gateway, drive):
        drive.files.return_value.list.return_value.execute.side_effect = TimeoutError("timed out")

        with pytest.raises(StoreUnavailable, match="Could not reach Google API"):
            gateway.list_documents()


class TestMetrics:
    def test_counts_requests_and_failures(self, gateway, docs):
        get = docs.documents.return_value.get.return_value
        get.execute.side_effect = [{"documentId": "d1"}, http_error(500)]

        gateway.get_document("d1")
        with pytest.raises(StoreUnavailable):
            gateway.get_document("d1")

        assert gateway.get_metrics() == {"total_requests": 2, "total_failed": 1}


def test_escape_query_value():
    assert escape_query_value("it's") == "it\\'s"
    assert escape_query_value("a\\b") == "a\\\\b"
