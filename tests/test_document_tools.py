"""Tests for the document lifecycle tools and the MCP resources."""

import json

import pytest
from mcp.server.fastmcp.exceptions import ResourceError, ToolError

from gdocs_mcp import resources
from gdocs_mcp.errors import StoreUnavailable
from gdocs_mcp.tools.documents import (
    create_doc,
    delete_doc,
    read_doc_advanced,
    search_docs,
    update_doc,
)

FILES = [
    {
        "id": "doc-1",
        "name": "Q4 Report",
        "createdTime": "2026-01-02T09:00:00.000Z",
        "modifiedTime": "2026-01-05T17:30:00.000Z",
    },
    {
        "id": "doc-2",
        "name": "Notes",
        "createdTime": "2026-01-03T09:00:00.000Z",
        "modifiedTime": "2026-01-03T09:10:00.000Z",
    },
]


class TestCreateDoc:
    def test_with_content(self, store):
        result = create_doc(store, "Meeting Notes", "Attendees: everyone")

        assert store.created_titles == ["Meeting Notes"]
        assert store.batches == [
            [{"insertText": {"location": {"index": 1}, "text": "Attendees: everyone"}}]
        ]
        assert "Document ID: doc-1" in result
        assert "googledocs://doc-1" in result

    def test_without_content(self, store):
        create_doc(store, "Empty")

        assert store.batches == []

    def test_store_failure(self, store):
        store.fail_with = StoreUnavailable("Could not reach Google API: offline")

        with pytest.raises(ToolError, match="Error creating document"):
            create_doc(store, "Anything")


class TestUpdateDoc:
    """Append and replace use the live body length."""

    def test_append_before_final_newline(self, store):
        result = update_doc(store, "doc-1", "More text")

        assert store.batches == [
            [{"insertText": {"location": {"index": 68}, "text": "More text"}}]
        ]
        assert "Content appended (9 characters)" in result

    def test_replace_deletes_body_then_inserts(self, store):
        result = update_doc(store, "doc-1", "Fresh start", replace_all=True)

        assert store.batches == [
            [
                {"deleteContentRange": {"range": {"startIndex": 1, "endIndex": 68}}},
                {"insertText": {"location": {"index": 1}, "text": "Fresh start"}},
            ]
        ]
        assert "Content replaced" in result

    def test_length_is_read_on_every_call(self, store, make_document):
        """A second append sees the document as it is now, not as it was."""
        update_doc(store, "doc-1", "x")
        store.document = make_document("Short")
        update_doc(store, "doc-1", "y")

        assert store.batches[1] == [{"insertText": {"location": {"index": 6}, "text": "y"}}]
        assert len(store.get_calls) == 2

    def test_append_after_emoji_uses_utf16_length(self, store, make_document):
        """The body of "😀 Hello" ends with its newline at index 9."""
        store.document = make_document("😀 Hello")

        update_doc(store, "doc-1", "!")

        assert store.batches == [[{"insertText": {"location": {"index": 9}, "text": "!"}}]]

    def test_replace_after_emoji_deletes_whole_body(self, store, make_document):
        store.document = make_document("😀 Hello")

        update_doc(store, "doc-1", "Bye", replace_all=True)

        assert store.batches[0][0] == {
            "deleteContentRange": {"range": {"startIndex": 1, "endIndex": 9}}
        }

    def test_empty_content(self, store):
        with pytest.raises(ToolError, match="Content must not be empty"):
            update_doc(store, "doc-1", "")

        assert store.batches == []


class TestSearchDocs:
    def test_results(self, store):
        store.files = FILES

        result = search_docs(store, "report")

        assert store.queries == [{"query": "report", "page_size": 10}]
        assert result.startswith('Search results for "report":')
        assert "Title: Q4 Report\nID: doc-1\nCreated: 2026-01-02T09:00:00.000Z" in result
        assert "Title: Notes" in result

    def test_no_results(self, store):
        assert search_docs(store, "zebra").endswith("No documents found matching your query.")


class TestDeleteDoc:
    def test_names_deleted_document(self, store):
        result = delete_doc(store, "doc-1")

        assert store.deleted == ["doc-1"]
        assert store.get_calls == [{"document_id": "doc-1", "fields": "title"}]
        assert result == 'Document "Test Document" (ID: doc-1) has been successfully deleted.'

    def test_unknown_document(self, store):
        with pytest.raises(ToolError, match="Document not found: gone"):
            delete_doc(store, "gone")

        assert store.deleted == []


class TestReadDocAdvanced:
    def test_text(self, store):
        result = read_doc_advanced(store, "doc-1")

        assert result.startswith("Content (68 characters):\n---\nHello World. Hello Moon.\n")

    def test_text_truncated(self, store):
        result = read_doc_advanced(store, "doc-1", max_length=5)

        assert result.startswith("Content (truncated to 5 chars of 68 total):\n---\nHello\n")
        assert result.endswith("[Document continues for 63 more characters]")

    def test_json_is_raw_structure(self, store):
        result = read_doc_advanced(store, "doc-1", format="json")

        assert json.loads(result) == store.document

    def test_json_truncated(self, store):
        result = read_doc_advanced(store, "doc-1", format="json", max_length=20)

        assert "[JSON truncated:" in result

    def test_markdown(self, store):
        store.document["body"]["content"][1]["paragraph"]["paragraphStyle"]["namedStyleType"] = "HEADING_1"

        result = read_doc_advanced(store, "doc-1", format="markdown")

        assert result.startswith("# Hello World. Hello Moon.\n\nQuarterly results are in.")

    @pytest.mark.parametrize("kwargs", [{"format": "html"}, {"max_length": 0}])
    def test_invalid_arguments(self, store, kwargs):
        with pytest.raises(ToolError):
            read_doc_advanced(store, "doc-1", **kwargs)

        assert store.get_calls == []

    def test_unknown_document(self, store):
        with pytest.raises(ToolError, match="Error reading document"):
            read_doc_advanced(store, "elsewhere")


class TestResources:
    def test_list_docs(self, store):
        store.files = FILES

        result = resources.list_docs(store)

        assert result.startswith("Google Docs in your Drive:\n\nTitle: Q4 Report")
        assert store.queries == [{"query": None, "page_size": 50}]

    def test_list_docs_empty(self, store):
        assert resources.list_docs(store).endswith("No Google Docs found.")

    def test_get_doc(self, store):
        result = resources.get_doc(store, "doc-1")

        assert result.startswith("Document: Test Document\n\nHello World. Hello Moon.\n")

    def test_get_doc_unknown(self, store):
        with pytest.raises(ResourceError, match="Error getting document nope"):
            resources.get_doc(store, "nope")
