"""
Shared fixtures for gdocs-mcp tests.

Provides a builder for documents.get responses with API-style offsets and an
in-memory stand-in for DocsStore that records every submitted batch.
"""

from __future__ import annotations

from typing import Dict, List, Optional

import pytest

from gdocs_mcp.document_model import utf16_length
from gdocs_mcp.errors import DocumentNotFound


def build_document(*paragraphs, title: str = "Test Document", document_id: str = "doc-1") -> Dict:
    """Build a documents.get response.

    Each paragraph is a string (one run) or a list of runs; a run is a string
    or a (text, textStyle) tuple. The paragraph's newline is appended to its
    last run. Offsets are UTF-16 code units starting at 1 after the leading
    section break, as in real API responses.
    """
    content: List[Dict] = [{"endIndex": 1, "sectionBreak": {"sectionStyle": {}}}]
    index = 1
    for paragraph in paragraphs:
        runs = [paragraph] if isinstance(paragraph, str) else list(paragraph)
        runs = [run if isinstance(run, tuple) else (run, {}) for run in runs]
        last_text, last_style = runs[-1]
        runs[-1] = (last_text + "\n", last_style)

        start = index
        elements = []
        for text, style in runs:
            elements.append(
                {
                    "startIndex": index,
                    "endIndex": index + utf16_length(text),
                    "textRun": {"content": text, "textStyle": style},
                }
            )
            index += utf16_length(text)

        content.append(
            {
                "startIndex": start,
                "endIndex": index,
                "paragraph": {
                    "elements": elements,
                    "paragraphStyle": {"namedStyleType": "NORMAL_TEXT"},
                },
            }
        )

    return {
        "documentId": document_id,
        "title": title,
        "revisionId": "rev-1",
        "body": {"content": content},
    }


class FakeDocsStore:
    """DocsStore stand-in holding one document and recording every call."""

    def __init__(self, document: Optional[Dict] = None):
        self.document = document or build_document("Hello")
        self.get_calls: List[Dict] = []
        self.batches: List[List[Dict]] = []
        self.created_titles: List[str] = []
        self.deleted: List[str] = []
        self.queries: List[Dict] = []
        self.files: List[Dict] = []
        self.comments: List[Dict] = []
        self.created_comments: List[Dict] = []
        self.fail_with: Optional[Exception] = None

    def _check(self, document_id: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        if document_id != self.document["documentId"]:
            raise DocumentNotFound(document_id)

    def get_document(self, document_id: str, fields: Optional[str] = None) -> Dict:
        self.get_calls.append({"document_id": document_id, "fields": fields})
        self._check(document_id)
        return self.document

    def batch_update(self, document_id: str, requests: List[Dict]) -> Dict:
        self._check(document_id)
        self.batches.append(requests)
        return {"documentId": document_id, "replies": [{} for _ in requests]}

    def create_document(self, title: str) -> Dict:
        if self.fail_with is not None:
            raise self.fail_with
        self.created_titles.append(title)
        return {"documentId": self.document["documentId"], "title": title}

    def delete_document(self, document_id: str) -> None:
        self._check(document_id)
        self.deleted.append(document_id)

    def list_documents(self, query: Optional[str] = None, page_size: int = 50) -> List[Dict]:
        if self.fail_with is not None:
            raise self.fail_with
        self.queries.append({"query": query, "page_size": page_size})
        return self.files

    def list_comments(self, document_id: str) -> List[Dict]:
        self._check(document_id)
        return self.comments

    def create_comment(self, document_id: str, content: str, quoted_text: str) -> Dict:
        self._check(document_id)
        comment = {"id": f"c{len(self.created_comments) + 1}", "content": content, "quoted": quoted_text}
        self.created_comments.append(comment)
        return comment

    def get_metrics(self) -> Dict[str, int]:
        return {"total_requests": 0, "total_failed": 0}


@pytest.fixture()
def make_document():
    """The documents.get response builder."""
    return build_document


@pytest.fixture()
def store() -> FakeDocsStore:
    """A fake store holding a three-paragraph document."""
    return FakeDocsStore(
        build_document(
            "Hello World. Hello Moon.",
            "Quarterly results are in.",
            "Closing remarks.",
        )
    )
