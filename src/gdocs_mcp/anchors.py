"""Text anchor resolution for gdocs-mcp.

Every formatting and content tool that targets text by content goes through
this module: given the fragments of a freshly fetched document, a target
string and a 1-based occurrence number, it returns the range to mutate.

Two scopes are supported:
- resolve_text: the exact character range of the n-th occurrence
- resolve_paragraph: the full range of the n-th paragraph containing the text

Matches are found within a single text run; text that straddles a style
boundary (two runs) is not matched. Ranges are in UTF-16 code units, like the
API offsets they are added to.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator

from .document_model import Fragment, utf16_length
from .errors import AnchorNotFound, InvalidIntent


@dataclass(frozen=True)
class AnchorMatch:
    """Half-open [start_index, end_index) range in document offsets."""

    start_index: int
    end_index: int

    def as_range(self) -> Dict[str, int]:
        """Range in the shape the Docs API expects."""
        return {"startIndex": self.start_index, "endIndex": self.end_index}

    def __str__(self) -> str:
        return f"{self.start_index}-{self.end_index}"


def _check_target(target: str) -> None:
    if not target:
        raise InvalidIntent("Text to find must not be empty")


def _occurrences(text: str, target: str) -> Iterator[int]:
    """Yield the start of every non-overlapping occurrence, left to right."""
    position = text.find(target)
    while position != -1:
        yield position
        position = text.find(target, position + len(target))


def resolve_text(fragments: Iterable[Fragment], target: str, instance: int = 1) -> AnchorMatch:
    """Locate the character range of the instance-th occurrence of target.

    Every occurrence counts, including repeated occurrences inside one run.

    Args:
        fragments: Output of document_model.flatten() for the current document
        target: Exact text to find (case-sensitive)
        instance: 1-based occurrence number in document order

    Returns:
        AnchorMatch covering exactly the matched text

    Raises:
        InvalidIntent: If target is empty
        AnchorNotFound: If instance < 1 or the document has fewer occurrences
    """
    _check_target(target)

    if instance >= 1:
        seen = 0
        for fragment in fragments:
            for offset in _occurrences(fragment.text, target):
                seen += 1
                if seen == instance:
                    start = fragment.start_index + utf16_length(fragment.text[:offset])
                    return AnchorMatch(start, start + utf16_length(target))

    raise AnchorNotFound(target, instance, scope="text")


def resolve_paragraph(fragments: Iterable[Fragment], target: str, instance: int = 1) -> AnchorMatch:
    """Locate the full range of the instance-th paragraph containing target.

    A paragraph counts once no matter how many of its runs (or how many times
    within a run) contain the text.

    Raises:
        InvalidIntent: If target is empty
        AnchorNotFound: If instance < 1 or fewer paragraphs contain the text
    """
    _check_target(target)

    if instance >= 1:
        seen = 0
        last_counted = None
        for fragment in fragments:
            if target not in fragment.text or fragment.paragraph_range == last_counted:
                continue
            last_counted = fragment.paragraph_range
            seen += 1
            if seen == instance:
                return AnchorMatch(*fragment.paragraph_range)

    raise AnchorNotFound(target, instance, scope="paragraph")
