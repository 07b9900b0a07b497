"""
Document model for gdocs-mcp.

Turns the JSON returned by the Docs API `documents.get` call into an explicit
tree of tagged variants, and flattens that tree into text fragments for
anchor resolution.

Key behaviors:
- Body elements are either Paragraph or OtherElement (section break, table,
  table of contents); inline elements are either TextRun or OtherRun
- Offsets are UTF-16 code units, as the API counts them; an emoji or other
  character outside the Basic Multilingual Plane occupies two indexes
- Offsets reported by the API are authoritative; when an element has none,
  it is derived from the running UTF-16 length (the first offset is 1)
- Nothing is cached: callers re-fetch and re-parse before every mutation,
  because earlier tool calls may have changed the document
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

INLINE_KINDS = (
    "inlineObjectElement",
    "pageBreak",
    "columnBreak",
    "footnoteReference",
    "horizontalRule",
    "autoText",
    "equation",
    "person",
    "richLink",
)
BLOCK_KINDS = ("sectionBreak", "table", "tableOfContents")

_INDEX_KEYS = ("startIndex", "endIndex")


@dataclass(frozen=True)
class TextRun:
    content: str
    start_index: int
    end_index: int
    text_style: Dict = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class OtherRun:
    """Inline element without literal text (image, page break, footnote ref...)."""

    kind: str
    start_index: int
    end_index: int


InlineElement = Union[TextRun, OtherRun]


@dataclass(frozen=True)
class Paragraph:
    start_index: int
    end_index: int
    elements: Tuple[InlineElement, ...]
    paragraph_style: Dict = field(default_factory=dict, compare=False)
    bullet: Optional[Dict] = field(default=None, compare=False)

    @property
    def text(self) -> str:
        return "".join(e.content for e in self.elements if isinstance(e, TextRun))

    @property
    def named_style(self) -> str:
        return self.paragraph_style.get("namedStyleType", "NORMAL_TEXT")


@dataclass(frozen=True)
class OtherElement:
    """Block element that is not a paragraph (section break, table, TOC)."""

    kind: str
    start_index: int
    end_index: int


StructuralElement = Union[Paragraph, OtherElement]


@dataclass(frozen=True)
class DocumentTree:
    document_id: str
    title: str
    body: Tuple[StructuralElement, ...]
    revision_id: Optional[str] = None

    @property
    def paragraphs(self) -> List[Paragraph]:
        return [e for e in self.body if isinstance(e, Paragraph)]


@dataclass(frozen=True)
class Fragment:
    """One text run's literal text, where it starts, and its paragraph's range."""

    text: str
    start_index: int
    paragraph_start: int
    paragraph_end: int

    @property
    def paragraph_range(self) -> Tuple[int, int]:
        return (self.paragraph_start, self.paragraph_end)


def utf16_length(text: str) -> int:
    """Length of text in UTF-16 code units, the unit of every API offset."""
    return len(text.encode("utf-16-le")) // 2


def _element_kind(element: Dict, known: Iterable[str]) -> str:
    for kind in known:
        if kind in element:
            return kind
    for key in element:
        if key not in _INDEX_KEYS:
            return key
    return "unknown"


def _parse_paragraph(element: Dict, cursor: int) -> Paragraph:
    start = element.get("startIndex", cursor)
    paragraph = element["paragraph"]

    position = start
    elements: List[InlineElement] = []
    for item in paragraph.get("elements") or []:
        item_start = item.get("startIndex", position)
        if "textRun" in item:
            run = item["textRun"]
            content = run.get("content") or ""
            item_end = item.get("endIndex", item_start + utf16_length(content))
            elements.append(TextRun(content, item_start, item_end, run.get("textStyle") or {}))
        else:
            # Non-text inline elements occupy a single index unless told otherwise
            item_end = item.get("endIndex", item_start + 1)
            elements.append(OtherRun(_element_kind(item, INLINE_KINDS), item_start, item_end))
        position = item_end

    return Paragraph(
        start_index=start,
        end_index=element.get("endIndex", position),
        elements=tuple(elements),
        paragraph_style=paragraph.get("paragraphStyle") or {},
        bullet=paragraph.get("bullet"),
    )


def _parse_other(element: Dict, cursor: int) -> OtherElement:
    end = element.get("endIndex", cursor)
    # The leading section break has no startIndex in API responses
    start = element.get("startIndex", min(cursor, end))
    return OtherElement(_element_kind(element, BLOCK_KINDS), start, end)


def parse_document(raw: Dict) -> DocumentTree:
    """Parse a `documents.get` response into a DocumentTree.

    A missing or empty body yields a tree with no elements.
    """
    content = (raw.get("body") or {}).get("content") or []

    cursor = 1
    body: List[StructuralElement] = []
    for element in content:
        if "paragraph" in element:
            parsed: StructuralElement = _parse_paragraph(element, cursor)
        else:
            parsed = _parse_other(element, cursor)
        body.append(parsed)
        cursor = max(cursor, parsed.end_index)

    return DocumentTree(
        document_id=raw.get("documentId", ""),
        title=raw.get("title", ""),
        body=tuple(body),
        revision_id=raw.get("revisionId"),
    )


def flatten(document: DocumentTree) -> Iterator[Fragment]:
    """Yield the document's text runs as fragments, in document order.

    The generator is lazy; call flatten() again for a fresh pass.
    """
    for element in document.body:
        if not isinstance(element, Paragraph):
            continue
        for run in element.elements:
            if isinstance(run, TextRun) and run.content:
                yield Fragment(run.content, run.start_index, element.start_index, element.end_index)


def document_length(document: DocumentTree) -> int:
    """Sum of the UTF-16 lengths of all text runs in the body."""
    return sum(utf16_length(fragment.text) for fragment in flatten(document))


def plain_text(document: DocumentTree) -> str:
    return "".join(fragment.text for fragment in flatten(document))


def _markdown_prefix(paragraph: Paragraph) -> str:
    style = paragraph.named_style
    if style.startswith("HEADING_"):
        level = int(style[len("HEADING_"):])
        return "#" * min(level, 6) + " "
    if style == "TITLE":
        return "# "
    if style == "SUBTITLE":
        return "## "
    if paragraph.bullet is not None:
        return "  " * paragraph.bullet.get("nestingLevel", 0) + "- "
    return ""


def _markdown_run(run: TextRun) -> str:
    raw = run.content.rstrip("\n")
    text = raw.strip()
    if not text:
        return raw
    # Surrounding whitespace stays outside the markers
    leading = raw[:len(raw) - len(raw.lstrip())]
    trailing = raw[len(raw.rstrip()):]

    bold = run.text_style.get("bold")
    italic = run.text_style.get("italic")
    if bold and italic:
        text = f"***{text}***"
    elif bold:
        text = f"**{text}**"
    elif italic:
        text = f"*{text}*"
    link = (run.text_style.get("link") or {}).get("url")
    if link:
        text = f"[{text}]({link})"
    return f"{leading}{text}{trailing}"


def to_markdown(document: DocumentTree) -> str:
    """Render the document as Markdown (headings, lists, bold/italic, links)."""
    blocks = []
    for paragraph in document.paragraphs:
        text = "".join(_markdown_run(e) for e in paragraph.elements if isinstance(e, TextRun))
        if not text.strip():
            continue
        blocks.append(_markdown_prefix(paragraph) + text)
    return "\n\n".join(blocks)
