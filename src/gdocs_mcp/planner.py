"""Mutation planning for gdocs-mcp.

Translates caller intents into ordered lists of Docs API `batchUpdate`
requests. Nothing here touches the network: validation failures surface
before any document is fetched, and the tools submit each plan as a single
atomic batch.

Style intents are partial updates. Only attributes the caller actually
supplied (not None) are written, and only those appear in the request's
field mask, so unrelated styling is never clobbered.
"""

import re
from dataclasses import dataclass, field, fields
from typing import Dict, List, Optional, Tuple

from .anchors import AnchorMatch
from .errors import InvalidIntent, InvalidRange, UnsupportedFeature

NAMED_STYLES = (
    "NORMAL_TEXT",
    "TITLE",
    "SUBTITLE",
    "HEADING_1",
    "HEADING_2",
    "HEADING_3",
    "HEADING_4",
    "HEADING_5",
    "HEADING_6",
)

# Tool-facing alignment names -> Docs API alignment values
ALIGNMENTS = {
    "LEFT": "START",
    "CENTER": "CENTER",
    "RIGHT": "END",
    "JUSTIFIED": "JUSTIFIED",
}

LIST_PRESETS = {
    "BULLET": "BULLET_DISC_CIRCLE_SQUARE",
    "NUMBERED": "NUMBERED_DECIMAL_ALPHA_ROMAN",
    "ALPHA": "NUMBERED_UPPERALPHA_ALPHA_ROMAN",
    "ROMAN": "NUMBERED_UPPERROMAN_UPPERALPHA_DECIMAL",
}

INDENT_PER_LEVEL_PT = 36
MAX_INDENT_LEVEL = 8

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{6}|[0-9a-fA-F]{3})$")


@dataclass
class MutationPlan:
    """Ordered batchUpdate requests plus the style fields they touch."""

    requests: List[Dict] = field(default_factory=list)
    fields: List[str] = field(default_factory=list)


class _Intent:
    def provided(self) -> Dict[str, object]:
        """Attributes the caller supplied, in declaration order."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass(frozen=True)
class TextStyleIntent(_Intent):
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    underline: Optional[bool] = None
    strikethrough: Optional[bool] = None
    font_size: Optional[float] = None
    font_family: Optional[str] = None
    foreground_color: Optional[str] = None
    background_color: Optional[str] = None
    link_url: Optional[str] = None


@dataclass(frozen=True)
class ParagraphStyleIntent(_Intent):
    named_style_type: Optional[str] = None
    alignment: Optional[str] = None
    indent_start: Optional[float] = None
    indent_end: Optional[float] = None
    space_above: Optional[float] = None
    space_below: Optional[float] = None
    keep_with_next: Optional[bool] = None


@dataclass(frozen=True)
class ListStyleIntent:
    list_type: str
    indent_level: int = 0
    start_number: int = 1


def hex_to_rgb(value: str) -> Tuple[float, float, float]:
    """Convert a hex color to red/green/blue fractions in [0, 1].

    Accepts "#RRGGBB", "RRGGBB" and the "#RGB" shorthand.

    Raises:
        InvalidIntent: If value is not a hex color
    """
    match = _HEX_COLOR.match(value.strip())
    if not match:
        raise InvalidIntent(
            f"Invalid color '{value}'. Expected hex format '#RRGGBB' (e.g., '#FF0000')."
        )
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return tuple(int(digits[i:i + 2], 16) / 255 for i in (0, 2, 4))


def _color(value: str) -> Dict:
    red, green, blue = hex_to_rgb(value)
    return {"color": {"rgbColor": {"red": red, "green": green, "blue": blue}}}


def _points(value: float) -> Dict:
    return {"magnitude": value, "unit": "PT"}


def _check_non_negative(name: str, value: Optional[float]) -> None:
    if value is not None and value < 0:
        raise InvalidIntent(f"{name} must be zero or greater (got {value})")


def validate_text_style(intent: TextStyleIntent) -> None:
    """Reject empty or malformed text style intents.

    Raises:
        InvalidIntent: If no attribute is set, a color is not hex, or the size is not positive
    """
    if not intent.provided():
        raise InvalidIntent("At least one style option must be provided")
    if intent.font_size is not None and intent.font_size <= 0:
        raise InvalidIntent(f"font_size must be greater than zero (got {intent.font_size})")
    if intent.foreground_color is not None:
        hex_to_rgb(intent.foreground_color)
    if intent.background_color is not None:
        hex_to_rgb(intent.background_color)


def validate_paragraph_style(intent: ParagraphStyleIntent) -> None:
    """Reject empty paragraph style intents and values outside the closed sets.

    Raises:
        InvalidIntent: If no attribute is set or a value is out of range
    """
    if not intent.provided():
        raise InvalidIntent("At least one paragraph style option must be provided")
    if intent.named_style_type is not None and intent.named_style_type not in NAMED_STYLES:
        raise InvalidIntent(
            f"Invalid named style '{intent.named_style_type}'. "
            f"Valid styles: {', '.join(NAMED_STYLES)}"
        )
    if intent.alignment is not None and intent.alignment not in ALIGNMENTS:
        raise InvalidIntent(
            f"Invalid alignment '{intent.alignment}'. Valid values: {', '.join(ALIGNMENTS)}"
        )
    _check_non_negative("indent_start", intent.indent_start)
    _check_non_negative("indent_end", intent.indent_end)
    _check_non_negative("space_above", intent.space_above)
    _check_non_negative("space_below", intent.space_below)


def validate_list_style(intent: ListStyleIntent) -> None:
    """Reject unknown list kinds, out-of-range levels and custom start numbers.

    Raises:
        InvalidIntent: If list_type, indent_level or start_number is invalid
        UnsupportedFeature: If start_number is anything other than 1
    """
    if intent.list_type not in LIST_PRESETS:
        raise InvalidIntent(
            f"Invalid list type '{intent.list_type}'. Valid types: {', '.join(LIST_PRESETS)}"
        )
    if not 0 <= intent.indent_level <= MAX_INDENT_LEVEL:
        raise InvalidIntent(
            f"Invalid indent level {intent.indent_level}. Valid range: 0-{MAX_INDENT_LEVEL}"
        )
    if intent.start_number < 1:
        raise InvalidIntent(f"start_number must be 1 or greater (got {intent.start_number})")
    if intent.start_number != 1:
        raise UnsupportedFeature(
            "Custom list start number",
            "the Docs API cannot change where a list starts counting; use start_number=1",
        )


def plan_text_style(intent: TextStyleIntent, anchor: AnchorMatch) -> MutationPlan:
    """One updateTextStyle request over the anchor, masked to the supplied fields."""
    validate_text_style(intent)

    text_style: Dict = {}
    touched: List[str] = []

    if intent.bold is not None:
        text_style["bold"] = intent.bold
        touched.append("bold")
    if intent.italic is not None:
        text_style["italic"] = intent.italic
        touched.append("italic")
    if intent.underline is not None:
        text_style["underline"] = intent.underline
        touched.append("underline")
    if intent.strikethrough is not None:
        text_style["strikethrough"] = intent.strikethrough
        touched.append("strikethrough")
    if intent.font_size is not None:
        text_style["fontSize"] = _points(intent.font_size)
        touched.append("fontSize")
    if intent.font_family is not None:
        text_style["weightedFontFamily"] = {"fontFamily": intent.font_family}
        touched.append("weightedFontFamily")
    if intent.foreground_color is not None:
        text_style["foregroundColor"] = _color(intent.foreground_color)
        touched.append("foregroundColor")
    if intent.background_color is not None:
        text_style["backgroundColor"] = _color(intent.background_color)
        touched.append("backgroundColor")
    if intent.link_url is not None:
        text_style["link"] = {"url": intent.link_url}
        touched.append("link")

    request = {
        "updateTextStyle": {
            "range": anchor.as_range(),
            "textStyle": text_style,
            "fields": ",".join(touched),
        }
    }
    return MutationPlan([request], touched)


def plan_paragraph_style(intent: ParagraphStyleIntent, anchor: AnchorMatch) -> MutationPlan:
    """One updateParagraphStyle request over the anchor, masked to the supplied fields."""
    validate_paragraph_style(intent)

    paragraph_style: Dict = {}
    touched: List[str] = []

    if intent.named_style_type is not None:
        paragraph_style["namedStyleType"] = intent.named_style_type
        touched.append("namedStyleType")
    if intent.alignment is not None:
        paragraph_style["alignment"] = ALIGNMENTS[intent.alignment]
        touched.append("alignment")
    if intent.indent_start is not None:
        paragraph_style["indentStart"] = _points(intent.indent_start)
        touched.append("indentStart")
    if intent.indent_end is not None:
        paragraph_style["indentEnd"] = _points(intent.indent_end)
        touched.append("indentEnd")
    if intent.space_above is not None:
        paragraph_style["spaceAbove"] = _points(intent.space_above)
        touched.append("spaceAbove")
    if intent.space_below is not None:
        paragraph_style["spaceBelow"] = _points(intent.space_below)
        touched.append("spaceBelow")
    if intent.keep_with_next is not None:
        paragraph_style["keepWithNext"] = intent.keep_with_next
        touched.append("keepWithNext")

    request = {
        "updateParagraphStyle": {
            "range": anchor.as_range(),
            "paragraphStyle": paragraph_style,
            "fields": ",".join(touched),
        }
    }
    return MutationPlan([request], touched)


def plan_list_style(intent: ListStyleIntent, anchor: AnchorMatch) -> MutationPlan:
    """Indent the paragraph for its level, then attach the bullet preset.

    Always two requests, in this order: updateParagraphStyle
    (indentStart = 36pt per level, indentFirstLine = 0), then
    createParagraphBullets over the same range.
    """
    validate_list_style(intent)

    touched = ["indentStart", "indentFirstLine"]
    requests = [
        {
            "updateParagraphStyle": {
                "range": anchor.as_range(),
                "paragraphStyle": {
                    "indentStart": _points(intent.indent_level * INDENT_PER_LEVEL_PT),
                    "indentFirstLine": _points(0),
                },
                "fields": ",".join(touched),
            }
        },
        {
            "createParagraphBullets": {
                "range": anchor.as_range(),
                "bulletPreset": LIST_PRESETS[intent.list_type],
            }
        },
    ]
    return MutationPlan(requests, touched)


def _check_index(index: int) -> None:
    if index < 1:
        raise InvalidRange(index, index, f"Index must be 1 or greater (got {index})")


def _insert_text(text: str, index: int) -> Dict:
    return {"insertText": {"location": {"index": index}, "text": text}}


def plan_insert_text(text: str, index: int) -> MutationPlan:
    if not text:
        raise InvalidIntent("Text to insert must not be empty")
    _check_index(index)
    return MutationPlan([_insert_text(text, index)])


def plan_delete_range(start_index: int, end_index: int) -> MutationPlan:
    """One deleteContentRange over [start_index, end_index).

    Raises:
        InvalidRange: If end_index <= start_index or start_index < 1
    """
    if end_index <= start_index:
        raise InvalidRange(start_index, end_index)
    _check_index(start_index)
    return MutationPlan(
        [{"deleteContentRange": {"range": {"startIndex": start_index, "endIndex": end_index}}}]
    )


def plan_page_break(index: int) -> MutationPlan:
    _check_index(index)
    return MutationPlan([{"insertPageBreak": {"location": {"index": index}}}])


def plan_replace(text: str, length: int) -> MutationPlan:
    """Delete the current body text, then insert text at the start.

    Args:
        text: Replacement content
        length: document_model.document_length() of a fresh fetch

    The delete covers [1, length), which leaves the body's final newline in
    place. A body holding only that newline has nothing to delete, so the plan
    is just the insert.
    """
    if not text:
        raise InvalidIntent("Content must not be empty")
    requests = []
    if length > 1:
        requests.append({"deleteContentRange": {"range": {"startIndex": 1, "endIndex": length}}})
    requests.append(_insert_text(text, 1))
    return MutationPlan(requests)


def plan_append(text: str, length: int) -> MutationPlan:
    """Insert text at the end of the body, just before its final newline."""
    if not text:
        raise InvalidIntent("Content must not be empty")
    return MutationPlan([_insert_text(text, max(length, 1))])
