"""Text, paragraph and list formatting tools for Google Docs.

All three tools target text by content: they fetch the document, resolve the
n-th occurrence of the target text, and submit one atomic batch. Intent
validation happens before the fetch, so an empty or malformed request never
touches the network.
"""

from mcp.server.fastmcp.exceptions import ToolError

from ..anchors import resolve_paragraph, resolve_text
from ..docs_store import DocsStore
from ..document_model import flatten, parse_document
from ..errors import DocsMCPError
from ..logging_config import get_logger
from ..planner import (
    ListStyleIntent,
    ParagraphStyleIntent,
    TextStyleIntent,
    plan_list_style,
    plan_paragraph_style,
    plan_text_style,
    validate_list_style,
    validate_paragraph_style,
    validate_text_style,
)

logger = get_logger(__name__)


def apply_text_style(
    store: DocsStore,
    doc_id: str,
    text_to_find: str,
    intent: TextStyleIntent,
    match_instance: int = 1,
) -> str:
    """Apply character formatting to the n-th occurrence of text_to_find.

    Only the attributes set on intent are changed; everything else about the
    text's style is left as it is.

    Args:
        store: Docs API gateway
        doc_id: Google Docs document id
        text_to_find: Exact text to style
        intent: Style attributes to apply (None = leave unchanged)
        match_instance: 1-based occurrence to target

    Returns:
        Confirmation listing the fields applied and the resolved range

    Raises:
        ToolError: On invalid intent, missing text or API failure

    Example output:
        Text styling applied successfully!
        Text: "Hello"
        Instance: 2
        Styles applied: bold, foregroundColor
        Range: 14-19
    """
    try:
        validate_text_style(intent)
        document = parse_document(store.get_document(doc_id))
        anchor = resolve_text(flatten(document), text_to_find, match_instance)
        plan = plan_text_style(intent, anchor)
        store.batch_update(doc_id, plan.requests)
    except DocsMCPError as e:
        logger.error("tool_operation_failed", tool="apply_text_style", doc_id=doc_id, error=str(e), error_type=type(e).__name__)
        raise ToolError(f"Error applying text style: {e}") from e

    logger.info("text_style_applied", doc_id=doc_id, range=str(anchor), fields=plan.fields)

    return (
        f"Text styling applied successfully!\n"
        f'Text: "{text_to_find}"\n'
        f"Instance: {match_instance}\n"
        f"Styles applied: {', '.join(plan.fields)}\n"
        f"Range: {anchor}"
    )


def apply_paragraph_style(
    store: DocsStore,
    doc_id: str,
    text_to_find: str,
    intent: ParagraphStyleIntent,
    match_instance: int = 1,
) -> str:
    """Apply paragraph formatting to the n-th paragraph containing text_to_find.

    The whole paragraph is styled, wherever in it the text occurs. Paragraphs
    are counted once each, however many times they contain the text.

    Example output:
        Paragraph styling applied successfully!
        Text found: "Introduction"
        Instance: 1
        Paragraph range: 1-14
        Styles applied: namedStyleType
    """
    try:
        validate_paragraph_style(intent)
        document = parse_document(store.get_document(doc_id))
        anchor = resolve_paragraph(flatten(document), text_to_find, match_instance)
        plan = plan_paragraph_style(intent, anchor)
        store.batch_update(doc_id, plan.requests)
    except DocsMCPError as e:
        logger.error("tool_operation_failed", tool="apply_paragraph_style", doc_id=doc_id, error=str(e), error_type=type(e).__name__)
        raise ToolError(f"Error applying paragraph style: {e}") from e

    logger.info("paragraph_style_applied", doc_id=doc_id, range=str(anchor), fields=plan.fields)

    return (
        f"Paragraph styling applied successfully!\n"
        f'Text found: "{text_to_find}"\n'
        f"Instance: {match_instance}\n"
        f"Paragraph range: {anchor}\n"
        f"Styles applied: {', '.join(plan.fields)}"
    )


def apply_list_style(
    store: DocsStore,
    doc_id: str,
    text_to_find: str,
    intent: ListStyleIntent,
    match_instance: int = 1,
) -> str:
    """Turn the n-th paragraph containing text_to_find into a list item.

    Sets the indentation for intent.indent_level (36pt per level) and then
    applies the bullet preset for intent.list_type, in one batch.
    """
    try:
        validate_list_style(intent)
        document = parse_document(store.get_document(doc_id))
        anchor = resolve_paragraph(flatten(document), text_to_find, match_instance)
        plan = plan_list_style(intent, anchor)
        store.batch_update(doc_id, plan.requests)
    except DocsMCPError as e:
        logger.error("tool_operation_failed", tool="apply_list_style", doc_id=doc_id, error=str(e), error_type=type(e).__name__)
        raise ToolError(f"Error applying list style: {e}") from e

    logger.info("list_style_applied", doc_id=doc_id, range=str(anchor), list_type=intent.list_type)

    return (
        f"List style applied successfully!\n"
        f"Document ID: {doc_id}\n"
        f'Text: "{text_to_find}"\n'
        f"List type: {intent.list_type}\n"
        f"Indent level: {intent.indent_level}\n"
        f"Range: {anchor}"
    )
