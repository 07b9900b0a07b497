"""
FastMCP server for gdocs-mcp.

This module provides the main MCP server instance and registers all tools and
resources. The Google API clients are built once in the lifespan and passed
to each tool through the lifespan context (AppContext); no module-level
client exists.

Entry point: Run with `python -m gdocs_mcp.server` or via `gdocs-mcp` command.
"""

import sys
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Optional

from mcp.server.fastmcp import Context, FastMCP

from .auth import is_auth_configured, load_credentials
from .config import load_auth_config
from .docs_store import DocsStore
from .logging_config import get_logger
from .monitoring import HealthMonitor
from .planner import ListStyleIntent, ParagraphStyleIntent, TextStyleIntent
from . import resources
from .tools.comments import add_comment, list_comments
from .tools.content import delete_range, insert_page_break, insert_text_at_index
from .tools.documents import create_doc, delete_doc, read_doc_advanced, search_docs, update_doc
from .tools.formatting import apply_list_style, apply_paragraph_style, apply_text_style
from .tools.monitoring import get_server_health

logger = get_logger(__name__)


@dataclass
class AppContext:
    """Per-process state handed to every request; built once, never reassigned."""

    store: DocsStore
    monitor: HealthMonitor


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[AppContext]:
    """
    Lifespan context manager for server initialization and cleanup.

    Handles:
    - Startup: Loads OAuth credentials and builds the Docs/Drive clients
    - Shutdown: Logs lifetime Google API request counters
    """
    logger.info("server_starting", name="gdocs-mcp")

    credentials = load_credentials(load_auth_config())
    store = DocsStore.from_credentials(credentials)
    logger.info("google_clients_initialized")

    try:
        yield AppContext(store=store, monitor=HealthMonitor(store))
    finally:
        logger.info("server_shutdown_complete", **store.get_metrics())


mcp = FastMCP("google-docs", lifespan=app_lifespan)


def _app(ctx: Context) -> AppContext:
    return ctx.request_context.lifespan_context


# Resources
@mcp.resource("googledocs://list", name="list-docs", mime_type="text/plain")
def list_docs_resource() -> str:
    """List the Google Docs in your Drive (title, id, created and modified times)."""
    return resources.list_docs(_app(mcp.get_context()).store)


@mcp.resource("googledocs://{doc_id}", name="get-doc", mime_type="text/plain")
def get_doc_resource(doc_id: str) -> str:
    """Get a Google Doc's title and plain-text content by document id."""
    return resources.get_doc(_app(mcp.get_context()).store, doc_id)


# Document tools
@mcp.tool(name="create-doc")
def create_doc_tool(ctx: Context, title: str, content: str = "") -> str:
    """
    Create a new Google Doc.

    Args:
        title: The title of the new document
        content: Optional initial content for the document

    Returns:
        Success message with the new document id and its googledocs:// URI

    Examples:
        >>> create_doc_tool(title="Meeting Notes", content="Attendees: ...")
        "Document created successfully!\\nTitle: Meeting Notes\\nDocument ID: 1AbC..."
    """
    return create_doc(_app(ctx).store, title, content)


@mcp.tool(name="update-doc")
def update_doc_tool(ctx: Context, doc_id: str, content: str, replace_all: bool = False) -> str:
    """
    Add content to an existing Google Doc.

    Args:
        doc_id: The ID of the document to update
        content: The content to add to the document
        replace_all: Whether to replace all content (true) or append (false)

    Design notes:
        - Append inserts just before the body's final newline
        - Replace deletes the body text and inserts the new content in one atomic batch
    """
    return update_doc(_app(ctx).store, doc_id, content, replace_all)


@mcp.tool(name="search-docs")
def search_docs_tool(ctx: Context, query: str) -> str:
    """
    Search your Google Docs by full text.

    Args:
        query: The search query to find documents

    Returns:
        Up to 10 matching documents with title, id, created and modified times
    """
    return search_docs(_app(ctx).store, query)


@mcp.tool(name="delete-doc")
def delete_doc_tool(ctx: Context, doc_id: str) -> str:
    """
    Delete a Google Doc.

    Args:
        doc_id: The ID of the document to delete
    """
    return delete_doc(_app(ctx).store, doc_id)


@mcp.tool(name="read-doc-advanced")
def read_doc_advanced_tool(
    ctx: Context,
    doc_id: str,
    format: str = "text",
    max_length: Optional[int] = None,
) -> str:
    """
    Read a Google Doc in different formats.

    Args:
        doc_id: The ID of the document to read
        format: Output format: 'text' (plain text), 'json' (raw API structure,
                including the 1-based indexes used by the index-based tools),
                'markdown' (headings, lists, bold/italic, links)
        max_length: Maximum character limit for output. Use this to limit very large documents

    Returns:
        Document content in the requested format
    """
    return read_doc_advanced(_app(ctx).store, doc_id, format, max_length)


# Formatting tools
@mcp.tool(name="apply-text-style")
def apply_text_style_tool(
    ctx: Context,
    doc_id: str,
    text_to_find: str,
    match_instance: int = 1,
    bold: Optional[bool] = None,
    italic: Optional[bool] = None,
    underline: Optional[bool] = None,
    strikethrough: Optional[bool] = None,
    font_size: Optional[float] = None,
    font_family: Optional[str] = None,
    foreground_color: Optional[str] = None,
    background_color: Optional[str] = None,
    link_url: Optional[str] = None,
) -> str:
    """
    Apply character formatting to a specific occurrence of text.

    Only the options you pass are changed; omitted options leave the existing
    formatting untouched. At least one option is required.

    Args:
        doc_id: The ID of the document to style
        text_to_find: The exact text to find and style
        match_instance: Which instance of the text to target (1st, 2nd, etc.)
        bold: Apply or remove bold
        italic: Apply or remove italic
        underline: Apply or remove underline
        strikethrough: Apply or remove strikethrough
        font_size: Font size in points (e.g., 12)
        font_family: Font family (e.g., 'Arial', 'Times New Roman')
        foreground_color: Text color in hex format (e.g., '#FF0000')
        background_color: Highlight color in hex format (e.g., '#FFFF00')
        link_url: Make the text a hyperlink pointing to this URL

    Examples:
        >>> apply_text_style_tool(doc_id="1AbC", text_to_find="Hello", match_instance=2, bold=True)
        "Text styling applied successfully!\\nText: \\"Hello\\"\\nInstance: 2\\nStyles applied: bold\\nRange: 14-19"
    """
    intent = TextStyleIntent(
        bold=bold,
        italic=italic,
        underline=underline,
        strikethrough=strikethrough,
        font_size=font_size,
        font_family=font_family,
        foreground_color=foreground_color,
        background_color=background_color,
        link_url=link_url,
    )
    return apply_text_style(_app(ctx).store, doc_id, text_to_find, intent, match_instance)


@mcp.tool(name="apply-paragraph-style")
def apply_paragraph_style_tool(
    ctx: Context,
    doc_id: str,
    text_to_find: str,
    match_instance: int = 1,
    named_style_type: Optional[str] = None,
    alignment: Optional[str] = None,
    indent_start: Optional[float] = None,
    indent_end: Optional[float] = None,
    space_above: Optional[float] = None,
    space_below: Optional[float] = None,
    keep_with_next: Optional[bool] = None,
) -> str:
    """
    Apply paragraph formatting to the paragraph containing a specific occurrence of text.

    Args:
        doc_id: The ID of the document to style
        text_to_find: The exact text to find in the paragraph to style
        match_instance: Which matching paragraph to target (1st, 2nd, etc.)
        named_style_type: NORMAL_TEXT, TITLE, SUBTITLE, or HEADING_1 through HEADING_6
        alignment: LEFT, CENTER, RIGHT or JUSTIFIED
        indent_start: Left indentation in points
        indent_end: Right indentation in points
        space_above: Space before the paragraph in points
        space_below: Space after the paragraph in points
        keep_with_next: Keep this paragraph on the same page as the next one

    Design notes:
        - The whole paragraph is styled, wherever in it the text occurs
        - A paragraph counts once toward match_instance however often it contains the text
    """
    intent = ParagraphStyleIntent(
        named_style_type=named_style_type,
        alignment=alignment,
        indent_start=indent_start,
        indent_end=indent_end,
        space_above=space_above,
        space_below=space_below,
        keep_with_next=keep_with_next,
    )
    return apply_paragraph_style(_app(ctx).store, doc_id, text_to_find, intent, match_instance)


@mcp.tool(name="apply-list-style")
def apply_list_style_tool(
    ctx: Context,
    doc_id: str,
    text_to_find: str,
    list_type: str,
    match_instance: int = 1,
    indent_level: int = 0,
    start_number: int = 1,
) -> str:
    """
    Convert the paragraph containing a specific occurrence of text into a list item.

    Args:
        doc_id: The ID of the document to apply list style to
        text_to_find: The text to find and convert to a list
        list_type: BULLET (•), NUMBERED (1.), ALPHA (A.), ROMAN (I.)
        match_instance: Which matching paragraph to target (1st, 2nd, etc.)
        indent_level: Indentation level (0-8), 36pt per level
        start_number: Starting number for numbered lists. Only 1 is supported;
                      other values are rejected

    Design notes:
        - Indentation is applied first, then the bullet preset, in one atomic batch
    """
    intent = ListStyleIntent(list_type=list_type, indent_level=indent_level, start_number=start_number)
    return apply_list_style(_app(ctx).store, doc_id, text_to_find, intent, match_instance)


# Content tools
@mcp.tool(name="insert-text-at-index")
def insert_text_at_index_tool(ctx: Context, doc_id: str, text_to_insert: str, index: int) -> str:
    """
    Insert text at a specific index.

    Args:
        doc_id: The ID of the document to insert text into
        text_to_insert: The text to insert
        index: The index (1-based) where the text should be inserted
    """
    return insert_text_at_index(_app(ctx).store, doc_id, text_to_insert, index)


@mcp.tool(name="delete-range")
def delete_range_tool(ctx: Context, doc_id: str, start_index: int, end_index: int) -> str:
    """
    Delete a range of content.

    Args:
        doc_id: The ID of the document to delete content from
        start_index: The starting index of the range (inclusive, starts from 1)
        end_index: The ending index of the range (exclusive); must be greater than start_index
    """
    return delete_range(_app(ctx).store, doc_id, start_index, end_index)


@mcp.tool(name="insert-page-break")
def insert_page_break_tool(ctx: Context, doc_id: str, index: int) -> str:
    """
    Insert a page break.

    Args:
        doc_id: The ID of the document to insert the page break into
        index: The index (1-based) where the page break should be inserted
    """
    return insert_page_break(_app(ctx).store, doc_id, index)


@mcp.tool(name="list-comments")
def list_comments_tool(ctx: Context, doc_id: str) -> str:
    """
    List the comments on a document with author, status and quoted text.

    Args:
        doc_id: The ID of the document to list comments from
    """
    return list_comments(_app(ctx).store, doc_id)


@mcp.tool(name="add-comment")
def add_comment_tool(
    ctx: Context,
    doc_id: str,
    text_to_find: str,
    comment_text: str,
    match_instance: int = 1,
) -> str:
    """
    Add a comment quoting a specific occurrence of text.

    Args:
        doc_id: The ID of the document to add the comment to
        text_to_find: The exact text the comment refers to
        comment_text: The comment text to add
        match_instance: Which instance of the text to quote (1st, 2nd, etc.)
    """
    return add_comment(_app(ctx).store, doc_id, text_to_find, comment_text, match_instance)


# Monitoring
@mcp.tool(name="get-server-health")
def get_server_health_tool(ctx: Context) -> str:
    """
    Get server health status and resource metrics.

    Returns process and system memory usage plus lifetime Google API request
    and failure counts.

    Examples:
        >>> get_server_health_tool()
        '''Server Health: HEALTHY

        Process Memory: 45.2 MB
        System Memory: 52.3%

        Google API:
          Total requests: 12
          Total failed: 0
        '''
    """
    return get_server_health(_app(ctx).monitor)


def main():
    """
    Main entry point for gdocs-mcp server.

    Refuses to start without OAuth client secrets or a saved token, then
    serves MCP over stdio.
    """
    config = load_auth_config()
    if not is_auth_configured(config) and not Path(config.token_path).exists():
        logger.error(
            "auth_not_configured",
            credentials_path=config.credentials_path,
            hint="Download an OAuth client (Desktop app) JSON from Google Cloud Console",
        )
        sys.exit(1)

    mcp.run()


if __name__ == "__main__":
    main()
