"""Tabloom MCP Server: browse bookmarks from AI editors.

Fetches the public export snapshot once and filters it locally, the same
way the web client does. Runs over stdio.
"""

from typing import Optional

from mcp.server.fastmcp import FastMCP

from .api_client import TabloomClient
from .browser import BookmarkBrowser
from .formatters import (
    format_bookmark_list,
    format_export_jobs,
    format_folder_tree,
    format_tags,
)

mcp = FastMCP("Tabloom Bookmarks")
client = TabloomClient()
browser = BookmarkBrowser(client)


async def _ensure_loaded() -> None:
    if browser.data is None:
        await browser.refresh()
        if browser.data is None:
            raise RuntimeError(browser.error or "No snapshot available")


@mcp.tool()
async def browse_bookmarks(
    search: str = "",
    folder_id: Optional[str] = None,
    tags: Optional[list[str]] = None,
) -> str:
    """List bookmarks matching all given criteria.

    Args:
        search: Case-insensitive text matched against title, URL and note
        folder_id: Only bookmarks filed directly in this folder
        tags: Tag names; a bookmark must carry every one of them
    """
    try:
        await _ensure_loaded()
        browser.search_query = search
        browser.selected_folder_id = folder_id
        browser.selected_tags = tags or []
        return format_bookmark_list(
            browser.filtered_bookmarks, total=len(browser.data.get("bookmarks", []))
        )
    except Exception as e:
        return f"Error browsing bookmarks: {e}"


@mcp.tool()
async def show_folders() -> str:
    """Show the folder hierarchy with folder ids and bookmark counts."""
    try:
        await _ensure_loaded()
        return format_folder_tree(browser.data.get("folders", []))
    except Exception as e:
        return f"Error loading folders: {e}"


@mcp.tool()
async def show_tags() -> str:
    """Show every tag with its bookmark count."""
    try:
        await _ensure_loaded()
        return format_tags(browser.data.get("tags", []))
    except Exception as e:
        return f"Error loading tags: {e}"


@mcp.tool()
async def refresh_bookmarks(fresh: bool = False) -> str:
    """Reload the snapshot from the server.

    Args:
        fresh: Ask the server to regenerate instead of serving its cache
    """
    await browser.refresh(fresh=fresh)
    if browser.error:
        return f"Refresh failed: {browser.error}"
    data = browser.data or {}
    return (
        f"Loaded {len(data.get('bookmarks', []))} bookmarks, "
        f"{len(data.get('tags', []))} tags (exported at {data.get('exportedAt', 'unknown')})."
    )


@mcp.tool()
async def trigger_export() -> str:
    """Regenerate the server's cached snapshot (requires TABLOOM_API_TOKEN)."""
    try:
        result = await client.trigger_export()
        jobs = await client.list_export_jobs(limit=5)
        return f"{result.get('message', 'Export finished')}: job `{result.get('jobId')}`\n\n" + format_export_jobs(jobs)
    except Exception as e:
        return f"Error triggering export: {e}"


def main() -> None:
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
