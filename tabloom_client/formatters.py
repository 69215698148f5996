"""Format snapshot data as markdown for LLM consumption."""


def format_bookmark_list(bookmarks: list[dict], total: int | None = None) -> str:
    """Numbered markdown list of bookmarks."""
    if not bookmarks:
        return "No bookmarks found."

    header = f"Found {len(bookmarks)} bookmark(s)"
    if total is not None and total != len(bookmarks):
        header += f" (of {total})"
    lines = [header + ":\n"]

    for i, b in enumerate(bookmarks, 1):
        title = b.get("title") or b.get("url", "Untitled")
        lines.append(f"### {i}. {title}")
        lines.append(f"- **URL:** {b.get('url', '')}")
        if b.get("folderName"):
            lines.append(f"- **Folder:** {b['folderName']}")
        tags = ", ".join(b.get("tags") or [])
        if tags:
            lines.append(f"- **Tags:** {tags}")
        if b.get("note"):
            lines.append(f"- **Note:** {b['note']}")
        lines.append(f"- **ID:** `{b.get('id', '')}`")
        lines.append("")
    return "\n".join(lines)


def format_folder_tree(folders: list[dict]) -> str:
    """Indented outline of the folder forest with bookmark counts."""
    if not folders:
        return "No folders."

    lines = ["# Folders\n"]
    stack = [(node, 0) for node in reversed(folders)]
    while stack:
        node, depth = stack.pop()
        count = len(node.get("bookmarks") or [])
        lines.append(f"{'  ' * depth}- {node.get('name', '')} ({count}) `{node.get('id', '')}`")
        stack.extend((child, depth + 1) for child in reversed(node.get("children") or []))
    return "\n".join(lines)


def format_tags(tags: list[dict]) -> str:
    if not tags:
        return "No tags."
    lines = ["| Tag | Bookmarks |", "|-----|-----------|"]
    for t in tags:
        lines.append(f"| {t.get('name', '')} | {t.get('bookmarkCount', 0)} |")
    return "\n".join(lines)


def format_export_jobs(jobs: list[dict]) -> str:
    if not jobs:
        return "No export jobs."
    lines = ["| Job | Status | Started | Finished | Error |", "|-----|--------|---------|----------|-------|"]
    for j in jobs:
        lines.append(
            f"| `{j.get('id', '')}` | {j.get('status', '')} | {j.get('startedAt') or ''} "
            f"| {j.get('finishedAt') or ''} | {j.get('errorMessage') or ''} |"
        )
    return "\n".join(lines)
