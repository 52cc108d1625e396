"""Rendering of pending config changes for the operator."""
from .scanner import ChangeSet

HEAVY_RULE = "━" * 68
LIGHT_RULE = "─" * 68


def render_disclosure(change_set: ChangeSet, title: str = "Claude configuration") -> str:
    """Build the summary and full diff text for a non-empty ChangeSet."""
    lines = [
        "",
        HEAVY_RULE,
        f"📝 Uncommitted changes detected in {title}",
        HEAVY_RULE,
        "",
        "Changed files:",
    ]
    lines.extend(str(entry) for entry in change_set.entries)
    lines.extend([
        "",
        "Changes:",
        LIGHT_RULE,
        change_set.diff.rstrip("\n"),
        LIGHT_RULE,
        "",
    ])
    return "\n".join(lines)
