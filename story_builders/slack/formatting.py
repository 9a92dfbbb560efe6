"""
Markdown to Slack mrkdwn conversion.

Models answer in Markdown; Slack uses its own markup (`*bold*`,
`_italic_`, `<url|text>`). The rules below run in a fixed order and
code is swapped out for placeholders first, so nothing inside fenced
blocks or inline code is ever rewritten.
"""

import re
from typing import List

CODE_BLOCK_RE = re.compile(r"```[\s\S]*?```")
INLINE_CODE_RE = re.compile(r"`[^`]+`")
HEADING_RE = re.compile(r"^#{1,6}[ \t]+(.+?)(\r?)$", re.MULTILINE)
BOLD_ITALIC_RE = re.compile(r"\*\*\*([^*\n]+)\*\*\*")
BOLD_RE = re.compile(r"\*\*([^*\n]+)\*\*")
ITALIC_RE = re.compile(r"\*([^*\n]+)\*")
LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")


def _stash(pattern: re.Pattern, text: str, store: List[str], label: str) -> str:
    def _replace(match: re.Match) -> str:
        store.append(match.group(0))
        return f"___{label}_{len(store) - 1}___"

    return pattern.sub(_replace, text)


def _restore(text: str, store: List[str], label: str) -> str:
    for index, original in enumerate(store):
        text = text.replace(f"___{label}_{index}___", original, 1)
    return text


def format_for_slack(text: str) -> str:
    """
    Convert Markdown formatting to Slack mrkdwn.

    Headings become bold lines, ***x*** becomes *_x_*, **x** becomes *x*,
    *x* becomes _x_ and [text](url) becomes <url|text>.
    """
    code_blocks: List[str] = []
    inline_code: List[str] = []
    bold_text: List[str] = []

    formatted = _stash(CODE_BLOCK_RE, text, code_blocks, "CODE_BLOCK")
    formatted = _stash(INLINE_CODE_RE, formatted, inline_code, "INLINE_CODE")

    def _protect(markup: str) -> str:
        bold_text.append(markup)
        return f"___BOLD_{len(bold_text) - 1}___"

    def _bold(match: re.Match) -> str:
        return _protect(f"*{match.group(1)}*")

    def _heading(match: re.Match) -> str:
        # Keep a CRLF line ending outside the bold markers.
        return _protect(f"*{match.group(1).replace('*', '')}*") + match.group(2)

    formatted = HEADING_RE.sub(_heading, formatted)
    formatted = BOLD_ITALIC_RE.sub(lambda m: _protect(f"*_{m.group(1)}_*"), formatted)
    formatted = BOLD_RE.sub(_bold, formatted)
    # Only single asterisks are left outside placeholders at this point.
    formatted = ITALIC_RE.sub(r"_\1_", formatted)

    formatted = _restore(formatted, bold_text, "BOLD")
    formatted = LINK_RE.sub(r"<\2|\1>", formatted)

    formatted = _restore(formatted, code_blocks, "CODE_BLOCK")
    return _restore(formatted, inline_code, "INLINE_CODE")
