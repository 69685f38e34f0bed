"""
Reply formatter: turn the tutor's lightweight markdown into chat markup.

This is not a markdown parser. A fixed chain of regex rewrites runs over the
reply text, and its quirks are kept as-is because the chat page renders
exactly what comes out:
  odd emphasis markers pair up left to right (*a*b*c* -> <em>a</em>b<em>c</em>)
  styling applies inside inline code
  a one-line fence loses its first word as a language tag (```ls``` -> empty block)
  the final <p> wrap only happens when no tag was produced at all

Pipeline:
  structured payload -> pretty JSON, nothing else
  fenced code blocks are swapped for placeholders first; no later rule touches
  them and they never count as a line start
  headings, bold, italic, inline code
  bullet and numbered items, then each run of items wrapped in one <ul>
  blank lines -> paragraph boundaries
  the whole thing wrapped in <p> only when no tag was produced at all
"""
import html
import json
import re
from typing import Any

from bs4 import BeautifulSoup

HEADING_HTML = '<h3 class="font-bold text-lg mb-2 text-white">{}</h3>'
STRONG_HTML = '<strong class="font-semibold">{}</strong>'
EMPHASIS_HTML = '<em class="italic">{}</em>'
INLINE_CODE_HTML = '<code class="bg-white/20 px-2 py-1 rounded text-sm font-mono">{}</code>'
CODE_BLOCK_HTML = (
    '<pre class="bg-white/10 p-3 rounded-lg mt-2 mb-2 overflow-x-auto">'
    '<code class="text-sm font-mono whitespace-pre">{}</code></pre>'
)
BULLET_ITEM_HTML = '<li class="ml-4 mb-1">• {}</li>'
NUMBERED_ITEM_HTML = '<li class="ml-4 mb-1">{}</li>'
LIST_HTML = '<ul class="mb-2">{}</ul>'
PARAGRAPH_HTML = '<p class="mb-2">{}</p>'
PARAGRAPH_BREAK = '</p><p class="mb-2">'

_FENCE_RE = re.compile(r"```[\s\S]*?```")
# Opening fence with its language tag and newline, or a bare closing fence
_FENCE_MARKER_RE = re.compile(r"```\w*\n?")

_HEADING_RE = re.compile(r"^#{1,6}[ \t]+(.*)", re.MULTILINE)
_BOLD_RE = re.compile(r"\*\*(.*?)\*\*")
_ITALIC_RE = re.compile(r"\*(.*?)\*")
_INLINE_CODE_RE = re.compile(r"`(.*?)`")
_BULLET_RE = re.compile(r"^[ \t]*[*+\-][ \t]+(.*)", re.MULTILINE)
_NUMBERED_RE = re.compile(r"^\d+\.[ \t]+(.*)", re.MULTILINE)
# Items separated by exactly one newline belong to the same list
_LIST_RUN_RE = re.compile(r"<li\b[^>]*>.*?</li>(?:\n<li\b[^>]*>.*?</li>)*")


def _wrap(template: str):
    return lambda m: template.format(m.group(1))


def _format_code_block(block: str) -> str:
    return CODE_BLOCK_HTML.format(_FENCE_MARKER_RE.sub("", block))


def _format_structured(reply: Any) -> str:
    try:
        return json.dumps(reply, indent=2, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        # Non-string keys or a reference cycle; repr renders both
        return repr(reply)


def _format_prose(text: str) -> str:
    """Apply the line and inline rules. Code blocks are already swapped for placeholders."""
    text = _HEADING_RE.sub(_wrap(HEADING_HTML), text)
    text = _BOLD_RE.sub(_wrap(STRONG_HTML), text)
    text = _ITALIC_RE.sub(_wrap(EMPHASIS_HTML), text)
    text = _INLINE_CODE_RE.sub(_wrap(INLINE_CODE_HTML), text)
    text = _BULLET_RE.sub(_wrap(BULLET_ITEM_HTML), text)
    text = _NUMBERED_RE.sub(_wrap(NUMBERED_ITEM_HTML), text)
    text = _LIST_RUN_RE.sub(lambda m: LIST_HTML.format(m.group(0)), text)
    return text.replace("\n\n", PARAGRAPH_BREAK)


def format_response(reply: Any, *, escape_html: bool = False) -> str:
    """
    Format one tutor reply for display.

    Non-string replies are structured data: they come back as 2-space indented
    JSON (repr when JSON can't express them) and no markup rule is applied.
    Strings go through the rewrite chain. With escape_html, &, < and > in the
    reply are escaped first so the only tags in the result are the ones added here.

    Never raises; unmatched markers are left in place as literal characters.
    """
    if not isinstance(reply, str):
        return _format_structured(reply)

    text = html.escape(reply, quote=False) if escape_html else reply

    # Private-use mark absent from the text; no rule matches it
    mark = "\ue000"
    while mark in text:
        mark += "\ue000"
    blocks: list[str] = []

    def stash(m: re.Match) -> str:
        blocks.append(_format_code_block(m.group(0)))
        return f"{mark}{len(blocks) - 1}{mark}"

    formatted = _format_prose(_FENCE_RE.sub(stash, text))
    if blocks:
        token_re = re.compile(re.escape(mark) + r"(\d+)" + re.escape(mark))
        formatted = token_re.sub(lambda m: blocks[int(m.group(1))], formatted)

    # Weak check: any tag at all means the rules above already sectioned it
    if "<" not in formatted:
        formatted = PARAGRAPH_HTML.format(formatted)
    return formatted


def strip_markup(markup: str) -> str:
    """Text content of formatted markup: tags dropped, entities decoded."""
    return BeautifulSoup(markup, "html.parser").get_text()
