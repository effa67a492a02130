"""HTML -> Markdown conversion via markdownify."""
import logging
from typing import Literal

from markdownify import ATX, MarkdownConverter, abstract_inline_conversion

logger = logging.getLogger(__name__)

ContentKind = Literal["html", "text"]

LANGUAGE_CLASS_PREFIX = "language-"


class _Converter(MarkdownConverter):
    """Emphasis as _x_, strong stays **x**."""

    convert_em = abstract_inline_conversion(lambda self: "_")
    convert_i = convert_em


def md(html: str, **options) -> str:
    return _Converter(**options).convert(html)


def _code_language(el) -> str:
    """Language for a <pre> block, taken from a language-xxx class on it or its <code>."""
    for node in (el, el.find("code")):
        if node is None:
            continue
        for cls in node.get("class") or []:
            if cls.startswith(LANGUAGE_CLASS_PREFIX):
                return cls[len(LANGUAGE_CLASS_PREFIX):]
    return ""


def convert_to_markdown(content: str, content_type: ContentKind) -> str:
    """
    Convert fetched content to Markdown.

    Plain text passes through untouched. If the HTML renderer fails, the
    original markup is returned inside an ```html fence instead.
    """
    if content_type == "text":
        return content

    try:
        return md(
            content,
            heading_style=ATX,
            bullets="*",
            code_language_callback=_code_language,
        ).strip()
    except Exception:
        logger.exception("Markdown conversion failed, returning raw HTML in a code block")
        return f"```html\n{content}\n```"


def markdown_for_response(text: str, content_type_header: str) -> str:
    """Pick the conversion from the response's Content-Type header."""
    content_type = (content_type_header or "").lower()
    if "text/html" in content_type:
        return convert_to_markdown(text, "html")
    if "text/" in content_type:
        return convert_to_markdown(text, "text")
    # json, xml, binary-ish: show as-is
    return f"```\n{text}\n```"
