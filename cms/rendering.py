from __future__ import annotations

import markdown
from django.utils.html import linebreaks
from django.utils.safestring import mark_safe

from .models import Content
from .sanitize import sanitize_html

_MARKDOWN_EXTENSIONS = [
    "markdown.extensions.extra",
    "markdown.extensions.sane_lists",
    "markdown.extensions.toc",
]


def render_body(body: str | None, rendering_strategy: str | None) -> str:
    if not body:
        return ""
    if rendering_strategy == Content.RenderingStrategy.MARKDOWN:
        html = markdown.markdown(
            body,
            extensions=_MARKDOWN_EXTENSIONS,
            output_format="html5",
        )
        return mark_safe(sanitize_html(html))
    if rendering_strategy == Content.RenderingStrategy.HTML:
        return mark_safe(sanitize_html(body))
    return linebreaks(body, autoescape=True)


def render_content(content: Content) -> str:
    return render_body(content.body, content.rendering_strategy)
