# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import html

import bleach
from markdown_it import MarkdownIt
from markupsafe import Markup

ALLOWED_TAGS = frozenset({"p", "br", "ul", "ol", "strong", "bold", "i", "em", "h1", "h3", "h4", "h5"})

_MD = MarkdownIt("commonmark")


def render_markdown(raw: str) -> Markup:
    """Markdown -> HTML restricted to ALLOWED_TAGS, no attributes.

    Applied when a post is displayed, never when it is stored.
    """
    rendered = _MD.render(raw or "")
    cleaned = bleach.clean(rendered, tags=ALLOWED_TAGS, attributes={}, protocols=[], strip=True)
    return Markup(cleaned)


def strip_to_plain_text(raw: str) -> str:
    """Drop every tag and attribute and return real text (entities decoded).

    The result is plain text, not HTML: templates escape it on output.
    """
    return html.unescape(bleach.clean(raw or "", tags=set(), attributes={}, strip=True))
