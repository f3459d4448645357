"""Helpers for generating the command reference in Markdown."""

from __future__ import annotations

import os

FM_TEMPLATE = """---
hide:
  - toc
---
title: "%s"
---
"""


def _ext(name: str) -> str:
    dot = name.rfind(".")
    if dot > name.rfind("/"):
        return name[dot:]
    return ""


def _trim_ext(name: str) -> str:
    ext = _ext(name)
    return name[: len(name) - len(ext)] if ext else name


def frontmatter_prepender(filename: str) -> str:
    """Return the front matter for a generated page, titled after its file name."""
    name = os.path.basename(filename)
    title = _trim_ext(name).replace("_", " ")
    return FM_TEMPLATE % title


def link_handler(name: str) -> str:
    """Return the lower-case Markdown link target for a generated page."""
    return _trim_ext(name).lower() + ".md"