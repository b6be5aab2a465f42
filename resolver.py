"""Resolve request paths inside the workspace root and build file payloads."""

from __future__ import annotations

import base64
import os
import stat
from pathlib import Path
from urllib.parse import quote

import markdown
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import TextLexer, get_lexer_by_name, guess_lexer
from pygments.util import ClassNotFound

from classify import IMAGE, MARKDOWN, PDF, TEXT, classify, language_for, mime_for_image
from errors import Forbidden, InternalFailure, InvalidRequest, NotFound, UnsupportedType
from settings import log
from walker import rel_posix

MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "codehilite", "sane_lists"]


def resolve_path(root: str, rel_path: str) -> str:
    """Resolve ``rel_path`` under ``root`` and make sure the result stays inside it.

    Symlinks are resolved first, so ``..`` segments, absolute paths and links
    pointing outside the root all raise Forbidden.
    """
    root_dir = Path(root).resolve()
    try:
        candidate = (root_dir / rel_path).resolve()
    except ValueError:
        # embedded null byte
        raise InvalidRequest("invalid path")
    try:
        candidate.relative_to(root_dir)
    except ValueError:
        log(f"Rejected path outside root: {rel_path!r}", "WARN")
        raise Forbidden()
    return str(candidate)


def load_file(config, rel_path):
    """Validate a requested file and return ``(abs_path, rel_path, filename, category)``.

    Checks run in a fixed order: parameter present, containment, existence,
    regular file, visibility policy, supported type.
    """
    if not rel_path:
        raise InvalidRequest("path required")

    resolved = resolve_path(config.root, rel_path)

    try:
        info = os.stat(resolved)
    except FileNotFoundError:
        raise NotFound()
    except ValueError:
        raise InvalidRequest("invalid path")
    except OSError as e:
        raise InternalFailure(str(e))

    if not stat.S_ISREG(info.st_mode):
        raise InvalidRequest("not a file")

    # Judge visibility on the resolved location, not the raw request text.
    clean_rel = rel_posix(resolved, os.path.realpath(config.root))
    filename = os.path.basename(resolved)
    if not config.policy.is_visible(clean_rel, False, filename):
        log(f"Outside critical scope: {clean_rel}", "WARN")
        raise Forbidden()

    category = classify(filename, config.policy.critical_root_config_names)
    if category is None:
        raise UnsupportedType()

    return resolved, clean_rel, filename, category


def read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


def render_markdown(text: str) -> str:
    return markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS)


def highlight_source(source: str, filename: str):
    """Return ``(html, lang)``; unknown extensions are guessed from the content."""
    lang = language_for(filename)
    lexer = None
    if lang:
        try:
            lexer = get_lexer_by_name(lang)
        except ClassNotFound:
            lexer = None
    if lexer is None:
        lang = "plaintext"
        try:
            lexer = guess_lexer(source)
        except ClassNotFound:
            lexer = TextLexer()
    return highlight(source, lexer, HtmlFormatter(nowrap=True)), lang


def resolve_content(abs_path: str, rel_path: str, category: str) -> dict:
    """Build the JSON payload for one file according to its category."""
    filename = os.path.basename(abs_path)

    if category == MARKDOWN:
        content = read_text(abs_path)
        return {
            "category": MARKDOWN,
            "path": rel_path,
            "html": render_markdown(content),
            "raw": content,
        }

    if category == TEXT:
        content = read_text(abs_path)
        highlighted, lang = highlight_source(content, filename)
        return {
            "category": TEXT,
            "path": rel_path,
            "highlighted": highlighted,
            "raw": content,
            "lang": lang,
        }

    if category == IMAGE:
        with open(abs_path, "rb") as f:
            data = base64.b64encode(f.read()).decode("ascii")
        mime = mime_for_image(filename)
        return {
            "category": IMAGE,
            "path": rel_path,
            "dataUrl": f"data:{mime};base64,{data}",
        }

    if category == PDF:
        return {
            "category": PDF,
            "path": rel_path,
            "downloadUrl": f"api/raw?path={quote(rel_path, safe='')}",
        }

    raise UnsupportedType()


def raw_mimetype(filename: str, category: str) -> str:
    """Content type for the raw byte endpoint"""
    if category == PDF:
        return "application/pdf"
    if category == IMAGE:
        return mime_for_image(filename)
    # werkzeug appends "; charset=utf-8" to text types
    return "text/plain"
