"""Map file names to content categories.

Categories: ``markdown``, ``text``, ``image``, ``pdf``. ``None`` means the
file is unsupported and is left out of every listing.
"""

from __future__ import annotations

from visibility import root_config_kind

MARKDOWN = "markdown"
TEXT = "text"
IMAGE = "image"
PDF = "pdf"

# Supported file extensions by category. The tables must stay disjoint.
MARKDOWN_EXTENSIONS = frozenset({".md"})

TEXT_EXTENSIONS = frozenset({
    ".txt", ".js", ".ts", ".tsx", ".jsx", ".json", ".jsonl",
    ".yaml", ".yml", ".toml", ".sh", ".bash", ".css", ".html",
    ".xml", ".sql", ".py", ".env", ".gitignore", ".log", ".csv",
    ".sqlite", ".sqlite-wal", ".sqlite-shm",
})

IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp"})

PDF_EXTENSIONS = frozenset({".pdf"})

CATEGORY_TABLES = (
    (MARKDOWN, MARKDOWN_EXTENSIONS),
    (TEXT, TEXT_EXTENSIONS),
    (IMAGE, IMAGE_EXTENSIONS),
    (PDF, PDF_EXTENSIONS),
)

# Extension -> Pygments lexer alias
EXT_TO_LANG = {
    ".js": "javascript", ".ts": "typescript", ".tsx": "typescript",
    ".jsx": "javascript", ".json": "json", ".jsonl": "json",
    ".yaml": "yaml", ".yml": "yaml", ".toml": "toml",
    ".sh": "bash", ".bash": "bash", ".css": "css", ".html": "html",
    ".xml": "xml", ".sql": "sql", ".py": "python", ".csv": "text",
    ".txt": "text", ".log": "text", ".env": "bash",
    ".gitignore": "text",
}

IMAGE_MIME = {
    ".png": "image/png", ".jpg": "image/jpeg", ".jpeg": "image/jpeg",
    ".gif": "image/gif", ".svg": "image/svg+xml", ".webp": "image/webp",
}


def get_extension(filename) -> str:
    """Lowercased text from the last dot, or "" when there is none.

    A leading dot alone (``.gitignore``) is not an extension.
    """
    name = str(filename or "")
    idx = name.rfind(".")
    if idx <= 0:
        return ""
    return name[idx:].lower()


def classify(filename, config_names=()):
    """Return the category for ``filename``, or ``None`` if unsupported."""
    is_primary, is_backup = root_config_kind(filename, config_names)
    if is_primary or is_backup:
        return TEXT

    ext = get_extension(filename)
    if not ext:
        # Dotfiles such as .gitignore or .env are matched by their whole name
        lower = str(filename or "").lower()
        if lower.startswith(".") and lower in TEXT_EXTENSIONS:
            return TEXT
        return None

    for category, extensions in CATEGORY_TABLES:
        if ext in extensions:
            return category
    return None


def is_supported(filename, config_names=()) -> bool:
    return classify(filename, config_names) is not None


def language_for(filename):
    """Lexer alias for the file's extension, or ``None`` to auto-detect."""
    ext = get_extension(filename) or str(filename or "").lower()
    lang = EXT_TO_LANG.get(ext)
    if lang == "text":
        return None
    return lang


def mime_for_image(filename) -> str:
    return IMAGE_MIME.get(get_extension(filename), "application/octet-stream")
