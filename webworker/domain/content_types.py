"""Extension extraction and the fixed extension to MIME type table."""

from typing import Optional

CONTENT_TYPES = {
    "jpg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "html": "text/html",
    # Plain text is served as markup on purpose.
    "txt": "text/html",
}

TEXTUAL_EXTENSIONS = frozenset({"html", "txt"})


def extension_of(path: str) -> Optional[str]:
    """Return the lower-cased token after the last dot of the final segment.

    ``./docs/index.html`` gives ``html``; ``./README``, ``./archive.`` and
    ``./.d/file`` give ``None``. The same value drives both the Content-Type
    lookup and the text/binary render branch.
    """
    segment = path.rsplit("/", 1)[-1]
    _, dot, extension = segment.rpartition(".")
    if not dot or not extension:
        return None
    return extension.lower()


def mime_type(extension: Optional[str]) -> Optional[str]:
    """Map an extension to its MIME type, or ``None`` when it is unmapped."""
    if extension is None:
        return None
    return CONTENT_TYPES.get(extension)


def is_textual(extension: Optional[str]) -> bool:
    """Return True when the extension renders through the template branch."""
    return extension in TEXTUAL_EXTENSIONS
