"""Optional confinement of requested paths to the document root."""

from pathlib import Path


class ForbiddenPath(Exception):
    """Raised when a requested path escapes the document root."""


def confine_to_root(document_root: str, requested_path: str) -> Path:
    """Resolve ``requested_path`` under ``document_root`` or raise ForbiddenPath."""
    if "\x00" in requested_path:
        raise ForbiddenPath

    root = Path(document_root).resolve()
    relative_part = requested_path.lstrip("/")
    if ".." in Path(relative_part).parts:
        raise ForbiddenPath

    target = (root / relative_part).resolve()
    if not (target == root or root in target.parents):
        raise ForbiddenPath

    return target
