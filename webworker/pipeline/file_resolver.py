"""Mapping requested paths onto the document root and probing them."""

import logging
from typing import BinaryIO

from webworker.domain.content_types import extension_of
from webworker.domain.correlation_id import CorrelationLoggerAdapter, component_logger
from webworker.domain.http_types import ResolvedFile
from webworker.domain.sandbox import ForbiddenPath, confine_to_root

FILE_LOGGER = component_logger("pipeline.file")


def resolve_local_path(document_root: str, requested_path: str) -> str:
    """Prefix the requested path with the document root.

    ``("." , "/index.html")`` gives ``./index.html``. No ``..`` filtering is
    applied here; see :func:`resolve_file` for opt-in confinement.
    """
    return document_root.rstrip("/") + requested_path


def close_quietly(
    handle: BinaryIO, path: str, logger: CorrelationLoggerAdapter = FILE_LOGGER
) -> None:
    """Close a file handle, logging rather than raising on failure."""
    try:
        handle.close()
    except OSError as error:
        logger.warning(
            "Unable to close file",
            extra={
                "event": "file_close_failed",
                "path": path,
                "error_type": type(error).__name__,
            },
        )


def file_exists(path: str, logger: CorrelationLoggerAdapter = FILE_LOGGER) -> bool:
    """Return True when ``path`` opens and yields at least one byte."""
    try:
        handle = open(path, "rb")  # pylint: disable=consider-using-with
    except OSError as error:
        logger.info(
            "Unable to open file",
            extra={
                "event": "file_not_found",
                "path": path,
                "error_type": type(error).__name__,
            },
        )
        return False

    try:
        return bool(handle.readline())
    except OSError as error:
        logger.info(
            "Unable to read file",
            extra={
                "event": "file_unreadable",
                "path": path,
                "error_type": type(error).__name__,
            },
        )
        return False
    finally:
        close_quietly(handle, path, logger)


def resolve_file(
    document_root: str,
    requested_path: str,
    confine: bool = False,
    logger: CorrelationLoggerAdapter = FILE_LOGGER,
) -> ResolvedFile:
    """Build the ResolvedFile for a requested path."""
    local_path = resolve_local_path(document_root, requested_path)
    extension = extension_of(local_path)
    if confine:
        try:
            confine_to_root(document_root, requested_path)
        except ForbiddenPath:
            logger.warning(
                "Path escapes document root",
                extra={"event": "forbidden_path", "path": requested_path},
            )
            return ResolvedFile(local_path, extension, False, requested_path)
    exists = file_exists(local_path, logger)
    if logger.logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "File resolved",
            extra={"event": "file_resolved", "path": local_path, "exists": exists},
        )
    return ResolvedFile(local_path, extension, exists, requested_path)
