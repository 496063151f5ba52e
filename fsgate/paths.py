"""Allowed-directory bookkeeping and text/binary detection for file tools."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

_BINARY_EXTENSIONS = frozenset(
    {
        "exe", "dll", "so", "dylib", "bin", "obj", "o", "a", "lib",
        "png", "jpg", "jpeg", "gif", "bmp", "tiff", "ico",
        "mp3", "mp4", "avi", "mov", "wmv", "flv", "wav",
        "zip", "tar", "gz", "bz2", "xz", "7z", "rar",
        "pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx",
    }
)

_SAMPLE_SIZE = 8192


class PathError(Exception):
    """Base class for path validation failures."""


class OutsideAllowedPathsError(PathError):
    """The path resolves outside every allowed directory."""

    def __init__(self) -> None:
        super().__init__("Path is outside of all allowed directories")


class PathNotFoundError(PathError):
    """The path does not exist and cannot be created in place."""

    def __init__(self) -> None:
        super().__init__("Path not found")


class PathIOError(PathError):
    """An operating-system error occurred while resolving a path."""

    def __init__(self, error: OSError) -> None:
        self.error = error
        super().__init__(f"IO error: {error}")


def _parent(raw: str) -> str | None:
    """Return the lexical parent of *raw*, or None when it has none."""
    separators = os.sep + (os.altsep or "")
    stripped = raw.rstrip(separators)
    if not stripped:
        return None
    return os.path.dirname(stripped)


class AllowedPaths:
    """A set of canonical directories that file operations may touch."""

    def __init__(self, paths: Iterable[PathLike]) -> None:
        paths = list(paths)
        if not paths:
            raise PathIOError(OSError("No allowed directories specified"))
        canonical: list[Path] = []
        for path in paths:
            try:
                canonical.append(Path(path).resolve(strict=True))
            except (OSError, RuntimeError) as exc:
                logger.warning("Failed to canonicalize allowed path: %s", path)
                error = exc if isinstance(exc, OSError) else OSError(str(exc))
                raise PathIOError(error) from exc
        self._paths = canonical
        logger.debug("Initialized allowed paths: %s", canonical)

    def validate_path(self, path: PathLike) -> Path:
        """Return the canonical form of *path* if it lies inside an allowed directory.

        A path that does not exist yet is accepted, unchanged, when its parent
        exists and is allowed.
        """
        raw = os.fspath(path)
        logger.debug("Validating path: '%s'", raw)
        try:
            canonical = Path(raw).resolve(strict=True)
        except FileNotFoundError:
            parent = _parent(raw)
            if parent and os.path.exists(parent):
                try:
                    parent_canonical = Path(parent).resolve(strict=True)
                except OSError as exc:
                    raise PathIOError(exc) from exc
                if not self.is_path_allowed(parent_canonical):
                    logger.warning(
                        "Parent path is outside all allowed directories: '%s'", parent
                    )
                    raise OutsideAllowedPathsError()
                return Path(raw)
            logger.debug("Path not found: '%s'", raw)
            raise PathNotFoundError() from None
        except (OSError, RuntimeError) as exc:
            logger.warning("Failed to canonicalize path: %s", exc)
            error = exc if isinstance(exc, OSError) else OSError(str(exc))
            raise PathIOError(error) from exc

        if not self.is_path_allowed(canonical):
            logger.warning(
                "Path '%s' resolves to '%s' which is outside all allowed directories",
                raw,
                canonical,
            )
            raise OutsideAllowedPathsError()
        logger.debug("Path '%s' validated successfully", raw)
        return canonical

    def is_path_allowed(self, path: PathLike) -> bool:
        """Whether a canonical path lies within any allowed directory."""
        candidate = Path(path)
        return any(candidate.is_relative_to(allowed) for allowed in self._paths)

    def closest_relative_path(self, path: PathLike) -> str:
        """Express *path* relative to the allowed directory giving the fewest components."""
        candidate = Path(path)
        best = os.fspath(path)
        best_components: int | None = None
        for allowed in self._paths:
            try:
                relative = candidate.relative_to(allowed)
            except ValueError:
                continue
            count = len(relative.parts)
            if best_components is None or count < best_components:
                best = str(relative) if relative.parts else ""
                best_components = count
        return best

    def all_paths(self) -> list[Path]:
        """All allowed directories, canonicalized, in configuration order."""
        return list(self._paths)


def is_likely_binary_by_extension(path: PathLike) -> bool:
    """Whether the file extension marks a commonly binary format."""
    suffix = Path(path).suffix
    return bool(suffix) and suffix[1:].lower() in _BINARY_EXTENSIONS


def is_text_file(path: PathLike) -> bool:
    """Guess whether a file holds text by its extension and its first 8 KiB.

    Raises OSError when the file cannot be read.
    """
    if is_likely_binary_by_extension(path):
        return False
    with open(path, "rb") as handle:
        sample = handle.read(_SAMPLE_SIZE)
    if not sample:
        return True
    size = len(sample)
    null_bytes = sample.count(0)
    non_ascii = sum(1 for byte in sample if byte > 127)
    if null_bytes > size // 100:
        return False
    if non_ascii > size * 3 // 10:
        try:
            sample.decode("utf-8")
        except UnicodeDecodeError:
            return False
    return True