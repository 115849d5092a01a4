"""Utility helpers shared across server modules."""

from pathlib import Path


def resolve_file_path(base_dir: str | Path, name: str) -> Path | None:
    """Resolve a file under ``base_dir`` or return None for traversal attempts.

    Symlinks are followed before the containment check, so a link inside
    ``base_dir`` that points outside it is rejected as well.
    """
    base_root = Path(base_dir).resolve()
    candidate = (base_root / name).resolve()

    try:
        candidate.relative_to(base_root)
    except ValueError:
        return None

    return candidate


def route_segment(path: str, prefix: str) -> str:
    """Return the path segment right after ``prefix``, up to the next slash."""
    if not path.startswith(prefix):
        raise ValueError(f"path {path!r} does not start with {prefix!r}")
    return path[len(prefix) :].split("/", 1)[0]
