"""Working directory resolution."""

from __future__ import annotations

import os

__all__ = ["resolve_path"]


def resolve_path(base: str | os.PathLike[str], *pieces: str | os.PathLike[str]) -> str:
    """Resolve ``base`` and then each piece in turn into one absolute path.

    Each piece is joined onto the result so far and normalized, so an absolute
    piece discards everything before it and ``..`` segments collapse. Empty
    pieces are no-ops.

    Args:
        base: Starting path; made absolute against the process cwd
        pieces: Further fragments, applied left to right

    Returns:
        Absolute, normalized path
    """
    resolved = os.path.abspath(os.fspath(base))
    for piece in pieces:
        resolved = os.path.normpath(os.path.join(resolved, os.fspath(piece)))
    return resolved
