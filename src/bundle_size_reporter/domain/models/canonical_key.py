from __future__ import annotations

from pathlib import PurePath, PurePosixPath


def strip_name_hash(file_name: str) -> str:
    """Drop the content hash from ``prefix.hash.ext``; other names pass through."""
    pieces = file_name.split(".")
    if len(pieces) < 3:
        return file_name
    prefix = ".".join(pieces[:-2])
    token = pieces[-2]
    extension = pieces[-1]
    if not prefix or not token or not extension:
        return file_name
    return f"{prefix}.{extension}"


def _relative_parts(path: PurePath, root: PurePath | None) -> tuple[str, ...]:
    if root is not None:
        try:
            return path.relative_to(root).parts
        except ValueError:
            pass
    return tuple(part for part in path.parts if part not in {path.anchor, "/", "\\"})


# Input: /User/dan/app/build/static/js/main.82be8.js
# Output: /static/js/main.js
def canonical_key(path: str | PurePath, root: str | PurePath | None = None) -> str:
    pure_path = PurePath(path)
    pure_root = PurePath(root) if root is not None else None
    parts = _relative_parts(pure_path, pure_root)
    if not parts:
        return "/"
    *folders, file_name = parts
    return str(PurePosixPath("/", *folders, strip_name_hash(file_name)))
