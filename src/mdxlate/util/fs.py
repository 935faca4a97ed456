from __future__ import annotations

import shutil
from pathlib import Path

from mdxlate.core.utils.paths import is_artifact

MD_EXTENSIONS = {".md", ".mdx"}


def _is_document(path: Path) -> bool:
    return path.suffix.lower() in MD_EXTENSIONS and not is_artifact(path)


def discover_files(path: Path, exclude: Path | None = None) -> list[Path]:
    """Return sorted .md/.mdx files under path, or [path] if a single file.

    Masked artifacts and anything under exclude (typically the output dir) are skipped.
    """
    if path.is_file():
        return [path] if _is_document(path) else []
    skip = exclude.resolve() if exclude is not None else None
    return sorted(
        p for p in path.rglob("*")
        if p.is_file() and _is_document(p) and not (skip is not None and skip in p.resolve().parents)
    )


def clean_dir(path: Path) -> None:
    """Create path if needed and remove everything inside it."""
    path.mkdir(parents=True, exist_ok=True)
    for child in path.iterdir():
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child)
        else:
            child.unlink()


def copy_file(src: Path, dest: Path) -> Path:
    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(src, dest)
    return dest
