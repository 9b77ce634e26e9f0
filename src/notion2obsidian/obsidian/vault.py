"""Writing notes into an Obsidian vault folder."""

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

# Characters Obsidian or the OS refuse in file names, plus control chars.
_ILLEGAL_CHARS = re.compile(r'[*"\\/<>:|?#^\[\]\x00-\x1f\x7f]')
_WINDOWS_RESERVED = re.compile(r"^(con|prn|aux|nul|com\d|lpt\d)(\..*)?$", re.IGNORECASE)
MAX_NAME_LENGTH = 200
UNTITLED = "Untitled"


def sanitize_filename(name: str) -> str:
    """Turn an arbitrary title into a legal path segment (without extension)."""
    cleaned = _ILLEGAL_CHARS.sub(" ", name)
    cleaned = re.sub(r"\s+", " ", cleaned).strip().strip(".").strip()
    cleaned = cleaned[:MAX_NAME_LENGTH].rstrip()
    if _WINDOWS_RESERVED.match(cleaned):
        cleaned = f"{cleaned}_"
    return cleaned or UNTITLED


class Vault:
    """A directory tree of notes rooted at ``root``."""

    def __init__(self, root: Path | str):
        self.root = Path(root)

    def folder(self, folder: str) -> Path:
        path = self.root / folder
        path.mkdir(parents=True, exist_ok=True)
        return path

    def available_path(self, folder: Path, stem: str, extension: str) -> Path:
        """First ``stem.ext``, ``stem 1.ext``, ``stem 2.ext``... that does not exist."""
        path = folder / f"{stem}.{extension}"
        counter = 1
        while path.exists():
            path = folder / f"{stem} {counter}.{extension}"
            counter += 1
        return path

    def _write(self, folder: str, name: str, extension: str, content: str) -> Path:
        path = self.available_path(self.folder(folder), sanitize_filename(name), extension)
        path.write_text(content, encoding="utf-8", newline="\n")
        logger.debug(f"Wrote {path}")
        return path

    def write_document(self, folder: str, name: str, content: str) -> Path:
        """Write a Markdown note named after ``name``; returns the final path."""
        return self._write(folder, name, "md", content)

    def write_base(self, folder: str, name: str, content: str) -> Path:
        """Write an Obsidian Bases view file named after ``name``."""
        return self._write(folder, name, "base", content)
