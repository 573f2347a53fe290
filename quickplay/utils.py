import locale
import logging
import os
import re
import sys
from dataclasses import dataclass
from pathlib import Path

VIDEO_EXTENSIONS = (
    ".avi",
    ".flv",
    ".m2ts",
    ".m4v",
    ".mkv",
    ".mov",
    ".mp4",
    ".mts",
    ".ts",
    ".webm",
    ".wmv",
)
VIDEO_EXTENSION_SET = set(VIDEO_EXTENSIONS)

APP_DIR_NAME = "QuickPlay"

_DIGIT_RUN = re.compile(r"(\d+)")


@dataclass(frozen=True)
class MediaPath:
    """Absolute path of a file believed to be playable."""

    path: Path

    @classmethod
    def from_path(cls, value) -> "MediaPath":
        if isinstance(value, MediaPath):
            return value
        return cls(Path(value).expanduser().absolute())

    @property
    def parent(self) -> Path:
        return self.path.parent

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def extension(self) -> str:
        return self.path.suffix.lower()

    def __str__(self) -> str:
        return str(self.path)


def is_video_file(path) -> bool:
    ext = Path(path).suffix.lower()
    return ext in VIDEO_EXTENSION_SET


def _collate(text: str) -> str:
    try:
        return locale.strxfrm(text)
    except (ValueError, OSError):
        return text


def natural_sort_key(name: str) -> tuple:
    """Sort key where "file2" < "file10" and case is ignored.

    Digit runs compare numerically; text runs compare by the locale collation of
    their casefolded form. The raw name is the final tiebreaker so that two names
    differing only in case still have a stable order.
    """
    parts = []
    for chunk in _DIGIT_RUN.split(name):
        if not chunk:
            continue
        if chunk.isdigit():
            parts.append((0, int(chunk), ""))
        else:
            parts.append((1, 0, _collate(chunk.casefold())))
    return (tuple(parts), name)


def list_sibling_videos(path) -> list[MediaPath]:
    current = MediaPath.from_path(path)
    folder = current.parent
    try:
        entries = list(os.scandir(folder))
    except OSError as e:
        logging.warning("Sibling scan failed: folder=%s error=%s", folder, e)
        return []

    siblings = []
    for entry in entries:
        if entry.name.startswith("."):
            continue
        if not is_video_file(entry.name):
            continue
        try:
            if not entry.is_file():
                continue
        except OSError as e:
            logging.debug("Skipping unreadable entry %s: %s", entry.path, e)
            continue
        siblings.append(MediaPath(folder / entry.name))

    siblings.sort(key=lambda item: natural_sort_key(item.name))
    return siblings


def get_user_data_dir() -> Path:
    """Get writable base directory for app-managed user files."""
    if sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    data_dir = base / APP_DIR_NAME
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_user_data_path(filename: str) -> str:
    """Get path for writable user data (settings, logs)."""
    return str(get_user_data_dir() / filename)


def get_log_dir() -> Path:
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Logs" / APP_DIR_NAME
    return get_user_data_dir() / "logs"
