# Process-wide values shared across imports.
from pathlib import Path
from typing import TypedDict


class _StorageDict(TypedDict):
	LOG_PATH: Path
	DEBUG: bool


storage: _StorageDict = {
	'LOG_PATH': Path.home() / '.cache' / 'hyprinstall',
	'DEBUG': False,
}
