import shutil
from pathlib import Path

from .models.result import OperationResult
from .output import debug, error, info, success, warn

IMAGE_EXTENSIONS = ('.jpg', '.jpeg', '.png')


def find_wallpaper_source(tree: Path) -> Path | None:
	for candidate in (tree / 'wallpapers', tree / 'config' / 'wallpapers'):
		if candidate.is_dir():
			return candidate
	return None


def copy_wallpapers(source: Path, destination: Path) -> int:
	copied = 0

	for item in sorted(source.iterdir()):
		target = destination / item.name
		try:
			if item.is_dir():
				shutil.copytree(item, target, dirs_exist_ok=True)
			else:
				shutil.copy2(item, target)
			copied += 1
		except OSError as err:
			debug(f'Could not copy wallpaper {item}: {err}')

	return copied


def first_image(directory: Path, exclude: str | None = None) -> Path | None:
	"""
	First image file found walking the directory in lexical order.
	"""
	for path in sorted(directory.rglob('*')):
		if path.name == exclude:
			continue

		if path.is_file() and path.suffix.lower() in IMAGE_EXTENSIONS:
			return path

	return None


def install_wallpapers(tree: Path | None, destination: Path, default: str = 'eink.jpg') -> OperationResult:
	"""
	Copies the wallpapers of the fetched tree and makes sure the default
	wallpaper name resolves, linking it to the first available image otherwise.
	Never raises for missing images, the desktop is only degraded without one.
	"""
	info('Setting up wallpapers...')
	destination.mkdir(parents=True, exist_ok=True)

	if tree is not None and (source := find_wallpaper_source(tree)):
		copy_wallpapers(source, destination)

	default_path = destination / default

	if default_path.exists():
		success(f"Default wallpaper '{default}' is ready.")
		return OperationResult.succeeded(default)

	warn(f"Default wallpaper '{default}' not found.")

	if substitute := first_image(destination, exclude=default):
		if default_path.is_symlink():
			default_path.unlink()

		default_path.symlink_to(substitute.relative_to(destination))
		info(f"Symlinked '{substitute.name}' to '{default}' as a fallback.")
		return OperationResult.succeeded(default, f'linked to {substitute.name}')

	error(f'No wallpapers found! You must add one to {default_path} for swaybg to work.')
	return OperationResult.missing(default, 'no images available')
