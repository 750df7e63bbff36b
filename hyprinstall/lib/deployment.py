import shutil
import stat
from datetime import datetime
from pathlib import Path

from .exceptions import DeploymentError
from .models.deployment import ConfigEntry
from .models.result import OperationResult
from .output import debug, error, info, success, warn
from .templates import TemplateOptions, recorder_script, render_hyprland_conf, render_waybar_config, render_waybar_style

RECORDER_SCRIPT = 'wf-toggle-recorder.sh'


class BackupSet:
	"""
	Timestamped directory receiving the configuration entries a run displaces.
	The directory is only created once the first entry is moved into it.
	"""

	def __init__(self, root: Path, timestamp: datetime | None = None) -> None:
		self._root = root
		self._name = (timestamp or datetime.now()).strftime('%Y%m%d_%H%M%S')
		self._path: Path | None = None
		self.entries: list[Path] = []

	@property
	def path(self) -> Path | None:
		return self._path

	@property
	def created(self) -> bool:
		return self._path is not None

	def _ensure_directory(self) -> Path:
		if self._path is None:
			candidate = self._root / self._name
			suffix = 1
			# a second run within the same second must not reuse an older set
			while candidate.exists():
				candidate = self._root / f'{self._name}_{suffix}'
				suffix += 1

			candidate.mkdir(parents=True)
			self._path = candidate

		return self._path

	def backup(self, target: Path) -> Path | None:
		"""
		Moves target out of the way. Returns its new location, or None when
		there was nothing to back up.
		"""
		if not target.exists() and not target.is_symlink():
			return None

		info(f"Backing up existing '{target.name}' config...")
		destination = self._ensure_directory() / target.name
		shutil.move(str(target), str(destination))
		self.entries.append(destination)

		success(f"Backed up '{target.name}' to {self._path}")
		return destination


def resolve_source(tree: Path, name: str) -> Path | None:
	"""
	Prefers the nested config/<name> layout over a top level <name>.
	"""
	for candidate in (tree / 'config' / name, tree / name):
		if candidate.exists():
			return candidate

	return None


def make_executable(path: Path) -> None:
	mode = path.stat().st_mode
	path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


class ConfigDeployer:
	def __init__(self, config_dir: Path, backup_set: BackupSet) -> None:
		self.config_dir = config_dir
		self.backup_set = backup_set

	def entry(self, tree: Path, name: str) -> ConfigEntry:
		return ConfigEntry(name, resolve_source(tree, name), self.config_dir / name)

	def backup(self, names: list[str]) -> list[Path]:
		moved = []
		for name in names:
			if destination := self.backup_set.backup(self.config_dir / name):
				moved.append(destination)
		return moved

	def deploy_entry(self, entry: ConfigEntry) -> OperationResult:
		if not entry.found or entry.source is None:
			return OperationResult.missing(entry.name, 'not found in the fetched tree')

		info(f"Deploying '{entry.name}' config...")
		self.config_dir.mkdir(parents=True, exist_ok=True)

		if entry.source.is_dir():
			shutil.copytree(entry.source, entry.destination, symlinks=True, dirs_exist_ok=True)
		else:
			shutil.copy2(entry.source, entry.destination)

		return OperationResult.succeeded(entry.name)

	def deploy_entries(self, tree: Path, names: list[str]) -> list[OperationResult]:
		results = []
		for name in names:
			result = self.deploy_entry(self.entry(tree, name))

			if not result.ok:
				warn(f"Config for '{name}' not found in repository, skipping.")

			results.append(result)

		return results

	def deploy_file(self, source: Path, relative: str) -> OperationResult:
		"""
		Copies a single required file. Used when a generated artifact is
		taken verbatim from a fetched tree instead, so a missing file is fatal.
		"""
		if not source.is_file():
			error(f'Required configuration file {source} not found in repository!')
			raise DeploymentError(f'Missing required configuration file {source}')

		destination = self.config_dir / relative
		destination.parent.mkdir(parents=True, exist_ok=True)
		shutil.copy2(source, destination)

		return OperationResult.succeeded(relative)

	def write_generated(self, relative: str, content: str) -> OperationResult:
		"""
		Generated artifacts always overwrite whatever is at the destination.
		"""
		destination = self.config_dir / relative
		destination.parent.mkdir(parents=True, exist_ok=True)

		if destination.is_symlink() or destination.is_file():
			destination.unlink()

		destination.write_text(content)
		debug(f'Wrote generated {destination}')

		return OperationResult.succeeded(relative, 'generated')

	def generate_hyprland(self, options: TemplateOptions) -> OperationResult:
		info('Installing Hyprland config...')
		return self.write_generated('hypr/hyprland.conf', render_hyprland_conf(options))

	def generate_waybar(self, options: TemplateOptions) -> list[OperationResult]:
		info('Installing waybar configuration...')
		return [
			self.write_generated('waybar/config.jsonc', render_waybar_config(options)),
			self.write_generated('waybar/style.css', render_waybar_style(options)),
		]

	def copy_waybar(self, tree: Path) -> list[OperationResult]:
		info('Deploying custom waybar configuration...')
		return [
			self.deploy_file(tree / 'waybar' / 'config.jsonc', 'waybar/config.jsonc'),
			self.deploy_file(tree / 'waybar' / 'style.css', 'waybar/style.css'),
		]

	def copy_hyprland(self, tree: Path) -> OperationResult:
		info('Deploying custom Hyprland config...')
		return self.deploy_file(tree / 'hypr' / 'hyprland.conf', 'hypr/hyprland.conf')

	def install_helper_scripts(self, trees: list[Path]) -> OperationResult:
		"""
		Copies hypr/scripts from the fetched trees (later trees win) and makes
		sure the recorder toggle referenced by the generated config exists.
		"""
		scripts_dir = self.config_dir / 'hypr' / 'scripts'

		for tree in trees:
			if source := resolve_source(tree, 'hypr'):
				if (source / 'scripts').is_dir():
					shutil.copytree(source / 'scripts', scripts_dir, dirs_exist_ok=True)

		scripts_dir.mkdir(parents=True, exist_ok=True)
		recorder = scripts_dir / RECORDER_SCRIPT

		if recorder.is_file():
			result = OperationResult.succeeded(RECORDER_SCRIPT, 'copied')
			success('Screen recorder script deployed from the fetched dotfiles.')
		else:
			recorder.write_text(recorder_script())
			result = OperationResult.succeeded(RECORDER_SCRIPT, 'fallback')
			warn('No screen recorder script in the fetched dotfiles, installed the built-in fallback.')

		for script in scripts_dir.glob('*.sh'):
			make_executable(script)

		return result
