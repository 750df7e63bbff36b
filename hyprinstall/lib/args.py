import argparse
import json
from argparse import ArgumentParser
from dataclasses import dataclass, field
from importlib.metadata import version
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from pydantic.dataclasses import dataclass as p_dataclass

from hyprinstall.lib.hardware import GfxDriver
from hyprinstall.lib.models.dotfiles import CUSTOM_DOTS, EINK_DOTS, DotfileSource
from hyprinstall.lib.models.packages import CHAOTIC_AUR, CustomRepository
from hyprinstall.lib.output import error, logger, warn
from hyprinstall.lib.storage import storage


@p_dataclass
class Arguments:
	config: Path | None = None
	script: str | None = None
	silent: bool = False
	debug: bool = False


def _default_packages() -> list[str]:
	return [
		# Core system
		'base-devel', 'git', 'curl', 'wget',
		# Core Hyprland
		'hyprland', 'hyprpaper', 'hyprpicker', 'xdg-desktop-portal-hyprland',
		# Wayland tools
		'waybar', 'wofi', 'swaybg', 'grim', 'slurp', 'wf-recorder', 'wl-clipboard',
		# Notifications
		'dunst', 'libnotify',
		# Terminals & editor
		'alacritty', 'helix',
		# Apps
		'nautilus', 'mpv', 'htop',
		# Utils
		'brightnessctl', 'pamixer', 'playerctl', 'polkit-gnome',
		# Fonts
		'ttf-jetbrains-mono-nerd', 'ttf-font-awesome', 'ttf-opensans',
		# Wayland support
		'qt5-wayland', 'qt6-wayland',
	]


@dataclass
class HyprConfig:
	version: str | None = None
	script: str | None = None
	config_dir: Path = field(default_factory=lambda: Path.home() / '.config')
	repository: CustomRepository = field(default_factory=lambda: CHAOTIC_AUR.model_copy())
	packages: list[str] = field(default_factory=_default_packages)
	optional_packages: list[str] = field(default_factory=lambda: ['ghostty'])
	aur_packages: list[str] = field(default_factory=lambda: ['zen-browser-bin', 'localsend-bin'])
	gfx_driver: GfxDriver | None = None
	gfx_substitutions: dict[str, str] = field(default_factory=dict)
	dotfiles: list[DotfileSource] = field(default_factory=lambda: [EINK_DOTS.model_copy(), CUSTOM_DOTS.model_copy()])
	config_entries: list[str] = field(default_factory=lambda: ['wofi', 'alacritty', 'ghostty', 'helix', 'mpv', 'dunst'])
	generate_hyprland: bool = True
	generate_waybar: bool = True
	wallpaper: str = 'eink.jpg'
	keyboard_layout: str = 'us'
	keyboard_variant: str = 'colemak_dh'
	gaps_in: int = 5
	gaps_out: int = 28
	autologin: bool | None = None
	browser_bootstrap: bool = True

	def safe_json(self) -> dict[str, Any]:
		return {
			'version': self.version,
			'script': self.script,
			'config_dir': str(self.config_dir),
			'repository': self.repository.model_dump(),
			'packages': self.packages,
			'optional_packages': self.optional_packages,
			'aur_packages': self.aur_packages,
			'gfx_driver': self.gfx_driver.value if self.gfx_driver else None,
			'gfx_substitutions': self.gfx_substitutions,
			'dotfiles': [source.model_dump() for source in self.dotfiles],
			'config_entries': self.config_entries,
			'generate_hyprland': self.generate_hyprland,
			'generate_waybar': self.generate_waybar,
			'wallpaper': self.wallpaper,
			'keyboard_layout': self.keyboard_layout,
			'keyboard_variant': self.keyboard_variant,
			'gaps_in': self.gaps_in,
			'gaps_out': self.gaps_out,
			'autologin': self.autologin,
			'browser_bootstrap': self.browser_bootstrap,
		}

	def dotfile_source(self, index: int) -> DotfileSource | None:
		if index < len(self.dotfiles):
			return self.dotfiles[index]
		return None

	@classmethod
	def from_config(cls, args_config: dict[str, Any]) -> 'HyprConfig':
		hypr_config = HyprConfig()

		if script := args_config.get('script', None):
			hypr_config.script = script

		if config_dir := args_config.get('config_dir', None):
			hypr_config.config_dir = Path(config_dir).expanduser()

		if repository := args_config.get('repository', None):
			hypr_config.repository = CustomRepository.model_validate(repository)

		for key in ('packages', 'optional_packages', 'aur_packages', 'config_entries'):
			if (value := args_config.get(key, None)) is not None:
				setattr(hypr_config, key, list(value))

		if (gfx_driver := args_config.get('gfx_driver', None)) is not None:
			hypr_config.gfx_driver = GfxDriver(gfx_driver)

		if gfx_substitutions := args_config.get('gfx_substitutions', {}):
			hypr_config.gfx_substitutions = dict(gfx_substitutions)

		if (dotfiles := args_config.get('dotfiles', None)) is not None:
			hypr_config.dotfiles = [DotfileSource.model_validate(source) for source in dotfiles]

		hypr_config.generate_hyprland = args_config.get('generate_hyprland', True)
		hypr_config.generate_waybar = args_config.get('generate_waybar', True)

		if wallpaper := args_config.get('wallpaper', None):
			hypr_config.wallpaper = wallpaper

		if keyboard_layout := args_config.get('keyboard_layout', None):
			hypr_config.keyboard_layout = keyboard_layout

		if (keyboard_variant := args_config.get('keyboard_variant', None)) is not None:
			hypr_config.keyboard_variant = keyboard_variant

		hypr_config.gaps_in = int(args_config.get('gaps_in', hypr_config.gaps_in))
		hypr_config.gaps_out = int(args_config.get('gaps_out', hypr_config.gaps_out))

		if (autologin := args_config.get('autologin', None)) is not None:
			hypr_config.autologin = bool(autologin)

		hypr_config.browser_bootstrap = args_config.get('browser_bootstrap', True)

		return hypr_config


class HyprConfigHandler:
	def __init__(self, argv: list[str] | None = None) -> None:
		self._parser: ArgumentParser = self._define_arguments()
		self._args: Arguments = self._parse_args(argv)

		config = self._parse_config()

		try:
			self._config = HyprConfig.from_config(config)
			self._config.version = self._get_version()
		except (ValueError, ValidationError) as err:
			warn(str(err))
			exit(1)

	@property
	def config(self) -> HyprConfig:
		return self._config

	@property
	def args(self) -> Arguments:
		return self._args

	def get_script(self) -> str:
		if script := self.args.script:
			return script

		if script := self.config.script:
			return script

		return 'guided'

	def _get_version(self) -> str:
		try:
			return version('hyprinstall')
		except Exception:
			return 'hyprinstall version not found'

	def _define_arguments(self) -> ArgumentParser:
		parser = ArgumentParser(prog='hyprinstall', formatter_class=argparse.ArgumentDefaultsHelpFormatter)
		parser.add_argument(
			'-v',
			'--version',
			action='version',
			default=False,
			version='%(prog)s ' + self._get_version(),
		)
		parser.add_argument(
			'--config',
			type=Path,
			nargs='?',
			default=None,
			help='JSON configuration file overriding the built-in package lists and dotfile sources',
		)
		parser.add_argument(
			'--script',
			nargs='?',
			type=str,
			help='Script to run (guided, browser)',
		)
		parser.add_argument(
			'--silent',
			action='store_true',
			default=False,
			help='Answer every prompt with its default',
		)
		parser.add_argument(
			'--debug',
			action='store_true',
			default=False,
			help='Echo debug messages to the terminal as well as the log',
		)

		return parser

	def _parse_args(self, argv: list[str] | None) -> Arguments:
		argparse_args = vars(self._parser.parse_args(argv))
		argparse_args.pop('version', None)
		args: Arguments = Arguments(**argparse_args)

		if args.debug:
			storage['DEBUG'] = True
			warn(f'Debug output enabled, the full log is written to {logger.path}')

		return args

	def _parse_config(self) -> dict[str, Any]:
		config: dict[str, Any] = {}

		if self._args.config is not None:
			config.update(json.loads(self._read_file(self._args.config)))

		return self._cleanup_config(config)

	def _read_file(self, path: Path) -> str:
		if not path.exists():
			error(f'Could not find file {path}')
			exit(1)

		return path.read_text()

	def _cleanup_config(self, config: dict[str, Any]) -> dict[str, Any]:
		clean_args = {}
		for key, val in config.items():
			if isinstance(val, dict):
				val = self._cleanup_config(val)

			if val is not None:
				clean_args[key] = val

		return clean_args
