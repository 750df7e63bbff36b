import configparser
import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any
from urllib.error import URLError
from urllib.request import Request, urlopen

from pydantic import BaseModel

from hyprinstall.lib import mozlz4
from hyprinstall.lib.deployment import make_executable
from hyprinstall.lib.exceptions import DownloadTimeout, RequirementError, SysCallError
from hyprinstall.lib.general import SysCommand
from hyprinstall.lib.hardware import SysInfo
from hyprinstall.lib.models.result import OperationResult
from hyprinstall.lib.output import debug, info, success, warn
from hyprinstall.lib.systemd import Systemd

if TYPE_CHECKING:
	from hyprinstall.lib.installer import Installer

SERVICE_NAME = 'hyprinstall-browser-bootstrap.service'


class BrowserExtension(BaseModel):
	id: str
	url: str

	@property
	def filename(self) -> str:
		return f'{self.id}.xpi'


DEFAULT_EXTENSIONS = [
	BrowserExtension(
		id='uBlock0@raymondhill.net',
		url='https://addons.mozilla.org/firefox/downloads/latest/ublock-origin/latest.xpi',
	),
]

DEFAULT_PREFERENCES: dict[str, Any] = {
	'browser.shell.checkDefaultBrowser': False,
	# sideloaded extensions in the profile start enabled
	'extensions.autoDisableScopes': 0,
	'extensions.enabledScopes': 15,
	'browser.search.separatePrivateDefault': False,
	'toolkit.telemetry.enabled': False,
	'datareporting.healthreport.uploadEnabled': False,
}


def _pref_value(value: Any) -> str:
	# user.js values are JavaScript literals
	return json.dumps(value)


class BrowserBootstrap:
	"""
	Prepares a browser profile: discovers or creates it, drops the extensions
	into it, writes preferences, the extension policy and the search engine
	descriptor. Every step is best-effort.
	"""

	def __init__(
		self,
		root: Path | None = None,
		binary: str = 'zen-browser',
		extensions: list[BrowserExtension] | None = None,
		preferences: dict[str, Any] | None = None,
		search_engine: str = 'DuckDuckGo',
		timeout: float = 30,
	) -> None:
		self.root = root or Path.home() / '.zen'
		self.binary = binary
		self.extensions = extensions if extensions is not None else DEFAULT_EXTENSIONS
		self.preferences = preferences if preferences is not None else DEFAULT_PREFERENCES
		self.search_engine = search_engine
		self.timeout = timeout

	def discover_profile(self) -> Path | None:
		profiles_ini = self.root / 'profiles.ini'
		if not profiles_ini.is_file():
			return None

		parser = configparser.ConfigParser(interpolation=None)
		parser.read(profiles_ini)

		def _resolve(section: configparser.SectionProxy) -> Path:
			path = Path(section.get('Path', ''))
			if section.get('IsRelative', '1') == '1':
				path = self.root / path
			return path

		profiles = [parser[name] for name in parser.sections() if name.startswith('Profile')]

		# an [Install...] section names the profile the browser actually uses
		for name in parser.sections():
			if name.startswith('Install') and (default := parser[name].get('Default')):
				candidate = self.root / default
				if candidate.is_dir():
					return candidate

		for section in profiles:
			if section.get('Default') == '1' and _resolve(section).is_dir():
				return _resolve(section)

		for section in profiles:
			if _resolve(section).is_dir():
				return _resolve(section)

		return None

	def create_profile(self) -> Path | None:
		info('No browser profile found, creating one...')

		try:
			SysCommand([self.binary, '--headless', '-CreateProfile', 'default'])
		except (SysCallError, RequirementError) as err:
			warn(f'Could not create a browser profile: {err}')
			return None

		return self.discover_profile()

	def _urllib_download(self, url: str, destination: Path) -> None:
		req = Request(url, headers={'User-Agent': 'hyprinstall'})

		try:
			with urlopen(req, timeout=self.timeout) as resp:
				destination.write_bytes(resp.read())
		except TimeoutError as err:
			raise DownloadTimeout(f'Downloading {url} took longer than {self.timeout}s') from err

	def download(self, url: str, destination: Path) -> bool:
		destination.parent.mkdir(parents=True, exist_ok=True)

		try:
			self._urllib_download(url, destination)
			return True
		except (URLError, OSError, DownloadTimeout) as err:
			debug(f'Direct download of {url} failed: {err}')

		timeout = str(int(self.timeout))
		for cmd in (
			['curl', '-fsSL', '--max-time', timeout, '-o', str(destination), url],
			['wget', '-q', '--timeout', timeout, '-O', str(destination), url],
		):
			try:
				SysCommand(cmd)
				return True
			except (SysCallError, RequirementError) as err:
				debug(f'{cmd[0]} download of {url} failed: {err}')

		return False

	def install_extensions(self, profile: Path) -> list[OperationResult]:
		results = []
		for extension in self.extensions:
			target = profile / 'extensions' / extension.filename

			if target.is_file():
				results.append(OperationResult.succeeded(extension.id, 'already present'))
			elif self.download(extension.url, target):
				results.append(OperationResult.succeeded(extension.id))
			else:
				warn(f'Could not download extension {extension.id}')
				results.append(OperationResult.failed(extension.id, 'download failed'))

		return results

	def write_preferences(self, profile: Path) -> OperationResult:
		lines = [f'user_pref("{key}", {_pref_value(value)});' for key, value in self.preferences.items()]
		(profile / 'user.js').write_text('\n'.join(lines) + '\n')
		return OperationResult.succeeded('user.js')

	def policies(self) -> dict[str, Any]:
		return {
			'policies': {
				'ExtensionSettings': {
					extension.id: {
						'installation_mode': 'force_installed',
						'install_url': extension.url,
					}
					for extension in self.extensions
				},
			},
		}

	def write_policies(self, profile: Path) -> OperationResult:
		target = profile / 'distribution' / 'policies.json'
		target.parent.mkdir(parents=True, exist_ok=True)
		target.write_text(json.dumps(self.policies(), indent=2) + '\n')
		return OperationResult.succeeded('policies.json')

	def search_descriptor(self) -> dict[str, Any]:
		engine_id = self.search_engine.lower()
		return {
			'version': 6,
			'engines': [
				{
					'id': engine_id,
					'_name': self.search_engine,
					'_isConfigEngine': True,
					'_metaData': {'order': 1},
				},
			],
			'metaData': {
				'useSavedOrder': True,
				'defaultEngineId': engine_id,
			},
		}

	def write_search_descriptor(self, profile: Path) -> OperationResult:
		payload = json.dumps(self.search_descriptor(), separators=(',', ':')).encode()

		if (data := mozlz4.encode(payload)) is None:
			warn('lz4 is not available, leaving the browser search engine unchanged.')
			return OperationResult.missing('search.json.mozlz4', 'lz4 not available')

		(profile / 'search.json.mozlz4').write_bytes(data)
		return OperationResult.succeeded('search.json.mozlz4')

	def run(self) -> list[OperationResult]:
		info('Bootstrapping browser profile...')
		profile = self.discover_profile() or self.create_profile()

		if profile is None:
			return [OperationResult.missing('browser profile', f'no profile under {self.root}')]

		debug(f'Using browser profile {profile}')

		results = self.install_extensions(profile)
		results.append(self.write_preferences(profile))
		results.append(self.write_policies(profile))
		results.append(self.write_search_descriptor(profile))

		if all(result.ok for result in results):
			success(f'Browser profile {profile.name} is ready.')

		return results


class BrowserApp:
	def __init__(self, bin_dir: Path | None = None, unit_dir: Path | None = None) -> None:
		self.bin_dir = bin_dir or Path.home() / '.local' / 'bin'
		self.unit_dir = unit_dir or Path.home() / '.config' / 'systemd' / 'user'

	@property
	def helper_path(self) -> Path:
		return self.bin_dir / 'hyprinstall-browser-bootstrap'

	@property
	def unit_path(self) -> Path:
		return self.unit_dir / SERVICE_NAME

	def helper_script(self) -> str:
		return f'#!/bin/sh\nexec {sys.executable} -m hyprinstall --script browser "$@"\n'

	def unit(self) -> str:
		return str(
			Systemd(
				Unit={
					'Description': 'One-shot browser profile bootstrap',
					'After': 'graphical-session.target network-online.target',
				},
				Service={
					'Type': 'oneshot',
					'ExecStart': str(self.helper_path),
					'ExecStartPost': f'/usr/bin/systemctl --user disable {SERVICE_NAME}',
				},
				Install={
					'WantedBy': 'default.target',
				},
			)
		)

	def install(self, install_session: 'Installer') -> list[OperationResult]:
		info('Installing browser bootstrap helper...')

		self.helper_path.parent.mkdir(parents=True, exist_ok=True)
		self.helper_path.write_text(self.helper_script())
		make_executable(self.helper_path)

		self.unit_path.parent.mkdir(parents=True, exist_ok=True)
		self.unit_path.write_text(self.unit())

		# enabled for the next login only, an immediate run happens in-process below
		results = [install_session.try_enable_service(SERVICE_NAME, user=True, now=False)]

		if SysInfo.has_graphical_session():
			results += BrowserBootstrap().run()
		else:
			info('No graphical session, the browser bootstrap runs on next login.')

		return results
