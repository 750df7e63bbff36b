import time
from collections.abc import Iterable
from pathlib import Path

from ..exceptions import PackageError, RequirementError, SysCallError
from ..general import SysCommand
from ..models.result import OperationResult
from ..output import debug, error, info, warn
from .config import PacmanConfig


class Pacman:
	def __init__(self, config_path: Path = Path('/etc/pacman.conf')) -> None:
		self.synced = False
		self.config = PacmanConfig(config_path)

	@staticmethod
	def run(args: list[str], default_cmd: str = 'pacman', peek_output: bool = True) -> SysCommand:
		"""
		A centralized function to call `pacman` from, always through sudo.
		Waits up to 10 minutes for another running pacman session to release its lock.
		"""
		pacman_db_lock = Path('/var/lib/pacman/db.lck')

		if pacman_db_lock.exists():
			warn('Pacman is already running, waiting maximum 10 minutes for it to terminate.')

		started = time.time()
		while pacman_db_lock.exists():
			time.sleep(0.25)

			if time.time() - started > (60 * 10):
				error('Pre-existing pacman lock never exited. Please clean up any existing pacman sessions before running the installer.')
				exit(1)

		return SysCommand(['sudo', default_cmd, *args], peek_output=peek_output)

	def sync(self) -> None:
		info('Refreshing the package databases...')
		self.run(['-Sy'])
		self.synced = True

	def install(self, packages: str | Iterable[str]) -> None:
		if isinstance(packages, str):
			packages = [packages]

		packages = list(packages)
		if not packages:
			return

		info(f'Installing packages: {" ".join(packages)}')

		try:
			self.run(['-S', '--needed', '--noconfirm', *packages])
		except SysCallError as err:
			raise PackageError(f'Could not install packages {packages}: {err}') from err

	def install_from_url(self, urls: Iterable[str]) -> None:
		for url in urls:
			self.run(['-U', '--noconfirm', url])

	def try_install(self, package: str) -> OperationResult:
		"""
		Installs a package that might not exist in the configured repositories.
		"""
		try:
			self.run(['-S', '--needed', '--noconfirm', package])
		except SysCallError as err:
			debug(f'Could not install {package}: {err}')
			return OperationResult.failed(package, 'not available in the configured repositories')

		return OperationResult.succeeded(package)

	def remove_if_present(self, packages: Iterable[str]) -> OperationResult:
		packages = list(packages)
		installed = [package for package in packages if self.is_installed(package)]

		if not installed:
			return OperationResult.missing(' '.join(packages), 'none installed')

		target = ' '.join(installed)

		try:
			self.run(['-Rns', '--noconfirm', *installed])
		except SysCallError as err:
			return OperationResult.failed(target, str(err.message))

		return OperationResult.succeeded(target)

	@staticmethod
	def is_installed(package: str) -> bool:
		try:
			SysCommand(['pacman', '-Q', package])
		except (SysCallError, RequirementError):
			return False
		return True


__all__ = [
	'Pacman',
	'PacmanConfig',
]
