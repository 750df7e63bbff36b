from collections.abc import Iterable
from pathlib import Path
from types import TracebackType

from .args import HyprConfig
from .deployment import BackupSet, ConfigDeployer
from .dotfiles import ScratchWorkspace
from .exceptions import ServiceException
from .general import SysCommand
from .hardware import SysInfo
from .interactions.general_conf import Confirmation
from .models.result import OperationResult
from .pacman import Pacman
from .report import InstallSummary
from .systemd import enable_service


class Installer:
	def __init__(
		self,
		config: HyprConfig,
		confirmation: Confirmation,
		pacman: Pacman | None = None,
		workspace: ScratchWorkspace | None = None,
	):
		"""
		`Installer()` carries the state of one run: the configuration, the
		scratch workspace, the backup set and the summary handed to the report.
		"""
		self.config = config
		self.confirmation = confirmation
		self.pacman = pacman or Pacman()
		self.workspace = workspace or ScratchWorkspace()
		self.backup_set = BackupSet(config.config_dir / 'cfg_backups')
		self.deployer = ConfigDeployer(config.config_dir, self.backup_set)
		self.summary = InstallSummary(config_dir=config.config_dir)
		self.username = SysInfo.username()

	def __enter__(self) -> 'Installer':
		self.workspace.create()
		return self

	def __exit__(
		self,
		exc_type: type[BaseException] | None,
		exc_value: BaseException | None,
		traceback: TracebackType | None,
	) -> bool | None:
		self.workspace.cleanup()
		self.summary.backup_dir = self.backup_set.path

		# Propagate any exception
		return None

	def add_additional_packages(self, packages: str | Iterable[str]) -> None:
		self.pacman.install(packages)

	def enable_service(self, services: str | list[str], user: bool = False, now: bool | None = None) -> None:
		if isinstance(services, str):
			services = [services]

		# Starting user units needs a running user manager
		if now is None:
			now = user and SysInfo.has_user_session()

		for service in services:
			enable_service(service, user=user, now=now)

	def try_enable_service(self, service: str, user: bool = False, now: bool | None = None) -> OperationResult:
		try:
			self.enable_service(service, user=user, now=now)
		except ServiceException as err:
			return OperationResult.failed(service, str(err))
		return OperationResult.succeeded(service)

	def write_root_file(self, path: Path, content: str, append: bool = False) -> None:
		"""
		Writes a root owned file through sudo tee.
		"""
		SysCommand(['sudo', 'mkdir', '-p', str(path.parent)])

		cmd = ['sudo', 'tee']
		if append:
			cmd += ['-a']

		SysCommand(cmd + [str(path)], input_data=content.encode())

	def record(self, results: OperationResult | list[OperationResult]) -> None:
		if isinstance(results, OperationResult):
			results = [results]

		self.summary.results.extend(results)
