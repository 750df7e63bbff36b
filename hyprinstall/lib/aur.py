import tempfile
from collections.abc import Iterable
from pathlib import Path
from shutil import which

from .exceptions import RequirementError, SysCallError
from .general import SysCommand
from .models.result import OperationResult
from .output import info, success, warn


class AurHelper:
	"""
	Installs packages from the AUR through yay, bootstrapping yay itself
	from its AUR checkout when it is missing.
	"""

	def __init__(self, name: str = 'yay', source_url: str = 'https://aur.archlinux.org/yay.git') -> None:
		self.name = name
		self.source_url = source_url

	def is_available(self) -> bool:
		return which(self.name) is not None

	def bootstrap(self) -> None:
		if self.is_available():
			return

		info(f"AUR helper '{self.name}' not found. Installing...")

		with tempfile.TemporaryDirectory(prefix=f'{self.name}-build-') as build_root:
			checkout = Path(build_root) / self.name
			SysCommand(['git', 'clone', self.source_url, str(checkout)])
			SysCommand(['makepkg', '-si', '--noconfirm'], working_directory=checkout, peek_output=True)

		if not self.is_available():
			raise RequirementError(f'{self.name} was built but is not on PATH')

	def install(self, packages: Iterable[str]) -> list[OperationResult]:
		"""
		Installs one package at a time, a failing package does not stop the rest.
		"""
		packages = list(packages)
		if not packages:
			info('No additional AUR packages to install.')
			return []

		info(f'Installing AUR packages with {self.name}...')

		results = []
		for package in packages:
			try:
				SysCommand([self.name, '-S', '--needed', '--noconfirm', package], peek_output=True)
				results.append(OperationResult.succeeded(package))
			except (SysCallError, RequirementError) as err:
				warn(f"Failed to install '{package}' from AUR.")
				results.append(OperationResult.failed(package, str(err)))

		if all(result.ok for result in results):
			success('AUR packages installed.')

		return results
