from .exceptions import RepositoryError, SysCallError
from .general import SysCommand
from .models.packages import CustomRepository
from .output import hardware, info, success
from .pacman import Pacman


class RepositoryRegistrar:
	"""
	Makes a third-party repository available to pacman. Unlike most steps,
	any failure here aborts the whole run.
	"""

	def __init__(self, pacman: Pacman) -> None:
		self._pacman = pacman

	def _import_key(self, repo: CustomRepository) -> None:
		hardware(f'Importing {repo.name} keys...')
		SysCommand(['sudo', 'pacman-key', '--recv-key', repo.key_id, '--keyserver', repo.keyserver])
		SysCommand(['sudo', 'pacman-key', '--lsign-key', repo.key_id])

	def register(self, repo: CustomRepository) -> bool:
		"""
		Returns False when the repository was already registered and only
		the package databases were refreshed.
		"""
		info(f'Setting up {repo.name} repository...')

		try:
			if self._pacman.config.has_repository(repo):
				success(f'{repo.name} is already configured.')
				self._pacman.sync()
				return False

			self._import_key(repo)
			self._pacman.install_from_url(repo.bootstrap_packages)

			hardware(f'Adding {repo.name} to {self._pacman.config.path}...')
			self._pacman.config.add_repository(repo)

			self._pacman.sync()
		except SysCallError as err:
			raise RepositoryError(f'Could not register repository {repo.name}: {err.message}') from err

		success(f'{repo.name} setup complete.')
		return True
