from pathlib import Path

from ..general import SysCommand
from ..models.packages import CustomRepository


class PacmanConfig:
	def __init__(self, config_path: Path = Path('/etc/pacman.conf')) -> None:
		self._config_path = config_path

	@property
	def path(self) -> Path:
		return self._config_path

	def _content(self) -> str:
		try:
			return self._config_path.read_text()
		except FileNotFoundError:
			return ''

	def has_repository(self, repo: CustomRepository) -> bool:
		for line in self._content().splitlines():
			if line.strip() == repo.marker:
				return True

		return False

	def add_repository(self, repo: CustomRepository) -> None:
		# pacman.conf is owned by root, append through sudo tee
		SysCommand(
			['sudo', 'tee', '-a', str(self._config_path)],
			input_data=repo.registration_block().encode(),
		)
