from pathlib import Path

from pydantic import BaseModel


class DotfileSource(BaseModel):
	name: str
	url: str
	branch: str | None = None

	def clone_args(self, destination: Path) -> list[str]:
		args = ['git', 'clone', '--depth', '1']

		if self.branch:
			args += ['--branch', self.branch]

		return args + [self.url, str(destination)]


EINK_DOTS = DotfileSource(name='eink-dots', url='https://gitlab.com/dotfiles_hypr/eink.git')
CUSTOM_DOTS = DotfileSource(name='custom-dots', url='https://github.com/Hoodrich-Pablo-Juan/dots3.git')
