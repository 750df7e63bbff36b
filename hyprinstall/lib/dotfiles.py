import atexit
import shutil
import signal
import tempfile
from pathlib import Path
from types import FrameType, TracebackType

from .exceptions import FetchError, RequirementError, SysCallError
from .general import SysCommand
from .models.dotfiles import DotfileSource
from .output import debug, error, info, success


def _terminate(signum: int, frame: FrameType | None) -> None:
	# Turn termination into SystemExit so context managers and atexit hooks run
	raise SystemExit(128 + signum)


class ScratchWorkspace:
	"""
	Process scoped temporary directory holding the fetched source trees.

	Removal is guaranteed on every exit path: leaving the context manager,
	an exception propagating through it, interpreter shutdown (atexit) and
	SIGTERM/SIGHUP (converted into SystemExit).
	"""

	_handled_signals = (signal.SIGTERM, signal.SIGHUP)

	def __init__(self, prefix: str = 'eink-dots-', parent: Path | None = None) -> None:
		self._prefix = prefix
		self._parent = parent
		self._path: Path | None = None
		self._previous_handlers: dict[int, object] = {}

	@property
	def path(self) -> Path:
		if self._path is None:
			raise RequirementError('Scratch workspace has not been created')
		return self._path

	def create(self) -> Path:
		if self._path is None:
			self._path = Path(tempfile.mkdtemp(prefix=self._prefix, dir=self._parent))
			atexit.register(self.cleanup)
			self._install_signal_handlers()
			debug(f'Created scratch workspace {self._path}')

		return self._path

	def _install_signal_handlers(self) -> None:
		for signum in self._handled_signals:
			try:
				self._previous_handlers[signum] = signal.signal(signum, _terminate)
			except ValueError:
				# Not the main thread, rely on the context manager and atexit
				debug(f'Could not install handler for signal {signum}')

	def _restore_signal_handlers(self) -> None:
		for signum, handler in self._previous_handlers.items():
			signal.signal(signum, handler)  # type: ignore[arg-type]
		self._previous_handlers = {}

	def subdirectory(self, name: str, clear: bool = False) -> Path:
		target = self.path / name

		if clear and target.exists():
			shutil.rmtree(target)

		return target

	def cleanup(self) -> None:
		if self._path is None:
			return

		info('Cleaning up temporary files...')
		shutil.rmtree(self._path, ignore_errors=True)
		atexit.unregister(self.cleanup)
		self._restore_signal_handlers()
		self._path = None

	def __enter__(self) -> 'ScratchWorkspace':
		self.create()
		return self

	def __exit__(
		self,
		exc_type: type[BaseException] | None,
		exc_value: BaseException | None,
		traceback: TracebackType | None,
	) -> None:
		self.cleanup()


class DotfileFetcher:
	def __init__(self, workspace: ScratchWorkspace) -> None:
		self._workspace = workspace

	def fetch(self, sources: list[DotfileSource]) -> dict[str, Path]:
		"""
		Clones every source into its own directory inside the workspace.
		The fetched trees are required by later steps, so any failure is fatal.
		"""
		info('Cloning dotfiles repositories...')

		trees: dict[str, Path] = {}
		for source in sources:
			destination = self._workspace.subdirectory(source.name, clear=True)

			try:
				SysCommand(source.clone_args(destination))
			except (SysCallError, RequirementError) as err:
				error(f'Failed to clone {source.name} repository from {source.url}')
				raise FetchError(f'Could not clone {source.url}: {err}') from err

			success(f'{source.name} cloned successfully.')
			trees[source.name] = destination

		return trees
