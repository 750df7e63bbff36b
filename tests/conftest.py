from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from pytest import MonkeyPatch

from hyprinstall.lib.exceptions import SysCallError
from hyprinstall.lib.output import logger
from hyprinstall.lib.storage import storage

# every module that runs external commands through SysCommand
_COMMAND_MODULES = [
	'hyprinstall.applications.browser',
	'hyprinstall.applications.nvidia',
	'hyprinstall.lib.aur',
	'hyprinstall.lib.dotfiles',
	'hyprinstall.lib.hardware',
	'hyprinstall.lib.installer',
	'hyprinstall.lib.pacman',
	'hyprinstall.lib.pacman.config',
	'hyprinstall.lib.repositories',
	'hyprinstall.lib.systemd',
]

Predicate = Callable[[list[str]], bool]


def _has(*parts: str) -> Predicate:
	return lambda cmd: all(part in cmd for part in parts)


class FakeCommand:
	def __init__(self, cmd: list[str], output: bytes = b'', input_data: bytes | None = None) -> None:
		self.cmd = cmd
		self.input_data = input_data
		self.exit_code = 0
		self._trace_log = output

	def __iter__(self) -> Iterator[bytes]:
		for line in filter(None, self._trace_log.splitlines()):
			yield line + b'\n'

	def decode(self, encoding: str = 'utf-8', errors: str = 'backslashreplace', strip: bool = True) -> str:
		val = self._trace_log.decode(encoding, errors=errors)
		return val.strip() if strip else val


class CommandRecorder:
	"""
	Stands in for SysCommand: records every command and, depending on the
	registered predicates, fails it, answers with canned output or runs a
	side effect (e.g. populating a clone destination).
	"""

	def __init__(self) -> None:
		self.calls: list[list[str]] = []
		self.inputs: list[tuple[list[str], bytes]] = []
		self._failures: list[Predicate] = []
		self._outputs: list[tuple[Predicate, bytes]] = []
		self._effects: list[tuple[Predicate, Callable[[list[str]], None]]] = []

	def fail_when(self, *parts: str) -> None:
		self._failures.append(_has(*parts))

	def respond(self, *parts: str, output: bytes) -> None:
		self._outputs.append((_has(*parts), output))

	def on(self, *parts: str, effect: Callable[[list[str]], None]) -> None:
		self._effects.append((_has(*parts), effect))

	def ran(self, *parts: str) -> bool:
		return any(all(part in call for part in parts) for call in self.calls)

	def matching(self, *parts: str) -> list[list[str]]:
		return [call for call in self.calls if all(part in call for part in parts)]

	def __call__(
		self,
		cmd: str | list[str],
		peek_output: bool = False,
		environment_vars: dict[str, str] | None = None,
		working_directory: str | Path | None = None,
		input_data: bytes | None = None,
	) -> FakeCommand:
		cmd = cmd.split() if isinstance(cmd, str) else list(cmd)
		self.calls.append(cmd)

		if input_data is not None:
			self.inputs.append((cmd, input_data))

		if any(predicate(cmd) for predicate in self._failures):
			raise SysCallError(f'{cmd} exited with abnormal exit code [1]', 1)

		for predicate, effect in self._effects:
			if predicate(cmd):
				effect(cmd)

		output = b''
		for predicate, canned in self._outputs:
			if predicate(cmd):
				output = canned

		return FakeCommand(cmd, output, input_data)


@pytest.fixture(autouse=True)
def _isolated_log(tmp_path_factory: pytest.TempPathFactory, monkeypatch: MonkeyPatch) -> Path:
	log_dir = tmp_path_factory.mktemp('log')
	monkeypatch.setitem(storage, 'LOG_PATH', log_dir)
	monkeypatch.setitem(storage, 'DEBUG', False)
	monkeypatch.setattr(logger, '_path', log_dir)
	return log_dir


@pytest.fixture
def commands(monkeypatch: MonkeyPatch) -> CommandRecorder:
	recorder = CommandRecorder()

	for module in _COMMAND_MODULES:
		monkeypatch.setattr(f'{module}.SysCommand', recorder)

	return recorder


@pytest.fixture
def no_session(monkeypatch: MonkeyPatch) -> None:
	monkeypatch.setenv('HYPRINSTALL_CHROOT', '1')
	monkeypatch.delenv('WAYLAND_DISPLAY', raising=False)
	monkeypatch.delenv('DISPLAY', raising=False)
