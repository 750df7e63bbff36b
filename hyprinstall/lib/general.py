from __future__ import annotations

import os
import re
import shlex
import stat
import subprocess
import sys
import time
from collections.abc import Iterator
from pathlib import Path
from shutil import which
from typing import override

from .exceptions import RequirementError, SysCallError
from .output import debug
from .storage import storage

_VT100_ESCAPE_REGEX_BYTES = rb'\x1B\[[?0-9;]*[a-zA-Z]'


def locate_binary(name: str) -> str:
	if path := which(name):
		return path
	raise RequirementError(f'Binary {name} does not exist.')


def clear_vt100_escape_codes(data: bytes) -> bytes:
	return re.sub(_VT100_ESCAPE_REGEX_BYTES, b'', data)


class SysCommand:
	"""
	Runs a command to completion and keeps its combined stdout/stderr.
	A non-zero exit status raises SysCallError, a missing binary RequirementError.
	"""

	def __init__(
		self,
		cmd: str | list[str],
		peek_output: bool = False,
		environment_vars: dict[str, str] | None = None,
		working_directory: str | Path | None = None,
		input_data: bytes | None = None,
	):
		if isinstance(cmd, str):
			cmd = shlex.split(cmd)
		else:
			cmd = list(cmd)

		if cmd and not cmd[0].startswith(('/', './')):
			cmd[0] = locate_binary(cmd[0])

		self.cmd = cmd
		self.peek_output = peek_output
		# command output is parsed in places, keep it in the C locale
		self.environment_vars = {'LC_ALL': 'C'}
		if environment_vars:
			self.environment_vars.update(environment_vars)

		self.working_directory = working_directory
		self.exit_code: int | None = None
		self.started: float | None = None
		self.ended: float | None = None
		self._trace_log = b''

		self._execute(input_data)

	def _execute(self, input_data: bytes | None) -> None:
		_log_cmd(self.cmd)
		self.started = time.time()

		with subprocess.Popen(
			self.cmd,
			stdin=subprocess.PIPE if input_data is not None else None,
			stdout=subprocess.PIPE,
			stderr=subprocess.STDOUT,
			cwd=self.working_directory,
			env={**os.environ, **self.environment_vars},
		) as proc:
			if input_data is not None and proc.stdin:
				proc.stdin.write(input_data)
				proc.stdin.close()

			if proc.stdout:
				for line in proc.stdout:
					self._trace_log += line

					if self.peek_output:
						sys.stdout.write(line.decode('utf-8', errors='backslashreplace'))
						sys.stdout.flush()

			self.exit_code = proc.wait()

		self.ended = time.time()

		if self.exit_code != 0:
			raise SysCallError(
				f'{self.cmd} exited with abnormal exit code [{self.exit_code}]: {self.decode()[-500:]}',
				self.exit_code,
				worker_log=self._trace_log,
			)

	def __iter__(self) -> Iterator[bytes]:
		for line in filter(None, self._trace_log.splitlines()):
			yield clear_vt100_escape_codes(line) + b'\n'

	@override
	def __repr__(self) -> str:
		return self.decode()

	def decode(self, encoding: str = 'utf-8', errors: str = 'backslashreplace', strip: bool = True) -> str:
		val = self._trace_log.decode(encoding, errors=errors)

		if strip:
			return val.strip()
		return val


def _log_cmd(cmd: list[str]) -> None:
	history_logfile = storage['LOG_PATH'] / 'cmd_history.txt'

	change_perm = False
	if history_logfile.exists() is False:
		change_perm = True

	try:
		with history_logfile.open('a') as cmd_log:
			cmd_log.write(f'{time.time()} {cmd}\n')

		if change_perm:
			history_logfile.chmod(stat.S_IRUSR | stat.S_IWUSR | stat.S_IRGRP)
	except (PermissionError, FileNotFoundError):
		# The log directory is created lazily by the logger
		debug(f'Could not record command in {history_logfile}')


def append_marked_block(path: Path, marker: str, block: str) -> bool:
	"""
	Appends block to path, prefixed by the marker comment line.
	Returns False without touching the file when the marker is already present.
	"""
	content = path.read_text() if path.exists() else ''

	if marker in content:
		return False

	if content and not content.endswith('\n'):
		content += '\n'

	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(f'{content}\n{marker}\n{block.rstrip()}\n')
	return True
