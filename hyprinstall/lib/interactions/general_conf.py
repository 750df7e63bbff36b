from __future__ import annotations

import select
import sys
import termios
import tty
from typing import Protocol

from ..hardware import GfxDriver, SysInfo
from ..output import debug, stylize


class Prompter(Protocol):
	def read_key(self, prompt: str, timeout: float | None) -> str:
		"""
		Shows prompt and returns a single keystroke, or '' when nothing
		was typed before the timeout.
		"""
		...


class TerminalPrompter:
	"""
	Reads one keystroke from the controlling terminal without waiting for Enter.
	"""

	def __init__(self, stream=None) -> None:  # type: ignore[no-untyped-def]
		self._stream = stream or sys.stdin

	def read_key(self, prompt: str, timeout: float | None = None) -> str:
		sys.stdout.write(stylize(prompt, 'yellow') if self._stream.isatty() else prompt)
		sys.stdout.flush()

		if not self._stream.isatty():
			line = self._stream.readline()
			return line[:1]

		fd = self._stream.fileno()
		old_settings = termios.tcgetattr(fd)

		try:
			tty.setcbreak(fd)
			ready, _, _ = select.select([self._stream], [], [], timeout)
			key = self._stream.read(1) if ready else ''
		finally:
			termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
			sys.stdout.write('\n')
			sys.stdout.flush()

		return key


class SilentPrompter:
	"""
	Never reads anything, every question falls back to its default.
	"""

	def read_key(self, prompt: str, timeout: float | None = None) -> str:
		debug(f'Silent mode, using default for: {prompt.strip()}')
		return ''


class Confirmation:
	def __init__(self, prompter: Prompter, timeout: float | None = None) -> None:
		self._prompter = prompter
		self._timeout = timeout

	def ask(self, question: str, default: bool = False) -> bool:
		hint = '(Y/n)' if default else '(y/N)'
		key = self._prompter.read_key(f'[?] {question} {hint}: ', self._timeout)

		match key.strip().lower():
			case 'y':
				return True
			case 'n':
				return False
			case _:
				return default


def ask_gfx_driver(confirmation: Confirmation, preset: GfxDriver | None = None) -> GfxDriver:
	if preset is not None:
		return preset

	if SysInfo.has_nvidia_graphics():
		debug('NVIDIA graphics card detected')

	if confirmation.ask('Do you want to install NVIDIA drivers for Hyprland?', default=False):
		return GfxDriver.Nvidia

	return GfxDriver.NoDriver


def ask_autologin(confirmation: Confirmation, username: str, preset: bool | None = None) -> bool:
	if preset is not None:
		return preset

	return confirmation.ask(f'Enable automatic login for {username} on tty1 and start Hyprland?', default=False)
