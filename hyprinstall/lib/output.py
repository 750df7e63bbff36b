import logging
import os
import sys
from dataclasses import asdict, is_dataclass
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

from .storage import storage


class FormattedOutput:
	@classmethod
	def _get_values(cls, o: Any) -> dict[str, Any]:
		if hasattr(o, 'table_data'):
			return o.table_data()
		elif hasattr(o, 'json'):
			return o.json()
		elif is_dataclass(o) and not isinstance(o, type):
			return asdict(o)
		else:
			return o.__dict__

	@classmethod
	def as_table(cls, obj: list[Any], filter_list: list[str] = [], capitalize: bool = False) -> str:
		"""
		Renders a list of records (dataclasses or objects exposing table_data())
		as a plain text table, one record per line.
		Only the columns named in filter_list are shown when it is given.
		"""
		raw_data = [cls._get_values(o) for o in obj]

		column_width: dict[str, int] = {}
		for o in raw_data:
			for k, v in o.items():
				if not filter_list or k in filter_list:
					column_width.setdefault(k, 0)
					column_width[k] = max([column_width[k], len(str(v)), len(k)])

		if not filter_list:
			filter_list = list(column_width.keys())

		output = ''
		key_list = []
		for key in filter_list:
			width = column_width.get(key, len(key))
			key = key.replace('_', ' ')

			if capitalize:
				key = key.capitalize()

			key_list.append(key.ljust(width))

		output += ' | '.join(key_list) + '\n'
		output += '-' * len(output) + '\n'

		for record in raw_data:
			obj_data = []
			for key in filter_list:
				width = column_width.get(key, len(key))
				value = record.get(key, '')

				if isinstance(value, int | float):
					obj_data.append(str(value).rjust(width))
				else:
					obj_data.append(str(value).ljust(width))

			output += ' | '.join(obj_data) + '\n'

		return output


class Journald:
	@staticmethod
	def log(message: str, level: int = logging.DEBUG) -> None:
		try:
			import systemd.journal  # type: ignore[import-not-found]
		except ModuleNotFoundError:
			return None

		log_adapter = logging.getLogger('hyprinstall')
		if not log_adapter.handlers:
			log_ch = systemd.journal.JournalHandler()
			log_ch.setFormatter(logging.Formatter('[%(levelname)s]: %(message)s'))
			log_adapter.addHandler(log_ch)
			log_adapter.setLevel(logging.DEBUG)

		log_adapter.log(level, message)


class Logger:
	def __init__(self, path: Path | None = None) -> None:
		self._path = path or storage['LOG_PATH']

	@property
	def path(self) -> Path:
		return self._path / 'install.log'

	def _check_permissions(self) -> None:
		log_file = self.path

		try:
			self._path.mkdir(exist_ok=True, parents=True)
			log_file.touch(exist_ok=True)
		except PermissionError:
			# Fall back to the current folder
			self._path = Path('./').absolute()
			storage['LOG_PATH'] = self._path

			warn(f'Not enough permission to place log file at {log_file}, creating it in {self.path} instead')

	def log(self, level: int, content: str) -> None:
		self._check_permissions()

		with self.path.open('a') as f:
			ts = _timestamp()
			level_name = logging.getLevelName(level)
			f.write(f'[{ts}] - {level_name} - {content}\n')


logger = Logger()


def _supports_color() -> bool:
	"""
	Return True if the running system's terminal supports color,
	and False otherwise.
	"""
	supported_platform = sys.platform != 'win32' or 'ANSICON' in os.environ

	is_a_tty = hasattr(sys.stdout, 'isatty') and sys.stdout.isatty()
	return supported_platform and is_a_tty


class Font(Enum):
	bold = '1'
	italic = '3'
	underscore = '4'


_COLORS = {
	'black': '0',
	'red': '1',
	'green': '2',
	'yellow': '3',
	'blue': '4',
	'magenta': '5',
	'cyan': '6',
	'white': '7',
	'gray': '8;5;246',
}


def stylize(text: str, fg: str, font: list[Font] = []) -> str:
	"""
	Wraps text in ANSI escape codes for the given foreground color and fonts.
	"""
	code_list = [f'3{_COLORS[fg]}']

	for o in font:
		code_list.append(o.value)

	ansi = ';'.join(code_list)

	return f'\033[{ansi}m{text}\033[0m'


def _timestamp() -> str:
	now = datetime.now(tz=UTC)
	return now.strftime('%Y-%m-%d %H:%M:%S')


def log(
	*msgs: str,
	level: int = logging.INFO,
	fg: str = 'white',
	prefix: str | None = None,
	font: list[Font] = [],
) -> None:
	text = ' '.join([str(x) for x in msgs])

	logger.log(level, text)
	Journald.log(text, level=level)

	if level == logging.DEBUG and not storage['DEBUG']:
		return

	if prefix:
		if _supports_color():
			text = f'{stylize(prefix, fg, font)} {text}'
		else:
			text = f'{prefix} {text}'
	elif _supports_color():
		text = stylize(text, fg, font)

	print(text, flush=True)


def info(*msgs: str, prefix: str | None = '[E-ink]') -> None:
	log(*msgs, level=logging.INFO, fg='cyan', prefix=prefix)


def success(*msgs: str) -> None:
	log(*msgs, level=logging.INFO, fg='green', prefix='[✓]')


def warn(*msgs: str) -> None:
	log(*msgs, level=logging.WARNING, fg='yellow', prefix='[!]')


def error(*msgs: str) -> None:
	log(*msgs, level=logging.ERROR, fg='red', prefix='[✗]')


def debug(*msgs: str) -> None:
	log(*msgs, level=logging.DEBUG)


def hardware(*msgs: str) -> None:
	log(*msgs, level=logging.INFO, fg='blue', prefix='[HARDWARE]')


def nvidia(*msgs: str) -> None:
	log(*msgs, level=logging.INFO, fg='blue', prefix='[NVIDIA]')


def banner(*lines: str, fg: str = 'cyan') -> None:
	"""
	Prints a block of lines without any prefix, colored as a whole.
	Banners are not written to the log file.
	"""
	for line in lines:
		print(stylize(line, fg) if _supports_color() else line, flush=True)
