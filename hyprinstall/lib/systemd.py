import os
from typing import override

from .exceptions import ServiceException, SysCallError
from .general import SysCommand
from .output import debug, info


class Ini:
	def __init__(self, **kwargs: dict[str, str | list[str]]) -> None:
		"""
		Limited INI writer. Sections are keyword arguments, a list value
		repeats the key once per item.
		"""
		self.kwargs = kwargs

	@override
	def __str__(self) -> str:
		result = ''
		first_row_done = False
		for top_level in self.kwargs:
			if first_row_done:
				result += f'\n[{top_level}]\n'
			else:
				result += f'[{top_level}]\n'
				first_row_done = True

			for key, val in self.kwargs[top_level].items():
				if isinstance(val, list):
					for item in val:
						result += f'{key}={item}\n'
				else:
					result += f'{key}={val}\n'

		return result


class Systemd(Ini):
	"""
	Unit files and drop-in snippets for the service manager.
	"""


def _unit_name(service: str) -> str:
	if os.path.splitext(service)[1] not in ('.service', '.target', '.timer', '.socket'):
		service += '.service'
	return service


def enable_service(service: str, user: bool = False, now: bool = False) -> None:
	service = _unit_name(service)
	cmd = ['systemctl', '--user'] if user else ['sudo', 'systemctl']
	cmd += ['enable']

	if now:
		cmd += ['--now']

	info(f'Enabling {"user " if user else ""}service {service}')

	try:
		SysCommand(cmd + [service])
	except SysCallError as err:
		raise ServiceException(f'Unable to enable service {service}: {err.message}') from err


def daemon_reload(user: bool = False) -> None:
	cmd = ['systemctl', '--user'] if user else ['sudo', 'systemctl']
	SysCommand(cmd + ['daemon-reload'])


def service_state(service: str, user: bool = False) -> str:
	"""
	Returns the ActiveState of a unit (active, inactive, failed, ...).
	"""
	service = _unit_name(service)
	cmd = ['systemctl', '--user'] if user else ['systemctl']

	try:
		return SysCommand(
			cmd + ['show', '--no-pager', '-p', 'ActiveState', '--value', service],
			environment_vars={'SYSTEMD_COLORS': '0'},
		).decode()
	except SysCallError as err:
		debug(f'Could not query {service}: {err}')
		return 'unknown'
