"""E-ink Hyprland desktop installer for Arch based systems."""

import importlib
import json
import traceback

from .lib.args import HyprConfigHandler
from .lib.exceptions import PrivilegeError, SysCallError
from .lib.hardware import SysInfo
from .lib.output import debug, error, info, logger, warn


def _log_sys_info() -> None:
	debug(f'Running as {SysInfo.username()}; chroot: {SysInfo.in_chroot()}; user session: {SysInfo.has_user_session()}')
	debug(f'NVIDIA graphics detected: {SysInfo.has_nvidia_graphics()}')


def _log_config(handler: HyprConfigHandler) -> None:
	debug(f'Configuration: {json.dumps(handler.config.safe_json(), indent=2)}')


def main(argv: list[str] | None = None) -> int:
	"""
	This can either be run as the installed application: hyprinstall
	OR straight as a module: python -m hyprinstall
	In any case the script named by --script (default: guided) is loaded
	from the scripts/ folder and its run() is called.
	"""
	# --help and --version exit while parsing
	handler = HyprConfigHandler(argv)

	if SysInfo.is_root():
		raise PrivilegeError('This installer must not be run as root. Run it as your regular user, it uses sudo where needed.')

	_log_sys_info()
	_log_config(handler)

	script = handler.get_script()
	info(f'Running script {script}')

	mod_name = f'hyprinstall.scripts.{script}'
	module = importlib.import_module(mod_name)

	return module.run(handler)


def run_as_a_module() -> None:
	rc = 0
	exc = None

	try:
		rc = main()
	except KeyboardInterrupt:
		warn('Installation aborted by the user.')
		rc = 130
	except Exception as e:
		exc = e

	if exc:
		if isinstance(exc, PrivilegeError):
			error(str(exc))
		else:
			err = ''.join(traceback.format_exception(exc))
			error(err)
			warn(f'The installer experienced the above error, the log file is "{logger.path}".')

		rc = exc.exit_code if isinstance(exc, SysCallError) and exc.exit_code else 1

	exit(rc)


__all__ = [
	'main',
	'run_as_a_module',
]
