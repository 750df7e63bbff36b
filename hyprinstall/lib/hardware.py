import getpass
import os
from enum import Enum

from .exceptions import RequirementError, SysCallError
from .general import SysCommand
from .output import debug


class GfxPackage(Enum):
	NvidiaDKMS = 'nvidia-dkms'
	NvidiaUtils = 'nvidia-utils'


class GfxDriver(Enum):
	NoDriver = 'none'
	Nvidia = 'nvidia'

	def is_nvidia(self) -> bool:
		match self:
			case GfxDriver.Nvidia:
				return True
			case _:
				return False

	def packages(self) -> list[GfxPackage]:
		match self:
			case GfxDriver.Nvidia:
				return [
					GfxPackage.NvidiaDKMS,
					GfxPackage.NvidiaUtils,
				]
			case GfxDriver.NoDriver:
				return []

	def kernel_modules(self) -> list[str]:
		match self:
			case GfxDriver.Nvidia:
				return ['nvidia', 'nvidia_modeset', 'nvidia_uvm', 'nvidia_drm']
			case GfxDriver.NoDriver:
				return []

	def environment(self) -> dict[str, str]:
		"""
		Session environment the compositor needs for this driver.
		"""
		match self:
			case GfxDriver.Nvidia:
				return {
					'LIBVA_DRIVER_NAME': 'nvidia',
					'XDG_SESSION_TYPE': 'wayland',
					'GBM_BACKEND': 'nvidia-drm',
					'__GLX_VENDOR_LIBRARY_NAME': 'nvidia',
				}
			case GfxDriver.NoDriver:
				return {}


class SysInfo:
	@staticmethod
	def _graphics_devices() -> dict[str, str]:
		cards: dict[str, str] = {}
		try:
			for line in SysCommand('lspci'):
				if b' VGA ' in line or b' 3D ' in line:
					_, identifier = line.split(b': ', 1)
					cards[identifier.strip().decode('UTF-8')] = str(line)
		except (RequirementError, SysCallError) as err:
			debug(f'Could not list graphics devices: {err}')

		return cards

	@staticmethod
	def has_nvidia_graphics() -> bool:
		return any('nvidia' in x.lower() for x in SysInfo._graphics_devices())

	@staticmethod
	def is_root() -> bool:
		return os.geteuid() == 0

	@staticmethod
	def username() -> str:
		return getpass.getuser()

	@staticmethod
	def in_chroot() -> bool:
		return os.environ.get('HYPRINSTALL_CHROOT', '') not in ('', '0')

	@staticmethod
	def has_user_session() -> bool:
		"""
		True when a user service manager is reachable, i.e. user units
		can be started right now instead of on next login.
		"""
		if SysInfo.in_chroot():
			return False

		runtime_dir = os.environ.get('XDG_RUNTIME_DIR')
		return bool(runtime_dir) and os.path.isdir(runtime_dir)

	@staticmethod
	def has_graphical_session() -> bool:
		return SysInfo.has_user_session() and bool(os.environ.get('WAYLAND_DISPLAY') or os.environ.get('DISPLAY'))
