import re
from pathlib import Path
from typing import TYPE_CHECKING

from hyprinstall.lib.general import SysCommand
from hyprinstall.lib.hardware import GfxDriver
from hyprinstall.lib.output import nvidia, success, warn

if TYPE_CHECKING:
	from hyprinstall.lib.installer import Installer

_MODULES_LINE = re.compile(r'^MODULES=\((?P<modules>[^)]*)\)', re.MULTILINE)


def patch_mkinitcpio_modules(content: str, modules: list[str]) -> str | None:
	"""
	Adds modules to the MODULES=() array of an mkinitcpio.conf.
	Returns the content unchanged when the first module is already listed,
	and None when there is no MODULES=() line to patch.
	"""
	match = _MODULES_LINE.search(content)
	if match is None:
		return None

	present = match.group('modules').split()
	if modules[0] in present:
		return content

	merged = present + [module for module in modules if module not in present]
	return content[: match.start()] + f'MODULES=({" ".join(merged)})' + content[match.end() :]


class NvidiaApp:
	def __init__(
		self,
		mkinitcpio_conf: Path = Path('/etc/mkinitcpio.conf'),
		modprobe_conf: Path = Path('/etc/modprobe.d/nvidia.conf'),
	) -> None:
		self.mkinitcpio_conf = mkinitcpio_conf
		self.modprobe_conf = modprobe_conf

	@property
	def modprobe_options(self) -> str:
		return 'options nvidia_drm modeset=1\n'

	def configure_modules(self, install_session: 'Installer', driver: GfxDriver) -> bool:
		nvidia('Configuring kernel modules for NVIDIA...')

		content = self.mkinitcpio_conf.read_text()
		patched = patch_mkinitcpio_modules(content, driver.kernel_modules())

		if patched is None:
			warn(f'No MODULES=() line found in {self.mkinitcpio_conf}, add {" ".join(driver.kernel_modules())} to it manually.')
			return False

		if patched == content:
			nvidia(f'NVIDIA modules already seem to be in {self.mkinitcpio_conf}.')
			return False

		install_session.write_root_file(self.mkinitcpio_conf, patched)
		nvidia(f'Added NVIDIA modules to {self.mkinitcpio_conf}.')
		return True

	def install(self, install_session: 'Installer', driver: GfxDriver) -> None:
		nvidia('Proceeding with NVIDIA driver installation.')
		install_session.add_additional_packages([package.value for package in driver.packages()])

		self.configure_modules(install_session, driver)

		nvidia('Creating modprobe configuration for KMS...')
		install_session.write_root_file(self.modprobe_conf, self.modprobe_options)

		nvidia('Rebuilding initramfs (this may take a moment)...')
		SysCommand(['sudo', 'mkinitcpio', '-P'], peek_output=True)

		success('NVIDIA base configuration complete.')
