from dataclasses import dataclass, field
from pathlib import Path

from .hardware import GfxDriver
from .models.result import OperationResult, OperationStatus
from .output import FormattedOutput, banner, debug, info, nvidia, success, warn


@dataclass
class InstallSummary:
	"""
	Everything the final report needs, threaded explicitly from the steps
	that produced it.
	"""

	config_dir: Path
	gfx_driver: GfxDriver = GfxDriver.NoDriver
	backup_dir: Path | None = None
	autologin: bool = False
	browser_bootstrap: bool = False
	results: list[OperationResult] = field(default_factory=list)

	def degraded(self) -> list[OperationResult]:
		return [result for result in self.results if result.status != OperationStatus.SUCCEEDED]


def print_summary(summary: InstallSummary, keyboard_variant: str = 'colemak_dh', gaps_out: int = 28) -> None:
	print()
	success('Installation complete!')

	if summary.backup_dir is not None and summary.backup_dir.is_dir():
		info(f'Your old configs were backed up to: {summary.backup_dir}')

	if summary.results:
		debug('Step results:\n' + FormattedOutput.as_table(summary.results, capitalize=True))

	if degraded := summary.degraded():
		warn('Some optional steps did not complete:')
		for result in degraded:
			warn(f' - {result.target}: {result.status.value} {result.message}'.rstrip())

	print()
	info(f'Keyboard layout is set to {keyboard_variant}')
	info('Custom waybar configuration deployed')
	info('PipeWire audio system with WirePlumber installed - Use Super+V to open volume control')
	info(f'Gap between waybar and windows increased to {gaps_out} pixels')

	if summary.autologin:
		info('Automatic login on tty1 enabled, Hyprland starts after login')

	if summary.browser_bootstrap:
		info('Browser extensions are set up on first login if they could not be set up now')

	warn('A REBOOT is strongly recommended to apply all changes, especially kernel modules.')

	if summary.gfx_driver.is_nvidia():
		banner('#' * 30 + ' NVIDIA POST-INSTALL ' + '#' * 30, fg='yellow')
		nvidia('NVIDIA drivers have been installed and configured.')
		warn("If you have issues booting, you may need to add 'nvidia_drm.modeset=1' to your bootloader's kernel parameters manually.")
		banner('#' * 81, fg='yellow')

	print()
	info("After rebooting, start the session by typing 'Hyprland' in a TTY and pressing Enter.")
	print()
