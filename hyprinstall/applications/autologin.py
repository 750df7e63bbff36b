from pathlib import Path
from typing import TYPE_CHECKING

from hyprinstall.lib.general import append_marked_block
from hyprinstall.lib.output import info, success
from hyprinstall.lib.systemd import Systemd, daemon_reload

if TYPE_CHECKING:
	from hyprinstall.lib.installer import Installer

AUTOSTART_MARKER = '# hyprinstall: start Hyprland on tty1'

AUTOSTART_BLOCK = '''\
if [ -z "$WAYLAND_DISPLAY" ] && [ "$XDG_VTNR" = 1 ]; then
    exec Hyprland
fi'''


class AutologinApp:
	def __init__(
		self,
		tty: str = 'tty1',
		override_root: Path = Path('/etc/systemd/system'),
		profile: Path | None = None,
	) -> None:
		self.tty = tty
		self.override_root = override_root
		self.profile = profile or Path.home() / '.bash_profile'

	@property
	def override_path(self) -> Path:
		return self.override_root / f'getty@{self.tty}.service.d' / 'autologin.conf'

	def getty_override(self, username: str) -> str:
		# The empty ExecStart clears the one inherited from getty@.service
		return str(
			Systemd(
				Service={
					'ExecStart': [
						'',
						f"-/sbin/agetty -o '-p -f -- \\\\u' --noclear --autologin {username} %I $TERM",
					],
				},
			)
		)

	def enable_session_autostart(self) -> bool:
		"""
		Appends the Hyprland autostart snippet to the login shell profile.
		Returns False when a previous run already added it.
		"""
		return append_marked_block(self.profile, AUTOSTART_MARKER, AUTOSTART_BLOCK)

	def install(self, install_session: 'Installer', username: str) -> None:
		info(f'Configuring automatic login for {username} on {self.tty}...')
		install_session.write_root_file(self.override_path, self.getty_override(username))
		daemon_reload()

		if self.enable_session_autostart():
			success(f'Hyprland autostart added to {self.profile}')
		else:
			info(f'Hyprland autostart already present in {self.profile}')
