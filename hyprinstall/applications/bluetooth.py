from typing import TYPE_CHECKING

from hyprinstall.lib.output import hardware

if TYPE_CHECKING:
	from hyprinstall.lib.installer import Installer


class BluetoothApp:
	@property
	def packages(self) -> list[str]:
		return [
			'bluez',
			'bluez-utils',
			'blueman',
		]

	@property
	def services(self) -> list[str]:
		return [
			'bluetooth.service',
		]

	def install(self, install_session: 'Installer') -> None:
		hardware('Installing Bluetooth support...')
		install_session.add_additional_packages(self.packages)
		install_session.enable_service(self.services)
