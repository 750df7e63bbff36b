from typing import TYPE_CHECKING

from hyprinstall.lib.output import hardware

if TYPE_CHECKING:
	from hyprinstall.lib.installer import Installer


class NetworkApp:
	@property
	def packages(self) -> list[str]:
		return [
			'networkmanager',
			'network-manager-applet',
		]

	@property
	def services(self) -> list[str]:
		return [
			'NetworkManager.service',
		]

	def install(self, install_session: 'Installer') -> None:
		hardware('Installing networking support...')
		install_session.add_additional_packages(self.packages)
		install_session.enable_service(self.services)
