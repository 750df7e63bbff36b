from typing import TYPE_CHECKING

from hyprinstall.lib.models.result import OperationResult
from hyprinstall.lib.output import hardware, info, success, warn
from hyprinstall.lib.systemd import service_state

if TYPE_CHECKING:
	from hyprinstall.lib.installer import Installer


class AudioApp:
	@property
	def conflicting_packages(self) -> list[str]:
		return [
			'pulseaudio',
			'pulseaudio-alsa',
			'pulseaudio-bluetooth',
		]

	@property
	def pipewire_packages(self) -> list[str]:
		return [
			'pipewire',
			'pipewire-alsa',
			'pipewire-audio',
			'pipewire-pulse',
			'pipewire-jack',
			'wireplumber',
			'pavucontrol',
		]

	@property
	def user_services(self) -> list[str]:
		return [
			'pipewire.service',
			'pipewire-pulse.service',
			'wireplumber.service',
		]

	def remove_conflicts(self, install_session: 'Installer') -> OperationResult:
		# PulseAudio and pipewire-pulse cannot be installed side by side
		hardware('Removing any conflicting PulseAudio packages...')
		return install_session.pacman.remove_if_present(self.conflicting_packages)

	def enable(self, install_session: 'Installer') -> list[OperationResult]:
		hardware('Configuring PipeWire audio system...')

		results = [install_session.try_enable_service(service, user=True) for service in self.user_services]

		if all(result.ok for result in results):
			success('PipeWire and WirePlumber configured for user session.')
		else:
			warn('Not every PipeWire user service could be enabled, they will be retried on next login.')

		return results

	def verify(self) -> dict[str, bool]:
		"""
		Reports whether the audio services are running. Purely informational.
		"""
		states = {}
		for service in ('pipewire.service', 'wireplumber.service'):
			active = service_state(service, user=True) == 'active'
			states[service] = active

			if active:
				success(f'{service} is active')
			else:
				info(f'{service} is inactive, it starts with the next graphical login')

		return states
