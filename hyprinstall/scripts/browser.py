from hyprinstall.applications.browser import BrowserBootstrap
from hyprinstall.lib.args import HyprConfigHandler
from hyprinstall.lib.output import warn


def run(handler: HyprConfigHandler) -> int:
	"""
	Runs only the browser profile bootstrap. This is what the one-shot
	user unit installed by the guided script executes on login.
	"""
	results = BrowserBootstrap().run()

	for result in results:
		if not result.ok:
			warn(f'{result.target}: {result.status.value} {result.message}'.rstrip())

	return 0
