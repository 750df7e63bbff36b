from dataclasses import dataclass
from importlib.resources import files
from string import Template

from .exceptions import DeploymentError
from .hardware import GfxDriver

_TEMPLATE_PACKAGE = 'hyprinstall.templates'


@dataclass(frozen=True)
class TemplateOptions:
	gfx_driver: GfxDriver = GfxDriver.NoDriver
	wallpaper: str = 'eink.jpg'
	keyboard_layout: str = 'us'
	keyboard_variant: str = 'colemak_dh'
	gaps_in: int = 5
	gaps_out: int = 28

	def variables(self) -> dict[str, str]:
		return {
			'wallpaper': self.wallpaper,
			'kb_layout': self.keyboard_layout,
			'kb_variant': self.keyboard_variant,
			'gaps_in': str(self.gaps_in),
			'gaps_out': str(self.gaps_out),
			'bar_margin': str(max(self.gaps_out - self.gaps_in, 0)),
		}


def load_template(name: str) -> str:
	resource = files(_TEMPLATE_PACKAGE).joinpath(name)

	try:
		return resource.read_text()
	except FileNotFoundError as err:
		raise DeploymentError(f'Template {name} is missing from the installation') from err


def _render(name: str, options: TemplateOptions) -> str:
	# Unknown $names are compositor variables and must survive rendering
	return Template(load_template(name)).safe_substitute(options.variables())


def _driver_block(gfx_driver: GfxDriver) -> str:
	if not gfx_driver.is_nvidia():
		return ''

	lines = [f'# {gfx_driver.value} driver']
	lines += [f'env = {key},{value}' for key, value in gfx_driver.environment().items()]
	lines += [
		'',
		'cursor {',
		'    no_hardware_cursors = true',
		'}',
	]

	return '\n'.join(lines) + '\n'


def render_hyprland_conf(options: TemplateOptions) -> str:
	text = _render('hyprland.conf', options)

	if block := _driver_block(options.gfx_driver):
		text = text.rstrip('\n') + '\n\n' + block

	return text


def render_waybar_config(options: TemplateOptions) -> str:
	return _render('waybar-config.jsonc', options)


def render_waybar_style(options: TemplateOptions) -> str:
	return _render('waybar-style.css', options)


def recorder_script() -> str:
	return load_template('wf-toggle-recorder.sh')
