from .general_conf import (
	Confirmation,
	Prompter,
	SilentPrompter,
	TerminalPrompter,
	ask_autologin,
	ask_gfx_driver,
)

__all__ = [
	'Confirmation',
	'Prompter',
	'SilentPrompter',
	'TerminalPrompter',
	'ask_autologin',
	'ask_gfx_driver',
]
