import pytest
from pytest import MonkeyPatch

import hyprinstall
from hyprinstall.lib.exceptions import PrivilegeError, SysCallError
from hyprinstall.lib.hardware import SysInfo
from hyprinstall.scripts import browser


def test_refuses_to_run_as_root(monkeypatch: MonkeyPatch) -> None:
	monkeypatch.setattr(SysInfo, 'is_root', staticmethod(lambda: True))

	with pytest.raises(PrivilegeError):
		hyprinstall.main([])


def test_root_exits_non_zero(monkeypatch: MonkeyPatch) -> None:
	monkeypatch.setattr(SysInfo, 'is_root', staticmethod(lambda: True))
	monkeypatch.setattr('sys.argv', ['hyprinstall'])

	with pytest.raises(SystemExit) as exc:
		hyprinstall.run_as_a_module()

	assert exc.value.code == 1


def test_script_is_loaded(monkeypatch: MonkeyPatch, commands) -> None:  # type: ignore[no-untyped-def]
	monkeypatch.setattr(SysInfo, 'is_root', staticmethod(lambda: False))
	monkeypatch.setattr(browser, 'run', lambda handler: 7 if handler.get_script() == 'browser' else 0)

	assert hyprinstall.main(['--script', 'browser']) == 7


def test_failing_command_sets_exit_status(monkeypatch: MonkeyPatch) -> None:
	def _fail(argv: list[str] | None = None) -> int:
		raise SysCallError('pacman failed', exit_code=3)

	monkeypatch.setattr(hyprinstall, 'main', _fail)

	with pytest.raises(SystemExit) as exc:
		hyprinstall.run_as_a_module()

	assert exc.value.code == 3
