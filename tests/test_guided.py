import json
from pathlib import Path

import pytest
from pytest import MonkeyPatch

import hyprinstall
from hyprinstall.lib import aur
from hyprinstall.lib.args import HyprConfigHandler
from hyprinstall.lib.exceptions import FetchError
from hyprinstall.lib.hardware import GfxDriver, SysInfo
from hyprinstall.scripts import guided


def _populate(cmd: list[str]) -> None:
	destination = Path(cmd[-1])

	if 'eink' in cmd[-2]:
		for name in ('wofi', 'alacritty', 'helix', 'mpv', 'dunst'):
			(destination / 'config' / name).mkdir(parents=True)
			(destination / 'config' / name / 'config').write_text(f'{name}\n')
		(destination / 'hypr' / 'scripts').mkdir(parents=True)
		(destination / 'hypr' / 'scripts' / 'volume.sh').write_text('#!/bin/sh\n')
		(destination / 'wallpapers').mkdir()
		(destination / 'wallpapers' / 'grey.png').write_bytes(b'png')
	else:
		(destination / 'waybar').mkdir(parents=True)
		(destination / 'waybar' / 'config.jsonc').write_text('{"custom": true}')
		(destination / 'waybar' / 'style.css').write_text('* { color: black; }')


def _snapshot(config_dir: Path) -> dict[str, bytes | str]:
	snapshot: dict[str, bytes | str] = {}
	for path in sorted(config_dir.rglob('*')):
		relative = path.relative_to(config_dir)
		if relative.parts[0] == 'cfg_backups':
			continue
		if path.is_symlink():
			snapshot[str(relative)] = f'-> {path.readlink()}'
		elif path.is_file():
			snapshot[str(relative)] = path.read_bytes()
	return snapshot


@pytest.fixture
def handler(tmp_path: Path, monkeypatch: MonkeyPatch, commands, no_session: None) -> HyprConfigHandler:  # type: ignore[no-untyped-def]
	monkeypatch.setenv('USER', 'alice')
	monkeypatch.setattr(aur, 'which', lambda name: f'/usr/bin/{name}')
	commands.on('git', 'clone', effect=_populate)

	config_file = tmp_path / 'config.json'
	config_file.write_text(
		json.dumps(
			{
				'config_dir': str(tmp_path / 'dotconfig'),
				'browser_bootstrap': False,
				'dotfiles': [
					{'name': 'eink', 'url': 'https://example.com/eink.git'},
					{'name': 'custom', 'url': 'https://example.com/custom.git'},
				],
			}
		)
	)

	return HyprConfigHandler(['--config', str(config_file), '--silent'])


def test_fresh_run(handler: HyprConfigHandler, commands) -> None:  # type: ignore[no-untyped-def]
	installation = guided.perform_installation(handler)
	config_dir = handler.config.config_dir

	assert installation.summary.backup_dir is None
	assert installation.summary.gfx_driver == GfxDriver.NoDriver
	assert not (config_dir / 'cfg_backups').exists()

	assert (config_dir / 'hypr' / 'hyprland.conf').is_file()
	assert (config_dir / 'waybar' / 'config.jsonc').is_file()
	assert (config_dir / 'waybar' / 'style.css').is_file()
	assert (config_dir / 'wallpapers' / 'eink.jpg').resolve() == (config_dir / 'wallpapers' / 'grey.png').resolve()
	assert (config_dir / 'hypr' / 'scripts' / 'wf-toggle-recorder.sh').is_file()
	assert (config_dir / 'wofi' / 'config').read_text() == 'wofi\n'

	# the nested ghostty entry is missing from the fetched tree
	assert not (config_dir / 'ghostty').exists()
	assert any(result.target == 'ghostty' and not result.ok for result in installation.summary.results)

	# prompts answered with their default
	assert not commands.ran('nvidia-dkms')
	assert not commands.ran('mkinitcpio', '-P')
	assert not installation.summary.autologin

	# pulseaudio is removed before pipewire-pulse is installed
	removal = commands.calls.index(commands.matching('-Rns')[0])
	install = commands.calls.index(commands.matching('pipewire-pulse')[0])
	assert removal < install

	# the scratch workspace is gone
	clone_destination = Path(commands.matching('git', 'clone')[0][-1])
	assert not clone_destination.parent.exists()


def test_second_run_backs_up_once(handler: HyprConfigHandler) -> None:
	config_dir = handler.config.config_dir

	guided.perform_installation(handler)
	first = _snapshot(config_dir)

	installation = guided.perform_installation(handler)
	second = _snapshot(config_dir)

	backups = list((config_dir / 'cfg_backups').iterdir())
	assert backups == [installation.summary.backup_dir]
	assert sorted(path.name for path in backups[0].iterdir()) == sorted(
		['wofi', 'alacritty', 'helix', 'mpv', 'dunst', 'waybar', 'hypr', 'wallpapers']
	)
	assert (backups[0] / 'hypr' / 'hyprland.conf').read_bytes() == first['hypr/hyprland.conf']
	assert second == first


def test_custom_waybar_when_generation_disabled(handler: HyprConfigHandler) -> None:
	handler.config.generate_waybar = False

	guided.perform_installation(handler)

	assert (handler.config.config_dir / 'waybar' / 'config.jsonc').read_text() == '{"custom": true}'


def test_nvidia_preset(handler: HyprConfigHandler, commands, tmp_path: Path, monkeypatch: MonkeyPatch) -> None:  # type: ignore[no-untyped-def]
	mkinitcpio = tmp_path / 'mkinitcpio.conf'
	mkinitcpio.write_text('MODULES=()\n')
	monkeypatch.setattr(guided.NvidiaApp, '__init__', lambda self: setattr(self, 'mkinitcpio_conf', mkinitcpio) or setattr(self, 'modprobe_conf', tmp_path / 'nvidia.conf'))

	handler.config.gfx_driver = GfxDriver.Nvidia
	handler.config.gfx_substitutions = {'hyprland': 'hyprland-git'}

	installation = guided.perform_installation(handler)

	assert installation.summary.gfx_driver == GfxDriver.Nvidia
	assert commands.ran('nvidia-dkms', 'nvidia-utils')
	assert commands.ran('hyprland-git')
	assert 'GBM_BACKEND' in (handler.config.config_dir / 'hypr' / 'hyprland.conf').read_text()


def test_fetch_failure_aborts(handler: HyprConfigHandler, commands) -> None:  # type: ignore[no-untyped-def]
	commands.fail_when('https://example.com/custom.git')

	with pytest.raises(FetchError):
		guided.perform_installation(handler)

	assert not (handler.config.config_dir / 'hypr').exists()


def test_run_prints_report(handler: HyprConfigHandler, capsys) -> None:  # type: ignore[no-untyped-def]
	assert guided.run(handler) == 0

	out = capsys.readouterr().out
	assert 'Installation complete!' in out
	assert 'Keyboard layout is set to colemak_dh' in out
	assert 'NVIDIA POST-INSTALL' not in out


def test_fatal_error_is_reported_once(handler: HyprConfigHandler, commands, monkeypatch: MonkeyPatch, capsys) -> None:  # type: ignore[no-untyped-def]
	commands.fail_when('https://example.com/custom.git')
	monkeypatch.setattr(SysInfo, 'is_root', staticmethod(lambda: False))
	monkeypatch.setattr(hyprinstall, 'HyprConfigHandler', lambda argv=None: handler)

	with pytest.raises(SystemExit) as exc:
		hyprinstall.run_as_a_module()

	out = capsys.readouterr().out
	assert exc.value.code == 1
	assert out.count('Could not clone https://example.com/custom.git') == 1
	assert out.count('log file') == 1
