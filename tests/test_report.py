from pathlib import Path

from hyprinstall.lib.hardware import GfxDriver
from hyprinstall.lib.models.result import OperationResult
from hyprinstall.lib.output import FormattedOutput
from hyprinstall.lib.report import InstallSummary, print_summary


def test_degraded_results() -> None:
	summary = InstallSummary(
		config_dir=Path('/tmp'),
		results=[
			OperationResult.succeeded('wofi'),
			OperationResult.missing('ghostty', 'not found in the fetched tree'),
			OperationResult.failed('localsend-bin'),
		],
	)

	assert [result.target for result in summary.degraded()] == ['ghostty', 'localsend-bin']


def test_nvidia_block_only_when_driver_installed(tmp_path: Path, capsys) -> None:  # type: ignore[no-untyped-def]
	print_summary(InstallSummary(config_dir=tmp_path))
	assert 'NVIDIA POST-INSTALL' not in capsys.readouterr().out

	print_summary(InstallSummary(config_dir=tmp_path, gfx_driver=GfxDriver.Nvidia))
	out = capsys.readouterr().out
	assert 'NVIDIA POST-INSTALL' in out
	assert 'nvidia_drm.modeset=1' in out


def test_report_lines(tmp_path: Path, capsys) -> None:  # type: ignore[no-untyped-def]
	backup_dir = tmp_path / 'cfg_backups' / '20240501_123015'
	backup_dir.mkdir(parents=True)

	summary = InstallSummary(
		config_dir=tmp_path,
		backup_dir=backup_dir,
		autologin=True,
		results=[OperationResult.failed('localsend-bin', 'build failed')],
	)
	print_summary(summary, keyboard_variant='colemak_dh', gaps_out=28)

	out = capsys.readouterr().out
	assert f'Your old configs were backed up to: {backup_dir}' in out
	assert 'Keyboard layout is set to colemak_dh' in out
	assert 'increased to 28 pixels' in out
	assert 'Super+V' in out
	assert 'localsend-bin: failed (non-fatal) build failed' in out
	assert 'Automatic login on tty1 enabled' in out
	assert 'REBOOT' in out


def test_result_table() -> None:
	table = FormattedOutput.as_table(
		[OperationResult.succeeded('wofi'), OperationResult.missing('ghostty', 'absent')],
		capitalize=True,
	)
	lines = table.splitlines()

	assert lines[0].split(' | ')[0].strip() == 'Target'
	assert 'skipped (missing)' in lines[3]
