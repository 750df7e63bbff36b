from pathlib import Path

import pytest

from hyprinstall.lib.exceptions import PackageError, RepositoryError
from hyprinstall.lib.models.packages import CHAOTIC_AUR, PackageList
from hyprinstall.lib.models.result import OperationStatus
from hyprinstall.lib.pacman import Pacman
from hyprinstall.lib.repositories import RepositoryRegistrar


def _pacman(tmp_path: Path, content: str) -> Pacman:
	conf = tmp_path / 'pacman.conf'
	conf.write_text(content)
	return Pacman(conf)


def test_registered_repository_only_refreshes(tmp_path: Path, commands) -> None:  # type: ignore[no-untyped-def]
	pacman = _pacman(tmp_path, '[core]\nInclude = /etc/pacman.d/mirrorlist\n\n[chaotic-aur]\nInclude = /etc/pacman.d/chaotic-mirrorlist\n')

	assert RepositoryRegistrar(pacman).register(CHAOTIC_AUR) is False

	assert not commands.ran('pacman-key')
	assert commands.matching('pacman', '-Sy') == [['sudo', 'pacman', '-Sy']]
	assert pacman.synced


def test_commented_marker_is_not_registered(tmp_path: Path, commands) -> None:  # type: ignore[no-untyped-def]
	pacman = _pacman(tmp_path, '#[chaotic-aur]\n')

	assert RepositoryRegistrar(pacman).register(CHAOTIC_AUR) is True


def test_register_new_repository(tmp_path: Path, commands) -> None:  # type: ignore[no-untyped-def]
	pacman = _pacman(tmp_path, '[core]\nInclude = /etc/pacman.d/mirrorlist\n')

	assert RepositoryRegistrar(pacman).register(CHAOTIC_AUR) is True

	assert commands.ran('pacman-key', '--recv-key', '3056513887B78AEB', '--keyserver', 'keyserver.ubuntu.com')
	assert commands.ran('pacman-key', '--lsign-key', '3056513887B78AEB')
	assert len(commands.matching('pacman', '-U')) == 2

	tee_cmd, data = commands.inputs[0]
	assert tee_cmd == ['sudo', 'tee', '-a', str(pacman.config.path)]
	assert data == b'\n[chaotic-aur]\nInclude = /etc/pacman.d/chaotic-mirrorlist\n'

	# the index is refreshed after the repository was added
	assert commands.calls[-1] == ['sudo', 'pacman', '-Sy']


def test_key_import_failure_is_fatal(tmp_path: Path, commands) -> None:  # type: ignore[no-untyped-def]
	commands.fail_when('pacman-key', '--recv-key')
	pacman = _pacman(tmp_path, '')

	with pytest.raises(RepositoryError):
		RepositoryRegistrar(pacman).register(CHAOTIC_AUR)

	assert not commands.inputs


def test_install_failure_raises(tmp_path: Path, commands) -> None:  # type: ignore[no-untyped-def]
	commands.fail_when('pacman', '-S')

	with pytest.raises(PackageError):
		_pacman(tmp_path, '').install(['hyprland'])


def test_install_deduplicates(tmp_path: Path, commands) -> None:  # type: ignore[no-untyped-def]
	_pacman(tmp_path, '').install(PackageList(['git', 'curl', 'git']))

	assert commands.calls == [['sudo', 'pacman', '-S', '--needed', '--noconfirm', 'git', 'curl']]


def test_try_install_degrades(tmp_path: Path, commands) -> None:  # type: ignore[no-untyped-def]
	commands.fail_when('ghostty')

	result = _pacman(tmp_path, '').try_install('ghostty')

	assert result.status == OperationStatus.FAILED_NON_FATAL


def test_remove_only_installed_packages(tmp_path: Path, commands) -> None:  # type: ignore[no-untyped-def]
	commands.fail_when('-Q', 'pulseaudio-bluetooth')

	result = _pacman(tmp_path, '').remove_if_present(['pulseaudio', 'pulseaudio-bluetooth'])

	assert result.ok
	assert commands.ran('pacman', '-Rns', '--noconfirm', 'pulseaudio')
	assert not commands.ran('-Rns', 'pulseaudio-bluetooth')


def test_remove_nothing_installed(tmp_path: Path, commands) -> None:  # type: ignore[no-untyped-def]
	commands.fail_when('-Q')

	result = _pacman(tmp_path, '').remove_if_present(['pulseaudio'])

	assert result.status == OperationStatus.SKIPPED_MISSING
	assert not commands.ran('-Rns')


def test_package_list_substitution() -> None:
	packages = PackageList(['hyprland', 'waybar', 'hyprland'])

	assert packages == ['hyprland', 'waybar']
	assert packages.substitute({'hyprland': 'hyprland-nvidia'}) == ['hyprland-nvidia', 'waybar']
	assert 'waybar' in packages
