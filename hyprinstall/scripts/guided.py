from pathlib import Path

from hyprinstall.applications.audio import AudioApp
from hyprinstall.applications.autologin import AutologinApp
from hyprinstall.applications.bluetooth import BluetoothApp
from hyprinstall.applications.browser import BrowserApp
from hyprinstall.applications.network import NetworkApp
from hyprinstall.applications.nvidia import NvidiaApp
from hyprinstall.lib.args import HyprConfig, HyprConfigHandler
from hyprinstall.lib.aur import AurHelper
from hyprinstall.lib.dotfiles import DotfileFetcher
from hyprinstall.lib.hardware import GfxDriver
from hyprinstall.lib.installer import Installer
from hyprinstall.lib.interactions.general_conf import Confirmation, SilentPrompter, TerminalPrompter, ask_autologin, ask_gfx_driver
from hyprinstall.lib.models.packages import PackageList
from hyprinstall.lib.output import banner, debug, info, nvidia, warn
from hyprinstall.lib.report import print_summary
from hyprinstall.lib.repositories import RepositoryRegistrar
from hyprinstall.lib.templates import TemplateOptions
from hyprinstall.lib.wallpapers import install_wallpapers

# written by the generators or by install_wallpapers, backed up with config_entries
DEPLOYED_ENTRIES = ['waybar', 'hypr', 'wallpapers']


def install_hardware(installation: Installer, config: HyprConfig) -> GfxDriver:
	NetworkApp().install(installation)
	BluetoothApp().install(installation)

	driver = ask_gfx_driver(installation.confirmation, preset=config.gfx_driver)

	if driver.is_nvidia():
		NvidiaApp().install(installation, driver)
	else:
		nvidia('Skipping NVIDIA driver installation.')

	return driver


def install_packages(installation: Installer, config: HyprConfig, driver: GfxDriver) -> None:
	audio = AudioApp()
	installation.record(audio.remove_conflicts(installation))

	packages = PackageList(config.packages)
	packages.extend(audio.pipewire_packages)

	if driver.is_nvidia() and config.gfx_substitutions:
		packages = packages.substitute(config.gfx_substitutions)
		debug(f'Package list after driver substitutions: {packages}')

	info('Installing packages...')
	installation.add_additional_packages(packages)

	for package in config.optional_packages:
		result = installation.pacman.try_install(package)
		installation.record(result)

		if not result.ok:
			warn(f"'{package}' not found in the configured repositories, it will be tried from the AUR.")

	installation.record(audio.enable(installation))


def install_aur_packages(installation: Installer, config: HyprConfig) -> None:
	helper = AurHelper()
	helper.bootstrap()

	aur_packages = PackageList(config.aur_packages)
	for package in config.optional_packages:
		if not installation.pacman.is_installed(package):
			aur_packages.append(package)

	installation.record(helper.install(aur_packages))


def deploy_configuration(installation: Installer, config: HyprConfig, trees: dict[str, Path]) -> None:
	deployer = installation.deployer
	driver = installation.summary.gfx_driver

	eink_source = config.dotfile_source(0)
	custom_source = config.dotfile_source(1)
	eink_tree = trees[eink_source.name] if eink_source else None
	custom_tree = trees[custom_source.name] if custom_source else None

	deployer.backup(config.config_entries + DEPLOYED_ENTRIES)

	if eink_tree is not None:
		installation.record(deployer.deploy_entries(eink_tree, config.config_entries))

	options = TemplateOptions(
		gfx_driver=driver,
		wallpaper=config.wallpaper,
		keyboard_layout=config.keyboard_layout,
		keyboard_variant=config.keyboard_variant,
		gaps_in=config.gaps_in,
		gaps_out=config.gaps_out,
	)

	if config.generate_waybar or custom_tree is None:
		installation.record(deployer.generate_waybar(options))
	else:
		installation.record(deployer.copy_waybar(custom_tree))

	if config.generate_hyprland or custom_tree is None:
		installation.record(deployer.generate_hyprland(options))
	else:
		installation.record(deployer.copy_hyprland(custom_tree))

	script_trees = [tree for tree in (eink_tree, custom_tree) if tree is not None]
	installation.record(deployer.install_helper_scripts(script_trees))

	installation.record(
		install_wallpapers(
			eink_tree,
			config.config_dir / 'wallpapers',
			default=config.wallpaper,
		)
	)


def install_extras(installation: Installer, config: HyprConfig) -> None:
	if ask_autologin(installation.confirmation, installation.username, preset=config.autologin):
		AutologinApp().install(installation, installation.username)
		installation.summary.autologin = True
	else:
		info('Skipping automatic login setup.')

	if config.browser_bootstrap:
		installation.record(BrowserApp().install(installation))
		installation.summary.browser_bootstrap = True

	AudioApp().verify()


def perform_installation(handler: HyprConfigHandler) -> Installer:
	config = handler.config
	prompter = SilentPrompter() if handler.args.silent else TerminalPrompter()

	with Installer(config, Confirmation(prompter)) as installation:
		RepositoryRegistrar(installation.pacman).register(config.repository)

		installation.summary.gfx_driver = install_hardware(installation, config)

		install_packages(installation, config, installation.summary.gfx_driver)
		install_aur_packages(installation, config)

		fetcher = DotfileFetcher(installation.workspace)
		trees = fetcher.fetch(config.dotfiles)

		deploy_configuration(installation, config, trees)
		install_extras(installation, config)

	return installation


def run(handler: HyprConfigHandler) -> int:
	banner(
		'E-ink Hyprland installer',
		f'version {handler.config.version}',
	)

	installation = perform_installation(handler)

	print_summary(
		installation.summary,
		keyboard_variant=handler.config.keyboard_variant,
		gaps_out=handler.config.gaps_out,
	)

	return 0
