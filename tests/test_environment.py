import subprocess
from collections.abc import Callable
from pathlib import Path

from pytest import MonkeyPatch

import alie.lib.environment
from alie.lib.args import AlieConfig
from alie.lib.environment import EnvironmentClassifier, HostProbe
from alie.lib.exceptions import SysCallError
from alie.lib.models import Environment

_LIVE_CMDLINE = 'BOOT_IMAGE=/arch/boot/x86_64/vmlinuz-linux archisobasedir=arch archisosearchuuid=2024-05-01-10-00-00-00\n'
_INSTALLED_CMDLINE = 'BOOT_IMAGE=/vmlinuz-linux root=UUID=0a3407de-014b-458b-b5c1-848e92a327a3 rw loglevel=3 quiet\n'


def _make_chroot(root: Path) -> None:
	link = root / 'proc' / '1' / 'root'
	link.unlink()
	link.mkdir()


def _add_desktop_unit(root: Path, unit: str = 'lightdm.service') -> None:
	units = root / 'usr' / 'lib' / 'systemd' / 'system'
	units.mkdir(parents=True)
	(units / unit).write_text('[Unit]\nDescription=Light Display Manager\n')


def test_live_media(make_config: Callable[..., AlieConfig], fake_root: Path) -> None:
	(fake_root / 'proc' / 'cmdline').write_text(_LIVE_CMDLINE)

	assert EnvironmentClassifier(make_config()).classify() == Environment.LiveMedia


def test_chroot(make_config: Callable[..., AlieConfig], fake_root: Path) -> None:
	_make_chroot(fake_root)
	(fake_root / 'etc' / 'arch-release').touch()

	assert EnvironmentClassifier(make_config()).classify() == Environment.Chroot


def test_chroot_wins_over_live_marker(make_config: Callable[..., AlieConfig], fake_root: Path) -> None:
	_make_chroot(fake_root)
	(fake_root / 'proc' / 'cmdline').write_text(_LIVE_CMDLINE)

	assert EnvironmentClassifier(make_config()).classify() == Environment.Chroot


def test_installed_without_desktop(make_config: Callable[..., AlieConfig], fake_root: Path) -> None:
	(fake_root / 'proc' / 'cmdline').write_text(_INSTALLED_CMDLINE)
	(fake_root / 'etc' / 'arch-release').touch()

	assert EnvironmentClassifier(make_config()).classify() == Environment.InstalledNoDesktop


def test_installed_with_desktop(make_config: Callable[..., AlieConfig], fake_root: Path) -> None:
	(fake_root / 'proc' / 'cmdline').write_text(_INSTALLED_CMDLINE)
	(fake_root / 'etc' / 'arch-release').touch()
	_add_desktop_unit(fake_root)

	assert EnvironmentClassifier(make_config()).classify() == Environment.InstalledWithDesktop


def test_desktop_units_are_configurable(make_config: Callable[..., AlieConfig], fake_root: Path) -> None:
	(fake_root / 'etc' / 'arch-release').touch()
	_add_desktop_unit(fake_root, 'greetd.service')

	assert EnvironmentClassifier(make_config()).classify() == Environment.InstalledNoDesktop

	config = make_config(desktop_units=['greetd.service'])
	assert HostProbe(config).desktop_unit() == 'greetd.service'
	assert EnvironmentClassifier(config).classify() == Environment.InstalledWithDesktop


def test_unknown(make_config: Callable[..., AlieConfig]) -> None:
	assert EnvironmentClassifier(make_config()).classify() == Environment.Unknown


def test_missing_proc_is_not_a_chroot(make_config: Callable[..., AlieConfig], fake_root: Path) -> None:
	(fake_root / 'proc' / '1' / 'root').unlink()

	assert not HostProbe(make_config()).in_chroot()


def test_failing_probe_is_unknown(make_config: Callable[..., AlieConfig]) -> None:
	class BrokenProbe(HostProbe):
		def in_chroot(self) -> bool:
			raise OSError('I/O error')

	config = make_config()
	classifier = EnvironmentClassifier(config, probe=BrokenProbe(config))

	assert classifier.classify() == Environment.Unknown


def test_describe() -> None:
	assert 'installation media' in Environment.LiveMedia.describe()
	assert 'chroot' in Environment.Chroot.describe()
	assert Environment.Unknown.describe() == 'Unable to detect environment.'


def test_unit_registered_asks_systemctl(make_config: Callable[..., AlieConfig], monkeypatch: MonkeyPatch) -> None:
	calls: list[list[str]] = []

	def _run(cmd: list[str]) -> subprocess.CompletedProcess[bytes]:
		calls.append(cmd)
		return subprocess.CompletedProcess(cmd, 0, stdout=b'alie-test-dm.service enabled enabled\n')

	monkeypatch.setattr(alie.lib.environment, 'which', lambda name: '/usr/bin/systemctl')
	monkeypatch.setattr(alie.lib.environment, 'run', _run)

	probe = HostProbe(make_config(root=Path('/')))

	assert probe.unit_registered('alie-test-dm.service')
	assert calls == [['systemctl', 'list-unit-files', '--no-legend', '--no-pager', 'alie-test-dm.service']]


def test_unit_unknown_to_systemctl(make_config: Callable[..., AlieConfig], monkeypatch: MonkeyPatch) -> None:
	def _run(cmd: list[str]) -> subprocess.CompletedProcess[bytes]:
		raise SysCallError(f'{cmd} exited with abnormal exit code [1]', exit_code=1)

	monkeypatch.setattr(alie.lib.environment, 'which', lambda name: '/usr/bin/systemctl')
	monkeypatch.setattr(alie.lib.environment, 'run', _run)

	assert not HostProbe(make_config(root=Path('/'))).unit_registered('alie-test-dm.service')


def test_systemctl_only_queried_on_live_host(make_config: Callable[..., AlieConfig], monkeypatch: MonkeyPatch) -> None:
	calls: list[list[str]] = []

	def _run(cmd: list[str]) -> subprocess.CompletedProcess[bytes]:
		calls.append(cmd)
		return subprocess.CompletedProcess(cmd, 0, stdout=b'lightdm.service enabled enabled\n')

	monkeypatch.setattr(alie.lib.environment, 'which', lambda name: '/usr/bin/systemctl')
	monkeypatch.setattr(alie.lib.environment, 'run', _run)

	assert not HostProbe(make_config()).unit_registered('lightdm.service')
	assert calls == []
