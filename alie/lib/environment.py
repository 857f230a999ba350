import os
from pathlib import Path
from shutil import which

from .args import AlieConfig
from .exceptions import SysCallError
from .general import run
from .models import Environment
from .output import debug

_UNIT_DIRECTORIES = [
	'/etc/systemd/system',
	'/run/systemd/system',
	'/usr/lib/systemd/system',
	'/lib/systemd/system',
]


class HostProbe:
	"""
	Read only view of the host signals the classifier relies on.
	"""

	def __init__(self, config: AlieConfig) -> None:
		self._config = config

	def _path(self, path: str) -> Path:
		return self._config.host_path(path)

	def in_chroot(self) -> bool:
		"""
		A process is chrooted when its / is not the same directory as the
		root of PID 1. Regular users can not inspect /proc/1/root, in which
		case the signal is treated as absent.
		"""
		try:
			own = os.stat(self._path('/'))
			init = os.stat(self._path('/proc/1/root/.'))
		except FileNotFoundError:
			return False
		except PermissionError:
			debug('Unable to inspect /proc/1/root, assuming no chroot')
			return False

		return (own.st_dev, own.st_ino) != (init.st_dev, init.st_ino)

	def kernel_cmdline(self) -> str:
		try:
			return self._path('/proc/cmdline').read_text()
		except OSError:
			return ''

	def booted_from_live_media(self) -> bool:
		return self._config.live_marker in self.kernel_cmdline()

	def has_release_marker(self) -> bool:
		return self._path('/etc/arch-release').is_file()

	def unit_registered(self, unit: str) -> bool:
		for directory in _UNIT_DIRECTORIES:
			if (self._path(directory) / unit).exists():
				return True

		if self._config.is_live_host and which('systemctl'):
			try:
				output = run(['systemctl', 'list-unit-files', '--no-legend', '--no-pager', unit]).stdout
			except SysCallError as err:
				# list-unit-files exits non-zero when nothing matches
				debug(f'systemctl found no unit {unit}: exit code {err.exit_code}')
				return False

			return unit.encode() in output

		return False

	def desktop_unit(self) -> str | None:
		for unit in self._config.desktop_units:
			if self.unit_registered(unit):
				return unit

		return None


class EnvironmentClassifier:
	def __init__(self, config: AlieConfig, probe: HostProbe | None = None) -> None:
		self._probe = probe or HostProbe(config)

	def classify(self) -> Environment:
		"""
		Signals are evaluated in a fixed order. The chroot check comes first
		since a chroot assembled from live media also carries the live marker.
		"""
		try:
			return self._classify()
		except OSError as err:
			debug(f'Environment detection failed: {err}')
			return Environment.Unknown

	def _classify(self) -> Environment:
		if self._probe.in_chroot():
			return Environment.Chroot

		if self._probe.booted_from_live_media():
			return Environment.LiveMedia

		if self._probe.has_release_marker():
			if unit := self._probe.desktop_unit():
				debug(f'Desktop session manager detected: {unit}')
				return Environment.InstalledWithDesktop

			return Environment.InstalledNoDesktop

		return Environment.Unknown
