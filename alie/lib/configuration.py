import re
from pathlib import Path

from .args import AlieConfig
from .output import debug

_ASSIGNMENT = re.compile(r'^(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)=(.*)$')

INSTALL_INFO_FILENAME = '.alie-install-info'


class InstallInfo:
	"""
	KEY=value file left behind by the installation scripts describing the
	system being installed (boot mode, partitions, desktop user, ...).
	"""

	def __init__(self, values: dict[str, str] | None = None, path: Path | None = None) -> None:
		self._values = values or {}
		self._path = path

	@property
	def path(self) -> Path | None:
		return self._path

	def exists(self) -> bool:
		return self._path is not None

	def get(self, key: str, default: str | None = None) -> str | None:
		return self._values.get(key, default)

	@property
	def desktop_user(self) -> str | None:
		return self.get('DESKTOP_USER')

	@staticmethod
	def candidates(config: AlieConfig) -> list[Path]:
		return [
			config.target_root / 'root' / INSTALL_INFO_FILENAME,
			config.host_path('/root') / INSTALL_INFO_FILENAME,
		]

	@classmethod
	def parse(cls, content: str) -> dict[str, str]:
		values: dict[str, str] = {}

		for line in content.splitlines():
			line = line.strip()

			if not line or line.startswith('#'):
				continue

			if (match := _ASSIGNMENT.match(line)) is None:
				debug(f'Skipping malformed install info line: {line}')
				continue

			key, value = match.groups()
			value = value.strip()

			if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
				value = value[1:-1]

			values[key] = value

		return values

	@classmethod
	def load(cls, config: AlieConfig) -> 'InstallInfo':
		for path in cls.candidates(config):
			try:
				content = path.read_text()
			except FileNotFoundError:
				continue
			except OSError as err:
				debug(f'Unable to read install info {path}: {err}')
				continue

			debug(f'Loaded installation info from {path}')
			return cls(cls.parse(content), path)

		return cls()
