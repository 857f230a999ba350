import os
import re
from datetime import datetime
from pathlib import Path

from .args import AlieConfig
from .configuration import INSTALL_INFO_FILENAME
from .exceptions import ProgressStoreError
from .models import ProgressEntry
from .output import debug, warn
from .steps import all_steps

PROGRESS_FILENAME = '.alie-progress'

_MARKER_REGEX = re.compile(r'^[A-Za-z0-9][A-Za-z0-9._-]*$')
_AUDIT_REGEX = re.compile(r'^(\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}) - ([A-Za-z0-9][A-Za-z0-9._-]*)$')
_AUDIT_TIME_FORMAT = '%Y-%m-%d %H:%M:%S'

# Leftovers of a previous installation attempt, removed together with the progress
_STATE_FILES = [
	'/tmp/.alie-install-config',
	'/tmp/.alie-shell-editor-config',
	f'/root/{INSTALL_INFO_FILENAME}',
]


def audit_log_path(marker_file: Path) -> Path:
	return marker_file.with_name(marker_file.name + '.log')


def _exists(path: Path) -> bool:
	try:
		return path.exists()
	except OSError:
		return False


class ProgressStore:
	"""
	Append only record of the installation steps that completed.

	The marker file holds one step marker per line and is accompanied by an
	audit log with a timestamped line per completion. Where the files live
	depends on the installation phase: /tmp before the target is mounted,
	<mountpoint>/root while installing and /root on the installed system.
	Reads combine every location, writes go to the most current one.
	"""

	def __init__(self, config: AlieConfig) -> None:
		self._config = config
		self._partial = False

	@property
	def temp_location(self) -> Path:
		return self._config.host_path('/tmp') / PROGRESS_FILENAME

	@property
	def target_location(self) -> Path:
		return self._config.target_root / 'root' / PROGRESS_FILENAME

	@property
	def installed_location(self) -> Path:
		return self._config.host_path('/root') / PROGRESS_FILENAME

	@property
	def user_location(self) -> Path:
		return self._config.home / PROGRESS_FILENAME

	@property
	def partial(self) -> bool:
		"""
		True when the last read had to skip an existing location it was not
		allowed to read, which happens for /root as a regular user.
		"""
		return self._partial

	def locations(self) -> list[Path]:
		if self._config.progress_file is not None:
			return [self._config.progress_file]

		candidates = [self.target_location, self.installed_location]

		if not self._config.is_root:
			candidates.append(self.user_location)

		candidates.append(self.temp_location)

		return list(dict.fromkeys(candidates))

	def write_locations(self) -> list[Path]:
		if self._config.progress_file is not None:
			return [self._config.progress_file]

		active: list[Path] = []

		if _exists(self.target_location.parent) and self.target_location.parent.is_dir():
			active.append(self.target_location)

		install_info = self.installed_location.with_name(INSTALL_INFO_FILENAME)
		if _exists(install_info) or _exists(self.installed_location):
			active.append(self.installed_location)

		if not self._config.is_root:
			active.append(self.user_location)

		active.append(self.temp_location)

		return list(dict.fromkeys(active))

	def write_location(self) -> Path:
		return self.write_locations()[0]

	def _read_lines(self, path: Path) -> list[str]:
		try:
			with path.open() as fh:
				return fh.read().splitlines()
		except (FileNotFoundError, IsADirectoryError):
			return []
		except UnicodeDecodeError:
			with path.open(errors='replace') as fh:
				return fh.read().splitlines()
		except PermissionError:
			debug(f'No permission to read progress from {path}')
			self._partial = True
			return []

	def _read_markers(self, path: Path) -> list[str]:
		markers = []

		for line in self._read_lines(path):
			line = line.strip()

			if not line:
				continue

			if not _MARKER_REGEX.match(line):
				debug(f'Skipping unparseable progress line in {path}: {line!r}')
				continue

			markers.append(line)

		return markers

	def completed(self) -> list[str]:
		"""
		Every recorded marker across all locations, in recording order and
		without duplicates.
		"""
		self._partial = False
		markers: list[str] = []

		for path in reversed(self.locations()):
			markers += self._read_markers(path)

		return list(dict.fromkeys(markers))

	def is_completed(self, step_id: str) -> bool:
		return step_id in self.completed()

	def highest_completed_step(self) -> int:
		done = set(self.completed())
		ordinals = [step.ordinal for step in all_steps() if step.step_id in done]
		return max(ordinals, default=0)

	def _audit_times(self) -> dict[str, datetime]:
		times: dict[str, datetime] = {}

		for path in self.locations():
			for line in self._read_lines(audit_log_path(path)):
				if (match := _AUDIT_REGEX.match(line.strip())) is None:
					continue

				try:
					ts = datetime.strptime(match.group(1), _AUDIT_TIME_FORMAT)
				except ValueError:
					continue

				marker = match.group(2)
				if marker not in times or times[marker] < ts:
					times[marker] = ts

		return times

	def entries(self) -> list[ProgressEntry]:
		times = self._audit_times()
		return [ProgressEntry(step_id=marker, completed_at=times.get(marker)) for marker in self.completed()]

	@staticmethod
	def _ends_mid_line(path: Path) -> bool:
		try:
			with path.open('rb') as fh:
				if fh.seek(0, os.SEEK_END) == 0:
					return False

				fh.seek(-1, os.SEEK_END)
				return fh.read(1) != b'\n'
		except FileNotFoundError:
			return False

	def _append_line(self, path: Path, line: str, sync: bool = False) -> None:
		# a half written last line must not swallow the new one
		prefix = '\n' if self._ends_mid_line(path) else ''

		with path.open('a') as fh:
			fh.write(f'{prefix}{line}\n')

			if sync:
				fh.flush()
				os.fsync(fh.fileno())

	def _append_marker(self, path: Path, step_id: str) -> None:
		path.parent.mkdir(parents=True, exist_ok=True)

		if step_id not in self._read_markers(path):
			self._append_line(path, step_id, sync=True)

	def _append_audit(self, path: Path, step_id: str) -> None:
		self._append_line(audit_log_path(path), f'{datetime.now().strftime(_AUDIT_TIME_FORMAT)} - {step_id}')

	def record_completed(self, step_id: str) -> Path:
		"""
		Marks step_id as completed. The marker is written at most once per
		file, the audit log gets a line for every call. Falls back to the
		next location when the marker can not be written there.
		"""
		if not _MARKER_REGEX.match(step_id):
			raise ValueError(f'Invalid progress marker: {step_id!r}')

		for path in self.write_locations():
			try:
				self._append_marker(path, step_id)
			except OSError as err:
				warn(f'Unable to record progress in {path}: {err}')
				continue

			try:
				self._append_audit(path, step_id)
			except OSError as err:
				warn(f'Recorded {step_id} in {path} but the audit log could not be written: {err}')

			debug(f'Recorded {step_id} in {path}')
			return path

		raise ProgressStoreError(f'No writable location to record {step_id}')

	def reset(self) -> list[Path]:
		"""
		Removes every progress file, audit log and installation info file.
		This can not be undone, confirming with the operator is left to the caller.
		"""
		targets: list[Path] = []

		for path in self.locations() + [self.temp_location, self.target_location, self.installed_location]:
			targets += [path, audit_log_path(path)]

		targets += [self._config.host_path(p) for p in _STATE_FILES]
		targets += [
			self._config.target_root / 'root' / '.alie-install-config',
			self._config.target_root / 'root' / INSTALL_INFO_FILENAME,
		]

		removed = []
		for path in dict.fromkeys(targets):
			try:
				path.unlink()
			except FileNotFoundError:
				continue
			except OSError as err:
				warn(f'Unable to remove {path}: {err}')
				continue

			removed.append(path)

		debug(f'Removed progress files: {[str(p) for p in removed]}')
		return removed
