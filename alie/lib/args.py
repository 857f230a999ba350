import argparse
import os
from argparse import ArgumentParser
from dataclasses import dataclass, field
from pathlib import Path

from pydantic.dataclasses import dataclass as p_dataclass

from alie.lib.output import logger, warn
from alie.lib.version import get_version

DEFAULT_DESKTOP_UNITS = [
	'lightdm.service',
	'sddm.service',
	'gdm.service',
	'lxdm.service',
	'ly.service',
]


@p_dataclass
class Arguments:
	manual: bool = False
	step: str | None = None
	status: bool = False
	reset: bool = False
	install_dir: Path | None = None
	mountpoint: Path = Path('/mnt')
	progress_file: Path | None = None
	root: Path = Path('/')
	debug: bool = False


@dataclass
class AlieConfig:
	"""
	Context handed to every component instead of process wide state.
	All host paths are resolved beneath root, which is / outside of tests.
	"""

	install_dir: Path
	root: Path = Path('/')
	mountpoint: Path = Path('/mnt')
	progress_file: Path | None = None
	desktop_units: list[str] = field(default_factory=lambda: list(DEFAULT_DESKTOP_UNITS))
	live_marker: str = 'archiso'
	euid: int = field(default_factory=os.geteuid)
	home: Path = field(default_factory=Path.home)

	def host_path(self, path: str | Path) -> Path:
		path = Path(path)

		if path.is_absolute():
			path = path.relative_to('/')

		return self.root / path

	@property
	def target_root(self) -> Path:
		return self.host_path(self.mountpoint)

	@property
	def is_root(self) -> bool:
		return self.euid == 0

	@property
	def is_live_host(self) -> bool:
		return self.root == Path('/')


class AlieConfigHandler:
	def __init__(self, argv: list[str] | None = None) -> None:
		self._parser: ArgumentParser = self._define_arguments()
		self._args: Arguments = self._parse_args(argv)
		self._config = self._build_config()

	@property
	def config(self) -> AlieConfig:
		return self._config

	@property
	def args(self) -> Arguments:
		return self._args

	def get_script(self) -> str:
		if self.args.status:
			return 'status'

		if self.args.reset:
			return 'reset'

		if self.args.manual or self.args.step is not None:
			return 'manual'

		return 'auto'

	def _define_arguments(self) -> ArgumentParser:
		parser = ArgumentParser(
			prog='alie',
			description='Arch Linux Installation Environment - resumes the next installation step',
			formatter_class=argparse.ArgumentDefaultsHelpFormatter,
		)
		parser.add_argument(
			'-v',
			'--version',
			action='version',
			version='%(prog)s ' + get_version(),
		)
		parser.add_argument(
			'-m',
			'--manual',
			action='store_true',
			default=False,
			help='Choose any installation step regardless of the detected environment and progress',
		)
		parser.add_argument(
			'--step',
			type=str,
			default=None,
			help='Step to run in manual mode, given as ordinal, progress marker or script name',
		)
		parser.add_argument(
			'--status',
			action='store_true',
			default=False,
			help='Show the detected environment and the recorded progress, then exit',
		)
		parser.add_argument(
			'--reset',
			action='store_true',
			default=False,
			help='Clear all progress markers after confirmation',
		)
		parser.add_argument(
			'--install-dir',
			type=Path,
			nargs='?',
			default=None,
			help='Directory holding the installation step scripts (default: ./install or $ALIE_INSTALL_DIR)',
		)
		parser.add_argument(
			'--mountpoint',
			type=Path,
			nargs='?',
			default=Path('/mnt'),
			help='Mount point of the target system during installation',
		)
		parser.add_argument(
			'--progress-file',
			type=Path,
			nargs='?',
			default=None,
			help='Use a single progress file instead of the phase dependent locations (or $ALIE_PROGRESS_FILE)',
		)
		parser.add_argument(
			'--root',
			type=Path,
			nargs='?',
			default=Path('/'),
			help='Inspect and store progress beneath an alternate root directory',
		)
		parser.add_argument(
			'--debug',
			action='store_true',
			default=False,
			help='Print debug information to the terminal as well as the log',
		)

		return parser

	def _parse_args(self, argv: list[str] | None) -> Arguments:
		argparse_args = vars(self._parser.parse_args(argv))
		args: Arguments = Arguments(**argparse_args)

		if args.progress_file is None:
			if env_progress := os.environ.get('ALIE_PROGRESS_FILE'):
				args.progress_file = Path(env_progress)

		if args.install_dir is None:
			if env_install_dir := os.environ.get('ALIE_INSTALL_DIR'):
				args.install_dir = Path(env_install_dir)

		if args.debug:
			logger.verbose = True

		if not args.mountpoint.is_absolute():
			warn(f'Mount point {args.mountpoint} is not absolute, using /{args.mountpoint}')
			args.mountpoint = Path('/') / args.mountpoint

		return args

	def _build_config(self) -> AlieConfig:
		install_dir = self._args.install_dir or Path('./install')

		return AlieConfig(
			install_dir=install_dir.absolute(),
			root=self._args.root,
			mountpoint=self._args.mountpoint,
			progress_file=self._args.progress_file,
		)
