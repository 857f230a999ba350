from __future__ import annotations

import os
import stat
import subprocess
import time
from pathlib import Path
from shutil import which

from .exceptions import RequirementError, SysCallError
from .output import debug, logger


def locate_binary(name: str) -> str:
	if path := which(name):
		return path
	raise RequirementError(f'Binary {name} does not exist.')


def _log_cmd(cmd: list[str]) -> None:
	history_logfile = logger.directory / 'cmd_history.txt'

	change_perm = False
	if history_logfile.exists() is False:
		change_perm = True

	try:
		with history_logfile.open('a') as cmd_log:
			cmd_log.write(f'{time.time()} {cmd}\n')

		if change_perm:
			history_logfile.chmod(stat.S_IRUSR | stat.S_IWUSR | stat.S_IRGRP)
	except (PermissionError, FileNotFoundError):
		# If history_logfile does not exist, ignore the error
		pass


def run(cmd: list[str]) -> subprocess.CompletedProcess[bytes]:
	_log_cmd(cmd)

	try:
		return subprocess.run(
			cmd,
			stdout=subprocess.PIPE,
			stderr=subprocess.STDOUT,
			check=True,
		)
	except subprocess.CalledProcessError as err:
		raise SysCallError(
			f'{cmd} exited with abnormal exit code [{err.returncode}]',
			exit_code=err.returncode,
			worker_log=err.output or b'',
		) from err


def run_attached(
	cmd: list[str],
	environment_vars: dict[str, str] | None = None,
	working_directory: Path | None = None,
) -> int:
	"""
	Runs cmd with the terminal attached, stdin/stdout/stderr are inherited
	so the child's output reaches the operator untouched.
	Returns the exit code of the child.
	"""
	_log_cmd(cmd)

	env = os.environ.copy()
	if environment_vars:
		env.update(environment_vars)

	debug(f'Executing attached: {cmd}')
	completed = subprocess.run(cmd, env=env, cwd=working_directory, check=False)
	debug(f'{cmd} finished with exit code {completed.returncode}')

	return completed.returncode
