from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from pytest import MonkeyPatch

from alie.lib.args import AlieConfig
from alie.lib.interactions import ManualAction
from alie.lib.models import Environment, RecoveryAction, Resolution, StepDefinition
from alie.lib.output import logger
from alie.lib.runner import ScriptRunner
from alie.lib.session import InstallSession
from alie.lib.steps import all_steps


class ScriptedPrompter:
	def __init__(
		self,
		confirm: bool = True,
		confirm_reset: bool = True,
		recovery: RecoveryAction = RecoveryAction.Abort,
		manual: StepDefinition | ManualAction = ManualAction.Exit,
	) -> None:
		self._confirm = confirm
		self._confirm_reset = confirm_reset
		self._recovery = recovery
		self._manual = manual
		self.questions: list[str] = []
		self.recoveries: list[Resolution] = []
		self.manual_menus = 0

	def confirm(self, question: str) -> bool:
		self.questions.append(question)
		return self._confirm

	def confirm_reset(self) -> bool:
		return self._confirm_reset

	def choose_recovery(self, resolution: Resolution) -> RecoveryAction:
		self.recoveries.append(resolution)
		return self._recovery

	def choose_manual(self, steps: list[StepDefinition]) -> StepDefinition | ManualAction:
		self.manual_menus += 1
		return self._manual


class SpyRunner(ScriptRunner):
	def __init__(self, config: AlieConfig, exit_code: int = 0) -> None:
		super().__init__(config)
		self.exit_code = exit_code
		self.calls: list[tuple[StepDefinition, Path | None]] = []

	def run(self, step: StepDefinition, progress_file: Path | None = None) -> int:
		self.calls.append((step, progress_file))
		return self.exit_code


class FixedClassifier:
	def __init__(self, environment: Environment) -> None:
		self.environment = environment

	def classify(self) -> Environment:
		return self.environment


@pytest.fixture(autouse=True)
def log_directory(tmp_path: Path, monkeypatch: MonkeyPatch) -> Path:
	log_dir = tmp_path / 'log'
	monkeypatch.setattr(logger, '_path', log_dir)
	monkeypatch.setattr(logger, 'verbose', False)
	monkeypatch.delenv('ALIE_PROGRESS_FILE', raising=False)
	monkeypatch.delenv('ALIE_INSTALL_DIR', raising=False)
	return log_dir


@pytest.fixture
def fake_root(tmp_path: Path) -> Path:
	"""
	A host file system where / and the root of PID 1 are the same
	directory, so nothing is detected until a test adds signals.
	"""
	root = tmp_path / 'root'
	(root / 'proc' / '1').mkdir(parents=True)
	(root / 'proc' / '1' / 'root').symlink_to(root)
	(root / 'tmp').mkdir()
	(root / 'root').mkdir()
	(root / 'etc').mkdir()
	return root


@pytest.fixture
def home_dir(tmp_path: Path) -> Path:
	home = tmp_path / 'home'
	home.mkdir()
	return home


@pytest.fixture
def install_dir(tmp_path: Path) -> Path:
	scripts = tmp_path / 'install'
	scripts.mkdir()

	for step in all_steps():
		(scripts / step.script).write_text('#!/bin/bash\nexit 0\n')

	return scripts


@pytest.fixture
def make_config(fake_root: Path, home_dir: Path, install_dir: Path) -> Callable[..., AlieConfig]:
	def _make(**kwargs: Any) -> AlieConfig:
		kwargs.setdefault('install_dir', install_dir)
		kwargs.setdefault('root', fake_root)
		kwargs.setdefault('home', home_dir)
		kwargs.setdefault('euid', 0)
		return AlieConfig(**kwargs)

	return _make


@pytest.fixture
def make_prompter() -> type[ScriptedPrompter]:
	return ScriptedPrompter


@pytest.fixture
def make_session(make_config: Callable[..., AlieConfig]) -> Callable[..., InstallSession]:
	def _make(
		environment: Environment,
		euid: int = 0,
		exit_code: int = 0,
		prompter: ScriptedPrompter | None = None,
	) -> InstallSession:
		config = make_config(euid=euid)

		return InstallSession(
			config,
			classifier=FixedClassifier(environment),  # type: ignore[arg-type]
			runner=SpyRunner(config, exit_code=exit_code),
			prompter=prompter or ScriptedPrompter(),
		)

	return _make
