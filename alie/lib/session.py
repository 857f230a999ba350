import getpass
from dataclasses import dataclass

from .args import AlieConfig
from .configuration import InstallInfo
from .environment import EnvironmentClassifier
from .exceptions import StepNotFound
from .interactions import ManualAction, MenuPrompter, Prompter
from .models import Privilege, RecoveryAction, Resolution, ResolutionType, StepDefinition, StepResult, StepStatus
from .output import FormattedOutput, debug, error, info, success, warn
from .progress import ProgressStore
from .resolver import StepResolver
from .runner import ScriptRunner
from .steps import all_steps, get_step


@dataclass
class _StepProgressRow:
	ordinal: int
	step: str
	script: str
	environment: str
	privilege: str
	completed: str

	def table_data(self) -> dict[str, str | int]:
		return {
			'#': self.ordinal,
			'step': self.step,
			'script': self.script,
			'environment': self.environment,
			'privilege': self.privilege,
			'completed': self.completed,
		}


class InstallSession:
	"""
	Ties the classifier, progress store, resolver and runner together and
	turns their results into exit codes for the command line.
	"""

	def __init__(
		self,
		config: AlieConfig,
		classifier: EnvironmentClassifier | None = None,
		store: ProgressStore | None = None,
		resolver: StepResolver | None = None,
		runner: ScriptRunner | None = None,
		prompter: Prompter | None = None,
		install_info: InstallInfo | None = None,
	) -> None:
		self.config = config
		self.install_info = install_info or InstallInfo.load(config)
		self.classifier = classifier or EnvironmentClassifier(config)
		self.store = store or ProgressStore(config)
		self.resolver = resolver or StepResolver(self.store, self.install_info)
		self.runner = runner or ScriptRunner(config)
		self.prompter: Prompter = prompter or MenuPrompter()
		self._manual = False

	def _privilege_error(self, step: StepDefinition) -> str:
		if step.privilege == Privilege.Root:
			error('This script requires root privileges')
			info('Run with: sudo alie' + (' --manual' if self._manual else ''))
		else:
			error('This script must NOT be run as root')
			info('Run as regular user: alie' + (' --manual' if self._manual else ''))

		return f'{step.step_id} requires {step.privilege.value} privileges'

	def _check_desktop_user(self, step: StepDefinition) -> None:
		if step.privilege != Privilege.User or not (desktop_user := self.install_info.desktop_user):
			return

		if (current := getpass.getuser()) != desktop_user:
			warn(f'Installation was prepared for user "{desktop_user}", currently running as "{current}"')

	def execute(self, step: StepDefinition) -> StepResult:
		if not step.satisfied_by(self.config.euid):
			message = self._privilege_error(step)
			return StepResult(StepStatus.PrivilegeMismatch, step, message=message)

		if not self.runner.script_exists(step):
			script = self.runner.script_path(step)
			error(f'Script not found: {script}')
			return StepResult(StepStatus.MissingScript, step, message=f'{script} does not exist')

		self._check_desktop_user(step)

		info(f'Starting {step.title.lower()}...')
		exit_code = self.runner.run(step, progress_file=self.store.write_location())

		if exit_code != 0:
			error(f'Step {step.step_id} ({step.script}) failed with exit code {exit_code}')
			info('Progress was not updated, re-run alie to retry this step')
			return StepResult(StepStatus.Failed, step, exit_code=exit_code, message=f'exit code {exit_code}')

		path = self.store.record_completed(step.step_id)
		success(f'{step.title} completed ({step.step_id} recorded in {path})')

		return StepResult(StepStatus.Success, step, exit_code=exit_code)

	def _print_guide(self) -> None:
		info('Please run the appropriate step manually:')

		for step in all_steps():
			who = 'as root' if step.privilege == Privilege.Root else 'as regular user'
			info(f'  - {step.environment.value} ({who}): {step.script}')

	def _recover(self, resolution: Resolution) -> int:
		warn(resolution.reason)
		action = self.prompter.choose_recovery(resolution)
		debug(f'Recovery action chosen: {action.value}')

		match action:
			case RecoveryAction.Retry:
				return self.execute(resolution.get_step()).rc
			case RecoveryAction.Reset:
				return self.reset()
			case RecoveryAction.Abort:
				info('Exiting...')
				return 0

	def automatic(self) -> int:
		environment = self.classifier.classify()
		success(f'Detected environment: {environment.value}')

		resolution = self.resolver.resolve(environment)

		if resolution.highest:
			info('Installation progress detected!')
			success(f'Last completed step: {resolution.highest}')

		info(environment.describe())

		match resolution.type_:
			case ResolutionType.Unknown:
				error(resolution.reason)
				self._print_guide()
				return self.manual()
			case ResolutionType.Complete:
				success(resolution.reason)
				return 0
			case ResolutionType.Mismatch:
				return self._recover(resolution)
			case ResolutionType.Proposal:
				step = resolution.get_step()

				if not self.prompter.confirm(f'Next step: {step.title} ({step.script}). Run it now?'):
					info('Exiting...')
					return StepResult(StepStatus.Declined, step).rc

				return self.execute(step).rc

	def manual(self, selection: str | None = None) -> int:
		self._manual = True
		info('Manual mode enabled - you can choose any step')

		choice: StepDefinition | ManualAction

		if selection is not None:
			try:
				choice = get_step(selection)
			except StepNotFound as err:
				error(f'Invalid option: {err}')
				return 1
		else:
			choice = self.prompter.choose_manual(all_steps())

		if choice == ManualAction.ClearProgress:
			return self.reset()

		if choice == ManualAction.Exit:
			info('Exiting...')
			return 0

		assert isinstance(choice, StepDefinition)
		return self.execute(choice).rc

	def reset(self) -> int:
		warn('This will clear all progress markers')

		if not self.prompter.confirm_reset():
			info('Cancelled')
			return 0

		removed = self.store.reset()
		success(f'Progress and configuration files cleared ({len(removed)} files removed)')
		return 0

	def status(self) -> int:
		environment = self.classifier.classify()
		times = {entry.step_id: entry.completed_at for entry in self.store.entries()}

		rows = []
		for step in all_steps():
			if step.step_id not in times:
				completed = 'no'
			elif (ts := times[step.step_id]) is not None:
				completed = ts.strftime('%Y-%m-%d %H:%M:%S')
			else:
				completed = 'yes'

			rows.append(
				_StepProgressRow(
					ordinal=step.ordinal,
					step=step.step_id,
					script=step.script,
					environment=step.environment.value,
					privilege=step.privilege.value,
					completed=completed,
				)
			)

		info(f'Detected environment: {environment.value}')
		info(f'Progress file: {self.store.write_location()}')
		print(FormattedOutput.as_table(rows))

		if self.install_info.exists():
			info(f'Installation info: {self.install_info.path}')

		resolution = self.resolver.resolve(environment)

		if resolution.has_step():
			step = resolution.get_step()
			info(f'Next step: {step.title} ({step.script})')
		elif resolution.reason:
			info(resolution.reason)

		return 0
