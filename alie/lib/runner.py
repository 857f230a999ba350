from pathlib import Path

from .args import AlieConfig
from .general import locate_binary, run_attached
from .models import StepDefinition
from .output import info


class ScriptRunner:
	"""
	Runs the external script implementing a step. The script owns its own
	retries, the runner only reports the exit status.
	"""

	def __init__(self, config: AlieConfig) -> None:
		self._config = config

	def script_path(self, step: StepDefinition) -> Path:
		return self._config.install_dir / step.script

	def script_exists(self, step: StepDefinition) -> bool:
		return self.script_path(step).is_file()

	def run(self, step: StepDefinition, progress_file: Path | None = None) -> int:
		script = self.script_path(step)

		env = {'ALIE_STEP': step.step_id}
		if progress_file is not None:
			env['ALIE_PROGRESS_FILE'] = str(progress_file)

		info(f'Running: {script.name}')

		return run_attached(
			[locate_binary('bash'), str(script)],
			environment_vars=env,
			working_directory=self._config.install_dir,
		)
