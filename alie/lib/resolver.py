from .configuration import InstallInfo
from .models import Environment, Resolution, ResolutionType, StepDefinition
from .progress import ProgressStore
from .steps import all_steps, steps_for


class StepResolver:
	"""
	Maps the detected environment and the recorded progress onto the next
	installation step. Nothing is executed here, the caller decides what to
	do with the returned Resolution.
	"""

	def __init__(self, store: ProgressStore, install_info: InstallInfo | None = None) -> None:
		self._store = store
		self._install_info = install_info or InstallInfo()

	@staticmethod
	def _next_elsewhere(highest: int) -> StepDefinition | None:
		for step in all_steps():
			if step.ordinal > highest:
				return step
		return None

	def resolve(self, environment: Environment) -> Resolution:
		highest = self._store.highest_completed_step()

		if environment == Environment.Unknown:
			return Resolution(
				ResolutionType.Unknown,
				environment,
				highest,
				reason='Unable to detect environment, choose the step to run manually',
			)

		candidates = steps_for(environment)
		first = min(step.ordinal for step in candidates)
		last = max(step.ordinal for step in candidates)

		if highest >= last:
			reason = f'All steps for {environment.value} are completed'

			if following := self._next_elsewhere(highest):
				reason += f', continue with "{following.title}" ({following.script}) in {following.environment.value}'

			return Resolution(ResolutionType.Complete, environment, highest, reason=reason)

		pending = [step for step in candidates if step.ordinal > highest]
		step = pending[0]

		if highest < first - 1 and not self._store.partial:
			missing = self._next_elsewhere(highest)
			assert missing is not None

			return Resolution(
				ResolutionType.Mismatch,
				environment,
				highest,
				step=step,
				reason=(
					f'Environment {environment.value} implies "{missing.title}" is done, '
					f'but progress only shows step {highest} completed'
				),
			)

		if environment == Environment.LiveMedia and highest == 0 and self._install_info.exists():
			return Resolution(
				ResolutionType.Mismatch,
				environment,
				highest,
				step=step,
				reason=f'Base installation appears to be in progress (found {self._install_info.path})',
			)

		return Resolution(ResolutionType.Proposal, environment, highest, step=step)
