from enum import Enum
from typing import Protocol

from .menu import Menu, MenuSelection, MenuSelectionType
from .models import RecoveryAction, Resolution, StepDefinition


class ManualAction(Enum):
	ClearProgress = 'Clear progress and exit'
	Exit = 'Exit without changes'


class Prompter(Protocol):
	def confirm(self, question: str) -> bool:
		...

	def confirm_reset(self) -> bool:
		...

	def choose_recovery(self, resolution: Resolution) -> RecoveryAction:
		...

	def choose_manual(self, steps: list[StepDefinition]) -> StepDefinition | ManualAction:
		...


def step_option(step: StepDefinition) -> str:
	return f'{step.ordinal}) {step.title} ({step.script})'


def recovery_options(resolution: Resolution) -> dict[str, RecoveryAction]:
	step = resolution.get_step()

	return {
		f'Continue/Retry {step.title.lower()} ({step.script})': RecoveryAction.Retry,
		'Start fresh (clear progress and exit)': RecoveryAction.Reset,
		'Exit': RecoveryAction.Abort,
	}


def _selected(selection: MenuSelection) -> str | None:
	if selection.type_ == MenuSelectionType.Reset:
		raise KeyboardInterrupt

	if selection.type_ != MenuSelectionType.Selection or not isinstance(selection.value, str):
		return None

	return selection.value


class MenuPrompter:
	"""
	Operator interaction through terminal menus. Ctrl-C in any of them
	cancels the whole invocation.
	"""

	def confirm(self, question: str) -> bool:
		selection = Menu(question, Menu.yes_no(), skip=False, default_option=Menu.yes(), allow_reset=True).run()
		return _selected(selection) == Menu.yes()

	def confirm_reset(self) -> bool:
		selection = Menu(
			'This will clear all progress markers. Are you sure?',
			Menu.yes_no(),
			skip=False,
			default_option=Menu.no(),
			allow_reset=True,
		).run()
		return _selected(selection) == Menu.yes()

	def choose_recovery(self, resolution: Resolution) -> RecoveryAction:
		options = recovery_options(resolution)
		selection = Menu(
			'What would you like to do?',
			list(options),
			skip=False,
			header=resolution.reason,
			allow_reset=True,
		).run()

		if (value := _selected(selection)) is None:
			return RecoveryAction.Abort

		return options[value]

	def choose_manual(self, steps: list[StepDefinition]) -> StepDefinition | ManualAction:
		options: dict[str, StepDefinition | ManualAction] = {step_option(step): step for step in steps}
		options.update({action.value: action for action in ManualAction})

		header = [f'{step.ordinal}) {step.description} - {step.privilege_hint()}' for step in steps]

		selection = Menu(
			'Choose script to run',
			list(options),
			skip=True,
			header=header,
			allow_reset=True,
		).run()

		if (value := _selected(selection)) is None:
			return ManualAction.Exit

		return options[value]
