from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from .environment import Environment
from .step import StepDefinition


class ResolutionType(Enum):
	Proposal = auto()
	Mismatch = auto()
	Complete = auto()
	Unknown = auto()


@dataclass(frozen=True)
class Resolution:
	type_: ResolutionType
	environment: Environment
	highest: int
	step: StepDefinition | None = None
	reason: str = ''

	def has_step(self) -> bool:
		return self.step is not None

	def get_step(self) -> StepDefinition:
		assert self.step is not None
		return self.step


class RecoveryAction(Enum):
	Retry = 'retry'
	Reset = 'reset'
	Abort = 'abort'


class StepStatus(Enum):
	Success = auto()
	Failed = auto()
	PrivilegeMismatch = auto()
	MissingScript = auto()
	Declined = auto()


@dataclass(frozen=True)
class StepResult:
	status: StepStatus
	step: StepDefinition
	exit_code: int | None = None
	message: str = ''

	@property
	def ok(self) -> bool:
		return self.status in (StepStatus.Success, StepStatus.Declined)

	@property
	def rc(self) -> int:
		return 0 if self.ok else 1
