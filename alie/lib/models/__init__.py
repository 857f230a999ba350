from .environment import Environment
from .results import RecoveryAction, Resolution, ResolutionType, StepResult, StepStatus
from .step import Privilege, ProgressEntry, StepDefinition

__all__ = [
	'Environment',
	'Privilege',
	'ProgressEntry',
	'RecoveryAction',
	'Resolution',
	'ResolutionType',
	'StepDefinition',
	'StepResult',
	'StepStatus',
]
