"""Arch Linux Installation Environment - resumable installation steps."""

from .lib.args import AlieConfig, AlieConfigHandler
from .lib.environment import EnvironmentClassifier
from .lib.exceptions import ProgressStoreError, RequirementError, StepNotFound, SysCallError
from .lib.models import Environment, Privilege, StepDefinition
from .lib.output import debug, error, info, log, warn
from .lib.progress import ProgressStore
from .lib.resolver import StepResolver
from .lib.runner import ScriptRunner
from .lib.session import InstallSession
from .lib.steps import all_steps, get_step

__all__ = [
	'AlieConfig',
	'AlieConfigHandler',
	'Environment',
	'EnvironmentClassifier',
	'InstallSession',
	'Privilege',
	'ProgressStore',
	'ProgressStoreError',
	'RequirementError',
	'ScriptRunner',
	'StepDefinition',
	'StepNotFound',
	'StepResolver',
	'SysCallError',
	'all_steps',
	'debug',
	'error',
	'get_step',
	'info',
	'log',
	'warn',
]
