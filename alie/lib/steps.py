from .exceptions import StepNotFound
from .models import Environment, Privilege, StepDefinition

# The total installation order. Each entry is implemented by an external
# script under the install directory and is marked completed in the
# progress store once that script exits with status 0.
_STEPS: tuple[StepDefinition, ...] = (
	StepDefinition(
		ordinal=1,
		step_id='01-base-installed',
		script='001-base-install.sh',
		environment=Environment.LiveMedia,
		privilege=Privilege.Root,
		title='Base System Installation',
		description='Partition, format, install base system',
	),
	StepDefinition(
		ordinal=2,
		step_id='02-system-configured',
		script='101-configure-system.sh',
		environment=Environment.Chroot,
		privilege=Privilege.Root,
		title='System Configuration',
		description='Configure timezone, locale, hostname, GRUB',
	),
	StepDefinition(
		ordinal=3,
		step_id='03-desktop-installed',
		script='201-desktop-install.sh',
		environment=Environment.InstalledNoDesktop,
		privilege=Privilege.Root,
		title='Desktop Installation',
		description='Install Cinnamon desktop, LightDM, create user',
	),
	StepDefinition(
		ordinal=4,
		step_id='04-yay-installed',
		script='211-install-yay.sh',
		environment=Environment.InstalledWithDesktop,
		privilege=Privilege.User,
		title='YAY Installation',
		description='Install YAY AUR helper',
	),
	StepDefinition(
		ordinal=5,
		step_id='05-packages-installed',
		script='212-install-packages.sh',
		environment=Environment.InstalledWithDesktop,
		privilege=Privilege.User,
		title='Packages Installation',
		description='Install Linux Mint packages and themes',
	),
)


def all_steps() -> list[StepDefinition]:
	return list(_STEPS)


def last_ordinal() -> int:
	return max(step.ordinal for step in _STEPS)


def steps_for(environment: Environment) -> list[StepDefinition]:
	return [step for step in _STEPS if step.environment == environment]


def get_step(key: int | str) -> StepDefinition:
	"""
	Looks a step up by ordinal, progress marker or script name.
	Numeric strings are treated as ordinals.
	"""
	if isinstance(key, str) and key.strip().isdigit():
		key = int(key.strip())

	for step in _STEPS:
		if isinstance(key, int):
			if step.ordinal == key:
				return step
		elif key in (step.step_id, step.script):
			return step

	raise StepNotFound(f'No installation step matches: {key}')
