from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic.dataclasses import dataclass as p_dataclass

from .environment import Environment


class Privilege(Enum):
	Root = 'root'
	User = 'user'

	def satisfied_by(self, euid: int) -> bool:
		match self:
			case Privilege.Root:
				return euid == 0
			case Privilege.User:
				return euid != 0


@p_dataclass(frozen=True)
class StepDefinition:
	ordinal: int
	step_id: str
	script: str
	environment: Environment
	privilege: Privilege
	title: str
	description: str = ''

	def satisfied_by(self, euid: int) -> bool:
		return self.privilege.satisfied_by(euid)

	def privilege_hint(self) -> str:
		if self.privilege == Privilege.Root:
			return 'Requires: root privileges'
		return 'Requires: regular user (NOT root)'


@p_dataclass(frozen=True)
class ProgressEntry:
	step_id: str
	completed_at: datetime | None = None
