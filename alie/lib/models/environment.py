from enum import Enum


class Environment(Enum):
	LiveMedia = 'live-media'
	Chroot = 'chroot'
	InstalledNoDesktop = 'installed-no-desktop'
	InstalledWithDesktop = 'installed-with-desktop'
	Unknown = 'unknown'

	def describe(self) -> str:
		match self:
			case Environment.LiveMedia:
				return 'You are running from the Arch Linux installation media.'
			case Environment.Chroot:
				return 'You are inside a chroot environment.'
			case Environment.InstalledNoDesktop:
				return 'You are on an installed Arch Linux system (base only, no desktop).'
			case Environment.InstalledWithDesktop:
				return 'You are on an installed Arch Linux system with desktop.'
			case _:
				return 'Unable to detect environment.'
