from .menu import Menu, MenuSelection, MenuSelectionType

__all__ = [
	'Menu',
	'MenuSelection',
	'MenuSelectionType',
]
