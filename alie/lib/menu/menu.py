from dataclasses import dataclass
from enum import Enum, auto
from os import system
from typing import Any

from simple_term_menu import TerminalMenu  # type: ignore

from ..exceptions import RequirementError
from ..output import debug


class MenuSelectionType(Enum):
	Selection = auto()
	Skip = auto()
	Reset = auto()


@dataclass
class MenuSelection:
	type_: MenuSelectionType
	value: str | list[str] | None = None


class Menu(TerminalMenu):
	@classmethod
	def yes(cls) -> str:
		return 'yes'

	@classmethod
	def no(cls) -> str:
		return 'no'

	@classmethod
	def yes_no(cls) -> list[str]:
		return [cls.yes(), cls.no()]

	def __init__(
		self,
		title: str,
		p_options: list[str] | dict[str, Any],
		skip: bool = True,
		default_option: str | None = None,
		header: list[str] | str = [],
		allow_reset: bool = False,
	):
		"""
		Creates a new menu

		:param title: Text that will be displayed above the menu
		:type title: str

		:param p_options: Options to be displayed in the menu to chose from;
		if dict is specified then the keys of such will be used as options
		:type p_options: list, dict

		:param skip: Indicate if the selection is not mandatory and can be skipped
		:type skip: bool

		:param default_option: The default option to be used in case the selection processes is skipped
		:type default_option: str

		:param header: one or more header lines for the menu
		:type header: string or list

		:param allow_reset: ctrl+c is handed back as a Reset selection instead of being treated as a skip
		:type allow_reset: bool
		"""
		if isinstance(p_options, dict):
			options = list(p_options.keys())
		else:
			options = list(p_options)

		if not options:
			raise RequirementError('Menu.__init__() requires at least one option to proceed.')

		if any([o for o in options if not isinstance(o, str)]):
			raise RequirementError('Menu.__init__() requires the options to be of type string')

		self._menu_options = options
		self._skip = skip
		self._default_option = default_option
		self._raise_error_on_interrupt = allow_reset

		action_info = ''
		if skip:
			action_info += 'ESC to skip'

		if self._raise_error_on_interrupt:
			action_info += ', ' if len(action_info) > 0 else ''
			action_info += 'CTRL+C to cancel'

		if action_info:
			action_info += '\n\n'

		menu_title = f'\n{action_info}{title}\n'

		if header:
			if not isinstance(header, (list, tuple)):
				header = [header]
			menu_title += '\n' + '\n'.join(header)

		if default_option:
			# if a default value was specified we move that one
			# to the top of the list and mark it as default as well
			self._menu_options = [self._default_menu_value] + [o for o in self._menu_options if default_option != o]

		cursor = '> '
		main_menu_cursor_style = ('fg_cyan', 'bold')
		main_menu_style = ('bg_blue', 'fg_gray')

		super().__init__(
			menu_entries=self._menu_options,
			title=menu_title,
			menu_cursor=cursor,
			menu_cursor_style=main_menu_cursor_style,
			menu_highlight_style=main_menu_style,
			raise_error_on_interrupt=self._raise_error_on_interrupt,
			show_search_hint=False,
			cycle_cursor=True,
			clear_menu_on_exit=True,
		)

	@property
	def _default_menu_value(self) -> str:
		return f'{self._default_option} (default)'

	def _show(self) -> MenuSelection:
		try:
			idx = self.show()
		except KeyboardInterrupt:
			return MenuSelection(type_=MenuSelectionType.Reset)

		if idx is None:
			return MenuSelection(type_=MenuSelectionType.Skip)

		assert isinstance(idx, int)
		option = self._menu_options[idx]

		if self._default_option is not None and option == self._default_menu_value:
			option = self._default_option

		debug(f'Menu selection: {option}')
		return MenuSelection(type_=MenuSelectionType.Selection, value=option)

	def run(self) -> MenuSelection:
		selection = self._show()

		if selection.type_ is MenuSelectionType.Skip and not self._skip:
			system('clear')
			return self.run()

		return selection
