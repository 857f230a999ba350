"""Arch Linux Installation Environment - resumable installation steps."""

import importlib
import shutil
import sys
import textwrap
import traceback

from alie.lib.args import AlieConfigHandler
from alie.lib.output import Font, debug, error, log, logger, warn
from alie.lib.session import InstallSession
from alie.lib.version import get_version

_BANNER = """\
#########################################
#                                       #
#       AAA    L       I   EEEEEEE      #
#      A   A   L       I   E            #
#     A     A  L       I   E            #
#     AAAAAAA  L       I   EEEEE        #
#     A     A  L       I   E            #
#     A     A  LLLLLLL I   EEEEEEE      #
#                                       #
#  Arch Linux Installation Environment  #
#                                       #
#########################################"""

_COMPACT_BANNER = """\
#############################
#        A L I E            #
#  Arch Linux Installation  #
#      Environment          #
#############################"""

_WARNING = """\
#############################################################
#                    **  WARNING  **                        #
#############################################################
#  This is an EXPERIMENTAL script provided AS-IS            #
#  without warranties. Review the code before running       #
#  and use at your own risk.                                #
#                                                           #
#  This script will make PERMANENT changes to your system!  #
#############################################################"""


def _show_banner() -> None:
	columns, lines = shutil.get_terminal_size()
	banner = _COMPACT_BANNER if columns < 80 or lines < 24 else _BANNER

	log(banner, fg='magenta', font=[Font.bold])
	log(_WARNING, fg='yellow')


def run(argv: list[str] | None = None) -> int:
	handler = AlieConfigHandler(argv)
	script = handler.get_script()

	debug(f'ALIE {get_version()} running {script} with {handler.args}')

	if script in ('auto', 'manual'):
		_show_banner()

	session = InstallSession(handler.config)

	mod_name = f'alie.scripts.{script}'
	module = importlib.import_module(mod_name)

	return module.main(session, handler.args)


def _error_message(exc: Exception) -> None:
	err = ''.join(traceback.format_exception(exc))
	error(err)

	text = textwrap.dedent(
		f"""\
		ALIE experienced the above error. Progress has not been updated for the
		step that was running, re-run alie to retry it.
		The full log is available at "{logger.path}".
		"""
	)
	warn(text)


def main(argv: list[str] | None = None) -> int:
	rc = 0
	exc = None

	try:
		rc = run(argv)
	except KeyboardInterrupt:
		warn('Interrupted, progress is left at the last completed step')
		rc = 1
	except Exception as e:
		exc = e
	finally:
		if exc:
			_error_message(exc)
			rc = 1

	return rc


if __name__ == '__main__':
	sys.exit(main())
