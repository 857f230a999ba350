from alie.lib.args import Arguments
from alie.lib.session import InstallSession


def main(session: InstallSession, args: Arguments) -> int:
	return session.status()
