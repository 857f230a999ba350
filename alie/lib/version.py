from importlib.metadata import version


def get_version() -> str:
	try:
		return version('alie')
	except Exception:
		return 'ALIE version not found'
