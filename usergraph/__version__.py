import pathlib


def _get_version():
    """Read version from the VERSION file in the repository root."""
    try:
        version_file = pathlib.Path(__file__).parent.parent / "VERSION"
        with open(version_file, 'r', encoding='utf-8') as f:
            version_string = f.read().strip()
        return version_string
    except (FileNotFoundError, IOError):
        # Installed without the VERSION file alongside
        return "1.0.0"

__version__ = _get_version()

VERSION = tuple(map(int, __version__.split('.')))
