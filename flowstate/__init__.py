"""flowstate - cross-process locking and atomic persistence for JSON state files."""

from importlib.metadata import PackageNotFoundError, version as _pkg_version

try:
    __version__ = _pkg_version("flowstate")
except PackageNotFoundError:
    __version__ = "0.4.0"  # fallback for editable installs / dev
