"""Exception hierarchy for flowstate.

Provides a structured exception tree so callers can catch broad
categories (``FlowStateError``) or specific failure modes.

The core primitives (``acquire``, ``release``, ``atomic_write_json`` and
``atomic_read_modify_write``) never raise these; they return result
models instead. The exceptions are raised by the convenience layers
built on top of them (``locked()``, ``read_json()``, the CLI).

This module is a base-layer module: it must NOT import from any
other ``flowstate`` submodule.
"""

from __future__ import annotations


class FlowStateError(Exception):
    """Base exception for all flowstate errors."""


class LockError(FlowStateError):
    """A lock marker could not be created or removed."""


class LockTimeoutError(LockError):
    """The lock is held by a live process past the wait bound."""


class DocumentError(FlowStateError):
    """A document is missing, malformed, or could not be written."""
