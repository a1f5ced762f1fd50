"""Unit tests for the exception hierarchy in flowstate.errors."""

import pytest

from flowstate.errors import DocumentError, FlowStateError, LockError, LockTimeoutError


class TestExceptionHierarchy:
    """All concrete exceptions must be subclasses of FlowStateError."""

    @pytest.mark.parametrize("exc_cls", [LockError, LockTimeoutError, DocumentError])
    def test_subclass_of_base(self, exc_cls):
        assert issubclass(exc_cls, FlowStateError)

    def test_timeout_is_a_lock_error(self):
        assert issubclass(LockTimeoutError, LockError)
        assert not issubclass(DocumentError, LockError)

    @pytest.mark.parametrize("exc_cls", [LockError, LockTimeoutError, DocumentError])
    def test_message_preserved(self, exc_cls):
        assert str(exc_cls("something went wrong")) == "something went wrong"

    def test_base_is_exception(self):
        assert issubclass(FlowStateError, Exception)
