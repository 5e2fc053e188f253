"""Shared helpers for repository tests."""

import pytest
from unittest.mock import Mock


@pytest.fixture
def result_with():
    """Build an execute() result returning the given scalar(s)."""

    def _make(one=None, many=None, rows=None):
        result = Mock()
        result.scalar_one_or_none = Mock(return_value=one)
        result.scalar_one = Mock(return_value=one if one is not None else 0)
        result.scalars = Mock(return_value=Mock(all=Mock(return_value=many or [])))
        result.all = Mock(return_value=rows or [])
        return result

    return _make
