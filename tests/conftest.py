"""Shared fixtures for wirerecord tests."""

from types import SimpleNamespace

import pytest
import requests
from requests.structures import CaseInsensitiveDict


class FakeRawHeaders:
    """Multi-valued header container like urllib3's HTTPHeaderDict."""

    def __init__(self, pairs):
        self._pairs = pairs

    def items(self):
        return list(self._pairs)


@pytest.fixture
def make_response():
    """Factory for completed requests.Response objects without a network."""

    def factory(status, reason, url, pairs, content=b"", history=None, version=11):
        response = requests.Response()
        response.status_code = status
        response.reason = reason
        response.url = url
        response.headers = CaseInsensitiveDict(dict(pairs))
        response.raw = SimpleNamespace(version=version, headers=FakeRawHeaders(pairs))
        response._content = content
        response.history = history or []
        return response

    return factory
