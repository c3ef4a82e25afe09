"""Pytest configuration and fixtures."""

import asyncio

import pytest

from index_checker.manager import LinkListManager
from index_checker.models import IndexStatus


class FakeChecker:
    """Deterministic checker that records every URL it is asked about.

    ``results`` maps URLs to the status to return (default INDEXED).
    ``errors`` maps URLs to an exception to raise instead.
    When ``gate`` is set, every call waits on it before resolving.
    """

    def __init__(self, results=None, errors=None, gate=None):
        self.results = results or {}
        self.errors = errors or {}
        self.gate = gate
        self.calls: list[str] = []
        self.started = asyncio.Event()

    async def __call__(self, url: str) -> IndexStatus:
        self.calls.append(url)
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        if url in self.errors:
            raise self.errors[url]
        return self.results.get(url, IndexStatus.INDEXED)


@pytest.fixture
def checker():
    return FakeChecker()


@pytest.fixture
def manager(checker):
    return LinkListManager(checker)
