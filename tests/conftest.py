"""Shared fixtures for the mapper benchmark tests."""

import socket

import pytest

from mapper_bench.benchmarks import BenchmarkState, ItemCase


@pytest.fixture
def tiny_state():
    return BenchmarkState.create(ItemCase.TINY)


@pytest.fixture
def huge_flat_state():
    return BenchmarkState.create(ItemCase.HUGE_FLAT)


@pytest.fixture
def no_network(monkeypatch):
    """Fail any attempt to open a socket connection; returns the attempted addresses."""
    attempts = []

    def guarded_connect(self, address):
        attempts.append(address)
        raise OSError(f"network access attempted: {address!r}")

    def guarded_create_connection(address, *args, **kwargs):
        attempts.append(address)
        raise OSError(f"network access attempted: {address!r}")

    monkeypatch.setattr(socket.socket, "connect", guarded_connect)
    monkeypatch.setattr(socket.socket, "connect_ex", guarded_connect)
    monkeypatch.setattr(socket, "create_connection", guarded_create_connection)
    return attempts
