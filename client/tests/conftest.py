"""Pytest configuration: set test env before any salami imports so settings use known values."""

import os

import pytest

os.environ.setdefault("SALAMI_HASH_ALGORITHM", "SHA-256")
os.environ.setdefault("SALAMI_HASH_CHUNK_SIZE", "4096")
os.environ.setdefault("SALAMI_LOG_LEVEL", "INFO")


@pytest.fixture
def abc_file(tmp_path):
    """File containing the bytes b'abc' (classic digest test vector)."""
    path = tmp_path / "abc.txt"
    path.write_bytes(b"abc")
    return path
