"""Pytest configuration and shared fixtures."""
import os
import sys

import pytest
from fastapi.testclient import TestClient

# Add parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from main import create_app  # noqa: E402


@pytest.fixture
def db_file(tmp_path):
    return tmp_path / "todos.json"


@pytest.fixture
def log_file(tmp_path):
    return tmp_path / "logs.txt"


@pytest.fixture
def app(db_file, log_file):
    return create_app(db_file=str(db_file), log_file=str(log_file))


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client
