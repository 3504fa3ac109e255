"""Shared fixtures for stack init tests."""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(__file__))

from fake_container_runtime import FakeContainerRuntime  # noqa: E402, F401
from recording_script_runner import RecordingScriptRunner  # noqa: E402


@pytest.fixture
def script_runner():
    return RecordingScriptRunner()


@pytest.fixture
def project_dir(tmp_path):
    project = tmp_path / "project"
    project.mkdir()
    return str(project)
