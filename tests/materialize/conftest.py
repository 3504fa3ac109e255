"""Shared fixtures for materialize tests."""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(__file__))

from archive_helpers import build_archive, dir_entry, file_entry  # noqa: E402


@pytest.fixture
def target_dir(tmp_path):
    target = tmp_path / "project"
    target.mkdir()
    return target


@pytest.fixture
def template_archive(tmp_path):
    """A template with an app directory, a source file and the project config."""
    return build_archive(tmp_path / "template.tar.gz", [
        dir_entry("app/"),
        file_entry("app/main.go", b"package main\n", mode=0o644),
        file_entry(".appsody-config.yaml", b"stack: example/go:0.1\n", mode=0o644),
    ])
