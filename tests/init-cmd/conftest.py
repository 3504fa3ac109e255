"""Shared fixtures for init command tests."""

import os
import sys

import pytest

_TESTS_DIR = os.path.dirname(os.path.dirname(__file__))
sys.path.insert(0, os.path.join(_TESTS_DIR, "materialize"))
sys.path.insert(0, os.path.join(_TESTS_DIR, "stack-init"))

from archive_helpers import build_archive, dir_entry, file_entry  # noqa: E402

STACK = "nodejs-express"
STACK_IMAGE = "example/nodejs-express:0.2"


@pytest.fixture
def project_dir(tmp_path):
    project = tmp_path / "project"
    project.mkdir()
    return project


@pytest.fixture
def stack_repo(tmp_path):
    """A template archive and a stack index pointing at it through file://."""
    repo = tmp_path / "repo"
    repo.mkdir()
    archive = build_archive(repo / f"{STACK}.tar.gz", [
        dir_entry("app/"),
        file_entry("app/server.js", b"require('express')\n", mode=0o644),
        file_entry(".gitignore", b"node_modules\n", mode=0o644),
        file_entry(".appsody-config.yaml", f"stack: {STACK_IMAGE}\n".encode(), mode=0o644),
    ])
    index = repo / "index.yaml"
    index.write_text(
        "projects:\n"
        f"  {STACK}:\n"
        "    - urls:\n"
        f"        - {repo.joinpath(f'{STACK}.tar.gz').as_uri()}\n"
        "  broken:\n"
        "    - urls:\n"
        f"        - {repo.joinpath('missing.tar.gz').as_uri()}\n"
    )
    return {"archive": archive, "index": str(index)}
