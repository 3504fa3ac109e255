"""Container execution used by stack initialization.

The orchestrator only depends on the ContainerRuntime protocol; DockerRuntime
is the implementation backed by the ``docker`` CLI.
"""

import logging
import os
import subprocess
import uuid
from typing import List, Optional, Protocol

from stackinit.errors import ContainerError, FilesystemError

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_DIR_IN_IMAGE = "/project"


class ContainerRuntime(Protocol):
    def run_in_image(self, options: List[str], image: str, command: str) -> str:
        """Run a bash command in a fresh container of *image*, return stdout."""
        ...

    def extract_image_subtree(self, image: str, target_dir: str) -> None:
        """Copy the image's project directory into *target_dir*."""
        ...


class DockerRuntime:
    """ContainerRuntime that shells out to the docker CLI."""

    def __init__(
        self,
        docker: str = "docker",
        project_dir_in_image: str = DEFAULT_PROJECT_DIR_IN_IMAGE,
        timeout: Optional[float] = None,
    ):
        self.docker = docker
        self.project_dir_in_image = project_dir_in_image
        self.timeout = timeout

    def run_in_image(self, options, image, command):
        cmd = [self.docker, "run", *options, "--entrypoint", "/bin/bash", image, "-c", command]
        return self._run(cmd).stdout.strip()

    def extract_image_subtree(self, image, target_dir):
        try:
            os.makedirs(target_dir, exist_ok=True)
        except OSError as e:
            raise FilesystemError(f"Cannot create {target_dir}: {e}") from e

        container = f"stackinit-extract-{uuid.uuid4().hex[:12]}"
        self._run([self.docker, "create", "--name", container, image])
        try:
            source = f"{container}:{self.project_dir_in_image.rstrip('/')}/."
            self._run([self.docker, "cp", source, target_dir])
        finally:
            self._remove_container(container)

    def _remove_container(self, container):
        try:
            self._run([self.docker, "rm", "-f", container])
        except ContainerError as e:
            logger.error("Could not remove container %s: %s", container, e)

    def _run(self, cmd):
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, capture_output=True, text=True,
                                    encoding="utf-8", errors="replace",
                                    timeout=self.timeout)
        except (OSError, subprocess.TimeoutExpired) as e:
            raise ContainerError(f"Could not run {' '.join(cmd[:2])}: {e}") from e
        if result.returncode != 0:
            raise ContainerError(
                f"{' '.join(cmd[:2])} failed with exit code {result.returncode}: "
                f"{result.stderr.strip()}"
            )
        return result
