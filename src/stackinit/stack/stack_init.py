"""Run a stack's init script against a scratch copy of its image files.

One cycle: locate the script in the stack image, recreate the scratch
workdir, copy the image's project files into it, run the script there and
remove the workdir again. A stack without an init script is not an error.
"""

import logging
import os
import shutil
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from stackinit.errors import ContainerError, FilesystemError
from stackinit.stack.script_runner import run_init_script

logger = logging.getLogger(__name__)

WORKDIR_NAME = ".appsody_init"


class InitPhase(Enum):
    IDLE = "idle"
    LOCATING_SCRIPT = "locating-script"
    PREPARING_WORKDIR = "preparing-workdir"
    EXTRACTING = "extracting"
    EXECUTING = "executing"
    CLEANING_UP = "cleaning-up"
    DONE = "done"


@dataclass
class InitOutcome:
    """What one orchestration cycle did."""

    phases: List[InitPhase] = field(default_factory=lambda: [InitPhase.IDLE])
    script_found: bool = False
    script_ran: bool = False

    def enter(self, phase: InitPhase):
        logger.debug("Stack init: %s", phase.value)
        self.phases.append(phase)


def init_script_name(platform=None):
    platform = platform or sys.platform
    return ".appsody-init.bat" if platform.startswith("win") else ".appsody-init.sh"


class StackInitOrchestrator:
    """Locates, extracts and runs the stack init script for a project."""

    def __init__(self, runtime, project_dir, dry_run=False, platform=None,
                 script_runner=run_init_script):
        self._runtime = runtime
        self._script_runner = script_runner
        self.project_dir = project_dir
        self.dry_run = dry_run
        self.script_name = init_script_name(platform)
        self.workdir = os.path.join(project_dir, WORKDIR_NAME)

    def run(self, stack_image) -> InitOutcome:
        outcome = InitOutcome()

        if self.dry_run:
            logger.info("Dry run - skipping search for %s in image %s", self.script_name, stack_image)
            logger.info("Dry run - skipping extract and run of the stack init script")
            outcome.enter(InitPhase.DONE)
            return outcome

        outcome.enter(InitPhase.LOCATING_SCRIPT)
        if not self._locate_script(stack_image):
            logger.debug("There is no initialization script in the image - skipping extract")
            outcome.enter(InitPhase.DONE)
            return outcome
        outcome.script_found = True

        outcome.enter(InitPhase.PREPARING_WORKDIR)
        self._prepare_workdir()
        try:
            outcome.enter(InitPhase.EXTRACTING)
            self._runtime.extract_image_subtree(stack_image, self.workdir)

            outcome.enter(InitPhase.EXECUTING)
            script_path = os.path.join(self.workdir, self.script_name)
            if os.path.isfile(script_path):
                logger.debug("Running stack init script %s", script_path)
                self._script_runner(script_path, cwd=self.workdir)
                outcome.script_ran = True
            else:
                logger.debug("%s was not extracted - nothing to run", self.script_name)
        finally:
            outcome.enter(InitPhase.CLEANING_UP)
            self._cleanup()

        outcome.enter(InitPhase.DONE)
        return outcome

    def _locate_script(self, stack_image) -> bool:
        command = f"find / -type f -name {self.script_name} 2>/dev/null || true"
        logger.debug("Attempting to run %s on image %s", command, stack_image)
        try:
            found = self._runtime.run_in_image(["--rm"], stack_image, command)
        except ContainerError as e:
            raise ContainerError(
                f"Failed to run the find command for {self.script_name} "
                f"on the stack image {stack_image}: {e}"
            ) from e
        return bool(found.strip())

    def _prepare_workdir(self):
        if not os.path.lexists(self.workdir):
            return
        try:
            shutil.rmtree(self.workdir)
        except OSError as e:
            raise FilesystemError(f"Could not remove working dir {self.workdir}: {e}") from e

    def _cleanup(self):
        logger.debug("Removing %s", self.workdir)
        try:
            shutil.rmtree(self.workdir)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error("Could not remove working dir %s: %s", self.workdir, e)
