"""InitCommand encapsulates the scaffold workflow logic."""

import logging
import os

from stackinit.errors import (
    ExistingProjectError,
    StackInitError,
    UnsafeLaydownError,
)
from stackinit.fetch.remote_fetcher import fetch
from stackinit.materialize.archive_extractor import extract_archive
from stackinit.materialize.conflict_precheck import detect_conflicts
from stackinit.materialize.laydown import is_safe_to_lay_aside
from stackinit.stack.project_config import ProjectConfig, config_path
from stackinit.stack.stack_index import StackIndex
from stackinit.stack.stack_init import StackInitOrchestrator

logger = logging.getLogger(__name__)


class InitCommand:
    """Creates a project from a stack template, then runs the stack init script.

    Without a stack name only the stack init script is run, for an
    existing project.
    """

    def __init__(self, opts, project_dir, runtime,
                 index_loader=StackIndex.load, fetcher=fetch):
        self.opts = opts
        self.project_dir = project_dir
        self._runtime = runtime
        self._index_loader = index_loader
        self._fetcher = fetcher

    def execute(self):
        if not self.opts.stack:
            return self.initialize_stack()

        stack = self.opts.stack
        template_url = self._index_loader(self.opts.index).template_url(stack)

        logger.info("Running stackinit init...")
        self._check_not_a_project()
        self._check_laydown()

        archive = os.path.join(self.project_dir, f"{stack}.tar.gz")
        logger.info("Downloading %s template project from %s", stack, template_url)
        self._download(template_url, archive)
        logger.info("Download complete. Extracting files from %s", archive)

        try:
            self._lay_down(archive)
        finally:
            self._remove_archive(archive)

        if not self.opts.dry_run:
            logger.info("Successfully initialized %s project", stack)
        return self.initialize_stack()

    def initialize_stack(self):
        """Run the stack init script for the project in project_dir."""
        logger.info("Setting up the development environment")
        if self.opts.dry_run and not os.path.isfile(config_path(self.project_dir)):
            logger.info("Dry run - no project config yet, skipping stack init")
            return None

        stack_image = ProjectConfig.load(self.project_dir).stack
        logger.debug("Setting up the development environment for %s with image %s",
                     self.project_dir, stack_image)
        orchestrator = StackInitOrchestrator(
            self._runtime, self.project_dir, dry_run=self.opts.dry_run,
        )
        return orchestrator.run(stack_image)

    def _check_not_a_project(self):
        if os.path.exists(config_path(self.project_dir)):
            raise ExistingProjectError(
                "Cannot run stackinit init <stack> on an existing project.",
                remediation="Run `stackinit init` with no arguments to rerun the stack init script.",
            )

    def _check_laydown(self):
        if self.opts.skips_laydown_checks:
            return
        if not is_safe_to_lay_aside(self.project_dir):
            raise UnsafeLaydownError(
                "Local files exist which may conflict with the template project."
            )

    def _download(self, url, archive):
        if self.opts.dry_run:
            logger.info("Dry run - skipping download of %s to %s", url, archive)
            return
        try:
            self._fetcher(url, archive)
        except StackInitError:
            self._remove_archive(archive)
            raise

    def _lay_down(self, archive):
        if self.opts.dry_run:
            logger.info("Dry run - skipping extraction of %s", archive)
            return
        policy = self.opts.extraction_policy()
        if not policy.allow_overwrite and not policy.suppress_non_config_files:
            detect_conflicts(archive, self.project_dir).raise_for_conflicts()
        extract_archive(archive, policy, self.project_dir)

    def _remove_archive(self, archive):
        if self.opts.dry_run:
            logger.info("Dry run - skipping removal of temporary file %s", archive)
            return
        try:
            os.remove(archive)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Unable to remove temporary file %s, it is left for manual recovery: %s",
                           archive, e)
