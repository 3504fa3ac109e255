"""Options dataclass for the init command."""

from dataclasses import dataclass

import click

from stackinit.materialize.archive_extractor import ExtractionPolicy
from stackinit.stack.stack_index import DEFAULT_INDEX_URL


@dataclass
class InitOpts:
    """All options for the init command."""

    stack: str | None = None
    overwrite: bool = False
    no_template: bool = False
    dry_run: bool = False
    index: str = DEFAULT_INDEX_URL

    _STACK_ONLY = [
        ("overwrite", "--overwrite"),
        ("no_template", "--no-template"),
    ]

    def validate(self):
        """Raise click.UsageError if template options are given without a stack."""
        if self.stack:
            return
        given = [flag for attr, flag in self._STACK_ONLY if getattr(self, attr)]
        if given:
            raise click.UsageError(
                f"{', '.join(given)} can only be used with a STACK argument"
            )

    @property
    def skips_laydown_checks(self):
        return self.overwrite or self.no_template

    def extraction_policy(self):
        return ExtractionPolicy(
            suppress_non_config_files=self.no_template,
            allow_overwrite=self.overwrite,
        )
