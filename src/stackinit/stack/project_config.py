"""Read the project config file written by a stack template."""

import os
from dataclasses import dataclass

import yaml

from stackinit.errors import ProjectConfigError
from stackinit.materialize.archive_extractor import CONFIG_FILE_NAME

_MISSING_REMEDIATION = "Run `stackinit init <stack>` to create a new project."


def config_path(project_dir):
    return os.path.join(project_dir, CONFIG_FILE_NAME)


@dataclass(frozen=True)
class ProjectConfig:
    """The parts of ``.appsody-config.yaml`` stack init needs."""

    stack: str

    @classmethod
    def load(cls, project_dir):
        path = config_path(project_dir)
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise ProjectConfigError(
                f"{path} not found. The current directory is not a stack project.",
                remediation=_MISSING_REMEDIATION,
            ) from e
        except OSError as e:
            raise ProjectConfigError(f"Cannot read {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ProjectConfigError(f"{path} is not valid YAML: {e}") from e

        if not isinstance(data, dict) or not str(data.get("stack") or "").strip():
            raise ProjectConfigError(f"{path} does not name a stack image")
        return cls(stack=str(data["stack"]).strip())
