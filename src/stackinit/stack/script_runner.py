import logging
import os
import stat
import subprocess
from pathlib import Path

from stackinit.errors import ScriptExecutionError

logger = logging.getLogger(__name__)


def _command_for(script_path: Path):
    if os.name == "nt":
        return ["cmd", "/c", str(script_path)]
    return [str(script_path)]


def run_init_script(script_path, cwd):
    """Run *script_path* in *cwd*, logging each output line at info level.

    Raises ScriptExecutionError if the script cannot be launched or exits
    non-zero.
    """
    script_path = Path(script_path).resolve()

    try:
        current_mode = script_path.stat().st_mode
        if not current_mode & stat.S_IXUSR:
            script_path.chmod(current_mode | stat.S_IXUSR)
    except OSError as e:
        raise ScriptExecutionError(f"Could not make {script_path.name} executable: {e}") from e

    try:
        process = subprocess.Popen(
            _command_for(script_path),
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as e:
        raise ScriptExecutionError(f"Could not run {script_path.name}: {e}") from e

    with process:
        for line in process.stdout:
            logger.info(line.rstrip("\n"))
        returncode = process.wait()

    if returncode != 0:
        raise ScriptExecutionError(
            f"{script_path.name} exited with status {returncode}", returncode=returncode
        )
