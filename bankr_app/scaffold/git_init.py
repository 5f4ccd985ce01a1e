#  Bankr App Kit - Git Initialization
#
#  git init / add / commit for a freshly generated project via subprocess.
#
#  Depends on: config.py, exceptions.py
#  Used by:    scaffold/generator.py

import logging
import subprocess
from pathlib import Path

from bankr_app.config import GIT_COMMAND_TIMEOUT, GIT_COMMIT_MESSAGE
from bankr_app.exceptions import GitInitError

logger = logging.getLogger("bankr.scaffold")

# Used only when the user has no git identity configured
_FALLBACK_IDENTITY = ("-c", "user.name=Bankr Developer", "-c", "user.email=developer@bankr.local")


def _run_git(*args: str, cwd: str | Path, timeout: int | None = None) -> str:
    """Run a git command synchronously. Raises GitInitError on failure."""
    cmd = ["git"] + list(args)
    timeout = timeout or GIT_COMMAND_TIMEOUT
    try:
        result = subprocess.run(
            cmd,
            cwd=str(cwd),
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        raise GitInitError(f"Git command timed out after {timeout}s: {' '.join(cmd)}")
    except OSError as e:
        raise GitInitError(f"Failed to run git: {e}")

    if result.returncode != 0:
        stderr = result.stderr.strip()
        raise GitInitError(f"git {' '.join(args)} failed (rc={result.returncode}): {stderr}")

    return result.stdout.strip()


def _has_identity(cwd: Path) -> bool:
    try:
        _run_git("config", "user.email", cwd=cwd)
    except GitInitError:
        return False
    return True


def init_git_repo(project_path: Path, message: str = GIT_COMMIT_MESSAGE):
    """Create a repository with everything in project_path as the first commit."""
    _run_git("init", cwd=project_path)
    _run_git("add", ".", cwd=project_path)
    identity = () if _has_identity(project_path) else _FALLBACK_IDENTITY
    _run_git(*identity, "commit", "-m", message, cwd=project_path)
    logger.info("Initialized git repository in %s", project_path)
