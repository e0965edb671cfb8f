import logging
import subprocess
from pathlib import Path

from .constants import APP_NAME

logger = logging.getLogger(APP_NAME)


class GitError(RuntimeError):
    """Raised when a git command exits with a non-zero status."""


class GitRepo:
    """A wrapper around the Git command-line interface for a specific repository.

    This class provides methods to execute the Git operations a pull needs using
    `subprocess`, abstracting away the command construction and output handling.

    Attributes:
        path (Path): The file system path to the repository root.
    """

    def __init__(self, path: Path):
        """Initializes the GitRepo instance.

        Args:
            path (Path): The path to the repository root directory.

        Raises:
            ValueError: If the specified path does not contain a .git entry.
        """
        self.path = path
        if not (self.path / ".git").exists():
            raise ValueError(f"Not a git repository: {self.path}")

    def _run(
        self, args: list[str], capture: bool = True, env: dict | None = None
    ) -> str:
        """Executes a Git command within the repository context.

        Args:
            args (list[str]): A list of arguments to pass to the git command.
            capture (bool, optional):   Whether to capture and return stdout.
                                        Defaults to True.
            env (Optional[dict], optional): Environment variables to pass to the
                                            subprocess. Used to carry SSH
                                            credentials. Defaults to None.

        Returns:
            str:    The stripped stdout of the command if capture is True,
                    otherwise an empty string.

        Raises:
            GitError: If the git command returns a non-zero exit code.
        """
        try:
            res = subprocess.run(
                ["git", *args],
                cwd=self.path,
                capture_output=capture,
                text=True,
                check=True,
                env=env,
            )
            return res.stdout.strip() if capture else ""
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or "").strip() or str(e)
            raise GitError(f"Git error: {detail}") from e

    def toplevel(self) -> Path | None:
        """Asks git which working tree the repository path belongs to.

        Returns:
            Optional[Path]: The working tree root, or None if git does not
                            recognize the path as part of a repository.
        """
        try:
            return Path(self._run(["rev-parse", "--show-toplevel"]))
        except GitError as e:
            logger.debug(f"rev-parse --show-toplevel failed in {self.path}: {e}")
            return None

    def current_branch(self) -> str:
        """Retrieves the name of the currently checked-out branch.

        Returns:
            str: The branch name, or an empty string when HEAD is detached.
        """
        return self._run(["branch", "--show-current"])

    def get_config(self, key: str) -> str | None:
        """Reads a single git config value.

        Args:
            key (str): The config key (e.g., 'branch.main.remote').

        Returns:
            Optional[str]: The value, or None if the key is not set.
        """
        try:
            return self._run(["config", "--get", key]) or None
        except GitError:
            return None

    def rev_parse(self, rev: str) -> str | None:
        """Resolves a revision (tag, branch, relative ref) to a full SHA-1 hash.

        Args:
            rev (str): The revision to parse (e.g., 'HEAD', 'FETCH_HEAD').

        Returns:
            Optional[str]:  The full SHA-1 hash,
                            or None if the revision could not be resolved.
        """
        try:
            return self._run(["rev-parse", "--verify", "--quiet", rev])
        except Exception as e:
            logger.debug(f"rev-parse failed for '{rev}': {e}")
            return None

    def fetch(self, remote: str, refspec: str, env: dict | None = None) -> None:
        """Fetches a single ref from a remote into FETCH_HEAD.

        Args:
            remote (str): The remote name or URL.
            refspec (str): The remote ref to fetch (e.g., 'refs/heads/main').
            env (Optional[dict], optional): Environment carrying credentials.
        """
        self._run(["fetch", "--quiet", remote, refspec], env=env)

    def merge_ff_only(self, target: str, env: dict | None = None) -> None:
        """Fast-forwards the current branch to a target commit.

        Fails instead of creating a merge commit when histories have diverged.

        Args:
            target (str): The commit or ref to fast-forward to.
            env (Optional[dict], optional): Environment variables for the subprocess.
        """
        self._run(["merge", "--ff-only", "--quiet", target], env=env)
