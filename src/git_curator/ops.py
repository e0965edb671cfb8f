import logging
from dataclasses import dataclass

from .constants import APP_NAME, DEFAULT_REMOTE, SHORT_HASH_LEN
from .credentials import Credential
from .git_wrapper import GitRepo

logger = logging.getLogger(APP_NAME)


@dataclass(frozen=True)
class UpToDate:
    """The remote had no commits the local branch was missing."""


@dataclass(frozen=True)
class Advanced:
    """The local branch was fast-forwarded.

    Attributes:
        from_commit (str): Full hash of the branch tip before the pull.
        to_commit (str): Full hash of the branch tip after the pull.
    """

    from_commit: str
    to_commit: str

    def summary(self) -> str:
        """Formats the move as 'abcdef --> 123456'."""
        return (
            f"{self.from_commit[:SHORT_HASH_LEN]} --> {self.to_commit[:SHORT_HASH_LEN]}"
        )


@dataclass(frozen=True)
class Failed:
    """The pull could not be completed.

    Attributes:
        detail (str): A human-readable cause.
    """

    detail: str


PullOutcome = UpToDate | Advanced | Failed


def resolve_upstream(repo: GitRepo, branch: str) -> tuple[str, str]:
    """Determines which remote and ref the given branch tracks.

    Falls back to the same-named branch on the default remote when no upstream
    is configured.

    Args:
        repo (GitRepo): The local repository.
        branch (str): The local branch name.

    Returns:
        tuple[str, str]: The remote name and the fully qualified remote ref.
    """
    remote = repo.get_config(f"branch.{branch}.remote") or DEFAULT_REMOTE
    merge_ref = repo.get_config(f"branch.{branch}.merge") or f"refs/heads/{branch}"
    return remote, merge_ref


def pull_repo(repo: GitRepo, credential: Credential) -> PullOutcome:
    """Fetches the current branch's upstream and fast-forwards onto it.

    Git failures are returned as `Failed` rather than raised; nothing is retried.

    Args:
        repo (GitRepo): The repository to update.
        credential (Credential): The SSH identity used for the fetch.

    Returns:
        PullOutcome: UpToDate, Advanced, or Failed.
    """
    try:
        branch = repo.current_branch()
    except RuntimeError as e:
        return Failed(str(e))
    if not branch:
        return Failed("HEAD is detached, no branch to pull")

    remote, merge_ref = resolve_upstream(repo, branch)
    before = repo.rev_parse("HEAD")
    env = credential.git_env()

    try:
        repo.fetch(remote, merge_ref, env=env)
    except RuntimeError as e:
        logger.warning(f"FETCH ERROR {repo.path.name}: {e}")
        return Failed(str(e))

    fetched = repo.rev_parse("FETCH_HEAD")
    if fetched is None:
        return Failed(f"Nothing fetched for {merge_ref} from {remote}")

    # Empty repository: nothing to compare against, take the remote tip as-is.
    if before is None:
        try:
            repo.merge_ff_only(fetched, env=env)
        except RuntimeError as e:
            return Failed(str(e))
        after = repo.rev_parse("HEAD")
        return Advanced("0" * len(fetched), after or fetched)

    if fetched == before:
        return UpToDate()

    try:
        repo.merge_ff_only(fetched, env=env)
    except RuntimeError as e:
        logger.warning(f"MERGE ERROR {repo.path.name}: {e}")
        return Failed(str(e))

    after = repo.rev_parse("HEAD")
    if after is None or after == before:
        # Local branch already contains the remote tip.
        return UpToDate()
    return Advanced(before, after)
