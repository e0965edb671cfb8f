from dataclasses import dataclass
from pathlib import Path

from .git_wrapper import GitRepo


@dataclass(frozen=True)
class RepositoryTarget:
    """A configured repository and where its local copy is expected.

    Attributes:
        name (str): The configured repository name.
        local_path (Path): The storage root joined with the name.
    """

    name: str
    local_path: Path

    @classmethod
    def from_name(cls, storage_root: Path, name: str) -> "RepositoryTarget":
        # Absolute names stay under the storage root.
        return cls(name=name, local_path=Path(storage_root) / name.lstrip("/"))


@dataclass(frozen=True)
class Absent:
    """Nothing exists at the expected path."""

    path: Path


@dataclass(frozen=True)
class NotARepo:
    """The path exists but holds no git metadata."""

    path: Path


@dataclass(frozen=True)
class Present:
    """A usable local repository."""

    repo: GitRepo


RepositoryState = Absent | NotARepo | Present


def locate(storage_root: Path, name: str) -> RepositoryState:
    """Classifies the local copy of a configured repository.

    Never modifies anything or touches the network. A `.git` entry alone is not
    enough: git must agree that the path is the root of its own working tree,
    otherwise git would fall through to an enclosing repository.

    Args:
        storage_root (Path): The directory holding the local copies.
        name (str): The configured repository name.

    Returns:
        RepositoryState: Absent, NotARepo, or Present with an open GitRepo.
    """
    target = RepositoryTarget.from_name(storage_root, name)
    if not target.local_path.exists():
        return Absent(target.local_path)

    try:
        repo = GitRepo(target.local_path)
    except ValueError:
        return NotARepo(target.local_path)

    toplevel = repo.toplevel()
    if toplevel is None or toplevel.resolve() != target.local_path.resolve():
        return NotARepo(target.local_path)
    return Present(repo)
