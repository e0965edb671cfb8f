from pathlib import Path

import pytest
from git_helpers import Upstream, git


@pytest.fixture
def upstream(tmp_path: Path) -> Upstream:
    """Creates a bare repository on branch 'main' holding a single commit."""
    publisher = tmp_path / "publisher"
    publisher.mkdir()
    git(publisher, "init", "--quiet", "-b", "main")
    git(publisher, "commit", "--allow-empty", "-m", "initial")

    bare = tmp_path / "remote.git"
    git(tmp_path, "clone", "--quiet", "--bare", str(publisher), bare.name)
    git(publisher, "remote", "add", "origin", str(bare))
    return Upstream(bare=bare, publisher=publisher)
