"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages, and
provides real pygit2 repositories for history and forwarding tests.
"""

import sys
from collections.abc import Generator
from dataclasses import dataclass
from pathlib import Path

import pygit2
import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local brdelta package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of brdelta modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("brdelta"):
        del sys.modules[module_name]

from brdelta.config.models import WorkspaceConfig  # noqa: E402
from brdelta.git import RepositoryWorkspace  # noqa: E402

_SIG = pygit2.Signature("Test User", "test@example.com")


def commit_file(
    repo: pygit2.Repository,
    name: str,
    content: str,
    message: str,
    *,
    ref: str = "HEAD",
    parents: list[pygit2.Oid] | None = None,
    time: int | None = None,
) -> pygit2.Oid:
    """Write one file and commit it on ``ref``."""
    workdir = Path(repo.workdir)
    (workdir / name).write_text(content)
    repo.index.add(name)
    repo.index.write()
    tree = repo.index.write_tree()
    if parents is None:
        parents = [] if repo.head_is_unborn else [repo.head.target]
    sig = _SIG if time is None else pygit2.Signature("Test User", "test@example.com", time, 0)
    return repo.create_commit(ref, sig, sig, message, tree, parents)


@dataclass
class LinearRepo:
    """Repository with commits c1 -> c2 -> c3 tagged v1, v2, v3."""

    path: Path
    repo: pygit2.Repository
    commits: list[pygit2.Oid]


@pytest.fixture
def linear_repo(tmp_path: Path) -> Generator[LinearRepo, None, None]:
    repo_path = tmp_path / "linear"
    repo_path.mkdir()
    repo = pygit2.init_repository(str(repo_path), initial_head="main")
    repo.config["user.name"] = "Test User"
    repo.config["user.email"] = "test@example.com"

    commits: list[pygit2.Oid] = []
    for i in range(1, 4):
        oid = commit_file(repo, f"file{i}.txt", f"content {i}\n", f"Commit {i}", time=1_700_000_000 + i)
        commits.append(oid)
        repo.references.create(f"refs/tags/v{i}", oid)

    # Annotated tag on c2
    repo.create_tag("release-2", commits[1], pygit2.enums.ObjectType.COMMIT, _SIG, "Release 2\n")

    yield LinearRepo(repo_path, repo, commits)


@dataclass
class MergeRepo:
    """Repository where main merged a two-commit topic branch.

    main:   base ── m1 ─────── merge
                \\              /
    topic:       t1 ── t2 ────
    """

    path: Path
    repo: pygit2.Repository
    base: pygit2.Oid
    merge: pygit2.Oid
    topic: list[pygit2.Oid]
    m1: pygit2.Oid


@pytest.fixture
def merge_repo(tmp_path: Path) -> Generator[MergeRepo, None, None]:
    repo_path = tmp_path / "merged"
    repo_path.mkdir()
    repo = pygit2.init_repository(str(repo_path), initial_head="main")

    base = commit_file(repo, "base.txt", "base\n", "Base", time=1_700_000_000)
    t1 = commit_file(
        repo, "t1.txt", "t1\n", "Topic 1", ref="refs/heads/topic", parents=[base], time=1_700_000_010
    )
    t2 = commit_file(
        repo, "t2.txt", "t2\n", "Topic 2", ref="refs/heads/topic", parents=[t1], time=1_700_000_020
    )
    m1 = commit_file(
        repo, "m1.txt", "m1\n", "Main 1", ref="refs/heads/main", parents=[base], time=1_700_000_030
    )
    # Index now holds base + t1 + t2 + m1 files: a valid merged tree
    merge = commit_file(
        repo,
        "merge.txt",
        "merge\n",
        "Merge topic",
        ref="refs/heads/main",
        parents=[m1, t2],
        time=1_700_000_040,
    )
    repo.references.create("refs/tags/base", base)
    repo.references.create("refs/tags/merged", merge)

    yield MergeRepo(repo_path, repo, base, merge, [t1, t2], m1)


@pytest.fixture
def upstream(linear_repo: LinearRepo, tmp_path: Path) -> str:
    """Bare clone of ``linear_repo`` at a path ending in ``.git``, usable as a clone URL."""
    bare_path = tmp_path / "remotes" / "upstream.git"
    bare_path.parent.mkdir()
    pygit2.clone_repository(str(linear_repo.path), str(bare_path), bare=True)
    return str(bare_path)


@pytest.fixture
def workspace(tmp_path: Path) -> Generator[RepositoryWorkspace, None, None]:
    ws = RepositoryWorkspace(WorkspaceConfig(workdir=tmp_path / "workdir"))
    ws.initialize()
    yield ws
    ws.close()
