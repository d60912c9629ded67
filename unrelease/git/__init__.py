"""Git operations used by the tag provider.

Usage:
    from unrelease.git import Repository

    repo = Repository(Path("."), runner=SubprocessRunner())
    if repo.is_inside_work_tree():
        print(repo.has_local_tag("v1.2.3"))
"""

from unrelease.git.repository import GitError, Repository

__all__ = ["GitError", "Repository"]
