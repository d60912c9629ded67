from __future__ import annotations

from pathlib import Path

from unrelease.core.errors import ErrorCode
from unrelease.core.version import normalize
from unrelease.providers.base import Provider
from unrelease.providers.git import TagProvider
from unrelease.providers.npm import RegistryProvider
from unrelease.services.retract import RetractOptions, retract
from unrelease.test.fakes import FakeRunner, config_for, git, npm

V = normalize("1.0.0").unwrap()
REMOTE_REF = "refs/tags/v1.0.0"


def _inside(tmp_path: Path) -> dict[tuple[str, ...], tuple[int, str, str]]:
    return {git(tmp_path, "rev-parse", "--is-inside-work-tree"): (0, "true\n", "")}


def _tags_present(tmp_path: Path) -> dict[tuple[str, ...], tuple[int, str, str]]:
    return {
        **_inside(tmp_path),
        git(tmp_path, "tag", "--list", "v1.0.0"): (0, "v1.0.0\n", ""),
        git(tmp_path, "tag", "--delete", "v1.0.0"): (0, "", ""),
        git(tmp_path, "ls-remote", "--tags", "origin", REMOTE_REF): (0, f"abc\t{REMOTE_REF}\n", ""),
    }


def _providers(
    tmp_path: Path, runner: FakeRunner, *, package_name: str | None = "pkg"
) -> list[Provider]:
    config = config_for(tmp_path)
    return [
        RegistryProvider.from_config(config, runner, package_name=package_name),
        TagProvider.from_config(config, runner),
    ]


class TestGit:
    def test_remote_tag_needs_force_online(self, tmp_path: Path) -> None:
        runner = FakeRunner(_tags_present(tmp_path))

        outcome = retract(V, [TagProvider.from_config(config_for(tmp_path), runner)])

        assert outcome.succeeded
        assert outcome.code == 0
        assert outcome.messages == (
            "git(local): The tag v1.0.0 has been deleted",
            "git(remote): To delete the tag v1.0.0 you need to specify --force-online",
        )
        assert not runner.ran("git", "-C", str(tmp_path), "push")

    def test_force_online_deletes_remote_tag(self, tmp_path: Path) -> None:
        responses = _tags_present(tmp_path)
        responses[git(tmp_path, "push", "origin", f":{REMOTE_REF}")] = (0, "", "")
        runner = FakeRunner(responses)

        outcome = retract(
            V, [TagProvider.from_config(config_for(tmp_path), runner)], RetractOptions(force_online=True)
        )

        assert outcome.succeeded
        assert outcome.messages[-1] == "git(remote): The tag v1.0.0 has been deleted"

    def test_missing_tags_are_reported_not_deleted(self, tmp_path: Path) -> None:
        runner = FakeRunner(
            {
                **_inside(tmp_path),
                git(tmp_path, "tag", "--list", "v1.0.0"): (0, "", ""),
                git(tmp_path, "ls-remote", "--tags", "origin", REMOTE_REF): (0, "", ""),
            }
        )

        outcome = retract(
            V, [TagProvider.from_config(config_for(tmp_path), runner)], RetractOptions(force_online=True)
        )

        assert outcome.succeeded
        assert outcome.messages == (
            "git(local): The tag v1.0.0 does not exist",
            "git(remote): The tag v1.0.0 does not exist",
        )
        assert not runner.ran("git", "-C", str(tmp_path), "tag", "--delete")

    def test_skip_existence_check(self, tmp_path: Path) -> None:
        runner = FakeRunner(
            {
                **_inside(tmp_path),
                git(tmp_path, "tag", "--delete", "v1.0.0"): (0, "", ""),
            }
        )

        outcome = retract(
            V,
            [TagProvider.from_config(config_for(tmp_path), runner)],
            RetractOptions(check_existence_first=False),
        )

        assert outcome.succeeded
        assert not runner.ran("git", "-C", str(tmp_path), "tag", "--list")
        assert not runner.ran("git", "-C", str(tmp_path), "ls-remote")

    def test_failed_deletion_stops_the_run(self, tmp_path: Path) -> None:
        responses = _tags_present(tmp_path)
        responses[git(tmp_path, "push", "origin", f":{REMOTE_REF}")] = (1, "", "permission denied")
        runner = FakeRunner(responses)

        outcome = retract(V, _providers(tmp_path, runner), RetractOptions(force_online=True))

        assert not outcome.succeeded
        assert outcome.code == int(ErrorCode.COMMAND_ERROR)
        assert outcome.messages[0] == "git(local): The tag v1.0.0 has been deleted"
        assert outcome.messages[-1].startswith("git(remote): An error occurred while executing")
        assert not runner.ran("npm")


class TestNpm:
    def test_unpublish_needs_force_online(self, tmp_path: Path) -> None:
        runner = FakeRunner({npm("view", "pkg@1.0.0", "version"): (0, "1.0.0\n", "")})

        outcome = retract(V, [RegistryProvider.from_config(config_for(tmp_path), runner, package_name="pkg")])

        assert outcome.succeeded
        assert outcome.messages == (
            "npm(remote): You need to specify --force-online to unpublish pkg@1.0.0. "
            "This action is irreversible",
        )

    def test_missing_version_is_not_unpublished(self, tmp_path: Path) -> None:
        runner = FakeRunner({npm("view", "pkg@1.0.0", "version"): (0, "", "")})

        outcome = retract(
            V,
            [RegistryProvider.from_config(config_for(tmp_path), runner, package_name="pkg")],
            RetractOptions(force_online=True),
        )

        assert outcome.succeeded
        assert outcome.messages == ("npm(remote): The version 1.0.0 does not exist",)
        assert not runner.ran("npm", "unpublish")

    def test_unknown_package_is_not_unpublished(self, tmp_path: Path) -> None:
        runner = FakeRunner({npm("view", "pkg@1.0.0", "version"): (1, "", "npm ERR! code E404")})

        outcome = retract(
            V,
            [RegistryProvider.from_config(config_for(tmp_path), runner, package_name="pkg")],
            RetractOptions(force_online=True),
        )

        assert outcome.succeeded
        assert outcome.code == 0
        assert outcome.messages == ("npm(remote): The package pkg does not exist",)
        assert not runner.ran("npm", "unpublish")


class TestPipeline:
    def test_git_runs_before_npm(self, tmp_path: Path) -> None:
        responses = _tags_present(tmp_path)
        responses[git(tmp_path, "push", "origin", f":{REMOTE_REF}")] = (0, "", "")
        responses[npm("view", "pkg@1.0.0", "version")] = (0, "1.0.0", "")
        responses[npm("unpublish", "--force", "pkg@1.0.0")] = (0, "", "")
        runner = FakeRunner(responses)

        outcome = retract(V, _providers(tmp_path, runner), RetractOptions(force_online=True))

        assert outcome.succeeded
        assert outcome.messages == (
            "git(local): The tag v1.0.0 has been deleted",
            "git(remote): The tag v1.0.0 has been deleted",
            "npm(remote): The package pkg@1.0.0 has been unpublished",
        )

    def test_requirement_failure_aborts_before_any_change(self, tmp_path: Path) -> None:
        runner = FakeRunner(_inside(tmp_path))

        outcome = retract(V, _providers(tmp_path, runner, package_name=None), RetractOptions(force_online=True))

        assert not outcome.succeeded
        assert outcome.code == int(ErrorCode.ENV_ERROR)
        assert len(outcome.messages) == 1
        assert outcome.messages[0].startswith("npm(local): the file package.json does not exist")
        assert runner.calls == [list(git(tmp_path, "rev-parse", "--is-inside-work-tree"))]

    def test_missing_tool_aborts(self, tmp_path: Path) -> None:
        runner = FakeRunner(available=("npm",))

        outcome = retract(V, _providers(tmp_path, runner))

        assert not outcome.succeeded
        assert outcome.messages == ("git(local): git is required but was not found",)
        assert runner.calls == []


class TestDiscardThroughRetract:
    def test_release_commit_at_head_is_discarded(self, tmp_path: Path) -> None:
        responses = _tags_present(tmp_path)
        responses.update(
            {
                git(tmp_path, "rev-parse", "--verify", "--quiet", "v1.0.0^{commit}"): (0, "c1\n", ""),
                git(tmp_path, "log", "-n", "1", "--format=%B", "c1"): (0, "1.0.0\n", ""),
                git(tmp_path, "rev-parse", "--verify", "--quiet", "HEAD^{commit}"): (0, "c1\n", ""),
                git(tmp_path, "rev-parse", "--verify", "--quiet", "c1~^{commit}"): (0, "c0\n", ""),
                git(tmp_path, "reset", "--soft", "c0"): (0, "", ""),
            }
        )
        runner = FakeRunner(responses)

        outcome = retract(
            V, [TagProvider.from_config(config_for(tmp_path), runner)], RetractOptions(discard_commit=True)
        )

        assert outcome.succeeded
        assert outcome.messages[:2] == (
            "git(local): The tag v1.0.0 has been deleted",
            "git(local): The last commit (tagged by v1.0.0) has been discarded",
        )
        # The commit is resolved while the tag still exists.
        resolve = list(git(tmp_path, "rev-parse", "--verify", "--quiet", "v1.0.0^{commit}"))
        delete = list(git(tmp_path, "tag", "--delete", "v1.0.0"))
        assert runner.calls.index(resolve) < runner.calls.index(delete)

    def test_non_release_commit_is_kept(self, tmp_path: Path) -> None:
        responses = _tags_present(tmp_path)
        responses.update(
            {
                git(tmp_path, "rev-parse", "--verify", "--quiet", "v1.0.0^{commit}"): (0, "c1\n", ""),
                git(tmp_path, "log", "-n", "1", "--format=%B", "c1"): (0, "feat: add things\n", ""),
            }
        )
        runner = FakeRunner(responses)

        outcome = retract(
            V, [TagProvider.from_config(config_for(tmp_path), runner)], RetractOptions(discard_commit=True)
        )

        assert outcome.succeeded
        assert outcome.messages[:2] == (
            "git(local): The tag v1.0.0 has been deleted",
            "git(local): The discard has been canceled: the tag v1.0.0 does not point to a release commit",
        )
        assert runner.ran("git", "-C", str(tmp_path), "tag", "--delete", "v1.0.0")
        assert not runner.ran("git", "-C", str(tmp_path), "reset")
