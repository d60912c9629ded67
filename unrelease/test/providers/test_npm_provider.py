from __future__ import annotations

from pathlib import Path

import pytest

from unrelease.core.result import Err, Ok
from unrelease.core.version import normalize
from unrelease.providers.base import ExistenceStatus, Requirements, Scope
from unrelease.providers.npm import RegistryProvider
from unrelease.test.fakes import FakeRunner, config_for, npm

V = normalize("1.0.0").unwrap()
REQ = Requirements(package_name="pkg")


def _provider(tmp_path: Path, runner: FakeRunner, package_name: str | None = None) -> RegistryProvider:
    return RegistryProvider.from_config(config_for(tmp_path), runner, package_name=package_name)


class TestRequirements:
    def test_reads_name_from_parent_manifest(self, tmp_path: Path) -> None:
        manifest = tmp_path / "package.json"
        manifest.write_text('{"name": "pkg"}', encoding="utf-8")
        sub = tmp_path / "src"
        sub.mkdir()

        provider = RegistryProvider.from_config(config_for(sub), FakeRunner())
        requirements = provider.check_requirements().unwrap()

        assert requirements.package_name == "pkg"
        assert requirements.manifest == manifest.resolve()

    def test_manifest_not_found(self, tmp_path: Path) -> None:
        result = _provider(tmp_path, FakeRunner()).check_requirements()

        assert isinstance(result, Err)
        assert result.error.kind == "manifest_not_found"
        assert "the file package.json does not exist" in result.error.message

    def test_package_name_skips_manifest(self, tmp_path: Path) -> None:
        result = _provider(tmp_path, FakeRunner(), package_name="other").check_requirements()
        assert result == Ok(Requirements(package_name="other"))

    def test_npm_missing(self, tmp_path: Path) -> None:
        result = _provider(tmp_path, FakeRunner(available=("git",)), "pkg").check_requirements()

        assert isinstance(result, Err)
        assert result.error.kind == "tool_missing"


class TestExistence:
    def test_present(self, tmp_path: Path) -> None:
        runner = FakeRunner({npm("view", "pkg@1.0.0", "version"): (0, "1.0.0\n", "")})

        existence = _provider(tmp_path, runner).check_existence(V, Scope.REMOTE, REQ).unwrap()

        assert existence.present
        assert existence.message == "pkg@1.0.0 does exist"

    def test_version_missing(self, tmp_path: Path) -> None:
        runner = FakeRunner({npm("view", "pkg@1.0.0", "version"): (0, "", "")})

        existence = _provider(tmp_path, runner).check_existence(V, Scope.REMOTE, REQ).unwrap()

        assert existence.status == ExistenceStatus.VERSION_MISSING
        assert existence.message == "The version 1.0.0 does not exist"
        assert existence.code == 1

    def test_package_missing(self, tmp_path: Path) -> None:
        runner = FakeRunner({npm("view", "pkg@1.0.0", "version"): (1, "", "E404")})

        existence = _provider(tmp_path, runner).check_existence(V, Scope.REMOTE, REQ).unwrap()

        assert existence.status == ExistenceStatus.MISSING
        assert existence.message == "The package pkg does not exist"
        assert existence.code == 2

    def test_local_scope_is_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(AssertionError):
            _provider(tmp_path, FakeRunner()).check_existence(V, Scope.LOCAL, REQ)


class TestDelete:
    def test_unpublish(self, tmp_path: Path) -> None:
        runner = FakeRunner({npm("unpublish", "--force", "pkg@1.0.0"): (0, "- pkg@1.0.0", "")})
        result = _provider(tmp_path, runner).delete(V, Scope.REMOTE, REQ)
        assert result == Ok("The package pkg@1.0.0 has been unpublished")

    def test_unpublish_failure(self, tmp_path: Path) -> None:
        runner = FakeRunner({npm("unpublish", "--force", "pkg@1.0.0"): (1, "", "E403")})

        result = _provider(tmp_path, runner).delete(V, Scope.REMOTE, REQ)

        assert isinstance(result, Err)
        assert result.error.message.startswith("An error occurred while unpublishing pkg@1.0.0: ")
