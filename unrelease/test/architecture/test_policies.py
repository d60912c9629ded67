from __future__ import annotations

from unrelease.test.architecture._utils import (
    iter_source_files,
    matches_prefix,
    package_root,
    parse_imports,
)


def _offenders(prefix: str, allowlist: set[str]) -> list[str]:
    root = package_root()
    offenders: list[str] = []
    for file_path in iter_source_files():
        rel = file_path.relative_to(root).as_posix()
        if rel in allowlist:
            continue
        for item in parse_imports(file_path):
            if matches_prefix(item.module, prefix):
                offenders.append(f"{rel}:{item.line}: import '{item.module}'")
    return offenders


def test_processes_are_only_spawned_by_the_runner() -> None:
    offenders = _offenders("subprocess", {"platform/process.py"})
    assert not offenders, "subprocess outside platform/process.py:\n" + "\n".join(offenders)


def test_rich_is_confined_to_the_console() -> None:
    offenders = _offenders("rich", {"output/console.py"})
    assert not offenders, "rich outside output/console.py:\n" + "\n".join(offenders)


def test_engine_does_not_depend_on_the_cli() -> None:
    root = package_root()
    offenders: list[str] = []
    for file_path in iter_source_files():
        rel = file_path.relative_to(root)
        if rel.parts[0] == "cli":
            continue
        for item in parse_imports(file_path):
            if matches_prefix(item.module, "unrelease.cli") or matches_prefix(item.module, "typer"):
                offenders.append(f"{rel.as_posix()}:{item.line}: import '{item.module}'")

    assert not offenders, "engine -> cli dependency violations:\n" + "\n".join(offenders)
