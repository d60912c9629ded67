from __future__ import annotations

import json
from pathlib import Path

from unrelease.core.errors import RetractError
from unrelease.core.result import Err, Ok, Result
from unrelease.core.structured import as_str_dict, get_str

__all__ = ["find_manifest", "read_package_name"]


def find_manifest(start: Path, filename: str = "package.json") -> Path | None:
    """Walk from ``start`` up to the filesystem root looking for ``filename``."""
    start = start.resolve()
    for directory in (start, *start.parents):
        candidate = directory / filename
        if candidate.is_file():
            return candidate
    return None


def read_package_name(path: Path) -> Result[str, RetractError]:
    """Read the ``name`` field of a package manifest."""
    try:
        obj: object = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        return Err(RetractError(kind="manifest_invalid", message=f"cannot read {path}: {e}"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        return Err(RetractError(kind="manifest_invalid", message=f"invalid JSON in {path}: {e}"))

    data = as_str_dict(obj)
    name = get_str(data, "name") if data is not None else None
    if name is None:
        return Err(
            RetractError(
                kind="manifest_invalid",
                message=f"{path} has no package name",
                hint='Add a "name" field or pass --npm-package-name.',
            )
        )
    return Ok(name)
