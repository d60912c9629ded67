"""npm manifest discovery and registry access."""

from unrelease.npm.manifest import find_manifest, read_package_name
from unrelease.npm.registry import NpmRegistry, package_spec

__all__ = ["NpmRegistry", "find_manifest", "package_spec", "read_package_name"]
