"""Application services: retraction pipeline, commit discard, existence report."""

from unrelease.services.discard import DiscardDecision, discard_release_commit, resolve_tag_commit
from unrelease.services.exist import ExistReport, check_exists
from unrelease.services.retract import RetractionOutcome, RetractOptions, retract

__all__ = [
    "DiscardDecision",
    "ExistReport",
    "RetractOptions",
    "RetractionOutcome",
    "check_exists",
    "discard_release_commit",
    "resolve_tag_commit",
    "retract",
]
