"""Decide which records a merge writes.

Pure functions over lists of JsonItemFile; no I/O. Collisions are resolved
silently according to the policy, never raised.

Within one incoming batch the first record for a given path wins under both
policies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from jsonfs.models import JsonItemFile


class MergePolicy(Enum):
    SKIP_EXISTING = "skip"              # keep what is on disk, drop colliding new items
    OVERWRITE_EXISTING = "overwrite"    # new items replace on-disk items with the same path


@dataclass
class MergePlan:
    """Result of a merge: what to save, and what happened to each incoming path."""

    to_save: list[JsonItemFile] = field(default_factory=list)
    added: list[str] = field(default_factory=list)       # incoming, new path
    replaced: list[str] = field(default_factory=list)    # incoming, replaced an on-disk item
    skipped: list[str] = field(default_factory=list)     # incoming, dropped

    @property
    def kept(self) -> int:
        """On-disk items carried through unchanged."""
        return len(self.to_save) - len(self.added) - len(self.replaced)


def merge_items(
    existing: Iterable[JsonItemFile],
    incoming: Iterable[JsonItemFile],
    policy: MergePolicy = MergePolicy.SKIP_EXISTING,
) -> MergePlan:
    """Combine an on-disk collection with new records under policy.

    SKIP_EXISTING stages the on-disk records, then each incoming record whose
    path is not staged yet. OVERWRITE_EXISTING stages incoming records first,
    then each on-disk record whose path is not staged yet.
    """
    existing = [item.normalized() for item in existing]
    incoming = [item.normalized() for item in incoming]
    on_disk = {item.relative_path for item in existing}

    plan = MergePlan()
    staged: dict[str, JsonItemFile] = {}

    def stage(item: JsonItemFile, *, is_new: bool) -> None:
        path = item.relative_path
        if path in staged:
            if is_new:
                plan.skipped.append(path)
            return
        staged[path] = item
        if is_new:
            (plan.replaced if path in on_disk else plan.added).append(path)

    if policy is MergePolicy.OVERWRITE_EXISTING:
        for item in incoming:
            stage(item, is_new=True)
        for item in existing:
            stage(item, is_new=False)
    else:
        for item in existing:
            stage(item, is_new=False)
        for item in incoming:
            stage(item, is_new=True)

    plan.to_save = list(staged.values())
    return plan
