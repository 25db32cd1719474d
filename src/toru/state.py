"""Per-vault state: id counter, dependency graph and name index."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from toru import log
from toru.errors import RecordError
from toru.graph import DependencyGraph
from toru.index import NameIndex
from toru.io_utils import read_text, rewrite_text
from toru.tasks import store

STATE_FILE = "state.yaml"


def state_path(vault: Path) -> Path:
    return vault / STATE_FILE


@dataclass
class VaultState:
    """Everything derived from a vault's task files, persisted as one file.

    Loaded once at the start of a command, mutated in memory by the task
    operations, and saved once when the command succeeds. There is no
    locking and no journal; a crash while saving can leave a corrupt file,
    which :meth:`load` then refuses rather than silently rebuilding.
    """

    vault: Path
    next_id: int = 0
    graph: DependencyGraph = field(default_factory=DependencyGraph)
    index: NameIndex = field(default_factory=NameIndex)

    @classmethod
    def load(cls, vault: Path) -> VaultState:
        path = state_path(vault)
        if path.is_file():
            return cls.from_dict(vault, yaml.safe_load(read_text(path)))

        state = cls.bootstrap(vault)
        state.save()
        return state

    @classmethod
    def bootstrap(cls, vault: Path) -> VaultState:
        """Rebuild the state from a full scan of the task files.

        Dependencies on tasks without a file are dropped from the graph and
        from the record, so a later id can never land on one.
        """
        tasks = store.load_all(vault, read_only=False)
        if tasks:
            log.info(f"No {STATE_FILE} in {vault}, rebuilding it from the task files")
        known = {task.id for task in tasks}
        for task in tasks:
            dangling = sorted(task.dependencies - known)
            if dangling:
                log.warn(f"Task {task.id} depends on missing task(s) {dangling}, dropping them")
                task.dependencies -= set(dangling)
                store.save(task)

        next_id = max(known) + 1 if known else 0
        log.debug(f"Bootstrapped state for {vault}: {len(tasks)} task(s), next id {next_id}")
        return cls(
            vault=vault,
            next_id=next_id,
            graph=DependencyGraph.create(tasks),
            index=NameIndex.create(tasks),
        )

    def allocate_id(self) -> int:
        """Hand out the next id. Ids are never reused, even after deletion."""
        task_id = self.next_id
        self.next_id += 1
        return task_id

    def save(self) -> None:
        rewrite_text(state_path(self.vault), yaml.safe_dump(self.to_dict(), sort_keys=False, allow_unicode=True))
        log.debug(f"Saved state for {self.vault}")

    # ── serialization ────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        return {
            "next_id": self.next_id,
            "index": self.index.to_dict(),
            "deps": self.graph.to_dict(),
        }

    @classmethod
    def from_dict(cls, vault: Path, raw: Any) -> VaultState:
        if not isinstance(raw, dict):
            raise RecordError(f"{state_path(vault)} does not hold a state mapping")
        try:
            next_id = int(raw["next_id"])
        except KeyError as exc:
            raise RecordError(f"{state_path(vault)} is missing 'next_id'") from exc
        except (TypeError, ValueError) as exc:
            raise RecordError(f"Malformed 'next_id' in {state_path(vault)}: {exc}") from exc
        if next_id < 0:
            raise RecordError(f"Negative 'next_id' in {state_path(vault)}")
        return cls(
            vault=vault,
            next_id=next_id,
            graph=DependencyGraph.from_dict(raw.get("deps")),
            index=NameIndex.from_dict(raw.get("index")),
        )
