"""Translate AI code changes into file store mutations"""

from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Sequence

from src.db import MemoryStore
from src.logger import get_logger
from src.models import ChangeRecord, File, FileCreate, Mutation

logger = get_logger(__name__)

EXTENSION_LANGUAGES = {
    "html": "html",
    "css": "css",
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "json": "json",
}


def language_for(file_name: str) -> str:
    """Infer the editor language tag from a file name's extension"""
    extension = file_name.rsplit(".", 1)[-1].lower()
    return EXTENSION_LANGUAGES.get(extension, "plaintext")


class _Entry(NamedTuple):
    id: Optional[str]
    name: str


def _find(entries: Sequence[_Entry], *, file_id=None, name=None) -> Optional[_Entry]:
    for entry in entries:
        if file_id is not None and entry.id == file_id:
            return entry
        if name is not None and entry.name == name:
            return entry
    return None


def resolve(change: ChangeRecord, entries: Sequence[_Entry]) -> Optional[Mutation]:
    """Decide what a single change does against the current files.

    An existing file with the same name is always updated, whatever the
    declared action. Deleting a missing file resolves to None.
    """
    if change.action == "delete":
        if change.file_id:
            target = _find(entries, file_id=change.file_id)
        else:
            target = _find(entries, name=change.file_name)
        if target is None:
            return None
        return Mutation(op="delete", file_id=target.id, file_name=target.name)

    existing = _find(entries, name=change.file_name)
    if existing is not None:
        return Mutation(
            op="update",
            file_id=existing.id,
            file_name=existing.name,
            content=change.new_content,
        )

    return Mutation(
        op="create",
        file_name=change.file_name,
        content=change.new_content,
        language=language_for(change.file_name),
    )


def _track(mutation: Mutation, entries: List[_Entry]):
    """Keep the working file list in step with an issued mutation"""
    if mutation.op == "create":
        entries.append(_Entry(mutation.file_id, mutation.file_name))
    elif mutation.op == "delete":
        for index, entry in enumerate(entries):
            if entry.id == mutation.file_id:
                del entries[index]
                break


def plan(changes: Sequence[ChangeRecord], current_files: Sequence[File]) -> List[Mutation]:
    """Dry run: the mutations apply() would issue, without touching a store"""
    entries = [_Entry(f.id, f.name) for f in current_files]
    mutations = []
    for change in changes:
        mutation = resolve(change, entries)
        if mutation is None:
            continue
        _track(mutation, entries)
        mutations.append(mutation)
    return mutations


@dataclass
class ReconcileResult:
    """Outcome of one reconciliation run"""

    applied: List[Mutation] = field(default_factory=list)
    failed: Optional[ChangeRecord] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failed is None


class Reconciler:
    """Applies change records to one project of a store, in order.

    Mutations are not atomic: the run stops at the first failing mutation and
    leaves earlier ones in place. Re-running the same changes is safe.
    """

    def __init__(self, store: MemoryStore, project_id: str):
        self.store = store
        self.project_id = project_id

    def apply(self, changes: Sequence[ChangeRecord]) -> ReconcileResult:
        result = ReconcileResult()
        entries = [_Entry(f.id, f.name) for f in self.store.list(self.project_id)]

        for change in changes:
            mutation = resolve(change, entries)
            if mutation is None:
                logger.info(f"Skipping delete of missing file: {change.file_name}")
                continue

            try:
                mutation = self._issue(mutation)
            except Exception as e:
                logger.error(
                    f"Failed to {mutation.op} {mutation.file_name} in {self.project_id}: {str(e)}",
                    exc_info=True,
                )
                result.failed = change
                result.error = str(e)
                return result

            _track(mutation, entries)
            result.applied.append(mutation)

        logger.info(
            f"Reconciled {len(result.applied)} change(s) into project {self.project_id}"
        )
        return result

    def _issue(self, mutation: Mutation) -> Mutation:
        if mutation.op == "create":
            file = self.store.create(
                FileCreate(
                    project_id=self.project_id,
                    name=mutation.file_name,
                    path=f"/{mutation.file_name}",
                    content=mutation.content,
                    language=mutation.language,
                )
            )
            return mutation.model_copy(update={"file_id": file.id})

        if mutation.op == "update":
            if self.store.update(mutation.file_id, mutation.content) is None:
                raise LookupError(f"File {mutation.file_id} not found")
            return mutation

        if not self.store.delete(mutation.file_id):
            logger.warning(f"File {mutation.file_id} was already deleted")
        return mutation


def reconcile(
    store: MemoryStore, project_id: str, changes: Sequence[ChangeRecord]
) -> ReconcileResult:
    return Reconciler(store, project_id).apply(changes)
