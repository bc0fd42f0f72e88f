from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import EntityKind
from .model import Note, NoteLink


class NoteRepository(Protocol):
    def list_all(self) -> Sequence[Note]:
        raise NotImplementedError

    def get(self, note_id: str) -> Optional[Note]:
        raise NotImplementedError

    def create(
        self,
        *,
        title: Optional[str],
        content: str,
        link: Optional[tuple[EntityKind, str]] = None,
    ) -> str:
        """Create the note and, when given, its first link in the same transaction."""

        raise NotImplementedError

    def update(self, note_id: str, *, title: Optional[str], content: str) -> bool:
        raise NotImplementedError

    def delete(self, note_id: str) -> bool:
        raise NotImplementedError

    def list_links(self, note_id: Optional[str] = None) -> Sequence[NoteLink]:
        raise NotImplementedError

    def list_for_target(self, target_type: EntityKind, target_id: str) -> Sequence[Note]:
        raise NotImplementedError

    def find_link(self, note_id: str, target_type: EntityKind, target_id: str) -> Optional[NoteLink]:
        raise NotImplementedError

    def get_link(self, link_id: str) -> Optional[NoteLink]:
        raise NotImplementedError

    def create_link(self, note_id: str, target_type: EntityKind, target_id: str) -> str:
        raise NotImplementedError

    def delete_link(self, link_id: str) -> bool:
        raise NotImplementedError
