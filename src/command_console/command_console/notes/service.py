from __future__ import annotations

from typing import Optional, Sequence

from ..applications.repository import ApplicationRepository
from ..common.validators import optional_text, require_enum, require_non_empty
from ..core.enums import EntityKind
from ..core.exceptions import NotFoundError
from ..hackathons.repository import HackathonRepository
from ..projects.repository import ProjectRepository
from .model import Note, NoteLink, NoteView
from .repository import NoteRepository


class NoteService:
    def __init__(
        self,
        notes: NoteRepository,
        projects: ProjectRepository,
        hackathons: HackathonRepository,
        applications: ApplicationRepository,
    ):
        self._notes = notes
        self._projects = projects
        self._hackathons = hackathons
        self._applications = applications

    def _require_target(self, target_type, target_id: str) -> tuple[EntityKind, str]:
        kind = require_enum(target_type, EntityKind, "target_type")
        target_id = require_non_empty(target_id, "target_id")
        lookup = {
            EntityKind.PROJECT: self._projects.get,
            EntityKind.HACKATHON: self._hackathons.get,
            EntityKind.APPLICATION: self._applications.get,
        }[kind]
        if not lookup(target_id):
            raise NotFoundError(f"{kind.value.capitalize()} not found")
        return kind, target_id

    def _require_note(self, note_id: str) -> Note:
        note = self._notes.get(str(note_id or ""))
        if not note:
            raise NotFoundError("Note not found")
        return note

    def list_all(self) -> list[NoteView]:
        links: dict[str, list[NoteLink]] = {}
        for link in self._notes.list_links():
            links.setdefault(link.note_id, []).append(link)
        return [NoteView(note=n, links=tuple(links.get(n.note_id, ()))) for n in self._notes.list_all()]

    def get(self, note_id: str) -> NoteView:
        note = self._require_note(note_id)
        return NoteView(note=note, links=tuple(self._notes.list_links(note.note_id)))

    def list_for_target(self, target_type, target_id: str) -> Sequence[Note]:
        kind, target_id = self._require_target(target_type, target_id)
        return self._notes.list_for_target(kind, target_id)

    def create(
        self,
        content: str,
        *,
        title: Optional[str] = None,
        target_type=None,
        target_id: Optional[str] = None,
    ) -> NoteView:
        content = require_non_empty(content, "content")
        link = self._require_target(target_type, target_id) if target_type or target_id else None
        note_id = self._notes.create(title=optional_text(title), content=content, link=link)
        return self.get(note_id)

    def update(self, note_id: str, *, content: str, title: Optional[str] = None) -> NoteView:
        content = require_non_empty(content, "content")
        note = self._require_note(note_id)
        self._notes.update(note.note_id, title=optional_text(title), content=content)
        return self.get(note.note_id)

    def delete(self, note_id: str) -> None:
        note = self._require_note(note_id)
        self._notes.delete(note.note_id)

    def link(self, note_id: str, target_type, target_id: str) -> NoteLink:
        """Link a note to a target; linking the same pair twice returns the existing link."""
        note = self._require_note(note_id)
        kind, target_id = self._require_target(target_type, target_id)

        existing = self._notes.find_link(note.note_id, kind, target_id)
        if existing:
            return existing
        link_id = self._notes.create_link(note.note_id, kind, target_id)
        return NoteLink(link_id=link_id, note_id=note.note_id, target_type=kind, target_id=target_id)

    def unlink(self, link_id: str) -> bool:
        """Remove a link; an unknown link id is a no-op and returns False."""
        if not link_id or not self._notes.get_link(str(link_id)):
            return False
        return self._notes.delete_link(str(link_id))
