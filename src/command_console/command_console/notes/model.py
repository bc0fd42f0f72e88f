from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import EntityKind


@dataclass(frozen=True)
class Note:
    note_id: str
    content: str
    title: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class NoteLink:
    """Association of a note with exactly one project, hackathon or application."""

    link_id: str
    note_id: str
    target_type: EntityKind
    target_id: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class NoteView:
    note: Note
    links: tuple[NoteLink, ...] = ()
