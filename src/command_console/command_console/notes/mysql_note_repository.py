from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import EntityKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id
from .model import Note, NoteLink
from .repository import NoteRepository

_TARGET_COLUMNS = {
    EntityKind.PROJECT: "project_id",
    EntityKind.HACKATHON: "hackathon_id",
    EntityKind.APPLICATION: "application_id",
}

_LINK_COLUMNS = "link_id, note_id, project_id, hackathon_id, application_id, created_at"


def _to_note(r: dict) -> Note:
    return Note(
        note_id=r["note_id"],
        title=r.get("title"),
        content=r["content"],
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _to_link(r: dict) -> NoteLink:
    for kind, column in _TARGET_COLUMNS.items():
        if r.get(column):
            return NoteLink(
                link_id=r["link_id"],
                note_id=r["note_id"],
                target_type=kind,
                target_id=r[column],
                created_at=r.get("created_at"),
            )
    raise ValueError(f"Note link {r['link_id']} has no target")


def insert_note(cur, *, title: Optional[str], content: str, note_id: Optional[str] = None) -> str:
    note_id = note_id or new_id()
    cur.execute("INSERT INTO notes(note_id, title, content) VALUES(%s,%s,%s)", (note_id, title, content))
    return note_id


def insert_note_link(cur, note_id: str, target_type: EntityKind, target_id: str) -> str:
    link_id = new_id()
    column = _TARGET_COLUMNS[target_type]
    cur.execute(
        f"INSERT INTO note_links(link_id, note_id, {column}) VALUES(%s,%s,%s)",
        (link_id, note_id, target_id),
    )
    return link_id


class MySQLNoteRepository(NoteRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Note]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT note_id, title, content, created_at, updated_at FROM notes ORDER BY updated_at DESC, note_id")
            return [_to_note(r) for r in fetchall(cur)]

    def get(self, note_id: str) -> Optional[Note]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT note_id, title, content, created_at, updated_at FROM notes WHERE note_id=%s", (note_id,))
            r = fetchone(cur)
            return _to_note(r) if r else None

    def create(
        self,
        *,
        title: Optional[str],
        content: str,
        link: Optional[tuple[EntityKind, str]] = None,
    ) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            note_id = insert_note(cur, title=title, content=content)
            if link:
                insert_note_link(cur, note_id, link[0], link[1])
            return note_id

    def update(self, note_id: str, *, title: Optional[str], content: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE notes SET title=%s, content=%s WHERE note_id=%s", (title, content, note_id))
            return cur.rowcount > 0

    def delete(self, note_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM notes WHERE note_id=%s", (note_id,))
            return cur.rowcount > 0

    def list_links(self, note_id: Optional[str] = None) -> Sequence[NoteLink]:
        sql = f"SELECT {_LINK_COLUMNS} FROM note_links"
        params: tuple = ()
        if note_id:
            sql += " WHERE note_id=%s"
            params = (note_id,)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY created_at, link_id", params)
            return [_to_link(r) for r in fetchall(cur)]

    def list_for_target(self, target_type: EntityKind, target_id: str) -> Sequence[Note]:
        column = _TARGET_COLUMNS[target_type]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT n.note_id, n.title, n.content, n.created_at, n.updated_at
                FROM notes n
                JOIN note_links l ON l.note_id = n.note_id
                WHERE l.{column}=%s
                ORDER BY n.updated_at DESC, n.note_id
                """,
                (target_id,),
            )
            return [_to_note(r) for r in fetchall(cur)]

    def find_link(self, note_id: str, target_type: EntityKind, target_id: str) -> Optional[NoteLink]:
        column = _TARGET_COLUMNS[target_type]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_LINK_COLUMNS} FROM note_links WHERE note_id=%s AND {column}=%s", (note_id, target_id))
            r = fetchone(cur)
            return _to_link(r) if r else None

    def get_link(self, link_id: str) -> Optional[NoteLink]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_LINK_COLUMNS} FROM note_links WHERE link_id=%s", (link_id,))
            r = fetchone(cur)
            return _to_link(r) if r else None

    def create_link(self, note_id: str, target_type: EntityKind, target_id: str) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            return insert_note_link(cur, note_id, target_type, target_id)

    def delete_link(self, link_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM note_links WHERE link_id=%s", (link_id,))
            return cur.rowcount > 0
