from __future__ import annotations

from ..extensions import db
from agraria.time_utils import to_utc_z


class StorageEntry(db.Model):
    """
    One key of the application's key-value storage.

    WHY: Every collection (users, environments, sales, ...) is a single JSON
    document read and written as a whole. There are no per-record rows and
    no foreign keys; the value column holds the serialized collection.
    """
    __tablename__ = "storage_entries"

    key = db.Column(db.String(128), primary_key=True)
    value = db.Column(db.Text, nullable=False)

    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    def __repr__(self) -> str:
        return f"<StorageEntry key={self.key!r} size={len(self.value or '')}>"

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "size": len(self.value or ""),
            "updated_at": to_utc_z(self.updated_at),
        }
