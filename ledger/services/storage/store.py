"""
Typed Record Store

The single point of contact between the application and the
persistence medium. Every collection is stored as one JSON array
under its own key; the settings singleton has a key of its own.

FAILURE POLICY:
- Reads that fail (medium unavailable, corrupt text, invalid records)
  are logged and return the collection default
- Writes that fail are logged and dropped; the method returns False
- Nothing here raises a StorageError to the caller

A mutation whose collection cannot be read is dropped rather than
written over the unreadable data.

The store trusts its caller: it checks record TYPES, not business
rules. Use ledger.validation before handing records over.
"""

from datetime import datetime, timezone
from typing import Optional, Union

from ledger.audit import AuditLogger
from ledger.models.audit import AuditEvent, AuditEventBuilder
from ledger.models.defaults import default_app_settings
from ledger.models.records import AppSettings, LedgerRecord
from ledger.services.storage.interface import (
    SnapshotError,
    StorageBackend,
    StorageError,
)
from ledger.services.storage.registry import (
    COLLECTION_SPECS,
    SETTINGS_KEY,
    Collection,
    CollectionSpec,
    decode_settings,
    encode_settings,
)
from ledger.services.storage.snapshot import (
    Snapshot,
    decode_snapshot,
    encode_snapshot,
)


DEFAULT_KEY_PREFIX = "daily-expenses-"

CollectionRef = Union[Collection, str]


class RecordStore:
    """
    Identity-keyed collections on top of a StorageBackend.

    Records handed out are freshly decoded on every call, so callers
    can modify them freely; nothing changes until they are upserted.
    """

    def __init__(
        self,
        backend: StorageBackend,
        audit_logger: Optional[AuditLogger] = None,
        key_prefix: str = DEFAULT_KEY_PREFIX,
    ):
        self._backend = backend
        self._audit_logger = audit_logger or AuditLogger()
        self._key_prefix = key_prefix

    @classmethod
    def open_or_create(
        cls,
        backend: StorageBackend,
        audit_logger: Optional[AuditLogger] = None,
        key_prefix: str = DEFAULT_KEY_PREFIX,
    ) -> "RecordStore":
        """Open a store, seeding defaults for anything never persisted."""
        store = cls(backend, audit_logger=audit_logger, key_prefix=key_prefix)
        store.seed_defaults()
        return store

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _audit(self, event: AuditEvent) -> None:
        self._audit_logger.log(event)

    def _spec(self, collection: CollectionRef) -> CollectionSpec:
        return COLLECTION_SPECS[Collection(collection)]

    def _key(self, suffix: str) -> str:
        return f"{self._key_prefix}{suffix}"

    def _load(self, spec: CollectionSpec) -> list:
        """
        Read a collection, raising instead of degrading.

        Raises:
            StorageError: If the backend or the stored text fails
        """
        raw = self._backend.read(self._key(spec.key))
        if raw is None:
            return spec.default()
        return spec.decode(raw)

    def _persist(self, key: str, raw: str) -> bool:
        try:
            self._backend.write(key, raw)
        except StorageError as e:
            self._audit(AuditEventBuilder.storage_write_failed(key, str(e)))
            return False
        return True

    # -------------------------------------------------------------------------
    # Seeding
    # -------------------------------------------------------------------------

    def seed_defaults(self) -> list[str]:
        """
        Write default values for every key that was never persisted.

        Keys that already hold data (even an empty list) are left alone,
        so seeding happens at most once per medium.

        Returns:
            Names of the collections that were seeded
        """
        seeded = []

        for spec in COLLECTION_SPECS.values():
            key = self._key(spec.key)
            try:
                if self._backend.contains(key):
                    continue
            except StorageError as e:
                self._audit(AuditEventBuilder.storage_read_failed(key, str(e)))
                continue
            defaults = spec.default()
            if self._persist(key, spec.encode(defaults)):
                seeded.append(spec.collection.value)
                self._audit(AuditEventBuilder.collection_seeded(
                    spec.collection.value, len(defaults)
                ))

        key = self._key(SETTINGS_KEY)
        try:
            needs_settings = not self._backend.contains(key)
        except StorageError as e:
            self._audit(AuditEventBuilder.storage_read_failed(key, str(e)))
            needs_settings = False
        if needs_settings and self._persist(key, encode_settings(default_app_settings())):
            seeded.append(SETTINGS_KEY)
            self._audit(AuditEventBuilder.collection_seeded(SETTINGS_KEY, 1))

        return seeded

    # -------------------------------------------------------------------------
    # Collections
    # -------------------------------------------------------------------------

    def get_all(self, collection: CollectionRef) -> list:
        """
        Get every record of a collection, in stored order.

        Returns the collection default if nothing was ever stored
        or if the stored data cannot be read.
        """
        spec = self._spec(collection)
        try:
            return self._load(spec)
        except StorageError as e:
            self._audit(AuditEventBuilder.storage_read_failed(
                self._key(spec.key), str(e)
            ))
            return spec.default()

    def get(self, collection: CollectionRef, record_id: str) -> Optional[LedgerRecord]:
        """Get one record by id, or None."""
        for record in self.get_all(collection):
            if record.id == record_id:
                return record
        return None

    def upsert(self, collection: CollectionRef, record: LedgerRecord) -> bool:
        """
        Replace the record with the same id, or append it.

        A replaced record keeps its position in the collection.

        Returns:
            True if the updated collection was persisted

        Raises:
            TypeError: If the record is not of the collection's model
        """
        spec = self._spec(collection)
        if not isinstance(record, spec.model):
            raise TypeError(
                f"{spec.collection.value} holds {spec.model.__name__}, "
                f"got {type(record).__name__}"
            )

        key = self._key(spec.key)
        try:
            records = self._load(spec)
        except StorageError as e:
            self._audit(AuditEventBuilder.storage_read_failed(key, str(e)))
            self._audit(AuditEventBuilder.storage_write_failed(
                key, "collection unreadable; upsert dropped"
            ))
            return False

        replaced = False
        for index, existing in enumerate(records):
            if existing.id == record.id:
                records[index] = record
                replaced = True
                break
        if not replaced:
            records.append(record)

        if not self._persist(key, spec.encode(records)):
            return False

        self._audit(AuditEventBuilder.record_upserted(
            spec.collection.value, record.id, replaced
        ))
        return True

    def delete(self, collection: CollectionRef, record_id: str) -> bool:
        """
        Remove the record with this id.

        Deleting an id that is not there is a no-op.

        Returns:
            True if a record was removed and the change persisted
        """
        spec = self._spec(collection)
        key = self._key(spec.key)
        try:
            records = self._load(spec)
        except StorageError as e:
            self._audit(AuditEventBuilder.storage_read_failed(key, str(e)))
            return False

        remaining = [record for record in records if record.id != record_id]
        if len(remaining) == len(records):
            return False

        if not self._persist(key, spec.encode(remaining)):
            return False

        self._audit(AuditEventBuilder.record_deleted(spec.collection.value, record_id))
        return True

    # -------------------------------------------------------------------------
    # Settings singleton
    # -------------------------------------------------------------------------

    def get_app_settings(self) -> AppSettings:
        """Get user settings, or the defaults if unavailable."""
        key = self._key(SETTINGS_KEY)
        try:
            raw = self._backend.read(key)
            if raw is None:
                return default_app_settings()
            return decode_settings(raw)
        except StorageError as e:
            self._audit(AuditEventBuilder.storage_read_failed(key, str(e)))
            return default_app_settings()

    def save_app_settings(self, settings: AppSettings) -> bool:
        if not isinstance(settings, AppSettings):
            raise TypeError(f"Expected AppSettings, got {type(settings).__name__}")
        return self._persist(self._key(SETTINGS_KEY), encode_settings(settings))

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    def export_snapshot(self) -> str:
        """Export every collection plus settings as one JSON document."""
        sections = {
            spec.field_name: self.get_all(spec.collection)
            for spec in COLLECTION_SPECS.values()
        }
        snapshot = Snapshot(
            **sections,
            settings=self.get_app_settings(),
            export_date=datetime.now(timezone.utc),
        )
        self._audit(AuditEventBuilder.snapshot_exported({
            spec.collection.value: len(sections[spec.field_name])
            for spec in COLLECTION_SPECS.values()
        }))
        return encode_snapshot(snapshot)

    def import_snapshot(self, blob: Union[str, bytes]) -> bool:
        """
        Replace every collection present in the snapshot.

        Sections missing from the snapshot are left untouched. If the
        document is malformed, or the write fails, nothing changes.

        Returns:
            True if the snapshot was applied
        """
        try:
            snapshot = decode_snapshot(blob)
        except SnapshotError as e:
            self._audit(AuditEventBuilder.snapshot_import_failed(str(e)))
            return False

        documents = {}
        for spec in COLLECTION_SPECS.values():
            records = snapshot.section(spec.collection)
            if records is not None:
                documents[self._key(spec.key)] = spec.encode(records)
        if snapshot.settings is not None:
            documents[self._key(SETTINGS_KEY)] = encode_settings(snapshot.settings)

        if documents:
            try:
                self._backend.write_many(documents)
            except StorageError as e:
                self._audit(AuditEventBuilder.storage_write_failed(
                    ", ".join(documents), str(e)
                ))
                return False

        self._audit(AuditEventBuilder.snapshot_imported(snapshot.present_sections()))
        return True
