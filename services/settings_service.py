from __future__ import annotations

import copy
import logging
import threading
from typing import Any, Callable, Mapping, TypeVar

from persistence.interfaces import StorageService

from .backup_service import BackupPort
from .conversion import ConverterRegistry
from .documents import Document, UriMap, merge_documents, require_document, require_uri
from .errors import InvalidArgument, SettingsError, UnsupportedRequestShape
from .events import SettingsChanged, SettingsChangedChannel

logger = logging.getLogger(__name__)

T = TypeVar("T")

STORAGE_NAME = "SettingsService.json"
BACKUP_SECTION = "Settings"


class SettingsService:
    """
    Owner of the uri -> settings document map.

    Every read and write of the map, and every persistence write caused by a
    mutation, happens under one lock. Mutations are applied to a copy of the
    map which only becomes live once storage accepted it, so memory and disk
    never diverge. Change notifications are queued under the lock and
    delivered after it is released.
    """

    def __init__(
        self,
        storage: StorageService,
        backup: BackupPort,
        *,
        storage_name: str = STORAGE_NAME,
        backup_section: str = BACKUP_SECTION,
        converters: ConverterRegistry | None = None,
        channel: SettingsChangedChannel | None = None,
    ):
        if storage is None:
            raise InvalidArgument("storage is required")
        if backup is None:
            raise InvalidArgument("backup is required")

        self._storage = storage
        self._storage_name = storage_name
        self._backup_section = backup_section
        self._converters = converters if converters is not None else ConverterRegistry()
        self._channel = channel if channel is not None else SettingsChangedChannel()

        self._lock = threading.RLock()
        self._settings = UriMap()

        backup.register(self.contribute_backup, self.restore_from_backup)

    @property
    def converters(self) -> ConverterRegistry:
        return self._converters

    @property
    def channel(self) -> SettingsChangedChannel:
        return self._channel

    def initialize(self) -> None:
        with self._lock:
            self._try_load()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_typed(self, uri: str, settings_type: type[T]) -> T:
        """
        Return the document at `uri` as `settings_type`.

        A missing document is created from the type's default instance, stored
        and persisted, so callers always get a value. Raises ConversionError if
        the stored document does not fit the type; the document is left as is.
        """
        uri = require_uri(uri)

        with self._lock:
            if uri in self._settings:
                return self._converters.from_document(settings_type, copy.deepcopy(self._settings[uri]))

            instance = self._converters.create_default(settings_type)
            document = self._converters.to_document(settings_type, instance)

            candidate = self._settings.copy()
            candidate[uri] = document
            self._commit(candidate)
            logger.info("Created default settings for %s", uri)
            return instance

    def get_raw(self, uri: str) -> Document:
        uri = require_uri(uri)

        with self._lock:
            if uri not in self._settings:
                return {}
            return copy.deepcopy(self._settings[uri])

    def uris(self) -> list[str]:
        with self._lock:
            return list(self._settings)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def replace(self, uri: str, settings: Mapping[str, Any]) -> None:
        uri = require_uri(uri)
        document = require_document(settings)

        with self._lock:
            candidate = self._settings.copy()
            candidate[uri] = document
            self._commit(candidate)
            self._channel.enqueue(SettingsChanged(uri))

        self._channel.flush()

    def import_merge(self, uri: str, settings: Mapping[str, Any]) -> None:
        uri = require_uri(uri)
        document = require_document(settings)

        with self._lock:
            candidate = self._settings.copy()
            if uri in candidate:
                merge_documents(candidate[uri], document)
            else:
                candidate[uri] = document
            self._commit(candidate)
            self._channel.enqueue(SettingsChanged(uri))

        self._channel.flush()

    def import_settings(self, uri: str, settings: Any) -> None:
        """Merge either a raw document or a typed settings value into `uri`."""
        uri = require_uri(uri)
        if not isinstance(settings, Mapping):
            settings = self._converters.to_document(type(settings), settings)
        self.import_merge(uri, settings)

    def import_multiple(self, settings: Any) -> None:
        """
        Merge every uri -> document entry, one at a time.

        Not a transaction: each entry is persisted and notified on its own, and
        an entry that fails leaves the ones before it applied.
        """
        if not isinstance(settings, Mapping):
            raise UnsupportedRequestShape(
                f"import_multiple expects an object of uri -> settings, got {type(settings).__name__}"
            )

        for uri, document in list(settings.items()):
            self.import_merge(uri, document)

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def subscribe(self, uri: str, settings_type: type[T], callback: Callable[[T], None]) -> None:
        """
        Call `callback` now with the current value at `uri`, then again after
        every later change of that uri. Subscriptions last as long as the store.
        """
        uri = require_uri(uri)
        if callback is None:
            raise InvalidArgument("callback is required")

        callback(self.get_typed(uri, settings_type))

        def _on_changed(event: SettingsChanged) -> None:
            callback(self.get_typed(uri, settings_type))

        self._channel.subscribe(uri, _on_changed)

    # ------------------------------------------------------------------
    # Backup / restore
    # ------------------------------------------------------------------

    def create_backup(self) -> dict[str, Document]:
        with self._lock:
            return self._settings.to_document()

    def restore_backup(self, snapshot: Any) -> None:
        """
        Overlay every uri of `snapshot` onto the map (overwrite, no merge).

        Entries not in the snapshot stay untouched. The map is persisted once.
        If an entry is malformed, the entries before it are still persisted and
        notified before the error is raised.
        """
        if not isinstance(snapshot, Mapping):
            raise UnsupportedRequestShape(
                f"restore_backup expects an object of uri -> settings, got {type(snapshot).__name__}"
            )

        restored: list[str] = []
        failure: SettingsError | None = None

        with self._lock:
            candidate = self._settings.copy()
            for uri, document in snapshot.items():
                try:
                    candidate[require_uri(uri)] = require_document(document)
                except SettingsError as e:
                    failure = e
                    break
                restored.append(uri)

            # An empty snapshot still writes once; a first entry that fails writes nothing.
            if restored or failure is None:
                self._commit(candidate)
                for uri in restored:
                    self._channel.enqueue(SettingsChanged(uri))
                logger.info("Restored %d settings document(s) from backup", len(restored))

        self._channel.flush()

        if failure is not None:
            raise failure

    def contribute_backup(self, envelope: dict[str, Any]) -> None:
        envelope[self._backup_section] = self.create_backup()

    def restore_from_backup(self, envelope: Mapping[str, Any]) -> None:
        if self._backup_section not in envelope:
            logger.debug("Backup has no %r section; nothing to restore", self._backup_section)
            return
        self.restore_backup(envelope[self._backup_section])

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _commit(self, candidate: UriMap) -> None:
        # Caller holds self._lock. The live map only changes once the write succeeded.
        self._storage.write(self._storage_name, candidate.to_document())
        self._settings = candidate

    def _try_load(self) -> None:
        persisted = self._storage.try_read(self._storage_name)
        if persisted is None:
            logger.info("No persisted settings found under %s; starting empty", self._storage_name)
            return
        if not isinstance(persisted, Mapping):
            logger.warning(
                "Ignoring persisted settings under %s: expected an object, got %s",
                self._storage_name,
                type(persisted).__name__,
            )
            return

        loaded = 0
        for uri, document in persisted.items():
            if not isinstance(uri, str) or not isinstance(document, Mapping):
                logger.warning("Skipping malformed persisted settings entry %r", uri)
                continue
            self._settings[uri] = require_document(document)
            loaded += 1
        logger.info("Loaded %d settings document(s) from %s", loaded, self._storage_name)
