from __future__ import annotations

from .api import SettingsApi, SettingsApiRequest
from .areas import Area, AreaService, InMemoryAreaService, create_area, generate_area_id, get_area
from .backup_service import BackupPort, BackupService
from .conversion import ConverterRegistry, SettingsConverter
from .documents import Document, UriMap, merge_documents
from .errors import (
    ApiActionNotFound,
    AreaAlreadyExists,
    AreaNotFound,
    ConversionError,
    InvalidArgument,
    SettingsError,
    UnsupportedRequestShape,
)
from .events import SettingsChanged, SettingsChangedChannel
from .settings_service import SettingsService

__all__ = [
    "SettingsService",
    "SettingsApi",
    "SettingsApiRequest",
    "BackupPort",
    "BackupService",
    "ConverterRegistry",
    "SettingsConverter",
    "Document",
    "UriMap",
    "merge_documents",
    "SettingsChanged",
    "SettingsChangedChannel",
    "Area",
    "AreaService",
    "InMemoryAreaService",
    "create_area",
    "generate_area_id",
    "get_area",
    "SettingsError",
    "InvalidArgument",
    "UnsupportedRequestShape",
    "ConversionError",
    "ApiActionNotFound",
    "AreaNotFound",
    "AreaAlreadyExists",
]
