"""
Generic request envelope -> typed settings store calls.

Each action takes an untyped JSON payload and returns a JSON-compatible
response (or None). Payload shapes are checked here; the store only sees
well-typed calls.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, ValidationError

from .documents import Document
from .errors import ApiActionNotFound, UnsupportedRequestShape
from .settings_service import SettingsService

logger = logging.getLogger(__name__)


class SettingsApiRequest(BaseModel):
    """
    Mirrors the request envelope used by `replace`, `import` and `get_settings`:
      { "uri": "<uri>", "settings": { ... } }
    """

    model_config = ConfigDict(extra="ignore")

    uri: str | None = None
    settings: dict[str, Any] | None = None


def _require_object(action: str, payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise UnsupportedRequestShape(f"{action} expects an object payload, got {type(payload).__name__}")
    return payload


def _parse_request(action: str, payload: Any) -> SettingsApiRequest:
    try:
        return SettingsApiRequest.model_validate(_require_object(action, payload))
    except ValidationError as e:
        raise UnsupportedRequestShape(f"Malformed {action} request: {e}") from e


def _require_settings(action: str, request: SettingsApiRequest) -> Document:
    if request.settings is None:
        raise UnsupportedRequestShape(f"{action} requires a `settings` object")
    return request.settings


class SettingsApi:
    def __init__(self, settings_service: SettingsService, *, log_requests: bool = False):
        self._settings = settings_service
        self._log_requests = log_requests
        self._actions: dict[str, Callable[[Any], Any]] = {
            "replace": self.replace,
            "import": self.import_,
            "import_multiple": self.import_multiple,
            "get_settings": self.get_settings,
            "restore_backup": self.restore_backup,
        }

    @property
    def actions(self) -> list[str]:
        return sorted(self._actions)

    def invoke(self, action: str, payload: Any) -> Any:
        handler = self._actions.get(action)
        if handler is None:
            raise ApiActionNotFound(f"Unknown settings action {action!r}")
        if self._log_requests:
            logger.debug("SETTINGS API: action=%s payload_type=%s", action, type(payload).__name__)
        return handler(payload)

    def replace(self, payload: Any) -> None:
        request = _parse_request("replace", payload)
        self._settings.replace(request.uri, _require_settings("replace", request))

    def import_(self, payload: Any) -> None:
        request = _parse_request("import", payload)
        self._settings.import_merge(request.uri, _require_settings("import", request))

    def import_multiple(self, payload: Any) -> None:
        self._settings.import_multiple(_require_object("import_multiple", payload))

    def get_settings(self, payload: Any) -> Document:
        request = _parse_request("get_settings", payload)
        return self._settings.get_raw(request.uri)

    def restore_backup(self, payload: Any) -> None:
        self._settings.restore_backup(_require_object("restore_backup", payload))
