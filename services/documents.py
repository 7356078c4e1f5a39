from __future__ import annotations

import copy
from typing import Any, Iterator, Mapping, MutableMapping

from .errors import InvalidArgument, UnsupportedRequestShape

Document = dict[str, Any]


def require_uri(uri: Any) -> str:
    if uri is None:
        raise InvalidArgument("uri is required")
    if not isinstance(uri, str):
        raise InvalidArgument(f"uri must be a string, got {type(uri).__name__}")
    return uri


def require_document(value: Any, *, what: str = "settings") -> Document:
    """Return a deep copy of `value` if it is a JSON object, else fail with UnsupportedRequestShape."""
    if not isinstance(value, Mapping):
        raise UnsupportedRequestShape(f"{what} must be an object, got {type(value).__name__}")
    return copy.deepcopy(dict(value))


def merge_documents(target: Document, patch: Mapping[str, Any]) -> Document:
    """
    Deep-merge `patch` into `target` in place and return `target`.

    Objects on both sides are merged recursively. Anything else in `patch`
    (scalars, null, arrays, or an object where `target` holds a non-object)
    overwrites the value in `target` wholesale. Arrays are never merged.
    """
    for key, value in patch.items():
        existing = target.get(key)
        if isinstance(existing, dict) and isinstance(value, Mapping):
            merge_documents(existing, value)
        else:
            target[key] = copy.deepcopy(value)
    return target


class UriMap(MutableMapping[str, Document]):
    """
    Mapping of uri -> document with case-insensitive keys.

    The casing used when a key is first inserted is kept; later writes with
    different casing update the value under the original key.
    """

    def __init__(self, items: Mapping[str, Document] | None = None) -> None:
        self._items: dict[str, tuple[str, Document]] = {}
        if items:
            self.update(items)

    @staticmethod
    def _fold(uri: str) -> str:
        return uri.casefold()

    def __getitem__(self, uri: str) -> Document:
        return self._items[self._fold(uri)][1]

    def __setitem__(self, uri: str, document: Document) -> None:
        folded = self._fold(uri)
        current = self._items.get(folded)
        key = current[0] if current is not None else uri
        self._items[folded] = (key, document)

    def __delitem__(self, uri: str) -> None:
        del self._items[self._fold(uri)]

    def __contains__(self, uri: object) -> bool:
        return isinstance(uri, str) and self._fold(uri) in self._items

    def __iter__(self) -> Iterator[str]:
        return (key for key, _ in self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"UriMap({self.to_document()!r})"

    def copy(self) -> "UriMap":
        """Deep copy; documents are never shared between copies."""
        clone = UriMap()
        clone._items = {folded: (key, copy.deepcopy(doc)) for folded, (key, doc) in self._items.items()}
        return clone

    def to_document(self) -> dict[str, Document]:
        return {key: copy.deepcopy(doc) for key, doc in self._items.values()}
