"""
Typed materialization of settings documents.

The store itself only ever holds plain JSON objects. Turning a document into
an application type (and back) goes through a `SettingsConverter`, looked up
per target type in a `ConverterRegistry`. Types without an explicit converter
get one built on a pydantic `TypeAdapter`, which covers pydantic models,
dataclasses, TypedDicts and plain dicts.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic.errors import PydanticSchemaGenerationError

from .documents import Document
from .errors import ConversionError

T = TypeVar("T")


@dataclass(frozen=True)
class SettingsConverter(Generic[T]):
    from_document: Callable[[Document], T]
    to_document: Callable[[T], Document]
    create_default: Callable[[], T]


def _adapter_converter(target: type[T]) -> SettingsConverter[T]:
    try:
        adapter: TypeAdapter[T] = TypeAdapter(target)
    except PydanticSchemaGenerationError as e:
        raise ConversionError(f"No converter available for {target!r}") from e

    def from_document(document: Document) -> T:
        return adapter.validate_python(document)

    def to_document(value: T) -> Document:
        return adapter.dump_python(value, mode="json")

    return SettingsConverter(from_document=from_document, to_document=to_document, create_default=target)


class ConverterRegistry:
    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._converters: dict[Any, SettingsConverter[Any]] = {}

    def register(
        self,
        target: type[T],
        *,
        from_document: Callable[[Document], T],
        to_document: Callable[[T], Document],
        create_default: Callable[[], T] | None = None,
    ) -> None:
        converter = SettingsConverter(
            from_document=from_document,
            to_document=to_document,
            create_default=create_default if create_default is not None else target,
        )
        with self._guard:
            self._converters[target] = converter

    def converter_for(self, target: type[T]) -> SettingsConverter[T]:
        with self._guard:
            converter = self._converters.get(target)
            if converter is None:
                converter = _adapter_converter(target)
                self._converters[target] = converter
            return converter

    def from_document(self, target: type[T], document: Document) -> T:
        converter = self.converter_for(target)
        try:
            return converter.from_document(document)
        except (ValidationError, TypeError, ValueError, LookupError) as e:
            raise ConversionError(f"Cannot convert settings document to {_type_name(target)}: {e}") from e

    def to_document(self, target: type[T], value: T) -> Document:
        converter = self.converter_for(target)
        try:
            document = converter.to_document(value)
        except (ValidationError, TypeError, ValueError) as e:
            raise ConversionError(f"Cannot convert {_type_name(target)} to a settings document: {e}") from e
        if not isinstance(document, dict):
            raise ConversionError(
                f"{_type_name(target)} does not serialize to a JSON object (got {type(document).__name__})"
            )
        return document

    def create_default(self, target: type[T]) -> T:
        converter = self.converter_for(target)
        try:
            return converter.create_default()
        except (ValidationError, TypeError) as e:
            raise ConversionError(f"{_type_name(target)} cannot be default-constructed: {e}") from e


def _type_name(target: Any) -> str:
    return getattr(target, "__name__", repr(target))
