from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .errors import AreaAlreadyExists, AreaNotFound, InvalidArgument


@dataclass(frozen=True)
class Area:
    id: str

    @property
    def settings_uri(self) -> str:
        return f"Area/{self.id}"


class AreaService(Protocol):
    def create_area(self, area_id: str) -> Area:
        ...

    def get_area(self, area_id: str) -> Area:
        ...


def generate_area_id(member: Enum) -> str:
    if member is None:
        raise InvalidArgument("area id is required")
    return member.name


def create_area(areas: AreaService, member: Enum) -> Area:
    if areas is None:
        raise InvalidArgument("area service is required")
    return areas.create_area(generate_area_id(member))


def get_area(areas: AreaService, member: Enum) -> Area:
    if areas is None:
        raise InvalidArgument("area service is required")
    return areas.get_area(generate_area_id(member))


class InMemoryAreaService(AreaService):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._areas: dict[str, Area] = {}

    def create_area(self, area_id: str) -> Area:
        with self._lock:
            if area_id in self._areas:
                raise AreaAlreadyExists(f"Area {area_id!r} already exists")
            area = Area(id=area_id)
            self._areas[area_id] = area
            return area

    def get_area(self, area_id: str) -> Area:
        with self._lock:
            area = self._areas.get(area_id)
        if area is None:
            raise AreaNotFound(f"Area {area_id!r} not found")
        return area
