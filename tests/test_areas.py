from __future__ import annotations

from enum import Enum

import pytest

from services.areas import InMemoryAreaService, create_area, generate_area_id, get_area
from services.errors import AreaAlreadyExists, AreaNotFound, InvalidArgument


class Room(Enum):
    LivingRoom = 1
    Kitchen = 2


def test_area_ids_come_from_enum_members():
    assert generate_area_id(Room.Kitchen) == "Kitchen"


def test_create_and_get_area_by_enum(store):
    areas = InMemoryAreaService()
    created = create_area(areas, Room.LivingRoom)

    assert get_area(areas, Room.LivingRoom) is created
    assert created.settings_uri == "Area/LivingRoom"

    store.import_merge(created.settings_uri, {"caption": "Living room"})
    assert store.get_raw("area/livingroom") == {"caption": "Living room"}


def test_area_errors():
    areas = InMemoryAreaService()
    create_area(areas, Room.Kitchen)

    with pytest.raises(AreaAlreadyExists):
        create_area(areas, Room.Kitchen)
    with pytest.raises(AreaNotFound):
        get_area(areas, Room.LivingRoom)
    with pytest.raises(InvalidArgument):
        create_area(None, Room.Kitchen)
    with pytest.raises(InvalidArgument):
        get_area(None, Room.Kitchen)
    with pytest.raises(InvalidArgument):
        generate_area_id(None)
