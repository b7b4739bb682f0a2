# coding=utf8
"""
Copyright (C) 2025 Laurent Courty

This program is free software; you can redistribute it and/or
modify it under the terms of the GNU General Public License
as published by the Free Software Foundation; either version 2
of the License, or (at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details.
"""

from stormgate.const import ObjectType
from stormgate.gateway_error import ObjectIndexError, PropertyOutOfRangeError
from stormgate.model import NamedObject


class ObjectRegistry:
    """Per object type tables of records.
    The position of a record in its table is its index.
    """

    def __init__(self):
        self._tables: dict[ObjectType, list[NamedObject]] = {t: [] for t in ObjectType}
        self._index: dict[ObjectType, dict[str, int]] = {t: {} for t in ObjectType}

    def _table(self, object_type) -> list[NamedObject]:
        try:
            return self._tables[ObjectType(object_type)]
        except ValueError:
            raise PropertyOutOfRangeError(f"unknown object type <{object_type}>")

    def add(self, object_type: ObjectType, record: NamedObject) -> int:
        """Append a record and return its index. Used while building the model."""
        table = self._table(object_type)
        ids = self._index[ObjectType(object_type)]
        if record.id in ids:
            raise ValueError(f"duplicate ID name <{record.id}> for {ObjectType(object_type).name}")
        table.append(record)
        ids[record.id] = len(table) - 1
        return len(table) - 1

    def count(self, object_type: ObjectType) -> int:
        return len(self._table(object_type))

    def check_index(self, object_type: ObjectType, index: int) -> None:
        count = self.count(object_type)
        if index < 0 or index >= count:
            raise ObjectIndexError(
                f"{ObjectType(object_type).name} index {index} out of range [0, {count})"
            )

    def get(self, object_type: ObjectType, index: int) -> NamedObject:
        self.check_index(object_type, index)
        return self._table(object_type)[index]

    def get_id(self, object_type: ObjectType, index: int) -> str:
        return self.get(object_type, index).id

    def find_index(self, object_type: ObjectType, object_id: str) -> int:
        """Case-sensitive exact match on the object ID"""
        self._table(object_type)
        try:
            return self._index[ObjectType(object_type)][object_id]
        except KeyError:
            raise ObjectIndexError(f"no {ObjectType(object_type).name} named <{object_id}>")

    def records(self, object_type: ObjectType) -> list[NamedObject]:
        """Return a shallow copy of a table"""
        return list(self._table(object_type))
