from __future__ import annotations

from functools import cached_property
from typing import Iterable

import msgspec
import polars as pl

from relwrangle.errors import SchemaError


class Column(msgspec.Struct, frozen=True):
    name: str
    # optional, inferred from values when converting to polars if unset
    dtype: pl.DataType | None = None

    @staticmethod
    def from_like(c: ColumnLike) -> Column:
        match c:
            case str():
                return Column(c)

            case (str() as name, dtype):
                return Column(name, dtype)

            case Column():
                return c

        raise SchemaError(f'Cannot build a column out of {c!r}')


ColumnLike = str | tuple[str, pl.DataType | None] | Column


class Schema:
    '''
    Ordered set of uniquely named columns.

    '''
    def __init__(self, columns: Iterable[ColumnLike]) -> None:
        self._columns: tuple[Column, ...] = tuple(
            (Column.from_like(c) for c in columns)
        )

        self._index: dict[str, int] = {}
        for i, col in enumerate(self._columns):
            if col.name in self._index:
                raise SchemaError(f'Duplicate column name {col.name!r}')

            self._index[col.name] = i

    @staticmethod
    def from_like(s: SchemaLike) -> Schema:
        if isinstance(s, Schema):
            return s

        return Schema(s)

    def __len__(self) -> int:
        return len(self._columns)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __iter__(self):
        return iter(self._columns)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schema):
            return NotImplemented

        return self.names == other.names

    def __hash__(self) -> int:
        return hash(self.names)

    def __repr__(self) -> str:
        return f'Schema({list(self.names)})'

    @property
    def columns(self) -> tuple[Column, ...]:
        return self._columns

    @cached_property
    def names(self) -> tuple[str, ...]:
        return tuple(col.name for col in self._columns)

    def index(self, name: str) -> int:
        try:
            return self._index[name]

        except KeyError:
            raise SchemaError(
                f'Column {name!r} not in schema {list(self.names)}'
            ) from None

    def get(self, name: str) -> Column:
        return self._columns[self.index(name)]

    def select(self, names: Iterable[str]) -> Schema:
        return Schema(self.get(n) for n in names)

    def rename(self, mapping: dict[str, str]) -> Schema:
        for old in mapping:
            self.index(old)

        return Schema(
            Column(mapping.get(col.name, col.name), col.dtype)
            for col in self._columns
        )

    def pretty_str(self) -> str:
        '''Return a human-readable representation of the schema.'''
        lines = ['Schema:']
        for col in self._columns:
            dtype = str(col.dtype) if col.dtype is not None else 'inferred'
            lines.append(f'  - {col.name}: {dtype}')
        return '\n'.join(lines)


SchemaLike = Iterable[ColumnLike] | Schema
