from __future__ import annotations

from typing import Iterable, TYPE_CHECKING

from relwrangle.dtypes import Cell
from relwrangle.errors import SchemaError
from relwrangle.schema import Schema, SchemaLike


if TYPE_CHECKING:
    from relwrangle.table import Table


class TableBuilder:
    '''
    Lightweight column store for building tables row by row.

    - append/extend accumulate python values per column.
    - flush() materializes a `Table` once, clearing internal buffers for
      reuse.

    '''

    def __init__(self, schema: SchemaLike, *, name: str | None = None):
        self._schema = Schema.from_like(schema)
        self._name = name

        self._names = self._schema.names
        self._ncols = len(self._names)

        # one python list per column (schema order)
        self._col_lists: list[list[Cell]] = [[] for _ in self._names]
        self._nrows = 0

    @property
    def schema(self) -> Schema:
        return self._schema

    def append(self, row: Iterable[Cell]) -> None:
        row = tuple(row)
        if len(row) != self._ncols:
            raise SchemaError(
                f'Row width {len(row)} does not match schema width {self._ncols}'
            )

        for col, v in zip(self._col_lists, row):
            col.append(v)

        self._nrows += 1

    def extend(self, rows: Iterable[Iterable[Cell]]) -> None:
        for row in rows:
            self.append(row)

    def rows(self) -> int:
        return self._nrows

    def flush(self) -> Table:
        from relwrangle.table import Table

        table = Table._from_columns_unchecked(
            self._schema,
            self._col_lists,
            height=self._nrows,
            name=self._name,
        )

        for col in self._col_lists: col.clear()
        self._nrows = 0

        return table
