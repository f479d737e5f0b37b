from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from typing import Any, TYPE_CHECKING

import polars as pl

from relwrangle.dtypes import Cell, coerce_for, infer_polars_type, is_missing
from relwrangle.errors import SchemaError
from relwrangle.schema import Column, Schema, SchemaLike
from relwrangle.table.builder import TableBuilder as TableBuilder

if TYPE_CHECKING:
    from relwrangle.join import JoinHow, JoinKeyLike, JoinOptions


Row = tuple[Cell, ...]


def _to_str(value: Cell) -> str:
    if is_missing(value):
        return 'NA'

    return value if isinstance(value, str) else str(value)


class Table:
    '''
    Immutable in-memory table, an ordered sequence of rows that all share the
    same schema.

    Every operation returns a new `Table`, inputs are never mutated.

    '''
    def __init__(
        self,
        schema: SchemaLike,
        rows: Iterable[Iterable[Cell]] = (),
        *,
        name: str | None = None,
    ) -> None:
        self.schema = Schema.from_like(schema)
        self.name = name

        width = len(self.schema)
        checked: list[Row] = []
        for i, r in enumerate(rows):
            row = tuple(r)
            if len(row) != width:
                raise SchemaError(
                    f'Row {i} has {len(row)} values but schema has {width} '
                    f'columns {list(self.schema.names)}'
                )
            checked.append(row)

        self._rows: tuple[Row, ...] = tuple(checked)

    @classmethod
    def _from_columns_unchecked(
        cls,
        schema: Schema,
        columns: Sequence[Sequence[Cell]],
        *,
        height: int,
        name: str | None = None,
    ) -> Table:
        table = cls.__new__(cls)
        table.schema = schema
        table.name = name
        table._rows = (
            tuple(zip(*columns, strict=True)) if columns else ((),) * height
        )
        return table

    # constructors

    @staticmethod
    def from_rows(
        columns: SchemaLike,
        rows: Iterable[Iterable[Cell]],
        *,
        name: str | None = None,
    ) -> Table:
        return Table(columns, rows, name=name)

    @staticmethod
    def from_columns(
        data: Mapping[str, Sequence[Cell] | Cell],
        *,
        name: str | None = None,
    ) -> Table:
        '''
        Build a table out of a column name -> values mapping, the way a
        `data.frame` literal is written.

        Scalars (and single element sequences) are recycled to the length of
        the longest column, any other length mismatch is an error.

        '''
        cols: dict[str, list[Cell]] = {}
        for key, values in data.items():
            match values:
                case pl.Series():
                    cols[key] = values.to_list()

                case str() | bytes():
                    cols[key] = [values]

                case Sequence():
                    cols[key] = list(values)

                case _:
                    cols[key] = [values]

        height = max((len(v) for v in cols.values()), default=0)
        for key, values in cols.items():
            if len(values) == height:
                continue

            if len(values) == 1:
                cols[key] = values * height
                continue

            raise SchemaError(
                f'Column {key!r} has {len(values)} values, expected {height} or 1'
            )

        return Table._from_columns_unchecked(
            Schema(cols.keys()),
            list(cols.values()),
            height=height,
            name=name,
        )

    @staticmethod
    def from_dicts(
        rows: Iterable[Mapping[str, Cell]],
        *,
        columns: Sequence[str] | None = None,
        name: str | None = None,
    ) -> Table:
        '''
        Build a table out of mapping rows, absent keys become missing values.
        Unless `columns` is passed, columns are ordered by first appearance.

        '''
        rows = list(rows)
        if columns is None:
            seen: dict[str, None] = {}
            for r in rows:
                seen.update(dict.fromkeys(r))
            columns = list(seen)

        return Table(
            columns,
            (tuple(r.get(c) for c in columns) for r in rows),
            name=name,
        )

    @staticmethod
    def from_polars(df: pl.DataFrame, *, name: str | None = None) -> Table:
        schema = Schema(
            Column(col_name, dtype) for col_name, dtype in df.schema.items()
        )
        return Table(schema, df.rows(), name=name)

    # accessors

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self._rows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Table):
            return NotImplemented

        return self.columns == other.columns and self._rows == other._rows

    def __hash__(self) -> int:
        return hash((self.columns, self._rows))

    def __repr__(self) -> str:
        return f'<Table {self.name or ""} {self.height}x{self.width} {list(self.columns)}>'

    @property
    def columns(self) -> tuple[str, ...]:
        return self.schema.names

    @property
    def height(self) -> int:
        return len(self._rows)

    @property
    def width(self) -> int:
        return len(self.schema)

    @property
    def rows(self) -> tuple[Row, ...]:
        return self._rows

    def row(self, i: int) -> dict[str, Cell]:
        return dict(zip(self.columns, self._rows[i]))

    def column(self, name: str) -> list[Cell]:
        i = self.schema.index(name)
        return [r[i] for r in self._rows]

    def to_dicts(self) -> list[dict[str, Cell]]:
        names = self.columns
        return [dict(zip(names, r)) for r in self._rows]

    def to_polars(self) -> pl.DataFrame:
        series = []
        for i, col in enumerate(self.schema.columns):
            values = [r[i] for r in self._rows]
            dtype = col.dtype if col.dtype is not None else infer_polars_type(values)
            series.append(
                pl.Series(
                    col.name,
                    [coerce_for(dtype, v) for v in values],
                    dtype=dtype,
                )
            )

        return pl.DataFrame(series)

    def equals_unordered(self, other: Table) -> bool:
        '''Same columns and same multiset of rows, regardless of row order.'''
        return (
            self.columns == other.columns
            and Counter(self._rows) == Counter(other._rows)
        )

    # transforms

    def builder(self) -> TableBuilder:
        return TableBuilder(self.schema, name=self.name)

    def select(self, *names: str) -> Table:
        idxs = [self.schema.index(n) for n in names]
        return Table._from_columns_unchecked(
            self.schema.select(names),
            [[r[i] for r in self._rows] for i in idxs],
            height=self.height,
            name=self.name,
        )

    def filter(self, predicate: Callable[[dict[str, Cell]], bool]) -> Table:
        names = self.columns
        builder = self.builder()
        builder.extend(
            r for r in self._rows if predicate(dict(zip(names, r)))
        )
        return builder.flush()

    def rename(self, mapping: Mapping[str, str]) -> Table:
        table = Table.__new__(Table)
        table.schema = self.schema.rename(dict(mapping))
        table.name = self.name
        table._rows = self._rows
        return table

    def with_name(self, name: str) -> Table:
        table = Table.__new__(Table)
        table.schema = self.schema
        table.name = name
        table._rows = self._rows
        return table

    def pipe(self, fn: Callable[..., Any], *args, **kwargs) -> Any:
        return fn(self, *args, **kwargs)

    # joins

    def join(
        self,
        other: Table,
        by: JoinKeyLike,
        how: JoinHow = 'inner',
        *,
        options: JoinOptions | None = None,
    ) -> Table:
        from relwrangle.join import join

        return join(self, other, by, how, options=options)

    def inner_join(self, other: Table, by: JoinKeyLike, **kwargs) -> Table:
        return self.join(other, by, 'inner', **kwargs)

    def left_join(self, other: Table, by: JoinKeyLike, **kwargs) -> Table:
        return self.join(other, by, 'left', **kwargs)

    def right_join(self, other: Table, by: JoinKeyLike, **kwargs) -> Table:
        return self.join(other, by, 'right', **kwargs)

    def full_join(self, other: Table, by: JoinKeyLike, **kwargs) -> Table:
        return self.join(other, by, 'full', **kwargs)

    def anti_join(self, other: Table, by: JoinKeyLike, **kwargs) -> Table:
        return self.join(other, by, 'anti', **kwargs)

    def semi_join(self, other: Table, by: JoinKeyLike, **kwargs) -> Table:
        return self.join(other, by, 'semi', **kwargs)

    # display

    def pretty_str(self, max_width: int = 24) -> str:
        '''Return a human-readable, column aligned rendering of the table.'''
        cols = list(self.columns)
        data = [cols] + [list(map(_to_str, r)) for r in self._rows]
        widths = [0] * len(cols)
        for row in data:
            for i, cell in enumerate(row):
                widths[i] = max(widths[i], len(cell))
        widths = [min(w, max_width) for w in widths]

        def fmt(row: list[str]) -> str:
            cells = []
            for i, cell in enumerate(row):
                if len(cell) > widths[i]:
                    cell = cell[: max(0, widths[i] - 1)] + '…'
                cells.append(cell.ljust(widths[i]))
            return ' | '.join(cells)

        lines = []
        if self.name:
            lines.append(f'Table: {self.name} ({self.height} rows)')
        lines += [fmt(cols), '-+-'.join('-' * w for w in widths)]
        lines += [fmt(r) for r in data[1:]]
        return '\n'.join(lines)


TableLike = Table | pl.DataFrame


def to_table(t: TableLike) -> Table:
    match t:
        case Table():
            return t

        case pl.DataFrame():
            return Table.from_polars(t)

    raise TypeError(f'Expected a Table or polars.DataFrame, got {type(t).__name__}')
