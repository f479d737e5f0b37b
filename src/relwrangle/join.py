'''
# Relational joins

Hash join evaluator over in-memory `Table`s.

    - inner: rows with a key match on both sides
    - left: every left row, right columns missing when unmatched
    - right: every right row, left columns missing when unmatched
    - full: matched rows, then unmatched left and unmatched right rows
    - anti: left rows without a match, left columns only
    - semi: left rows with at least one match (once each), left columns only

Rows match when every key pair compares equal, missing key values never
match, not even another missing value. A row matching several rows on the
other side yields one output row per matching pair.

Output columns are the left columns followed by the right non key columns,
non key columns present on both sides get suffixed (`.x` / `.y` by default)
or raise `ColumnNameCollision` depending on `JoinOptions.on_collision`.

'''

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Literal

from relwrangle._utils import get_collision_policy
from relwrangle.dtypes import Cell, is_missing
from relwrangle.errors import ColumnNameCollision, KeyColumnNotFound
from relwrangle.schema import Column, Schema
from relwrangle.structs import FrozenStruct
from relwrangle.table import Row, Table, TableBuilder, TableLike, to_table


log = logging.getLogger(__name__)


JoinHow = Literal['inner', 'left', 'right', 'full', 'anti', 'semi']

join_variants: tuple[JoinHow, ...] = (
    'inner', 'left', 'right', 'full', 'anti', 'semi'
)

CollisionPolicy = Literal['suffix', 'error']


class KeyPair(FrozenStruct, frozen=True):
    left: str
    right: str


class JoinOptions(FrozenStruct, frozen=True):
    # appended to left & right non key columns present on both sides
    suffix: tuple[str, str] = ('.x', '.y')
    on_collision: CollisionPolicy = 'suffix'


def default_options() -> JoinOptions:
    return JoinOptions(on_collision=get_collision_policy())


JoinKeyLike = (
    str
    | KeyPair
    | Mapping[str, str]
    | Sequence[str | tuple[str, str] | KeyPair]
)


def normalize_key(by: JoinKeyLike) -> tuple[KeyPair, ...]:
    '''
    Turn any accepted `by` spelling into a tuple of `KeyPair`:

        - 'ID' -> (ID, ID)
        - ['ID', 'variable2'] -> (ID, ID), (variable2, variable2)
        - {'stationcode': 'stationid'} -> (stationcode, stationid)
        - [('stationcode', 'stationid')] -> (stationcode, stationid)

    '''
    match by:
        case str():
            pairs = [KeyPair(by, by)]

        case KeyPair():
            pairs = [by]

        case Mapping():
            pairs = [KeyPair(l, r) for l, r in by.items()]

        case _:
            pairs = []
            for item in by:
                match item:
                    case str():
                        pairs.append(KeyPair(item, item))

                    case KeyPair():
                        pairs.append(item)

                    case (str() as l, str() as r):
                        pairs.append(KeyPair(l, r))

                    case _:
                        raise ValueError(f'Invalid join key element {item!r}')

    if not pairs:
        raise ValueError('Join key must name at least one column pair')

    return tuple(pairs)


def _key_indices(table: Table, names: Iterable[str], side: str) -> list[int]:
    idxs = []
    for name in names:
        if name not in table.schema:
            raise KeyColumnNotFound(name, side, table.columns)

        idxs.append(table.schema.index(name))

    return idxs


def _row_key(row: Row, idxs: list[int]) -> tuple[Cell, ...] | None:
    key = tuple(row[i] for i in idxs)
    if any(is_missing(v) for v in key):
        return None

    return key


class HashIndex:
    '''
    Row positions of a table bucketed by key value, rows with a missing key
    value are left out so they can never be matched.

    '''
    def __init__(self, rows: Sequence[Row], idxs: list[int]) -> None:
        self._buckets: dict[tuple[Cell, ...], list[int]] = {}
        for pos, row in enumerate(rows):
            key = _row_key(row, idxs)
            if key is None:
                continue

            self._buckets.setdefault(key, []).append(pos)

    def __len__(self) -> int:
        return len(self._buckets)

    def get(self, key: tuple[Cell, ...] | None) -> list[int]:
        if key is None:
            return []

        return self._buckets.get(key, [])


def match_rows(
    left: Table,
    right: Table,
    left_idxs: list[int],
    right_idxs: list[int],
) -> list[list[int]]:
    '''
    For every left row, positions of its matching right rows in right table
    order.

    The index is built on the smaller table and probed with the other one.

    '''
    if right.height <= left.height:
        index = HashIndex(right.rows, right_idxs)
        log.debug(
            'built index on right side: %d rows, %d keys', right.height, len(index)
        )
        return [list(index.get(_row_key(row, left_idxs))) for row in left.rows]

    index = HashIndex(left.rows, left_idxs)
    log.debug(
        'built index on left side: %d rows, %d keys', left.height, len(index)
    )
    matches: list[list[int]] = [[] for _ in range(left.height)]
    for pos, row in enumerate(right.rows):
        for i in index.get(_row_key(row, right_idxs)):
            matches[i].append(pos)

    return matches


def _invert(matches: list[list[int]], height: int) -> list[list[int]]:
    inverted: list[list[int]] = [[] for _ in range(height)]
    for i, rights in enumerate(matches):
        for j in rights:
            inverted[j].append(i)

    return inverted


def output_schema(
    left: Table,
    right: Table,
    pairs: tuple[KeyPair, ...],
    options: JoinOptions,
) -> tuple[Schema, list[int]]:
    '''
    Return the joined schema and the positions of the right columns carried
    into it (every right column except the key ones).

    '''
    right_keys = {p.right for p in pairs}
    right_extra = [
        j for j, name in enumerate(right.columns) if name not in right_keys
    ]
    right_names = [right.columns[j] for j in right_extra]

    collisions = set(left.columns) & set(right_names)
    if collisions and options.on_collision == 'error':
        first = next(n for n in left.columns if n in collisions)
        raise ColumnNameCollision(first)

    sx, sy = options.suffix
    out_left = [n + sx if n in collisions else n for n in left.columns]
    out_right = [n + sy if n in collisions else n for n in right_names]

    seen: set[str] = set()
    for name in out_left + out_right:
        if name in seen:
            raise ColumnNameCollision(
                name,
                f'Column {name!r} still ambiguous after applying suffixes {options.suffix}',
            )
        seen.add(name)

    # key columns may get filled from the right table, only keep a declared
    # dtype when both sides agree on it
    right_dtypes = {p.left: right.schema.get(p.right).dtype for p in pairs}
    columns = [
        Column(
            name,
            col.dtype
            if col.name not in right_dtypes or right_dtypes[col.name] == col.dtype
            else None,
        )
        for name, col in zip(out_left, left.schema.columns)
    ]
    columns += [
        Column(name, right.schema.columns[j].dtype)
        for name, j in zip(out_right, right_extra)
    ]

    return Schema(columns), right_extra


def join(
    left: TableLike,
    right: TableLike,
    by: JoinKeyLike,
    how: JoinHow = 'inner',
    *,
    options: JoinOptions | None = None,
) -> Table:
    '''
    Join `left` with `right` on key columns `by` using variant `how`.

    Row order: left order with matches in right order for inner, left, full
    (unmatched right rows appended at the end) and the filtering joins,
    right order with matches in left order for right joins.

    '''
    if how not in join_variants:
        raise ValueError(f'Unknown join variant {how!r}, expected one of {join_variants}')

    left = to_table(left)
    right = to_table(right)
    options = options or default_options()

    pairs = normalize_key(by)
    left_idxs = _key_indices(left, (p.left for p in pairs), 'left')
    right_idxs = _key_indices(right, (p.right for p in pairs), 'right')

    matches = match_rows(left, right, left_idxs, right_idxs)

    name = f'{how}_join({left.name or "left"}, {right.name or "right"})'

    # filtering joins keep the left table shape
    if how in ('anti', 'semi'):
        keep = how == 'semi'
        builder = left.builder()
        builder.extend(
            row for row, m in zip(left.rows, matches) if bool(m) == keep
        )
        result = builder.flush().with_name(name)
        log.debug('%s: %d of %d left rows kept', name, result.height, left.height)
        return result

    schema, right_extra = output_schema(left, right, pairs, options)
    builder = TableBuilder(schema, name=name)

    right_missing: Row = (None,) * len(right_extra)
    left_missing: list[Cell] = [None] * left.width

    def joined(lrow: Row, rrow: Row) -> Row:
        return lrow + tuple(rrow[j] for j in right_extra)

    def right_only(rrow: Row) -> Row:
        lpart = list(left_missing)
        for li, ri in zip(left_idxs, right_idxs):
            lpart[li] = rrow[ri]

        return tuple(lpart) + tuple(rrow[j] for j in right_extra)

    match how:
        case 'inner' | 'left' | 'full':
            for lrow, rights in zip(left.rows, matches):
                for j in rights:
                    builder.append(joined(lrow, right.rows[j]))

                if not rights and how != 'inner':
                    builder.append(lrow + right_missing)

            if how == 'full':
                matched = {j for rights in matches for j in rights}
                builder.extend(
                    right_only(rrow)
                    for j, rrow in enumerate(right.rows)
                    if j not in matched
                )

        case 'right':
            for rrow, lefts in zip(right.rows, _invert(matches, right.height)):
                for i in lefts:
                    builder.append(joined(left.rows[i], rrow))

                if not lefts:
                    builder.append(right_only(rrow))

    result = builder.flush()
    log.debug(
        '%s on %s: %d x %d -> %d rows',
        name,
        ', '.join(f'{p.left}={p.right}' for p in pairs),
        left.height,
        right.height,
        result.height,
    )
    return result


def inner_join(left: TableLike, right: TableLike, by: JoinKeyLike, **kwargs) -> Table:
    return join(left, right, by, 'inner', **kwargs)


def left_join(left: TableLike, right: TableLike, by: JoinKeyLike, **kwargs) -> Table:
    return join(left, right, by, 'left', **kwargs)


def right_join(left: TableLike, right: TableLike, by: JoinKeyLike, **kwargs) -> Table:
    return join(left, right, by, 'right', **kwargs)


def full_join(left: TableLike, right: TableLike, by: JoinKeyLike, **kwargs) -> Table:
    return join(left, right, by, 'full', **kwargs)


def anti_join(left: TableLike, right: TableLike, by: JoinKeyLike, **kwargs) -> Table:
    return join(left, right, by, 'anti', **kwargs)


def semi_join(left: TableLike, right: TableLike, by: JoinKeyLike, **kwargs) -> Table:
    return join(left, right, by, 'semi', **kwargs)
