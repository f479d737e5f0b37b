'''
# Cells

Tables hold loosely typed values, any column can carry any scalar. We keep
python scalars as is and classify them into a small tagged variant:

    - string: `str`
    - numeric: `int`, `float`, `bool`
    - temporal: `date`, `datetime`
    - missing: `None` or a float NaN

Missing values are what joins use to fill the side lacking a match, and they
never compare equal to anything when used as join keys.

'''

from __future__ import annotations

from datetime import date, datetime
import math
from typing import Any, Iterable, Literal

import polars as pl


Cell = str | int | float | bool | date | datetime | None

CellKind = Literal['string', 'numeric', 'temporal', 'missing']


def is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def cell_kind(value: Any) -> CellKind:
    if is_missing(value):
        return 'missing'

    match value:
        case str():
            return 'string'

        case bool() | int() | float():
            return 'numeric'

        case date():
            return 'temporal'

    raise TypeError(f'Unsupported cell value {value!r} of type {type(value).__name__}')



def infer_polars_type(values: Iterable[Cell]) -> pl.DataType | None:
    '''
    Pick a polars dtype able to hold every non missing value, `None` if the
    column only holds missing values (polars will default to `pl.Null`).

    Mixed kinds fall back to `pl.String`, matching how an R `data.frame`
    coerces a character vector.

    '''
    kinds: set[CellKind] = set()
    has_float = has_datetime = all_bool = False
    first = True
    for v in values:
        kind = cell_kind(v)
        if kind == 'missing':
            continue

        kinds.add(kind)
        has_float |= isinstance(v, float)
        has_datetime |= isinstance(v, datetime)
        all_bool = isinstance(v, bool) and (first or all_bool)
        first = False

    if not kinds:
        return None

    if len(kinds) > 1 or 'string' in kinds:
        return pl.String()

    if 'temporal' in kinds:
        return pl.Datetime() if has_datetime else pl.Date()

    if all_bool:
        return pl.Boolean()

    return pl.Float64() if has_float else pl.Int64()


def coerce_for(dtype: pl.DataType | None, value: Cell) -> Cell:
    '''Convert a single value so polars accepts it under `dtype`.'''
    if is_missing(value):
        return None

    match dtype:
        case pl.String() if not isinstance(value, str):
            return str(value)

        case pl.Int64() | pl.Float64() if isinstance(value, bool):
            return int(value)

        case pl.Datetime() if not isinstance(value, datetime):
            return datetime(value.year, value.month, value.day)

    return value
