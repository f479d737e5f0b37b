'''
# Cleaning messy strings & dates

Thin `polars` expression helpers named after the tidyverse verbs used to
clean up free text and calendar strings before joining. Every helper takes a
column name or a `pl.Expr` and returns a `pl.Expr`, so they compose inside
`with_columns` / `filter` / `select`.

Positions in `str_sub` are 1-based and inclusive, negative positions count
from the end of the string (-1 is the last character).

Date parsers only look at the numeric components of the input, any run of
non digits acts as a separator, so '5/12/21', '05-12-2021' and '5.12.2021'
all parse with `mdy`. Two digit years map 00-68 to 20xx and 69-99 to 19xx.
Invalid dates become null.

'''

from __future__ import annotations

import logging
from typing import Literal, Mapping

import polars as pl


log = logging.getLogger(__name__)


IntoExpr = str | pl.Expr

DateOrder = Literal['mdy', 'dmy', 'ymd', 'myd']

# two digit years below this are 20xx, the rest 19xx
century_cutoff: int = 69


def _expr(e: IntoExpr) -> pl.Expr:
    return pl.col(e) if isinstance(e, str) else e


# strings

def str_to_upper(e: IntoExpr) -> pl.Expr:
    return _expr(e).str.to_uppercase()


def str_to_lower(e: IntoExpr) -> pl.Expr:
    return _expr(e).str.to_lowercase()


def str_detect(e: IntoExpr, pattern: str) -> pl.Expr:
    return _expr(e).str.contains(pattern)


def str_trim(e: IntoExpr) -> pl.Expr:
    '''Strip whitespace at both ends.'''
    return _expr(e).str.strip_chars()


def str_replace_all(e: IntoExpr, pattern: str, replacement: str) -> pl.Expr:
    return _expr(e).str.replace_all(pattern, replacement)


def str_sub(e: IntoExpr, start: int = 1, end: int = -1) -> pl.Expr:
    '''
    Extract characters `start` through `end` (1-based, inclusive, negatives
    count from the end), out of range bounds are clipped, an empty range
    yields ''.

    '''
    e = _expr(e)
    n = e.str.len_chars().cast(pl.Int64)

    offset = pl.lit(start - 1, dtype=pl.Int64) if start > 0 else (n + start).clip(lower_bound=0)
    stop = pl.lit(end, dtype=pl.Int64) if end > 0 else n + end + 1
    length = (pl.min_horizontal(stop, n) - offset).clip(lower_bound=0)

    return e.str.slice(offset, length.cast(pl.UInt64))


def case_when(
    e: IntoExpr,
    labels: Mapping[str, str],
    default: str | None = None,
) -> pl.Expr:
    '''
    Relabel values by pattern, the first pattern (in mapping order) found in
    the value wins, values matching none get `default`.

        case_when('analyte', {'nitrogen': 'tn', 'phosphorus': 'tp'})

    '''
    if not labels:
        raise ValueError('case_when needs at least one pattern')

    e = _expr(e)
    patterns = list(labels.items())

    pattern, label = patterns[0]
    chain = pl.when(e.str.contains(pattern)).then(pl.lit(label))
    for pattern, label in patterns[1:]:
        chain = chain.when(e.str.contains(pattern)).then(pl.lit(label))

    return chain.otherwise(pl.lit(default, dtype=pl.String))


# dates

def _full_year(part: pl.Expr) -> pl.Expr:
    year = part.cast(pl.Int32, strict=False)
    return (
        pl.when(part.str.len_chars() <= 2)
        .then(
            pl.when(year < century_cutoff)
            .then(year + 2000)
            .otherwise(year + 1900)
        )
        .otherwise(year)
    )


def parse_date(e: IntoExpr, order: DateOrder) -> pl.Expr:
    '''
    Parse calendar strings whose numeric components come in `order` into a
    `pl.Date`.

    '''
    if sorted(order) != ['d', 'm', 'y']:
        raise ValueError(f'Invalid date component order {order!r}')

    parts = _expr(e).str.extract_all(r'\d+')
    component = {c: parts.list.get(i, null_on_oob=True) for i, c in enumerate(order)}

    iso = pl.format(
        '{}-{}-{}',
        _full_year(component['y']).cast(pl.String).str.zfill(4),
        component['m'].str.zfill(2),
        component['d'].str.zfill(2),
    )

    return iso.str.to_date('%Y-%m-%d', strict=False)


def mdy(e: IntoExpr) -> pl.Expr:
    return parse_date(e, 'mdy')


def dmy(e: IntoExpr) -> pl.Expr:
    return parse_date(e, 'dmy')


def ymd(e: IntoExpr) -> pl.Expr:
    return parse_date(e, 'ymd')


def myd(e: IntoExpr) -> pl.Expr:
    return parse_date(e, 'myd')


def year(e: IntoExpr) -> pl.Expr:
    return _expr(e).dt.year()


def month(e: IntoExpr) -> pl.Expr:
    return _expr(e).dt.month()


def day(e: IntoExpr) -> pl.Expr:
    return _expr(e).dt.day()


# pipelines

analyte_labels: dict[str, str] = {
    'nitrogen': 'tn',
    'phosphorus': 'tp',
}


def clean_chemistry(frame: pl.DataFrame) -> pl.DataFrame:
    '''
    Tidy a raw chemistry sample frame:

        - parse `sampledate` (month/day/year strings) into a date
        - pull the replicate number out of the `sampleid` suffix
        - trim, lowercase & conform analyte names into 'tn' / 'tp'

    Keeps `stationcode, sampledate, replicate, analyte, result`.

    '''
    cleaned = (
        frame
        .with_columns(
            mdy('sampledate').alias('sampledate'),
            str_sub('sampleid', start=-1).alias('replicate'),
            str_to_lower(str_trim('analyte')).alias('analyte'),
        )
        .with_columns(
            case_when('analyte', analyte_labels).alias('analyte'),
        )
        .select('stationcode', 'sampledate', 'replicate', 'analyte', 'result')
    )

    unlabeled = cleaned.select(pl.col('analyte').is_null().sum()).item()
    if unlabeled:
        log.warning('%d chemistry rows with an analyte outside %s', unlabeled, list(analyte_labels))

    return cleaned
