import random
from typing import Generator

import polars as pl

from relwrangle.dtypes import Cell
from relwrangle.table import Table


# three small tables all related through `ID`
data1 = Table.from_columns(
    {'ID': [1, 2], 'variable1': ['a1', 'a2']},
    name='data1',
)

data2 = Table.from_columns(
    {'ID': [2, 3], 'variable2': ['b1', 'b2']},
    name='data2',
)

# relates to data2 by ID and variable2, IDs are doubles like in an R data.frame
data3 = Table.from_columns(
    {'ID': [2.0, 4.0], 'variable2': ['c1', 'c2'], 'variable3': ['d1', 'd2']},
    name='data3',
)


# CEDEN style chemistry results & station lookup, keyed under different names
ceden_chem = Table.from_columns(
    {
        'stationcode': ['X', 'Y'],
        'analytename': 'total nitrogen',
        'result': [2.0, 3.0],
    },
    name='ceden_chem',
)

ceden_station = Table.from_columns(
    {
        'stationid': ['X', 'Y'],
        'stationname': ['stream a', 'stream b'],
        'latitude': [34.2, 34.1],
        'longitude': [-118.7, -188.6],
    },
    name='ceden_station',
)

ceden_hab = Table.from_columns(
    {'stationcode': 'X', 'metric': 'riparian cover', 'result': 0.2},
    name='ceden_hab',
)


# messy strings
fruit: pl.Series = pl.Series(
    'fruit', [' banana ', 'fuji apple', 'granny smith apple', 'tangerine15']
)

fruit_df = Table.from_columns(
    {
        'fruit': ['apple', 'apple', 'orange'],
        'type': ['fuji', 'granny smith', 'blood'],
    },
    name='fruit_df',
)


# messy chemistry dataset: m/d/y dates, replicate hidden in sampleid and
# unconformed analyte names with stray whitespace
df_chem = Table.from_columns(
    {
        'stationcode': ['A', 'A', 'B', 'B'],
        'sampledate': '5/12/21',
        'sampleid': ['A_1', 'A_1', 'B_2', 'B_2'],
        'analyte': [
            ' Total Nitrogen',
            'Total Phosphorus ',
            'Nitrogen, Total',
            'Phosphorus as P, Total',
        ],
        'result': [1, 2, 3, 4],
    },
    name='df_chem',
)

df_station = Table.from_columns(
    {
        'stationid': ['B', 'C'],
        'landuse': ['Ag', 'Urban'],
        'sitestatus': 'not reference',
    },
    name='df_station',
)


def random_values(
    rng: random.Random,
    n: int,
    *,
    domain: int = 5,
    missing_rate: float = 0.1,
) -> Generator[Cell, None, None]:
    '''
    Yield `n` small integer key values (drawn from `range(domain)`), some of
    them missing.

    '''
    for _ in range(n):
        if rng.random() < missing_rate:
            yield None

        else:
            yield rng.randrange(domain)


def random_table(
    rng: random.Random,
    *,
    prefix: str,
    keys: tuple[str, ...] = ('k',),
    height: int | None = None,
    domain: int = 5,
    missing_rate: float = 0.1,
) -> Table:
    '''
    Random table with integer key columns `keys` and one payload column
    named `{prefix}_v` holding a unique tag per row.

    '''
    height = rng.randrange(0, 12) if height is None else height
    columns: dict[str, list[Cell]] = {
        k: list(random_values(rng, height, domain=domain, missing_rate=missing_rate))
        for k in keys
    }
    columns[f'{prefix}_v'] = [f'{prefix}{i}' for i in range(height)]

    return Table(
        columns.keys(),
        zip(*columns.values()) if height else (),
        name=prefix,
    )
