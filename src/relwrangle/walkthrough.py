'''
Joining & cleaning walkthrough.

Runs every step of the tutorial in order and logs the resulting tables:

    python -m relwrangle.walkthrough

'''
import logging

import polars as pl

from relwrangle._log import setup_logging
from relwrangle._testing import (
    ceden_chem,
    ceden_hab,
    ceden_station,
    data1,
    data2,
    data3,
    df_chem,
    df_station,
    fruit,
    fruit_df,
)
from relwrangle.cleaning import (
    clean_chemistry,
    str_detect,
    str_replace_all,
    str_sub,
    str_to_upper,
    str_trim,
)
from relwrangle.table import Table


log = logging.getLogger(__name__)


def show(title: str, result: Table | pl.DataFrame | pl.Series) -> None:
    if isinstance(result, Table):
        result = result.with_name(title)
        log.info('\n%s', result.pretty_str())
        return

    log.info('%s:\n%s', title, result)


def join_examples() -> dict[str, Table]:
    '''The five join variants on data1 & data2, plus chained and multi key joins.'''
    results = {
        # all rows of data1, missing variable2 where there is no match
        'left': data1.left_join(data2, by='ID'),
        # all rows of data2
        'right': data1.right_join(data2, by='ID'),
        # only the shared ID
        'inner': data1.inner_join(data2, by='ID'),
        # every row and column of both sides
        'full': data1.full_join(data2, by='ID'),
        # rows of data1 without a match, data1 columns only
        'anti': data1.anti_join(data2, by='ID'),
        'chained': (
            data1
            .full_join(data2, by='ID')
            .full_join(data3, by='ID')
        ),
        'multi_key': data2.full_join(data3, by=['ID', 'variable2']),
    }
    for title, result in results.items():
        show(title, result)

    return results


def inventory_examples() -> dict[str, Table]:
    '''Station lookups and data inventories keyed under different names.'''
    results = {
        # lat/long for every chemistry result
        'chem_station': ceden_chem.left_join(
            ceden_station, by={'stationcode': 'stationid'}
        ),
        # stations with chemistry data but no habitat data
        'chem_nohab': ceden_chem.anti_join(ceden_hab, by='stationcode'),
    }
    for title, result in results.items():
        show(title, result)

    return results


def string_examples() -> dict[str, pl.DataFrame]:
    frame = fruit.to_frame()
    results = {
        'fruit_strings': frame.select(
            pl.col('fruit'),
            str_to_upper('fruit').alias('upper'),
            str_detect('fruit', 'apple').alias('has_apple'),
            str_trim('fruit').alias('trimmed'),
            str_replace_all('fruit', '[0-9]', '').alias('no_digits'),
            str_sub('fruit', end=1).alias('first'),
        ),
        'fruit_filter': (
            fruit_df.to_polars()
            .with_columns(str_sub('fruit', end=1).alias('id'))
            .filter(str_detect('fruit', 'apple'))
        ),
    }
    for title, result in results.items():
        show(title, result)

    return results


def chemistry_examples() -> dict[str, Table]:
    '''Clean the chemistry samples, then attach station information.'''
    chem_clean = Table.from_polars(
        clean_chemistry(df_chem.to_polars()), name='chem_clean'
    )
    by = {'stationcode': 'stationid'}
    results = {
        'chem_clean': chem_clean,
        # chem rows, chem & station columns
        'chem_left': df_chem.left_join(df_station, by=by),
        # station rows, chem & station columns
        'chem_right': df_chem.right_join(df_station, by=by),
        # stations with both nutrient data & station information
        'chem_inner': df_chem.inner_join(df_station, by=by),
        'clean_inner': chem_clean.inner_join(df_station, by=by),
    }
    for title, result in results.items():
        show(title, result)

    return results


def main() -> None:
    setup_logging()

    join_examples()
    inventory_examples()
    string_examples()
    chemistry_examples()


if __name__ == '__main__':
    main()
