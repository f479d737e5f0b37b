from datetime import date

import polars as pl
import pytest

from relwrangle.cleaning import (
    case_when,
    clean_chemistry,
    day,
    dmy,
    mdy,
    month,
    myd,
    parse_date,
    str_detect,
    str_replace_all,
    str_sub,
    str_to_lower,
    str_to_upper,
    str_trim,
    year,
    ymd,
)

from relwrangle._testing import df_chem, fruit


def _apply(values: list, expr: pl.Expr) -> list:
    return pl.DataFrame({'s': values}).select(expr).to_series().to_list()


def test_fruit_strings():
    frame = fruit.to_frame()

    def col(expr: pl.Expr) -> list:
        return frame.select(expr).to_series().to_list()

    assert col(str_to_upper('fruit')) == [
        ' BANANA ', 'FUJI APPLE', 'GRANNY SMITH APPLE', 'TANGERINE15'
    ]
    assert col(str_to_lower(str_to_upper('fruit'))) == fruit.to_list()
    assert col(str_detect('fruit', 'apple')) == [False, True, True, False]
    assert col(str_trim('fruit'))[0] == 'banana'
    assert col(str_replace_all('fruit', '[0-9]', ''))[-1] == 'tangerine'
    assert col(str_sub('fruit', end=1)) == [' ', 'f', 'g', 't']


def test_str_sub_positions():
    word = ['banana']
    assert _apply(word, str_sub('s', 2, 3)) == ['an']
    assert _apply(word, str_sub('s', -3, -2)) == ['an']
    assert _apply(word, str_sub('s', start=-1)) == ['a']
    assert _apply(word, str_sub('s', 1, 10)) == ['banana']
    assert _apply(word, str_sub('s', 5, 2)) == ['']
    assert _apply(['A_1', 'B_2', ''], str_sub('s', start=-1)) == ['1', '2', '']
    assert _apply(['ab', None], str_sub('s', end=1)) == ['a', None]


def test_case_when():
    values = ['total nitrogen', 'phosphorus as p, total', 'chloride', None]
    labels = {'nitrogen': 'tn', 'phosphorus': 'tp'}

    assert _apply(values, case_when('s', labels)) == ['tn', 'tp', None, None]
    assert _apply(values, case_when('s', labels, default='other')) == [
        'tn', 'tp', 'other', 'other'
    ]

    # first pattern wins
    assert _apply(
        ['nitrogen phosphorus'], case_when('s', {'phosphorus': 'tp', 'nitrogen': 'tn'})
    ) == ['tp']

    with pytest.raises(ValueError):
        case_when('s', {})


def test_parse_dates():
    assert _apply(['5/12/21', '05-12-2021', '12/31/1999'], mdy('s')) == [
        date(2021, 5, 12),
        date(2021, 5, 12),
        date(1999, 12, 31),
    ]
    assert _apply(['12.5.21'], dmy('s')) == [date(2021, 5, 12)]
    assert _apply(['2021/5/12'], ymd('s')) == [date(2021, 5, 12)]
    assert _apply(['5-2021-12'], myd('s')) == [date(2021, 5, 12)]

    # two digit year pivot
    assert _apply(['1/1/68', '1/1/69'], mdy('s')) == [
        date(2068, 1, 1),
        date(1969, 1, 1),
    ]

    # invalid or unparseable inputs become null
    assert _apply(['2/30/21', '13/1/21', 'garbage', '5/12', None], mdy('s')) == [
        None, None, None, None, None
    ]

    with pytest.raises(ValueError):
        parse_date('s', 'mmy')  # type: ignore[arg-type]


def test_date_parts():
    frame = pl.DataFrame({'d': [date(2021, 5, 12)]})
    assert frame.select(
        year('d').alias('y'), month('d').alias('m'), day('d').alias('d')
    ).row(0) == (2021, 5, 12)


def test_clean_chemistry():
    cleaned = clean_chemistry(df_chem.to_polars())

    assert cleaned.columns == [
        'stationcode', 'sampledate', 'replicate', 'analyte', 'result'
    ]
    assert cleaned['sampledate'].to_list() == [date(2021, 5, 12)] * 4
    assert cleaned['replicate'].to_list() == ['1', '1', '2', '2']
    assert cleaned['analyte'].to_list() == ['tn', 'tp', 'tn', 'tp']
    assert cleaned['result'].to_list() == [1, 2, 3, 4]


def test_clean_chemistry_warns_on_unknown_analytes(caplog):
    frame = df_chem.to_polars().with_columns(
        pl.lit('Chloride').alias('analyte')
    )
    with caplog.at_level('WARNING'):
        cleaned = clean_chemistry(frame)

    assert cleaned['analyte'].null_count() == 4
    assert 'analyte outside' in caplog.text
