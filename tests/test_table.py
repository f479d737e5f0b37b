from datetime import date

import polars as pl
import pytest

from relwrangle import Column, Schema, SchemaError, Table, TableBuilder
from relwrangle.dtypes import cell_kind, infer_polars_type, is_missing

from relwrangle._testing import ceden_hab, data1, df_chem


def test_definitions():
    print(df_chem.pretty_str())
    assert df_chem.columns == (
        'stationcode', 'sampledate', 'sampleid', 'analyte', 'result'
    )
    assert df_chem.height == 4
    assert df_chem.width == 5
    # scalars get recycled
    assert df_chem.column('sampledate') == ['5/12/21'] * 4
    assert ceden_hab.rows == (('X', 'riparian cover', 0.2),)


def test_builder():
    builder = TableBuilder(('ID', 'variable1'), name='built')
    builder.append((1, 'a1'))
    builder.extend([(2, 'a2')])
    assert builder.rows() == 2

    table = builder.flush()
    assert table == data1
    assert table.name == 'built'

    # buffers are cleared for reuse
    assert builder.rows() == 0
    assert builder.flush().height == 0

    with pytest.raises(SchemaError):
        builder.append((1, 'a1', 'extra'))


def test_from_constructors_agree():
    from_rows = Table.from_rows(('ID', 'variable1'), [(1, 'a1'), (2, 'a2')])
    from_dicts = Table.from_dicts(
        [{'ID': 1, 'variable1': 'a1'}, {'variable1': 'a2', 'ID': 2}]
    )

    assert from_rows == data1
    assert from_dicts == data1

    sparse = Table.from_dicts([{'a': 1}, {'b': 2}])
    assert sparse.columns == ('a', 'b')
    assert sparse.rows == ((1, None), (None, 2))


def test_invalid_shapes():
    with pytest.raises(SchemaError):
        Table(('a', 'a'))

    with pytest.raises(SchemaError):
        Table(('a', 'b'), [(1,)])

    with pytest.raises(SchemaError):
        Table.from_columns({'a': [1, 2, 3], 'b': [1, 2]})

    with pytest.raises(SchemaError):
        data1.column('nope')

    with pytest.raises(SchemaError):
        data1.select('ID', 'nope')

    with pytest.raises(SchemaError):
        data1.rename({'nope': 'x'})


def test_select_filter_rename():
    assert data1.select('variable1').rows == (('a1',), ('a2',))
    assert data1.filter(lambda row: row['ID'] > 1).rows == ((2, 'a2'),)

    renamed = data1.rename({'variable1': 'v1'})
    assert renamed.columns == ('ID', 'v1')
    assert renamed.rows == data1.rows
    assert data1.columns == ('ID', 'variable1')


def test_pipe():
    assert data1.pipe(Table.select, 'ID').column('ID') == [1, 2]


def test_polars_roundtrip():
    frame = df_chem.to_polars()
    assert dict(frame.schema) == {
        'stationcode': pl.String,
        'sampledate': pl.String,
        'sampleid': pl.String,
        'analyte': pl.String,
        'result': pl.Int64,
    }
    assert Table.from_polars(frame) == df_chem

    mixed = Table(
        ('n', 'when', 'gap'),
        [(1, date(2021, 5, 12), None), (2.5, None, None)],
    ).to_polars()
    assert mixed.schema['n'] == pl.Float64
    assert mixed.schema['when'] == pl.Date
    assert mixed.schema['gap'] == pl.Null
    assert mixed['n'].to_list() == [1.0, 2.5]


def test_declared_dtypes_win():
    table = Table(Schema([Column('ID', pl.Float64())]), [(1,), (None,)])
    frame = table.to_polars()
    assert frame.schema['ID'] == pl.Float64
    assert frame['ID'].to_list() == [1.0, None]


def test_equals_unordered():
    flipped = Table(data1.columns, reversed(data1.rows))
    assert flipped != data1
    assert flipped.equals_unordered(data1)


def test_cells():
    assert is_missing(None)
    assert is_missing(float('nan'))
    assert not is_missing(0)
    assert not is_missing('')

    assert cell_kind('x') == 'string'
    assert cell_kind(True) == 'numeric'
    assert cell_kind(date(2021, 1, 1)) == 'temporal'
    assert cell_kind(None) == 'missing'

    with pytest.raises(TypeError):
        cell_kind(object())

    assert infer_polars_type([1, 'a']) == pl.String
    assert infer_polars_type([True, False, None]) == pl.Boolean
    assert infer_polars_type([None]) is None
