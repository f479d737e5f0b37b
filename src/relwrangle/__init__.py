'''
Glossary:
    - Table: An immutable, in-memory sequence of rows sharing a schema.
    - Join: Combining rows of two tables on equality of key columns.
    - Key column: Column(s) deciding which rows correspond across tables.
    - Anti join: Filtering join keeping the left rows without a match.
    - Semi join: Filtering join keeping the left rows with a match, once.
    - Missing value: `None` (or NaN) standing in for an absent value.

'''

from .errors import (
    RelWrangleError as RelWrangleError,
    SchemaError as SchemaError,
    KeyColumnNotFound as KeyColumnNotFound,
    ColumnNameCollision as ColumnNameCollision,
)

from .schema import Column as Column, Schema as Schema

from .table import Table as Table, TableBuilder as TableBuilder

from .join import (
    JoinOptions as JoinOptions,
    KeyPair as KeyPair,
    join as join,
    inner_join as inner_join,
    left_join as left_join,
    right_join as right_join,
    full_join as full_join,
    anti_join as anti_join,
    semi_join as semi_join,
)
