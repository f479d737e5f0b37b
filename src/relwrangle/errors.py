class RelWrangleError(Exception):
    '''Base error for all relwrangle failures.'''


class SchemaError(RelWrangleError):
    '''
    Raised on invalid table shapes: duplicate column names, rows with the
    wrong width or references to columns that don't exist.

    '''


class KeyColumnNotFound(SchemaError):
    def __init__(self, column: str, side: str, available: tuple[str, ...]) -> None:
        self.column = column
        self.side = side
        self.available = available
        super().__init__(
            f'Join key column {column!r} not found in {side} table, '
            f'columns: {list(available)}'
        )


class ColumnNameCollision(SchemaError):
    def __init__(self, column: str, msg: str | None = None) -> None:
        self.column = column
        super().__init__(
            msg or f'Non-key column {column!r} present in both tables'
        )
