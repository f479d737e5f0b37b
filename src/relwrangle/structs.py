from datetime import date, datetime
import json

from typing import Any, Self

import msgspec


class ExtendedEncoder(json.JSONEncoder):
    '''
    stdlib JSONEncoder that supports date types

    '''
    def default(self, o):
        if isinstance(o, datetime):
            return o.isoformat()

        if isinstance(o, date):
            return o.strftime('%Y-%m-%d')

        return super().default(o)


class _Struct:
    @classmethod
    def from_other(cls, other: Self, **kwargs) -> Self:
        params = other.to_dict()
        params.update(kwargs)
        return cls.convert(params)

    @classmethod
    def from_json(cls, s: str | bytes) -> Self:
        return msgspec.json.decode(s, type=cls)

    @classmethod
    def convert(cls, obj: Any) -> Self:
        return msgspec.convert(obj, type=cls)

    def to_dict(self) -> dict:
        return msgspec.to_builtins(self)

    def to_json(self, **kwargs) -> str:
        return json.dumps(self.to_dict(), cls=ExtendedEncoder, **kwargs)


class FrozenStruct(msgspec.Struct, _Struct, frozen=True): ...
