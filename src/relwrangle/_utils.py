'''
Misc internal utilities

'''
import os
from typing import Literal

from relwrangle.errors import RelWrangleError


collision_policies: tuple[str, ...] = ('suffix', 'error')


def get_loglevel() -> str:
    return os.getenv('RELWRANGLE_LOGLEVEL', 'info')


def get_collision_policy() -> Literal['suffix', 'error']:
    '''
    Default policy for non key columns present on both sides of a join,
    overridable through the `RELWRANGLE_ON_COLLISION` env var.

    '''
    policy = os.getenv('RELWRANGLE_ON_COLLISION', 'suffix').lower()
    if policy not in collision_policies:
        raise RelWrangleError(
            f'Invalid RELWRANGLE_ON_COLLISION={policy!r}, expected one of {collision_policies}'
        )

    return policy  # type: ignore[return-value]
