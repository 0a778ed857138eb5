"""Runtime configuration for RowQL schemas."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

__all__ = ['RowQLConfig', 'VALUE_FILTERS']

VALUE_FILTERS = ('present', 'truthy')

_TRUE = ('1', 'true', 't', 'yes', 'y', 'on')


@dataclass
class RowQLConfig:
    """Settings shared by every table of a :class:`~rowql.schema.RowSchema`.

    dialect: SQL dialect used for identifier quoting and INSERT rendering.
    value_filter: which submitted input values become INSERT columns.
        ``present`` keeps every value that is not null/omitted; ``truthy``
        keeps only truthy values (drops ``0``, ``""`` and ``false`` too).
    commit: commit the SQLAlchemy session after each insert.
    payload_interface_name: name of the interface every payload implements.
    """

    dialect: str = 'postgresql'
    value_filter: str = 'present'
    commit: bool = True
    payload_interface_name: str = 'MutationPayload'

    def __post_init__(self) -> None:
        if self.value_filter not in VALUE_FILTERS:
            raise ValueError(f"Unknown value_filter {self.value_filter!r}; expected one of {VALUE_FILTERS}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'RowQLConfig':
        """Build from ``ROWQL_*`` environment variables, keeping defaults for unset ones."""
        env = os.environ if environ is None else environ
        kwargs = {}
        if env.get('ROWQL_DIALECT'):
            kwargs['dialect'] = env['ROWQL_DIALECT']
        if env.get('ROWQL_VALUE_FILTER'):
            kwargs['value_filter'] = env['ROWQL_VALUE_FILTER'].strip().lower()
        if env.get('ROWQL_COMMIT'):
            kwargs['commit'] = env['ROWQL_COMMIT'].strip().lower() in _TRUE
        return cls(**kwargs)
