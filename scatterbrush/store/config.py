"""Process-wide default options for store queries."""

from __future__ import annotations

import copy

from .model import QueryOptions

_QUERY_OPTIONS = QueryOptions()


def get_query_options() -> QueryOptions:
    return copy.deepcopy(_QUERY_OPTIONS)


def set_query_options(options: QueryOptions) -> None:
    global _QUERY_OPTIONS
    _QUERY_OPTIONS = copy.deepcopy(options)
