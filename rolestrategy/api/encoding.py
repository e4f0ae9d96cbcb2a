from __future__ import annotations

from typing import Dict, Iterable, Optional, Union
from urllib.parse import urlencode


Params = Dict[str, str]


def encode_bool(value: bool) -> str:
    return "true" if value else "false"


def join_names(names: Union[str, Iterable[str]]) -> str:
    """
    Join names with a bare comma.
    Embedded commas are not escaped, so a name containing ',' is read back by the
    server as two names.
    """
    if isinstance(names, str):
        return names
    return ",".join(str(name) for name in names)


def set_optional(params: Params, key: str, value: Optional[str]) -> None:
    # Omission is how "not provided" is expressed; never send an empty value.
    if value:
        params[key] = value


def encode_form(params: Params) -> str:
    return urlencode(params)
