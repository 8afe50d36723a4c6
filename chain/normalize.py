# app/chain/normalize.py
"""
Turns values decoded by web3 into something json.dumps accepts without
losing information silently.

uint256 values come back as Python ints of arbitrary size. Anything a
JavaScript client can hold exactly (|n| <= 2**53 - 1) stays a number; larger
values are sent as decimal strings.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

MAX_SAFE_INTEGER = 2**53 - 1


def normalize(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if -MAX_SAFE_INTEGER <= value <= MAX_SAFE_INTEGER:
            return value
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, Mapping):
        return {k: normalize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [normalize(v) for v in value]
    return value
