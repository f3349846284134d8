"""
Time source used by the issuer, the ledger and the verifier.
"""

from __future__ import annotations

import time
from typing import Callable

Clock = Callable[[], int]


def current_timestamp() -> int:
    """Return wall-clock time in whole seconds since the epoch."""
    return int(time.time())
