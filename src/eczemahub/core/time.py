from __future__ import annotations

import time


def now_unix_seconds() -> int:
    """Return the current Unix timestamp in whole seconds."""
    return int(time.time())
