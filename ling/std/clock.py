import time
from typing import Any, List


def std_clock(args: List[Any]) -> float:
    """Current Unix time in whole milliseconds."""
    return float(time.time_ns() // 1_000_000)
