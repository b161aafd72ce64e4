"""Runtime snapshot provider — process statistics for the status document."""

from __future__ import annotations

import gc
import platform
import sys
import threading
from collections.abc import Callable
from datetime import datetime, timezone

import psutil

from .models import Runtime

RuntimeProvider = Callable[[], Runtime]


def collect() -> Runtime:
    """Collect a fresh snapshot of the current process."""
    mem = psutil.Process().memory_info()
    return Runtime(
        collected_at=datetime.now(timezone.utc),
        arch=platform.machine(),
        os=sys.platform,
        version=f"python{platform.python_version()}",
        goroutines_count=threading.active_count(),
        heap_objects_count=len(gc.get_objects()),
        alloc_bytes=mem.rss,
        total_alloc_bytes=mem.vms,
    )
