"""
Diagnostic utilities.

Memory and timing figures for extraction stages, logged through the module
logger.
"""

import contextlib
import logging
import threading
import time
from collections.abc import Iterator
from typing import Any

import psutil

logger = logging.getLogger(__name__)

_BYTES_PER_MB = 1024 * 1024


def get_memory_info() -> dict[str, Any]:
    """Get process and system memory usage information."""
    try:
        process = psutil.Process()
        memory_info = process.memory_info()
        system_memory = psutil.virtual_memory()

        return {
            'process_rss_mb': round(memory_info.rss / _BYTES_PER_MB, 2),
            'process_vms_mb': round(memory_info.vms / _BYTES_PER_MB, 2),
            'system_available_mb': round(
                system_memory.available / _BYTES_PER_MB,
                2,
            ),
            'system_used_percent': system_memory.percent,
        }
    except psutil.Error as e:
        return {'error': f'Failed to get memory info: {e}'}


def log_memory_usage(context: str = '') -> None:
    """Quick memory usage logging."""
    memory_info = get_memory_info()
    context_label = f' ({context})' if context else ''
    logger.info(
        'Memory usage%s: RSS=%sMB, Available=%sMB',
        context_label,
        memory_info.get('process_rss_mb', 'N/A'),
        memory_info.get('system_available_mb', 'N/A'),
    )


@contextlib.contextmanager
def stage_timer(label: str, level: int = logging.INFO) -> Iterator[None]:
    """Log wall time and RSS change of the wrapped block."""
    rss_before = get_memory_info().get('process_rss_mb')
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        rss_after = get_memory_info().get('process_rss_mb')
        if isinstance(rss_before, float) and isinstance(rss_after, float):
            delta = f'{rss_after - rss_before:+.2f}MB'
        else:
            delta = 'N/A'
        logger.log(
            level,
            'Stage "%s" finished in %.3fs (RSS %s, thread %s)',
            label,
            elapsed,
            delta,
            threading.current_thread().name,
        )
