"""Shared utilities and helpers."""
from shared.diagnostics import get_memory_info, log_memory_usage, stage_timer

__all__ = [
    'get_memory_info',
    'log_memory_usage',
    'stage_timer',
]
