"""Tests for shared.diagnostics helpers."""

import logging

import psutil

import shared.diagnostics as diagnostics


def test_get_memory_info_direct():
    info = diagnostics.get_memory_info()
    assert 'process_rss_mb' in info
    assert 'system_available_mb' in info


def test_get_memory_info_psutil_error(monkeypatch):
    def boom():
        raise psutil.Error('no access')

    monkeypatch.setattr(diagnostics.psutil, 'Process', boom)
    info = diagnostics.get_memory_info()
    assert 'error' in info


def test_log_memory_usage_direct(caplog):
    with caplog.at_level(logging.INFO):
        diagnostics.log_memory_usage('test context')
    assert 'Memory usage (test context)' in caplog.text


def test_log_memory_usage_without_info(monkeypatch, caplog):
    monkeypatch.setattr(diagnostics, 'get_memory_info', lambda: {'error': 'x'})
    with caplog.at_level(logging.INFO):
        diagnostics.log_memory_usage()
    assert 'RSS=N/AMB' in caplog.text


def test_stage_timer_logs(caplog):
    with caplog.at_level(logging.DEBUG), diagnostics.stage_timer('unit', logging.DEBUG):
        pass
    assert 'Stage "unit" finished' in caplog.text
    assert 'MainThread' in caplog.text


def test_stage_timer_logs_on_error(caplog):
    with caplog.at_level(logging.INFO):
        try:
            with diagnostics.stage_timer('failing'):
                raise KeyError('x')
        except KeyError:
            pass
    assert 'Stage "failing" finished' in caplog.text
