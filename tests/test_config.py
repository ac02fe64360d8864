from __future__ import annotations

import pytest

from speedprobe.config import SizeConfig, env_int, parse_int, resolve_download_size
from speedprobe.constants import DEFAULT_SIZE, MAX_DOWNLOAD, MAX_UPLOAD, MIB

CONFIG = SizeConfig(default_size=10485760, max_download=104857600, max_upload=104857600)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("42", 42),
        (" 7", 7),
        ("12abc", 12),
        ("-3", -3),
        ("+5", 5),
        ("007", 7),
        ("abc", None),
        ("", None),
        (None, None),
        ("\u0663", None),
        ("9" * 400, None),
        ("9" * 5000, None),
    ],
)
def test_parse_int(raw, expected):
    assert parse_int(raw) == expected


def test_from_env_defaults():
    cfg = SizeConfig.from_env({})
    assert cfg == SizeConfig(DEFAULT_SIZE, MAX_DOWNLOAD, MAX_UPLOAD)


def test_from_env_each_value_falls_back_independently():
    cfg = SizeConfig.from_env({"DEFAULT_SIZE": "0", "MAX_DOWNLOAD": "2048", "MAX_UPLOAD": "lots"})
    assert cfg.default_size == DEFAULT_SIZE
    assert cfg.max_download == 2048
    assert cfg.max_upload == MAX_UPLOAD


def test_env_int_reads_process_environment(monkeypatch):
    monkeypatch.setenv("MAX_UPLOAD", "4096")
    assert env_int("MAX_UPLOAD", 1) == 4096
    monkeypatch.setenv("MAX_UPLOAD", "-1")
    assert env_int("MAX_UPLOAD", 1) == 1


@pytest.mark.parametrize("raw", [None, "", "0", "-5", "abc", "   "])
def test_invalid_request_uses_default(raw):
    assert resolve_download_size(raw, CONFIG) == 10485760


def test_oversized_request_is_clamped():
    assert resolve_download_size("999999999", CONFIG) == 104857600


def test_valid_request_passes_through():
    assert resolve_download_size("1", CONFIG) == 1
    assert resolve_download_size("123456", CONFIG) == 123456


def test_default_above_maximum_is_clamped():
    cfg = SizeConfig(default_size=50 * MIB, max_download=MIB, max_upload=MIB)
    assert resolve_download_size(None, cfg) == MIB


def test_effective_size_always_within_bounds():
    cfg = SizeConfig(default_size=100, max_download=1000, max_upload=1000)
    for raw in ["-1000", "-1", "0", "1", "99", "100", "999", "1000", "1001", "10**9", "x1", "1e9"]:
        size = resolve_download_size(raw, cfg)
        assert 1 <= size <= cfg.max_download


def test_huge_values_stay_finite_or_fall_back():
    assert parse_int("1" + "0" * 300) == 10**300
    assert parse_int("0" * 5000 + "12") == 12
    assert parse_int("-" + "9" * 400) is None


@pytest.mark.parametrize("raw", ["9" * 400, "9" * 5000, "٣"])
def test_non_finite_or_non_ascii_request_uses_default(raw):
    assert resolve_download_size(raw, CONFIG) == 10485760


def test_from_env_with_overlong_value_falls_back():
    cfg = SizeConfig.from_env({"MAX_UPLOAD": "9" * 5000, "DEFAULT_SIZE": "9" * 400})
    assert cfg.max_upload == MAX_UPLOAD
    assert cfg.default_size == DEFAULT_SIZE
