from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from ricemill_admin.config import Settings, load_settings, normalize_prefix


def _write(tmp_path: Path, data) -> Path:
    p = tmp_path / "settings.yaml"
    p.write_text(yaml.safe_dump(data), encoding="utf-8")
    return p


def test_defaults():
    s = Settings()
    assert s.api_url("/admin/crop-years") == "http://localhost:3000/api/admin/crop-years"
    assert s.api_token is None
    assert s.crop_year_page_limit == 50


@pytest.mark.parametrize(
    "raw, expected",
    [("/api", "/api"), ("api", "/api"), ("/api/", "/api"), ("", ""), ("/", ""), (" /v2 ", "/v2")],
)
def test_normalize_prefix(raw, expected):
    assert normalize_prefix(raw) == expected


def test_yaml_values_are_loaded(tmp_path: Path):
    path = _write(tmp_path, {"api_base_url": "http://mill:8080", "api_prefix": "v1/", "request_timeout": 7, "debug": True})
    s = load_settings(path, environ={})
    assert s.api_base_url == "http://mill:8080"
    assert s.api_prefix == "/v1"
    assert s.request_timeout == 7.0
    assert s.debug is True


def test_environment_overrides_yaml(tmp_path: Path):
    path = _write(tmp_path, {"api_base_url": "http://mill:8080", "crop_year_page_limit": 10})
    env = {
        "RICEMILL_API_BASE_URL": "https://admin.example",
        "RICEMILL_API_TOKEN": "tok",
        "RICEMILL_CROP_YEAR_PAGE_LIMIT": "25",
        "RICEMILL_DEBUG": "yes",
    }
    s = load_settings(path, environ=env)
    assert s.api_base_url == "https://admin.example"
    assert s.api_token == "tok"
    assert s.crop_year_page_limit == 25
    assert s.debug is True


def test_unknown_keys_are_ignored(tmp_path: Path, caplog):
    path = _write(tmp_path, {"api_base_url": "http://mill", "colour": "blue"})
    with caplog.at_level("WARNING"):
        s = load_settings(path, environ={})
    assert s.api_base_url == "http://mill"
    assert "colour" in caplog.text


def test_invalid_value_raises(tmp_path: Path):
    path = _write(tmp_path, {"crop_year_page_limit": "many"})
    with pytest.raises(ValueError, match="crop_year_page_limit"):
        load_settings(path, environ={})


def test_non_mapping_file_raises(tmp_path: Path):
    path = _write(tmp_path, ["a", "b"])
    with pytest.raises(ValueError):
        load_settings(path, environ={})


def test_explicit_missing_file_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "missing.yaml", environ={})


def test_empty_file_keeps_defaults(tmp_path: Path):
    path = tmp_path / "settings.yaml"
    path.write_text("", encoding="utf-8")
    assert load_settings(path, environ={}) == Settings()
