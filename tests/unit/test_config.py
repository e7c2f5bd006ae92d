"""
tests/unit/test_config.py

Unit tests for config.py.
Config files are written to pytest's tmp_path; nothing touches config/.
"""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from config import AppConfig, DomainConfig, load_config
from exceptions import ConfigError


def _write(tmp_path, data):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding="utf-8")
    return str(path)


_VALID = {
    "api_token": "secret",
    "zones": {"example.com": "zone123"},
    "domains": [{"name": "home.example.com", "record": "home"}],
    "interval": 10,
    "ttl": 300,
}


# ---------------------------------------------------------------------------
# load_config — happy path
# ---------------------------------------------------------------------------


def test_load_config_reads_valid_file(tmp_path):
    config = load_config(_write(tmp_path, _VALID))

    assert config.api_token == "secret"
    assert config.domains == [DomainConfig(name="home.example.com", record="home")]
    assert config.interval_seconds == 600
    assert config.ttl == 300
    assert config.continue_on_error is True


def test_load_config_applies_defaults(tmp_path):
    data = {k: v for k, v in _VALID.items() if k not in ("interval", "ttl")}
    config = load_config(_write(tmp_path, data))

    assert config.interval == 5
    assert config.ttl == 1
    assert config.ip_service_url.startswith("https://api.ipify.org")
    assert config.api_base_url == "https://api.cloudflare.com/client/v4"


def test_load_config_uses_env_path(tmp_path, monkeypatch):
    monkeypatch.setenv("DDNS_CONFIG", _write(tmp_path, _VALID))
    assert load_config().api_token == "secret"


def test_load_config_takes_token_from_env(tmp_path, monkeypatch):
    monkeypatch.setenv("CLOUDFLARE_API_TOKEN", "from-env")
    data = {k: v for k, v in _VALID.items() if k != "api_token"}

    assert load_config(_write(tmp_path, data)).api_token == "from-env"


def test_config_is_frozen(tmp_path):
    config = load_config(_write(tmp_path, _VALID))
    with pytest.raises(ValidationError):
        config.ttl = 60


# ---------------------------------------------------------------------------
# load_config — failures are ConfigError
# ---------------------------------------------------------------------------


def test_load_config_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(str(tmp_path / "nope.json"))


def test_load_config_corrupt_json(tmp_path):
    with pytest.raises(ConfigError, match="parse"):
        load_config(_write(tmp_path, "{not json"))


def test_load_config_not_an_object(tmp_path):
    with pytest.raises(ConfigError):
        load_config(_write(tmp_path, [1, 2, 3]))


@pytest.mark.parametrize(
    "override",
    [
        {"api_token": ""},
        {"domains": []},
        {"interval": 0},
        {"ttl": 10},
        {"domains": [{"name": "home.example.com"}]},
        {"unknown_key": True},
    ],
    ids=["empty-token", "no-domains", "zero-interval", "bad-ttl", "missing-record", "unknown-key"],
)
def test_load_config_rejects_invalid_values(tmp_path, monkeypatch, override):
    monkeypatch.delenv("CLOUDFLARE_API_TOKEN", raising=False)
    with pytest.raises(ConfigError):
        load_config(_write(tmp_path, {**_VALID, **override}))


def test_load_config_rejects_domain_without_zone(tmp_path):
    data = {
        **_VALID,
        "zones": {"example.com": "z1", "example.org": "z2"},
        "domains": [{"name": "home.example.net", "record": "home"}],
    }
    with pytest.raises(ConfigError, match="no zone configured"):
        load_config(_write(tmp_path, data))


# ---------------------------------------------------------------------------
# zone_for
# ---------------------------------------------------------------------------


def _config(**overrides):
    return AppConfig.model_validate({**_VALID, **overrides})


def test_zone_for_matches_base_domain():
    config = _config(zones={"example.com": "z-com", "example.co.uk": "z-uk"})

    assert config.zone_for(DomainConfig(name="a.b.example.co.uk", record="a")) == "z-uk"
    assert config.zone_for(DomainConfig(name="home.example.com", record="home")) == "z-com"


def test_zone_for_prefers_explicit_zone_id():
    config = _config()
    domain = DomainConfig(name="home.example.com", record="home", zone_id="pinned")

    assert config.zone_for(domain) == "pinned"


def test_zone_for_falls_back_to_global_zone_id():
    config = _config(zones={}, zone_id="only-zone")

    assert config.zone_for(DomainConfig(name="home.example.net", record="home")) == "only-zone"


def test_zone_for_uses_single_mapped_zone():
    config = _config(zones={"example.com": "zone123"})

    assert config.zone_for(DomainConfig(name="home.other.net", record="home")) == "zone123"
