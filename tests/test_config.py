import json
import os
import pytest

from facturas import config as cfg_mod
from facturas.config import ConfigError, default_config, load_app_config, validate_config


def _env(tmp_path, **extra):
    env = {"FACTURAS_HOME": str(tmp_path / "home")}
    env.update(extra)
    return env


def test_defaults_when_nothing_configured(tmp_path):
    env = _env(tmp_path)
    cfg = load_app_config(environ=env)
    assert cfg == default_config(env)
    assert cfg["storage_dir"] == str(tmp_path / "home")
    assert cfg["pdf_dir"] == os.path.join(str(tmp_path / "home"), "pdfs")
    assert (cfg["default_iva"], cfg["default_irpf"], cfg["currency"]) == (21.0, 15.0, "EUR")


def test_home_default_is_dot_dir():
    assert cfg_mod.app_home({}) == os.path.join(os.path.expanduser("~"), ".facturas")


def test_file_takes_precedence(tmp_path):
    env = _env(tmp_path, FACTURAS_DEFAULT_IVA="10")
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"default_iva": 4, "storage_dir": str(tmp_path / "datos"), "log_level": "debug"}))
    cfg = load_app_config(str(path), environ=env)
    assert cfg["default_iva"] == 4.0
    assert cfg["storage_dir"] == str(tmp_path / "datos")
    assert cfg["log_level"] == "DEBUG"


def test_invalid_file_falls_back_to_env(tmp_path):
    env = _env(tmp_path, FACTURAS_DEFAULT_IVA="10", FACTURAS_DEFAULT_IRPF="7,5",
               FACTURAS_STORAGE_PATH=str(tmp_path / "env_store"))
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"default_iva": 150}))
    cfg = load_app_config(str(path), environ=env)
    assert cfg["default_iva"] == 10.0
    assert cfg["default_irpf"] == 7.5
    assert cfg["storage_dir"] == str(tmp_path / "env_store")


def test_invalid_env_falls_back_to_defaults(tmp_path):
    env = _env(tmp_path, FACTURAS_DEFAULT_IRPF="muchos")
    cfg = load_app_config(str(tmp_path / "no_existe.json"), environ=env)
    assert cfg["default_irpf"] == 15.0


def test_config_file_in_app_home(tmp_path):
    env = _env(tmp_path)
    home = tmp_path / "home"
    home.mkdir()
    (home / "config.json").write_text(json.dumps({"currency": "usd"}))
    assert load_app_config(environ=env)["currency"] == "USD"


@pytest.mark.parametrize("key, value", [
    ("default_iva", -1), ("default_irpf", 100.5), ("default_iva", "21"), ("log_level", "TRACE"),
    ("storage_dir", ""),
])
def test_validate_config_rejects(tmp_path, key, value):
    cfg = default_config(_env(tmp_path))
    cfg[key] = value
    with pytest.raises(ConfigError):
        validate_config(cfg)


@pytest.mark.parametrize("raw, expected", [
    (False, False), (True, True), ("false", False), ("No", False), ("0", False), ("true", True), ("sí", True),
])
def test_confirm_prompts_parses_words(tmp_path, raw, expected):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"confirm_prompts": raw}), encoding="utf-8")
    assert load_app_config(str(path), environ=_env(tmp_path))["confirm_prompts"] is expected


def test_confirm_prompts_unknown_word_discards_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"confirm_prompts": "quizás", "default_iva": 4}), encoding="utf-8")
    cfg = load_app_config(str(path), environ=_env(tmp_path))
    assert cfg["default_iva"] == 21.0
    assert cfg["confirm_prompts"] is True
