"""Unit tests for core.config."""

import os
from pathlib import Path

import pytest
from market_sim.core.config import Config, load_config

ENV_KEYS = (
    "INITIAL_CAPITAL", "MAX_LEVERAGE", "MIN_LEVERAGE", "DEFAULT_LEVERAGE", "MAX_HEDGES",
    "PLAYER_LEVEL", "HEDGE_COST_REDUCTION", "HEDGE_COOLDOWN_REDUCTION",
    "CANDLES_PATH", "COMMANDS_PATH", "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def _write_config(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults_without_file(tmp_path):
    cfg = load_config(tmp_path / "missing.yaml", tmp_path)
    assert cfg.initial_capital == 10000.0
    assert cfg.max_leverage == 3.0
    assert cfg.min_leverage == 0.5
    assert cfg.max_hedges == 2
    assert cfg.player_level == 1
    assert cfg.candles_path is None
    assert cfg.log_level == "INFO"
    assert cfg.log_dir == Path("logs")


def test_yaml_values(tmp_path):
    path = _write_config(tmp_path, (
        "portfolio:\n  initial_capital: 5000\n  max_leverage: 2.0\n"
        "hedging:\n  max_hedges: 3\n  player_level: 10\n  cost_reduction: 0.002\n  cooldown_reduction: 1\n"
        "replay:\n  candles_path: data/spy.csv\n"
        "logging:\n  level: DEBUG\n  log_file: sim.log\n"
    ))
    cfg = load_config(path, tmp_path)
    assert cfg.initial_capital == 5000.0
    assert cfg.max_leverage == 2.0
    assert cfg.max_hedges == 3
    assert cfg.player_level == 10
    assert cfg.hedge_cost_reduction == pytest.approx(0.002)
    assert cfg.hedge_cooldown_reduction == 1
    assert cfg.candles_path == Path("data/spy.csv")
    assert cfg.commands_path is None
    assert cfg.log_level == "DEBUG"
    assert cfg.log_file == "sim.log"


def test_env_overrides_yaml(tmp_path, monkeypatch):
    path = _write_config(tmp_path, "portfolio:\n  initial_capital: 5000\nhedging:\n  player_level: 3\n")
    monkeypatch.setenv("INITIAL_CAPITAL", "25000")
    monkeypatch.setenv("PLAYER_LEVEL", "15")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    cfg = load_config(path, tmp_path)
    assert cfg.initial_capital == 25000.0
    assert cfg.player_level == 15
    assert cfg.log_level == "WARNING"


def test_invalid_env_number_falls_back(tmp_path, monkeypatch):
    path = _write_config(tmp_path, "hedging:\n  max_hedges: 4\n")
    monkeypatch.setenv("MAX_HEDGES", "lots")
    assert load_config(path, tmp_path).max_hedges == 4


def test_dotenv_file_is_loaded(tmp_path):
    (tmp_path / ".env").write_text("MAX_LEVERAGE=2.5\n", encoding="utf-8")
    try:
        cfg = load_config(tmp_path / "missing.yaml", tmp_path)
    finally:
        os.environ.pop("MAX_LEVERAGE", None)
    assert cfg.max_leverage == 2.5


def test_config_defaults():
    cfg = Config()
    assert cfg.default_leverage == 1.0
    assert cfg.hedge_cooldown_reduction == 0
    assert cfg.log_file == "market_sim.log"
