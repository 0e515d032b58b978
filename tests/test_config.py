# Area: Config Tests
"""Tests for configuration loading and validation."""

import json

import pytest

from periselene.config import (
    DEFAULT_CONFIG,
    ENV_MAPPINGS,
    load_config,
    mission_key,
    participant_key,
    validate_config,
    with_defaults,
)
from periselene.errors import ConfigError


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Remove PERISELENE_* variables and restore them afterwards."""
    for key in ENV_MAPPINGS:
        # setenv first so monkeypatch also removes values loaded from .env
        monkeypatch.setenv(key, "x")
        monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self, clean_env, tmp_path):
        """Test defaults with no file and no environment."""
        config = load_config(env_file=str(tmp_path / "missing.env"))
        assert config == DEFAULT_CONFIG

    def test_json_file(self, clean_env, tmp_path):
        """Test that a JSON file overrides defaults."""
        path = tmp_path / "mission.json"
        path.write_text(json.dumps({"build_duration_seconds": 900, "participant_id": "p1"}))
        config = load_config(str(path), env_file=str(tmp_path / "missing.env"))
        assert config["build_duration_seconds"] == 900
        assert config["participant_id"] == "p1"
        assert config["alert_threshold_seconds"] == 300

    def test_env_overrides_file(self, clean_env, tmp_path):
        """Test that environment variables win over the file."""
        path = tmp_path / "mission.json"
        path.write_text(json.dumps({"reveal_delay_ms": 1000}))
        clean_env.setenv("PERISELENE_REVEAL_DELAY_MS", "8000")
        config = load_config(str(path), env_file=str(tmp_path / "missing.env"))
        assert config["reveal_delay_ms"] == 8000

    def test_dotenv_file(self, clean_env, tmp_path):
        """Test values from a .env file."""
        env_file = tmp_path / ".env"
        env_file.write_text("PERISELENE_PARTICIPANT_ID=p42\nPERISELENE_TICK_INTERVAL_SECONDS=0.5\n")
        config = load_config(env_file=str(env_file))
        assert config["participant_id"] == "p42"
        assert config["tick_interval_seconds"] == 0.5

    def test_bad_env_value(self, clean_env, tmp_path):
        """Test that an unreadable number raises ConfigError."""
        clean_env.setenv("PERISELENE_MAX_OFFSET_MS", "a minute")
        with pytest.raises(ConfigError) as exc_info:
            load_config(env_file=str(tmp_path / "missing.env"))
        assert "PERISELENE_MAX_OFFSET_MS" in exc_info.value.problems[0]

    def test_bad_json(self, clean_env, tmp_path):
        """Test that a broken file raises ConfigError."""
        path = tmp_path / "mission.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError):
            load_config(str(path), env_file=str(tmp_path / "missing.env"))

    def test_missing_file(self, clean_env, tmp_path):
        """Test that a missing file falls back to defaults."""
        config = load_config(str(tmp_path / "nope.json"), env_file=str(tmp_path / "missing.env"))
        assert config == DEFAULT_CONFIG


class TestValidateConfig:
    """Tests for validate_config."""

    def test_defaults_valid(self):
        """Test that defaults pass for every role but participant."""
        for role in ("director", "judge", "spectator"):
            validate_config(dict(DEFAULT_CONFIG), role)

    def test_participant_needs_id(self):
        """Test the participant id requirement."""
        with pytest.raises(ConfigError):
            validate_config(dict(DEFAULT_CONFIG), "participant")
        validate_config(with_defaults({"participant_id": "p1"}), "participant")

    def test_out_of_range(self):
        """Test that bad values are all reported."""
        config = with_defaults({
            "build_duration_seconds": 0,
            "reveal_delay_ms": -1,
            "sync_topic": "",
            "max_offset_ms": True,
        })
        with pytest.raises(ConfigError) as exc_info:
            validate_config(config, "director")
        assert len(exc_info.value.problems) == 4

    def test_unknown_role(self):
        """Test an unknown role."""
        with pytest.raises(ConfigError):
            validate_config(dict(DEFAULT_CONFIG), "pilot")


class TestKeys:
    """Tests for record keys."""

    def test_mission_key(self):
        """Test the default mission record address."""
        key = mission_key(DEFAULT_CONFIG)
        assert (key.table, key.record_id) == ("mission_state", "current")

    def test_participant_key(self):
        """Test participant record addresses."""
        key = participant_key(with_defaults({"participants_table": "pilots"}), "p1")
        assert (key.table, key.record_id) == ("pilots", "p1")
