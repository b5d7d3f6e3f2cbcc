"""Tests for ttsextract.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from ttsextract.config import ConfigError, ExtractConfig, TTSExtractConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, TTSExtractConfig)
    assert config.root == tmp_path.resolve()
    assert config.extract == ExtractConfig()
    assert config.download.timeout == pytest.approx(30.0)
    assert config.download.user_agent is None
    assert config.saves_dir is None


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".ttsextract.yml"
    config_file.write_text(
        """
extract:
  scripts: true
  xml: "yes"
  linked: false
  unbundle: true
download:
  timeout: 12
  user_agent: "ttsextract-tests"
saves_dir: "saves"
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.extract == ExtractConfig(scripts=True, xml=True, linked=False, notes=False, unbundle=True)
    assert config.download.timeout == pytest.approx(12.0)
    assert config.download.user_agent == "ttsextract-tests"
    assert config.saves_dir == Path("saves")


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    (tmp_path / ".ttsextract.yml").write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".ttsextract.yml").write_text("extract: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_extract_config_merge_and_everything() -> None:
    merged = ExtractConfig(scripts=True).merged(ExtractConfig(notes=True))
    assert merged == ExtractConfig(scripts=True, notes=True)
    assert merged.any_enabled()
    assert not ExtractConfig(unbundle=True).any_enabled()
    assert ExtractConfig.everything() == ExtractConfig(True, True, True, True, True)
