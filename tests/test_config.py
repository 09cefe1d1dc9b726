"""Tests for DecodeConfig."""

import pytest
from pydantic import ValidationError
from wirerecord import DecodeConfig


class TestDecodeConfig:
    """Tests for DecodeConfig validation."""

    def test_defaults(self):
        """Test creating default config."""
        config = DecodeConfig()
        assert config.default_charset is None
        assert config.target_encoding == "utf-8"
        assert config.placeholder == "?"
        assert config.log_level == "INFO"

    def test_default_charset_not_validated(self):
        """Test that the default charset is stored as given."""
        config = DecodeConfig(default_charset="not-a-charset")
        assert config.default_charset == "not-a-charset"

    def test_unknown_target_rejected(self):
        with pytest.raises(ValidationError):
            DecodeConfig(target_encoding="no-such-encoding")

    def test_non_text_target_rejected(self):
        with pytest.raises(ValidationError):
            DecodeConfig(target_encoding="base64")

    def test_unusable_target_rejected(self):
        with pytest.raises(ValidationError):
            DecodeConfig(target_encoding="undefined")

    def test_placeholder_must_fit_target(self):
        """Test that lossy output cannot contain an unencodable placeholder."""
        with pytest.raises(ValidationError, match="cannot be encoded"):
            DecodeConfig(target_encoding="ascii", placeholder="\u00bf")

        config = DecodeConfig(target_encoding="latin-1", placeholder="\u00bf")
        assert config.placeholder == "\u00bf"

    def test_placeholder_single_character(self):
        with pytest.raises(ValidationError):
            DecodeConfig(placeholder="??")
        with pytest.raises(ValidationError):
            DecodeConfig(placeholder="")

    def test_extra_fields_forbidden(self):
        with pytest.raises(ValidationError):
            DecodeConfig(strict=True)

    def test_yaml_round_trip(self, tmp_path):
        """Test loading config from YAML."""
        pytest.importorskip("yaml")
        config = DecodeConfig(default_charset="utf-8", target_encoding="ascii", placeholder="*")

        path = tmp_path / "wirerecord.yaml"
        path.write_text(config.to_yaml())
        loaded = DecodeConfig.from_yaml_file(path)

        assert loaded == config

    def test_empty_yaml(self):
        pytest.importorskip("yaml")
        assert DecodeConfig.from_yaml("") == DecodeConfig()
