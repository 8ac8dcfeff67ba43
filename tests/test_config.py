"""Tests for configuration models and profiles."""

import pytest
from pydantic import ValidationError

from metapull.models import (
    ALL_SYNTAXES,
    PROFILES,
    ByteSize,
    ExtractionConfig,
    LimitsConfig,
    ProfileName,
    Syntax,
    apply_profile,
)


class TestByteSize:
    """Tests for ByteSize parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (1024, 1024),
            ("200kb", 200 * 1024),
            ("1mb", 1024**2),
            ("1.5 MB", int(1.5 * 1024**2)),
            ("2gb", 2 * 1024**3),
            ("512b", 512),
            ("2048", 2048),
        ],
    )
    def test_parse(self, value, expected):
        """Test accepted formats."""
        assert ByteSize._parse(value) == expected

    def test_invalid(self):
        """Test that garbage is rejected."""
        with pytest.raises(ValueError):
            ByteSize._parse("lots")

    def test_in_model(self):
        """Test validation through LimitsConfig."""
        assert LimitsConfig(max_input_size="5mb").max_input_size == 5 * 1024**2

        with pytest.raises(ValidationError):
            LimitsConfig(max_input_size="huge")


class TestExtractionConfig:
    """Tests for ExtractionConfig validation."""

    def test_defaults(self):
        """Test the default configuration."""
        config = ExtractionConfig()

        assert config.profile == ProfileName.CUSTOM
        assert config.syntaxes == ALL_SYNTAXES
        assert config.parser == "html.parser"
        assert config.limits.max_depth == 100
        assert config.limits.max_input_size is None
        assert config.microformats.implied_properties is True
        assert config.social.twitter_fallback is True

    def test_syntaxes_from_strings_are_deduplicated(self):
        """Test string syntaxes and duplicate removal."""
        config = ExtractionConfig(syntaxes=["jsonld", "microdata", "jsonld"])

        assert config.syntaxes == [Syntax.JSONLD, Syntax.MICRODATA]
        assert config.wants(Syntax.JSONLD)
        assert not config.wants(Syntax.META)

    def test_unknown_fields_rejected(self):
        """Test extra=forbid."""
        with pytest.raises(ValidationError):
            ExtractionConfig(unknown_option=True)

        with pytest.raises(ValidationError):
            ExtractionConfig(limits={"max_depht": 3})

    def test_max_depth_bounds(self):
        """Test the allowed nesting depth range."""
        with pytest.raises(ValidationError):
            LimitsConfig(max_depth=0)
        with pytest.raises(ValidationError):
            LimitsConfig(max_depth=500)

    def test_max_items_bounds(self):
        """Test the item allowance default and range."""
        assert LimitsConfig().max_items == 10_000
        assert LimitsConfig(max_items=50).max_items == 50

        with pytest.raises(ValidationError):
            LimitsConfig(max_items=0)

    def test_unknown_parser_rejected(self):
        """Test the parser choices."""
        with pytest.raises(ValidationError):
            ExtractionConfig(parser="regex")

    def test_unknown_syntax_rejected(self):
        """Test the syntax choices."""
        with pytest.raises(ValidationError):
            ExtractionConfig(syntaxes=["microdata", "exif"])


class TestProfiles:
    """Tests for profile application."""

    def test_every_profile_defined(self):
        """Test that each ProfileName has an entry."""
        assert set(PROFILES) == set(ProfileName)

    def test_custom_profile_unchanged(self):
        """Test that custom returns the config as is."""
        config = ExtractionConfig(syntaxes=["meta"])

        assert apply_profile(config) is config

    def test_social_profile(self):
        """Test the social syntax set."""
        config = apply_profile(ExtractionConfig(profile=ProfileName.SOCIAL))

        assert config.syntaxes == [Syntax.META, Syntax.OPENGRAPH, Syntax.TWITTER, Syntax.OEMBED]

    def test_explicit_syntaxes_win(self):
        """Test that user-set fields override the profile."""
        config = apply_profile(ExtractionConfig(profile=ProfileName.SOCIAL, syntaxes=["jsonld"]))

        assert config.syntaxes == [Syntax.JSONLD]

    def test_explicit_nested_values_win(self):
        """Test nested overrides inside a profile section."""
        config = apply_profile(
            ExtractionConfig(profile=ProfileName.STRUCTURED, microformats={"implied_properties": False})
        )

        assert config.microformats.implied_properties is False
        assert Syntax.MICROFORMATS in config.syntaxes

    def test_other_fields_preserved(self):
        """Test that unrelated settings survive profile application."""
        config = apply_profile(
            ExtractionConfig(profile="structured", base_url="https://example.com/", limits={"max_depth": 7})
        )

        assert config.base_url == "https://example.com/"
        assert config.limits.max_depth == 7


class TestYamlConfig:
    """Tests for YAML loading and saving."""

    def test_from_yaml(self):
        """Test loading a YAML document."""
        pytest.importorskip("yaml")

        config = ExtractionConfig.from_yaml(
            """
profile: social
base_url: https://example.com/
limits:
  max_depth: 20
  max_input_size: 2mb
"""
        )

        assert config.profile == ProfileName.SOCIAL
        assert config.limits.max_depth == 20
        assert config.limits.max_input_size == 2 * 1024**2

    def test_empty_yaml(self):
        """Test that an empty document gives defaults."""
        pytest.importorskip("yaml")

        assert ExtractionConfig.from_yaml("").model_dump() == ExtractionConfig().model_dump()

    def test_round_trip(self):
        """Test to_yaml followed by from_yaml."""
        pytest.importorskip("yaml")
        config = ExtractionConfig(syntaxes=["jsonld", "rdfa"], parser="html.parser", limits={"max_depth": 12})

        restored = ExtractionConfig.from_yaml(config.to_yaml())

        assert restored.model_dump() == config.model_dump()

    def test_from_yaml_file(self, tmp_path):
        """Test loading from a file."""
        pytest.importorskip("yaml")
        path = tmp_path / "metapull.yaml"
        path.write_text("syntaxes:\n  - microformats\nmicroformats:\n  implied_properties: false\n")

        config = ExtractionConfig.from_yaml_file(path)

        assert config.syntaxes == [Syntax.MICROFORMATS]
        assert config.microformats.implied_properties is False
