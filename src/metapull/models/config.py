"""Pydantic configuration models for metapull."""

from enum import Enum
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator


class Syntax(str, Enum):
    """Metadata syntaxes metapull can extract."""

    META = "meta"
    OPENGRAPH = "opengraph"
    TWITTER = "twitter"
    DUBLIN_CORE = "dublin_core"
    JSONLD = "jsonld"
    MICRODATA = "microdata"
    MICROFORMATS = "microformats"
    RDFA = "rdfa"
    OEMBED = "oembed"
    REL_LINKS = "rel_links"
    MANIFEST = "manifest"


ALL_SYNTAXES: list[Syntax] = list(Syntax)


class ProfileName(str, Enum):
    """Built-in configuration profiles."""

    FULL = "full"
    SOCIAL = "social"
    STRUCTURED = "structured"
    CUSTOM = "custom"


class ByteSize(int):
    """
    Custom type that parses human-readable byte sizes.

    Accepts:
        - Integers (bytes)
        - Strings like '200kb', '1mb', '5gb'

    Examples:
        >>> ByteSize._parse('200kb')
        204800
        >>> ByteSize._parse('1mb')
        1048576
        >>> ByteSize._parse(1024)
        1024
    """

    @classmethod
    def __get_pydantic_core_schema__(cls, source: Any, handler: Any) -> Any:
        from pydantic_core import core_schema

        return core_schema.no_info_plain_validator_function(cls._parse)

    @classmethod
    def _parse(cls, v: Any) -> int:
        if isinstance(v, int):
            return v
        if isinstance(v, str):
            v = v.lower().strip()
            # Order matters: check longer suffixes first
            units = [("gb", 1024**3), ("mb", 1024**2), ("kb", 1024), ("b", 1)]
            for unit, mult in units:
                if v.endswith(unit):
                    num_str = v[: -len(unit)].strip()
                    try:
                        return int(float(num_str) * mult)
                    except ValueError as err:
                        raise ValueError(f"Invalid number in byte size: {v}") from err
            try:
                return int(v)
            except ValueError:
                pass
        raise ValueError(f"Invalid byte size: {v}. Use format like '200kb', '1mb', or integer bytes.")


class LimitsConfig(BaseModel):
    """Resource bounds applied to every extraction call."""

    max_depth: int = Field(
        100,
        ge=1,
        le=200,
        description="Maximum nesting depth for items and JSON-LD nodes; deeper branches are truncated",
    )
    max_items: int = Field(
        10_000,
        ge=1,
        le=1_000_000,
        description="Maximum Microdata, Microformats2 or RDFa items built per call, copies included",
    )
    max_input_size: Optional[ByteSize] = Field(
        None,
        description="Reject documents larger than this (e.g., '5mb'); None = unlimited",
    )

    model_config = {"extra": "forbid"}


class MicroformatsConfig(BaseModel):
    """Configuration for the Microformats2 parser."""

    implied_properties: bool = Field(
        True,
        description="Derive name/photo/url from the root element when not given explicitly",
    )

    model_config = {"extra": "forbid"}


class SocialConfig(BaseModel):
    """Configuration for Open Graph and Twitter card extraction."""

    twitter_fallback: bool = Field(
        True,
        description="Fill missing twitter:title/description/image from Open Graph",
    )

    model_config = {"extra": "forbid"}


class ExtractionConfig(BaseModel):
    """
    Root configuration model for metapull.

    Example:
        config = ExtractionConfig(
            base_url="https://example.com/article",
            syntaxes=[Syntax.JSONLD, Syntax.MICRODATA],
            limits=LimitsConfig(max_depth=20),
        )

    YAML format:
        profile: structured
        base_url: https://example.com/
        parser: lxml
        limits:
          max_depth: 50
          max_items: 5000
          max_input_size: 5mb
    """

    profile: ProfileName = Field(
        ProfileName.CUSTOM,
        description="Built-in profile to apply (full, social, structured, custom)",
    )
    base_url: Optional[str] = Field(None, description="Document URL used to resolve relative URLs")
    syntaxes: list[Syntax] = Field(
        default_factory=lambda: list(ALL_SYNTAXES),
        description="Syntaxes to extract",
    )
    parser: Literal["html.parser", "lxml", "html5lib"] = Field(
        "html.parser",
        description="BeautifulSoup tree builder",
    )
    honor_base_element: bool = Field(
        True,
        description="Let a <base href> element override base_url",
    )

    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    microformats: MicroformatsConfig = Field(default_factory=MicroformatsConfig)
    social: SocialConfig = Field(default_factory=SocialConfig)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "WARNING",
        description="Logging level",
    )
    log_file: Optional[Path] = Field(None, description="Log file path")

    model_config = {"extra": "forbid"}

    @field_validator("syntaxes")
    @classmethod
    def _dedupe_syntaxes(cls, value: list[Syntax]) -> list[Syntax]:
        return list(dict.fromkeys(value))

    def wants(self, syntax: Syntax) -> bool:
        """Whether a syntax is enabled."""
        return syntax in self.syntaxes

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        import yaml

        return yaml.dump(self.model_dump(mode="json", exclude_none=True), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ExtractionConfig":
        """Load config from YAML string."""
        import yaml

        data = yaml.safe_load(yaml_str) or {}
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> "ExtractionConfig":
        """Load config from YAML file."""
        return cls.from_yaml(path.read_text())
