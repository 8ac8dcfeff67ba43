"""Built-in configuration profiles for common use cases."""

from __future__ import annotations

from typing import Any

from .config import ALL_SYNTAXES, ExtractionConfig, ProfileName, Syntax

PROFILES: dict[ProfileName, dict[str, Any]] = {
    ProfileName.FULL: {
        # Everything metapull knows how to read
        "syntaxes": list(ALL_SYNTAXES),
    },
    ProfileName.SOCIAL: {
        # Link previews: what a chat app or social network would show
        "syntaxes": [
            Syntax.META,
            Syntax.OPENGRAPH,
            Syntax.TWITTER,
            Syntax.OEMBED,
        ],
    },
    ProfileName.STRUCTURED: {
        # Item graphs only (search engines, knowledge extraction)
        "syntaxes": [
            Syntax.JSONLD,
            Syntax.MICRODATA,
            Syntax.MICROFORMATS,
            Syntax.RDFA,
        ],
        "microformats": {
            "implied_properties": True,
        },
    },
    ProfileName.CUSTOM: {
        # No overrides - use explicit config
    },
}


def apply_profile(config: ExtractionConfig) -> ExtractionConfig:
    """
    Apply profile defaults to config, preserving user overrides.

    Profile values override Pydantic defaults, but fields the user set
    explicitly take precedence over profile values.

    Args:
        config: The configuration with a profile specified

    Returns:
        A new ExtractionConfig with profile defaults applied

    Example:
        >>> config = ExtractionConfig(profile=ProfileName.SOCIAL)
        >>> Syntax.JSONLD in apply_profile(config).syntaxes
        False
    """
    if config.profile == ProfileName.CUSTOM:
        return config

    profile_overrides = PROFILES.get(config.profile, {})
    if not profile_overrides:
        return config

    config_dict = config.model_dump()

    def deep_update(base: dict, overrides: dict, explicit: set[str]) -> dict:
        """
        Deep update base dict with overrides, skipping explicitly set keys.

        For nested dicts, recursively merge. For other values, override.
        """
        result = base.copy()
        for key, override_value in overrides.items():
            if key in explicit and not isinstance(override_value, dict):
                continue
            if key in result and isinstance(result[key], dict) and isinstance(override_value, dict):
                section = getattr(config, key, None)
                nested_explicit = section.model_fields_set if key in explicit and section is not None else set()
                result[key] = deep_update(result[key], override_value, nested_explicit)
            else:
                result[key] = override_value
        return result

    merged = deep_update(config_dict, profile_overrides, config.model_fields_set)
    return ExtractionConfig.model_validate(merged)
