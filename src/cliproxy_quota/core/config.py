# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Typed configuration for the quota segment.

The host hands the segment a loosely-typed options map (the segment's
"options" table from the theme config). It is validated once here; a key
that is present but malformed raises ConfigError instead of quietly
falling back to the default.

Environment variables:
    CLIPROXY_QUOTA_HOST: Management API base URL when "host" is not set
    CLIPROXY_QUOTA_KEY: Management key when "key" is not set
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .colors import AnsiColor, parse_color
from .errors import ConfigError
from .types import AuthType, TrackedModel, normalize_auth_type

DEFAULT_HOST = "http://localhost:8317"
DEFAULT_KEY = "nbkey"
DEFAULT_CACHE_DURATION = 180  # seconds
DEFAULT_AUTH_TYPE = AuthType.ALL
DEFAULT_SEPARATOR = " | "

ENV_HOST = "CLIPROXY_QUOTA_HOST"
ENV_KEY = "CLIPROXY_QUOTA_KEY"

AUTH_TYPE_CHOICES = (AuthType.ALL, AuthType.ANTIGRAVITY, AuthType.GEMINI_CLI)


@dataclass
class ModelDisplayConfig:
    """How one tracked model is labelled and colored."""

    model: TrackedModel
    alias: str
    color: AnsiColor

    @classmethod
    def default(cls, model: TrackedModel) -> "ModelDisplayConfig":
        return cls(model=model, alias=model.default_alias, color=model.default_color)


def _default_models() -> Dict[TrackedModel, ModelDisplayConfig]:
    return {model: ModelDisplayConfig.default(model) for model in TrackedModel.all()}


def _get_str(
    options: Mapping[str, Any], key: str, default: str, allow_empty: bool = True
) -> str:
    if key not in options or options[key] is None:
        return default
    value = options[key]
    if not isinstance(value, str):
        raise ConfigError(key, f"expected a string, got {type(value).__name__}")
    if not allow_empty and not value.strip():
        raise ConfigError(key, "must not be empty")
    return value


def _get_non_negative_int(options: Mapping[str, Any], key: str, default: int) -> int:
    if key not in options or options[key] is None:
        return default
    value = options[key]
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(key, f"expected an integer, got {value!r}")
    if value < 0:
        raise ConfigError(key, "must not be negative")
    return value


@dataclass
class QuotaSegmentConfig:
    """Validated settings for one quota segment invocation."""

    host: str = DEFAULT_HOST
    key: str = DEFAULT_KEY
    cache_duration: int = DEFAULT_CACHE_DURATION
    auth_type: str = DEFAULT_AUTH_TYPE
    separator: str = DEFAULT_SEPARATOR
    models: Dict[TrackedModel, ModelDisplayConfig] = field(
        default_factory=_default_models
    )

    def display_for(self, model: TrackedModel) -> ModelDisplayConfig:
        return self.models.get(model) or ModelDisplayConfig.default(model)

    @classmethod
    def from_options(
        cls,
        options: Optional[Mapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "QuotaSegmentConfig":
        """
        Build a config from the host's options map.

        Args:
            options: The segment's options map. Unknown keys are ignored.
            environ: Environment to read fallbacks from (defaults to os.environ)

        Returns:
            Validated QuotaSegmentConfig

        Raises:
            ConfigError: If a recognized option has an invalid value
        """
        options = options or {}
        environ = os.environ if environ is None else environ

        host = _get_str(
            options, "host", environ.get(ENV_HOST) or DEFAULT_HOST, allow_empty=False
        )
        key = _get_str(
            options, "key", environ.get(ENV_KEY) or DEFAULT_KEY, allow_empty=False
        )
        cache_duration = _get_non_negative_int(
            options, "cache_duration", DEFAULT_CACHE_DURATION
        )

        auth_type = normalize_auth_type(
            _get_str(options, "auth_type", DEFAULT_AUTH_TYPE)
        )
        if auth_type not in AUTH_TYPE_CHOICES:
            raise ConfigError(
                "auth_type",
                f"{options['auth_type']!r} is not one of {', '.join(AUTH_TYPE_CHOICES)}",
            )

        separator = _get_str(options, "separator", DEFAULT_SEPARATOR)

        models = {}
        for model in TrackedModel.all():
            alias = _get_str(options, model.alias_key, model.default_alias)
            color = model.default_color
            if options.get(model.color_key) is not None:
                color = parse_color(options[model.color_key], key=model.color_key)
            models[model] = ModelDisplayConfig(model=model, alias=alias, color=color)

        return cls(
            host=host.rstrip("/"),
            key=key,
            cache_duration=cache_duration,
            auth_type=auth_type,
            separator=separator,
            models=models,
        )


def default_segment_options() -> Dict[str, Any]:
    """
    Return the options map the bundled themes ship for this segment.

    Every theme carries the same defaults; the segment itself is disabled
    by default in the host's presets.
    """
    options: Dict[str, Any] = {
        "host": DEFAULT_HOST,
        "key": DEFAULT_KEY,
        "cache_duration": DEFAULT_CACHE_DURATION,
        "auth_type": DEFAULT_AUTH_TYPE,
        "separator": DEFAULT_SEPARATOR,
    }
    for model in TrackedModel.all():
        options[model.alias_key] = model.default_alias
        options[model.color_key] = model.default_color.to_dict()
    return options
