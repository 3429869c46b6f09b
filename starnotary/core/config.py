"""
starnotary Registry Configuration.

Defaults match the ownership challenge format
``<address>:<unix seconds>:starRegistry`` with a five minute window.
Environment variables override defaults (STARNOTARY_* prefix).
"""

import os
from dataclasses import dataclass, fields
from pathlib import Path

import yaml

from starnotary.core.exceptions import ValidationError
from starnotary.core.models import GENESIS_DATA

DEFAULT_CHALLENGE_WINDOW = 5 * 60
DEFAULT_CHALLENGE_SUFFIX = "starRegistry"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class RegistryConfig:
    challenge_window_seconds: int = DEFAULT_CHALLENGE_WINDOW
    challenge_suffix:         str = DEFAULT_CHALLENGE_SUFFIX
    genesis_data:             str = GENESIS_DATA
    log_level:                str = "WARNING"

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise ValidationError on any out-of-range setting."""
        if (
            not isinstance(self.challenge_window_seconds, int)
            or isinstance(self.challenge_window_seconds, bool)
            or self.challenge_window_seconds <= 0
        ):
            raise ValidationError(
                "challenge_window_seconds must be a positive int",
                {"got": self.challenge_window_seconds},
            )
        if not self.challenge_suffix or ":" in self.challenge_suffix:
            raise ValidationError(
                "challenge_suffix must be non-empty and contain no ':'",
                {"got": self.challenge_suffix},
            )
        if not isinstance(self.genesis_data, str):
            raise ValidationError("genesis_data must be a string")
        self.log_level = str(self.log_level).upper()
        if self.log_level not in LOG_LEVELS:
            raise ValidationError(
                "log_level is not a logging level name",
                {"got": self.log_level},
            )

    @classmethod
    def from_env(cls) -> "RegistryConfig":
        """Build a config from defaults plus STARNOTARY_* overrides."""
        env_map = {
            "STARNOTARY_CHALLENGE_WINDOW": ("challenge_window_seconds", int),
            "STARNOTARY_CHALLENGE_SUFFIX": ("challenge_suffix", str),
            "STARNOTARY_GENESIS_DATA":     ("genesis_data", str),
            "STARNOTARY_LOG_LEVEL":        ("log_level", str),
        }

        overrides = {}
        for env_var, (attr, type_fn) in env_map.items():
            value = os.environ.get(env_var)
            if value is None:
                continue
            try:
                overrides[attr] = type_fn(value)
            except ValueError as exc:
                raise ValidationError(
                    f"{env_var} is not a valid {type_fn.__name__}",
                    {"got": value},
                ) from exc
        return cls(**overrides)

    @classmethod
    def from_yaml(cls, config_file: Path) -> "RegistryConfig":
        """
        Load config from a YAML mapping. Unknown keys are rejected.
        Raises FileNotFoundError if the file does not exist.
        """
        config_file = Path(config_file)
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValidationError(
                f"Config file {config_file} must contain a mapping"
            )

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValidationError(
                f"Unknown config keys in {config_file}",
                {"keys": unknown},
            )
        return cls(**data)

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}
