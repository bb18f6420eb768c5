"""Configuration for pinsynth."""

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Optional, Union
import os
import yaml

from .errors import ConfigurationError

BOUNDS_MODES = ("observed", "year")


@dataclass
class SamplingConfig:
    """Retry budgets and density smoothing."""
    max_rounds: int = 100  # Redraw rounds for dates outside the bounds
    max_stalled_rounds: int = 50  # Fruitless draws before giving up on uniqueness
    bandwidth: Union[str, float] = "scott"  # "scott" | "silverman" | factor


@dataclass
class DefaultsConfig:
    """Defaults for arguments the caller leaves unset."""
    l_birth: date = date(1900, 1, 1)
    u_birth: Optional[date] = None  # None = today
    male_prob: float = 0.5
    unique: bool = True
    keep_rel: bool = True
    # Anonymization bounds when unset: "observed" = min/max input birthdate,
    # "year" = first/last day of the oldest/youngest input birth year
    bounds: str = "observed"


@dataclass
class Config:
    """Main configuration."""
    seed: Optional[int] = None
    sampling: SamplingConfig = field(default_factory=SamplingConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Raise ConfigurationError for out-of-range values."""
        if self.defaults.bounds not in BOUNDS_MODES:
            raise ConfigurationError(
                f"defaults.bounds must be one of {BOUNDS_MODES}, got {self.defaults.bounds!r}"
            )
        for name in ("unique", "keep_rel"):
            value = getattr(self.defaults, name)
            if not isinstance(value, bool):
                raise ConfigurationError(f"defaults.{name} must be true or false, got {value!r}")
        if not 0.0 <= self.defaults.male_prob <= 1.0:
            raise ConfigurationError(f"defaults.male_prob must lie in [0, 1], got {self.defaults.male_prob}")
        if self.sampling.max_rounds < 1 or self.sampling.max_stalled_rounds < 1:
            raise ConfigurationError("Retry budgets must be positive")
        bw = self.sampling.bandwidth
        if isinstance(bw, str) and bw not in ("scott", "silverman"):
            raise ConfigurationError(f"Unknown bandwidth rule: {bw!r}")
        if not isinstance(bw, str) and bw <= 0:
            raise ConfigurationError(f"Bandwidth factor must be positive, got {bw}")

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Config":
        """Load config from file or use defaults."""
        if path is None:
            env_path = os.environ.get("PINSYNTH_CONFIG")
            path = Path(env_path) if env_path else Path.home() / ".pinsynth" / "config.yaml"

        if path.exists():
            with open(path) as f:
                try:
                    data = yaml.safe_load(f)
                except yaml.YAMLError as e:
                    raise ConfigurationError(f"Cannot parse {path}: {e}") from e
                return cls._from_dict(data or {})

        return cls()

    @classmethod
    def _from_dict(cls, data: dict) -> "Config":
        """Create config from dict."""
        if not isinstance(data, dict):
            raise ConfigurationError("Config file must contain a mapping")

        config = cls()

        try:
            if "seed" in data:
                config.seed = None if data["seed"] is None else int(data["seed"])

            if "sampling" in data:
                s = data["sampling"]
                config.sampling.max_rounds = int(s.get("max_rounds", 100))
                config.sampling.max_stalled_rounds = int(s.get("max_stalled_rounds", 50))
                bw = s.get("bandwidth", "scott")
                config.sampling.bandwidth = bw if isinstance(bw, str) else float(bw)

            if "defaults" in data:
                d = data["defaults"]
                config.defaults.l_birth = _parse_date(d.get("l_birth", date(1900, 1, 1)))
                u_birth = d.get("u_birth")
                config.defaults.u_birth = None if u_birth is None else _parse_date(u_birth)
                config.defaults.male_prob = float(d.get("male_prob", 0.5))
                config.defaults.unique = d.get("unique", True)
                config.defaults.keep_rel = d.get("keep_rel", True)
                config.defaults.bounds = d.get("bounds", "observed")
        except (AttributeError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid config value: {e}") from e

        config.validate()
        return config

    def save(self, path: Path):
        """Save config to file."""
        path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "seed": self.seed,
            "sampling": {
                "max_rounds": self.sampling.max_rounds,
                "max_stalled_rounds": self.sampling.max_stalled_rounds,
                "bandwidth": self.sampling.bandwidth,
            },
            "defaults": {
                "l_birth": self.defaults.l_birth.isoformat(),
                "u_birth": self.defaults.u_birth.isoformat() if self.defaults.u_birth else None,
                "male_prob": self.defaults.male_prob,
                "unique": self.defaults.unique,
                "keep_rel": self.defaults.keep_rel,
                "bounds": self.defaults.bounds,
            },
        }

        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False)


def _parse_date(value) -> date:
    # PyYAML already turns unquoted YYYY-MM-DD into date objects
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get global config instance."""
    global _config
    if _config is None:
        _config = Config.load()
    return _config


def set_config(config: Config):
    """Set global config instance."""
    global _config
    _config = config
