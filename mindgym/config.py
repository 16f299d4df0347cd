"""Config loader — YAML to dataclasses."""

from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

from mindgym.board import TOKENS, InvalidConfiguration


@dataclass(frozen=True)
class DeckConfig:
    brightness: int = 30


@dataclass(frozen=True)
class MemoryConfig:
    preview_duration: float = 5
    game_duration: int = 300
    match_award: int = 200
    time_bonus_multiplier: int = 5
    settle_delay: float = 0.8
    pairs: int = len(TOKENS)


@dataclass(frozen=True)
class StroopConfig:
    duration: int = 60
    feedback_delay: float = 0.2
    interference: float = 0.7


@dataclass(frozen=True)
class TrailConfig:
    count: int = 10
    width: int = 300
    height: int = 300
    radius: int = 25
    feedback_delay: float = 0.5


@dataclass(frozen=True)
class AppConfig:
    deck: DeckConfig = field(default_factory=DeckConfig)
    memory: MemoryConfig = field(default_factory=MemoryConfig)
    stroop: StroopConfig = field(default_factory=StroopConfig)
    trail: TrailConfig = field(default_factory=TrailConfig)


def _section(cls, raw: dict | None, name: str):
    values = raw or {}
    known = {f.name for f in fields(cls)}
    unknown = set(values) - known
    if unknown:
        raise InvalidConfiguration(f"unknown {name} keys: {', '.join(sorted(unknown))}")
    return cls(**values)


def validate(config: AppConfig) -> AppConfig:
    """Reject values no session could run with."""
    mem = config.memory
    for name in ("preview_duration", "game_duration", "settle_delay"):
        if getattr(mem, name) <= 0:
            raise InvalidConfiguration(f"memory.{name} must be positive")
    if mem.match_award < 0 or mem.time_bonus_multiplier < 0:
        raise InvalidConfiguration("memory scoring values must not be negative")
    if not 1 <= mem.pairs <= len(TOKENS):
        raise InvalidConfiguration(f"memory.pairs must be between 1 and {len(TOKENS)}")

    if config.stroop.duration <= 0:
        raise InvalidConfiguration("stroop.duration must be positive")
    if not 0 <= config.stroop.interference <= 1:
        raise InvalidConfiguration("stroop.interference must be within 0..1")

    trail = config.trail
    if trail.count < 1 or trail.radius <= 0:
        raise InvalidConfiguration("trail.count and trail.radius must be positive")
    if trail.width < 2 * trail.radius or trail.height < 2 * trail.radius:
        raise InvalidConfiguration("trail area is smaller than one circle")
    return config


def load_config(path: Path) -> AppConfig:
    """Load config from YAML file."""
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    config = AppConfig(
        deck=_section(DeckConfig, raw.get("deck"), "deck"),
        memory=_section(MemoryConfig, raw.get("memory"), "memory"),
        stroop=_section(StroopConfig, raw.get("stroop"), "stroop"),
        trail=_section(TrailConfig, raw.get("trail"), "trail"),
    )
    return validate(config)
