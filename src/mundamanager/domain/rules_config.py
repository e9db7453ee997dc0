"""Declarative rule configuration for gang economics."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class EconomyRules:
    """Trading post and stash constants."""

    master_crafted_multiplier: float = 1.25
    master_crafted_rounding: int = 5
    min_stash_sell_value: int = 5
    meat_per_feeding: int = 1


@dataclass(frozen=True, slots=True)
class FighterRules:
    """Fighter record constraints."""

    label_max_length: int = 5
    name_max_length: int = 100


@dataclass(frozen=True, slots=True)
class RulesConfig:
    """Aggregate of every rule group."""

    economy: EconomyRules = EconomyRules()
    fighters: FighterRules = FighterRules()


DEFAULT_RULES = RulesConfig()
