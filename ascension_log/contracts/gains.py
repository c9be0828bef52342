"""
Gain Value Types

Stat, MP and meat gains. All are frozen; arithmetic returns new values.
"""

from __future__ import annotations
from dataclasses import dataclass, replace

from .base import ErrorCode, InvalidArgumentError


@dataclass(frozen=True)
class Statgain:
    """Substat gains of the three stats. Renders as [mus,myst,mox]."""
    mus: int = 0
    myst: int = 0
    mox: int = 0

    def add(self, other: Statgain) -> Statgain:
        return Statgain(self.mus + other.mus, self.myst + other.myst, self.mox + other.mox)

    def with_muscle(self, mus: int) -> Statgain:
        return replace(self, mus=mus)

    def with_myst(self, myst: int) -> Statgain:
        return replace(self, myst=myst)

    def with_moxie(self, mox: int) -> Statgain:
        return replace(self, mox=mox)

    @property
    def total(self) -> int:
        return self.mus + self.myst + self.mox

    def is_zero(self) -> bool:
        return self.mus == 0 and self.myst == 0 and self.mox == 0

    def __str__(self) -> str:
        return f"[{self.mus},{self.myst},{self.mox}]"


NO_STATS = Statgain()


@dataclass(frozen=True)
class MPGain:
    """MP gained, split by source."""
    encounter: int = 0
    starfish: int = 0
    resting: int = 0
    out_of_encounter: int = 0
    consumable: int = 0

    def add(self, other: MPGain) -> MPGain:
        return MPGain(
            encounter=self.encounter + other.encounter,
            starfish=self.starfish + other.starfish,
            resting=self.resting + other.resting,
            out_of_encounter=self.out_of_encounter + other.out_of_encounter,
            consumable=self.consumable + other.consumable
        )

    @property
    def total(self) -> int:
        return (self.encounter + self.starfish + self.resting
                + self.out_of_encounter + self.consumable)

    def is_zero(self) -> bool:
        return not any((self.encounter, self.starfish, self.resting,
                        self.out_of_encounter, self.consumable))


NO_MP = MPGain()


@dataclass(frozen=True)
class MeatGain:
    """
    Meat gained inside and outside of encounters and meat spent.

    INVARIANT: all three components are non-negative.
    """
    encounter: int = 0
    other: int = 0
    spent: int = 0

    def __post_init__(self):
        for name in ("encounter", "other", "spent"):
            if getattr(self, name) < 0:
                raise InvalidArgumentError.of(
                    ErrorCode.INVALID_VALUE,
                    f"Meat value '{name}' must not be negative.",
                    value=getattr(self, name)
                )

    def add(self, other: MeatGain) -> MeatGain:
        return MeatGain(
            encounter=self.encounter + other.encounter,
            other=self.other + other.other,
            spent=self.spent + other.spent
        )

    def is_zero(self) -> bool:
        return self.encounter == 0 and self.other == 0 and self.spent == 0


NO_MEAT = MeatGain()
