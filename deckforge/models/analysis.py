from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Subscores:
    """Six power dimensions, each in [1, 10]."""

    speed: float
    interaction: float
    tutors: float
    wincon: float
    mana: float
    consistency: float

    def as_dict(self) -> dict[str, float]:
        return {
            "speed": self.speed,
            "interaction": self.interaction,
            "tutors": self.tutors,
            "wincon": self.wincon,
            "mana": self.mana,
            "consistency": self.consistency,
        }


@dataclass(frozen=True, slots=True)
class DeckAnalysis:
    """
    Power estimate and distribution statistics for a deck.

    Attributes:
        power: Weighted overall power in [1, 10]
        subscores: The six component scores
        curve: Non-land mana value histogram, bands "0".."6" and "7+"
        color_distribution: Cards per identity color, "C" for colorless
        top_tags: Up to ten most frequent tags, most frequent first
    """

    power: float
    subscores: Subscores
    curve: dict[str, int] = field(default_factory=dict)
    color_distribution: dict[str, int] = field(default_factory=dict)
    top_tags: dict[str, int] = field(default_factory=dict)
