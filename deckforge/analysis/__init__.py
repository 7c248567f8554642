from deckforge.analysis.scorer import (
    analyze_color_distribution,
    analyze_curve,
    analyze_top_tags,
    score_deck,
)

__all__ = [
    "analyze_color_distribution",
    "analyze_curve",
    "analyze_top_tags",
    "score_deck",
]
