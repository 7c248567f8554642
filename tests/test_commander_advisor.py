"""Tests for the commander advisor."""

from collections.abc import Callable

import pytest

from deckforge.models.archetype import Quota
from deckforge.models.card import Card
from deckforge.services.commander_advisor import (
    detect_archetype,
    get_priority_multipliers,
    get_recommended_quotas,
    score_commander_synergy,
)
from deckforge.services.tagger import ensure_tagged


@pytest.fixture
def make_commander(card_factory: Callable[..., Card]) -> Callable[..., Card]:
    def _make(oracle_text: str, color_identity: tuple[str, ...] = ("G",)) -> Card:
        card = card_factory(
            "Test Commander",
            type_line="Legendary Creature — Elf Druid",
            oracle_text=oracle_text,
            mana_value=3,
            color_identity=color_identity,
        )
        ensure_tagged(card)
        return card

    return _make


class TestDetectArchetype:
    """Tests for detect_archetype."""

    @pytest.mark.parametrize(
        ("oracle_text", "expected"),
        [
            ("At the beginning of your end step, proliferate.", "commander-counters"),
            ("Put a +1/+1 counter on target creature.", "commander-counters"),
            ("Whenever you attack, create a 1/1 Soldier token.", "commander-tokens"),
            ("Whenever another creature you control dies, each opponent loses 1 life.",
             "commander-aristocrats"),
            ("Whenever you cast an instant or sorcery spell, scry 1.", "commander-spellslinger"),
            ("Equipped creatures you control have double strike.", "commander-voltron"),
            ("You may look at the top card of your graveyard.", "commander-reanimator"),
            ("Flying", "midrange-value"),
        ],
    )
    def test_decision_list(
        self, make_commander: Callable[..., Card], oracle_text: str, expected: str
    ) -> None:
        assert detect_archetype(make_commander(oracle_text)).primary == expected

    def test_blue_draw_commander_is_control(self, make_commander: Callable[..., Card]) -> None:
        commander = make_commander("Whenever an opponent attacks you, draw a card.", ("U",))

        assert detect_archetype(commander).primary == "commander-control"

    def test_first_match_wins(self, make_commander: Callable[..., Card]) -> None:
        commander = make_commander("Proliferate. Then create a 1/1 Soldier token.")

        suggestion = detect_archetype(commander)

        assert suggestion.primary == "commander-counters"
        assert "commander-tokens" in suggestion.secondary


class TestPriorityMultipliers:
    """Tests for get_priority_multipliers."""

    def test_key_and_avoid_tags(self, make_commander: Callable[..., Card]) -> None:
        multipliers = get_priority_multipliers(make_commander("Proliferate."))

        assert multipliers["counters"] == 1.5
        assert multipliers["storm"] == 0.5

    def test_staples_are_floored(self, make_commander: Callable[..., Card]) -> None:
        multipliers = get_priority_multipliers(make_commander("Flying"))

        assert multipliers["draw"] >= 1.3
        assert multipliers["ramp"] >= 1.3
        assert multipliers["removal-spot"] >= 1.2

    def test_key_tag_above_floor_kept(self, make_commander: Callable[..., Card]) -> None:
        multipliers = get_priority_multipliers(make_commander("Proliferate."))

        assert multipliers["draw"] == 1.5


class TestRecommendedQuotas:
    """Tests for get_recommended_quotas."""

    def test_base_ranges(self, make_commander: Callable[..., Card]) -> None:
        quotas = get_recommended_quotas(make_commander("Flying"), 6)

        assert quotas["ramp"] == Quota(min=10, max=14)
        assert quotas["draw"] == Quota(min=10, max=15)
        assert "tutor-broad" not in quotas

    def test_high_power_adds_tutors(self, make_commander: Callable[..., Card]) -> None:
        quotas = get_recommended_quotas(make_commander("Flying"), 9)

        assert quotas["tutor-broad"] == Quota(min=4, max=8)
        assert quotas["fast-mana"] == Quota(min=3, max=6)
        assert quotas["draw"].min == 12

    def test_low_power_relaxes_minimums(self, make_commander: Callable[..., Card]) -> None:
        quotas = get_recommended_quotas(make_commander("Flying"), 3)

        assert quotas["draw"].min == 8
        assert quotas["ramp"].min == 8


class TestCommanderSynergy:
    """Tests for score_commander_synergy."""

    def test_mechanic_bonus(
        self, make_commander: Callable[..., Card], card_factory: Callable[..., Card]
    ) -> None:
        commander = make_commander("At the beginning of your end step, proliferate.")
        supporter = card_factory(
            "Hardened Scales",
            type_line="Enchantment",
            oracle_text="Put a +1/+1 counter on target creature.",
            mana_value=1,
            color_identity=("G",),
        )
        bystander = card_factory(
            "Doom Blade",
            oracle_text="Destroy target nonblack creature.",
            color_identity=("B",),
        )
        ensure_tagged(supporter)
        ensure_tagged(bystander)

        assert score_commander_synergy(supporter, commander) >= 3.0
        assert score_commander_synergy(supporter, commander) > score_commander_synergy(
            bystander, commander
        )

    def test_shared_tags(
        self, make_commander: Callable[..., Card], card_factory: Callable[..., Card]
    ) -> None:
        commander = make_commander("Flying", ("G",))
        card = card_factory("Llanowar Elves", type_line="Creature — Elf", color_identity=("G",))
        ensure_tagged(card)

        shared = len(card.tags & commander.tags)

        assert score_commander_synergy(card, commander) == shared * 0.5
