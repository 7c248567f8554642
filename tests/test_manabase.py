"""Tests for the manabase builder."""

from collections import Counter
from collections.abc import Callable

import pytest

from deckforge.models.build import BuildContext
from deckforge.models.card import Card
from deckforge.models.format_rules import FormatRules, get_format_rules
from deckforge.services.manabase import (
    build_manabase,
    calculate_color_hit_probability,
    calculate_requirements,
    classify_land_cycle,
    get_available_cycles,
    land_colors,
    resolve_colors,
)


def _rules(format_id: str) -> FormatRules:
    rules = get_format_rules(format_id)
    assert rules is not None
    return rules


@pytest.fixture
def land_pool(dimir_lands: list[Card], basic_lands: list[Card]) -> list[Card]:
    return [*dimir_lands, *basic_lands]


class TestCalculateRequirements:
    """Tests for calculate_requirements."""

    def test_commander_two_colors(self) -> None:
        requirements = calculate_requirements(("U", "B"), _rules("commander"))

        assert requirements.total_lands == 37
        assert requirements.basics == 14
        assert requirements.non_basics == 23
        assert requirements.utility == 2

    def test_constructed_mono_color(self) -> None:
        requirements = calculate_requirements(("R",), _rules("modern"))

        assert requirements.total_lands == 25
        assert requirements.basics == 20
        assert requirements.non_basics == 5
        assert requirements.utility == 0

    def test_constructed_land_count_clamped(self) -> None:
        five_color = calculate_requirements(("W", "U", "B", "R", "G"), _rules("legacy"))
        colorless = calculate_requirements((), _rules("legacy"))

        assert five_color.total_lands == 26
        assert five_color.basics == 5
        assert colorless.total_lands == 24


class TestClassifyLandCycle:
    """Tests for classify_land_cycle."""

    @pytest.mark.parametrize(
        ("name", "cycle"),
        [
            ("Polluted Delta", "fetch"),
            ("Watery Grave", "shock"),
            ("Drowned Catacomb", "check"),
            ("Darkslick Shores", "fast"),
            ("Underground River", "pain"),
            ("Dimir Guildgate", "tapland"),
            ("Command Tower", None),
        ],
    )
    def test_cycles(self, dimir_lands: list[Card], name: str, cycle: str | None) -> None:
        land = next(c for c in dimir_lands if c.name == name)

        assert classify_land_cycle(land) == cycle

    def test_basic(self, basic_lands: list[Card]) -> None:
        assert classify_land_cycle(basic_lands[0]) == "basic"

    def test_non_land(self, card_factory: Callable[..., Card]) -> None:
        assert classify_land_cycle(card_factory("Doom Blade")) is None


class TestLandColors:
    """Tests for land_colors."""

    def test_identity_wins(self, dimir_lands: list[Card]) -> None:
        grave = next(c for c in dimir_lands if c.name == "Watery Grave")

        assert land_colors(grave) == ("U", "B")

    def test_fetch_reads_basic_types(self, dimir_lands: list[Card]) -> None:
        delta = next(c for c in dimir_lands if c.name == "Polluted Delta")

        assert land_colors(delta) == ("U", "B")

    def test_basic_reads_type_line(self, card_factory: Callable[..., Card]) -> None:
        swamp = card_factory("Swamp", type_line="Basic Land — Swamp", mana_value=0)

        assert land_colors(swamp) == ("B",)

    def test_basic_uses_identity(self, basic_lands: list[Card]) -> None:
        assert land_colors(basic_lands[2]) == ("B",)
        assert basic_lands[2].color_identity == ("B",)


class TestAvailableCycles:
    """Tests for get_available_cycles."""

    def test_fetches_not_in_standard(self) -> None:
        names = [cycle.name for cycle in get_available_cycles("standard")]

        assert "fetch" not in names
        assert "shock" in names

    def test_pauper_only_commons(self) -> None:
        names = [cycle.name for cycle in get_available_cycles("pauper")]

        assert names == ["tapland", "dual", "basic"]

    def test_priority_order(self) -> None:
        priorities = [cycle.priority for cycle in get_available_cycles("commander")]

        assert priorities == sorted(priorities, reverse=True)


class TestResolveColors:
    """Tests for resolve_colors."""

    def test_context_colors_first(self) -> None:
        context = BuildContext(format="modern", archetype="aggro-burn", colors=["R", "W"])

        assert resolve_colors(context, {"B": 3}, ("U",)) == ("R", "W")

    def test_identity_next(self) -> None:
        context = BuildContext(format="commander", archetype="commander-control")

        assert resolve_colors(context, {"G": 3}, ("B", "U")) == ("U", "B")

    def test_pip_weights_last(self) -> None:
        context = BuildContext(format="modern", archetype="midrange-value")

        assert resolve_colors(context, {"G": 3, "B": 2, "R": 0}) == ("B", "G")

    def test_identity_clamps_context_colors(self) -> None:
        context = BuildContext(
            format="commander", archetype="commander-control", colors=["G", "U"]
        )

        colors = resolve_colors(context, {}, ("U", "B"), enforce_identity=True)

        assert colors == ("U",)

    def test_identity_used_when_clamp_leaves_nothing(self) -> None:
        context = BuildContext(format="commander", archetype="commander-control", colors=["G"])

        colors = resolve_colors(context, {}, ("U", "B"), enforce_identity=True)

        assert colors == ("U", "B")

    def test_no_clamp_without_enforcement(self) -> None:
        context = BuildContext(format="modern", archetype="aggro-burn", colors=["G"])

        assert resolve_colors(context, {}, ("U", "B")) == ("G",)


class TestBuildManabase:
    """Tests for build_manabase."""

    def test_commander_dimir(self, land_pool: list[Card]) -> None:
        context = BuildContext(format="commander", archetype="commander-control")

        lands = build_manabase(
            land_pool, context, _rules("commander"), {"U": 10, "B": 10}, identity=("U", "B")
        )

        names = Counter(card.name for card in lands)
        assert len(lands) == 37
        assert names["Command Tower"] == 1
        assert names["Reliquary Tower"] == 1
        assert names["Watery Grave"] == 1
        assert names["Polluted Delta"] == 1
        assert names["Island"] == 15
        assert names["Swamp"] == 14

    def test_non_basics_never_repeat(self, land_pool: list[Card]) -> None:
        context = BuildContext(format="commander", archetype="commander-control")

        lands = build_manabase(
            land_pool, context, _rules("commander"), {"U": 4, "B": 1}, identity=("U", "B")
        )

        non_basic = [card.name for card in lands if not card.is_basic_land]
        assert len(non_basic) == len(set(non_basic))

    def test_commander_ignores_colors_outside_identity(self, land_pool: list[Card]) -> None:
        context = BuildContext(format="commander", archetype="commander-control", colors=["G"])

        lands = build_manabase(
            land_pool, context, _rules("commander"), {"U": 10, "B": 10}, identity=("U", "B")
        )

        assert lands
        assert all(set(card.color_identity) <= {"U", "B"} for card in lands)
        assert "Forest" not in {card.name for card in lands}

    def test_basics_follow_pip_weights(self, land_pool: list[Card]) -> None:
        context = BuildContext(format="modern", archetype="midrange-value", colors=["U", "B"])

        lands = build_manabase(land_pool, context, _rules("modern"), {"U": 3, "B": 1})

        names = Counter(card.name for card in lands)
        assert len(lands) == 26
        assert names["Island"] > names["Swamp"]

    def test_mono_color_all_basics(self, land_pool: list[Card]) -> None:
        context = BuildContext(format="modern", archetype="aggro-burn", colors=["R"])

        lands = build_manabase(land_pool, context, _rules("modern"), {"R": 20})

        assert len(lands) == 25
        assert {card.name for card in lands} == {"Mountain"}

    def test_colorless_uses_wastes(self, land_pool: list[Card]) -> None:
        context = BuildContext(format="legacy", archetype="combo-storm")

        lands = build_manabase(land_pool, context, _rules("legacy"), {})

        assert len(lands) == 24
        assert {card.name for card in lands} == {"Wastes"}

    def test_thin_pool_returns_short(self) -> None:
        context = BuildContext(format="modern", archetype="aggro-burn", colors=["R"])

        assert build_manabase([], context, _rules("modern"), {"R": 5}) == []


class TestColorHitProbability:
    """Tests for calculate_color_hit_probability."""

    def test_in_unit_interval(self, basic_lands: list[Card]) -> None:
        island, swamp = basic_lands[1], basic_lands[2]
        manabase = [island] * 15 + [swamp] * 22

        probability = calculate_color_hit_probability(manabase, ["U", "B"], 3)

        assert 0.0 <= probability <= 1.0

    def test_all_sources_is_certain(self, basic_lands: list[Card]) -> None:
        manabase = [basic_lands[1]] * 37

        assert calculate_color_hit_probability(manabase, ["U"], 1) == 1.0

    def test_no_required_colors(self, basic_lands: list[Card]) -> None:
        assert calculate_color_hit_probability([basic_lands[1]] * 10, [], 2) == 1.0

    def test_approximate_value(self, basic_lands: list[Card]) -> None:
        island, swamp = basic_lands[1], basic_lands[2]
        manabase = [island] * 15 + [swamp] * 22

        # Nine cards seen by turn three against 22 non-sources
        assert calculate_color_hit_probability(manabase, ["U"], 3) == pytest.approx(13 / 22)
