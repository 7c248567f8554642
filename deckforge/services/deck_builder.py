"""
Deck building service.

Builds a legal deck from a card pool for a format, archetype template and
power target. The build is a fixed sequence of greedy stages:

    filter -> commander -> refilter -> seed -> interaction -> advantage
    -> curve -> wincons -> manabase -> tuning -> validate

INVARIANT: The seeded generator in the build state is the only source of
randomness. Same pool + same context + same plan => identical BuildResult.

INVARIANT: Lands enter the deck only through the manabase stage, and
tuning only swaps non-land picks, so
len(result.manabase) + len(result.non_land_picks) == len(result.deck).

Unknown formats and archetypes raise before any card is picked. Every
other shortfall is recorded in the change log and the build completes.
"""

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass, field

from deckforge.analysis.scorer import score_deck
from deckforge.config import COMMANDER_TOP_N, MAX_TUNING_ITERATIONS, POWER_TOLERANCE
from deckforge.models.analysis import DeckAnalysis
from deckforge.models.archetype import ArchetypeTemplate
from deckforge.models.build import (
    BuildContext,
    BuildPlan,
    BuildResult,
    BuildStage,
    Pick,
    ValidationResult,
)
from deckforge.models.card import Card
from deckforge.models.failure import UnknownArchetypeError, UnknownFormatError
from deckforge.models.format_rules import (
    FormatRules,
    get_format_rules,
    is_legal_commander,
    is_legal_in_format,
    list_formats,
    validate_color_identity,
)
from deckforge.services.commander_advisor import detect_archetype, score_commander_synergy
from deckforge.services.manabase import build_manabase, calculate_requirements, resolve_colors
from deckforge.services.tagger import CREATURE_BAND_TAGS, ensure_tagged
from deckforge.services.templates import apply_plan, get_template, list_templates

logger = logging.getLogger(__name__)

# Pick priorities; tuning replaces lower priorities first
PRIORITY_SEED = 10
PRIORITY_WINCON = 9
PRIORITY_INTERACTION = 8
PRIORITY_ADVANTAGE = 7
PRIORITY_CURVE = 6
PRIORITY_DEESCALATION = 4
PRIORITY_LAND = 1

INTERACTION_TAGS = ("removal-spot", "removal-sweeper", "counterspell")
ADVANTAGE_TAGS = ("draw", "ramp", "tutor-broad", "tutor-narrow")

# Advantage quota multipliers by power target
HIGH_POWER_TARGET = 7
LOW_POWER_TARGET = 4
HIGH_POWER_MULTIPLIER = 1.2
LOW_POWER_MULTIPLIER = 0.8

# Mana value efficiency bonus: (MANA_VALUE_CEILING - mv) * MANA_VALUE_WEIGHT
MANA_VALUE_CEILING = 8
MANA_VALUE_WEIGHT = 0.1

# Seeded jitter added to every selection score
SCORE_JITTER = 0.1


@dataclass(frozen=True, slots=True)
class PowerUpgrade:
    """A card class tuning may add to raise power."""

    tag: str
    priority: int
    max_mana_value: float | None = None


ESCALATION_UPGRADES = (
    PowerUpgrade("tutor-broad", priority=10),
    PowerUpgrade("fast-mana", priority=9),
    PowerUpgrade("removal-spot", priority=8, max_mana_value=2),
)

DEESCALATION_TAGS = ("tutor-broad", "fast-mana", "combo-piece")


@dataclass
class BuildState:
    """
    Working state for a single build.

    Owned by one build_deck call; never shared between builds.
    """

    context: BuildContext
    rules: FormatRules
    template: ArchetypeTemplate
    rng: random.Random
    candidates: list[Card] = field(default_factory=list)
    lands: list[Card] = field(default_factory=list)
    commander: Card | None = None
    identity: tuple[str, ...] | None = None
    picks: list[Pick] = field(default_factory=list)
    change_log: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    stage: BuildStage = BuildStage.INIT
    _taken_ids: set[str] = field(default_factory=set)
    _taken_names: set[str] = field(default_factory=set)

    def log(self, line: str) -> None:
        self.change_log.append(line)
        logger.debug(line)

    def enter(self, stage: BuildStage) -> None:
        self.stage = stage
        logger.debug("Entering stage %s", stage.value)

    def is_available(self, card: Card) -> bool:
        """True if the card is not picked yet (by id, and by name in singleton formats)."""
        if card.id in self._taken_ids:
            return False
        return not (self.rules.singleton and card.name in self._taken_names)

    def add(self, pick: Pick) -> None:
        self.picks.append(pick)
        self._taken_ids.add(pick.card.id)
        self._taken_names.add(pick.card.name)

    def replace(self, index: int, pick: Pick) -> None:
        old = self.picks[index]
        self._taken_ids.discard(old.card.id)
        self._taken_names.discard(old.card.name)
        self.picks[index] = pick
        self._taken_ids.add(pick.card.id)
        self._taken_names.add(pick.card.name)

    def count_tag(self, tag: str) -> int:
        return sum(1 for p in self.picks if not p.card.is_land and tag in p.card.tags)

    @property
    def deck(self) -> list[Card]:
        return [p.card for p in self.picks]


def build_deck(
    pool: list[Card],
    context: BuildContext,
    plan: BuildPlan | None = None,
) -> BuildResult:
    """
    Build a deck from a card pool.

    Args:
        pool: Candidate cards; untagged cards are tagged in place
        context: Format, archetype, power target and seed
        plan: Optional upstream hints applied to the template first

    Returns:
        BuildResult with the deck, its analysis, change log and validation

    Raises:
        UnknownFormatError: If the context names an unregistered format
        UnknownArchetypeError: If the context names an unregistered template
    """
    rules = get_format_rules(context.format)
    if rules is None:
        raise UnknownFormatError(context.format, list_formats())

    template = get_template(context.archetype)
    if template is None:
        raise UnknownArchetypeError(context.archetype, list_templates())

    if plan is not None:
        template = apply_plan(template, plan)

    state = BuildState(
        context=context,
        rules=rules,
        template=template,
        rng=random.Random(context.seed),
        identity=tuple(context.identity) if context.identity is not None else None,
    )
    state.log(f"Starting deck build: {template.name} in {rules.name}")
    if plan is not None and plan.strategy:
        state.log(f"Plan strategy: {plan.strategy}")
    logger.info(
        "Building %s deck for %s (power target %.1f, seed %d)",
        template.id,
        rules.id,
        context.power_target,
        context.seed,
    )

    state.enter(BuildStage.FILTER_POOL)
    filtered = filter_pool(pool, rules, state.identity)
    state.log(f"Filtered pool: {len(filtered)} legal cards")

    if rules.has_commander:
        state.enter(BuildStage.SELECT_COMMANDER)
        select_commander(state, filtered)
        if state.commander is not None:
            state.enter(BuildStage.REFILTER_POOL)
            filtered = filter_pool(pool, rules, state.identity)
            state.log(f"Refiltered pool: {len(filtered)} cards in commander identity")

    commander = state.commander
    state.candidates = [
        c
        for c in filtered
        if not c.is_land and (commander is None or c.name != commander.name)
    ]
    state.lands = [c for c in filtered if c.is_land]
    logger.info(
        "Pool ready: %d candidates, %d lands", len(state.candidates), len(state.lands)
    )

    state.enter(BuildStage.SEED)
    if plan is not None and plan.key_cards:
        seed_key_cards(state, plan.key_cards)
    seed_required_packages(state)

    state.enter(BuildStage.INTERACTION)
    fill_interaction(state)

    state.enter(BuildStage.ADVANTAGE)
    fill_advantage(state)

    state.enter(BuildStage.CURVE)
    fill_curve(state)

    state.enter(BuildStage.WINCONS)
    pick_wincons(state)

    state.enter(BuildStage.MANABASE)
    add_manabase(state)

    state.enter(BuildStage.TUNING)
    analysis, iterations = tune_power(state)

    state.enter(BuildStage.VALIDATE)
    deck = state.deck
    validation = validate_deck(deck, state.commander, rules, warnings=state.warnings)
    state.log(
        f"Validation: {'legal' if validation.is_legal else 'illegal'} "
        f"({len(validation.errors)} errors, {len(validation.warnings)} warnings)"
    )

    state.enter(BuildStage.DONE)
    logger.info(
        "Built %d-card deck, power %.2f, legal=%s",
        len(deck),
        analysis.power,
        validation.is_legal,
    )

    return BuildResult(
        deck=deck,
        commander=state.commander,
        analysis=analysis,
        change_log=state.change_log,
        validation=validation,
        picks=list(state.picks),
        tuning_iterations=iterations,
    )


def filter_pool(
    pool: list[Card],
    rules: FormatRules,
    identity: tuple[str, ...] | None,
) -> list[Card]:
    """
    Keep cards legal in the format, inside the identity, and not banned.

    Untagged cards are tagged on the way through. The identity filter only
    applies when the format enforces color identity and an identity is set.
    """
    filtered: list[Card] = []
    for card in pool:
        ensure_tagged(card)
        if not is_legal_in_format(card, rules.id):
            continue
        if card.name in rules.ban_list:
            continue
        if (
            rules.color_identity_enforced
            and identity is not None
            and not validate_color_identity(card, identity)
        ):
            continue
        filtered.append(card)
    return filtered


def score_card_for_template(
    card: Card,
    template: ArchetypeTemplate,
    commander: Card | None = None,
) -> float:
    """
    Deterministic part of a card's selection score.

    Sum of matching synergy and role weights, a small bonus for cheap
    cards, and commander synergy once a commander is chosen.
    """
    tags = card.tags
    score = sum(weight for tag, weight in template.synergy.items() if tag in tags)
    score += sum(weight for tag, weight in template.roles.items() if tag in tags)
    score += max(0.0, MANA_VALUE_CEILING - card.mana_value) * MANA_VALUE_WEIGHT
    if commander is not None:
        score += score_commander_synergy(card, commander)
    return score


def select_top_candidates(state: BuildState, candidates: list[Card], count: int) -> list[Card]:
    """Highest scoring candidates, with seeded jitter; equal scores keep pool order."""
    if count <= 0 or not candidates:
        return []
    scored = [
        (
            score_card_for_template(card, state.template, state.commander)
            + state.rng.random() * SCORE_JITTER,
            card,
        )
        for card in candidates
    ]
    scored.sort(key=lambda item: item[0], reverse=True)
    return [card for _, card in scored[:count]]


def _available_with_tag(
    state: BuildState,
    tag: str,
    predicate: Callable[[Card], bool] | None = None,
) -> list[Card]:
    return [
        card
        for card in state.candidates
        if tag in card.tags
        and state.is_available(card)
        and (predicate is None or predicate(card))
    ]


def _add_picks(state: BuildState, cards: list[Card], reason: str, priority: int) -> None:
    for card in cards:
        state.add(Pick(card=card, reason=reason, stage=state.stage, priority=priority))


def _top_up(state: BuildState, tag: str, target: int, reason: str, priority: int) -> None:
    """Add cards carrying ``tag`` until the deck holds ``target`` of them."""
    have = state.count_tag(tag)
    needed = max(0, target - have)
    if needed == 0:
        return

    selected = select_top_candidates(state, _available_with_tag(state, tag), needed)
    _add_picks(state, selected, reason, priority)
    state.log(f"Added {len(selected)} {tag} cards")

    if len(selected) < needed:
        state.log(
            f"Shortfall in {state.stage.value}: {tag} {have + len(selected)}/{target}"
        )


def select_commander(state: BuildState, pool: list[Card]) -> None:
    """
    Pick a commander at random from the top scorers.

    The commander's identity becomes the active identity for the rest of
    the build. With no legal candidate the build continues without one.
    """
    candidates = [card for card in pool if is_legal_commander(card)]
    if not candidates:
        state.log("No legal commander in pool")
        logger.warning("No legal commander candidates for %s", state.template.id)
        return

    ranked = sorted(
        candidates,
        key=lambda card: score_card_for_template(card, state.template),
        reverse=True,
    )
    commander = state.rng.choice(ranked[:COMMANDER_TOP_N])

    state.commander = commander
    state.identity = tuple(commander.color_identity)
    state.log(f"Selected commander: {commander.name}")

    suggestion = detect_archetype(commander)
    state.log(f"Commander suggests archetype: {suggestion.primary}")


def seed_key_cards(state: BuildState, key_cards: list[str]) -> None:
    """
    Seed plan key cards by name when they survived filtering.

    Lands are never seeded here; a land key card is noted and left to the
    manabase stage.
    """
    by_name: dict[str, Card] = {}
    for card in state.candidates:
        by_name.setdefault(card.name.lower(), card)
    land_names = {card.name.lower(): card.name for card in state.lands}

    for name in key_cards:
        key = name.strip().lower()
        if key in land_names:
            state.log(f"Key card {land_names[key]} is a land; left to the manabase")
            continue
        card = by_name.get(key)
        if card is None or not state.is_available(card):
            state.log(f"Key card not available: {name}")
            continue
        _add_picks(state, [card], "Plan key card", PRIORITY_SEED)
        state.log(f"Added key card {card.name}")


def seed_required_packages(state: BuildState) -> None:
    """Take up to ``count`` cards for every package requirement."""
    state.log("Seeding required packages")
    for package in state.template.packages:
        for requirement in package.require:
            candidates = _available_with_tag(state, requirement.tag)
            selected = select_top_candidates(state, candidates, requirement.count)
            _add_picks(
                state,
                selected,
                f"Required for {package.name}: {requirement.tag}",
                PRIORITY_SEED,
            )
            state.log(f"Added {len(selected)} cards for {requirement.tag}")
            if len(selected) < requirement.count:
                state.log(
                    f"Shortfall in {state.stage.value}: "
                    f"{requirement.tag} {len(selected)}/{requirement.count}"
                )


def fill_interaction(state: BuildState) -> None:
    """Top up removal, sweepers and counterspells to their quota minimums."""
    state.log("Filling interaction suite")
    for tag in INTERACTION_TAGS:
        target = state.template.quota_min(tag)
        if target is not None:
            _top_up(state, tag, target, f"Interaction: {tag}", PRIORITY_INTERACTION)


def advantage_multiplier(power_target: float) -> float:
    if power_target >= HIGH_POWER_TARGET:
        return HIGH_POWER_MULTIPLIER
    if power_target <= LOW_POWER_TARGET:
        return LOW_POWER_MULTIPLIER
    return 1.0


def fill_advantage(state: BuildState) -> None:
    """Top up draw, ramp and tutors to power-scaled quota minimums."""
    state.log("Filling card advantage and acceleration")
    multiplier = advantage_multiplier(state.context.power_target)
    for tag in ADVANTAGE_TAGS:
        quota_min = state.template.quota_min(tag)
        if quota_min is None:
            continue
        target = int(quota_min * multiplier)
        _top_up(state, tag, target, f"Advantage: {tag}", PRIORITY_ADVANTAGE)


def fill_curve(state: BuildState) -> None:
    """Top up each creature band to the midpoint of its range."""
    state.log("Filling mana curve")
    for band, target in state.template.curve_targets().items():
        tag = CREATURE_BAND_TAGS.get(band)
        if tag is None:
            logger.warning("Template %s has unknown curve band %r", state.template.id, band)
            continue
        _top_up(state, tag, target, f"Curve: {band} mana", PRIORITY_CURVE)


def pick_wincons(state: BuildState) -> None:
    state.log("Selecting win conditions")
    target = state.template.quota_min("wincon")
    if target is not None:
        _top_up(state, "wincon", target, "Win condition", PRIORITY_WINCON)


def calculate_color_requirements(picks: list[Pick]) -> dict[str, int]:
    """Pip weight per color: one per color in each non-land pick's identity."""
    requirements: dict[str, int] = {}
    for pick in picks:
        if pick.card.is_land:
            continue
        for color in pick.card.color_identity:
            requirements[color] = requirements.get(color, 0) + 1
    return requirements


def add_manabase(state: BuildState) -> None:
    """Build lands for the picks so far and append them as low-priority picks."""
    requirements = calculate_color_requirements(state.picks)
    enforced = state.rules.color_identity_enforced
    colors = resolve_colors(
        state.context, requirements, state.identity, enforce_identity=enforced
    )
    if enforced and state.identity is not None and state.context.colors:
        dropped = [c for c in state.context.colors if c not in state.identity]
        if dropped:
            state.log(f"Dropped colors outside identity: {''.join(dropped)}")
    target = calculate_requirements(colors, state.rules).total_lands

    lands = build_manabase(
        state.lands, state.context, state.rules, requirements, identity=state.identity
    )
    for land in lands:
        state.add(
            Pick(
                card=land,
                reason="Manabase requirement",
                stage=state.stage,
                priority=PRIORITY_LAND,
            )
        )
    state.log(f"Added {len(lands)} lands for {''.join(colors) or 'colorless'}")

    if len(lands) < target:
        state.log(f"Shortfall in {state.stage.value}: lands {len(lands)}/{target}")
        state.warnings.append(f"Manabase has {len(lands)} of {target} lands")
        logger.warning("Manabase short: %d of %d lands", len(lands), target)


def escalate_power(state: BuildState) -> bool:
    """
    Swap one low-priority non-land pick for a stronger card.

    Tries broad tutors, then fast mana, then cheap spot removal. The
    replaced pick is the lowest-priority one below the upgrade's priority,
    earliest first on ties.

    Returns:
        True if a replacement was made
    """
    for upgrade in ESCALATION_UPGRADES:
        max_mv = upgrade.max_mana_value
        candidates = _available_with_tag(
            state,
            upgrade.tag,
            None if max_mv is None else (lambda card, mv=max_mv: card.mana_value <= mv),
        )
        if not candidates:
            continue

        replace_index = _lowest_priority_index(state.picks, below=upgrade.priority)
        if replace_index is None:
            continue

        best = select_top_candidates(state, candidates, 1)[0]
        old = state.picks[replace_index]
        state.replace(
            replace_index,
            Pick(
                card=best,
                reason="Power escalation",
                stage=state.stage,
                priority=upgrade.priority,
            ),
        )
        state.log(f"Escalated: {old.card.name} -> {best.name} ({upgrade.tag})")
        return True
    return False


def _lowest_priority_index(picks: list[Pick], below: int) -> int | None:
    index: int | None = None
    for i, pick in enumerate(picks):
        if pick.card.is_land or pick.priority >= below:
            continue
        if index is None or pick.priority < picks[index].priority:
            index = i
    return index


def deescalate_power(state: BuildState) -> bool:
    """
    Swap one high-power non-land pick for a fairer card of the same type.

    Looks for the first pick tagged broad tutor, then fast mana, then
    combo piece, and replaces it with the best available card lacking
    that tag whose type line shares the pick's first type-line word.

    Returns:
        True if a replacement was made
    """
    for tag in DEESCALATION_TAGS:
        index = next(
            (
                i
                for i, pick in enumerate(state.picks)
                if not pick.card.is_land and tag in pick.card.tags
            ),
            None,
        )
        if index is None:
            continue

        old = state.picks[index]
        primary_type = old.card.primary_type
        candidates = [
            card
            for card in state.candidates
            if tag not in card.tags
            and state.is_available(card)
            and primary_type in card.type_line
        ]
        if not candidates:
            continue

        replacement = select_top_candidates(state, candidates, 1)[0]
        state.replace(
            index,
            Pick(
                card=replacement,
                reason="Power de-escalation",
                stage=state.stage,
                priority=PRIORITY_DEESCALATION,
            ),
        )
        state.log(f"De-escalated: {old.card.name} -> {replacement.name} ({tag})")
        return True
    return False


def tune_power(state: BuildState) -> tuple[DeckAnalysis, int]:
    """
    Nudge the deck toward the power target.

    Runs at most MAX_TUNING_ITERATIONS iterations, stopping once power is
    within POWER_TOLERANCE of the target or when no swap is possible.

    Returns:
        (analysis of the final deck, iterations run)
    """
    target = state.context.power_target
    state.log(f"Tuning power level to {target}")

    iterations = 0
    analysis = score_deck(state.deck, state.context)
    while iterations < MAX_TUNING_ITERATIONS:
        difference = analysis.power - target
        if abs(difference) <= POWER_TOLERANCE:
            break

        iterations += 1
        moved = escalate_power(state) if difference < 0 else deescalate_power(state)
        if not moved:
            state.log(f"No tuning move available (iteration {iterations})")
            break
        analysis = score_deck(state.deck, state.context)

    if abs(analysis.power - target) <= POWER_TOLERANCE:
        state.log(f"Power level converged at {analysis.power}")
    else:
        message = (
            f"Power {analysis.power} did not converge to target {target} "
            f"after {iterations} tuning iterations"
        )
        state.log(message)
        state.warnings.append(message)
        logger.info(message)

    return analysis, iterations


def validate_deck(
    deck: list[Card],
    commander: Card | None,
    rules: FormatRules,
    warnings: list[str] | None = None,
) -> ValidationResult:
    """
    Check a deck against its format rules.

    Only format rules are enforced here. Template quotas are targets for
    the build and are never reported.

    Args:
        deck: Main deck cards, commander excluded
        commander: Deck commander, if any
        rules: Format rules to check against
        warnings: Build warnings carried into the result

    Returns:
        ValidationResult; is_legal is True when there are no errors
    """
    errors: list[str] = []

    if not rules.deck_size_min <= len(deck) <= rules.deck_size_max:
        errors.append(
            f"Deck size {len(deck)} is outside allowed range "
            f"{rules.deck_size_min}-{rules.deck_size_max}"
        )

    if rules.singleton:
        seen: set[str] = set()
        reported: set[str] = set()
        for card in deck:
            if card.is_basic_land:
                continue
            if card.name in seen and card.name not in reported:
                errors.append(f"{card.name} appears more than once in singleton format")
                reported.add(card.name)
            seen.add(card.name)

    if rules.has_commander:
        if commander is None:
            errors.append("Commander format requires a commander")
        elif not is_legal_commander(commander):
            errors.append(f"{commander.name} is not a legal commander")

    if rules.color_identity_enforced and commander is not None:
        for card in deck:
            if not validate_color_identity(card, commander.color_identity):
                errors.append(f"{card.name} violates color identity")

    return ValidationResult(
        is_legal=not errors,
        errors=errors,
        warnings=list(warnings or []),
    )
