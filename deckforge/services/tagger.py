"""
Card tagger.

Derives a set of semantic tags from a card's static text and metadata.
Role tags (ramp, removal-spot, draw, ...) come from an ordered pattern
table; structural tags (types, mana value bands, identity) are added
afterwards.

INVARIANT: tag_card() is a pure function of oracle text, type line,
mana value, keywords and color identity. Calling it twice on an
unchanged card returns the same frozenset.
"""

import re

from deckforge.models.card import Card

# Ordered (tag, patterns). Each rule fires at most once: the first matching
# pattern adds the tag and the rest of the rule is skipped.
TAG_RULES: tuple[tuple[str, tuple[re.Pattern[str], ...]], ...] = tuple(
    (tag, tuple(re.compile(p, re.IGNORECASE) for p in patterns))
    for tag, patterns in (
        # Roles
        (
            "ramp",
            (
                r"add [{}\w]+ to your mana pool",
                r"add.*mana.*any.*color",
                r"add.*\{[wubrgc]\}",
                r"create a treasure",
                r"create.*treasure token",
                r"search.*basic land.*put.*onto the battlefield",
                r"search your library for.*land.*battlefield",
                r"you may put a land card",
                r"put.*land.*onto the battlefield",
                r"whenever a land enters.*add",
            ),
        ),
        (
            "tutor-broad",
            (
                r"search your library for a card",
                r"search your library for any card",
                r"search your library.*card.*hand",
                r"\btutor\b",
            ),
        ),
        (
            "tutor-narrow",
            (
                r"search your library for .*creature",
                r"search your library for .*instant.*sorcery",
                r"search your library for .*artifact",
                r"search your library for .*enchantment",
                r"search your library for .*land",
            ),
        ),
        (
            "removal-spot",
            (
                r"(destroy|exile) target (creature|artifact|enchantment|permanent)",
                r"(destroy|exile).*target",
                r"target.*gets -\d+/-\d+ until end of turn",
                r"deals? \d+ damage to (target creature|any target)",
                r"target.*loses all abilities",
                r"return target.*to.*hand",
                r"target.*owner.*hand",
            ),
        ),
        (
            "removal-sweeper",
            (
                r"(destroy|exile) all (creatures|artifacts|enchantments|nonland permanents)",
                r"all creatures get -\d+/-\d+",
                r"damage to each creature",
                r"\bwrath\b",
                r"board wipe",
            ),
        ),
        (
            "counterspell",
            (
                r"counter target spell",
                r"counter target .*spell",
            ),
        ),
        (
            "draw",
            (
                r"draw (a card|\d+ cards?|two cards|three cards)",
                r"you may draw",
                r"draws? a card",
                r"draw.*equal to",
                r"each player draws",
                r"whenever.*draws.*draw",
                r"card advantage",
            ),
        ),
        (
            "protection",
            (
                r"hexproof",
                r"shroud",
                r"protection from",
                r"indestructible",
                r"can't be blocked",
            ),
        ),
        (
            "recursion",
            (
                r"return.*from your graveyard to your hand",
                r"return.*from your graveyard to the battlefield",
            ),
        ),
        (
            "wincon",
            (
                r"you win the game",
                r"target player loses the game",
                r"poison counter",
                r"mill.*cards.*library",
            ),
        ),
        # Synergies
        (
            "tokens",
            (
                r"create.*token",
                r"\d+/\d+ .*token",
                r"token creatures?",
            ),
        ),
        (
            "aristocrats",
            (
                r"whenever.*creature.*dies",
                r"when.*dies.*you.*may",
                r"sacrifice.*creature",
            ),
        ),
        (
            "sac-outlet",
            (
                r"sacrifice [^.]*:",
                r"sacrifice another",
                r"sacrifice a creature",
            ),
        ),
        (
            "blink",
            (
                r"exile.*return.*(the battlefield|under.*control)",
                r"\bflicker",
                r"enters the battlefield.*exile",
            ),
        ),
        (
            "etb",
            (
                r"when.*enters the battlefield",
                r"when.*enters,",
                r"enters the battlefield.*may",
            ),
        ),
        (
            "spellslinger",
            (
                r"whenever you cast.*instant.*sorcery",
                r"instant.*sorcery.*spells",
                r"noncreature spell",
            ),
        ),
        (
            "prowess",
            (
                r"\bprowess\b",
                r"whenever you cast a noncreature spell",
            ),
        ),
        (
            "counters",
            (
                r"\+1/\+1 counter",
                r"put.*\+1/\+1 counters",
                r"counters? on (it|target|each|that)",
                r"enters.*with.*counter",
                r"loyalty counter",
                r"charge counter",
                r"experience counter",
                r"gets.*\+1/\+1 for each",
                r"\b(modular|undying|persist|evolve|adapt|bolster|support|renown)\b",
            ),
        ),
        (
            "proliferate",
            (
                r"proliferate",
                r"double.*counters",
                r"each counter",
            ),
        ),
        (
            "artifacts-matter",
            (
                r"artifacts? you control",
                r"whenever.*artifact.*enters",
                r"affinity for artifacts",
            ),
        ),
        (
            "enchantments-matter",
            (
                r"enchantments? you control",
                r"whenever.*enchantment.*enters",
                r"constellation",
            ),
        ),
        (
            "lands-matter",
            (
                r"landfall",
                r"whenever a land enters",
                r"lands? you control",
            ),
        ),
        (
            "tribal",
            (
                r"creature type",
                r"creatures you control get",
                r"creatures of the chosen type",
            ),
        ),
        (
            "reanimator",
            (
                r"return.*creature.*graveyard.*battlefield",
                r"reanimate",
                r"\bunearth\b",
            ),
        ),
        (
            "storm",
            (
                r"\bstorm\b",
                r"spells cast.*turn",
            ),
        ),
        (
            "energy",
            (
                r"energy counter",
                r"\{e\}",
                r"get.*energy",
            ),
        ),
        (
            "equipment",
            (
                r"\bequipment\b",
                r"equipped creature",
            ),
        ),
        (
            "auras",
            (
                r"\baura\b",
                r"enchant creature",
                r"enchanted creature",
            ),
        ),
        (
            "anthem",
            (
                r"creatures you control get \+",
                r"other creatures you control get \+",
            ),
        ),
        (
            "graveyard",
            (
                r"from your graveyard",
                r"cards? in your graveyard",
            ),
        ),
        (
            "self-mill",
            (
                r"mill (a|two|three|four|five|\w+) cards?",
                r"put the top .* of your library into your graveyard",
            ),
        ),
        (
            "combo-piece",
            (
                r"untap all (lands|permanents|creatures|artifacts)",
                r"take an extra turn",
                r"untap (it|another target|target) .*permanent",
                r"\binfinite\b",
            ),
        ),
    )
)

TYPE_TAGS = ("creature", "instant", "sorcery", "artifact", "enchantment", "planeswalker", "land")

# Template curve band -> creature mana value tag
CREATURE_BAND_TAGS: dict[str, str] = {
    "1": "creature-1mv",
    "2": "creature-2mv",
    "3": "creature-3mv",
    "4": "creature-4mv",
    "5": "creature-5mv",
    "6-7": "creature-6-7mv",
    "8-9": "creature-8-9mv",
    "10+": "creature-10plus",
}

TRIBAL_TYPES = (
    "Human",
    "Elf",
    "Goblin",
    "Wizard",
    "Warrior",
    "Soldier",
    "Beast",
    "Dragon",
    "Angel",
    "Demon",
    "Vampire",
    "Zombie",
    "Spirit",
    "Elemental",
    "Merfolk",
    "Knight",
    "Cleric",
    "Rogue",
    "Shaman",
    "Scout",
    "Giant",
)


def creature_band(mana_value: float) -> str | None:
    """Map a creature's mana value to its curve band key; None between bands."""
    if mana_value <= 1:
        return "1"
    if mana_value in (2, 3, 4, 5):
        return str(int(mana_value))
    if 6 <= mana_value <= 7:
        return "6-7"
    if 8 <= mana_value <= 9:
        return "8-9"
    if mana_value >= 10:
        return "10+"
    return None


def tag_card(card: Card) -> frozenset[str]:
    """
    Compute the tag set for a card.

    Args:
        card: Card to tag (not modified)

    Returns:
        Frozen set of tags
    """
    tags: set[str] = set()
    text = card.oracle_text.lower()
    type_line = card.type_line.lower()

    for tag, patterns in TAG_RULES:
        for pattern in patterns:
            if pattern.search(text) or pattern.search(type_line):
                tags.add(tag)
                break

    for type_tag in TYPE_TAGS:
        if type_tag in type_line:
            tags.add(type_tag)
    if "basic" in type_line:
        tags.add("basic-land")

    if card.mana_value == 0 and "add" in text and "mana" in text:
        tags.add("fast-mana")

    if 1 <= card.mana_value <= 2 and "add" in text and "mana" in text:
        tags.add("ramp")

    if "enters the battlefield tapped" in text or "enters tapped" in text:
        tags.add("etb-tapped")

    if "creature" in type_line:
        band = creature_band(card.mana_value)
        if band is not None:
            tags.add(CREATURE_BAND_TAGS[band])

    for keyword in card.keywords:
        tags.add(re.sub(r"\s+", "-", keyword.strip().lower()))

    for color in card.color_identity:
        tags.add(f"identity-{color.lower()}")

    if card.mana_value <= 2:
        tags.add("low-mv")
    elif card.mana_value <= 4:
        tags.add("mid-mv")
    else:
        tags.add("high-mv")

    return frozenset(tags)


def ensure_tagged(card: Card) -> frozenset[str]:
    """Tag the card if it has no tags yet and return its tags."""
    if not card.tags:
        card.tags = tag_card(card)
    return card.tags


def tag_pool(cards: list[Card]) -> int:
    """
    Tag every untagged card in place.

    Returns:
        Number of cards that were tagged
    """
    tagged = 0
    for card in cards:
        if not card.tags:
            card.tags = tag_card(card)
            tagged += 1
    return tagged


def extract_tribal_type(card: Card) -> str | None:
    """Return the first well-known creature type named by the card, if any."""
    type_line = card.type_line.lower()
    text = card.oracle_text.lower()
    for creature_type in TRIBAL_TYPES:
        needle = creature_type.lower()
        if needle in type_line or needle in text:
            return creature_type
    return None
