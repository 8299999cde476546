"""Deterministic battle resolution.

The service normally judges battles from the rules in
:data:`castcards.prompts.BATTLE_RULES`. This module applies the same rules
locally so a battle can be fought offline:

* base score is the sum of the four stats,
* the base is multiplied by the card's rarity factor,
* a card whose element beats the opponent's gets a 15% bonus.

Ties go to the card with the higher raw stat total, then to card A.
"""
from typing import Dict, FrozenSet, List

from .models import BattleResult, CardData, Element, Rarity

ADVANTAGE_BONUS = 0.15

RARITY_MULTIPLIERS: Dict[Rarity, float] = {
    Rarity.COMMON: 1.0,
    Rarity.UNCOMMON: 1.1,
    Rarity.RARE: 1.2,
    Rarity.SUPER_RARE: 1.3,
    Rarity.ULTRA_RARE: 1.4,
    Rarity.LEGENDARY: 1.5,
    Rarity.MYTHIC: 2.0,
}

ELEMENT_ADVANTAGES: Dict[Element, FrozenSet[Element]] = {
    Element.FIRE: frozenset({Element.NATURE}),
    Element.NATURE: frozenset({Element.WATER}),
    Element.WATER: frozenset({Element.FIRE}),
    Element.ELECTRIC: frozenset({Element.WATER}),
    Element.FROST: frozenset({Element.NATURE}),
    Element.CHAOS: frozenset({Element.COSMIC}),
    Element.COSMIC: frozenset({Element.CHAOS}),
}


def has_advantage(attacker: Element, defender: Element) -> bool:
    return defender in ELEMENT_ADVANTAGES.get(attacker, frozenset())


def score_card(card: CardData, opponent: CardData) -> int:
    score = card.stats.total * RARITY_MULTIPLIERS[card.rarity]
    if has_advantage(card.element, opponent.element):
        score *= 1 + ADVANTAGE_BONUS
    return round(score)


def _battle_log(card_a: CardData, card_b: CardData, winner: CardData, loser: CardData) -> List[str]:
    log = [f"{card_a.title} and {card_b.title} step into the arena."]
    for card, opponent in ((card_a, card_b), (card_b, card_a)):
        if has_advantage(card.element, opponent.element):
            log.append(
                f"{card.title}'s {card.element.value} energy overwhelms {opponent.element.value}!"
            )
    log.append(f"{winner.title} unleashes {winner.special_move.name}.")
    if len(log) < 4:
        log.append(f"{loser.title} cannot withstand the blow.")
    return log[:4]


def resolve_battle(card_a: CardData, card_b: CardData) -> BattleResult:
    """Fight *card_a* against *card_b* using the local rules."""
    score_a = score_card(card_a, card_b)
    score_b = score_card(card_b, card_a)

    if score_a != score_b:
        a_wins = score_a > score_b
    else:
        a_wins = card_a.stats.total >= card_b.stats.total

    winner, loser = (card_a, card_b) if a_wins else (card_b, card_a)
    winner_score, loser_score = (score_a, score_b) if a_wins else (score_b, score_a)

    if winner_score == loser_score:
        reason = f"Dead even at {winner_score}, but {winner.title} held the line a moment longer."
    else:
        reason = (
            f"{winner.title} ({winner.rarity.value} {winner.element.value}) outscored "
            f"{loser.title} {winner_score} to {loser_score}."
        )

    return BattleResult(
        winner_id=winner.id,
        score_a=score_a,
        score_b=score_b,
        reason=reason,
        log=_battle_log(card_a, card_b, winner, loser),
        card_a_id=card_a.id,
        card_b_id=card_b.id,
    )
