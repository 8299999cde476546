import pytest
from pydantic import ValidationError

from castcards.models import BattleResult, CardData, GeneratedCard, Rarity
from castcards.post_process import (
    canonical_element,
    canonical_rarity,
    post_process_battle_data,
    post_process_card_data,
    strip_markdown_fences,
)

from conftest import make_card


def test_post_process_card_data_normalizes_enums_and_numbers(card_payload):
    card_payload.update(element=" electric ", rarity="ULTRA RARE", title="  Zap   Lord  ")
    card_payload["stats"] = {"power": "50", "vibe": 12.0, "chaos": 3, "mystery": "0"}

    card = GeneratedCard.model_validate(post_process_card_data(card_payload))

    assert card.element.value == "Electric"
    assert card.rarity is Rarity.ULTRA_RARE
    assert card.title == "Zap Lord"
    assert card.stats.total == 65


def test_canonical_enums_use_synonyms_and_leave_unknowns():
    assert canonical_element("Lightning") == "Electric"
    assert canonical_element("ice") == "Frost"
    assert canonical_rarity("legend") == "Legendary"
    assert canonical_rarity("Epic") == "Epic"


def test_strip_markdown_fences():
    assert strip_markdown_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_markdown_fences('  {"a": 1} ') == '{"a": 1}'


def test_fractional_stats_stay_invalid(card_payload):
    card_payload["stats"]["power"] = 40.5

    with pytest.raises(ValidationError):
        GeneratedCard.model_validate(post_process_card_data(card_payload))


def test_post_process_battle_data_splits_string_log():
    processed = post_process_battle_data(
        {
            "winnerId": " card_1 ",
            "scoreA": "120",
            "scoreB": 99,
            "reason": " Boom. ",
            "log": "First blow.\n\nSecond blow.\nFinal blow.",
        }
    )

    assert processed["winnerId"] == "card_1"
    assert processed["scoreA"] == 120
    assert processed["reason"] == "Boom."
    assert processed["log"] == ["First blow.", "Second blow.", "Final blow."]


def test_card_payload_uses_stored_field_names():
    card = make_card("card_1700000000000_abcdefg")

    payload = card.to_payload()

    assert payload["imageUrl"].endswith("/card_1700000000000_abcdefg/400/300")
    assert payload["special_move"]["name"] == "Espresso Eruption"
    assert payload["rarity"] == "Rare"
    assert CardData.model_validate(payload) == card


def test_cards_are_immutable():
    card = make_card("card_1700000000000_abcdefg")

    with pytest.raises(ValidationError):
        card.title = "Renamed"


def test_rarity_rank_is_monotonic():
    assert [r.rank for r in Rarity] == list(range(7))
    assert Rarity.MYTHIC.rank > Rarity.LEGENDARY.rank > Rarity.COMMON.rank


def test_battle_result_winner_must_be_a_combatant():
    with pytest.raises(ValidationError):
        BattleResult.model_validate(
            {
                "winnerId": "card_c",
                "scoreA": 1,
                "scoreB": 2,
                "reason": "",
                "log": [],
                "card_a_id": "card_a",
                "card_b_id": "card_b",
            }
        )
