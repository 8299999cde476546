import json
from types import SimpleNamespace
from typing import Any, Dict, List

import pytest

from castcards.models import CardData

CARD_PAYLOAD: Dict[str, Any] = {
    "title": "Broken Brew Golem",
    "element": "Chaos",
    "rarity": "Rare",
    "stats": {"power": 60, "vibe": 35, "chaos": 90, "mystery": 40},
    "special_move": {"name": "Espresso Eruption", "effect": "Scalds every foe in reach."},
}


class FakeResponsesClient:
    """Client whose Responses API returns canned text and records requests."""

    def __init__(self, response_text: str):
        self.calls: List[Dict[str, Any]] = []
        self._response_text = response_text
        self.responses = SimpleNamespace(create=self._create)

    def _create(self, **kwargs):
        self.calls.append(kwargs)
        content = SimpleNamespace(type="output_text", text=self._response_text)
        message = SimpleNamespace(type="message", content=[content])
        return SimpleNamespace(output=[SimpleNamespace(type="reasoning"), message])


class FailingClient:
    def __init__(self, exc: Exception):
        self.responses = SimpleNamespace(create=self._create)
        self._exc = exc

    def _create(self, **_):
        raise self._exc


def make_card(card_id: str, **overrides: Any) -> CardData:
    payload: Dict[str, Any] = {
        **CARD_PAYLOAD,
        "id": card_id,
        "fid": "12345",
        "original_text": "Coffee machine broke. Chaos reigns. Send help.",
        "created_at": 1700000000000,
        "imageUrl": f"https://picsum.photos/seed/{card_id}/400/300",
    }
    payload.update(overrides)
    return CardData.model_validate(payload)


@pytest.fixture
def card_payload() -> Dict[str, Any]:
    return json.loads(json.dumps(CARD_PAYLOAD))


@pytest.fixture
def card_a() -> CardData:
    return make_card("card_1700000000000_aaaaaaa")


@pytest.fixture
def card_b() -> CardData:
    return make_card(
        "card_1700000000001_bbbbbbb",
        title="Zen Garden Drift",
        element="Nature",
        rarity="Common",
        stats={"power": 20, "vibe": 80, "chaos": 5, "mystery": 30},
        special_move={"name": "Still Water", "effect": "Calms the arena."},
    )
