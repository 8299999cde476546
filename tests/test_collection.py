import json

import pytest

from castcards.collection import STORAGE_KEY, AppState, Collection, CollectionStore
from castcards.utils import CardNotFoundError, DuplicateCardError

from conftest import make_card


def _cards(*suffixes):
    return [make_card(f"card_1700000000000_{suffix}") for suffix in suffixes]


def test_add_prepends_newest_card():
    collection = Collection()
    first, second = _cards("aaaaaaa", "bbbbbbb")

    collection.add(first)
    collection.add(second)

    assert collection.ids() == [second.id, first.id]


def test_add_rejects_duplicate_ids():
    (card,) = _cards("aaaaaaa")
    collection = Collection([card])

    with pytest.raises(DuplicateCardError):
        collection.add(card)
    assert len(collection) == 1


def test_remove_drops_exactly_one_id_and_keeps_order():
    cards = _cards("aaaaaaa", "bbbbbbb", "ccccccc", "ddddddd")
    collection = Collection(cards)

    removed = collection.remove(cards[1].id)

    assert removed == cards[1]
    assert collection.ids() == [cards[0].id, cards[2].id, cards[3].id]
    assert collection.remove("card_missing") is None


def test_store_round_trip_preserves_order_and_fields(tmp_path):
    store = CollectionStore(tmp_path / "cards.json")
    collection = Collection(_cards("aaaaaaa", "bbbbbbb", "ccccccc"))

    store.save(collection)
    reloaded = store.load()

    assert reloaded.cards == collection.cards
    saved = json.loads((tmp_path / "cards.json").read_text(encoding="utf8"))
    assert list(saved) == [STORAGE_KEY]
    assert saved[STORAGE_KEY][0]["imageUrl"].startswith("https://picsum.photos/seed/")


def test_store_missing_file_is_empty(tmp_path):
    assert len(CollectionStore(tmp_path / "nope.json").load()) == 0


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        json.dumps({STORAGE_KEY: "oops"}),
        json.dumps({STORAGE_KEY: [{"id": "card_1"}]}),
        json.dumps([1, 2, 3]),
    ],
)
def test_store_unreadable_state_is_empty(tmp_path, content):
    path = tmp_path / "cards.json"
    path.write_text(content, encoding="utf8")

    assert len(CollectionStore(path).load()) == 0


def test_app_state_persists_every_mutation(tmp_path):
    path = tmp_path / "state" / "cards.json"
    state = AppState.open(path)
    first, second = _cards("aaaaaaa", "bbbbbbb")

    state.add_card(first)
    state.add_card(second)
    assert AppState.open(path).collection.ids() == [second.id, first.id]

    state.remove_card(first.id)
    assert AppState.open(path).collection.ids() == [second.id]

    with pytest.raises(CardNotFoundError):
        state.remove_card(first.id)


def test_store_keeps_legacy_cards_and_skips_only_broken_records(tmp_path):
    path = tmp_path / "cards.json"
    legacy = make_card(
        "card_1700000000000_legacy0",
        title="A Title Far Longer Than Twenty Five Chars",
        stats={"power": 140, "vibe": 35, "chaos": 90, "mystery": 40},
    ).to_payload()
    good = make_card("card_1700000000000_good000").to_payload()
    broken = {"id": "card_1700000000000_broken0"}
    path.write_text(json.dumps({STORAGE_KEY: [legacy, broken, good]}), encoding="utf8")

    state = AppState.open(path)
    assert state.collection.ids() == [legacy["id"], good["id"]]

    (new_card,) = _cards("newcard")
    state.add_card(new_card)

    saved = json.loads(path.read_text(encoding="utf8"))[STORAGE_KEY]
    assert [record["id"] for record in saved] == [new_card.id, legacy["id"], good["id"]]
    assert saved[1]["title"] == "A Title Far Longer Than Twenty Five Chars"


def test_store_skips_duplicate_records(tmp_path):
    path = tmp_path / "cards.json"
    first, second = _cards("aaaaaaa", "bbbbbbb")
    records = [first.to_payload(), second.to_payload(), first.to_payload()]
    path.write_text(json.dumps({STORAGE_KEY: records}), encoding="utf8")

    assert CollectionStore(path).load().ids() == [first.id, second.id]
