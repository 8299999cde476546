"""The card collection and its on-disk store."""
from __future__ import annotations

import json
import os
import pathlib
from typing import Iterable, Iterator, List, Optional

from pydantic import ValidationError

from .models import CardData
from .utils import CardNotFoundError, DuplicateCardError, get_logger

LOGGER = get_logger(__name__)

STORAGE_KEY = "cast_pokemon_cards"


class Collection:
    """Cards ordered newest first, unique by id."""

    def __init__(self, cards: Iterable[CardData] = ()) -> None:
        self._cards: List[CardData] = []
        for card in cards:
            if self.get(card.id) is not None:
                raise DuplicateCardError(f"Duplicate card id {card.id!r}")
            self._cards.append(card)

    def __iter__(self) -> Iterator[CardData]:
        return iter(list(self._cards))

    def __len__(self) -> int:
        return len(self._cards)

    def __contains__(self, card_id: object) -> bool:
        return any(card.id == card_id for card in self._cards)

    @property
    def cards(self) -> List[CardData]:
        return list(self._cards)

    def ids(self) -> List[str]:
        return [card.id for card in self._cards]

    def get(self, card_id: str) -> Optional[CardData]:
        for card in self._cards:
            if card.id == card_id:
                return card
        return None

    def require(self, card_id: str) -> CardData:
        card = self.get(card_id)
        if card is None:
            raise CardNotFoundError(f"No card with id {card_id!r}")
        return card

    def add(self, card: CardData) -> None:
        """Prepend *card*."""
        if card.id in self:
            raise DuplicateCardError(f"Duplicate card id {card.id!r}")
        self._cards.insert(0, card)

    def remove(self, card_id: str) -> Optional[CardData]:
        """Drop the card with *card_id*, returning it (``None`` if absent)."""
        for index, card in enumerate(self._cards):
            if card.id == card_id:
                return self._cards.pop(index)
        return None


class CollectionStore:
    """Persists a :class:`Collection` as a single keyed record in a JSON file."""

    def __init__(self, path: str | os.PathLike[str], key: str = STORAGE_KEY) -> None:
        self.path = pathlib.Path(path).expanduser()
        self.key = key

    def load(self) -> Collection:
        """Read the collection.

        An unreadable file is logged and treated as empty; a single bad
        record is logged and skipped so the rest of the deck survives.
        """
        if not self.path.exists():
            return Collection()
        try:
            with self.path.open("r", encoding="utf8") as handle:
                payload = json.load(handle)
        except (OSError, ValueError) as error:
            LOGGER.error("Failed to load cards from %s: %s", self.path, error)
            return Collection()

        records = payload.get(self.key, []) if isinstance(payload, dict) else None
        if not isinstance(records, list):
            LOGGER.error("Failed to load cards from %s: %r is not a list", self.path, self.key)
            return Collection()

        cards: List[CardData] = []
        for index, record in enumerate(records):
            try:
                card = CardData.model_validate(record)
            except ValidationError as error:
                LOGGER.warning("Skipping card %d in %s: %s", index, self.path, error)
                continue
            if any(existing.id == card.id for existing in cards):
                LOGGER.warning("Skipping duplicate card %s in %s", card.id, self.path)
                continue
            cards.append(card)
        return Collection(cards)

    def save(self, collection: Collection) -> pathlib.Path:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {self.key: [card.to_payload() for card in collection]}
        with self.path.open("w", encoding="utf8") as handle:
            json.dump(payload, handle, indent=2, ensure_ascii=False)
            handle.write("\n")
        LOGGER.debug("Wrote %d cards to %s", len(collection), self.path)
        return self.path


class AppState:
    """The collection plus its store; every mutation is persisted."""

    def __init__(self, store: CollectionStore, collection: Optional[Collection] = None) -> None:
        self.store = store
        self.collection = collection if collection is not None else store.load()

    @classmethod
    def open(cls, path: str | os.PathLike[str]) -> "AppState":
        return cls(CollectionStore(path))

    def add_card(self, card: CardData) -> CardData:
        self.collection.add(card)
        self.store.save(self.collection)
        return card

    def remove_card(self, card_id: str) -> CardData:
        removed = self.collection.remove(card_id)
        if removed is None:
            raise CardNotFoundError(f"No card with id {card_id!r}")
        self.store.save(self.collection)
        return removed
