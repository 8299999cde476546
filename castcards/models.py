from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Element(str, Enum):
    """Elemental tag of a card."""

    FIRE = "Fire"
    WATER = "Water"
    ELECTRIC = "Electric"
    NATURE = "Nature"
    FROST = "Frost"
    CHAOS = "Chaos"
    COSMIC = "Cosmic"


class Rarity(str, Enum):
    """Rarity tiers, declared from lowest to highest."""

    COMMON = "Common"
    UNCOMMON = "Uncommon"
    RARE = "Rare"
    SUPER_RARE = "Super Rare"
    ULTRA_RARE = "Ultra Rare"
    LEGENDARY = "Legendary"
    MYTHIC = "Mythic"

    @property
    def rank(self) -> int:
        return list(Rarity).index(self)


ELEMENT_VALUES = [element.value for element in Element]
RARITY_VALUES = [rarity.value for rarity in Rarity]


class CardStats(BaseModel):
    """The four battle stats of a stored card."""

    model_config = ConfigDict(frozen=True)

    power: int
    vibe: int
    chaos: int
    mystery: int

    @property
    def total(self) -> int:
        return self.power + self.vibe + self.chaos + self.mystery


class GeneratedStats(CardStats):
    """Stats as the model must return them, each an integer in [0, 100]."""

    power: int = Field(..., ge=0, le=100)
    vibe: int = Field(..., ge=0, le=100)
    chaos: int = Field(..., ge=0, le=100)
    mystery: int = Field(..., ge=0, le=100)


class SpecialMove(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    effect: str = Field(..., min_length=1)


class CardFace(BaseModel):
    """Printed part of a card: title, element, rarity, stats and move."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., min_length=1)
    element: Element
    rarity: Rarity
    stats: CardStats
    special_move: SpecialMove


class GeneratedCard(CardFace):
    """Card payload as returned by the model, before it gets an identity."""

    title: str = Field(..., min_length=1, max_length=25)
    stats: GeneratedStats


class CardData(CardFace):
    """Canonical representation of a stored card.

    Field names on the wire follow the stored JSON layout (``imageUrl`` is
    camel-cased, everything else is snake-cased).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1)
    fid: str = "anon"
    original_text: str
    created_at: int = Field(..., ge=0)
    image_url: Optional[str] = Field(default=None, alias="imageUrl")

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class BattleVerdict(BaseModel):
    """Battle payload as returned by the model."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    winner_id: str = Field(..., alias="winnerId", min_length=1)
    score_a: int = Field(..., alias="scoreA")
    score_b: int = Field(..., alias="scoreB")
    reason: str
    log: List[str] = Field(default_factory=list)


class BattleResult(BattleVerdict):
    """A verdict bound to the two cards that fought.

    The winner must be one of the combatants.
    """

    card_a_id: str
    card_b_id: str

    @model_validator(mode="after")
    def _validate_winner(self) -> "BattleResult":
        if self.winner_id not in (self.card_a_id, self.card_b_id):
            raise ValueError(
                f"winnerId {self.winner_id!r} is neither {self.card_a_id!r} nor {self.card_b_id!r}"
            )
        return self

    @property
    def a_won(self) -> bool:
        return self.winner_id == self.card_a_id

    def to_payload(self) -> dict:
        return self.model_dump(
            mode="json", by_alias=True, include={"winner_id", "score_a", "score_b", "reason", "log"}
        )
