"""Cast Cards: turn short texts into collectible battle cards."""

from .models import (
    BattleResult,
    BattleVerdict,
    CardData,
    CardFace,
    CardStats,
    Element,
    GeneratedCard,
    GeneratedStats,
    Rarity,
    SpecialMove,
)
from .prompts import BATTLE_SCHEMA, CARD_SCHEMA, SAMPLE_TEXTS, build_battle_prompt, build_card_prompt
from .post_process import post_process_battle_data, post_process_card_data, strip_markdown_fences
from .client import generate_card, image_url_for, judge_battle
from .collection import AppState, Collection, CollectionStore
from .config import Settings, build_client
from .scoring import has_advantage, resolve_battle, score_card
from .utils import (
    CardNotFoundError,
    CastCardsError,
    ConfigurationMissingError,
    DuplicateCardError,
    EmptyCastError,
    GenerationFailedError,
    JudgmentFailedError,
)
from .cli import main

__all__ = [
    "BattleResult",
    "BattleVerdict",
    "CardData",
    "CardFace",
    "CardStats",
    "Element",
    "GeneratedCard",
    "GeneratedStats",
    "Rarity",
    "SpecialMove",
    "BATTLE_SCHEMA",
    "CARD_SCHEMA",
    "SAMPLE_TEXTS",
    "build_battle_prompt",
    "build_card_prompt",
    "post_process_battle_data",
    "post_process_card_data",
    "strip_markdown_fences",
    "generate_card",
    "image_url_for",
    "judge_battle",
    "AppState",
    "Collection",
    "CollectionStore",
    "Settings",
    "build_client",
    "has_advantage",
    "resolve_battle",
    "score_card",
    "CardNotFoundError",
    "CastCardsError",
    "ConfigurationMissingError",
    "DuplicateCardError",
    "EmptyCastError",
    "GenerationFailedError",
    "JudgmentFailedError",
    "main",
]
