import json
from typing import Any, Dict

from .models import ELEMENT_VALUES, RARITY_VALUES, CardData

CARD_SYSTEM_PROMPT = """You are the card forge of Cast Pokémon, a collectible battle card game.

You receive the text of a single social media post (a "cast"). Your job:
- Turn the cast into one collectible card.
- Output ONLY a single JSON object matching the schema you were given.
- Do NOT include explanation, markdown, comments, or backticks.
"""

BATTLE_SYSTEM_PROMPT = """You are the arbiter of Cast Pokémon card battles.

You receive two cards and the battle rules. Apply the rules, pick a winner,
and output ONLY a single JSON object matching the schema you were given.
Do NOT include explanation, markdown, comments, or backticks.
"""

CARD_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "title": {
            "type": "string",
            "description": "A creative name for the card based on the text. Max 25 chars.",
        },
        "element": {
            "type": "string",
            "enum": ELEMENT_VALUES,
            "description": "The elemental type of the card.",
        },
        "rarity": {
            "type": "string",
            "enum": RARITY_VALUES,
            "description": "Rarity based on the uniqueness or intensity of the text.",
        },
        "stats": {
            "type": "object",
            "properties": {
                "power": {"type": "integer", "description": "Raw strength (0-100)"},
                "vibe": {"type": "integer", "description": "Coolness/Aura (0-100)"},
                "chaos": {"type": "integer", "description": "Unpredictability (0-100)"},
                "mystery": {"type": "integer", "description": "Enigma factor (0-100)"},
            },
            "required": ["power", "vibe", "chaos", "mystery"],
            "additionalProperties": False,
        },
        "special_move": {
            "type": "object",
            "properties": {
                "name": {"type": "string", "description": "Name of the move"},
                "effect": {
                    "type": "string",
                    "description": "Short description of what the move does",
                },
            },
            "required": ["name", "effect"],
            "additionalProperties": False,
        },
    },
    "required": ["title", "element", "rarity", "stats", "special_move"],
    "additionalProperties": False,
}

BATTLE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "winnerId": {
            "type": "string",
            "description": "The ID of the winning card (either cardA or cardB)",
        },
        "scoreA": {"type": "integer", "description": "Calculated score for Card A"},
        "scoreB": {"type": "integer", "description": "Calculated score for Card B"},
        "reason": {
            "type": "string",
            "description": "A dramatic, short explanation of why the winner won.",
        },
        "log": {
            "type": "array",
            "items": {"type": "string"},
            "description": "3-4 short sentences describing the flow of the battle.",
        },
    },
    "required": ["winnerId", "scoreA", "scoreB", "reason", "log"],
    "additionalProperties": False,
}

BATTLE_RULES = """Rules:
1. Calculate a base score: Sum of all stats (power+vibe+chaos+mystery).
2. Apply Multipliers:
   - Rarity: Common (1x), Uncommon (1.1x), Rare (1.2x), Super Rare (1.3x), Ultra Rare (1.4x), Legendary (1.5x), Mythic (2.0x).
   - Element Advantage: Fire>Nature, Nature>Water, Water>Fire, Electric>Water, Frost>Nature, Chaos>Cosmic, Cosmic>Chaos. (Add 15% bonus for advantage).
3. Determine winner based on final score.
4. Provide a dramatic battle log."""

SAMPLE_TEXTS = [
    "Just minted my first NFT and it feels like the future.",
    "Why is everyone arguing about block size? Can't we just build cool stuff?",
    "Coffee machine broke. Chaos reigns. Send help.",
    "The stars aligned perfectly tonight. Cosmic energy flowing.",
]


def build_card_prompt(text: str) -> str:
    return (
        "Generate a 'Cast Pokémon' collectible card based on this social media post/cast:\n"
        f'"{text}"\n\n'
        "Be creative, funny, and thematic. Map the tone of the text to the stats and element.\n"
        "If the text is aggressive, use Fire/Chaos. If chill, use Nature/Water.\n"
        "The title should be catchy and at most 25 characters.\n"
        "Every stat is an integer between 0 and 100."
    )


def build_battle_prompt(card_a: CardData, card_b: CardData) -> str:
    card_a_json = json.dumps(card_a.to_payload(), ensure_ascii=False)
    card_b_json = json.dumps(card_b.to_payload(), ensure_ascii=False)
    return (
        "Simulate a battle between two cards.\n\n"
        f"CARD A:\n{card_a_json}\n\n"
        f"CARD B:\n{card_b_json}\n\n"
        f"{BATTLE_RULES}\n\n"
        f'Return the result JSON with winnerId being either "{card_a.id}" or "{card_b.id}".'
    )
