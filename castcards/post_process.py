from typing import Any, Dict, List, Optional

from .models import ELEMENT_VALUES, RARITY_VALUES

TITLE_MAX_LENGTH = 25

STAT_NAMES = ("power", "vibe", "chaos", "mystery")

ELEMENT_SYNONYMS = {
    "flame": "Fire",
    "lightning": "Electric",
    "thunder": "Electric",
    "ice": "Frost",
    "earth": "Nature",
    "grass": "Nature",
    "space": "Cosmic",
}

RARITY_SYNONYMS = {
    "superrare": "Super Rare",
    "ultrarare": "Ultra Rare",
    "sr": "Super Rare",
    "ur": "Ultra Rare",
    "legend": "Legendary",
}


def strip_markdown_fences(text: str) -> str:
    """Remove ``` or ```json fences if the model insists on adding them."""
    text = text.strip()

    if text.startswith("```"):
        first_newline = text.find("\n")
        if first_newline != -1:
            text = text[first_newline + 1 :].strip()

    if text.endswith("```"):
        text = text[:-3].strip()

    return text


def _canonicalize(raw: Any, allowed: List[str], synonyms: Dict[str, str]) -> Any:
    """Map *raw* onto one of *allowed* ignoring case, spacing and underscores.

    Unknown values are returned untouched so that validation reports them.
    """
    if not isinstance(raw, str):
        return raw
    value = raw.strip()
    squashed = value.lower().replace("_", "").replace("-", "").replace(" ", "")
    for candidate in allowed:
        if candidate.lower().replace(" ", "") == squashed:
            return candidate
    return synonyms.get(squashed, value)


def canonical_element(raw: Any) -> Any:
    return _canonicalize(raw, ELEMENT_VALUES, ELEMENT_SYNONYMS)


def canonical_rarity(raw: Any) -> Any:
    return _canonicalize(raw, RARITY_VALUES, RARITY_SYNONYMS)


def coerce_int(value: Any) -> Any:
    """Convert numeric strings and integral floats to int, leave anything else."""
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return value
    return value


def normalize_title(title: Any) -> Any:
    """Collapse whitespace and cap the title at the printable length."""
    if not isinstance(title, str):
        return title
    collapsed = " ".join(title.split())
    if len(collapsed) > TITLE_MAX_LENGTH:
        collapsed = collapsed[:TITLE_MAX_LENGTH].rstrip()
    return collapsed


def _normalize_text(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def post_process_card_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """Apply normalization and compatibility fixes on raw card output."""
    processed: Dict[str, Any] = dict(data)

    processed["title"] = normalize_title(processed.get("title"))
    processed["element"] = canonical_element(processed.get("element"))
    processed["rarity"] = canonical_rarity(processed.get("rarity"))

    stats_raw = processed.get("stats")
    if isinstance(stats_raw, dict):
        processed["stats"] = {name: coerce_int(stats_raw.get(name)) for name in STAT_NAMES}

    move_raw = processed.get("special_move")
    if isinstance(move_raw, dict):
        processed["special_move"] = {
            "name": _normalize_text(move_raw.get("name")),
            "effect": _normalize_text(move_raw.get("effect")),
        }

    return processed


def post_process_battle_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """Normalize raw battle output: integer scores, trimmed reason and log."""
    processed: Dict[str, Any] = dict(data)

    winner = processed.get("winnerId")
    if isinstance(winner, str):
        processed["winnerId"] = winner.strip()

    for key in ("scoreA", "scoreB"):
        if key in processed:
            processed[key] = coerce_int(processed[key])

    processed["reason"] = _normalize_text(processed.get("reason"))

    log_raw: Optional[Any] = processed.get("log")
    if isinstance(log_raw, str):
        log_raw = log_raw.splitlines()
    if isinstance(log_raw, list):
        processed["log"] = [
            str(line).strip() for line in log_raw if line is not None and str(line).strip()
        ]

    return processed
