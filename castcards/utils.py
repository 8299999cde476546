"""Shared helpers for Cast Cards: logging, ids and the error hierarchy."""
from __future__ import annotations

import logging
import random
import string
import time
from typing import Iterable, Optional

LOGGER_NAME = "castcards"

_ID_ALPHABET = string.digits + string.ascii_lowercase


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module level logger under the ``castcards`` namespace."""
    logger_name = name or LOGGER_NAME
    if not logger_name.startswith(LOGGER_NAME):
        logger_name = f"{LOGGER_NAME}.{logger_name}"
    root = logging.getLogger(LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("[%(levelname)s] %(name)s: %(message)s")
        handler.setFormatter(formatter)
        root.addHandler(handler)
        root.setLevel(logging.INFO)
    return logging.getLogger(logger_name)


def set_verbose(verbose: bool) -> None:
    get_logger().setLevel(logging.DEBUG if verbose else logging.INFO)


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def _random_suffix(length: int = 7) -> str:
    return "".join(random.choice(_ID_ALPHABET) for _ in range(length))


def new_card_id(taken_ids: Iterable[str] = (), *, timestamp: Optional[int] = None) -> str:
    """Return ``card_<ms>_<suffix>`` that does not collide with *taken_ids*."""
    taken = set(taken_ids)
    stamp = timestamp if timestamp is not None else now_ms()
    while True:
        candidate = f"card_{stamp}_{_random_suffix()}"
        if candidate not in taken:
            return candidate


def short_number(card_id: str) -> str:
    """The trailing random segment of a card id, used as its display number."""
    parts = card_id.split("_")
    return parts[2] if len(parts) > 2 else card_id


class CastCardsError(RuntimeError):
    """Base class for errors surfaced to the user."""


class ConfigurationMissingError(CastCardsError):
    """Raised when the service credential is not configured."""


class EmptyCastError(CastCardsError, ValueError):
    """Raised when card generation is requested for blank text."""


class GenerationFailedError(CastCardsError):
    """Raised when the model could not produce a valid card."""


class JudgmentFailedError(CastCardsError):
    """Raised when the model could not produce a valid battle verdict."""


class DuplicateCardError(CastCardsError):
    """Raised when a card id is already present in a collection."""


class CardNotFoundError(CastCardsError):
    """Raised when a card id is not present in a collection."""
