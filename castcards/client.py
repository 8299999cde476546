import json
from typing import Any, Dict, Iterable, Optional

from openai import OpenAI, OpenAIError

from .models import BattleResult, CardData, GeneratedCard
from .post_process import post_process_battle_data, post_process_card_data, strip_markdown_fences
from .prompts import (
    BATTLE_SCHEMA,
    BATTLE_SYSTEM_PROMPT,
    CARD_SCHEMA,
    CARD_SYSTEM_PROMPT,
    build_battle_prompt,
    build_card_prompt,
)
from .utils import (
    EmptyCastError,
    GenerationFailedError,
    JudgmentFailedError,
    get_logger,
    new_card_id,
    now_ms,
)

LOGGER = get_logger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_IMAGE_BASE_URL = "https://picsum.photos/seed"

# Failures below the call boundary that collapse into a generic error.
_SERVICE_FAILURES = (OpenAIError, RuntimeError, ValueError, TypeError, AttributeError, KeyError)


def _extract_json_text_from_responses(response: Any) -> str:
    """Extract the text blob from a Responses API response."""
    try:
        output = response.output
        json_text = None
        for item in output:
            if item.type == "message":
                for content in item.content:
                    if content.type == "output_text":
                        json_text = content.text
                        break
            if json_text is not None:
                break
    except (AttributeError, TypeError) as exc:
        raise RuntimeError("Unexpected response structure from OpenAI Responses API.") from exc

    if not json_text:
        raise RuntimeError("Model returned no text.")

    return strip_markdown_fences(json_text)


def _extract_json_text_from_chat(response: Any) -> str:
    """Extract the text blob from a Chat Completions response."""
    try:
        choice = response.choices[0]
        content = choice.message.content
        if isinstance(content, list):
            # Multi-part message; concatenate any text parts
            content = "".join(part.get("text", "") for part in content if isinstance(part, dict))
    except (AttributeError, IndexError, TypeError) as exc:
        raise RuntimeError("Unexpected response structure from OpenAI Chat API.") from exc

    if not content:
        raise RuntimeError("Model returned no text.")

    return strip_markdown_fences(content)


def _is_structured_output_error(exc: Exception) -> bool:
    """Return True if an exception looks like the client rejecting the Responses call."""

    message = str(exc)
    if isinstance(exc, AttributeError):
        return "responses" in message
    return "'text'" in message or "unexpected keyword" in message


def _responses_input_to_messages(request_input: Iterable[Dict[str, Any]]) -> Any:
    messages = []
    for item in request_input:
        text = "".join(
            content["text"] for content in item["content"] if content["type"] == "input_text"
        )
        messages.append({"role": item["role"], "content": text})
    return messages


def _create_response_with_fallback(client: OpenAI, request_kwargs: Dict[str, Any]) -> str:
    """Attempt a Responses API call, falling back to Chat Completions when unsupported."""

    try:
        response = client.responses.create(**request_kwargs)
        return _extract_json_text_from_responses(response)
    except (TypeError, AttributeError) as exc:
        if not _is_structured_output_error(exc):
            raise
        LOGGER.debug("Responses API unavailable (%s); using Chat Completions.", exc)

    text_format = request_kwargs["text"]["format"]
    chat_kwargs: Dict[str, Any] = {
        "model": request_kwargs["model"],
        "messages": _responses_input_to_messages(request_kwargs["input"]),
        "temperature": request_kwargs.get("temperature", 0.0),
        "response_format": {
            "type": "json_schema",
            "json_schema": {
                "name": text_format["name"],
                "schema": text_format["schema"],
                "strict": text_format.get("strict", True),
            },
        },
    }

    if "max_output_tokens" in request_kwargs:
        chat_kwargs["max_tokens"] = request_kwargs["max_output_tokens"]

    response = client.chat.completions.create(**chat_kwargs)
    return _extract_json_text_from_chat(response)


def request_structured_json(
    client: OpenAI,
    *,
    model: str,
    system_prompt: str,
    user_prompt: str,
    schema_name: str,
    schema: Dict[str, Any],
    temperature: float,
    max_output_tokens: int = 1024,
) -> Dict[str, Any]:
    """Send one schema-constrained request and return the decoded JSON object."""
    request_kwargs: Dict[str, Any] = {
        "model": model,
        "input": [
            {
                "role": "system",
                "content": [{"type": "input_text", "text": system_prompt}],
            },
            {
                "role": "user",
                "content": [{"type": "input_text", "text": user_prompt}],
            },
        ],
        "text": {
            "format": {
                "type": "json_schema",
                "name": schema_name,
                "schema": schema,
                "strict": True,
            }
        },
        "max_output_tokens": max_output_tokens,
        "temperature": temperature,
    }

    raw_text = _create_response_with_fallback(client, request_kwargs)
    LOGGER.debug("Raw %s output: %s", schema_name, raw_text)

    data = json.loads(raw_text)
    if not isinstance(data, dict):
        raise RuntimeError(f"Model returned {type(data).__name__}, expected a JSON object.")
    return data


def image_url_for(card_id: str, base_url: str = DEFAULT_IMAGE_BASE_URL) -> str:
    """Pseudo-deterministic artwork URL seeded by the card id."""
    return f"{base_url.rstrip('/')}/{card_id}/400/300"


def generate_card(
    client: OpenAI,
    text: str,
    fid: Optional[str] = None,
    *,
    model: str = DEFAULT_MODEL,
    temperature: float = 0.7,
    taken_ids: Iterable[str] = (),
    image_base_url: str = DEFAULT_IMAGE_BASE_URL,
) -> CardData:
    """Forge a card from *text*.

    Raises :class:`EmptyCastError` for blank text and
    :class:`GenerationFailedError` for anything that goes wrong with the
    service call or its output.
    """
    if not text or not text.strip():
        raise EmptyCastError("Cast text must not be empty.")

    try:
        raw_data = request_structured_json(
            client,
            model=model,
            system_prompt=CARD_SYSTEM_PROMPT,
            user_prompt=build_card_prompt(text),
            schema_name="cast_card",
            schema=CARD_SCHEMA,
            temperature=temperature,
        )
        generated = GeneratedCard.model_validate(post_process_card_data(raw_data))
    except _SERVICE_FAILURES as exc:
        LOGGER.error("Card generation failed: %s", exc)
        raise GenerationFailedError("Failed to generate card from the ether.") from exc

    created_at = now_ms()
    card_id = new_card_id(taken_ids, timestamp=created_at)
    card = CardData(
        id=card_id,
        fid=fid or "anon",
        original_text=text,
        created_at=created_at,
        image_url=image_url_for(card_id, image_base_url),
        **generated.model_dump(),
    )
    LOGGER.info("Forged %s (%s, %s)", card.title, card.element.value, card.rarity.value)
    return card


def judge_battle(
    client: OpenAI,
    card_a: CardData,
    card_b: CardData,
    *,
    model: str = DEFAULT_MODEL,
    temperature: float = 0.5,
) -> BattleResult:
    """Ask the model to resolve a battle between two cards.

    The verdict is not recomputed locally; only its shape and the winner id
    are checked.
    """
    try:
        raw_data = request_structured_json(
            client,
            model=model,
            system_prompt=BATTLE_SYSTEM_PROMPT,
            user_prompt=build_battle_prompt(card_a, card_b),
            schema_name="battle_result",
            schema=BATTLE_SCHEMA,
            temperature=temperature,
        )
        processed = post_process_battle_data(raw_data)
        result = BattleResult.model_validate(
            {**processed, "card_a_id": card_a.id, "card_b_id": card_b.id}
        )
    except _SERVICE_FAILURES as exc:
        LOGGER.error("Battle judgment failed: %s", exc)
        raise JudgmentFailedError("The arbiter could not decide the fate of this battle.") from exc

    LOGGER.info("Battle %s vs %s won by %s", card_a.id, card_b.id, result.winner_id)
    return result
