#!/usr/bin/env python3
"""Command-line interface for Cast Cards."""

import json
import random
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import typer

from .client import generate_card, judge_battle
from .collection import AppState
from .config import Settings, build_client
from .models import BattleResult, CardData
from .prompts import SAMPLE_TEXTS
from .scoring import resolve_battle
from .utils import (
    CardNotFoundError,
    ConfigurationMissingError,
    EmptyCastError,
    GenerationFailedError,
    JudgmentFailedError,
    get_logger,
    set_verbose,
    short_number,
)

LOGGER = get_logger(__name__)

GENERATION_FAILED_MESSAGE = "Failed to conjure card. The ether is cloudy."
BATTLE_FAILED_MESSAGE = "Battle simulation failed."

STAT_BAR_WIDTH = 20

app = typer.Typer(help="Turn your thoughts into battle cards.", no_args_is_help=True)


@dataclass
class CliContext:
    settings: Settings
    _state: Optional[AppState] = None

    @property
    def state(self) -> AppState:
        """The deck, read from disk on first use."""
        if self._state is None:
            self._state = AppState.open(self.settings.store_path)
        return self._state


def _context(ctx: typer.Context) -> CliContext:
    return ctx.obj


def _stat_bar(value: int) -> str:
    filled = min(max(round(value * STAT_BAR_WIDTH / 100), 0), STAT_BAR_WIDTH)
    return "#" * filled + "." * (STAT_BAR_WIDTH - filled)


def render_card(card: CardData) -> str:
    """Plain-text card face."""
    excerpt = card.original_text[:50]
    if len(card.original_text) > 50:
        excerpt += "..."
    lines = [
        f"{card.title}  [{card.element.value}]  {card.rarity.value}",
        f'  "{excerpt}"',
    ]
    for name in ("power", "vibe", "chaos", "mystery"):
        value = getattr(card.stats, name)
        lines.append(f"  {name.upper():<8} {_stat_bar(value)} {value:>3}")
    lines.append(f"  {card.special_move.name}: {card.special_move.effect}")
    lines.append(f"  #{short_number(card.id)}  by {card.fid}")
    if card.image_url:
        lines.append(f"  {card.image_url}")
    return "\n".join(lines)


def render_card_row(card: CardData) -> str:
    return (
        f"{card.id}  {card.title:<25}  {card.element.value:<8}  {card.rarity.value:<10}  "
        f"PWR: {card.stats.power} | VIB: {card.stats.vibe}"
    )


def render_battle(result: BattleResult, card_a: CardData, card_b: CardData) -> str:
    winner = card_a if result.a_won else card_b
    lines = [f"Winner: {winner.title}", f'"{result.reason}"', ""]
    lines.extend(f"> {line}" for line in result.log)
    lines.append("")
    lines.append(f"Score A: {result.score_a}    Score B: {result.score_b}")
    return "\n".join(lines)


@app.callback()
def main_callback(
    ctx: typer.Context,
    store: Optional[Path] = typer.Option(
        None, "--store", help="Path of the JSON file holding your deck."
    ),
    model: Optional[str] = typer.Option(None, "--model", help="OpenAI model to use."),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
) -> None:
    """Turn your thoughts into battle cards."""
    set_verbose(verbose)

    settings = Settings()
    if store is not None:
        settings.store_path = store
    if model is not None:
        settings.model = model

    ctx.obj = CliContext(settings=settings)


@app.command()
def create(
    ctx: typer.Context,
    text: Optional[str] = typer.Argument(None, help="Cast text to forge into a card."),
    fid: Optional[str] = typer.Option(None, "--fid", help="Farcaster ID of the author."),
    use_random: bool = typer.Option(
        False, "--random", help="Use one of the sample casts.", show_default=False
    ),
    print_json: bool = typer.Option(
        False, "--json", help="Print the card as JSON.", show_default=False
    ),
) -> None:
    """Generate a card from TEXT and add it to your deck."""
    context = _context(ctx)
    if use_random:
        text = random.choice(SAMPLE_TEXTS)
    if not text or not text.strip():
        raise typer.BadParameter("Cast text must not be empty.", param_hint="TEXT")

    settings = context.settings
    try:
        client = build_client(settings)
        card = generate_card(
            client,
            text,
            fid,
            model=settings.model,
            temperature=settings.card_temperature,
            taken_ids=context.state.collection.ids(),
            image_base_url=settings.image_base_url,
        )
    except (ConfigurationMissingError, EmptyCastError, GenerationFailedError) as exc:
        LOGGER.debug("create failed: %s", exc)
        typer.echo(GENERATION_FAILED_MESSAGE, err=True)
        raise typer.Exit(code=1)

    context.state.add_card(card)

    if print_json:
        typer.echo(json.dumps(card.to_payload(), indent=2, ensure_ascii=False))
    else:
        typer.echo(render_card(card))


@app.command()
def deck(ctx: typer.Context) -> None:
    """List the cards in your deck, newest first."""
    collection = _context(ctx).state.collection
    typer.echo(f"Card Deck ({len(collection)})")
    if len(collection) == 0:
        typer.echo("No cards found in your deck. Run `castcards create` to forge one.")
        return
    for card in collection:
        typer.echo(render_card_row(card))


@app.command()
def show(
    ctx: typer.Context,
    card_id: str = typer.Argument(..., help="Id of the card to show."),
    print_json: bool = typer.Option(False, "--json", help="Print the card as JSON."),
) -> None:
    """Show a single card."""
    try:
        card = _context(ctx).state.collection.require(card_id)
    except CardNotFoundError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)

    if print_json:
        typer.echo(json.dumps(card.to_payload(), indent=2, ensure_ascii=False))
    else:
        typer.echo(render_card(card))


@app.command()
def remove(
    ctx: typer.Context,
    card_id: str = typer.Argument(..., help="Id of the card to remove."),
) -> None:
    """Remove a card from your deck."""
    try:
        card = _context(ctx).state.remove_card(card_id)
    except CardNotFoundError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Removed {card.title} ({card.id}).")


@app.command()
def battle(
    ctx: typer.Context,
    card_a_id: str = typer.Argument(..., help="Id of combatant A."),
    card_b_id: str = typer.Argument(..., help="Id of combatant B."),
    local: bool = typer.Option(
        False, "--local", help="Resolve the battle offline with the built-in rules."
    ),
    print_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
) -> None:
    """Battle two cards from your deck."""
    context = _context(ctx)
    collection = context.state.collection
    try:
        card_a = collection.require(card_a_id)
        card_b = collection.require(card_b_id)
    except CardNotFoundError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)

    if local:
        result = resolve_battle(card_a, card_b)
    else:
        settings = context.settings
        try:
            client = build_client(settings)
            result = judge_battle(
                client,
                card_a,
                card_b,
                model=settings.model,
                temperature=settings.battle_temperature,
            )
        except (ConfigurationMissingError, JudgmentFailedError) as exc:
            LOGGER.debug("battle failed: %s", exc)
            typer.echo(BATTLE_FAILED_MESSAGE, err=True)
            raise typer.Exit(code=1)

    if print_json:
        typer.echo(json.dumps(result.to_payload(), indent=2, ensure_ascii=False))
    else:
        typer.echo(render_battle(result, card_a, card_b))


@app.command()
def samples() -> None:
    """Print the sample casts used by ``create --random``."""
    sample_lines: List[str] = [f"- {text}" for text in SAMPLE_TEXTS]
    typer.echo("\n".join(sample_lines))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
