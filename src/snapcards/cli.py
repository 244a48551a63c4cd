"""Command-line interface for snapcards.

Usage:
    snapcards --help
    snapcards scan photo.jpg --add
    snapcards add apple galaxy
    snapcards status apple mastered
    snapcards config --live --api-key sk-...

Runs on the local word list unless SUPABASE_EMAIL / SUPABASE_PASSWORD are
set, in which case it signs in and works against the remote store.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import typer
from dotenv import load_dotenv
from tqdm import tqdm

from snapcards.ai.enrichment import EnrichmentAdapter
from snapcards.ai.recognition import RecognitionAdapter
from snapcards.config import AppConfig
from snapcards.constants.paths import get_local_words_path, get_settings_path
from snapcards.constants.statuses import VALID_STATUSES
from snapcards.errors import SnapcardsError
from snapcards.export import export_to_anki_csv, prepare_anki_export
from snapcards.models import WordCard
from snapcards.pipeline import EnrichmentPipeline, Progress
from snapcards.session import ModeController
from snapcards.storage.backends import JsonFileSettingsStorage, JsonFileWordBackend
from snapcards.store import WordListStore

logger = logging.getLogger(__name__)

app = typer.Typer(help="Photograph text, pick words, study cards.")


@dataclass
class AppContext:
    config: AppConfig
    store: WordListStore
    mode: ModeController
    recognizer: RecognitionAdapter
    enricher: EnrichmentAdapter


@contextmanager
def open_app(config: AppConfig | None = None) -> Iterator[AppContext]:
    """Wire store, mode controller and adapters; sign in if credentials are configured."""
    config = config or AppConfig.from_env()

    remote = None
    session = None
    if config.has_remote and config.supabase_email and config.supabase_password:
        from snapcards.storage.supabase import (
            SupabaseWordBackend,
            create_supabase_client,
            sign_in,
        )

        client = create_supabase_client(config.supabase_url, config.supabase_key)
        session = sign_in(client, config.supabase_email, config.supabase_password)
        remote = SupabaseWordBackend(client)

    store = WordListStore(
        remote=remote,
        local=JsonFileWordBackend(get_local_words_path(config.data_dir)),
    )
    mode = ModeController(store, JsonFileSettingsStorage(get_settings_path(config.data_dir)))
    adapter_kwargs = dict(
        mode=mode,
        fallback_api_key=config.fallback_api_key,
        provider_name=config.provider,
        base_url=config.base_url,
        max_retries=config.max_retries,
    )
    ctx = AppContext(
        config=config,
        store=store,
        mode=mode,
        recognizer=RecognitionAdapter(model=config.vision_model, **adapter_kwargs),
        enricher=EnrichmentAdapter(model=config.text_model, **adapter_kwargs),
    )
    try:
        if session is not None:
            reload = mode.set_session(session)
            if reload is not None:
                reload.result()
        yield ctx
    finally:
        store.close()


@contextmanager
def cli_errors() -> Iterator[None]:
    """Turn snapcards errors into a message and exit code 1."""
    try:
        yield
    except SnapcardsError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)


def _find_or_exit(store: WordListStore, word: str) -> WordCard:
    card = store.find_by_word(word)
    if card is None:
        typer.secho(f"No word {word!r} in the list", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(1)
    return card


def _run_pipeline(ctx: AppContext, words: list[str]) -> None:
    pipeline = EnrichmentPipeline(ctx.enricher, ctx.store, api_key=ctx.mode.effective_api_key())
    with tqdm(total=len(set(words)), desc="Enriching words", unit="word") as bar:

        def on_progress(progress: Progress) -> None:
            bar.n = progress.completed
            bar.refresh()

        result = pipeline.run(words, on_progress=on_progress)

    if result.is_empty:
        typer.secho("No words were added.", fg=typer.colors.YELLOW)
    for card in result.added:
        typer.echo(f"  + {card.word}  {card.meaning}")
    for word in result.skipped:
        typer.echo(f"  = {word} (already in list)")
    for word, error in result.failed.items():
        typer.secho(f"  ! {word}: {error}", fg=typer.colors.RED)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


@app.command()
def scan(
    image: Path = typer.Argument(..., exists=True, dir_okay=False, help="Captured image"),
    add: bool = typer.Option(False, "--add", help="Enrich and add recognized words"),
    select: list[str] = typer.Option(
        None, "--select", "-s", help="Only add these words (repeatable)"
    ),
) -> None:
    """Recognize words in a photo, optionally adding them as cards."""
    with cli_errors(), open_app() as ctx:
        words = ctx.recognizer.recognize(image_path=image, api_key=ctx.mode.effective_api_key())
        if not words:
            typer.secho("No words recognized. Try a clearer photo.", fg=typer.colors.YELLOW)
            return
        typer.echo("Recognized: " + ", ".join(words))
        if not add:
            return
        if select:
            wanted = {w.lower() for w in select}
            words = [w for w in words if w.lower() in wanted]
        _run_pipeline(ctx, words)


@app.command("add")
def add_words(words: list[str] = typer.Argument(..., help="Words to enrich and add")) -> None:
    """Enrich words and add them to the list."""
    with cli_errors(), open_app() as ctx:
        _run_pipeline(ctx, words)


@app.command("list")
def list_words(
    status: str = typer.Option(None, "--status", help="Only show words with this status"),
) -> None:
    """List words, newest first."""
    with cli_errors(), open_app() as ctx:
        cards = ctx.store.words
        if status:
            cards = [c for c in cards if c.status == status]
        if not cards:
            typer.echo("Word list is empty.")
            return
        for card in cards:
            typer.echo(f"{card.word:<20} {card.status:<9} {card.meaning}")


@app.command()
def show(word: str) -> None:
    """Show the full card for a word."""
    with cli_errors(), open_app() as ctx:
        card = _find_or_exit(ctx.store, word)
        typer.secho(f"{card.word}  {card.pronunciation}", bold=True)
        typer.echo(f"{card.meaning}   [{card.status}]")
        for i, sentence in enumerate(card.sentences, 1):
            typer.echo(f"\n{i}. {sentence.english}\n   {sentence.chinese}\n   {sentence.explanation}")


@app.command()
def status(word: str, new_status: str = typer.Argument(..., metavar="STATUS")) -> None:
    """Set a word's mastery status (new, review, forgot, mastered)."""
    if new_status not in VALID_STATUSES:
        typer.secho(f"Status must be one of {', '.join(VALID_STATUSES)}", fg=typer.colors.RED)
        raise typer.Exit(2)
    with cli_errors(), open_app() as ctx:
        card = _find_or_exit(ctx.store, word)
        ctx.store.update_status(card.id, new_status)
        typer.echo(f"{card.word}: {card.status} -> {new_status}")


@app.command()
def remove(word: str) -> None:
    """Remove a word from the list."""
    with cli_errors(), open_app() as ctx:
        card = _find_or_exit(ctx.store, word)
        ctx.store.remove(card.id)
        typer.echo(f"Removed {card.word}")


@app.command()
def clear(yes: bool = typer.Option(False, "--yes", help="Confirm deleting every word")) -> None:
    """Delete every word in the list."""
    if not yes:
        typer.confirm("Delete every word in the list?", abort=True)
    with cli_errors(), open_app() as ctx:
        ctx.store.clear_all()
        typer.echo("Word list cleared.")


@app.command()
def stats() -> None:
    """Show word counts per status."""
    with cli_errors(), open_app() as ctx:
        counts = ctx.store.status_counts()
        for name, count in counts.items():
            typer.echo(f"  {name:<9} {count}")
        typer.echo(f"  {'total':<9} {sum(counts.values())}")


@app.command()
def export(
    output: Path = typer.Argument(..., help="CSV file to write"),
    tag: str = typer.Option("snapcards", "--tag", help="Anki tag added to every card"),
) -> None:
    """Export the word list as an Anki-importable CSV."""
    with cli_errors(), open_app() as ctx:
        df = prepare_anki_export(ctx.store.words, tag=tag)
        export_to_anki_csv(df, output)
        typer.echo(f"Exported {len(df)} cards to {output}")


@app.command()
def config(
    demo: bool = typer.Option(None, "--demo/--live", help="Use canned data or the AI services"),
    api_key: str = typer.Option(None, "--api-key", help="Key for the AI services"),
) -> None:
    """Show or change persisted settings."""
    with cli_errors(), open_app() as ctx:
        if demo is not None:
            ctx.mode.set_demo_mode(demo)
        if api_key is not None:
            ctx.mode.set_api_key(api_key)
        key = ctx.mode.api_key
        masked = f"{key[:5]}...{key[-4:]}" if len(key) > 12 else ("set" if key else "not set")
        typer.echo(f"Demo mode: {'on' if ctx.mode.is_demo_mode else 'off'}")
        typer.echo(f"API key:   {masked}")
        typer.echo(f"Session:   {ctx.mode.session.user_id if ctx.mode.session else 'none (local list)'}")


if __name__ == "__main__":
    app()
