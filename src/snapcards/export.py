"""Statistics and Anki exports for word lists."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import pandas as pd

from snapcards.constants.statuses import VALID_STATUSES
from snapcards.models import WordCard

FRONT = "front"
BACK = "back"
EXAMPLE = "example"
TAGS = "tags"
ANKI_COLUMNS = [FRONT, BACK, EXAMPLE, TAGS]

MSG_NO_EXAMPLE = "No example yet."


def cards_to_frame(cards: Iterable[WordCard]) -> pd.DataFrame:
    """Flatten cards into one row per card (first sentence only)."""
    rows = []
    for card in cards:
        first = card.sentences[0] if card.sentences else None
        rows.append(
            {
                "id": card.id,
                "word": card.word,
                "meaning": card.meaning,
                "pronunciation": card.pronunciation,
                "example": first.english if first else None,
                "example_translation": first.chinese if first else None,
                "status": card.status,
                "date_added": pd.to_datetime(card.date_added, unit="ms") if card.date_added else pd.NaT,
            }
        )
    columns = [
        "id",
        "word",
        "meaning",
        "pronunciation",
        "example",
        "example_translation",
        "status",
        "date_added",
    ]
    return pd.DataFrame(rows, columns=columns)


def status_counts(cards: Iterable[WordCard]) -> dict[str, int]:
    """Count cards per status; every valid status is present (0 if unused)."""
    df = cards_to_frame(cards)
    counts = df["status"].value_counts().reindex(list(VALID_STATUSES), fill_value=0)
    return {status: int(count) for status, count in counts.items()}


def prepare_anki_export(cards: Iterable[WordCard], tag: str = "snapcards") -> pd.DataFrame:
    """Convert cards to an Anki-friendly frame (front/back/example/tags).

    The back holds meaning and pronunciation; the status is added as a tag so
    mastered words can be filtered in Anki.
    """
    if not isinstance(tag, str) or not tag:
        raise ValueError("tag must be a non-empty string")

    df = cards_to_frame(cards)
    if df.empty:
        return pd.DataFrame(columns=ANKI_COLUMNS)

    out = pd.DataFrame()
    out[FRONT] = df["word"]
    out[BACK] = (df["meaning"] + " " + df["pronunciation"]).str.strip()
    out[EXAMPLE] = df["example"].fillna(MSG_NO_EXAMPLE)
    out[TAGS] = tag + " " + df["status"]
    return out[ANKI_COLUMNS].copy()


def export_to_anki_csv(anki_df: pd.DataFrame, output_path: Path) -> None:
    """Export Anki dataframe to CSV."""
    missing = set(ANKI_COLUMNS) - set(anki_df.columns)
    if missing:
        raise ValueError(f"anki_df is missing required columns: {missing}")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    anki_df.to_csv(output_path, index=False)
