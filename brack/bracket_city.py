"""Bracket City puzzle fetching service."""
import logging
from datetime import date
from typing import Callable

import httpx
from pydantic import ValidationError

from brack.clues import validate_document
from brack.db import get_settings
from brack.schemas import PuzzleDocument
from brack.store import NotFoundError, PuzzleStore, StorageError

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """The puzzle could not be retrieved from the Bracket City API."""


def puzzle_url(day: date, api_url: str | None = None) -> str:
    base = api_url or get_settings().api_url
    return f"{base.rstrip('/')}/{day.isoformat()}"


def fetch_puzzle(day: date, client: httpx.Client | None = None) -> PuzzleDocument:
    """Fetch a single puzzle from Bracket City by date.

    Args:
        day: Puzzle date
        client: Optional client to reuse; a short-lived one is created otherwise

    Raises FetchError on network errors, error responses or a malformed payload.
    """
    settings = get_settings()
    url = puzzle_url(day, settings.api_url)

    try:
        if client is None:
            with httpx.Client(follow_redirects=True, timeout=settings.http_timeout) as own_client:
                resp = own_client.get(url)
        else:
            resp = client.get(url)
        resp.raise_for_status()
        data = resp.json()
    except httpx.HTTPError as e:
        raise FetchError(f"Failed to fetch puzzle for {day.isoformat()}: {e}") from e
    except ValueError as e:
        raise FetchError(f"Puzzle for {day.isoformat()} is not valid JSON: {e}") from e

    try:
        document = PuzzleDocument.model_validate(data)
    except ValidationError as e:
        raise FetchError(f"Unexpected puzzle data for {day.isoformat()}: {e}") from e

    logger.info(f"Fetched puzzle {document.puzzle_date} ({len(document.solutions)} clues)")
    return document


def load_puzzle(
    store: PuzzleStore | None,
    day: date,
    fetch: Callable[[date], PuzzleDocument] = fetch_puzzle,
) -> PuzzleDocument:
    """Get the puzzle for ``day``, preferring the local store over the API.

    Fetched puzzles are validated and then cached. A failure to cache is logged
    and otherwise ignored.
    """
    puzzle_date = day.isoformat()

    if store is not None:
        try:
            if store.has_puzzle(puzzle_date):
                return validate_document(store.get_puzzle(puzzle_date))
        except (NotFoundError, StorageError) as e:
            logger.warning(f"Failed to load cached puzzle {puzzle_date}, fetching instead: {e}")

    document = validate_document(fetch(day))

    if store is not None:
        try:
            store.save_puzzle(document)
        except StorageError as e:
            logger.warning(f"Failed to save puzzle data for {puzzle_date}: {e}")

    return document
