"""Personalised show recommendations.

Scores unseen shows against the genres and tags of shows the user is
watching or has completed.
"""

import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

logger = logging.getLogger(__name__)

GENRE_WEIGHT = 2
TAG_WEIGHT = 1
RATING_WEIGHT = 0.5
POPULAR_BONUS = 3
RECENT_BONUS = 2
# Shows released within this many years of now count as recent
RECENT_YEARS = 2


class ScorableShow(Protocol):
    """The show attributes the scorer reads."""

    genres: list[str]
    tags: list[str]
    rating_average: float
    is_popular: bool
    year: int | None


@dataclass
class Preferences:
    """How often each genre and tag appears in a user's history."""

    genres: Counter[str]
    tags: Counter[str]

    @property
    def is_empty(self) -> bool:
        """Check if there is no history to score against."""
        return not self.genres and not self.tags


def build_preferences(history: Iterable[ScorableShow]) -> Preferences:
    """Count genres and tags across a user's watched shows."""
    genres: Counter[str] = Counter()
    tags: Counter[str] = Counter()
    for show in history:
        genres.update(show.genres or [])
        tags.update(show.tags or [])
    return Preferences(genres=genres, tags=tags)


def score_show(show: ScorableShow, preferences: Preferences, current_year: int) -> float:
    """Score a candidate show.

    :param show: The candidate.
    :param preferences: Genre and tag frequencies from the user's history.
    :param current_year: Year used for the recency bonus.
    :returns: Genre frequency x2, plus tag frequency, plus half the rating,
        plus bonuses for popular and recent shows.
    """
    score = 0.0
    for genre in show.genres or []:
        score += preferences.genres.get(genre, 0) * GENRE_WEIGHT
    for tag in show.tags or []:
        score += preferences.tags.get(tag, 0) * TAG_WEIGHT
    if show.rating_average:
        score += show.rating_average * RATING_WEIGHT
    if show.is_popular:
        score += POPULAR_BONUS
    if show.year and show.year >= current_year - RECENT_YEARS:
        score += RECENT_BONUS
    return score


def rank_shows[S: ScorableShow](
    candidates: Sequence[S],
    history: Iterable[ScorableShow],
    limit: int = 10,
    current_year: int | None = None,
) -> list[S]:
    """Order candidates by score, best first.

    Ties keep the candidates' original order.

    :param candidates: Shows the user has not added yet.
    :param history: Shows the user is watching or has completed.
    :param limit: Maximum shows to return.
    :param current_year: Year used for the recency bonus (defaults to now).
    :returns: The top scoring candidates.
    """
    if current_year is None:
        current_year = datetime.now(UTC).year

    preferences = build_preferences(history)
    scored = [(score_show(show, preferences, current_year), show) for show in candidates]
    scored.sort(key=lambda pair: pair[0], reverse=True)
    logger.debug(f"Ranked {len(scored)} candidate shows")
    return [show for _, show in scored[:limit]]
