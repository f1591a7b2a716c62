"""Poll vote tallying and vote selection.

Everything here works on data that has already been loaded, so the same
functions serve the API and tests without a database.
"""

from collections.abc import Hashable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import NamedTuple

# Decimal places kept on option percentages
PERCENTAGE_PRECISION = 2


class OptionVotes(NamedTuple):
    """A poll option's text and the voters who chose it."""

    text: str
    voters: Sequence[Hashable]


@dataclass
class OptionTally:
    """Vote count and share for a single option."""

    index: int
    text: str
    votes: int
    percentage: float
    voters: list[Hashable] = field(default_factory=list)


@dataclass
class PollTally:
    """Aggregated results for a poll."""

    total_votes: int
    unique_voters: int
    options: list[OptionTally]


def tally_poll(options: Sequence[OptionVotes]) -> PollTally:
    """Compute per-option counts and percentages for a poll.

    A voter can appear under several options in a multiple-choice poll, so
    unique_voters may be lower than total_votes.

    :param options: The poll's options in display order.
    :returns: The tally. Every percentage is 0 when nobody has voted.
    """
    total_votes = sum(len(option.voters) for option in options)
    unique: set[Hashable] = set()
    tallies = []
    for index, option in enumerate(options):
        unique.update(option.voters)
        percentage = len(option.voters) / total_votes * 100 if total_votes else 0.0
        tallies.append(
            OptionTally(
                index=index,
                text=option.text,
                votes=len(option.voters),
                percentage=round(percentage, PERCENTAGE_PRECISION),
                voters=list(option.voters),
            )
        )
    return PollTally(total_votes=total_votes, unique_voters=len(unique), options=tallies)


def user_vote_indexes(options: Sequence[OptionVotes], user_id: Hashable) -> list[int]:
    """Indexes of the options a user voted for, empty if they have not voted."""
    return [index for index, option in enumerate(options) if user_id in option.voters]


def select_vote_indexes(
    indexes: Iterable[int],
    option_count: int,
    multiple_choice: bool,
) -> list[int]:
    """Reduce requested option indexes to the votes that will be recorded.

    Out-of-range and repeated indexes are dropped. A single-choice poll keeps
    only the first valid index.

    :param indexes: Indexes sent by the voter.
    :param option_count: Number of options on the poll.
    :param multiple_choice: Whether the poll allows several choices.
    :returns: The indexes to record, in request order.
    """
    selected: list[int] = []
    for index in indexes:
        if 0 <= index < option_count and index not in selected:
            selected.append(index)
    if not multiple_choice:
        return selected[:1]
    return selected


def is_poll_open(is_active: bool, end_date: datetime | None, now: datetime) -> bool:
    """Check whether a poll accepts votes.

    :param is_active: The poll's active flag.
    :param end_date: Optional closing time.
    :param now: Current time.
    :returns: True if active and not past its end date.
    """
    if not is_active:
        return False
    return end_date is None or end_date > now
