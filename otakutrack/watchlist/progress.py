"""Episode progress rules for watchlist items.

The status mapping here is only applied when progress is reported. Users can
still set any status explicitly through a general update.
"""

from datetime import datetime

from otakutrack.enums import WatchStatus

SECONDS_PER_DAY = 86400


def validate_progress(current_episode: int, total_episodes: int) -> None:
    """Check that a reported episode number is acceptable.

    :param current_episode: The episode the user has reached.
    :param total_episodes: Known episode count, 0 when unknown.
    :raises ValueError: If the episode is negative or past a known total.
    """
    if current_episode < 0:
        raise ValueError("Current episode cannot be negative")
    if total_episodes > 0 and current_episode > total_episodes:
        raise ValueError(
            f"Current episode ({current_episode}) exceeds total episodes ({total_episodes})"
        )


def status_for_progress(current_episode: int, total_episodes: int) -> WatchStatus:
    """Map episode progress to a watch status.

    :param current_episode: The episode the user has reached.
    :param total_episodes: Known episode count, 0 when unknown.
    :returns: Plan to Watch at zero, Completed once the total is reached,
        otherwise Watching.
    """
    if current_episode == 0:
        return WatchStatus.PLAN_TO_WATCH
    if total_episodes > 0 and current_episode >= total_episodes:
        return WatchStatus.COMPLETED
    return WatchStatus.WATCHING


def completion_percentage(current_episode: int, total_episodes: int) -> int:
    """Percentage of episodes watched, rounded, 0 when the total is unknown."""
    if total_episodes <= 0:
        return 0
    return round(current_episode / total_episodes * 100)


def time_spent_days(start_date: datetime | None, finish_date: datetime | None) -> int:
    """Whole days between starting and finishing a show, 0 if either is missing."""
    if start_date is None or finish_date is None:
        return 0
    return int((finish_date - start_date).total_seconds() // SECONDS_PER_DAY)


def new_episodes_watched(previous_episode: int, current_episode: int) -> int:
    """Number of newly watched episodes, never negative."""
    return max(0, current_episode - previous_episode)
