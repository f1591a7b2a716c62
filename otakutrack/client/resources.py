"""Resource wrappers with one method per API endpoint.

Methods return the envelope's ``data``. Paginated listings return the whole
envelope so callers can read ``pagination``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from otakutrack.client.base import OtakuTrackClient


class Resource:
    """Base for endpoint groups sharing a path prefix."""

    prefix = ""

    def __init__(self, client: OtakuTrackClient) -> None:
        self.client = client

    def _path(self, suffix: str = "") -> str:
        return f"/api{self.prefix}{suffix}"


class AuthResource(Resource):
    """Account endpoints. Use AuthSession to keep the returned token."""

    prefix = "/auth"

    def register(self, name: str, email: str, password: str) -> dict[str, Any]:
        return self.client.post(
            self._path("/register"),
            json={"name": name, "email": email, "password": password},
        )

    def login(self, email: str, password: str) -> dict[str, Any]:
        return self.client.post(self._path("/login"), json={"email": email, "password": password})

    def profile(self) -> dict[str, Any]:
        return self.client.get(self._path("/profile"))

    def update_profile(self, **fields: Any) -> dict[str, Any]:
        """Update name, avatar or bio."""
        return self.client.put(self._path("/profile"), json=fields)

    def change_password(self, current_password: str, new_password: str) -> None:
        self.client.put(
            self._path("/change-password"),
            json={"current_password": current_password, "new_password": new_password},
        )


class ShowsResource(Resource):
    """Show catalogue endpoints."""

    prefix = "/shows"

    def list(self, page: int = 1, limit: int = 20, **filters: Any) -> dict[str, Any]:
        """List shows.

        :param filters: genre, tag, type, status, year, season, search, sort.
        :returns: The envelope with ``data`` and ``pagination``.
        """
        return self.client.get_page(self._path(), params={"page": page, "limit": limit, **filters})

    def popular(self, limit: int = 20) -> list[dict[str, Any]]:
        return self.client.get(self._path("/popular"), params={"limit": limit})

    def trending(self, limit: int = 20) -> list[dict[str, Any]]:
        return self.client.get(self._path("/trending"), params={"limit": limit})

    def recommendations(self, limit: int = 10) -> list[dict[str, Any]]:
        return self.client.get(self._path("/recommendations"), params={"limit": limit})

    def by_genre(self, genre: str, limit: int = 20) -> list[dict[str, Any]]:
        return self.client.get(self._path(f"/genre/{genre}"), params={"limit": limit})

    def seasonal(self, season: str, year: int, limit: int = 20) -> list[dict[str, Any]]:
        return self.client.get(self._path(f"/seasonal/{season}/{year}"), params={"limit": limit})

    def get(self, show_id: str) -> dict[str, Any]:
        return self.client.get(self._path(f"/{show_id}"))

    def similar(self, show_id: str, limit: int = 10) -> list[dict[str, Any]]:
        return self.client.get(self._path(f"/{show_id}/similar"), params={"limit": limit})

    def create(self, **fields: Any) -> dict[str, Any]:
        return self.client.post(self._path(), json=fields)

    def update(self, show_id: str, **fields: Any) -> dict[str, Any]:
        return self.client.put(self._path(f"/{show_id}"), json=fields)

    def delete(self, show_id: str) -> None:
        self.client.delete(self._path(f"/{show_id}"))


class WatchlistResource(Resource):
    """The signed-in user's watchlist."""

    prefix = "/watchlist"

    def list(self) -> list[dict[str, Any]]:
        return self.client.get(self._path())

    def by_status(self, status: str) -> list[dict[str, Any]]:
        return self.client.get(self._path(f"/status/{status}"))

    def stats(self) -> dict[str, Any]:
        return self.client.get(self._path("/stats"))

    def for_show(self, show_id: str) -> dict[str, Any] | None:
        """The watchlist item for a show, or None if it is not on the watchlist."""
        return self.client.get(self._path(f"/show/{show_id}"))

    def add(self, show_id: str, **fields: Any) -> dict[str, Any]:
        return self.client.post(self._path(), json={"show_id": show_id, **fields})

    def update(self, item_id: str, **fields: Any) -> dict[str, Any]:
        return self.client.put(self._path(f"/{item_id}"), json=fields)

    def update_progress(self, item_id: str, current_episode: int) -> dict[str, Any]:
        return self.client.put(
            self._path(f"/{item_id}/progress"),
            json={"current_episode": current_episode},
        )

    def remove(self, item_id: str) -> None:
        self.client.delete(self._path(f"/{item_id}"))


class ReviewsResource(Resource):
    """Review endpoints."""

    prefix = "/reviews"

    def for_show(self, show_id: str, page: int = 1, limit: int = 20, **filters: Any) -> dict:
        """List a show's reviews; filters are rating and sort."""
        return self.client.get_page(
            self._path(f"/show/{show_id}"),
            params={"page": page, "limit": limit, **filters},
        )

    def mine(self) -> list[dict[str, Any]]:
        return self.client.get(self._path("/user"))

    def create(self, show_id: str, rating: int, comment: str, **fields: Any) -> dict[str, Any]:
        return self.client.post(
            self._path(),
            json={"show_id": show_id, "rating": rating, "comment": comment, **fields},
        )

    def update(self, review_id: str, **fields: Any) -> dict[str, Any]:
        return self.client.put(self._path(f"/{review_id}"), json=fields)

    def delete(self, review_id: str) -> None:
        self.client.delete(self._path(f"/{review_id}"))

    def react(self, review_id: str, action: str) -> dict[str, Any]:
        """Toggle like, dislike or helpful; returns the new counts."""
        return self.client.post(self._path(f"/{review_id}/{action}"))

    def report(self, review_id: str, reason: str | None = None) -> None:
        self.client.post(self._path(f"/{review_id}/report"), json={"reason": reason})


class ClubsResource(Resource):
    """Club, post and poll endpoints."""

    prefix = "/clubs"

    def list(self, page: int = 1, limit: int = 20, **filters: Any) -> dict[str, Any]:
        """List clubs; filters are category, search and sort."""
        return self.client.get_page(self._path(), params={"page": page, "limit": limit, **filters})

    def get(self, club_id: str) -> dict[str, Any]:
        return self.client.get(self._path(f"/{club_id}"))

    def create(self, name: str, description: str, **fields: Any) -> dict[str, Any]:
        return self.client.post(
            self._path(),
            json={"name": name, "description": description, **fields},
        )

    def update(self, club_id: str, **fields: Any) -> dict[str, Any]:
        return self.client.put(self._path(f"/{club_id}"), json=fields)

    def delete(self, club_id: str) -> None:
        self.client.delete(self._path(f"/{club_id}"))

    def join(self, club_id: str) -> dict[str, Any]:
        return self.client.post(self._path(f"/{club_id}/join"))

    def leave(self, club_id: str) -> None:
        self.client.post(self._path(f"/{club_id}/leave"))

    def posts(
        self,
        club_id: str,
        page: int = 1,
        limit: int = 10,
        hide_spoilers: bool = False,
    ) -> dict[str, Any]:
        return self.client.get_page(
            self._path(f"/{club_id}/posts"),
            params={"page": page, "limit": limit, "hide_spoilers": hide_spoilers},
        )

    def create_post(self, club_id: str, title: str, content: str, **fields: Any) -> dict:
        return self.client.post(
            self._path(f"/{club_id}/posts"),
            json={"title": title, "content": content, **fields},
        )

    def update_post(self, club_id: str, post_id: str, **fields: Any) -> dict[str, Any]:
        return self.client.put(self._path(f"/{club_id}/posts/{post_id}"), json=fields)

    def delete_post(self, club_id: str, post_id: str) -> None:
        self.client.delete(self._path(f"/{club_id}/posts/{post_id}"))

    def like_post(self, club_id: str, post_id: str) -> dict[str, Any]:
        return self.client.post(self._path(f"/{club_id}/posts/{post_id}/like"))

    def comment(self, club_id: str, post_id: str, content: str) -> dict[str, Any]:
        return self.client.post(
            self._path(f"/{club_id}/posts/{post_id}/comments"),
            json={"content": content},
        )

    def delete_comment(self, club_id: str, post_id: str, comment_id: str) -> None:
        self.client.delete(self._path(f"/{club_id}/posts/{post_id}/comments/{comment_id}"))

    def polls(self, club_id: str, active: bool = False, page: int = 1, limit: int = 10) -> dict:
        return self.client.get_page(
            self._path(f"/{club_id}/polls"),
            params={"active": active, "page": page, "limit": limit},
        )

    def create_poll(
        self,
        club_id: str,
        question: str,
        options: list[str],
        is_multiple_choice: bool = False,
        end_date: str | None = None,
    ) -> dict[str, Any]:
        return self.client.post(
            self._path(f"/{club_id}/polls"),
            json={
                "question": question,
                "options": options,
                "is_multiple_choice": is_multiple_choice,
                "end_date": end_date,
            },
        )

    def vote(self, club_id: str, poll_id: str, option_indexes: list[int]) -> dict[str, Any]:
        return self.client.post(
            self._path(f"/{club_id}/polls/{poll_id}/vote"),
            json={"option_indexes": option_indexes},
        )

    def poll_results(self, club_id: str, poll_id: str) -> dict[str, Any]:
        return self.client.get(self._path(f"/{club_id}/polls/{poll_id}/results"))

    def close_poll(self, club_id: str, poll_id: str) -> dict[str, Any]:
        return self.client.put(self._path(f"/{club_id}/polls/{poll_id}/close"))

    def delete_poll(self, club_id: str, poll_id: str) -> None:
        self.client.delete(self._path(f"/{club_id}/polls/{poll_id}"))


class RemindersResource(Resource):
    """Episode reminder and notification endpoints."""

    prefix = "/reminders"

    def list(self, include_inactive: bool = False) -> list[dict[str, Any]]:
        return self.client.get(self._path(), params={"include_inactive": include_inactive})

    def create(self, show_id: str, **fields: Any) -> dict[str, Any]:
        return self.client.post(self._path(), json={"show_id": show_id, **fields})

    def get(self, reminder_id: str) -> dict[str, Any]:
        return self.client.get(self._path(f"/{reminder_id}"))

    def update(self, reminder_id: str, **fields: Any) -> dict[str, Any]:
        return self.client.put(self._path(f"/{reminder_id}"), json=fields)

    def delete(self, reminder_id: str) -> None:
        self.client.delete(self._path(f"/{reminder_id}"))

    def notifications(self, unread_only: bool = False) -> list[dict[str, Any]]:
        return self.client.get("/api/notifications", params={"unread_only": unread_only})

    def mark_read(self, notification_id: str) -> dict[str, Any]:
        return self.client.post(f"/api/notifications/{notification_id}/read")


class AnalyticsResource(Resource):
    """Analytics endpoints."""

    prefix = "/analytics"

    def dashboard(self) -> dict[str, Any]:
        return self.client.get(self._path("/dashboard"))

    def public(self) -> dict[str, Any]:
        return self.client.get(self._path("/public"))

    def global_stats(self) -> dict[str, Any]:
        return self.client.get(self._path("/global"))

    def for_user(self, user_id: str) -> dict[str, Any]:
        return self.client.get(self._path(f"/{user_id}"))

    def track_episode(self, show_id: str, **fields: Any) -> dict[str, Any]:
        return self.client.post(self._path("/track-episode"), json={"show_id": show_id, **fields})

    def track_club(self, activity: str) -> None:
        self.client.post(self._path("/track-club"), json={"activity": activity})


class AdminResource(Resource):
    """Site administration endpoints."""

    prefix = "/admin"

    def users(self, page: int = 1, limit: int = 20, **filters: Any) -> dict[str, Any]:
        """List users; filters are role and search."""
        return self.client.get_page(
            self._path("/users"),
            params={"page": page, "limit": limit, **filters},
        )

    def set_role(self, user_id: str, role: str) -> dict[str, Any]:
        return self.client.put(self._path(f"/users/{user_id}/role"), json={"role": role})

    def set_status(self, user_id: str, is_active: bool) -> dict[str, Any]:
        return self.client.put(
            self._path(f"/users/{user_id}/status"),
            json={"is_active": is_active},
        )

    def ban(self, user_id: str) -> dict[str, Any]:
        return self.client.put(self._path(f"/users/{user_id}/ban"))

    def unban(self, user_id: str) -> dict[str, Any]:
        return self.client.put(self._path(f"/users/{user_id}/unban"))

    def delete_user(self, user_id: str) -> None:
        self.client.delete(self._path(f"/users/{user_id}"))

    def flagged(self, page: int = 1, limit: int = 20) -> dict[str, Any]:
        return self.client.get_page(self._path("/flagged"), params={"page": page, "limit": limit})

    def remove_review(self, review_id: str) -> None:
        self.client.delete(self._path(f"/reviews/{review_id}"))

    def clubs(self, page: int = 1, limit: int = 20) -> dict[str, Any]:
        return self.client.get_page(self._path("/clubs"), params={"page": page, "limit": limit})

    def set_club_status(self, club_id: str, is_active: bool) -> dict[str, Any]:
        return self.client.put(
            self._path(f"/clubs/{club_id}/status"),
            json={"is_active": is_active},
        )

    def approve_club(self, club_id: str) -> dict[str, Any]:
        return self.client.put(self._path(f"/clubs/{club_id}/approve"))

    def reject_club(self, club_id: str) -> dict[str, Any]:
        return self.client.put(self._path(f"/clubs/{club_id}/reject"))

    def delete_club(self, club_id: str) -> None:
        self.client.delete(self._path(f"/clubs/{club_id}"))

    def stats(self) -> dict[str, Any]:
        return self.client.get(self._path("/stats"))

    def export_users(self) -> str:
        """Users as CSV text."""
        return self.client.get_text(self._path("/export/users"))

    def export_clubs(self) -> str:
        """Clubs as CSV text."""
        return self.client.get_text(self._path("/export/clubs"))
