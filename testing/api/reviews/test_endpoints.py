"""Tests for review API endpoints."""

import unittest
from unittest.mock import MagicMock, patch
from uuid import UUID, uuid4

from fastapi.testclient import TestClient

from otakutrack.api.app import app
from otakutrack.api.dependencies import get_current_user
from otakutrack.database.base import Page
from otakutrack.database.reviews import Review, ReviewReaction, ReviewSort
from testing.api.fixtures import CREATED_AT, make_show, make_user, mock_session_context


def make_review(author_id: UUID, rating: int = 9, is_reported: bool = False) -> Review:
    """Build a review with no reactions or edits."""
    show = make_show()
    return Review(
        id=uuid4(),
        user_id=author_id,
        show_id=show.id,
        show=show,
        user=make_user(user_id=author_id),
        rating=rating,
        comment="Quietly devastating.",
        title=None,
        is_spoiler=False,
        spoiler_episode=None,
        spoiler_season=None,
        tags=[],
        is_edited=False,
        is_reported=is_reported,
        report_reason=None,
        reactions=[],
        edits=[],
        created_at=CREATED_AT,
    )


class ReviewEndpointTestCase(unittest.TestCase):
    """Base class with an authenticated test client."""

    def setUp(self) -> None:
        """Set up test client with an authenticated user."""
        self.client = TestClient(app)
        self.user = make_user()
        app.dependency_overrides[get_current_user] = lambda: self.user

    def tearDown(self) -> None:
        """Clear dependency overrides."""
        app.dependency_overrides.clear()


class TestListReviewsEndpoints(ReviewEndpointTestCase):
    """Tests for the review listings."""

    @patch("otakutrack.api.reviews.endpoints.list_reviews_for_show")
    @patch("otakutrack.api.reviews.endpoints.get_session")
    def test_list_for_show_is_public(
        self,
        mock_get_session: MagicMock,
        mock_list: MagicMock,
    ) -> None:
        """Test show reviews are listed without a token and with pagination."""
        app.dependency_overrides.clear()
        mock_session = mock_session_context(mock_get_session)
        review = make_review(uuid4())
        mock_list.return_value = Page(items=[review], total=1, page=1, limit=20)

        response = self.client.get(
            f"/api/reviews/show/{review.show_id}", params={"sort": "helpful", "rating": 9}
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["data"][0]["show_title"], "Frieren")
        self.assertEqual(body["data"][0]["user"]["name"], "Aki")
        self.assertEqual(body["pagination"]["pages"], 1)
        mock_list.assert_called_once_with(
            mock_session, review.show_id, rating=9, sort=ReviewSort.HELPFUL, page=1, limit=20
        )

    def test_list_for_show_rejects_rating_filter_out_of_range(self) -> None:
        """Test the rating filter must be a valid score."""
        response = self.client.get(f"/api/reviews/show/{uuid4()}", params={"rating": 0})

        self.assertEqual(response.status_code, 422)

    @patch("otakutrack.api.reviews.endpoints.list_reviews_for_user")
    @patch("otakutrack.api.reviews.endpoints.get_session")
    def test_list_mine(self, mock_get_session: MagicMock, mock_list: MagicMock) -> None:
        """Test the caller's own reviews are listed."""
        mock_session = mock_session_context(mock_get_session)
        mock_list.return_value = [make_review(self.user.id)]

        response = self.client.get("/api/reviews/user")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()["data"]), 1)
        mock_list.assert_called_once_with(mock_session, self.user.id)


class TestPostReviewEndpoint(ReviewEndpointTestCase):
    """Tests for POST /api/reviews."""

    @patch("otakutrack.api.reviews.endpoints.track_review_posted")
    @patch("otakutrack.api.reviews.endpoints.create_review")
    @patch("otakutrack.api.reviews.endpoints.get_show_by_id")
    @patch("otakutrack.api.reviews.endpoints.get_session")
    def test_post_success(
        self,
        mock_get_session: MagicMock,
        mock_get_show: MagicMock,
        mock_create: MagicMock,
        mock_track: MagicMock,
    ) -> None:
        """Test posting a review records it in the caller's analytics."""
        mock_session = mock_session_context(mock_get_session)
        review = make_review(self.user.id)
        mock_get_show.return_value = review.show
        mock_create.return_value = review

        response = self.client.post(
            "/api/reviews",
            json={"show_id": str(review.show_id), "rating": 9, "comment": "Quietly devastating."},
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["message"], "Review created successfully")
        self.assertEqual(response.json()["data"]["like_ratio"], 0)
        mock_track.assert_called_once_with(mock_session, self.user.id, review.show_id)

    @patch("otakutrack.api.reviews.endpoints.create_review")
    @patch("otakutrack.api.reviews.endpoints.get_show_by_id")
    @patch("otakutrack.api.reviews.endpoints.get_session")
    def test_post_second_review_for_show(
        self,
        mock_get_session: MagicMock,
        mock_get_show: MagicMock,
        mock_create: MagicMock,
    ) -> None:
        """Test one review per show per user."""
        mock_session_context(mock_get_session)
        mock_get_show.return_value = make_show()
        mock_create.side_effect = ValueError("You have already reviewed this show")

        response = self.client.post(
            "/api/reviews",
            json={"show_id": str(uuid4()), "rating": 7, "comment": "Again."},
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "You have already reviewed this show")

    def test_post_rating_out_of_range(self) -> None:
        """Test ratings must be between 1 and 10."""
        response = self.client.post(
            "/api/reviews",
            json={"show_id": str(uuid4()), "rating": 11, "comment": "Peak."},
        )

        self.assertEqual(response.status_code, 422)


class TestModifyReviewEndpoints(ReviewEndpointTestCase):
    """Tests for editing, deleting and reporting reviews."""

    @patch("otakutrack.api.reviews.endpoints.update_review")
    @patch("otakutrack.api.reviews.endpoints.get_review_by_id")
    @patch("otakutrack.api.reviews.endpoints.get_session")
    def test_edit_own_review(
        self,
        mock_get_session: MagicMock,
        mock_get_review: MagicMock,
        mock_update: MagicMock,
    ) -> None:
        """Test only the given fields are passed to the update."""
        mock_session = mock_session_context(mock_get_session)
        review = make_review(self.user.id)
        mock_get_review.return_value = review
        mock_update.return_value = review

        response = self.client.put(f"/api/reviews/{review.id}", json={"rating": 8})

        self.assertEqual(response.status_code, 200)
        mock_update.assert_called_once_with(mock_session, review, rating=8)

    @patch("otakutrack.api.reviews.endpoints.update_review")
    @patch("otakutrack.api.reviews.endpoints.get_review_by_id")
    @patch("otakutrack.api.reviews.endpoints.get_session")
    def test_edit_someone_elses_review(
        self,
        mock_get_session: MagicMock,
        mock_get_review: MagicMock,
        mock_update: MagicMock,
    ) -> None:
        """Test authors are the only ones who can edit a review."""
        mock_session_context(mock_get_session)
        mock_get_review.return_value = make_review(uuid4())

        response = self.client.put(f"/api/reviews/{uuid4()}", json={"rating": 1})

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["message"], "Not authorized to modify this review")
        mock_update.assert_not_called()

    @patch("otakutrack.api.reviews.endpoints.get_review_by_id", return_value=None)
    @patch("otakutrack.api.reviews.endpoints.get_session")
    def test_delete_missing_review(
        self,
        mock_get_session: MagicMock,
        _mock_get_review: MagicMock,
    ) -> None:
        """Test deleting a missing review returns 404."""
        mock_session_context(mock_get_session)

        response = self.client.delete(f"/api/reviews/{uuid4()}")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["message"], "Review not found")

    @patch("otakutrack.api.reviews.endpoints.get_review_by_id")
    @patch("otakutrack.api.reviews.endpoints.get_session")
    def test_report_without_body(
        self,
        mock_get_session: MagicMock,
        mock_get_review: MagicMock,
    ) -> None:
        """Test a review can be reported without giving a reason."""
        mock_session_context(mock_get_session)
        review = make_review(uuid4())
        mock_get_review.return_value = review

        response = self.client.post(f"/api/reviews/{review.id}/report")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Review reported successfully")
        self.assertTrue(review.is_reported)
        self.assertIsNone(review.report_reason)

    @patch("otakutrack.api.reviews.endpoints.get_review_by_id")
    @patch("otakutrack.api.reviews.endpoints.get_session")
    def test_report_twice(self, mock_get_session: MagicMock, mock_get_review: MagicMock) -> None:
        """Test an already reported review cannot be reported again."""
        mock_session_context(mock_get_session)
        mock_get_review.return_value = make_review(uuid4(), is_reported=True)

        response = self.client.post(f"/api/reviews/{uuid4()}/report", json={"reason": "Spam"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Review already reported")


class TestReactEndpoint(ReviewEndpointTestCase):
    """Tests for POST /api/reviews/{id}/{action}."""

    @patch("otakutrack.api.reviews.endpoints.get_review_by_id")
    @patch("otakutrack.api.reviews.endpoints.get_session")
    def test_like_replaces_dislike(
        self,
        mock_get_session: MagicMock,
        mock_get_review: MagicMock,
    ) -> None:
        """Test liking a review removes the caller's earlier dislike."""
        mock_session_context(mock_get_session)
        review = make_review(uuid4())
        review.reactions = [
            ReviewReaction(user_id=self.user.id, kind="dislike"),
            ReviewReaction(user_id=uuid4(), kind="like"),
        ]
        mock_get_review.return_value = review

        response = self.client.post(f"/api/reviews/{review.id}/like")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"], {"likes": 2, "dislikes": 0, "helpful": 0})

    @patch("otakutrack.api.reviews.endpoints.get_review_by_id")
    @patch("otakutrack.api.reviews.endpoints.get_session")
    def test_helpful_toggles_off(
        self,
        mock_get_session: MagicMock,
        mock_get_review: MagicMock,
    ) -> None:
        """Test a second helpful vote removes the first."""
        mock_session_context(mock_get_session)
        review = make_review(uuid4())
        review.reactions = [ReviewReaction(user_id=self.user.id, kind="helpful")]
        mock_get_review.return_value = review

        response = self.client.post(f"/api/reviews/{review.id}/helpful")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["helpful"], 0)

    def test_unknown_action(self) -> None:
        """Test only like, dislike and helpful are accepted."""
        response = self.client.post(f"/api/reviews/{uuid4()}/love")

        self.assertEqual(response.status_code, 422)


if __name__ == "__main__":
    unittest.main()
