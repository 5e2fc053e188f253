"""Tests for admin router."""

from portal.lifecycle import PaperStatus


class TestAdminStats:
    """Tests for GET /api/v1/admin/stats."""

    def test_returns_dashboard_counts(self, admin_client, mock_paper_repo):
        mock_paper_repo.count_by_status.return_value = {
            PaperStatus.SUBMITTED.value: 3,
            PaperStatus.UNDER_REVIEW.value: 2,
            PaperStatus.PAYMENT_PENDING.value: 4,
            PaperStatus.PUBLISHED.value: 1,
        }
        mock_paper_repo.count_payment_overdue.return_value = 1
        mock_paper_repo.count_flagged.return_value = 2

        response = admin_client.get("/api/v1/admin/stats")

        assert response.status_code == 200
        data = response.json()
        assert data["total_submissions"] == 10
        assert data["pending_review"] == 5
        assert data["issues_found"] == 2
        assert data["payment_pending"] == 3
        assert data["payment_overdue"] == 1
        mock_paper_repo.count_flagged.assert_awaited_once_with(0.15)

    def test_non_admin_is_403(self, client, mock_paper_repo):
        response = client.get("/api/v1/admin/stats")

        assert response.status_code == 403
        mock_paper_repo.count_by_status.assert_not_called()


class TestAdminUsers:
    """Tests for GET /api/v1/admin/users."""

    def test_lists_profiles(self, admin_client, mock_user_repo, profile_factory):
        mock_user_repo.list_all.return_value = [profile_factory(), profile_factory(id="u2")]

        response = admin_client.get("/api/v1/admin/users", params={"limit": 10})

        assert response.status_code == 200
        assert [u["id"] for u in response.json()] == ["owner-uid", "u2"]
        mock_user_repo.list_all.assert_awaited_once_with(offset=0, limit=10)

    def test_non_admin_is_403(self, client):
        response = client.get("/api/v1/admin/users")

        assert response.status_code == 403
