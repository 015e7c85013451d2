"""
Unit Tests for search, status filtering and ordering
"""
from datetime import date, timedelta

import pytest

from certtrack.models import Certification, User, UserRole
from certtrack.services.certification_filters import (
    ExpiringWindow,
    filter_certifications,
    in_expiring_window,
    matches_search,
    matches_user_search,
    regular_users,
    sort_by_expiration,
    sort_most_recent,
)
from certtrack.services.status_classifier import StatusFilter

TODAY = date(2025, 6, 1)


def cert(name, expires_in, position, organization="Acme", credential_id="", issued_ago=365):
    return Certification(
        id=f"cert-{position}",
        user_id="user-1",
        position=position,
        name=name,
        issuing_organization=organization,
        credential_id=credential_id,
        issue_date=TODAY - timedelta(days=issued_ago),
        expiration_date=TODAY + timedelta(days=expires_in),
    )


@pytest.fixture
def certifications():
    return [
        cert("AWS Solutions Architect", 20, 1, organization="Amazon Web Services", credential_id="AWS-123"),
        cert("PMP", 200, 2, organization="PMI", credential_id="PMP-9"),
        cert("CISSP", -3, 3, organization="ISC2"),
        cert("CKA", 75, 4, organization="CNCF", credential_id="cka-aws-lab"),
    ]


class TestSearch:

    def test_case_insensitive_name(self, certifications):
        aws, pmp = certifications[0], certifications[1]

        assert matches_search(aws, "aws") is True
        assert matches_search(pmp, "aws") is False

    def test_matches_organization_and_credential(self, certifications):
        assert matches_search(certifications[2], "isc") is True
        assert matches_search(certifications[3], "AWS-LAB") is True

    @pytest.mark.parametrize("search", [None, "", "   "])
    def test_empty_search_matches_everything(self, certifications, search):
        assert all(matches_search(c, search) for c in certifications)


class TestFilterCertifications:

    def test_text_and_status_combined(self, certifications):
        result = filter_certifications(certifications, TODAY, search="aws", status_filter="expiring")

        assert [c.name for c in result] == ["AWS Solutions Architect", "CKA"]

    def test_status_only(self, certifications):
        assert [c.name for c in filter_certifications(certifications, TODAY, status_filter=StatusFilter.EXPIRED)] == ["CISSP"]
        assert [c.name for c in filter_certifications(certifications, TODAY, status_filter="active")] == ["PMP"]

    def test_all_keeps_order(self, certifications):
        assert filter_certifications(certifications, TODAY) == certifications

    def test_unknown_status_rejected(self, certifications):
        with pytest.raises(ValueError):
            filter_certifications(certifications, TODAY, status_filter="soon")


class TestExpiringWindow:

    @pytest.mark.parametrize("days, window, expected", [
        (0, ExpiringWindow.WITHIN_30, True),
        (30, "30", True),
        (31, "30", False),
        (-1, "30", False),
        (60, "60", True),
        (90, "90", True),
        (91, "90", False),
        (-1, "expired", True),
        (0, "expired", False),
        (-400, "all", True),
        (90, "all", True),
        (91, "all", False),
    ])
    def test_windows(self, days, window, expected):
        assert in_expiring_window(days, window) is expected


class TestSorting:

    def test_by_expiration_ascending(self, certifications):
        assert [c.name for c in sort_by_expiration(certifications)] == ["CISSP", "AWS Solutions Architect", "CKA", "PMP"]

    def test_most_recent_by_issue_date(self):
        items = [cert("Old", 10, 1, issued_ago=900), cert("New", 10, 2, issued_ago=5), cert("Mid", 10, 3, issued_ago=100)]

        assert [c.name for c in sort_most_recent(items)] == ["New", "Mid", "Old"]

    def test_ties_keep_insertion_order(self):
        items = [cert("Second", 10, 2), cert("First", 10, 1), cert("Third", 10, 3)]

        assert [c.name for c in sort_by_expiration(items)] == ["First", "Second", "Third"]
        assert [c.name for c in sort_most_recent(items)] == ["First", "Second", "Third"]


class TestUserSearch:

    def _user(self, username, full_name, email, role=UserRole.USER):
        return User(id=username, username=username, full_name=full_name, email=email, role=role)

    def test_matches_any_identity_field(self):
        user = self._user("jdoe", "John Doe", "john@example.com")

        assert matches_user_search(user, "DOE")
        assert matches_user_search(user, "jdo")
        assert matches_user_search(user, "example.com")
        assert not matches_user_search(user, "alice")
        assert matches_user_search(user, "")

    def test_regular_users_excludes_admins(self):
        users = [
            self._user("admin", "Administrator", "admin@example.com", role=UserRole.ADMIN),
            self._user("john", "John Doe", "john@example.com"),
        ]

        assert [u.username for u in regular_users(users)] == ["john"]
