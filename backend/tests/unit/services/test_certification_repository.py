"""
Unit Tests for CertificationRepository
"""
import asyncio
from datetime import date

import pytest

from certtrack.core.exceptions import (
    CertificationNotFoundError,
    InvalidDateRangeError,
    MissingFieldError,
    ValidationError,
)
from certtrack.services.certification_repository import CertificationRepository


def payload(user_id, **overrides):
    data = {
        "user_id": user_id,
        "name": "AWS Solutions Architect",
        "issuing_organization": "Amazon Web Services",
        "issue_date": "2024-01-15",
        "expiration_date": "2027-01-15",
    }
    data.update(overrides)
    return data


class TestCreate:

    @pytest.mark.asyncio
    async def test_create_assigns_fresh_id(self, db_session, test_user):
        repo = CertificationRepository(db_session)

        first = await repo.create(payload(test_user.id))
        second = await repo.create(payload(test_user.id, name="PMP"))

        assert first.id and second.id and first.id != second.id
        assert {c.id for c in await repo.list()} == {first.id, second.id}

    @pytest.mark.asyncio
    async def test_optional_fields_default_to_empty(self, db_session, test_user):
        cert = await CertificationRepository(db_session).create(payload(test_user.id))

        assert cert.credential_id == ""
        assert cert.certificate_url == ""
        assert cert.notes == ""
        assert cert.issue_date == date(2024, 1, 15)
        assert cert.expiration_date == date(2027, 1, 15)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field, camel", [
        ("name", "name"),
        ("issuing_organization", "issuingOrganization"),
        ("issue_date", "issueDate"),
        ("expiration_date", "expirationDate"),
        ("user_id", "userId"),
    ])
    async def test_missing_required_field(self, db_session, test_user, field, camel):
        data = payload(test_user.id)
        data.pop(field)

        with pytest.raises(MissingFieldError) as exc_info:
            await CertificationRepository(db_session).create(data)

        assert exc_info.value.details["field"] == camel

    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, db_session, test_user):
        with pytest.raises(MissingFieldError):
            await CertificationRepository(db_session).create(payload(test_user.id, name="   "))

    @pytest.mark.asyncio
    async def test_inverted_date_range_rejected(self, db_session, test_user):
        repo = CertificationRepository(db_session)

        with pytest.raises(InvalidDateRangeError):
            await repo.create(payload(test_user.id, issue_date="2025-05-01", expiration_date="2025-04-30"))

        assert await repo.list() == []

    @pytest.mark.asyncio
    async def test_same_day_range_allowed(self, db_session, test_user):
        cert = await CertificationRepository(db_session).create(
            payload(test_user.id, issue_date="2025-05-01", expiration_date="2025-05-01")
        )

        assert cert.issue_date == cert.expiration_date

    @pytest.mark.asyncio
    async def test_unknown_owner_rejected(self, db_session, test_user):
        with pytest.raises(ValidationError) as exc_info:
            await CertificationRepository(db_session).create(payload("no-such-user"))

        assert exc_info.value.details["field"] == "userId"

    @pytest.mark.asyncio
    async def test_invalid_date_string(self, db_session, test_user):
        with pytest.raises(ValidationError):
            await CertificationRepository(db_session).create(payload(test_user.id, issue_date="15/01/2024"))


class TestReads:

    @pytest.mark.asyncio
    async def test_list_by_user_is_subset_of_list(self, db_session, test_user, other_user):
        repo = CertificationRepository(db_session)
        await repo.create(payload(test_user.id, name="A"))
        await repo.create(payload(other_user.id, name="B"))
        await repo.create(payload(test_user.id, name="C"))

        everything = await repo.list()
        mine = await repo.list_by_user(test_user.id)

        assert [c.name for c in everything] == ["A", "B", "C"]
        assert [c.id for c in mine] == [c.id for c in everything if c.user_id == test_user.id]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("user_id", [None, ""])
    async def test_list_by_user_without_id(self, db_session, test_user, user_id):
        repo = CertificationRepository(db_session)
        await repo.create(payload(test_user.id))

        assert await repo.list_by_user(user_id) == []

    @pytest.mark.asyncio
    async def test_get_unknown(self, db_session):
        with pytest.raises(CertificationNotFoundError):
            await CertificationRepository(db_session).get("missing")

    @pytest.mark.asyncio
    async def test_get_scoped_to_owner(self, db_session, test_user, other_user):
        repo = CertificationRepository(db_session)
        cert = await repo.create(payload(test_user.id))

        assert (await repo.get(cert.id, owner_id=test_user.id)).id == cert.id
        with pytest.raises(CertificationNotFoundError):
            await repo.get(cert.id, owner_id=other_user.id)


class TestUpdate:

    @pytest.mark.asyncio
    async def test_update_changes_only_given_field(self, db_session, test_user):
        repo = CertificationRepository(db_session)
        cert = await repo.create(payload(test_user.id, credential_id="AWS-1", notes="keep"))

        updated = await repo.update(cert.id, {"expiration_date": "2028-01-15"})

        assert updated.expiration_date == date(2028, 1, 15)
        assert updated.name == "AWS Solutions Architect"
        assert updated.issuing_organization == "Amazon Web Services"
        assert updated.issue_date == date(2024, 1, 15)
        assert updated.credential_id == "AWS-1"
        assert updated.notes == "keep"

    @pytest.mark.asyncio
    async def test_renew_replaces_both_dates(self, db_session, test_user):
        repo = CertificationRepository(db_session)
        cert = await repo.create(payload(test_user.id))

        renewed = await repo.update(cert.id, {"issue_date": "2027-01-10", "expiration_date": "2030-01-10"})

        assert (renewed.issue_date, renewed.expiration_date) == (date(2027, 1, 10), date(2030, 1, 10))

    @pytest.mark.asyncio
    async def test_update_unknown(self, db_session):
        with pytest.raises(CertificationNotFoundError):
            await CertificationRepository(db_session).update("missing", {"name": "x"})

    @pytest.mark.asyncio
    async def test_update_other_owner_is_not_found(self, db_session, test_user, other_user):
        repo = CertificationRepository(db_session)
        cert = await repo.create(payload(test_user.id))

        with pytest.raises(CertificationNotFoundError):
            await repo.update(cert.id, {"name": "Hijacked"}, owner_id=other_user.id)

        assert (await repo.get(cert.id)).name == "AWS Solutions Architect"

    @pytest.mark.asyncio
    async def test_update_checks_merged_range(self, db_session, test_user):
        repo = CertificationRepository(db_session)
        cert = await repo.create(payload(test_user.id))

        with pytest.raises(InvalidDateRangeError):
            await repo.update(cert.id, {"expiration_date": "2023-12-31"})

        assert (await repo.get(cert.id)).expiration_date == date(2027, 1, 15)

    @pytest.mark.asyncio
    async def test_update_cannot_blank_required_field(self, db_session, test_user):
        repo = CertificationRepository(db_session)
        cert = await repo.create(payload(test_user.id))

        with pytest.raises(MissingFieldError):
            await repo.update(cert.id, {"name": ""})

    @pytest.mark.asyncio
    async def test_update_ignores_unknown_fields(self, db_session, test_user):
        repo = CertificationRepository(db_session)
        cert = await repo.create(payload(test_user.id))

        updated = await repo.update(cert.id, {"id": "forged", "position": 99, "notes": "ok"})

        assert updated.id == cert.id
        assert updated.notes == "ok"


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_twice(self, db_session, test_user):
        repo = CertificationRepository(db_session)
        cert = await repo.create(payload(test_user.id))

        assert await repo.delete(cert.id) is True
        assert await repo.delete(cert.id) is False
        assert await repo.list() == []

    @pytest.mark.asyncio
    async def test_delete_other_owner_is_noop(self, db_session, test_user, other_user):
        repo = CertificationRepository(db_session)
        cert = await repo.create(payload(test_user.id))

        assert await repo.delete(cert.id, owner_id=other_user.id) is False
        assert (await repo.get(cert.id)).id == cert.id


@pytest.mark.asyncio
async def test_concurrent_creates_get_distinct_positions(db_session, test_user):
    repo = CertificationRepository(db_session)

    created = await asyncio.gather(*[
        repo.create(payload(test_user.id, name=f"Cert {i}")) for i in range(5)
    ])

    assert len({c.position for c in created}) == 5
    assert len(await repo.list()) == 5
