"""Tests for premium custom criteria."""

import pytest

from promptstudio.services import custom_criteria as criteria_service
from promptstudio.services.custom_criteria import CriteriaError


class TestCleanName:
    def test_trims(self):
        assert criteria_service.clean_criteria_name("  Speed  ") == "Speed"

    @pytest.mark.parametrize("name", [None, "", "   "])
    def test_blank(self, name):
        with pytest.raises(CriteriaError, match="Criteria name is required"):
            criteria_service.clean_criteria_name(name)

    def test_too_long(self):
        with pytest.raises(CriteriaError) as exc:
            criteria_service.clean_criteria_name("x" * 201)
        assert exc.value.status_code == 400


class TestCriteriaStore:
    async def test_add_and_list(self, db, premium_user):
        await criteria_service.add_criteria(db, premium_user.id, "Speed")
        await criteria_service.add_criteria(db, premium_user.id, "Cost")
        names = [c.criteria_name for c in await criteria_service.list_criteria(db, premium_user.id)]
        assert names == ["Speed", "Cost"]

    async def test_duplicate_is_conflict(self, db, premium_user):
        await criteria_service.add_criteria(db, premium_user.id, "Speed")
        with pytest.raises(CriteriaError) as exc:
            await criteria_service.add_criteria(db, premium_user.id, " Speed ")
        assert exc.value.status_code == 409

    async def test_same_name_for_different_users(self, db, user, premium_user):
        await criteria_service.add_criteria(db, premium_user.id, "Speed")
        await criteria_service.add_criteria(db, user.id, "Speed")

    async def test_delete_only_own(self, db, user, premium_user):
        criteria = await criteria_service.add_criteria(db, premium_user.id, "Speed")
        assert await criteria_service.delete_criteria(db, user.id, criteria.id) is False
        assert await criteria_service.delete_criteria(db, premium_user.id, criteria.id) is True
        assert await criteria_service.list_criteria(db, premium_user.id) == []
