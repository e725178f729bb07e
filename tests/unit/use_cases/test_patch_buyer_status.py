"""Unit tests for the status quick-action."""

import pytest

from app.application.use_cases.patch_buyer_status import PatchBuyerStatus
from app.domain.errors import Forbidden, NotFound, Unauthorized, ValidationError
from app.domain.value_objects.buyer_enums import BuyerStatus


@pytest.fixture
def stored(repository, owner, make_buyer):
    buyer = make_buyer()
    repository.seed(owner, [buyer])
    return buyer


@pytest.fixture
def use_case(repository):
    return PatchBuyerStatus(repository, "1")


@pytest.mark.asyncio
async def test_status_change_appends_status_diff(use_case, repository, owner, stored):
    updated = await use_case.execute(owner, stored.id, {"status": "Qualified"})

    assert updated.status == BuyerStatus.QUALIFIED
    assert updated.version == stored.version + 1
    history = await repository.list_history(stored.id)
    assert len(history) == 2
    assert history[0].diff == {"status": {"old": "New", "new": "Qualified"}}


@pytest.mark.asyncio
async def test_same_status_appends_nothing(use_case, repository, owner, stored):
    result = await use_case.execute(owner, stored.id, {"status": "New"})

    assert result.updated_at == stored.updated_at
    assert len(await repository.list_history(stored.id)) == 1


@pytest.mark.asyncio
async def test_status_patch_skips_concurrency_token(use_case, owner, stored):
    """Status changes are last-write-wins."""
    updated = await use_case.execute(owner, stored.id, {"status": "Dropped", "version": 42})

    assert updated.status == BuyerStatus.DROPPED


@pytest.mark.asyncio
async def test_only_status_is_changed(use_case, owner, stored):
    updated = await use_case.execute(owner, stored.id, {"status": "Visited", "fullName": "Sneaky"})

    assert updated.full_name == stored.full_name


@pytest.mark.asyncio
async def test_invalid_status(use_case, owner, stored):
    with pytest.raises(ValidationError):
        await use_case.execute(owner, stored.id, {"status": "Archived"})


@pytest.mark.asyncio
async def test_guards(use_case, owner, other_user, stored):
    with pytest.raises(Unauthorized):
        await use_case.execute(None, stored.id, {"status": "Visited"})
    with pytest.raises(NotFound):
        await use_case.execute(owner, "missing", {"status": "Visited"})
    with pytest.raises(Forbidden):
        await use_case.execute(other_user, stored.id, {"status": "Visited"})
