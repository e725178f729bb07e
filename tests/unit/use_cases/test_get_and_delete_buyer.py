"""Unit tests for reading and deleting buyers."""

import pytest

from app.application.use_cases.delete_buyer import DeleteBuyer
from app.application.use_cases.get_buyer import GetBuyer
from app.application.use_cases.patch_buyer_status import PatchBuyerStatus
from app.domain.errors import Forbidden, NotFound, Unauthorized


@pytest.fixture
def stored(repository, owner, make_buyer):
    buyer = make_buyer()
    repository.seed(owner, [buyer])
    return buyer


@pytest.mark.asyncio
async def test_get_returns_history_newest_first(repository, owner, stored):
    await PatchBuyerStatus(repository, "1").execute(owner, stored.id, {"status": "Contacted"})

    detail = await GetBuyer(repository).execute(owner, stored.id)

    assert detail.buyer.id == stored.id
    assert [entry.diff.get("action") for entry in detail.history] == [None, "created"]


@pytest.mark.asyncio
async def test_get_any_buyer_as_other_user(repository, other_user, stored):
    """Reading is open to every signed-in user."""
    detail = await GetBuyer(repository).execute(other_user, stored.id)

    assert detail.buyer == stored


@pytest.mark.asyncio
async def test_get_guards(repository, owner, stored):
    with pytest.raises(Unauthorized):
        await GetBuyer(repository).execute(None, stored.id)
    with pytest.raises(NotFound):
        await GetBuyer(repository).execute(owner, "missing")


@pytest.mark.asyncio
async def test_delete_cascades_history(repository, owner, stored):
    deleted_id = await DeleteBuyer(repository, "1").execute(owner, stored.id)

    assert deleted_id == stored.id
    assert await repository.get(stored.id) is None
    assert await repository.list_history(stored.id) == []


@pytest.mark.asyncio
async def test_delete_by_non_owner_is_forbidden(repository, other_user, stored):
    with pytest.raises(Forbidden):
        await DeleteBuyer(repository, "1").execute(other_user, stored.id)

    assert await repository.get(stored.id) is not None


@pytest.mark.asyncio
async def test_admin_may_delete(repository, admin, stored):
    await DeleteBuyer(repository, admin.id).execute(admin, stored.id)

    assert await repository.get(stored.id) is None


@pytest.mark.asyncio
async def test_delete_guards(repository, owner, stored):
    with pytest.raises(Unauthorized):
        await DeleteBuyer(repository, "1").execute(None, stored.id)
    with pytest.raises(NotFound):
        await DeleteBuyer(repository, "1").execute(owner, "missing")
