"""Unit tests for buyer creation."""

import pytest

from app.application.dtos.buyer import BuyerListCriteria
from app.application.use_cases.create_buyer import CreateBuyer
from app.domain.errors import Unauthorized, ValidationError


@pytest.mark.asyncio
async def test_create_plot_without_bhk(repository, owner, make_payload):
    """Create stores the buyer owned by the caller with a "created" entry."""
    use_case = CreateBuyer(repository)

    buyer = await use_case.execute(owner, make_payload(email="test@example.com"))

    assert buyer.owner_id == owner.id
    assert buyer.version == 1
    assert buyer.email == "test@example.com"
    assert await repository.get(buyer.id) == buyer

    history = await repository.list_history(buyer.id)
    assert len(history) == 1
    assert history[0].diff["action"] == "created"
    assert history[0].diff["data"]["fullName"] == "Test User"
    assert history[0].changed_by_id == owner.id


@pytest.mark.asyncio
async def test_create_apartment_without_bhk_is_rejected(repository, owner, make_payload):
    use_case = CreateBuyer(repository)

    with pytest.raises(ValidationError) as exc_info:
        await use_case.execute(owner, make_payload(propertyType="Apartment"))

    assert [issue.path for issue in exc_info.value.issues] == ["bhk"]
    page = await repository.list(BuyerListCriteria(limit=None))
    assert page.total == 0


@pytest.mark.asyncio
async def test_create_ignores_client_supplied_owner(repository, owner, make_payload):
    buyer = await CreateBuyer(repository).execute(owner, make_payload(ownerId="someone-else", id="forged"))

    assert buyer.owner_id == owner.id
    assert buyer.id != "forged"


@pytest.mark.asyncio
async def test_create_requires_tags_when_configured(repository, owner, make_payload):
    use_case = CreateBuyer(repository, require_tags=True)

    with pytest.raises(ValidationError):
        await use_case.execute(owner, make_payload())

    buyer = await use_case.execute(owner, make_payload(tags=["Urgent"]))
    assert buyer.tags == ("Urgent",)


@pytest.mark.asyncio
async def test_create_requires_user(repository, make_payload):
    with pytest.raises(Unauthorized):
        await CreateBuyer(repository).execute(None, make_payload())
