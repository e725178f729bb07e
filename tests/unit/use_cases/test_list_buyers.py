"""Unit tests for listing and export."""

from datetime import datetime, timedelta, timezone

import pytest

from app.adapters.outbound.tabular.csv_buyer_codec import CsvBuyerCodec
from app.application.dtos.buyer import BuyerListCriteria, BuyerPage
from app.application.use_cases.list_buyers import ExportBuyers, ListBuyers, filter_and_page
from app.domain.errors import Unauthorized
from app.domain.value_objects.buyer_enums import BuyerStatus, City, PropertyType, Timeline

BASE = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def buyers(make_buyer):
    return [
        make_buyer(
            id="a",
            full_name="Asha Verma",
            email="asha@example.com",
            phone="9000000001",
            city=City.MOHALI,
            updated_at=BASE + timedelta(hours=1),
        ),
        make_buyer(
            id="b",
            full_name="Bharat Singh",
            phone="9000000002",
            city=City.CHANDIGARH,
            status=BuyerStatus.QUALIFIED,
            updated_at=BASE + timedelta(hours=3),
        ),
        make_buyer(
            id="c",
            full_name="Chitra Rao",
            email="chitra@mail.test",
            phone="9111111113",
            city=City.CHANDIGARH,
            property_type=PropertyType.OFFICE,
            timeline=Timeline.EXPLORING,
            updated_at=BASE + timedelta(hours=2),
        ),
        make_buyer(
            id="d",
            full_name="Dev Mehta",
            phone="9000000004",
            city=City.CHANDIGARH,
            updated_at=BASE + timedelta(hours=3),
        ),
    ]


def _ids(page):
    return [buyer.id for buyer in page.items]


def test_default_sort_is_updated_at_desc_with_id_tiebreak(buyers):
    page = filter_and_page(buyers, BuyerListCriteria())

    assert _ids(page) == ["d", "b", "c", "a"]
    assert page.total == 4
    assert page.total_pages == 1


def test_search_matches_name_email_or_phone(buyers):
    assert _ids(filter_and_page(buyers, BuyerListCriteria(search="ASHA"))) == ["a"]
    assert _ids(filter_and_page(buyers, BuyerListCriteria(search="mail.test"))) == ["c"]
    assert _ids(filter_and_page(buyers, BuyerListCriteria(search="91111"))) == ["c"]


def test_filters_are_combined(buyers):
    criteria = BuyerListCriteria(city="Chandigarh", status="New", sort="fullName", order="asc")

    assert _ids(filter_and_page(buyers, criteria)) == ["c", "d"]


def test_property_type_and_timeline_filters(buyers):
    assert _ids(filter_and_page(buyers, BuyerListCriteria(propertyType="Office"))) == ["c"]
    assert _ids(filter_and_page(buyers, BuyerListCriteria(timeline="Exploring"))) == ["c"]


def test_pagination(buyers):
    page = filter_and_page(buyers, BuyerListCriteria(sort="fullName", order="asc", page=2, limit=3))

    assert _ids(page) == ["d"]
    assert page.total == 4
    assert page.total_pages == 2


def test_page_past_the_end_is_empty(buyers):
    page = filter_and_page(buyers, BuyerListCriteria(page=5, limit=2))

    assert page.items == []
    assert page.total == 4


def test_total_pages_is_zero_without_matches():
    assert BuyerPage(items=[], total=0, page=1, limit=10).total_pages == 0


@pytest.mark.asyncio
async def test_list_requires_user(repository):
    with pytest.raises(Unauthorized):
        await ListBuyers(repository).execute(None, BuyerListCriteria())


@pytest.mark.asyncio
async def test_export_ignores_pagination(repository, owner, buyers):
    repository.seed(owner, buyers)
    use_case = ExportBuyers(repository, CsvBuyerCodec())

    export = await use_case.execute(
        owner,
        BuyerListCriteria(city="Chandigarh", page=2, limit=1),
        today=datetime(2024, 3, 9, tzinfo=timezone.utc),
    )

    assert export.filename == "buyers-export-2024-03-09.csv"
    assert export.count == 3
    lines = export.content.decode("utf-8").strip().split("\n")
    assert len(lines) == 4
    assert lines[1].startswith("Dev Mehta,")


@pytest.mark.asyncio
async def test_export_requires_user(repository):
    with pytest.raises(Unauthorized):
        await ExportBuyers(repository, CsvBuyerCodec()).execute(None, BuyerListCriteria())
