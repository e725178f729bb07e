"""Unit tests for bulk CSV import."""

import pytest

from app.adapters.outbound.tabular.csv_buyer_codec import EXPORT_COLUMNS, CsvBuyerCodec
from app.application.dtos.buyer import BuyerListCriteria
from app.application.use_cases.import_buyers import ImportBuyers
from app.domain.errors import BatchTooLarge, ImportValidationError, Unauthorized, ValidationError

HEADER = ",".join(EXPORT_COLUMNS)


def _row(full_name="Row User", phone="9876543210", property_type="Plot", bhk=""):
    return f"{full_name},,{phone},Mohali,{property_type},{bhk},Buy,,,Exploring,Call,,,"


def _csv(*rows):
    return ("\n".join([HEADER, *rows]) + "\n").encode("utf-8")


@pytest.fixture
def use_case(repository):
    return ImportBuyers(repository, CsvBuyerCodec())


async def _count(repository):
    page = await repository.list(BuyerListCriteria(limit=None))
    return page.total


@pytest.mark.asyncio
async def test_import_inserts_every_row_with_history(use_case, repository, owner):
    result = await use_case.execute(owner, _csv(_row("Alice Buyer"), _row("Bob Buyer", property_type="Villa", bhk="3")))

    assert result.count == 2
    assert len(result.buyer_ids) == 2
    for buyer_id in result.buyer_ids:
        buyer = await repository.get(buyer_id)
        assert buyer.owner_id == owner.id
        history = await repository.list_history(buyer_id)
        assert len(history) == 1
        assert history[0].diff["action"] == "imported"


@pytest.mark.asyncio
async def test_one_bad_row_rejects_whole_batch(use_case, repository, owner):
    """A 3-row batch with a bad phone on row 2 stores nothing."""
    with pytest.raises(ImportValidationError) as exc_info:
        await use_case.execute(owner, _csv(_row(), _row(phone="abc"), _row()))

    errors = exc_info.value.details()["errors"]
    assert [error["row"] for error in errors] == [2]
    assert await _count(repository) == 0


@pytest.mark.asyncio
async def test_cross_field_failure_reported_per_row(use_case, owner):
    with pytest.raises(ImportValidationError) as exc_info:
        await use_case.execute(owner, _csv(_row(property_type="Apartment"), _row()))

    errors = exc_info.value.details()["errors"]
    assert errors == [{"row": 1, "errors": ["bhk: BHK is required for Apartment and Villa property types"]}]


@pytest.mark.asyncio
async def test_exactly_200_rows_are_imported(use_case, repository, owner):
    rows = [_row(f"Buyer {index:03d}") for index in range(200)]

    result = await use_case.execute(owner, _csv(*rows))

    assert result.count == 200
    assert await _count(repository) == 200
    history_total = 0
    for buyer_id in result.buyer_ids:
        history_total += len(await repository.list_history(buyer_id))
    assert history_total == 200


@pytest.mark.asyncio
async def test_201_rows_rejected_before_any_insert(use_case, repository, owner):
    rows = [_row(f"Buyer {index:03d}") for index in range(201)]

    with pytest.raises(BatchTooLarge) as exc_info:
        await use_case.execute(owner, _csv(*rows))

    assert exc_info.value.details() == {"rowCount": 201, "maxRows": 200}
    assert await _count(repository) == 0


@pytest.mark.asyncio
async def test_header_only_file_has_no_data(use_case, owner):
    with pytest.raises(ValidationError) as exc_info:
        await use_case.execute(owner, _csv())

    assert exc_info.value.message == "No valid data found in CSV"


@pytest.mark.asyncio
async def test_empty_file_is_rejected(use_case, owner):
    with pytest.raises(ValidationError) as exc_info:
        await use_case.execute(owner, b"")

    assert exc_info.value.issues[0].path == "file"


@pytest.mark.asyncio
async def test_import_requires_user(use_case):
    with pytest.raises(Unauthorized):
        await use_case.execute(None, _csv(_row()))
