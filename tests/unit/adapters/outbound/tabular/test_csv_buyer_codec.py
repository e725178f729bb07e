"""Unit tests for the CSV buyer codec."""

import pytest

from app.adapters.outbound.tabular.csv_buyer_codec import EXPORT_COLUMNS, CsvBuyerCodec
from app.domain.errors import ValidationError
from app.domain.value_objects.buyer_enums import Bhk, PropertyType


@pytest.fixture
def codec():
    return CsvBuyerCodec()


def test_parse_strips_bom_headers_and_values(codec):
    raw = "\ufeff fullName , phone ,tags\n Asha Verma ,9000000001,\"a, b\"\n".encode("utf-8")

    rows = codec.parse(raw)

    assert rows == [{"fullName": "Asha Verma", "phone": "9000000001", "tags": "a, b"}]


def test_parse_skips_blank_lines_and_pads_short_rows(codec):
    raw = b"fullName,phone,notes\n\nAsha,9000000001\n ,\nBharat,9000000002,hi\n"

    rows = codec.parse(raw)

    assert rows == [
        {"fullName": "Asha", "phone": "9000000001", "notes": ""},
        {"fullName": "Bharat", "phone": "9000000002", "notes": "hi"},
    ]


def test_parse_header_only(codec):
    assert codec.parse(b"fullName,phone\n") == []


def test_parse_empty_file(codec):
    with pytest.raises(ValidationError) as exc_info:
        codec.parse(b"\n\n")

    assert exc_info.value.issues[0].path == "file"
    assert exc_info.value.message == "CSV file is empty"


def test_parse_rejects_non_utf8(codec):
    with pytest.raises(ValidationError):
        codec.parse(b"fullName\n\xff\xfe\xfa\n")


def test_format_writes_header_and_plain_values(codec, make_buyer):
    buyer = make_buyer(
        full_name="Asha, Verma",
        property_type=PropertyType.APARTMENT,
        bhk=Bhk.TWO,
        budget_min=1000000,
        tags=("Urgent", "Cash"),
    )

    lines = codec.format([buyer]).decode("utf-8").split("\n")

    assert lines[0] == ",".join(EXPORT_COLUMNS)
    assert lines[1] == '"Asha, Verma",,9876543210,Chandigarh,Apartment,2,Buy,1000000,,0-3m,Website,New,,"Urgent,Cash"'


def test_format_output_parses_back(codec, make_buyer):
    rows = codec.parse(codec.format([make_buyer(notes="line one")]))

    assert rows[0]["fullName"] == "Test User"
    assert rows[0]["notes"] == "line one"
    assert set(rows[0]) == set(EXPORT_COLUMNS)
