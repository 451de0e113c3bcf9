import pytest

from directory_search.core.exceptions import ValidationError
from directory_search.schemas.directory_items_query import DirectoryItemsQuery
from directory_search.schemas.validation import validate_or_raise

CONTEXT = {"page_size": 50, "page_limit": 1000}


def _validate(payload: dict[str, object]) -> DirectoryItemsQuery:
    return validate_or_raise(
        DirectoryItemsQuery,
        payload,
        message_key="INVALID_REQUEST",
        message_key_by_field={"period": "INVALID_PERIOD"},
        context=CONTEXT,
    )


@pytest.mark.unit
def test_directory_items_query_defaults() -> None:
    filters = _validate({"period": " Weekly "}).to_filters()

    assert filters.period == "weekly"
    assert filters.page == 0
    assert filters.limit == 50
    assert filters.asc is None
    assert filters.ascending is True
    assert filters.order is None


@pytest.mark.unit
@pytest.mark.parametrize(
    ("raw", "expected"),
    [("false", False), ("0", False), ("off", False), ("yes", True), ("x", True)],
)
def test_directory_items_query_asc_semantics(raw: str, expected: bool) -> None:
    assert _validate({"period": "weekly", "asc": raw}).asc is expected


@pytest.mark.unit
def test_directory_items_query_maps_hb_params_to_attributes() -> None:
    filters = _validate({"period": "all", "hb_country": " USA ", "hb_listen": "rock,jazz", "hb_share": ""}).to_filters()

    assert filters.attributes.country == "USA"
    assert filters.attributes.listen == "rock,jazz"
    assert filters.attributes.share is None


@pytest.mark.unit
@pytest.mark.parametrize(
    "payload",
    [
        {"period": "weekly", "limit": "51"},
        {"period": "weekly", "limit": "0"},
        {"period": "weekly", "page": "-1"},
        {"period": "weekly", "page": "1001"},
        {"period": "weekly", "page": "two"},
    ],
)
def test_directory_items_query_rejects_invalid_pagination(payload: dict[str, object]) -> None:
    with pytest.raises(ValidationError) as exc_info:
        _validate(payload)

    assert exc_info.value.message_key == "INVALID_PAGINATION"


@pytest.mark.unit
@pytest.mark.parametrize("payload", [{}, {"period": None}, {"period": "  "}])
def test_directory_items_query_requires_period(payload: dict[str, object]) -> None:
    with pytest.raises(ValidationError) as exc_info:
        _validate(payload)

    assert exc_info.value.message_key == "INVALID_PERIOD"


@pytest.mark.unit
def test_directory_items_query_rejects_offset() -> None:
    with pytest.raises(ValidationError):
        _validate({"period": "weekly", "offset": "10"})
