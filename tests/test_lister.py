"""Tests for PaginatedLister."""

from unittest.mock import MagicMock

import pytest

from storage_deploy.orchestrator.lister import PaginatedLister
from storage_deploy.storage.base import ListPage, StorageEntry
from storage_deploy.utils.errors import (
    ErrorContext,
    ListingFailedError,
    TooManyPagesError,
    TransientRemoteError,
)
from storage_deploy.utils.retry import RetryStrategy


def page(names, token=None):
    return ListPage(entries=[StorageEntry(name) for name in names], next_token=token)


@pytest.fixture
def lister():
    return PaginatedLister(RetryStrategy(max_attempts=3), max_pages=50)


class TestListAll:
    def test_concatenates_pages_in_order(self, lister):
        fetch = MagicMock(
            side_effect=[page(["a", "b"], "t1"), page(["c", "d"], "t2"), page(["e", "f"])],
            __name__="list_page",
        )

        entries = lister.list_all("", fetch)

        assert [e.name for e in entries] == ["a", "b", "c", "d", "e", "f"]
        assert [c.args for c in fetch.call_args_list] == [("", None), ("", "t1"), ("", "t2")]

    def test_single_page(self, lister):
        fetch = MagicMock(return_value=page(["only"]), __name__="list_page")

        assert [e.name for e in lister.list_all("prefix/", fetch)] == ["only"]
        fetch.assert_called_once_with("prefix/", None)

    def test_empty_container(self, lister):
        fetch = MagicMock(return_value=page([]), __name__="list_page")

        assert lister.list_all("", fetch) == []

    def test_empty_token_ends_listing(self, lister):
        fetch = MagicMock(return_value=page(["a"], ""), __name__="list_page")

        assert len(lister.list_all("", fetch)) == 1

    def test_retries_failed_page(self, lister):
        fetch = MagicMock(
            side_effect=[page(["a"], "t1"), TransientRemoteError("flaky"), page(["b"])],
            __name__="list_page",
        )

        assert [e.name for e in lister.list_all("", fetch)] == ["a", "b"]
        assert fetch.call_args_list[1].args == ("", "t1")
        assert fetch.call_args_list[2].args == ("", "t1")

    def test_listing_fails_after_retries(self, lister):
        cause = TransientRemoteError("down", context=ErrorContext(error_code="ServiceUnavailable"))
        fetch = MagicMock(side_effect=[page(["a"], "t1"), cause, cause, cause], __name__="list_page")

        with pytest.raises(ListingFailedError) as exc_info:
            lister.list_all("", fetch)

        assert exc_info.value.cause is cause
        assert exc_info.value.__cause__ is cause
        assert exc_info.value.context.additional_info == {'page': 2}
        assert exc_info.value.context.error_code == "ServiceUnavailable"
        assert fetch.call_count == 4

    def test_too_many_pages(self):
        lister = PaginatedLister(RetryStrategy(max_attempts=1), max_pages=2)
        fetch = MagicMock(
            side_effect=[page(["a"], "t1"), page(["b"], "t2"), page(["c"], "t3")],
            __name__="list_page",
        )

        with pytest.raises(TooManyPagesError) as exc_info:
            lister.list_all("", fetch)

        assert exc_info.value.max_pages == 2
        assert fetch.call_count == 2

    def test_exactly_max_pages_is_allowed(self):
        lister = PaginatedLister(RetryStrategy(max_attempts=1), max_pages=2)
        fetch = MagicMock(side_effect=[page(["a"], "t1"), page(["b"])], __name__="list_page")

        assert len(lister.list_all("", fetch)) == 2

    def test_unlimited_pages(self):
        lister = PaginatedLister(RetryStrategy(max_attempts=1), max_pages=None)
        pages = [page([str(i)], f"t{i}") for i in range(99)] + [page(["last"])]
        fetch = MagicMock(side_effect=pages, __name__="list_page")

        assert len(lister.list_all("", fetch)) == 100

    def test_rejects_non_positive_max_pages(self):
        with pytest.raises(ValueError):
            PaginatedLister(RetryStrategy(), max_pages=0)
