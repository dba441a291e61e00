"""Pytest configuration and fixtures."""

import pytest

from chunkstore.codecs import BinaryCodec, JsonGzipCodec
from chunkstore.schemas import join_key
from chunkstore.service import TimeSeriesStorage
from tests.fixtures.mock_services import MockDocumentStore
from tests.fixtures.sample_series import make_series


@pytest.fixture
def codec():
    """Default codec fixture."""
    return JsonGzipCodec()


@pytest.fixture(params=["json-gzip", "binary"])
def any_codec(request):
    """Every shipped codec."""
    if request.param == "binary":
        return BinaryCodec()
    return JsonGzipCodec()


@pytest.fixture
def key_function():
    """Join key on metric and host."""
    return join_key("metric", "host")


@pytest.fixture
def store():
    """Empty in-memory document store."""
    return MockDocumentStore()


@pytest.fixture
def storage(key_function):
    """Storage with small pages and batches."""
    return TimeSeriesStorage(page_size=2, batch_size=2, key=key_function)


@pytest.fixture
def chunked_store(codec):
    """Store holding two logical series split into chunks."""
    chunks = [
        make_series("cpu", "a", [(1, 1.0), (2, 3.0)]),
        make_series("cpu", "b", [(1, 10.0)]),
        make_series("cpu", "a", [(3, 5.0), (4, 7.0), (5, 9.0)]),
        make_series("cpu", "b", [(2, 20.0), (3, 30.0)]),
        make_series("cpu", "a", [(6, 11.0)]),
    ]
    return MockDocumentStore([codec.encode(chunk) for chunk in chunks])
