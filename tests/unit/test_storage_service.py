"""Unit tests for the time series storage service."""

import pytest

from chunkstore.analysis import AnalysisRequest, AnalysisType
from chunkstore.analysis import evaluator
from chunkstore.analysis.evaluator import AnalysisDefinition
from chunkstore.codecs import DATA
from chunkstore.framework import StorageConfig
from chunkstore.schemas import join_key
from chunkstore.service import TimeSeriesStorage
from chunkstore.storage import merge_sorted
from chunkstore.utils.errors import CodecError, InvalidAnalysisRequestError, RetrievalError
from tests.fixtures.mock_services import MockDocumentStore
from tests.fixtures.sample_series import make_series


class TestStream:
    """Plain retrieval path."""
    
    def test_merges_chunks_per_series(self, storage, codec, chunked_store):
        merged = list(storage.stream(codec, chunked_store, None))
        
        assert len(merged) == 2
        by_host = {series.attribute("host"): series for series in merged}
        assert by_host["a"].values() == [1.0, 3.0, 5.0, 7.0, 9.0, 11.0]
        assert by_host["b"].timestamps() == [1, 2, 3]
        
    def test_is_lazy(self, storage, codec, chunked_store):
        """Nothing is fetched before the first series is requested."""
        merged = storage.stream(codec, chunked_store, None)
        
        assert chunked_store.page_requests == []
        next(merged)
        assert len(chunked_store.page_requests) == 3
        
    def test_window_bounds_points(self, storage, codec, chunked_store):
        merged = {s.attribute("host"): s for s in storage.stream(codec, chunked_store, None, 2, 5)}
        
        assert merged["a"].timestamps() == [2, 3, 4]
        assert merged["b"].timestamps() == [2, 3]
        
    def test_empty_query(self, storage, codec, store):
        assert list(storage.stream(codec, store, None)) == []
        
    def test_retrieval_failure_fails_query(self, storage, codec, chunked_store):
        chunked_store.fail_on_page = 2
        
        with pytest.raises(RetrievalError):
            list(storage.stream(codec, chunked_store, None))
            
    def test_decode_failure_fails_query(self, storage, codec, chunked_store):
        chunked_store.records.append({"metric": "cpu", "host": "a", DATA: b"broken"})
        
        with pytest.raises(CodecError):
            list(storage.stream(codec, chunked_store, None))
            
    def test_documents_carry_payload_and_join_key(self, storage, codec, chunked_store):
        records = list(storage.documents(codec, chunked_store, None))
        
        assert [r["joinKey"] for r in records] == ["cpu-a", "cpu-b"]
        assert all(DATA in r for r in records)
        
    def test_custom_merge_operator(self, codec, key_function):
        store_records = [
            codec.encode(make_series("cpu", "a", [(3, 3.0), (4, 4.0)])),
            codec.encode(make_series("cpu", "a", [(1, 1.0), (2, 2.0)])),
        ]
        storage = TimeSeriesStorage(page_size=10, batch_size=10, key=key_function, operator=merge_sorted)
        
        merged = list(storage.stream(codec, MockDocumentStore(store_records), None))
        
        assert merged[0].timestamps() == [1, 2, 3, 4]


class TestAnalyze:
    """Analysis path."""
    
    def test_low_level_analysis(self, storage, codec, chunked_store):
        results = list(storage.analyze(codec, chunked_store, None, AnalysisRequest.of("avg"), 1, 4))
        
        assert [(r["joinKey"], r["value"]) for r in results] == [("cpu-a", 3.0), ("cpu-b", 20.0)]
        assert all(DATA not in r for r in results)
        assert all(r["analysis"] == "AVG" for r in results)
        
    def test_join_key_matches_group(self, codec, chunked_store):
        storage = TimeSeriesStorage(page_size=3, batch_size=3, key=join_key("host"))
        
        results = list(storage.analyze(codec, chunked_store, None, AnalysisRequest.of("count"), 0, 100))
        
        for result in results:
            assert result["joinKey"] == result["host"]
            
    def test_suppression(self, storage, codec, chunked_store, monkeypatch):
        """A detector finding nothing yields no records; finding something yields one per group."""
        request = AnalysisRequest.of("outlier")
        
        monkeypatch.setitem(evaluator.ANALYSES, AnalysisType.OUTLIER, AnalysisDefinition(lambda t, v: -1.0))
        assert list(storage.analyze(codec, chunked_store, None, request, 0, 100)) == []
        
        monkeypatch.setitem(evaluator.ANALYSES, AnalysisType.OUTLIER, AnalysisDefinition(lambda t, v: 0.0))
        assert len(list(storage.analyze(codec, chunked_store, None, request, 0, 100))) == 2
        
    def test_configured_threshold(self, codec, key_function, chunked_store):
        storage = TimeSeriesStorage(
            page_size=2,
            batch_size=2,
            key=key_function,
            suppression_thresholds={AnalysisType.TREND: 2.0},
        )
        
        results = list(storage.analyze(codec, chunked_store, None, AnalysisRequest.of("trend"), 0, 100))
        
        assert results == []
        
    def test_invalid_request_fails_before_fetch(self, storage, codec, chunked_store):
        with pytest.raises(InvalidAnalysisRequestError):
            storage.analyze(codec, chunked_store, None, AnalysisRequest.of("p", ["2"]), 0, 10)

        assert chunked_store.page_requests == []

    def test_non_string_params_fail_before_fetch(self, storage, codec, chunked_store):
        request = AnalysisRequest.of("p", ["0.5"])
        object.__setattr__(request, "params", (0.5,))

        with pytest.raises(InvalidAnalysisRequestError):
            storage.analyze(codec, chunked_store, None, request, 0, 100)

        assert chunked_store.page_requests == []


class TestAdd:
    """Write path."""
    
    def test_written_series_can_be_streamed(self, storage, any_codec, store):
        series = [
            make_series("cpu", "a", [(1, 1.0), (2, 2.0)]),
            make_series("cpu", "b", [(1, 5.0)]),
            make_series("cpu", "a", [(3, 3.0)]),
        ]
        
        assert storage.add(any_codec, series, store) is True
        
        merged = {s.attribute("host"): s for s in storage.stream(any_codec, store, None)}
        assert merged["a"].values() == [1.0, 2.0, 3.0]
        assert merged["b"].values() == [5.0]
        
    def test_fail_fast(self, storage, codec, store):
        store.reject_batches = {2}
        series = [make_series("cpu", str(i), [(i, 1.0)]) for i in range(4)]
        
        assert storage.add(codec, series, store) is False
        assert len(store.submitted_batches) == 2


class TestConstruction:
    """Construction and configuration."""
    
    def test_from_config(self, key_function):
        storage = TimeSeriesStorage.from_config(StorageConfig(page_size=3, batch_size=7), key_function)
        
        assert storage.page_size == 3
        assert storage.batch_size == 7
        assert storage.key is key_function
        
    @pytest.mark.parametrize("page_size,batch_size", [(0, 1), (1, 0), (-1, 5)])
    def test_invalid_sizes(self, key_function, page_size, batch_size):
        with pytest.raises(ValueError):
            TimeSeriesStorage(page_size=page_size, batch_size=batch_size, key=key_function)
