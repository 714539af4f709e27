# ==============================================================================
# Tests for OpenSearchSink — connectors/bytewax/sinks/opensearch.py
# ==============================================================================
"""
Tests for the Bytewax bulk sink, both as a bare partition and inside a
running dataflow.
"""

import logging
from unittest.mock import MagicMock, patch

import bytewax.operators as op
import pytest
from bytewax import testing
from bytewax.dataflow import Dataflow

from searchbridge.connectors.bytewax.sinks import OpenSearchSink
from searchbridge.connectors.bytewax.sinks import opensearch as sink_module
from searchbridge.core.models import IndexRequest
from searchbridge.infrastructure.search import BulkWriteError
from tests.conftest import make_bulk_response


def to_index_request(doc: dict) -> IndexRequest:
    return IndexRequest(index="docs", id=doc["id"], document=doc)


def _body_ids(client) -> list:
    """Document IDs of every action line sent to bulk(), in order."""
    ids = []
    for call in client.bulk.call_args_list:
        for line in call.kwargs["body"]:
            if "index" in line:
                ids.append(line["index"]["_id"])
    return ids


# ==============================================================================
# Partition behaviour
# ==============================================================================


class TestSinkPartition:
    """Tests for the per-worker sink partition."""

    def test_build_uses_client_supplier(self, client, destroy_fn):
        supplier = MagicMock(return_value=client)
        sink = OpenSearchSink(supplier, to_index_request, destroy_fn=destroy_fn)

        sink.build("opensearch_out", 0, 1)

        supplier.assert_called_once_with()

    def test_write_batch_is_one_bulk(self, client, destroy_fn):
        sink = OpenSearchSink(lambda: client, to_index_request, destroy_fn=destroy_fn)
        part = sink.build("opensearch_out", 0, 1)

        part.write_batch([{"id": 1}, {"id": 2}, {"id": 3}])

        assert client.bulk.call_count == 1
        assert _body_ids(client) == ["1", "2", "3"]

    def test_empty_batch_sends_nothing(self, client, destroy_fn):
        part = OpenSearchSink(lambda: client, to_index_request, destroy_fn=destroy_fn).build(
            "opensearch_out", 0, 1
        )
        part.write_batch([])
        client.bulk.assert_not_called()

    def test_bulk_failure_fails_batch(self, client, destroy_fn):
        client.bulk.return_value = make_bulk_response(
            [{"index": {"_index": "docs", "_id": "1", "error": {"reason": "rejected"}}}],
            errors=True,
        )
        part = OpenSearchSink(lambda: client, to_index_request, destroy_fn=destroy_fn).build(
            "opensearch_out", 0, 1
        )

        with pytest.raises(BulkWriteError):
            part.write_batch([{"id": 1}])

    def test_bulk_failure_logged_once(self, client, destroy_fn, caplog):
        client.bulk.return_value = make_bulk_response(
            [{"index": {"_index": "docs", "_id": "1", "error": {"reason": "rejected"}}}],
            errors=True,
        )
        part = OpenSearchSink(lambda: client, to_index_request, destroy_fn=destroy_fn).build(
            "opensearch_out", 0, 1
        )

        with caplog.at_level(logging.DEBUG):
            with pytest.raises(BulkWriteError):
                part.write_batch([{"id": 1}])

        failures = [r for r in caplog.records if "rejected" in r.getMessage()]
        assert len(failures) == 1
        assert failures[0].levelno == logging.ERROR

    def test_options_fn_is_used(self, client, destroy_fn):
        sink = OpenSearchSink(
            lambda: client,
            to_index_request,
            options_fn=lambda batch: {"refresh": "true"},
            destroy_fn=destroy_fn,
        )
        sink.build("opensearch_out", 0, 1).write_batch([{"id": 1}])

        assert client.bulk.call_args.kwargs["refresh"] == "true"

    def test_close_runs_destroy_once(self, client, destroy_fn):
        part = OpenSearchSink(lambda: client, to_index_request, destroy_fn=destroy_fn).build(
            "opensearch_out", 0, 1
        )
        part.write_batch([{"id": 1}])
        part.close()
        part.close()

        destroy_fn.assert_called_once_with(client)

    def test_each_worker_gets_own_client(self, destroy_fn):
        clients = [MagicMock(name=f"client-{i}") for i in range(2)]
        for c in clients:
            c.bulk.return_value = make_bulk_response()
        supplier = MagicMock(side_effect=clients)
        sink = OpenSearchSink(supplier, to_index_request, destroy_fn=destroy_fn)

        first = sink.build("opensearch_out", 0, 2)
        second = sink.build("opensearch_out", 1, 2)
        first.write_batch([{"id": 1}])
        second.write_batch([{"id": 2}])

        assert _body_ids(clients[0]) == ["1"]
        assert _body_ids(clients[1]) == ["2"]

    def test_from_credentials(self, client):
        with patch.object(sink_module, "build_client", return_value=client) as mock_build:
            sink = OpenSearchSink.from_credentials(
                "admin", "secret", "localhost", 9200, to_index_request
            )
            part = sink.build("opensearch_out", 0, 1)

        mock_build.assert_called_once_with("admin", "secret", "localhost", 9200)
        part.write_batch([{"id": 1}])
        part.close()
        client.close.assert_called_once()


# ==============================================================================
# Dataflow
# ==============================================================================


class TestSinkDataflow:
    """Tests for the sink inside a running Bytewax dataflow."""

    def test_all_items_written_in_order(self, client, destroy_fn):
        flow = Dataflow("sink_test")
        docs = [{"id": i} for i in range(10)]
        stream = op.input("inp", flow, testing.TestingSource(docs, batch_size=4))
        op.output(
            "opensearch_out",
            stream,
            OpenSearchSink(lambda: client, to_index_request, destroy_fn=destroy_fn),
        )

        testing.run_main(flow)

        assert _body_ids(client) == [str(i) for i in range(10)]
        destroy_fn.assert_called_once_with(client)

    def test_bulk_failure_stops_dataflow(self, client, destroy_fn):
        client.bulk.return_value = make_bulk_response(
            [{"index": {"_index": "docs", "_id": "0", "error": {"reason": "rejected"}}}],
            errors=True,
        )
        flow = Dataflow("sink_failure_test")
        stream = op.input("inp", flow, testing.TestingSource([{"id": 0}]))
        op.output(
            "opensearch_out",
            stream,
            OpenSearchSink(lambda: client, to_index_request, destroy_fn=destroy_fn),
        )

        with pytest.raises(Exception):
            testing.run_main(flow)
