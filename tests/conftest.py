"""Shared pytest configuration and fixtures."""

import json

import httpx
import pytest

from solr_status.config.models import SolrStatusConfig
from solr_status.services.http_fetcher import HTTPFetcher
from solr_status.utils.logger import setup_logger


CORE_STATUS_PATH = "/solr/admin/cores"
THREAD_DUMP_PATH = "/solr/admin/info/threads"


@pytest.fixture
def logger():
    """Create logger for tests."""
    return setup_logger("test")


@pytest.fixture
def solr_config():
    """Configuration for a local Solr with core1."""
    return SolrStatusConfig(server="localhost:8983", core="core1")


@pytest.fixture
def core_status_body():
    """Core admin STATUS reply for core1."""
    return {
        "responseHeader": {"status": 0, "QTime": 1},
        "initFailures": {},
        "status": {
            "core1": {
                "name": "core1",
                "instanceDir": "/var/solr/data/core1",
                "index": {
                    "numDocs": 42,
                    "maxDoc": 45,
                    "deletedDocs": 3,
                    "segmentCount": 5,
                    "sizeInBytes": 102400,
                    "size": "100 KB"
                }
            }
        }
    }


@pytest.fixture
def thread_dump_body():
    """Thread dump reply with one merge thread."""
    return {
        "responseHeader": {"status": 0, "QTime": 3},
        "system": {
            "threadCount": {"current": 2, "peak": 4, "daemon": 1},
            "threadDump": [
                {"id": 41, "name": "Lucene Merge Thread #0", "state": "RUNNABLE"},
                {"id": 12, "name": "pool-1-thread-1", "state": "WAITING"}
            ]
        }
    }


class SolrStub:
    """Minimal Solr admin API served through httpx.MockTransport."""

    def __init__(self, core_status=None, thread_dump=None):
        self.responses = {
            CORE_STATUS_PATH: core_status,
            THREAD_DUMP_PATH: thread_dump,
        }
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        reply = self.responses.get(request.url.path)
        if reply is None:
            return httpx.Response(404, text="not found")
        if isinstance(reply, httpx.Response):
            return reply
        if isinstance(reply, Exception):
            raise reply
        return httpx.Response(200, content=json.dumps(reply).encode())

    @property
    def paths(self):
        return [request.url.path for request in self.requests]

    def fetcher(self) -> HTTPFetcher:
        return HTTPFetcher(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def solr_stub(core_status_body, thread_dump_body):
    """Solr stub answering both admin endpoints with the default bodies."""
    return SolrStub(core_status=core_status_body, thread_dump=thread_dump_body)
