import pytest
import sys
import os
import logging

# Ensure the project root is in the Python path for imports in tests
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from file_handler import FileStore


@pytest.fixture(autouse=True)
def configure_logging(caplog):
    """Ensure logging is configured to capture DEBUG level messages for all tests."""
    caplog.set_level(logging.DEBUG, logger="root")


@pytest.fixture
def store(tmp_path):
    """A filesystem object store rooted in a temporary directory."""
    return FileStore(str(tmp_path / "store"))


@pytest.fixture
def fake_remote():
    """
    Stands in for fetch_resource: maps absolute URLs to (body, content_type)
    and records every URL requested, in order.
    """
    from api_clients.asset_client import FetchedResource

    class FakeRemote:
        def __init__(self):
            self.resources = {}
            self.requested = []

        def add(self, url, body, content_type=""):
            if isinstance(body, str):
                body = body.encode('utf-8')
            self.resources[url] = (body, content_type)

        def __call__(self, url, deadline=None, config=None):
            self.requested.append(url)
            if url not in self.resources:
                return None
            body, content_type = self.resources[url]
            return FetchedResource(url=url, body=body, content_type=content_type)

    return FakeRemote()
