"""Shared test fixtures."""

import pytest

from reqview import Request


@pytest.fixture
def json_request():
    """A POST with query, form fields and a JSON body sharing the key 'name'."""
    return Request(
        query={"page": "1", "name": "from-query"},
        body={"name": "from-body"},
        server={
            "REQUEST_METHOD": "POST",
            "REQUEST_URI": "/users?page=1",
            "CONTENT_TYPE": "application/json",
        },
        content='{"title": "Hello", "count": 3, "name": "from-json"}',
    )


@pytest.fixture
def empty_request():
    """A Request built with no inputs at all."""
    return Request()
