import copy

import pytest

from docpatch.errors import ParseError, PathNotFoundError, TestFailedError
from docpatch.query import query

DOCUMENT = {
    "server": {"listen": ["127.0.0.1", "::1"], "port": 53},
    "workers": 4,
}


def test_get():
    assert query(DOCUMENT, "get", "") == (DOCUMENT, DOCUMENT)
    assert query(DOCUMENT, "get", "/server/listen/1") == (DOCUMENT, "::1")
    with pytest.raises(PathNotFoundError):
        query(DOCUMENT, "get", "/missing")


def test_delete():
    new, result = query(DOCUMENT, "delete", "/server/listen/0")
    assert result is None
    assert new["server"]["listen"] == ["::1"]
    assert DOCUMENT["server"]["listen"] == ["127.0.0.1", "::1"]


def test_put():
    original = copy.deepcopy(DOCUMENT)

    new, _ = query(DOCUMENT, "put", "/workers", 8)
    assert new["workers"] == 8

    new, _ = query(DOCUMENT, "put", "/server/cache", {"size": 100})
    assert new["server"]["cache"] == {"size": 100}

    # array elements are replaced, not inserted
    new, _ = query(DOCUMENT, "put", "/server/listen/0", "0.0.0.0")
    assert new["server"]["listen"] == ["0.0.0.0", "::1"]

    new, _ = query(DOCUMENT, "put", "", {"x": 1})
    assert new == {"x": 1}

    with pytest.raises(PathNotFoundError):
        query(DOCUMENT, "put", "/server/listen/2", "0.0.0.0")
    with pytest.raises(PathNotFoundError):
        query(DOCUMENT, "put", "/missing/key", 1)

    assert DOCUMENT == original


def test_patch():
    patch = [
        {"op": "test", "path": "/port", "value": 53},
        {"op": "replace", "path": "/port", "value": 5353},
        {"op": "add", "path": "/listen/0", "value": "192.0.2.1"},
    ]
    new, result = query(DOCUMENT, "patch", "/server", patch)
    assert result is None
    assert new["server"] == {"listen": ["192.0.2.1", "127.0.0.1", "::1"], "port": 5353}
    assert new["workers"] == 4

    new, _ = query(DOCUMENT, "patch", "", {"op": "remove", "path": "/workers"})
    assert "workers" not in new

    with pytest.raises(TestFailedError):
        query(DOCUMENT, "patch", "/server", [{"op": "test", "path": "/port", "value": 1}])
    with pytest.raises(ParseError):
        query(DOCUMENT, "patch", "", [])


def test_invalid():
    with pytest.raises(ParseError):
        query(DOCUMENT, "get", "server")
    with pytest.raises(ValueError):
        query(DOCUMENT, "post", "")  # type: ignore
