"""Shared fixtures: a mocked requests session and canned grep.app payloads."""

import json
from unittest.mock import MagicMock

import pytest
import requests


def make_payload(hits, count=None):
    """Build a grep.app search body from (repo, path, snippet) tuples."""
    return {
        "facets": {"count": len(hits) if count is None else count},
        "hits": {
            "hits": [
                {
                    "repo": {"raw": repo},
                    "path": {"raw": path},
                    "content": {"snippet": snippet},
                }
                for repo, path, snippet in hits
            ]
        },
    }


def mock_response(status_code=200, json_body=None, url="https://grep.app/api/search?q=test"):
    resp = MagicMock(spec=requests.Response)
    resp.status_code = status_code
    resp.url = url
    if isinstance(json_body, Exception):
        resp.json.side_effect = json_body
    else:
        resp.json.return_value = json_body
    resp.text = json.dumps(json_body) if isinstance(json_body, (dict, list)) else ""
    return resp


@pytest.fixture
def session():
    s = MagicMock(spec=requests.Session)
    s.headers = {}
    return s
