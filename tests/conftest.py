import json
import pathlib
import sys
from dataclasses import dataclass, field

import pytest

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1]))

from shopify_rest_helper import config, scope, throttle
from shopify_rest_helper.transport import Transport

FIXTURES = pathlib.Path(__file__).resolve().parent / "fixtures"


def load_fixture(name):
    with open(FIXTURES / name) as fh:
        return json.load(fh)


@dataclass
class DummyResponse:
    status_code: int
    _json: dict = field(default_factory=dict)
    text: str = "{}"
    headers: dict = field(default_factory=dict)

    def json(self):
        return self._json


class ListTransport(Transport):
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, headers, params, json, timeout):
        self.calls.append(
            {
                "method": method,
                "url": url,
                "headers": dict(headers),
                "params": dict(params) if params else None,
                "json": json,
                "timeout": timeout,
            }
        )
        resp = self.responses.pop(0)
        if isinstance(resp, Exception):
            raise resp
        return resp


@pytest.fixture(autouse=True)
def isolated_state():
    scope.reset_context()
    config.reset_defaults()
    throttle.reset_throttles()
    yield
    scope.reset_context()
    config.reset_defaults()
    throttle.reset_throttles()


@pytest.fixture
def install_transport():
    def install(*responses):
        transport = ListTransport(responses)
        config.configure(transport=transport)
        return transport

    return install
