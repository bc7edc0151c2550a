import pytest

from conftest import DummyResponse, load_fixture
from shopify_rest_helper import config, scope, throttle
from shopify_rest_helper.client import execute, send
from shopify_rest_helper.errors import ShopifyHTTPError
from shopify_rest_helper.session import Session

SESSION = Session("https://test.myshopify.com", "token")


def test_execute_success_updates_call_limit(install_transport):
    install_transport(
        DummyResponse(200, load_fixture("shop.json"), headers={"X-Shopify-Shop-Api-Call-Limit": "39/40"})
    )
    scope.activate_session(SESSION)
    data = execute("GET", "/admin/shop.json")
    assert data["shop"]["name"] == "Shop One"
    assert throttle.credit_limit() == 40
    assert throttle.credit_used() == 39
    assert throttle.credit_left() == 1
    assert not throttle.credit_maxed()


def test_credit_maxed(install_transport):
    install_transport(DummyResponse(200, {}, headers={"X-Shopify-Shop-Api-Call-Limit": "40/40"}))
    scope.activate_session(SESSION)
    execute("GET", "/admin/shop.json")
    assert throttle.credit_maxed()


def test_send_builds_url_and_headers(install_transport):
    transport = install_transport(DummyResponse(200))
    config.configure(timeout=12)
    scope.activate_session(SESSION)
    send("POST", "/admin/products.json", json={"product": {}}, headers={"X-Request-Id": "1"})
    call = transport.calls[0]
    assert call["url"] == "https://test.myshopify.com/admin/products.json"
    assert call["timeout"] == 12
    assert call["headers"]["X-Shopify-Access-Token"] == "token"
    assert call["headers"]["Accept"] == "application/json"
    assert call["headers"]["Content-Type"] == "application/json"
    assert call["headers"]["X-Request-Id"] == "1"
    assert call["headers"]["User-Agent"] == config.USER_AGENT


def test_send_without_body_has_no_content_type(install_transport):
    transport = install_transport(DummyResponse(200))
    scope.activate_session(SESSION)
    send("GET", "/admin/shop.json", timeout=3)
    assert "Content-Type" not in transport.calls[0]["headers"]
    assert transport.calls[0]["timeout"] == 3


def test_default_site_without_session(install_transport):
    transport = install_transport(DummyResponse(200, {"shop": {"id": 5}}))
    config.configure(site="https://default.myshopify.com")
    assert execute("GET", "/admin/shop.json") == {"shop": {"id": 5}}
    call = transport.calls[0]
    assert call["url"] == "https://default.myshopify.com/admin/shop.json"
    assert "X-Shopify-Access-Token" not in call["headers"]


def test_execute_empty_body(install_transport):
    install_transport(DummyResponse(200, text="  "))
    scope.activate_session(SESSION)
    assert execute("DELETE", "/admin/products/1.json") == {}


def test_execute_raises_on_error_status(install_transport):
    install_transport(DummyResponse(404, text="missing"))
    scope.activate_session(SESSION)
    with pytest.raises(ShopifyHTTPError) as exc:
        execute("GET", "/admin/products/1.json")
    assert "HTTP 404" in str(exc.value)
    assert exc.value.status_code == 404


def test_execute_raises_on_invalid_json(install_transport):
    class BadJsonResponse(DummyResponse):
        def json(self):  # type: ignore[override]
            raise ValueError("no json")

    install_transport(BadJsonResponse(200, text="oops"))
    scope.activate_session(SESSION)
    with pytest.raises(ShopifyHTTPError) as exc:
        execute("GET", "/admin/shop.json")
    assert "oops" in str(exc.value)


def test_send_raises_on_missing_status(install_transport):
    class NoStatus:
        text = ""

    install_transport(NoStatus())
    scope.activate_session(SESSION)
    with pytest.raises(ShopifyHTTPError):
        send("GET", "/admin/shop.json")


def test_error_message_is_truncated():
    err = ShopifyHTTPError("x" * 500, 500)
    assert str(err) == "HTTP 500: " + "x" * 300
