from unittest.mock import MagicMock

import pytest
import requests

from mcstore.domain.errors import RemoteError
from mcstore.services.rest_gateway import (
    IGNORE_DUPLICATES,
    RETURN_REPRESENTATION,
    BackendConfig,
    RestGateway,
    build_query,
    eq,
    ilike,
)


def _response(status=200, text=""):
    resp = MagicMock()
    resp.status_code = status
    resp.text = text
    return resp


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def gateway(session):
    return RestGateway(BackendConfig(base_url="https://db.example.co/", api_key="svc-key", timeout=5), session)


def test_request_injects_credentials_and_serialises_body(gateway, session):
    session.request.return_value = _response(201, '[{"id": 1}]')

    result = gateway.post("orders", {"total": 100}, RETURN_REPRESENTATION)

    assert result == [{"id": 1}]
    method, url = session.request.call_args.args
    kwargs = session.request.call_args.kwargs
    assert method == "POST"
    assert url == "https://db.example.co/rest/v1/orders"
    assert kwargs["data"] == '{"total": 100}'
    assert kwargs["headers"]["apikey"] == "svc-key"
    assert kwargs["headers"]["Authorization"] == "Bearer svc-key"
    assert kwargs["headers"]["Content-Type"] == "application/json"
    assert kwargs["headers"]["Prefer"] == "return=representation"
    assert kwargs["timeout"] == 5


def test_empty_body_returns_none(gateway, session):
    session.request.return_value = _response(204, "")
    assert gateway.delete("cart?uid=eq.u1") is None


def test_non_2xx_raises_remote_error_with_raw_body(gateway, session):
    session.request.return_value = _response(409, '{"message":"duplicate key"}')

    with pytest.raises(RemoteError) as exc:
        gateway.get("products")

    assert exc.value.status_code == 409
    assert exc.value.body == '{"message":"duplicate key"}'
    assert session.request.call_count == 1


def test_network_failure_is_single_attempt(gateway, session):
    session.request.side_effect = requests.ConnectionError("connection refused")

    with pytest.raises(RemoteError) as exc:
        gateway.get("products")

    assert exc.value.status_code == 0
    assert session.request.call_count == 1


def test_rpc_posts_to_function_path(gateway, session):
    session.request.return_value = _response(200, '[{"quantity": 3, "inserted": false}]')

    gateway.rpc("add_to_cart", {"p_uid": "u1"})

    method, url = session.request.call_args.args
    assert method == "POST"
    assert url.endswith("/rest/v1/rpc/add_to_cart")


def test_build_query_grammar():
    path = build_query(
        "products",
        filters=[eq("is_active", True), eq("category", "Audio & Video"), ilike("name", "ear buds")],
        order="created_at.desc",
        limit=10,
    )
    assert path == (
        "products?select=*&is_active=eq.true&category=eq.Audio%20%26%20Video"
        "&name=ilike.%25ear%20buds%25&order=created_at.desc&limit=10"
    )


def test_build_query_without_select_and_with_conflict_target():
    assert build_query("wishlist", select=None, on_conflict="uid,product_id") == "wishlist?on_conflict=uid,product_id"
    assert build_query("cart", select=None) == "cart"


def test_prefer_options_are_joined(gateway, session):
    session.request.return_value = _response(201, "[]")

    gateway.post("wishlist", {}, IGNORE_DUPLICATES, RETURN_REPRESENTATION)

    headers = session.request.call_args.kwargs["headers"]
    assert headers["Prefer"] == "resolution=ignore-duplicates,return=representation"
