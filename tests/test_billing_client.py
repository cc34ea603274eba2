"""Unit tests for the billing API client."""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from checkout_admin.services.billing_client import (
    CANCEL_METHOD,
    RENEWAL_METHOD,
    BillingAPIError,
    BillingClient,
)
from checkout_admin.services.envelope import Envelope


@pytest.fixture()
def envelope() -> Envelope:
    return Envelope("unit-key", "unit-iv")


@pytest.fixture()
def billing(envelope) -> BillingClient:
    return BillingClient(base_url="https://billing.test/api", timeout=3.0, envelope=envelope)


@pytest.fixture()
def mocked_http_client():
    with patch("checkout_admin.services.billing_client.httpx.Client") as mock_client_cls:
        mock_client = MagicMock(name="mock_httpx_client")
        mock_client_cls.return_value.__enter__.return_value = mock_client
        yield mock_client_cls, mock_client


def _response(text: str, content_type: str = "text/plain", status_code: int = 200) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.headers = {"content-type": content_type}
    response.text = text
    return response


def test_renewal_sends_sealed_payload(billing, envelope, mocked_http_client):
    mock_client_cls, mock_client = mocked_http_client
    mock_client.post.return_value = _response(
        envelope.seal({"status": "success", "message": "Charged"})
    )

    result = billing.charge_renewal("app-1", "Gold")

    assert result == {"status": "success", "message": "Charged"}
    mock_client_cls.assert_called_once_with(timeout=3.0)
    url = mock_client.post.call_args.args[0]
    sent = mock_client.post.call_args.kwargs["data"]["data"]
    assert url == "https://billing.test/api"
    assert envelope.open(sent) == {
        "productId": "app-1",
        "productName": "Gold",
        "method": RENEWAL_METHOD,
    }


def test_json_wrapped_response(billing, envelope, mocked_http_client):
    _, mock_client = mocked_http_client
    response = _response("", content_type="application/json")
    response.json.return_value = {"data": envelope.seal({"status": "ok"})}
    mock_client.post.return_value = response
    assert billing.call(RENEWAL_METHOD, {"productId": "x"}) == {"status": "ok"}


def test_cancel_payload(billing, envelope, mocked_http_client):
    _, mock_client = mocked_http_client
    mock_client.post.return_value = _response(envelope.seal({"status": "cancelled"}))

    billing.cancel_subscription("app-1", "501", "Gold", "too pricey", "immediate")

    sent = envelope.open(mock_client.post.call_args.kwargs["data"]["data"])
    assert sent == {
        "productId": "app-1",
        "userId": "501",
        "productName": "Gold",
        "cancelReason": "too pricey",
        "cancelledType": "immediate",
        "lang": "en",
        "method": CANCEL_METHOD,
    }


def test_transport_error_is_single_attempt(billing, mocked_http_client):
    _, mock_client = mocked_http_client
    mock_client.post.side_effect = httpx.ConnectTimeout("timed out")

    with pytest.raises(BillingAPIError):
        billing.charge_renewal("app-1", "Gold")
    assert mock_client.post.call_count == 1


def test_http_status_error(billing, mocked_http_client):
    _, mock_client = mocked_http_client
    response = _response("oops", status_code=502)
    response.raise_for_status.side_effect = httpx.HTTPStatusError(
        "bad gateway", request=MagicMock(), response=MagicMock()
    )
    mock_client.post.return_value = response
    with pytest.raises(BillingAPIError):
        billing.charge_renewal("app-1", "Gold")


def test_unreadable_response(billing, mocked_http_client):
    _, mock_client = mocked_http_client
    mock_client.post.return_value = _response("definitely not ciphertext")
    with pytest.raises(BillingAPIError, match="unreadable"):
        billing.charge_renewal("app-1", "Gold")


def test_unconfigured_client(envelope, mocked_http_client, monkeypatch):
    from checkout_admin.services import billing_client

    monkeypatch.setattr(
        billing_client, "settings", MagicMock(billing_api_url="", billing_api_timeout=1.0)
    )
    client = BillingClient(base_url="", envelope=envelope)
    with pytest.raises(BillingAPIError, match="not configured"):
        client.call(RENEWAL_METHOD, {})
    mocked_http_client[1].post.assert_not_called()
