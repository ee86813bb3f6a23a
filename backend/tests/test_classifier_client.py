from __future__ import annotations

import json
from types import SimpleNamespace

import httpx
import pytest

from housedesk.core.exceptions import ClassifierUnavailableError
from housedesk.services.classifier import HttpClassifierClient, decode_label, encode_label


def _client(handler) -> HttpClassifierClient:  # noqa: ANN001
    return HttpClassifierClient("http://classifier.local/", timeout=1.0, transport=httpx.MockTransport(handler))


def test_labels_are_decimal_category_ids() -> None:
    assert encode_label(3) == "3"
    assert decode_label("3") == 3
    assert decode_label(" 12 ") == 12
    with pytest.raises(ValueError):
        decode_label(True)
    with pytest.raises(ValueError):
        decode_label({"class": "3"})
    with pytest.raises(ValueError):
        decode_label("9" * 30)
    with pytest.raises(ValueError):
        decode_label("0")


def test_train_posts_text_and_class_pairs() -> None:
    seen: list[tuple[str, str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path, json.loads(request.content)))
        return httpx.Response(202)

    samples = [SimpleNamespace(category_id=3, text="leaking pipe"), SimpleNamespace(category_id=7, text="no power")]
    _client(handler).train(samples)

    assert seen == [
        (
            "POST",
            "/train",
            [{"text": "leaking pipe", "class": "3"}, {"text": "no power", "class": "7"}],
        )
    ]


def test_is_training_reads_boolean_body() -> None:
    client = _client(lambda request: httpx.Response(200, json=True))

    assert client.is_training() is True


def test_is_training_rejects_non_boolean_body() -> None:
    client = _client(lambda request: httpx.Response(200, json={"training": True}))

    with pytest.raises(ClassifierUnavailableError):
        client.is_training()


def test_classify_returns_category_id() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/classify"
        assert json.loads(request.content) == {"text": "leaking pipe"}
        return httpx.Response(202, json="3")

    assert _client(handler).classify("leaking pipe") == 3


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"detail": "boom"}),
        httpx.Response(202, content=b"not json"),
        httpx.Response(202, json="plumbing"),
    ],
)
def test_classify_failures_become_classifier_unavailable(response: httpx.Response) -> None:
    client = _client(lambda request: response)

    with pytest.raises(ClassifierUnavailableError):
        client.classify("leaking pipe")


def test_transport_errors_become_classifier_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ClassifierUnavailableError) as exc:
        _client(handler).classify("leaking pipe")

    assert exc.value.details["reason"] == "ConnectError"
    assert exc.value.status_code == 502
