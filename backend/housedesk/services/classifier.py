"""Client for the external text classifier service.

The classifier is a black box with three endpoints: ``/train`` accepts a batch
of labeled samples and trains in the background, ``/training`` reports whether
a job is running and ``/classify`` returns a label for a text. Labels are the
decimal string form of a category id.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Protocol

import httpx

from housedesk.core.config import settings
from housedesk.core.exceptions import ClassifierUnavailableError

logger = logging.getLogger(__name__)

TRAIN_PATH = "/train"
TRAINING_PATH = "/training"
CLASSIFY_PATH = "/classify"


class LabeledSample(Protocol):
    category_id: int
    text: str


class ClassifierPort(Protocol):
    def train(self, samples: Iterable[LabeledSample]) -> None: ...

    def is_training(self) -> bool: ...

    def classify(self, text: str) -> int: ...


def encode_label(category_id: int) -> str:
    return str(int(category_id))


MAX_CATEGORY_ID = 2**31 - 1


def decode_label(label: Any) -> int:
    if isinstance(label, bool) or not isinstance(label, (str, int)):
        raise ValueError("invalid_label")
    category_id = int(str(label).strip())
    # Category ids are 32-bit integer keys.
    if not 1 <= category_id <= MAX_CATEGORY_ID:
        raise ValueError("label_out_of_range")
    return category_id


class HttpClassifierClient:
    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.CLASSIFIER_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.CLASSIFIER_TIMEOUT_SECONDS
        self._transport = transport

    def _request(self, method: str, path: str, *, expected_status: int, **kwargs: Any) -> Any:
        url = f"{self.base_url}{path}"
        try:
            with httpx.Client(
                timeout=self.timeout,
                transport=self._transport,
                headers={"Accept": "application/json"},
            ) as client:
                response = client.request(method, url, **kwargs)
                if response.status_code != expected_status:
                    raise ClassifierUnavailableError(
                        "classifier_unexpected_status",
                        details={"path": path, "status_code": response.status_code},
                    )
                if not response.content:
                    return None
                return response.json()
        # InvalidURL and the StreamError family do not derive from HTTPError.
        except (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError) as exc:
            raise ClassifierUnavailableError(
                "classifier_request_failed",
                details={"path": path, "reason": exc.__class__.__name__},
            ) from exc
        except ValueError as exc:
            raise ClassifierUnavailableError(
                "classifier_bad_response",
                details={"path": path},
            ) from exc

    def train(self, samples: Iterable[LabeledSample]) -> None:
        documents = [{"text": sample.text, "class": encode_label(sample.category_id)} for sample in samples]
        self._request("POST", TRAIN_PATH, expected_status=202, json=documents)
        logger.info("Classifier training accepted: %s samples", len(documents))

    def is_training(self) -> bool:
        payload = self._request("GET", TRAINING_PATH, expected_status=200)
        if not isinstance(payload, bool):
            raise ClassifierUnavailableError("classifier_bad_response", details={"path": TRAINING_PATH})
        return payload

    def classify(self, text: str) -> int:
        label = self._request("POST", CLASSIFY_PATH, expected_status=202, json={"text": text})
        try:
            return decode_label(label)
        except ValueError as exc:
            raise ClassifierUnavailableError(
                "classifier_bad_label",
                details={"label": str(label)[:64]},
            ) from exc


def get_classifier() -> ClassifierPort:
    return HttpClassifierClient()
