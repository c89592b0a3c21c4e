"""Category and priority suggestions for new documents.

The classifier is an optional HTTP service. It receives
``{"description": ...}`` and answers ``{"category": ..., "priority": ...}``.
When it is not configured, unreachable or answers nonsense, callers fall
back to the configured defaults.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from doctrack.config import settings
from doctrack.models.tracking import Priority

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassificationResult:
    category: str
    priority: Priority
    classified: bool = True


class Classifier(Protocol):
    def classify(self, description: str) -> ClassificationResult | None: ...


class HttpClassifier:
    def __init__(
        self,
        url: str,
        api_key: str = "",
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ):
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self._client = client

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _post(self, client: httpx.Client, description: str) -> httpx.Response:
        response = client.post(
            self.url, json={"description": description}, headers=self._headers()
        )
        response.raise_for_status()
        return response

    def classify(self, description: str) -> ClassificationResult | None:
        try:
            if self._client is not None:
                response = self._post(self._client, description)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = self._post(client, description)
            data = response.json()
            category = str(data.get("category") or "").strip()
            priority = Priority(data.get("priority"))
        except httpx.HTTPError as e:
            logger.warning("Classifier request failed: %s", e)
            return None
        except (ValueError, AttributeError) as e:
            logger.warning("Classifier returned an unusable answer: %s", e)
            return None
        if not category:
            logger.warning("Classifier returned no category")
            return None
        return ClassificationResult(category=category, priority=priority)


def get_classifier() -> Classifier | None:
    if not settings.classifier_url:
        return None
    return HttpClassifier(
        settings.classifier_url,
        api_key=settings.classifier_api_key,
        timeout=settings.classifier_timeout,
    )


def default_classification() -> ClassificationResult:
    return ClassificationResult(
        category=settings.default_category,
        priority=Priority(settings.default_priority),
        classified=False,
    )


def classify_or_default(
    description: str, classifier: Classifier | None = None
) -> ClassificationResult:
    """Ask the classifier about ``description``, or fall back to defaults.

    Short descriptions are never sent.
    """
    text = (description or "").strip()
    if len(text) <= settings.classifier_min_description_length:
        return default_classification()
    classifier = classifier if classifier is not None else get_classifier()
    if classifier is None:
        return default_classification()
    return classifier.classify(text) or default_classification()
