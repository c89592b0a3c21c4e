from dataclasses import replace
from unittest.mock import patch

import httpx

from doctrack.config import settings
from doctrack.models.tracking import Priority
from doctrack.services.classifier import (
    ClassificationResult,
    HttpClassifier,
    classify_or_default,
    get_classifier,
)
from tests.mocks import FakeClassifier, FakeHTTPXClient, FakeHTTPXResponse

URL = "http://classifier.local/classify"
LONG_TEXT = "Request for reimbursement of travel expenses"


class TestHttpClassifier:
    def test_success(self) -> None:
        client = FakeHTTPXClient(
            FakeHTTPXResponse({"category": "Finance", "priority": "High"})
        )
        result = HttpClassifier(URL, api_key="secret", client=client).classify(
            LONG_TEXT
        )
        assert result == ClassificationResult(category="Finance", priority=Priority.high)
        call = client.calls[0]
        assert call["url"] == URL
        assert call["json"] == {"description": LONG_TEXT}
        assert call["headers"]["Authorization"] == "Bearer secret"

    def test_no_key_no_auth_header(self) -> None:
        client = FakeHTTPXClient(
            FakeHTTPXResponse({"category": "HR", "priority": "Low"})
        )
        HttpClassifier(URL, client=client).classify(LONG_TEXT)
        assert "Authorization" not in client.calls[0]["headers"]

    def test_http_error(self) -> None:
        client = FakeHTTPXClient(FakeHTTPXResponse(status_code=503))
        assert HttpClassifier(URL, client=client).classify(LONG_TEXT) is None

    def test_transport_error(self) -> None:
        client = FakeHTTPXClient(error=httpx.ConnectError("refused"))
        assert HttpClassifier(URL, client=client).classify(LONG_TEXT) is None

    def test_invalid_priority(self) -> None:
        client = FakeHTTPXClient(
            FakeHTTPXResponse({"category": "Finance", "priority": "Urgent"})
        )
        assert HttpClassifier(URL, client=client).classify(LONG_TEXT) is None

    def test_missing_category(self) -> None:
        client = FakeHTTPXClient(FakeHTTPXResponse({"priority": "High"}))
        assert HttpClassifier(URL, client=client).classify(LONG_TEXT) is None

    def test_invalid_json(self) -> None:
        client = FakeHTTPXClient(FakeHTTPXResponse(invalid_json=True))
        assert HttpClassifier(URL, client=client).classify(LONG_TEXT) is None

    def test_opens_its_own_client(self) -> None:
        with patch("doctrack.services.classifier.httpx.Client") as client_cls:
            client_cls.return_value.__enter__.return_value = FakeHTTPXClient(
                FakeHTTPXResponse({"category": "Legal", "priority": "Medium"})
            )
            result = HttpClassifier(URL, timeout=3.0).classify(LONG_TEXT)
        client_cls.assert_called_once_with(timeout=3.0)
        assert result.category == "Legal"


class TestClassifyOrDefault:
    def test_short_description_is_not_sent(self) -> None:
        fake = FakeClassifier(ClassificationResult("Finance", Priority.high))
        result = classify_or_default("Too short", classifier=fake)
        assert fake.descriptions == []
        assert result.category == "General"
        assert result.priority == Priority.medium
        assert result.classified is False

    def test_threshold_is_exclusive(self) -> None:
        fake = FakeClassifier(ClassificationResult("Finance", Priority.high))
        classify_or_default("x" * 20, classifier=fake)
        assert fake.descriptions == []
        classify_or_default("x" * 21, classifier=fake)
        assert fake.descriptions == ["x" * 21]

    def test_uses_suggestion(self) -> None:
        fake = FakeClassifier(ClassificationResult("Finance", Priority.high))
        result = classify_or_default(f"  {LONG_TEXT}  ", classifier=fake)
        assert fake.descriptions == [LONG_TEXT]
        assert result.classified is True
        assert result.category == "Finance"

    def test_falls_back_when_classifier_fails(self) -> None:
        result = classify_or_default(LONG_TEXT, classifier=FakeClassifier(None))
        assert (result.category, result.priority) == ("General", Priority.medium)

    def test_unconfigured(self) -> None:
        assert get_classifier() is None
        assert classify_or_default(LONG_TEXT).classified is False

    def test_configured(self) -> None:
        configured = replace(settings, classifier_url=URL, classifier_api_key="k")
        with patch("doctrack.services.classifier.settings", configured):
            classifier = get_classifier()
        assert isinstance(classifier, HttpClassifier)
        assert classifier.url == URL
        assert classifier.api_key == "k"
