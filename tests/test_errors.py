"""Tests for error classes."""

from openrouter_model_registry.errors import (
    ConfigurationError,
    DegradedDataError,
    InvalidResponseError,
    ModelNotFoundError,
    ModelRegistryError,
    NetworkError,
    SnapshotError,
)
from openrouter_model_registry.fetcher import StageFailure
from openrouter_model_registry.models import RegistrySource


class TestErrorClasses:
    """Tests for all error classes."""

    def test_model_registry_error(self) -> None:
        error = ModelRegistryError("Base error message")
        assert str(error) == "Base error message"

    def test_configuration_error(self) -> None:
        error = ConfigurationError("timeout must be positive", field="timeout")
        assert error.message == "timeout must be positive"
        assert error.field == "timeout"
        assert isinstance(error, ModelRegistryError)

    def test_network_error(self) -> None:
        """NetworkError keeps the URL and status code."""
        error = NetworkError("HTTP 502", url="https://openrouter.ai/api/v1/models", status_code=502)
        assert str(error) == "HTTP 502"
        assert error.url == "https://openrouter.ai/api/v1/models"
        assert error.status_code == 502

        bare = NetworkError("offline")
        assert bare.url is None
        assert bare.status_code is None

    def test_invalid_response_error(self) -> None:
        error = InvalidResponseError("Missing 'data' field", source="snapshot")
        assert error.source == "snapshot"
        assert isinstance(error, ModelRegistryError)

    def test_snapshot_error(self) -> None:
        error = SnapshotError("Snapshot is not valid JSON", path="/tmp/latest.json")
        assert error.message == "Snapshot is not valid JSON"
        assert error.path == "/tmp/latest.json"

    def test_model_not_found_error(self) -> None:
        error = ModelNotFoundError("Model 'gpt-9' not found", model="gpt-9")
        assert str(error) == "Model 'gpt-9' not found"
        assert error.model == "gpt-9"

    def test_degraded_data_error(self) -> None:
        """DegradedDataError copies the failure list it is given."""
        failures = [StageFailure(RegistrySource.API, NetworkError("down"))]
        error = DegradedDataError("Serving snapshot data", source="snapshot", failures=failures)

        assert error.source == "snapshot"
        assert error.failures == failures
        assert error.failures is not failures
        assert DegradedDataError("x", source="fallback").failures == []
