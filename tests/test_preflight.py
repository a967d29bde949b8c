"""Tests for the preflight dispatcher (originguard/middleware/preflight.py)."""

import pytest

from originguard.middleware.preflight import PreflightDispatcher, PreflightState
from originguard.services.policy import PolicyConfiguration, evaluate

from conftest import ALLOWED, EVIL


@pytest.fixture
def dispatcher() -> PreflightDispatcher:
    return PreflightDispatcher()


class TestRoute:
    @pytest.mark.parametrize("method", ["OPTIONS", "options", "Options"])
    def test_options_terminates(self, dispatcher: PreflightDispatcher, method: str) -> None:
        assert dispatcher.route(method) is PreflightState.TERMINATED

    @pytest.mark.parametrize("method", ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD"])
    def test_other_methods_forward(self, dispatcher: PreflightDispatcher, method: str) -> None:
        assert dispatcher.route(method) is PreflightState.FORWARDED

    def test_empty_method_forwards(self, dispatcher: PreflightDispatcher) -> None:
        assert dispatcher.route("") is PreflightState.FORWARDED

    def test_cannot_route_twice(self, dispatcher: PreflightDispatcher) -> None:
        state = dispatcher.route("OPTIONS", PreflightState.PENDING)
        with pytest.raises(ValueError, match="already routed"):
            dispatcher.route("GET", state)


class TestTerminate:
    def test_default_status_is_204_with_empty_body(
        self, dispatcher: PreflightDispatcher, policy: PolicyConfiguration
    ) -> None:
        response = dispatcher.terminate(evaluate(ALLOWED, policy))
        assert response.status_code == 204
        assert response.body == b""

    def test_status_200_when_configured(self, policy: PolicyConfiguration) -> None:
        response = PreflightDispatcher(status_code=200).terminate(evaluate(ALLOWED, policy))
        assert response.status_code == 200

    def test_allowed_origin_headers(
        self, dispatcher: PreflightDispatcher, policy: PolicyConfiguration
    ) -> None:
        response = dispatcher.terminate(evaluate(ALLOWED, policy))
        assert response.headers["access-control-allow-origin"] == ALLOWED
        assert response.headers["access-control-allow-methods"] == "GET, POST, PUT, DELETE, OPTIONS"
        assert response.headers["access-control-allow-credentials"] == "true"
        assert response.headers["vary"] == "Origin"

    def test_denied_origin_still_terminates_with_headers(
        self, dispatcher: PreflightDispatcher, policy: PolicyConfiguration
    ) -> None:
        response = dispatcher.terminate(evaluate(EVIL, policy))
        assert response.status_code == 204
        assert "access-control-allow-origin" not in response.headers
        assert response.headers["access-control-allow-headers"] == (
            "Content-Type, Authorization, X-Requested-With"
        )
