"""Tests for schmock.config: MockConfig defaults, namespace and delay."""

import dataclasses

import pytest

from schmock.config import MockConfig, validate_delay


class TestMockConfig:
    def test_defaults(self) -> None:
        config = MockConfig()
        assert config.namespace == ""
        assert config.delay == 0
        assert config.debug is False
        assert config.state is None

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            MockConfig().debug = True  # type: ignore[misc]

    @pytest.mark.parametrize(
        ("namespace", "expected"),
        [("", ""), ("/", ""), ("api", "/api"), ("/api/", "/api"), ("/api/v1", "/api/v1")],
    )
    def test_normalized_namespace(self, namespace: str, expected: str) -> None:
        assert MockConfig(namespace=namespace).normalized_namespace == expected

    def test_delay_list_becomes_tuple(self) -> None:
        assert MockConfig(delay=[0.1, 0.2]).delay == (0.1, 0.2)

    def test_invalid_delay(self) -> None:
        with pytest.raises(ValueError, match="Invalid delay"):
            MockConfig(delay=-1)


class TestValidateDelay:
    def test_number(self) -> None:
        assert validate_delay(0.5) == 0.5

    @pytest.mark.parametrize("delay", [-0.1, (2, 1), (1,), (0, 1, 2), "1", True, (0, "x")])
    def test_rejected(self, delay: object) -> None:
        with pytest.raises(ValueError):
            validate_delay(delay)
