# tests/conftest.py
import pytest

from app.adapters.clients.http_resilience import reset_circuits
from app.domain.types import ProviderDescriptor
from app.service_layer.registry import ProviderRegistry


@pytest.fixture(autouse=True)
def _reset_http_circuits():
    reset_circuits()
    yield
    reset_circuits()


@pytest.fixture
def registry_factory():
    def _make(*entries: tuple[ProviderDescriptor, object]) -> ProviderRegistry:
        reg = ProviderRegistry()
        for d, a in entries:
            reg.register(d, a)  # type: ignore[arg-type]
        return reg

    return _make
