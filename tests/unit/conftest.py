"""テスト共通のフェイクとフィクスチャ"""
import time
from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any, Optional

import pytest

from src.features.extraction.domain.models import ExtractedLocation
from src.features.geocoding.providers.nominatim_geocoder import NominatimGeocoder
from src.features.geocoding.services.geocoding_service import GeocodeClient


@dataclass
class FakeLocation:
    """geopy.location.Location の代用"""

    latitude: Any
    longitude: Any
    address: str = ""


class FakeGeolocator:
    """geopy.geocoders.Nominatim の代用"""

    def __init__(
        self,
        results: Optional[list[FakeLocation]] = None,
        error: Optional[Exception] = None,
        delay: float = 0.0,
    ) -> None:
        self.results = results
        self.error = error
        self.delay = delay
        self.calls: list[str] = []

    def geocode(self, query: str, exactly_one: bool = True) -> Optional[list[FakeLocation]]:
        self.calls.append(query)
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.results


class FakeCompletions:
    """AsyncOpenAI.chat.completions の代用"""

    def __init__(self, content: Optional[str] = None, error: Optional[Exception] = None) -> None:
        self.content = content
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> SimpleNamespace:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeChatClient:
    """AsyncOpenAI の代用"""

    def __init__(self, content: Optional[str] = None, error: Optional[Exception] = None) -> None:
        self.completions = FakeCompletions(content=content, error=error)
        self.chat = SimpleNamespace(completions=self.completions)


@dataclass
class FakeExtractor:
    """決まった地名を返す抽出器"""

    phrase: str
    calls: list[str] = field(default_factory=list)

    async def extract(self, query: str) -> ExtractedLocation:
        self.calls.append(query)
        return ExtractedLocation(query=query, phrase=self.phrase)


def make_geocode_client(
    geolocator: FakeGeolocator, timeout: float = 5.0, min_delay: float = 0.0
) -> GeocodeClient:
    """フェイクのgeolocatorを使うGeocodeClientを作成"""
    geocoder = NominatimGeocoder(user_agent="test-agent", geolocator=geolocator)
    return GeocodeClient(geocoder, timeout=timeout, min_delay=min_delay)


@pytest.fixture
def toronto_geolocator() -> FakeGeolocator:
    return FakeGeolocator(results=[FakeLocation(43.7, -79.4, "Toronto, Ontario, Canada")])


@pytest.fixture
def empty_geolocator() -> FakeGeolocator:
    return FakeGeolocator(results=[])
