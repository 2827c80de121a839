"""ResolutionPipelineのテスト"""
import asyncio
from typing import Callable

import httpx
import pytest
from geopy.exc import GeocoderServiceError
from openai import APIConnectionError, APITimeoutError

from conftest import (
    FakeChatClient,
    FakeExtractor,
    FakeGeolocator,
    FakeLocation,
    make_geocode_client,
)
from src.features.extraction.providers.openai_extractor import LocationExtractor
from src.features.resolution.domain.models import ProviderErrorReason, ResolutionStatus
from src.features.resolution.services.resolution_pipeline import ResolutionPipeline
from src.shared.exceptions.errors import ExtractionServiceError

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _connection_error() -> Exception:
    return APIConnectionError(request=_REQUEST)


def _timeout_error() -> Exception:
    return APITimeoutError(request=_REQUEST)


def _pipeline(content: object, geolocator: FakeGeolocator) -> ResolutionPipeline:
    extractor = LocationExtractor(FakeChatClient(content=content))  # type: ignore[arg-type]
    return ResolutionPipeline(extractor, make_geocode_client(geolocator))


@pytest.mark.parametrize(
    "query,phrase,latitude,longitude",
    [
        ("Show me Toronto", "Toronto", 43.7, -79.4),
        ("I want to visit the Eiffel Tower", "Eiffel Tower", 48.8584, 2.2945),
        ("how far south is Ushuaia", "Ushuaia", -54.8019, -68.303),
    ],
)
def test_clear_place_resolves_to_valid_point(
    query: str, phrase: str, latitude: float, longitude: float
) -> None:
    geolocator = FakeGeolocator(results=[FakeLocation(latitude, longitude)])

    result = asyncio.run(_pipeline(phrase, geolocator).resolve(query))

    assert result.status is ResolutionStatus.SUCCESS
    assert result.point is not None
    assert -90 <= result.point.latitude <= 90
    assert -180 <= result.point.longitude <= 180
    assert result.point.display_title == phrase
    assert geolocator.calls == [phrase]


@pytest.mark.parametrize("content", [None, "", "  "])
def test_no_location_skips_geocoder(content: object, toronto_geolocator: FakeGeolocator) -> None:
    result = asyncio.run(_pipeline(content, toronto_geolocator).resolve("asdkjasdk"))

    assert result.status is ResolutionStatus.EXTRACTION_FAILED
    assert toronto_geolocator.calls == []


def test_blank_query_skips_geocoder(toronto_geolocator: FakeGeolocator) -> None:
    result = asyncio.run(_pipeline("Toronto", toronto_geolocator).resolve("   "))

    assert result.status is ResolutionStatus.EXTRACTION_FAILED
    assert toronto_geolocator.calls == []


@pytest.mark.parametrize("error_factory", [_connection_error, _timeout_error])
def test_extraction_service_failure_propagates(
    error_factory: Callable[[], Exception], toronto_geolocator: FakeGeolocator
) -> None:
    """言語モデルの障害は地名なしとは区別して送出される"""
    extractor = LocationExtractor(FakeChatClient(error=error_factory()))
    pipeline = ResolutionPipeline(extractor, make_geocode_client(toronto_geolocator))

    with pytest.raises(ExtractionServiceError):
        asyncio.run(pipeline.resolve("Show me Toronto"))

    assert toronto_geolocator.calls == []


def test_not_found(empty_geolocator: FakeGeolocator) -> None:
    result = asyncio.run(_pipeline("Atlantis", empty_geolocator).resolve("Take me to Atlantis"))

    assert result.status is ResolutionStatus.NOT_FOUND
    assert result.location_text == "Atlantis"


def test_provider_error_is_returned_verbatim() -> None:
    geolocator = FakeGeolocator(error=GeocoderServiceError("HTTP 502"))

    result = asyncio.run(_pipeline("Oslo", geolocator).resolve("Oslo please"))

    assert result.status is ResolutionStatus.PROVIDER_ERROR
    assert result.reason is ProviderErrorReason.SERVICE
    assert result.location_text == "Oslo"


def test_unexpected_errors_propagate() -> None:
    class BrokenGeocoder:
        async def lookup(self, phrase: str) -> None:
            raise RuntimeError("bug")

    pipeline = ResolutionPipeline(FakeExtractor(phrase="Lima"), BrokenGeocoder())  # type: ignore[arg-type]

    with pytest.raises(RuntimeError):
        asyncio.run(pipeline.resolve("Lima"))


def test_resolve_is_idempotent(toronto_geolocator: FakeGeolocator) -> None:
    pipeline = ResolutionPipeline(FakeExtractor(phrase="Toronto"), make_geocode_client(toronto_geolocator))

    async def _run() -> tuple[object, object]:
        return await pipeline.resolve("Toronto"), await pipeline.resolve("Toronto")

    first, second = asyncio.run(_run())

    assert first == second
