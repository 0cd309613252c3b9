"""Tests for the external barcode lookup sources."""

from __future__ import annotations

import httpx

from toolshed.barcode.sources import OpenFactsSource, UpcItemDbSource, is_http_url

UPC_URL = "https://upc.test/lookup"
MIRRORS = ("https://obf.test/api/v2/product", "https://off.test/api/v2/product")


def _recording_transport(handler):
    requests: list[httpx.Request] = []

    def _handle(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    return httpx.MockTransport(_handle), requests


def test_is_http_url():
    assert is_http_url("https://example.com/x")
    assert is_http_url(" HTTP://example.com ")
    assert not is_http_url("ftp://example.com")
    assert not is_http_url(None)


def test_upcitemdb_returns_strong_match():
    payload = {
        "items": [
            {"ean": "9999999999999", "title": "Something else"},
            {
                "ean": "0012345678905",
                "title": " Widget Driver ",
                "brand": "Acme",
                "category": "Tools",
                "images": ["https://img.test/1.jpg"],
                "offers": [{"link": "https://shop.test/widget"}],
            },
        ]
    }
    transport, requests = _recording_transport(lambda request: httpx.Response(200, json=payload))

    result = UpcItemDbSource(UPC_URL, transport=transport).lookup("012345678905")

    assert result is not None
    assert result.title == "Widget Driver"
    assert result.brand == "Acme"
    assert result.image_url == "https://img.test/1.jpg"
    assert result.product_url == "https://shop.test/widget"
    assert len(requests) == 1
    assert requests[0].url.params["upc"] == "012345678905"


def test_upcitemdb_skips_loose_candidates():
    payload = {"items": [{"ean": "4006381333931", "title": "Pencil"}]}
    transport, requests = _recording_transport(lambda request: httpx.Response(200, json=payload))

    result = UpcItemDbSource(UPC_URL, transport=transport).lookup("012345678905")

    assert result is None
    assert [request.url.params["upc"] for request in requests] == ["012345678905", "0012345678905"]


def test_upcitemdb_errors_become_misses():
    transport, requests = _recording_transport(lambda request: httpx.Response(500, text="boom"))
    assert UpcItemDbSource(UPC_URL, transport=transport).lookup("012345678905") is None
    assert len(requests) == 2

    transport, _ = _recording_transport(lambda request: httpx.Response(200, text="<html>not json"))
    assert UpcItemDbSource(UPC_URL, transport=transport).lookup("012345678905") is None


def test_upcitemdb_transport_failure_becomes_miss():
    def _raise(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    transport, _ = _recording_transport(_raise)
    assert UpcItemDbSource(UPC_URL, transport=transport).lookup("012345678905") is None


def test_upcitemdb_ignores_alphanumeric_codes():
    transport, requests = _recording_transport(lambda request: httpx.Response(200, json={"items": []}))

    assert UpcItemDbSource(UPC_URL, transport=transport).lookup("XYZ") is None
    assert requests == []


def test_openfacts_tries_mirrors_in_order():
    def _handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "obf.test":
            return httpx.Response(200, json={"status": 0, "status_verbose": "product not found"})
        return httpx.Response(
            200,
            json={
                "code": "012345678905",
                "product": {
                    "product_name": "Hand Cream",
                    "brands": "Acme, Other Co",
                    "categories": "Skin care, Creams",
                    "image_front_url": "https://img.test/front.jpg",
                    "url": "not-a-url",
                },
            },
        )

    transport, requests = _recording_transport(_handler)

    result = OpenFactsSource(MIRRORS, transport=transport).lookup("012345678905")

    assert result is not None
    assert result.title == "Hand Cream"
    assert result.brand == "Acme"
    assert result.category == "Skin care"
    assert result.image_url == "https://img.test/front.jpg"
    assert result.product_url is None
    assert [request.url.host for request in requests] == ["obf.test", "off.test"]
    assert requests[0].url.path == "/api/v2/product/012345678905.json"


def test_openfacts_rejects_unrelated_code_and_empty_products():
    def _handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "obf.test":
            return httpx.Response(200, json={"code": "4006381333931", "product": {"product_name": "Pencil"}})
        return httpx.Response(200, json={"code": "012345678905", "product": {"image_url": "https://img.test/x"}})

    transport, requests = _recording_transport(_handler)

    assert OpenFactsSource(MIRRORS, transport=transport).lookup("012345678905") is None
    assert len(requests) == 4


def test_openfacts_undecodable_mirror_falls_through_to_next():
    def _handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "obf.test":
            return httpx.Response(200, content=b"\xff\xfe{not utf8")
        return httpx.Response(200, json={"code": "012345678905", "product": {"product_name": "Hand Cream"}})

    transport, requests = _recording_transport(_handler)

    result = OpenFactsSource(MIRRORS, transport=transport).lookup("012345678905")

    assert result is not None
    assert result.title == "Hand Cream"
    assert [request.url.host for request in requests] == ["obf.test", "off.test"]


def test_upcitemdb_undecodable_body_becomes_miss():
    transport, requests = _recording_transport(lambda request: httpx.Response(200, content=b"\xff\xfe{not utf8"))

    assert UpcItemDbSource(UPC_URL, transport=transport).lookup("012345678905") is None
    assert len(requests) == 2
