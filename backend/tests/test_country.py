"""Tests for the shopper country cookie and IP geolocation."""
import json

import httpx

from storefront.services.country import (
    COOKIE_NAME,
    parse_country_cookie,
    serialize_country_cookie,
    detect_country,
)
from storefront.schemas.shipping import UserCountry


def mock_client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestParseCountryCookie:
    def test_valid(self):
        country = parse_country_cookie(json.dumps({"name": "Canada", "code": "CA", "city": "Toronto"}))

        assert country == UserCountry(name="Canada", code="CA", city="Toronto")

    def test_missing_uses_default(self):
        assert parse_country_cookie(None) == UserCountry(name="United States", code="US")

    def test_malformed_uses_default(self):
        assert parse_country_cookie("{not json").code == "US"

    def test_incomplete_uses_default(self):
        assert parse_country_cookie(json.dumps({"name": "Canada"})).code == "US"

    def test_serialized_cookie_parses_back(self):
        country = UserCountry(name="France", code="FR", city="Lyon", region="Auvergne-Rhone-Alpes")

        assert parse_country_cookie(serialize_country_cookie(country)) == country


class TestDetectCountry:
    def test_lookup(self, db):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"ip": "203.0.113.7", "country": "CA", "city": "Toronto", "region": "Ontario"})

        country = detect_country(db, "203.0.113.7", client=mock_client(handler))

        assert country == UserCountry(name="Canada", code="CA", city="Toronto", region="Ontario")
        assert requests[0].url.path == "/203.0.113.7"

    def test_unknown_code_keeps_code_as_name(self, db):
        country = detect_country(db, "203.0.113.7", client=mock_client(lambda r: httpx.Response(200, json={"country": "AQ"})))

        assert (country.name, country.code) == ("AQ", "AQ")

    def test_service_error_falls_back(self, db):
        country = detect_country(db, "203.0.113.7", client=mock_client(lambda r: httpx.Response(503)))

        assert country.code == "US"

    def test_network_error_falls_back(self, db):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        assert detect_country(db, client=mock_client(handler)).code == "US"

    def test_no_country_falls_back(self, db):
        country = detect_country(db, client=mock_client(lambda r: httpx.Response(200, json={"bogon": True})))

        assert country.code == "US"


class TestUserCountryEndpoint:
    def test_sets_cookie(self, client):
        response = client.post("/api/user-country", json={"userCountry": {"name": "Canada", "code": "CA"}})

        assert response.status_code == 200
        assert COOKIE_NAME in response.cookies
        set_cookie = response.headers["set-cookie"]
        assert "HttpOnly" in set_cookie
        assert "SameSite=lax" in set_cookie

    def test_missing_country(self, client):
        response = client.post("/api/user-country", json={})

        assert response.status_code == 400
        assert response.json()["detail"] == "User country data not sent."

    def test_invalid_country(self, client):
        response = client.post("/api/user-country", json={"userCountry": {"name": "Canada"}})

        assert response.status_code == 400
