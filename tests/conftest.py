"""Pytest configuration and shared fixtures."""

import pytest

from cc_taxii2_client.config import Credentials, TaxiiConfig

BASE_URL = "https://taxii.example.com"


@pytest.fixture
def credentials():
    """Test credentials."""
    return Credentials("test-account", "test-api-key")


@pytest.fixture
def config(credentials):
    """Client configuration pointing at a fake TAXII server."""
    return TaxiiConfig(credentials=credentials, base_url=BASE_URL, timeout=5.0)


@pytest.fixture
def discovery_response():
    """Mock discovery response."""
    return {
        "title": "CloudCover TAXII Server",
        "description": "This API ROOT contains TAXII 2.1 REST API endpoints "
        "that serve CloudCover STIX 2.1 data",
        "contact": "it.support@cloudcover.net",
        "default": "/api/",
        "api_roots": ["/api/", "/test-account/", "/archive/"],
    }


@pytest.fixture
def collections_response():
    """Mock collections response."""
    return {
        "collections": [
            {
                "id": "91a7b528-80eb-42ed-a74d-c6fbd5a26116",
                "title": "CloudCover Indicators",
                "description": "Indicators of compromise",
                "can_read": True,
                "can_write": False,
                "media_types": ["application/stix+json;version=2.1"],
                "name": "cloudcover",
            },
            {
                "id": "52892447-4d7e-4f70-b94d-d7f22742ff63",
                "title": "Archive",
                "can_read": True,
                "can_write": True,
            },
        ]
    }


def make_indicator(n: int = 1) -> dict:
    """Build a CloudCover indicator object."""
    return {
        "type": "indicator",
        "spec_version": "2.1",
        "id": f"indicator--0000000{n}-aaaa-4bbb-8ccc-dddddddddddd",
        "created": "2024-01-02T03:04:05.000Z",
        "modified": "2024-01-02T03:04:05.000Z",
        "name": f"malicious-{n}.example.net",
        "description": "Known C2 domain",
        "pattern": f"[domain-name:value = 'malicious-{n}.example.net']",
        "pattern_type": "stix",
        "pattern_version": "2.1",
        "valid_from": "2024-01-02T03:04:05Z",
    }


@pytest.fixture
def indicator():
    """A single CloudCover indicator object."""
    return make_indicator(1)


@pytest.fixture
def indicator_factory():
    """Factory building numbered CloudCover indicator objects."""
    return make_indicator
