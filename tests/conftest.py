"""
Pytest configuration for ensuring the project root is on sys.path.

This allows test modules to import the in-repo package layout like:
    from ricemill_admin.season_bag_rates import normalize_list_response

Without relying on external environment variables. Also provides builders
for the API response bodies the tests feed to fake clients.
"""

import os
import sys

import pytest

# Insert the repository root (one directory up from tests/) at the
# beginning of sys.path to prioritize local modules over site-packages.
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)


RICE_TYPE_NAMES = {"SONA": "Sona Masuri", "BPT": "BPT 5204", "IR64": "IR 64"}


def grouped_item(code, kg_40, kg_75, kg_100, year=2024, season="KHARIF"):
    return {
        "cropYearStartYear": year,
        "seasonCode": season,
        "riceType": {"code": code, "name": RICE_TYPE_NAMES.get(code, code)},
        "rates": {"KG_40": kg_40, "KG_75": kg_75, "KG_100": kg_100},
    }


def grouped_response(*items, message=None):
    body = {"success": True, "data": {"items": list(items)}}
    if message is not None:
        body["message"] = message
    return body


def legacy_item(code, bag_size, rate, year=2024, season="KHARIF"):
    return {
        "id": f"{code}-{bag_size}",
        "cropYearStartYear": year,
        "seasonCode": season,
        "riceType": {"code": code, "name": RICE_TYPE_NAMES.get(code, code)},
        "bagSize": bag_size,
        "rateRupees": rate,
    }


def rice_types_response(*rows):
    """`rows` are (code, is_active) pairs."""
    return {
        "success": True,
        "data": {
            "items": [
                {"id": f"rt-{code}", "code": code, "name": RICE_TYPE_NAMES.get(code, code), "isActive": active}
                for code, active in rows
            ]
        },
    }


def crop_years_response(*years):
    items = [
        {
            "id": f"cy-{y}",
            "label": f"{y}-{str(y + 1)[-2:]}",
            "startYear": y,
            "seasons": [{"id": f"s-{y}-k", "code": "KHARIF", "name": "Kharif"}],
        }
        for y in years
    ]
    return {"success": True, "data": {"items": items, "total": len(items), "page": 1, "limit": 50}}


@pytest.fixture
def payloads():
    """Expose the response builders to tests without a helper import."""

    class _Payloads:
        grouped_item = staticmethod(grouped_item)
        grouped_response = staticmethod(grouped_response)
        legacy_item = staticmethod(legacy_item)
        rice_types_response = staticmethod(rice_types_response)
        crop_years_response = staticmethod(crop_years_response)

    return _Payloads
