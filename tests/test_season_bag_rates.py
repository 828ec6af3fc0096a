"""
Tests for bag-rate response normalization and the write/reset calls.

The API client is replaced by a Mock; only the arguments passed to
`client.get` / `client.post` and the scripted return values matter here.
"""

from unittest.mock import Mock

import pytest

from ricemill_admin.errors import ApiError, MalformedResponse, RateValidationError
from ricemill_admin.models import BagSize, SeasonCode
from ricemill_admin.season_bag_rates import (
    BAG_RATES_PATH,
    BAG_RATES_RESET_PATH,
    build_upsert_payload,
    list_season_bag_rates,
    normalize_list_response,
    reset_season_bag_rates,
    to_legacy_upsert_payload,
    upsert_season_bag_rates,
)


def _rates(kg_40, kg_75, kg_100):
    return {BagSize.KG_40: kg_40, BagSize.KG_75: kg_75, BagSize.KG_100: kg_100}


class TestNormalizeListResponse:
    """Both wire shapes normalize to the grouped form."""

    def test_grouped_response(self, payloads):
        raw = payloads.grouped_response(
            payloads.grouped_item("SONA", 400.0, 750.0, 1000.0),
            payloads.grouped_item("BPT", None, None, None),
            message="ok",
        )
        result = normalize_list_response(raw)

        assert result.success is True
        assert result.message == "ok"
        assert [i.rice_type.code for i in result.items] == ["SONA", "BPT"]
        sona = result.items[0]
        assert sona.crop_year_start_year == 2024
        assert sona.season_code is SeasonCode.KHARIF
        assert sona.rice_type.name == "Sona Masuri"
        assert sona.rates == _rates(400.0, 750.0, 1000.0)
        assert result.items[1].rates == _rates(None, None, None)

    def test_grouped_output_normalizes_to_itself(self, payloads):
        raw = payloads.grouped_response(payloads.grouped_item("SONA", 400.0, 750.0, 1000.0))
        first = normalize_list_response(raw)
        assert first.to_wire() == raw
        assert normalize_list_response(first.to_wire()).to_wire() == first.to_wire()

    def test_legacy_rows_fold_by_rice_type(self, payloads):
        raw = {
            "success": True,
            "data": {
                "items": [
                    payloads.legacy_item("SONA", "KG_100", 1000.0),
                    payloads.legacy_item("BPT", "KG_40", 300.0),
                    payloads.legacy_item("SONA", "KG_40", 400.0),
                    payloads.legacy_item("SONA", "KG_75", 750.0),
                ]
            },
        }
        result = normalize_list_response(raw)

        assert [i.rice_type.code for i in result.items] == ["SONA", "BPT"]
        assert result.items[0].rates == _rates(400.0, 750.0, 1000.0)
        # Sizes missing from the legacy rows stay null
        assert result.items[1].rates == _rates(300.0, None, None)

    def test_empty_items(self, payloads):
        assert normalize_list_response(payloads.grouped_response()).items == []

    @pytest.mark.parametrize(
        "raw",
        [
            None,
            [],
            {"success": True},
            {"success": True, "data": {"items": [{"riceType": {"code": "SONA", "name": "Sona"}}]}},
            # Rates must be numbers on the wire, not numeric strings
            {
                "success": True,
                "data": {
                    "items": [
                        {
                            "cropYearStartYear": 2024,
                            "seasonCode": "KHARIF",
                            "riceType": {"code": "SONA", "name": "Sona"},
                            "rates": {"KG_40": "400", "KG_75": 750.0, "KG_100": 1000.0},
                        }
                    ]
                },
            },
        ],
    )
    def test_malformed_responses(self, raw):
        with pytest.raises(MalformedResponse) as exc:
            normalize_list_response(raw)
        assert exc.value.message == "Unexpected response from server."

    def test_grouped_rates_keys_are_required(self, payloads):
        item = payloads.grouped_item("SONA", 400.0, 750.0, 1000.0)
        del item["rates"]["KG_75"]
        with pytest.raises(MalformedResponse):
            normalize_list_response(payloads.grouped_response(item))

    def test_unknown_season_is_malformed(self, payloads):
        item = payloads.grouped_item("SONA", 400.0, 750.0, 1000.0, season="ZAID")
        with pytest.raises(MalformedResponse):
            normalize_list_response(payloads.grouped_response(item))

    def test_duplicate_rice_type_rows_are_malformed(self, payloads):
        raw = payloads.grouped_response(
            payloads.grouped_item("SONA", 400.0, 750.0, 1000.0),
            payloads.grouped_item("SONA", 1.0, 2.0, 3.0),
        )
        with pytest.raises(MalformedResponse):
            normalize_list_response(raw)


class TestWritePayloads:
    def test_build_upsert_payload(self):
        body = build_upsert_payload(2024, SeasonCode.RABI, [("SONA", _rates(400.0, 750.0, 1000.0))])
        assert body == {
            "cropYearStartYear": 2024,
            "seasonCode": "RABI",
            "rates": [{"riceTypeCode": "SONA", "rates": {"KG_40": 400.0, "KG_75": 750.0, "KG_100": 1000.0}}],
        }

    def test_build_upsert_payload_requires_rows(self):
        with pytest.raises(RateValidationError) as exc:
            build_upsert_payload(2024, SeasonCode.KHARIF, [])
        assert exc.value.message == "Add at least one rate."

    def test_build_upsert_payload_rejects_negative_rate(self):
        with pytest.raises(RateValidationError):
            build_upsert_payload(2024, SeasonCode.KHARIF, [("SONA", _rates(-1.0, 750.0, 1000.0))])

    def test_build_upsert_payload_rejects_duplicate_rice_types(self):
        rows = [("SONA", _rates(4.0, 7.5, 10.0)), ("SONA", _rates(4.0, 7.5, 10.0))]
        with pytest.raises(RateValidationError) as exc:
            build_upsert_payload(2024, SeasonCode.KHARIF, rows)
        assert "SONA" in exc.value.message

    def test_legacy_payload_expands_each_row_into_three(self):
        body = build_upsert_payload(2024, SeasonCode.KHARIF, [("SONA", _rates(400.0, 750.0, 1000.0))])
        legacy = to_legacy_upsert_payload(body)
        assert legacy == {
            "cropYearStartYear": 2024,
            "seasonCode": "KHARIF",
            "rates": [
                {"riceTypeCode": "SONA", "bagSize": "KG_40", "rateRupees": 400.0},
                {"riceTypeCode": "SONA", "bagSize": "KG_75", "rateRupees": 750.0},
                {"riceTypeCode": "SONA", "bagSize": "KG_100", "rateRupees": 1000.0},
            ],
        }


class TestApiCalls:
    def _payload(self):
        return build_upsert_payload(2024, SeasonCode.KHARIF, [("SONA", _rates(400.0, 750.0, 1000.0))])

    def test_list_sends_selection_as_query(self, payloads):
        client = Mock()
        client.get.return_value = payloads.grouped_response()
        list_season_bag_rates(client, 2024, SeasonCode.RABI)
        client.get.assert_called_once_with(
            BAG_RATES_PATH, params={"cropYearStartYear": "2024", "seasonCode": "RABI"}
        )

    def test_upsert_sends_grouped_body_once_on_success(self, payloads):
        client = Mock()
        client.post.return_value = payloads.grouped_response(payloads.grouped_item("SONA", 400.0, 750.0, 1000.0))
        payload = self._payload()

        result = upsert_season_bag_rates(client, payload)

        client.post.assert_called_once_with(BAG_RATES_PATH, body=payload)
        assert result.items[0].rates[BagSize.KG_100] == 1000.0

    def test_upsert_retries_with_legacy_rows_on_400(self, payloads):
        client = Mock()
        client.post.side_effect = [
            ApiError("Validation failed", 400),
            payloads.grouped_response(payloads.grouped_item("SONA", 400.0, 750.0, 1000.0)),
        ]
        payload = self._payload()

        result = upsert_season_bag_rates(client, payload)

        assert client.post.call_count == 2
        retry_body = client.post.call_args_list[1].kwargs["body"]
        assert retry_body == to_legacy_upsert_payload(payload)
        assert len(result.items) == 1

    @pytest.mark.parametrize("status", [401, 403, 409, 500])
    def test_upsert_does_not_retry_other_failures(self, status):
        client = Mock()
        client.post.side_effect = ApiError("nope", status)
        with pytest.raises(ApiError) as exc:
            upsert_season_bag_rates(client, self._payload())
        assert exc.value.status == status
        assert client.post.call_count == 1

    def test_upsert_surfaces_failed_retry(self):
        client = Mock()
        client.post.side_effect = [ApiError("Bad grouped body", 400), ApiError("Server down", 503)]
        with pytest.raises(ApiError) as exc:
            upsert_season_bag_rates(client, self._payload())
        assert exc.value.message == "Server down"
        assert client.post.call_count == 2

    @pytest.mark.parametrize("confirm", [None, "", "reset", "RESET ", "Reset"])
    def test_reset_requires_exact_token_before_any_request(self, confirm):
        client = Mock()
        with pytest.raises(RateValidationError):
            reset_season_bag_rates(client, 2024, SeasonCode.KHARIF, confirm)
        client.post.assert_not_called()

    def test_reset_posts_confirmation(self, payloads):
        client = Mock()
        client.post.return_value = payloads.grouped_response(payloads.grouped_item("SONA", 0.0, 0.0, 0.0))

        result = reset_season_bag_rates(client, 2024, SeasonCode.KHARIF, "RESET")

        client.post.assert_called_once_with(
            BAG_RATES_RESET_PATH,
            body={"cropYearStartYear": 2024, "seasonCode": "KHARIF", "confirm": "RESET"},
        )
        assert result.items[0].rates == _rates(0.0, 0.0, 0.0)
