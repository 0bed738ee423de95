"""
Unit tests for response envelopes and record mappers.
"""

import json
from datetime import datetime

from vanguard_admin.pagination import pagination_meta
from vanguard_admin.resources import (
    contact_to_public,
    member_to_public,
    order_to_public,
    product_to_public,
    submission_detail_to_public,
    submission_to_public,
)
from vanguard_admin.shaping import error_body, parse_id, shape, success_body


# ── Tests: envelopes ─────────────────────────────────────────────────

def test_shape_wraps_items_and_pagination():
    body = shape([{"id": 1}, {"id": 2}], lambda r: {"id": str(r["id"])},
                 pagination_meta(1, 10, 2), "things")
    assert body["success"] is True
    assert body["data"]["things"] == [{"id": "1"}, {"id": "2"}]
    assert body["data"]["pagination"]["total"] == 2


def test_shape_adds_extra_blocks():
    body = shape([], dict, pagination_meta(1, 10, 0), "orders",
                 {"stats": {"totalRevenue": 0}})
    assert body["data"]["orders"] == []
    assert body["data"]["stats"] == {"totalRevenue": 0}


def test_error_body_omits_empty_details():
    assert error_body("Authentication required") == {
        "success": False, "error": "Authentication required",
    }
    assert error_body("Validation failed", [{"field": "x", "message": "y"}])["details"]


def test_success_body_message():
    assert success_body({"id": "1"}, "Saved")["message"] == "Saved"
    assert "message" not in success_body({})


def test_parse_id():
    assert parse_id("42") == 42
    assert parse_id("0") is None
    assert parse_id("-1") is None
    assert parse_id("abc") is None
    assert parse_id(None) is None


def test_parse_id_is_bounded_by_column_width():
    assert parse_id(str(2 ** 63 - 1)) == 2 ** 63 - 1
    assert parse_id(str(2 ** 63)) is None
    assert parse_id("99999999999999999999") is None


def test_pagination_survives_json_round_trip():
    for page, limit, total in ((1, 10, 0), (2, 10, 25), (3, 7, 100), (100000, 100, 5)):
        meta = pagination_meta(page, limit, total)
        body = json.loads(json.dumps(shape([], dict, meta, "things")))
        assert body["data"]["pagination"] == meta


# ── Tests: member mapping ────────────────────────────────────────────

def test_legacy_member_name_is_split():
    out = member_to_public({
        "id": 3, "name": "Wanjiru Kamau Njeri", "email": "w@example.org",
        "subscription_start": datetime(2023, 1, 1), "subscription_end": datetime(2024, 1, 1),
        "payment_provider": "mpesa", "is_active": 1,
    })
    assert out["id"] == "3"
    assert out["firstName"] == "Wanjiru"
    assert out["lastName"] == "Kamau Njeri"
    assert out["fullName"] == "Wanjiru Kamau Njeri"
    assert out["joinDate"] == "2023-01-01T00:00:00"
    assert out["expiryDate"] == "2024-01-01T00:00:00"
    assert out["paymentMethod"] == "mpesa"
    assert out["isActive"] is True


def test_current_member_fields_win_over_legacy():
    out = member_to_public({
        "id": 4, "first_name": "Ann", "last_name": "Lee", "name": "Old Name",
        "join_date": datetime(2024, 2, 2), "subscription_start": datetime(2020, 1, 1),
        "payment_method": "card", "payment_provider": "stripe",
    })
    assert out["fullName"] == "Ann Lee"
    assert out["joinDate"] == "2024-02-02T00:00:00"
    assert out["paymentMethod"] == "card"


def test_member_join_date_falls_back_to_created_at():
    out = member_to_public({"id": 5, "first_name": "A", "created_at": datetime(2022, 6, 1)})
    assert out["joinDate"] == "2022-06-01T00:00:00"
    assert out["expiryDate"] is None


# ── Tests: other mappers ─────────────────────────────────────────────

def test_order_customer_info_is_nested():
    out = order_to_public({
        "id": 9, "order_number": "EV-1", "customer_email": "c@example.org",
        "customer_first_name": "C", "customer_last_name": "D", "total": 30.0,
    })
    assert out["customerInfo"] == {
        "email": "c@example.org", "firstName": "C", "lastName": "D", "phone": None,
    }
    assert out["items"] == []


def test_contact_metadata_comes_from_extra():
    out = contact_to_public({"id": 1, "extra": {"organization": "Acme"}})
    assert out["metadata"] == {"organization": "Acme"}
    assert out["notes"] == ""


def test_submission_listing_omits_body():
    row = {"id": 2, "title": "T", "body": "Long text", "reviewer_id": "7",
           "reviewer_name": "Rae", "review_notes": None}
    listed = submission_to_public(row)
    assert "body" not in listed
    assert listed["reviewer"] == {"id": "7", "name": "Rae"}

    detail = submission_detail_to_public(row)
    assert detail["body"] == "Long text"
    assert detail["reviewNotes"] == ""
    assert submission_to_public({"id": 3})["reviewer"] is None


def test_product_inventory_and_images_use_client_keys():
    out = product_to_public({
        "id": 1, "name": "Tote", "inventory": {"track_quantity": True, "quantity": 4},
        "images": [{"url": "https://cdn.example.org/t.png", "is_primary": 1}],
    })
    assert out["inventory"] == {
        "trackQuantity": True, "quantity": 4, "lowStockThreshold": 5, "allowBackorder": False,
    }
    assert out["images"] == [{"url": "https://cdn.example.org/t.png", "alt": None,
                              "isPrimary": True}]
    assert out["tags"] == []
