import pytest

from perx_sdk.schema import VoucherState
from perx_sdk.scopes import RewardScope, VoucherScope


@pytest.mark.unit
def test_empty_reward_scope_sends_nothing():
    assert RewardScope().to_query_params() == {}


@pytest.mark.unit
@pytest.mark.parametrize(
    "scope, expected",
    [
        (RewardScope(catalog_id="12"), {"filter_for_catalogs": "12"}),
        (RewardScope(brand_id="4"), {"filter_for_brands": "4"}),
        (RewardScope(tag_ids=["1", "2"]), {"tag_ids[]": ["1", "2"]}),
        (RewardScope(filter_by_points_balance=True), {"filter_by_points_balance": "true"}),
        (RewardScope(filter_by_points_balance=False), {}),
        (RewardScope(sort_by="ends_at"), {"sort_by": "ends_at"}),
        (RewardScope(order="desc"), {"order_by": "desc"}),
        (RewardScope(category_name_prefix="Foo"), {"categories": "Foo"}),
        (RewardScope(page=3), {"page": "3"}),
        (RewardScope(page_size=50), {"size": "50"}),
        (RewardScope(filter_for_merchants="9"), {"filter_for_merchants": "9"}),
    ],
)
def test_each_reward_scope_field_maps_to_one_param(scope, expected):
    assert scope.to_query_params() == expected


@pytest.mark.unit
def test_combined_reward_scope():
    params = RewardScope(page=1, page_size=10, catalog_id="5", order="asc").to_query_params()
    assert params == {"page": "1", "size": "10", "filter_for_catalogs": "5", "order_by": "asc"}
    assert None not in params.values()


@pytest.mark.unit
def test_voucher_scope_defaults():
    assert VoucherScope().to_query_params() == {"size": 24, "page": 1}


@pytest.mark.unit
def test_voucher_scope_full():
    scope = VoucherScope(
        size=10,
        page=2,
        sort_by="valid_to",
        order="asc",
        state=VoucherState.REDEEMED,
        type="all",
    )
    assert scope.to_query_params() == {
        "size": 10,
        "page": 2,
        "state": "redeemed",
        "type": "all",
        "sort_by": "valid_to",
        "order": "asc",
    }


@pytest.mark.unit
def test_voucher_scope_accepts_plain_state_string():
    assert VoucherScope(state="issued").to_query_params()["state"] == "issued"


@pytest.mark.unit
@pytest.mark.parametrize(
    "scope",
    [
        RewardScope(catalog_id="", brand_id="", page=0),
        RewardScope(tag_ids=[]),
        RewardScope(page_size=0, category_name_prefix=""),
        RewardScope(filter_for_merchants="", sort_by="", order=""),
    ],
)
def test_empty_reward_scope_values_are_not_sent(scope):
    assert scope.to_query_params() == {}
