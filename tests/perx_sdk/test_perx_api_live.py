"""
Live tests against a real Perx server.

Skipped unless TEST_PERX_API_URL, TEST_PERX_CLIENT_ID, TEST_PERX_CLIENT_SECRET
and TEST_PERX_USER_IDENTIFIER are set. Optional:

    TEST_PERX_USER_ID               - enables customer and POS tests
    TEST_PERX_LOYALTY_PROGRAM_ID    - enables loyalty tests
    TEST_PERX_REWARD_SEARCH_KEYWORD - enables reward search
    TEST_PERX_REWARD_ID             - reward to claim (default: first listed)

These tests issue and redeem real vouchers and earn/burn real points.
"""

import os
from datetime import datetime, timezone

import pytest

from perx_sdk import (
    LoyaltyTransactionRequest,
    PerxClient,
    PerxConfig,
    UserAccountById,
    VoucherScope,
    VoucherState,
)


TOKEN_DURATION = 300  # 5 mins is more than enough

API_URL = os.getenv("TEST_PERX_API_URL", "")
CLIENT_ID = os.getenv("TEST_PERX_CLIENT_ID", "")
CLIENT_SECRET = os.getenv("TEST_PERX_CLIENT_SECRET", "")
USER_IDENTIFIER = os.getenv("TEST_PERX_USER_IDENTIFIER", "")
USER_ID = os.getenv("TEST_PERX_USER_ID", "")
LOYALTY_PROGRAM_ID = os.getenv("TEST_PERX_LOYALTY_PROGRAM_ID", "")
SEARCH_KEYWORD = os.getenv("TEST_PERX_REWARD_SEARCH_KEYWORD", "")
REWARD_ID = os.getenv("TEST_PERX_REWARD_ID", "")

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        not (API_URL and CLIENT_ID and CLIENT_SECRET and USER_IDENTIFIER),
        reason="TEST_PERX_* environment is not configured",
    ),
]

needs_user_id = pytest.mark.skipif(not USER_ID, reason="TEST_PERX_USER_ID not set")
needs_loyalty = pytest.mark.skipif(
    not LOYALTY_PROGRAM_ID, reason="TEST_PERX_LOYALTY_PROGRAM_ID not set"
)

ALL_STATES = {s.value for s in VoucherState}


@pytest.fixture(scope="module")
def client():
    return PerxClient(
        PerxConfig(
            base_url=API_URL,
            client_id=CLIENT_ID,
            client_secret=CLIENT_SECRET,
            token_duration_in_seconds=TOKEN_DURATION,
        )
    )


@pytest.fixture(scope="module")
def user_token(client):
    return client.get_user_token(USER_IDENTIFIER)


@pytest.fixture(scope="module")
def app_token(client):
    return client.get_application_token()


def test_user_token(user_token):
    assert user_token.access_token
    assert user_token.token_type.lower() == "bearer"
    assert user_token.scope == "user_account"
    assert user_token.expires_in == TOKEN_DURATION


def test_application_token(app_token):
    assert app_token.access_token
    assert app_token.token_type.lower() == "bearer"
    assert app_token.scope is None


@pytest.mark.parametrize(
    "scope_kwargs, allowed_states",
    [
        ({}, ALL_STATES),
        ({"state": VoucherState.EXPIRED}, {"expired"}),
        ({"type": "expired"}, {"expired"}),
        ({"type": "all"}, ALL_STATES),
        ({"state": VoucherState.ISSUED}, {"issued"}),
        ({"state": VoucherState.REDEEMED}, {"redeemed"}),
    ],
)
def test_list_vouchers(client, user_token, scope_kwargs, allowed_states):
    per_page = 10
    token = user_token.access_token

    vouchers = client.get_vouchers(token, VoucherScope(page=1, size=per_page, **scope_kwargs))

    assert all(v.state.value in allowed_states for v in vouchers.data)
    assert vouchers.meta.page == 1
    assert len(vouchers.data) <= per_page
    if "type" in scope_kwargs:
        assert vouchers.meta.type == scope_kwargs["type"]

    if vouchers.meta.count and vouchers.meta.count > vouchers.meta.size:
        assert vouchers.meta.total_pages > 1
        next_page = client.get_vouchers(token, VoucherScope(page=2, size=per_page, **scope_kwargs))
        assert all(v.state.value in allowed_states for v in next_page.data)
        assert not {v.id for v in next_page.data} & {v.id for v in vouchers.data}


@pytest.mark.skipif(not SEARCH_KEYWORD, reason="TEST_PERX_REWARD_SEARCH_KEYWORD not set")
def test_search_rewards(client, user_token):
    results = client.search_rewards(user_token.access_token, SEARCH_KEYWORD)
    assert len(results.data) >= 1
    assert results.data[0].document_type == "reward"
    assert results.data[0].reward is not None


def test_voucher_lifecycle(client, user_token):
    token = user_token.access_token

    reward_id = REWARD_ID
    if not reward_id:
        rewards = client.get_rewards(token)
        assert rewards.data
        reward_id = rewards.data[0].id

    voucher = client.issue_voucher(token, str(reward_id))
    assert voucher.state is VoucherState.ISSUED

    reserved = client.redeem_voucher(token, voucher.id, confirm=False)
    assert reserved.id == voucher.id
    assert reserved.state is VoucherState.REDEMPTION_IN_PROGRESS

    redeemed = client.redeem_voucher(token, voucher.id, confirm=True)
    assert redeemed.id == voucher.id
    assert redeemed.state is VoucherState.REDEEMED


@needs_loyalty
def test_loyalty_queries(client, user_token):
    token = user_token.access_token

    program = client.get_loyalty_program(token, LOYALTY_PROGRAM_ID)
    assert program.id == int(LOYALTY_PROGRAM_ID)
    assert program.point_balance is not None

    programs = client.get_loyalty_programs(token)
    assert len(programs) > 0

    history = client.query_loyalty_transactions_history(token, 1, 5)
    assert history.meta.count is None or history.meta.count >= 0


@needs_user_id
def test_customer_lookup(client, user_token, app_token):
    customer = client.get_customer(user_token.access_token, USER_ID)
    assert customer.identifier == USER_IDENTIFIER
    assert customer.id == int(USER_ID)

    detail = client.get_customer_detail(app_token.access_token, int(USER_ID))
    assert detail.identifier


@needs_user_id
@needs_loyalty
@pytest.mark.parametrize(
    "factory, sign",
    [
        (LoyaltyTransactionRequest.make_earn_request, 1),
        (LoyaltyTransactionRequest.make_burn_request, -1),
    ],
)
def test_earn_and_burn(client, app_token, factory, sign):
    points = 121
    request = factory(UserAccountById(id=int(USER_ID)), int(LOYALTY_PROGRAM_ID), points, {})

    result = client.submit_loyalty_transaction(app_token.access_token, request)

    assert result.id
    assert result.loyalty_program_id == int(LOYALTY_PROGRAM_ID)
    assert result.points == sign * points
    transacted_at = result.transacted_at
    if transacted_at.tzinfo is None:
        transacted_at = transacted_at.replace(tzinfo=timezone.utc)
    delta = abs((datetime.now(timezone.utc) - transacted_at).total_seconds())
    assert delta <= 5
