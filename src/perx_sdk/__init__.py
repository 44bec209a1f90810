"""
Perx SDK

Typed Python client for the Perx loyalty/rewards REST API.

Usage:
------
    from perx_sdk import (
        LoyaltyTransactionRequest,
        PerxClient,
        PerxConfig,
        UserAccountById,
        VoucherScope,
    )

    client = PerxClient(PerxConfig(
        base_url="https://api.perxtech.io",
        client_id="...",
        client_secret="...",
        token_duration_in_seconds=300,
    ))

    token = client.get_user_token("customer-identifier")
    vouchers = client.get_vouchers(token.access_token, VoucherScope(page=1, size=10))

    # Point-of-sale access uses the application token
    app_token = client.get_application_token()
    earn = LoyaltyTransactionRequest.make_earn_request(
        UserAccountById(id=42), loyalty_program_id=7, points=100
    )
    client.submit_loyalty_transaction(app_token.access_token, earn)

Configuration:
--------------
``PerxClient.from_env()`` reads PERX_API_URL, PERX_CLIENT_ID,
PERX_CLIENT_SECRET, PERX_TOKEN_DURATION_SEC, PERX_TIMEOUT_SEC and
PERX_DEBUG (request | response | all | none). See ``perx_sdk.config``.
"""

# -----------------------------------------------------------------------------
# Transport
# -----------------------------------------------------------------------------
from .client_base import (
    BaseAPIClient,
    APIClientError,
    APIClientHTTPError,
    APIClientTimeout,
)

# -----------------------------------------------------------------------------
# Perx client, configuration and errors
# -----------------------------------------------------------------------------
from .config import PerxConfig
from .errors import (
    PerxError,
    PerxAPIError,
    PerxBadRequestError,
    PerxConfigError,
    PerxResponseParseError,
    PerxUnauthorizedError,
)
from .perx_api import PerxClient

# -----------------------------------------------------------------------------
# Query scopes
# -----------------------------------------------------------------------------
from .scopes import RewardScope, VoucherScope

# -----------------------------------------------------------------------------
# Models
# -----------------------------------------------------------------------------
from .schema import (
    Category,
    CategoriesResponse,
    Customer,
    LoyaltyProgram,
    LoyaltyTransaction,
    LoyaltyTransactionHistoryEntry,
    LoyaltyTransactionRequest,
    LoyaltyTransactionsHistoryResponse,
    ResponseMeta,
    Reward,
    RewardReservation,
    RewardSearchResult,
    RewardSearchResultResponse,
    RewardsResponse,
    TokenResponse,
    Transaction,
    TransactionRequest,
    UserAccountById,
    UserAccountByIdentifier,
    Voucher,
    VouchersMeta,
    VouchersResponse,
    VoucherState,
)


__all__ = [
    # Transport
    "BaseAPIClient",
    "APIClientError",
    "APIClientHTTPError",
    "APIClientTimeout",
    # Client
    "PerxClient",
    "PerxConfig",
    # Errors
    "PerxError",
    "PerxAPIError",
    "PerxBadRequestError",
    "PerxConfigError",
    "PerxResponseParseError",
    "PerxUnauthorizedError",
    # Scopes
    "RewardScope",
    "VoucherScope",
    # Models
    "Category",
    "CategoriesResponse",
    "Customer",
    "LoyaltyProgram",
    "LoyaltyTransaction",
    "LoyaltyTransactionHistoryEntry",
    "LoyaltyTransactionRequest",
    "LoyaltyTransactionsHistoryResponse",
    "ResponseMeta",
    "Reward",
    "RewardReservation",
    "RewardSearchResult",
    "RewardSearchResultResponse",
    "RewardsResponse",
    "TokenResponse",
    "Transaction",
    "TransactionRequest",
    "UserAccountById",
    "UserAccountByIdentifier",
    "Voucher",
    "VouchersMeta",
    "VouchersResponse",
    "VoucherState",
]
