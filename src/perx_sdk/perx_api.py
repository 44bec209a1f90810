from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional, Union

from .client_base import BaseAPIClient
from .config import PerxConfig
from .errors import PerxBadRequestError
from .parsing import parse_and_eval, raise_for_unauthorized
from .schema import (
    CategoriesResponse,
    Customer,
    CustomerResponse,
    LoyaltyProgram,
    LoyaltyProgramResponse,
    LoyaltyProgramsResponse,
    LoyaltyTransaction,
    LoyaltyTransactionRequest,
    LoyaltyTransactionResponse,
    LoyaltyTransactionsHistoryResponse,
    RewardReservation,
    RewardReservationResponse,
    RewardSearchResultResponse,
    RewardsResponse,
    TokenResponse,
    Transaction,
    TransactionRequest,
    TransactionResponse,
    Voucher,
    VoucherResponse,
    VouchersResponse,
)
from .scopes import RewardScope, VoucherScope


logger = logging.getLogger(__name__)

API_ROOT = "/v4"

# Integer literals only: rejects negatives and decimals, not just non-numbers.
_INTEGER_LITERAL = re.compile(r"[0-9]+")
_CUSTOMER_ID = re.compile(r"me|[0-9]+")

DEFAULT_RESERVATION_TIMEOUT_MS = 900 * 1000


class PerxClient(BaseAPIClient):
    """
    Typed client for the Perx loyalty/rewards API.

    Three groups of operations:

    - Auth: issue user-scoped or application-scoped bearer tokens.
    - User (user token): rewards, vouchers, loyalty programs, customers,
      categories, transaction history.
    - POS (application token): earn/burn loyalty transactions, generic
      transactions, customer detail.

    Every call is a single HTTP round trip. Statuses below 450 are handed
    to :func:`parse_and_eval`, which returns the typed model or raises a
    categorized :class:`PerxError`.

    All calls share one ``requests.Session``, which is not documented as
    thread-safe. Use one client per thread when calling concurrently.
    """

    def __init__(self, config: PerxConfig) -> None:
        self.config = config
        super().__init__(
            base_url=config.base_url,
            timeout=config.timeout,
            debug=config.debug,
        )
        logger.info(f"PerxClient initialized for {self.base_url} (debug={config.debug}).")

    @classmethod
    def from_env(cls) -> "PerxClient":
        return cls(PerxConfig.from_env())

    # -------------------------------------------------
    # Auth
    # -------------------------------------------------
    def get_user_token(self, user_identifier: str) -> TokenResponse:
        """Issue a token that acts on behalf of the customer ``user_identifier``."""
        status, payload = self.send(
            "POST",
            f"{API_ROOT}/oauth/token",
            json={
                "client_id": self.config.client_id,
                "client_secret": self.config.client_secret,
                "grant_type": "client_credentials",
                "scope": f"user_account(identifier:{user_identifier})",
                "expires_in": self.config.token_duration_in_seconds,
            },
        )
        raise_for_unauthorized(payload, status)
        return parse_and_eval(payload, status, TokenResponse)

    def get_application_token(self) -> TokenResponse:
        """Issue the application's own token (POS access)."""
        status, payload = self.send(
            "POST",
            f"{API_ROOT}/oauth/token",
            json={
                "client_id": self.config.client_id,
                "client_secret": self.config.client_secret,
                "grant_type": "client_credentials",
            },
        )
        raise_for_unauthorized(payload, status)
        return parse_and_eval(payload, status, TokenResponse)

    # -------------------------------------------------
    # Rewards
    # -------------------------------------------------
    def get_rewards(self, user_token: str, scope: Optional[RewardScope] = None) -> RewardsResponse:
        params = (scope or RewardScope()).to_query_params()
        status, payload = self._get(user_token, "/rewards", params)
        return parse_and_eval(payload, status, RewardsResponse)

    def search_rewards(
        self,
        user_token: str,
        keyword: str,
        page: Optional[int] = None,
        size: Optional[int] = None,
    ) -> RewardSearchResultResponse:
        """
        Search rewards matching ``keyword``.

        ``page`` starts at 1; ``page`` and ``size`` are left to the server
        when not given.
        """
        status, payload = self._get(
            user_token,
            "/search",
            {"search_string": keyword, "page": page, "size": size},
        )
        return parse_and_eval(payload, status, RewardSearchResultResponse)

    def reserve_reward(
        self,
        user_token: str,
        reward_id: Union[int, str],
        timeout_ms: int = DEFAULT_RESERVATION_TIMEOUT_MS,
    ) -> RewardReservation:
        """
        Put a hold on a reward for ``timeout_ms`` (server side).

        Keep the returned reservation ``id``; pass it to
        :meth:`confirm_reward_reservation` or :meth:`release_reward_reservation`.
        """
        _require_integer("rewardId", reward_id)
        status, payload = self._post(
            user_token, f"/rewards/{reward_id}/reserve", params={"timeout": timeout_ms}
        )
        return parse_and_eval(payload, status, RewardReservationResponse).data

    def release_reward_reservation(self, user_token: str, reservation_id: Union[int, str]) -> Voucher:
        _require_integer("reservationId", reservation_id)
        status, payload = self._patch(user_token, f"/vouchers/{reservation_id}/release")
        return parse_and_eval(payload, status, VoucherResponse).data

    def confirm_reward_reservation(self, user_token: str, reservation_id: Union[int, str]) -> Voucher:
        _require_integer("reservationId", reservation_id)
        status, payload = self._patch(user_token, f"/vouchers/{reservation_id}/confirm")
        return parse_and_eval(payload, status, VoucherResponse).data

    def get_categories(
        self,
        user_token: str,
        parent_id: Optional[int],
        page: int,
        size: int,
    ) -> CategoriesResponse:
        """
        List reward categories.

        A falsy ``parent_id`` (None or 0) drops the parent filter and lists
        root and child categories together.
        """
        params: Dict[str, Any] = {"parent_id": parent_id} if parent_id else {}
        params.update(page=page, size=size)
        status, payload = self._get(user_token, "/categories", params)
        return parse_and_eval(payload, status, CategoriesResponse)

    # -------------------------------------------------
    # Vouchers
    # -------------------------------------------------
    def issue_voucher(self, user_token: str, reward_id: Union[int, str]) -> Voucher:
        """Claim a reward as a voucher in state ``issued``."""
        _require_integer("rewardId", reward_id)
        status, payload = self._post(user_token, f"/rewards/{reward_id}/issue")
        return parse_and_eval(payload, status, VoucherResponse).data

    def get_vouchers(self, user_token: str, scope: Optional[VoucherScope] = None) -> VouchersResponse:
        params = (scope or VoucherScope()).to_query_params()
        status, payload = self._get(user_token, "/vouchers", params)
        return parse_and_eval(payload, status, VouchersResponse)

    def redeem_voucher(
        self,
        user_token: str,
        voucher_id: Union[int, str],
        confirm: Optional[bool] = None,
    ) -> Voucher:
        """
        Redeem a voucher.

        Two-phase:
          confirm=False reserves the redemption (``redemption_in_progress``)
          confirm=True  finalizes a reserved redemption (``redeemed``)

        Single shot:
          confirm=None redeems right away
        """
        _require_integer("voucherId", voucher_id)
        params = {} if confirm is None else {"confirm": _bool_param(confirm)}
        status, payload = self._post(user_token, f"/vouchers/{voucher_id}/redeem", params=params)
        return parse_and_eval(payload, status, VoucherResponse).data

    def release_voucher(self, user_token: str, voucher_id: Union[int, str]) -> Voucher:
        """Cancel an in-progress redemption so the voucher can be redeemed again."""
        _require_integer("voucherId", voucher_id)
        status, payload = self._patch(user_token, f"/vouchers/{voucher_id}/release")
        return parse_and_eval(payload, status, VoucherResponse).data

    # -------------------------------------------------
    # Loyalty
    # -------------------------------------------------
    def get_loyalty_program(self, user_token: str, loyalty_program_id: Union[int, str]) -> LoyaltyProgram:
        _require_integer("loyaltyProgramId", loyalty_program_id)
        status, payload = self._get(user_token, f"/loyalty/{loyalty_program_id}")
        return parse_and_eval(payload, status, LoyaltyProgramResponse).data

    def get_loyalty_programs(self, user_token: str) -> List[LoyaltyProgram]:
        status, payload = self._get(user_token, "/loyalty")
        return parse_and_eval(payload, status, LoyaltyProgramsResponse).data

    def query_loyalty_transactions_history(
        self, user_token: str, page: int, per_page: int
    ) -> LoyaltyTransactionsHistoryResponse:
        status, payload = self._get(
            user_token, "/loyalty/transactions_history", {"page": page, "size": per_page}
        )
        return parse_and_eval(payload, status, LoyaltyTransactionsHistoryResponse)

    # -------------------------------------------------
    # Customers
    # -------------------------------------------------
    def get_customer(self, user_token: str, customer_id: Union[int, str] = "me") -> Customer:
        if not _CUSTOMER_ID.fullmatch(str(customer_id)):
            raise PerxBadRequestError(
                f"Invalid customerId: {customer_id}, expected customer as integer"
            )
        status, payload = self._get(user_token, f"/customers/{customer_id}")
        return parse_and_eval(payload, status, CustomerResponse).data

    def get_me(self, user_token: str) -> Customer:
        return self.get_customer(user_token, "me")

    # -------------------------------------------------
    # POS (application token)
    # -------------------------------------------------
    def get_customer_detail(self, application_token: str, user_id: Union[int, str]) -> Customer:
        _require_integer("userId", user_id)
        status, payload = self._get(application_token, f"/pos/user_accounts/{user_id}")
        raise_for_unauthorized(payload, status)
        return parse_and_eval(payload, status, CustomerResponse).data

    def submit_transaction(self, application_token: str, request: TransactionRequest) -> Transaction:
        status, payload = self._post(
            application_token, "/pos/transactions", body=request.to_wire()
        )
        return parse_and_eval(payload, status, TransactionResponse).data

    def submit_loyalty_transaction(
        self, application_token: str, request: LoyaltyTransactionRequest
    ) -> LoyaltyTransaction:
        """
        Earn or burn points. Build ``request`` with
        ``LoyaltyTransactionRequest.make_earn_request`` or ``make_burn_request``.
        """
        status, payload = self._post(
            application_token, "/pos/loyalty_transactions", body=request.to_wire()
        )
        return parse_and_eval(payload, status, LoyaltyTransactionResponse).data

    # -------------------------------------------------
    # Helpers
    # -------------------------------------------------
    def _get(self, token: str, path: str, params: Optional[Dict[str, Any]] = None):
        return self.send("GET", API_ROOT + path, params=params, headers=_bearer(token))

    def _post(
        self,
        token: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ):
        return self.send(
            "POST",
            API_ROOT + path,
            params=params,
            json=body if body is not None else {},
            headers=_bearer(token),
        )

    def _patch(self, token: str, path: str):
        return self.send("PATCH", API_ROOT + path, json={}, headers=_bearer(token))


def _bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _bool_param(value: bool) -> str:
    return "true" if value else "false"


def _require_integer(name: str, value: Union[int, str]) -> None:
    if not _INTEGER_LITERAL.fullmatch(str(value)):
        raise PerxBadRequestError(
            f"Invalid {name}: {value}, expected {name} as integer"
        )
