from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import PerxBadRequestError


class PerxModel(BaseModel):
    """
    Base for every value received from Perx.

    Models are immutable and ignore wire fields they do not declare, so a
    new field added upstream never breaks parsing.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")


# ------------------------------
# Auth
# ------------------------------


class TokenResponse(PerxModel):
    access_token: str = Field(..., description="Bearer token to send on later calls")
    token_type: str = Field(..., description="Always 'bearer' (any case)")
    expires_in: Optional[int] = Field(None, description="Lifetime in seconds")
    scope: Optional[str] = Field(
        None, description="'user_account' for user tokens, absent for application tokens"
    )
    created_at: Optional[int] = None


# ------------------------------
# Rewards & vouchers
# ------------------------------


class VoucherState(str, Enum):
    ISSUED = "issued"
    REDEMPTION_IN_PROGRESS = "redemption_in_progress"
    REDEEMED = "redeemed"
    RELEASED = "released"
    EXPIRED = "expired"


class Reward(PerxModel):
    id: int
    name: Optional[str] = None
    description: Optional[str] = None
    subtitle: Optional[str] = None
    terms_and_conditions: Optional[str] = None
    how_to_redeem: Optional[str] = None
    merchant_id: Optional[int] = None
    merchant_name: Optional[str] = None
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    selling_from: Optional[datetime] = None
    selling_to: Optional[datetime] = None
    tags: List[Dict[str, Any]] = Field(default_factory=list)
    category_tags: List[Dict[str, Any]] = Field(default_factory=list)
    images: List[Dict[str, Any]] = Field(default_factory=list)

    @field_validator("tags", "category_tags", "images", mode="before")
    @classmethod
    def validate_list_of_dicts(cls, v):
        if v is None:
            return []
        if isinstance(v, list):
            return [x for x in v if isinstance(x, dict)]
        return []


class Voucher(PerxModel):
    id: int
    state: VoucherState
    name: Optional[str] = None
    voucher_type: Optional[str] = None
    voucher_code: Optional[str] = None
    issued_date: Optional[datetime] = None
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    redemption_date: Optional[datetime] = None
    reward: Optional[Reward] = None


class RewardReservation(PerxModel):
    """A timeout-bound hold on a reward; confirm or release it by ``id``."""

    id: int
    state: Optional[str] = None
    reward_id: Optional[int] = None
    voucher_code: Optional[str] = None
    valid_to: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class RewardSearchResult(PerxModel):
    document_type: str
    score: Optional[float] = None
    reward: Optional[Reward] = None


class Category(PerxModel):
    id: int
    title: Optional[str] = None
    description: Optional[str] = None
    parent_id: Optional[int] = None
    children_count: Optional[int] = None
    rewards_count: Optional[int] = None


# ------------------------------
# Loyalty & customers
# ------------------------------


class LoyaltyProgram(PerxModel):
    id: int
    name: Optional[str] = None
    point_balance: Optional[float] = Field(None, description="Spendable points")
    tier_points: Optional[float] = Field(
        None, description="Points counted toward membership tier"
    )
    current_membership_tier_name: Optional[str] = None
    membership_number: Optional[str] = None
    points_to_next_tier: Optional[float] = None
    next_tier_name: Optional[str] = None


class Customer(PerxModel):
    id: int
    identifier: Optional[str] = Field(None, description="External user identifier")
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    state: Optional[str] = None
    joined_date: Optional[datetime] = None
    personal_properties: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("personal_properties", mode="before")
    @classmethod
    def validate_properties(cls, v):
        return v if isinstance(v, dict) else {}


# ------------------------------
# Transactions
# ------------------------------


class Transaction(PerxModel):
    id: int
    user_account_id: Optional[int] = None
    amount: Optional[float] = None
    currency: Optional[str] = None
    transaction_type: Optional[str] = None
    transaction_reference: Optional[str] = None
    transaction_date: Optional[datetime] = None
    properties: Dict[str, Any] = Field(default_factory=dict)


class LoyaltyTransaction(PerxModel):
    id: int
    loyalty_program_id: int
    points: int = Field(..., description="Signed delta: positive earns, negative burns")
    transacted_at: datetime
    user_account_id: Optional[int] = None
    properties: Dict[str, Any] = Field(default_factory=dict)


class LoyaltyTransactionHistoryEntry(PerxModel):
    id: int
    points: float
    name: Optional[str] = None
    loyalty_program_id: Optional[int] = None
    transacted_at: Optional[datetime] = None
    properties: Dict[str, Any] = Field(default_factory=dict)


# ------------------------------
# Requests
# ------------------------------


class UserAccountById(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["id"] = "id"
    id: int


class UserAccountByIdentifier(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["identifier"] = "identifier"
    identifier: str


UserAccountRef = Annotated[
    Union[UserAccountById, UserAccountByIdentifier], Field(discriminator="type")
]


def user_account_payload(ref: Union[UserAccountById, UserAccountByIdentifier]) -> Dict[str, Any]:
    """Wire form of a user account reference: ``{"id": ...}`` or ``{"identifier": ...}``."""
    if isinstance(ref, UserAccountById):
        return {"id": ref.id}
    if isinstance(ref, UserAccountByIdentifier):
        return {"identifier": ref.identifier}
    raise TypeError(f"Unsupported user account reference: {ref!r}")


class TransactionRequest(BaseModel):
    """A generic point-of-sale transaction submitted with an application token."""

    model_config = ConfigDict(frozen=True)

    user_account_id: int
    amount: float
    currency: Optional[str] = None
    transaction_type: str = "purchase"
    transaction_reference: Optional[str] = None
    transaction_date: Optional[datetime] = None
    properties: Optional[Dict[str, Any]] = None

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class LoyaltyTransactionRequest(BaseModel):
    """
    Earn or burn request against one loyalty program.

    Build it through :meth:`make_earn_request` or :meth:`make_burn_request`
    so the sign of ``points`` always matches the intent. Any extra keyword
    fields are kept and sent along with the request.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    user_account: UserAccountRef
    loyalty_program_id: int
    points: int

    @classmethod
    def make_earn_request(
        cls,
        user_account: Union[UserAccountById, UserAccountByIdentifier],
        loyalty_program_id: int,
        points: int,
        extra: Optional[Dict[str, Any]] = None,
    ) -> "LoyaltyTransactionRequest":
        return cls._make(user_account, loyalty_program_id, _magnitude(points), extra)

    @classmethod
    def make_burn_request(
        cls,
        user_account: Union[UserAccountById, UserAccountByIdentifier],
        loyalty_program_id: int,
        points: int,
        extra: Optional[Dict[str, Any]] = None,
    ) -> "LoyaltyTransactionRequest":
        return cls._make(user_account, loyalty_program_id, -_magnitude(points), extra)

    @classmethod
    def _make(cls, user_account, loyalty_program_id, points, extra):
        fields = dict(extra or {})
        fields.update(
            user_account=user_account,
            loyalty_program_id=loyalty_program_id,
            points=points,
        )
        return cls(**fields)

    def to_wire(self) -> Dict[str, Any]:
        body = self.model_dump(mode="json", exclude={"user_account"}, exclude_none=True)
        body["user_account"] = user_account_payload(self.user_account)
        return body


def _magnitude(points: int) -> int:
    if isinstance(points, bool) or not isinstance(points, int):
        raise PerxBadRequestError(
            f"Invalid points: {points!r}, expected an integer"
        )
    if points < 0:
        raise PerxBadRequestError(
            f"Invalid points: {points}, expected a non-negative magnitude"
        )
    return points


# ------------------------------
# Response envelopes
# ------------------------------


class ResponseMeta(PerxModel):
    page: Optional[int] = None
    size: Optional[int] = None
    count: Optional[int] = Field(None, description="Total number of records")
    total_pages: Optional[int] = None


class VouchersMeta(ResponseMeta):
    type: Optional[str] = Field(None, description="Echo of the requested type filter")


class RewardsResponse(PerxModel):
    data: List[Reward] = Field(default_factory=list)
    meta: Optional[ResponseMeta] = None


class RewardSearchResultResponse(PerxModel):
    data: List[RewardSearchResult] = Field(default_factory=list)
    meta: Optional[ResponseMeta] = None


class CategoriesResponse(PerxModel):
    data: List[Category] = Field(default_factory=list)
    meta: Optional[ResponseMeta] = None


class VouchersResponse(PerxModel):
    data: List[Voucher] = Field(default_factory=list)
    meta: VouchersMeta = Field(default_factory=VouchersMeta)


class LoyaltyTransactionsHistoryResponse(PerxModel):
    data: List[LoyaltyTransactionHistoryEntry] = Field(default_factory=list)
    meta: ResponseMeta = Field(default_factory=ResponseMeta)


class VoucherResponse(PerxModel):
    data: Voucher


class RewardReservationResponse(PerxModel):
    data: RewardReservation


class LoyaltyProgramResponse(PerxModel):
    data: LoyaltyProgram


class LoyaltyProgramsResponse(PerxModel):
    data: List[LoyaltyProgram] = Field(default_factory=list)


class CustomerResponse(PerxModel):
    data: Customer


class TransactionResponse(PerxModel):
    data: Transaction


class LoyaltyTransactionResponse(PerxModel):
    data: LoyaltyTransaction
