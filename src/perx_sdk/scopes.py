"""
Query scopes for list endpoints.

Each scope is a plain value object; ``to_query_params`` turns it into the
exact query string Perx expects. Unset or empty fields (None, "", 0, []) are
not sent.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional

from .schema import VoucherState


RewardSortBy = Literal["name", "id", "updated_at", "begins_at", "ends_at"]
VoucherSortBy = Literal["issued_date", "valid_to"]
VoucherType = Literal["active", "all", "expired", "gifted", "redeemed", "redemption_in_progress"]
SortOrder = Literal["asc", "desc"]


@dataclass(frozen=True)
class RewardScope:
    """
    Filters for ``GET /rewards``.

    Notes from testing against the live API:
    - ``page`` starts at 1, not 0.
    - ``category_name_prefix`` is a prefix match, not an exact match.
    - ``catalog_id``, ``brand_id`` and ``filter_for_merchants`` accept a
      single value only.
    """

    page: Optional[int] = None
    page_size: Optional[int] = None
    category_name_prefix: Optional[str] = None
    catalog_id: Optional[str] = None
    brand_id: Optional[str] = None
    tag_ids: Optional[List[str]] = None
    filter_by_points_balance: Optional[bool] = None
    filter_for_merchants: Optional[str] = None
    sort_by: Optional[RewardSortBy] = None
    order: Optional[SortOrder] = None

    def to_query_params(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.catalog_id:
            out["filter_for_catalogs"] = self.catalog_id
        if self.tag_ids:
            out["tag_ids[]"] = list(self.tag_ids)
        if self.filter_by_points_balance:
            out["filter_by_points_balance"] = "true"
        if self.brand_id:
            out["filter_for_brands"] = self.brand_id
        if self.sort_by:
            out["sort_by"] = self.sort_by
        if self.order:
            out["order_by"] = self.order
        if self.category_name_prefix:
            out["categories"] = self.category_name_prefix
        if self.page:
            out["page"] = str(self.page)
        if self.page_size:
            out["size"] = str(self.page_size)
        if self.filter_for_merchants:
            out["filter_for_merchants"] = self.filter_for_merchants
        return out


@dataclass(frozen=True)
class VoucherScope:
    """Filters for ``GET /vouchers``. ``size`` defaults to 24, ``page`` to 1."""

    DEFAULT_SIZE = 24
    DEFAULT_PAGE = 1

    size: Optional[int] = None
    page: Optional[int] = None
    sort_by: Optional[VoucherSortBy] = None
    order: Optional[SortOrder] = None
    state: Optional[VoucherState] = None
    type: Optional[VoucherType] = None

    def to_query_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "size": self.size or self.DEFAULT_SIZE,
            "page": self.page or self.DEFAULT_PAGE,
        }
        if self.state:
            params["state"] = VoucherState(self.state).value
        if self.type:
            params["type"] = self.type
        if self.sort_by:
            params["sort_by"] = self.sort_by
        if self.order:
            params["order"] = self.order
        return params
