"""Design lookup adapters.

``InMemoryDesignCatalog`` serves records registered up front and is used by
the CLI and tests. ``HttpDesignCatalog`` asks the order service over HTTP.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Iterable, Sequence

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from gangsheets.contracts.dtos import DesignRecord
from gangsheets.domain.exceptions import DesignLookupError

logger = logging.getLogger(__name__)


class InMemoryDesignCatalog:
    """Design lookup backed by records held in memory, per tenant.

    Example:
        >>> catalog = InMemoryDesignCatalog()
        >>> catalog.add(1, DesignRecord(order_id=7, design_item_id="7-1",
        ...                             width_px=600, height_px=600))
    """

    def __init__(self) -> None:
        self._records: defaultdict[int, list[DesignRecord]] = defaultdict(list)

    def add(self, tenant_id: int, *records: DesignRecord) -> None:
        self._records[tenant_id].extend(records)

    def clear(self) -> None:
        self._records.clear()

    async def get_design_items_for_orders(
        self,
        tenant_id: int,
        order_ids: Sequence[int],
        product_filter: frozenset[int] | None = None,
    ) -> list[DesignRecord]:
        wanted = set(order_ids)
        return [
            record
            for record in self._records.get(tenant_id, [])
            if record.order_id in wanted
            and (product_filter is None or record.product_id in product_filter)
        ]


class DesignRecordPayload(BaseModel):
    """Wire format of one design record returned by the order service."""

    model_config = ConfigDict(extra="ignore")

    order_id: int
    design_item_id: str
    width_px: int
    height_px: int
    image_url: str | None = None
    line_item_id: int | None = None
    product_id: int | None = None
    position: int = 0
    quantity: int = Field(default=1, ge=0)
    group_key: str | None = None

    def to_record(self) -> DesignRecord:
        return DesignRecord(**self.model_dump())


class DesignItemsResponse(BaseModel):
    items: list[DesignRecordPayload] = Field(default_factory=list)


class HttpDesignCatalog:
    """Design lookup calling the order service's REST API.

    Issues ``GET {base_url}/tenants/{tenant_id}/design-items`` with repeated
    ``order_id`` (and optional ``product_id``) query parameters and expects
    ``{"items": [...]}`` in response.

    Attributes:
        base_url: Base URL of the order service.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = headers or {}

    async def get_design_items_for_orders(
        self,
        tenant_id: int,
        order_ids: Sequence[int],
        product_filter: frozenset[int] | None = None,
    ) -> list[DesignRecord]:
        params: list[tuple[str, Any]] = [("order_id", o) for o in order_ids]
        if product_filter is not None:
            params.extend(("product_id", p) for p in sorted(product_filter))
        url = f"{self.base_url}/tenants/{tenant_id}/design-items"

        try:
            async with httpx.AsyncClient(headers=self.headers) as client:
                response = await client.get(url, params=params, timeout=self.timeout)
                response.raise_for_status()
                payload = DesignItemsResponse.model_validate(response.json())
        except httpx.TimeoutException as e:
            raise DesignLookupError(f"Timed out contacting design service: {e}") from e
        except httpx.HTTPStatusError as e:
            raise DesignLookupError(
                f"Design service returned status {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            raise DesignLookupError(f"Could not reach design service: {e}") from e
        except (PydanticValidationError, ValueError) as e:
            raise DesignLookupError(f"Malformed design service response: {e}") from e

        logger.debug(
            "Design service returned %d records for %d orders",
            len(payload.items),
            len(order_ids),
        )
        return self._records(payload.items)

    @staticmethod
    def _records(items: Iterable[DesignRecordPayload]) -> list[DesignRecord]:
        return [item.to_record() for item in items]
