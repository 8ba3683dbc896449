"""
Activity audit service.

Appends immutable activity records for gated actions and serves the
filtered, paginated activity log. Writes are best-effort: a failed or slow
append is logged and swallowed so it never blocks the business operation
that triggered it.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from listings.domain.entities.activity import (
    ActivityFilter,
    ActivityPage,
    ActivityRecord,
    Pagination,
    RequestContext,
)
from listings.domain.exceptions import AuditWriteFailure, PersistenceError, ValidationException
from listings.shared.enums import ActivityAction, ActivityStatus, ResourceKind
from listings.shared.telemetry.logging import get_logger
from listings.shared.utils import MonotonicClock, audit_clock, generate_cuid

if TYPE_CHECKING:
    from listings.application.interfaces.repositories import IActivityStore

logger = get_logger(__name__)


class ActivityService:
    """
    Audit recorder and activity log reader.

    Record timestamps come from a monotonic clock shared by every recorder in
    the process, so per-actor creation order survives concurrent writers.
    """

    def __init__(
        self,
        store: "IActivityStore",
        *,
        write_timeout: float = 5.0,
        read_timeout: float = 10.0,
        max_page_size: int = 100,
        clock: MonotonicClock = audit_clock,
    ) -> None:
        self.store = store
        self.write_timeout = write_timeout
        self.read_timeout = read_timeout
        self.max_page_size = max_page_size
        self.clock = clock

    async def record(
        self,
        actor_id: str | None,
        action: ActivityAction,
        resource_kind: ResourceKind | str,
        resource_id: str | None = None,
        detail: str | None = None,
        context: RequestContext | None = None,
        status: ActivityStatus = ActivityStatus.SUCCESS,
    ) -> ActivityRecord | None:
        """
        Append one activity record.

        Returns the stored record, or None when the append failed. Never
        raises: storage errors and timeouts are logged as AuditWriteFailure.
        The append runs to completion even if the awaiting caller is
        cancelled.
        """
        context = context or RequestContext()
        kind = resource_kind.value if isinstance(resource_kind, ResourceKind) else resource_kind
        record = ActivityRecord(
            id=generate_cuid(),
            actor_id=str(actor_id) if actor_id is not None else None,
            action=ActivityAction(action),
            resource_kind=kind,
            status=ActivityStatus(status),
            created_at=self.clock.now(),
            resource_id=str(resource_id) if resource_id is not None else None,
            detail=detail,
            ip_address=context.ip_address,
            user_agent=context.user_agent,
        )

        write = asyncio.ensure_future(
            asyncio.wait_for(self.store.append(record), timeout=self.write_timeout)
        )
        try:
            return await asyncio.shield(write)
        except asyncio.CancelledError:
            # Caller went away; the shielded write keeps running on its own.
            write.add_done_callback(self._log_detached_result)
            raise
        except Exception as e:
            self._report_failure(record, e)
            return None

    def _log_detached_result(self, task: "asyncio.Future[ActivityRecord]") -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning("Detached activity write failed: %s", error)

    def _report_failure(self, record: ActivityRecord, error: BaseException) -> None:
        reason = "timed out" if isinstance(error, TimeoutError) else str(error)
        failure = AuditWriteFailure(reason)
        logger.warning(
            "%s (actor=%s action=%s resource=%s status=%s)",
            failure.message,
            record.actor_id,
            record.action.value,
            record.resource_kind,
            record.status.value,
        )

    async def list(
        self,
        filters: ActivityFilter | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> ActivityPage:
        """Return one page of matching records, most recent first."""
        self._validate_page(page, page_size)
        filters = filters or ActivityFilter()

        try:
            total = await asyncio.wait_for(self.store.count(filters), timeout=self.read_timeout)
            pagination = Pagination.build(page, page_size, total)
            records = await asyncio.wait_for(
                self.store.find(filters, offset=pagination.offset, limit=page_size),
                timeout=self.read_timeout,
            )
        except TimeoutError as e:
            raise PersistenceError("Activity query timed out", "ACTIVITY_QUERY_TIMEOUT") from e

        return ActivityPage(records=records, pagination=pagination)

    async def list_for_actor(
        self, actor_id: str, page: int = 1, page_size: int = 20
    ) -> ActivityPage:
        """Activity history of a single principal."""
        return await self.list(ActivityFilter(actor_id=actor_id), page, page_size)

    def _validate_page(self, page: int, page_size: int) -> None:
        if page < 1:
            raise ValidationException("page must be >= 1", field="page")
        if not 1 <= page_size <= self.max_page_size:
            raise ValidationException(
                f"limit must be between 1 and {self.max_page_size}", field="limit"
            )
