"""
Command to handle a submitted standup modal.

The modal's private metadata decides the transition:

    NEW                -> post now, or schedule
    EDITING_SCHEDULED  -> cancel the scheduled message, then continue as NEW
    EDITING_POSTED     -> update the posted message in place

The chat platform call comes first; the status record is only written once
the platform accepted it. The parking lot merge that follows is best effort.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from app.commands.base_slack import BaseSlackCommand
from app.core.errors import PlatformCallError
from app.core.message_command import ChangeMessageCommand
from app.models.mixins import utc_now
from app.models.standup_status import StandupStatus
from app.schemas.chat import UserInfo
from app.schemas.standup import (
    MessageType,
    PrivateMetadata,
    StandupStatusCreate,
    StandupStatusUpdate,
    StandupViewData,
)
from app.utils.datefunctions import (
    combine_date_time_in_zone,
    from_epoch_millis,
    parse_local_date_time,
    to_epoch_millis,
)

DEFAULT_TIMEZONE = "UTC"


class SubmissionState(str, Enum):
    NEW = "new"
    EDITING_SCHEDULED = "editing_scheduled"
    EDITING_POSTED = "editing_posted"


class SubmissionOutcome(str, Enum):
    POSTED = "posted"
    SCHEDULED = "scheduled"
    UPDATED = "updated"
    FAILED = "failed"


@dataclass
class SubmissionResult:
    state: SubmissionState
    outcome: SubmissionOutcome
    record: Optional[StandupStatus] = None
    message_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome != SubmissionOutcome.FAILED


def resolve_state(pm: PrivateMetadata) -> SubmissionState:
    if not pm.is_edit:
        return SubmissionState.NEW
    if pm.message_type == MessageType.SCHEDULED:
        return SubmissionState.EDITING_SCHEDULED
    return SubmissionState.EDITING_POSTED


class SubmitStandupCommand(BaseSlackCommand):
    """
    Command to post, schedule or update a standup status from modal input.
    Failures of the primary transition are reported to the user ephemerally
    and leave the store untouched.
    """

    async def execute(self, view_data: StandupViewData) -> SubmissionResult:
        """
        Run the submission.

        Args:
            view_data: Parsed modal submission, including its private metadata.

        Returns:
            SubmissionResult: state, outcome, stored record and message id.
        """
        pm = view_data.pm
        state = resolve_state(pm)
        self.logger.info(
            "Standup submission from %s in %s: %s", pm.user_id, pm.channel_id, state
        )

        wants_schedule = (
            state != SubmissionState.EDITING_POSTED and view_data.wants_schedule
        )
        post_at_ms: Optional[int] = None
        try:
            # Schedule input is rejected before any platform call
            if wants_schedule:
                parse_local_date_time(
                    view_data.schedule_date_str, view_data.schedule_time_str
                )
                if view_data.timezone:
                    post_at_ms = combine_date_time_in_zone(
                        view_data.schedule_date_str,
                        view_data.schedule_time_str,
                        view_data.timezone,
                    )
            user = await self.platform.lookup_user(pm.user_id)
            zone = view_data.timezone or user.timezone or DEFAULT_TIMEZONE
            if wants_schedule and post_at_ms is None:
                post_at_ms = combine_date_time_in_zone(
                    view_data.schedule_date_str, view_data.schedule_time_str, zone
                )
        except (PlatformCallError, ValueError) as e:
            return await self._fail(state, pm, e)

        if state == SubmissionState.EDITING_SCHEDULED:
            await self._discard_scheduled(pm)

        try:
            if state == SubmissionState.EDITING_POSTED:
                result = await self._update_posted(view_data, user)
            elif post_at_ms is not None:
                result = await self._schedule(view_data, user, post_at_ms, zone)
            else:
                result = await self._post(view_data, user)
        except (PlatformCallError, SQLAlchemyError) as e:
            return await self._fail(state, pm, e)

        result.state = state
        return result

    async def _discard_scheduled(self, pm: PrivateMetadata) -> None:
        """Cancel the message being edited. It may already have fired; that is fine."""
        try:
            await self.platform.delete_scheduled_message(pm.channel_id, pm.message_id)
        except PlatformCallError as e:
            self.logger.warning(
                "Scheduled message %s could not be deleted: %s", pm.message_id, e.error
            )
        prior_date = (
            from_epoch_millis(pm.message_date) if pm.message_date else utc_now()
        )
        self.remove_status_records(pm.channel_id, prior_date, pm.user_id)

    async def _post(
        self, view_data: StandupViewData, user: UserInfo
    ) -> SubmissionResult:
        pm = view_data.pm
        message = self.views.build_status_message(user, view_data)
        posted = await self.platform.post_message(message)
        now = utc_now()
        record = self.status_service.put_status(
            self._status_payload(view_data, now, posted.message_id, user.timezone)
        )
        self._merge_parking_lot(view_data, now)

        cmd = ChangeMessageCommand(
            message_id=posted.message_id,
            channel_id=pm.channel_id,
            post_at=to_epoch_millis(now),
            user_id=pm.user_id,
        )
        text, blocks = self.views.build_posted_confirmation(cmd)
        await self.notify(pm.channel_id, pm.user_id, text, blocks)
        return SubmissionResult(
            state=SubmissionState.NEW,
            outcome=SubmissionOutcome.POSTED,
            record=record,
            message_id=posted.message_id,
        )

    async def _schedule(
        self,
        view_data: StandupViewData,
        user: UserInfo,
        post_at_ms: int,
        zone: str,
    ) -> SubmissionResult:
        pm = view_data.pm
        message = self.views.build_status_message(user, view_data)
        # Slack schedules in whole seconds
        scheduled = await self.platform.schedule_message(message, post_at_ms // 1000)
        standup_date = from_epoch_millis(post_at_ms)
        record = self.status_service.put_status(
            self._status_payload(
                view_data,
                standup_date,
                scheduled.message_id,
                zone,
                message_type=MessageType.SCHEDULED,
                schedule_date_str=view_data.schedule_date_str,
                schedule_time_str=view_data.schedule_time_str,
            )
        )
        self._merge_parking_lot(view_data, standup_date)

        self.logger.info(
            "Scheduled message %s for %s in %s",
            scheduled.message_id,
            standup_date.isoformat(),
            pm.channel_id,
        )
        cmd = ChangeMessageCommand(
            message_id=scheduled.message_id,
            channel_id=pm.channel_id,
            post_at=post_at_ms,
            user_id=pm.user_id,
        )
        text, blocks = self.views.build_scheduled_confirmation(cmd, zone)
        await self.notify(pm.channel_id, pm.user_id, text, blocks)
        return SubmissionResult(
            state=SubmissionState.NEW,
            outcome=SubmissionOutcome.SCHEDULED,
            record=record,
            message_id=scheduled.message_id,
        )

    async def _update_posted(
        self, view_data: StandupViewData, user: UserInfo
    ) -> SubmissionResult:
        pm = view_data.pm
        message = self.views.build_status_message(user, view_data)
        updated = await self.platform.update_message(message, pm.message_id)
        message_id = updated.message_id or pm.message_id
        standup_date = (
            from_epoch_millis(pm.message_date) if pm.message_date else utc_now()
        )
        record = self.status_service.update_status(
            StandupStatusUpdate(
                channel_id=pm.channel_id,
                standup_date=standup_date,
                user_id=pm.user_id,
                yesterday=view_data.yesterday,
                today=view_data.today,
                parking_lot=view_data.parking_lot,
                pull_requests=view_data.pull_requests,
                parking_lot_attendees=view_data.attendees,
                message_id=message_id,
                message_type=MessageType.POSTED,
                timezone=user.timezone,
            )
        )
        self._merge_parking_lot(view_data, standup_date)

        self.logger.info("Message %s updated", message_id)
        await self.notify(pm.channel_id, pm.user_id, "Your status was updated")
        return SubmissionResult(
            state=SubmissionState.EDITING_POSTED,
            outcome=SubmissionOutcome.UPDATED,
            record=record,
            message_id=message_id,
        )

    def _status_payload(
        self,
        view_data: StandupViewData,
        standup_date: datetime,
        message_id: str,
        timezone: Optional[str],
        message_type: MessageType = MessageType.POSTED,
        schedule_date_str: Optional[str] = None,
        schedule_time_str: Optional[str] = None,
    ) -> StandupStatusCreate:
        pm = view_data.pm
        return StandupStatusCreate(
            channel_id=pm.channel_id,
            standup_date=standup_date,
            user_id=pm.user_id,
            yesterday=view_data.yesterday,
            today=view_data.today,
            parking_lot=view_data.parking_lot,
            pull_requests=view_data.pull_requests,
            parking_lot_attendees=view_data.attendees,
            message_id=message_id,
            message_type=message_type,
            schedule_date_str=schedule_date_str,
            schedule_time_str=schedule_time_str,
            timezone=timezone,
        )

    def _merge_parking_lot(self, view_data: StandupViewData, date: datetime) -> None:
        """Best effort: the status is already stored and the message already sent."""
        pm = view_data.pm
        try:
            if view_data.parking_lot or view_data.attendees:
                self.parking_lot_service.upsert_item(
                    pm.channel_id,
                    date,
                    pm.user_id,
                    view_data.parking_lot,
                    view_data.attendees,
                )
            elif pm.is_edit:
                # the edit cleared the user's parking lot entry
                self.parking_lot_service.remove_item(pm.channel_id, date, pm.user_id)
        except SQLAlchemyError as e:
            self.logger.error(
                "Parking lot merge failed for %s in %s: %s",
                pm.user_id,
                pm.channel_id,
                e,
            )

    async def _fail(
        self, state: SubmissionState, pm: PrivateMetadata, error: Exception
    ) -> SubmissionResult:
        self.logger.error(
            "Standup submission from %s in %s failed: %s",
            pm.user_id,
            pm.channel_id,
            error,
        )
        await self.notify_error(pm.channel_id, pm.user_id, str(error))
        return SubmissionResult(
            state=state, outcome=SubmissionOutcome.FAILED, error=str(error)
        )
