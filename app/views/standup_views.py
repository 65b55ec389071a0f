"""
Block Kit payloads for the standup modal, channel messages and notices.

Also parses modal submissions back into StandupViewData, so the block and
action ids used here are the only coupling between rendering and the
commands.
"""

from __future__ import annotations

import re
from typing import Any, Optional, Sequence

from app.core.message_command import ChangeMessageCommand
from app.schemas.chat import ChatMessage, UserInfo
from app.schemas.standup import MessageType, PrivateMetadata, StandupViewData
from app.services.parking_lot_service import ParkingLotDisplayItem
from app.utils.datefunctions import print_in_zone

STANDUP_VIEW_CALLBACK_ID = "standup_view"
CHANGE_MESSAGE_BLOCK_ID = "change-msg"

# block_id -> action_id for modal inputs
YESTERDAY = ("yesterday", "yesterday-action")
TODAY = ("today", "today-action")
PARKING_LOT = ("parking-lot", "parking-lot-action")
PARTICIPANTS = ("parking-lot-participants", "parking-lot-participants-action")
PULL_REQUESTS = ("pull-requests", "pull-requests-action")
SCHEDULE_DATE = ("schedule-date", "schedule-date-action")
SCHEDULE_TIME = ("schedule-time", "schedule-time-action")

EDIT_MESSAGE = "edit-message"
EDIT_SCHEDULED_MESSAGE = "edit-scheduled-message"
DELETE_SCHEDULED_MESSAGE = "delete-scheduled-message"

PARKING_LOT_ALIASES = ("parking-lot", "parking_lot", "parkinglot", "-p")

# Five-digit story numbers written as inline code, e.g. `12345`
STORY_PATTERN = re.compile(r"`(\d{5})`")
STORY_HINT_BLOCK_ID = "story-hint"
STORY_HINT_TEXT = (
    "Five-digit numbers surrounded by backticks, like `12345`, "
    "are linked to their stories."
)

HELP_TEXT = (
    "`/standup` and enter your status in the modal\n"
    "`/standup [parking-lot | parking_lot | parkinglot | -p]` to display items "
    "in the parking lot (visible only to you)\n"
    "`/standup post [parking-lot | parking_lot | parkinglot | -p]` to post "
    "parking lot items to channel"
)


def _plain(text: str) -> dict[str, Any]:
    return {"type": "plain_text", "text": text, "emoji": True}


def _mrkdwn(text: str) -> dict[str, Any]:
    return {"type": "mrkdwn", "text": text}


def _text_input(
    ids: tuple[str, str],
    label: str,
    initial: Optional[str],
    optional: bool = False,
) -> dict[str, Any]:
    block_id, action_id = ids
    element: dict[str, Any] = {
        "type": "plain_text_input",
        "action_id": action_id,
        "multiline": True,
    }
    if initial:
        element["initial_value"] = initial
    return {
        "type": "input",
        "block_id": block_id,
        "optional": optional,
        "label": _plain(label),
        "element": element,
    }


def _button(text: str, action_id: str, value: str, style: Optional[str] = None):
    button: dict[str, Any] = {
        "type": "button",
        "text": _plain(text),
        "action_id": action_id,
        "value": value,
    }
    if style:
        button["style"] = style
    return button


class StandupViewBuilder:
    """
    Builds and parses the Slack payloads used by the standup commands.

    With a story_url, `12345` in status text renders as a link to that story.
    """

    def __init__(self, story_url: Optional[str] = None) -> None:
        self.story_url = story_url

    def link_stories(self, text: Optional[str]) -> Optional[str]:
        if not text or not self.story_url:
            return text
        return STORY_PATTERN.sub(
            lambda m: f"<{self.story_url}{m.group(1)}|{m.group(1)}>", text
        )

    def build_modal_view(
        self,
        pm: PrivateMetadata,
        user: UserInfo,
        initial: Optional[StandupViewData] = None,
    ) -> dict[str, Any]:
        """Input modal. Posted messages cannot be rescheduled, so no schedule inputs."""
        participants: dict[str, Any] = {
            "type": "multi_users_select",
            "action_id": PARTICIPANTS[1],
            "placeholder": _plain("Select users"),
        }
        if initial and initial.attendees:
            participants["initial_users"] = list(initial.attendees)

        blocks = [
            _text_input(YESTERDAY, "Yesterday", initial.yesterday if initial else None),
            _text_input(TODAY, "Today", initial.today if initial else None),
            _text_input(
                PARKING_LOT,
                "Parking Lot",
                initial.parking_lot if initial else None,
                optional=True,
            ),
            {
                "type": "input",
                "block_id": PARTICIPANTS[0],
                "optional": True,
                "label": _plain("Parking Lot Participants"),
                "element": participants,
            },
            _text_input(
                PULL_REQUESTS,
                "Pull Requests",
                initial.pull_requests if initial else None,
                optional=True,
            ),
        ]
        if self.story_url:
            blocks.insert(
                0,
                {
                    "type": "context",
                    "block_id": STORY_HINT_BLOCK_ID,
                    "elements": [_mrkdwn(STORY_HINT_TEXT)],
                },
            )
        editing_posted = pm.is_edit and pm.message_type == MessageType.POSTED
        if not editing_posted:
            date_picker: dict[str, Any] = {
                "type": "datepicker",
                "action_id": SCHEDULE_DATE[1],
            }
            time_picker: dict[str, Any] = {
                "type": "timepicker",
                "action_id": SCHEDULE_TIME[1],
                "timezone": (initial.timezone if initial else None) or user.timezone,
            }
            if initial and initial.schedule_date_str:
                date_picker["initial_date"] = initial.schedule_date_str
            if initial and initial.schedule_time_str:
                time_picker["initial_time"] = initial.schedule_time_str
            if not time_picker["timezone"]:
                del time_picker["timezone"]
            blocks.append(
                {
                    "type": "input",
                    "block_id": SCHEDULE_DATE[0],
                    "optional": True,
                    "label": _plain("Schedule Date"),
                    "element": date_picker,
                }
            )
            blocks.append(
                {
                    "type": "input",
                    "block_id": SCHEDULE_TIME[0],
                    "optional": True,
                    "label": _plain("Schedule Time"),
                    "element": time_picker,
                }
            )

        title = "Edit Standup" if pm.is_edit else "Standup"
        return {
            "type": "modal",
            "callback_id": STANDUP_VIEW_CALLBACK_ID,
            "private_metadata": pm.to_transit(),
            "title": _plain(title),
            "submit": _plain("Submit"),
            "close": _plain("Cancel"),
            "blocks": blocks,
        }

    def parse_view_submission(self, view: dict[str, Any]) -> StandupViewData:
        """Read submitted values. Raises KeyError/ValueError on a foreign view."""
        pm = PrivateMetadata.from_transit(view["private_metadata"])
        values = view["state"]["values"]

        def value(ids: tuple[str, str], key: str = "value") -> Any:
            block = values.get(ids[0]) or {}
            return (block.get(ids[1]) or {}).get(key)

        timezone = value(SCHEDULE_TIME, "timezone")
        return StandupViewData(
            pm=pm,
            yesterday=value(YESTERDAY) or "",
            today=value(TODAY) or "",
            parking_lot=value(PARKING_LOT),
            attendees=value(PARTICIPANTS, "selected_users") or [],
            pull_requests=value(PULL_REQUESTS),
            schedule_date_str=value(SCHEDULE_DATE, "selected_date"),
            schedule_time_str=value(SCHEDULE_TIME, "selected_time"),
            timezone=timezone,
        )

    def build_status_message(
        self,
        user: UserInfo,
        view_data: StandupViewData,
    ) -> ChatMessage:
        """The channel message, posted under the submitting user's name and avatar."""
        sections = [
            f"*Yesterday*\n{self.link_stories(view_data.yesterday)}",
            f"*Today*\n{self.link_stories(view_data.today)}",
        ]
        if view_data.parking_lot or view_data.attendees:
            parking_lot = self.link_stories(view_data.parking_lot) or ""
            if view_data.attendees:
                names = ", ".join(f"<@{a}>" for a in view_data.attendees)
                parking_lot = f"{parking_lot}\n_Attendees:_ {names}".strip()
            sections.append(f"*Parking Lot*\n{parking_lot}")
        if view_data.pull_requests:
            pull_requests = self.link_stories(view_data.pull_requests)
            sections.append(f"*Pull Requests*\n{pull_requests}")
        blocks = [{"type": "section", "text": _mrkdwn(s)} for s in sections]
        return ChatMessage(
            channel_id=view_data.pm.channel_id,
            text=user.name,
            blocks=blocks,
            username=user.name,
            icon_url=user.image_url,
        )

    def build_posted_confirmation(
        self, cmd: ChangeMessageCommand
    ) -> tuple[str, list[dict[str, Any]]]:
        text = "Your status was posted"
        blocks = [
            {"type": "section", "text": _mrkdwn(text)},
            {
                "type": "actions",
                "block_id": CHANGE_MESSAGE_BLOCK_ID,
                "elements": [
                    _button("Edit", EDIT_MESSAGE, cmd.format_for_transfer()),
                ],
            },
        ]
        return text, blocks

    def build_scheduled_confirmation(
        self, cmd: ChangeMessageCommand, timezone: str
    ) -> tuple[str, list[dict[str, Any]]]:
        text = f"Your status is scheduled for {print_in_zone(cmd.post_at, timezone)}"
        value = cmd.format_for_transfer()
        blocks = [
            {"type": "section", "text": _mrkdwn(text)},
            {
                "type": "actions",
                "block_id": CHANGE_MESSAGE_BLOCK_ID,
                "elements": [
                    _button("Edit", EDIT_SCHEDULED_MESSAGE, value),
                    _button("Delete", DELETE_SCHEDULED_MESSAGE, value, style="danger"),
                ],
            },
        ]
        return text, blocks

    def build_parking_lot_text(self, items: Sequence[ParkingLotDisplayItem]) -> str:
        if not items:
            return ":car: *Parking Lot*\nNo parking lot items for today"
        lines = [":car: *Parking Lot*"]
        for item in items:
            line = f"*{item.user_name}*: {self.link_stories(item.content)}".rstrip()
            if item.attendee_ids:
                line += " (" + ", ".join(f"<@{a}>" for a in item.attendee_ids) + ")"
            lines.append(line)
        return "\n".join(lines)

    def build_error_text(self, message: str) -> str:
        return f":x: {message}"

    def build_error_view(self, message: str) -> dict[str, Any]:
        return {
            "type": "modal",
            "title": _plain("Standup"),
            "close": _plain("Close"),
            "blocks": [
                {"type": "section", "text": _mrkdwn(self.build_error_text(message))}
            ],
        }
