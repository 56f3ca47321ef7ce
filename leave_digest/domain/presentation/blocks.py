from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable

from leave_digest.domain.models import EnrichedLeaveEntry, RawLeaveRecord
from leave_digest.domain.presentation.grouper import DepartmentGroup, group_by_department

LEAVE_HEADER = ":wave: On leave"
HOLIDAYS_HEADER = ":calendar: Holidays"
NOBODY_ON_LEAVE = "*Nobody is on leave today*"


@dataclass
class Document:
    """
    Назначение:
        Сообщение Slack в виде списка блоков Block Kit.
    """

    blocks: list[dict[str, Any]] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        return {"blocks": self.blocks}


def _header(text: str) -> dict[str, Any]:
    return {
        "type": "header",
        "text": {"type": "plain_text", "text": text, "emoji": True},
    }


def _text(text: str, **style: bool) -> dict[str, Any]:
    element: dict[str, Any] = {"type": "text", "text": text}
    if style:
        element["style"] = dict(style)
    return element


def _bullet_list(items: list[dict[str, Any]]) -> dict[str, Any]:
    return {"type": "rich_text_list", "style": "bullet", "elements": items}


def _holidays_block(holidays: list[RawLeaveRecord]) -> dict[str, Any]:
    items = [
        {"type": "rich_text_section", "elements": [_text(h.display_name)]}
        for h in holidays
    ]
    return {"type": "rich_text", "elements": [_bullet_list(items)]}


def _department_block(group: DepartmentGroup) -> dict[str, Any]:
    items = [
        {
            "type": "rich_text_section",
            "elements": [
                _text(entry.display_name, bold=True),
                _text(f" — {entry.return_phrase}"),
            ],
        }
        for entry in group.entries
    ]
    return {
        "type": "rich_text",
        "elements": [
            {"type": "rich_text_section", "elements": [_text(group.label, bold=True)]},
            _bullet_list(items),
        ],
    }


def render(
    entries: Iterable[EnrichedLeaveEntry],
    reference_date: date,
    holidays: Iterable[RawLeaveRecord] = (),
) -> Document:
    """
    Назначение:
        Строит сообщение о текущих отсутствиях.

    Входные данные:
        entries: текущие периоды, обогащённые справочником
        reference_date: дата отчёта
        holidays: праздники компании, действующие в дату отчёта

    Выходные данные:
        Document
            - праздники (если есть): заголовок + список
            - отпуска (если есть): заголовок + по секции на отдел
            - иначе единственный блок-заглушка
    """
    document = Document()

    holiday_list = sorted(holidays, key=lambda h: h.display_name)
    if holiday_list:
        document.blocks.append(_header(HOLIDAYS_HEADER))
        document.blocks.append(_holidays_block(holiday_list))

    groups = group_by_department(entries, reference_date)
    if groups:
        document.blocks.append(_header(LEAVE_HEADER))
        for group in groups:
            document.blocks.append(_department_block(group))

    if not document.blocks:
        document.blocks.append(
            {
                "type": "section",
                "text": {"type": "mrkdwn", "text": NOBODY_ON_LEAVE},
            }
        )
    return document


__all__ = ["Document", "HOLIDAYS_HEADER", "LEAVE_HEADER", "NOBODY_ON_LEAVE", "render"]
