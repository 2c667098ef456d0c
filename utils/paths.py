"""
Программа: «Forum» – серверный форум для обсуждений.
Модуль: utils/paths.py – разбор путей вида /<ресурс>/<id>[/<действие>].

Путь разбивается на сегменты; идентификатор проверяется до выбора действия
и до проверки входа пользователя.
"""

import re
from dataclasses import dataclass

from werkzeug.exceptions import NotFound
from werkzeug.routing import BaseConverter

from errors import MalformedIdentifier
from utils.validation import MAX_ID

VOTE_ACTIONS = ("like", "dislike")

_ID_RE = re.compile(r"[+-]?[0-9]+")


class SegmentsConverter(BaseConverter):
    """Захватывает остаток пути целиком, включая пустые сегменты."""

    regex = ".*"
    part_isolating = False
    weight = 300


@dataclass(frozen=True)
class ResourcePath:
    resource: str
    target_id: int
    action: str | None = None


def parse_resource_path(resource: str, tail: str, id_label: str | None = None, actions=VOTE_ACTIONS) -> ResourcePath:
    """Разбирает часть пути после `/<resource>/`.

    Пустой или нечисловой идентификатор, а также пустые сегменты дают
    MalformedIdentifier (400); неизвестное действие или лишние сегменты – 404.
    """
    label = (id_label or resource).lower()
    segments = tail.split("/") if tail else [""]

    if segments[0] == "":
        raise MalformedIdentifier(f"{label.capitalize()} ID is required.")
    if any(segment == "" for segment in segments[1:]):
        raise MalformedIdentifier("Invalid URL format: empty path segment.")
    if len(segments) > 2:
        raise NotFound()

    raw_id = segments[0]
    if not _ID_RE.fullmatch(raw_id) or abs(int(raw_id)) > MAX_ID:
        raise MalformedIdentifier(f"Invalid {label} ID format. Must be a number.")
    target_id = int(raw_id)
    if target_id <= 0:
        raise MalformedIdentifier(f"{label.capitalize()} ID must be a positive number.")

    action = segments[1] if len(segments) == 2 else None
    if action is not None and action not in actions:
        raise NotFound()

    return ResourcePath(resource=resource, target_id=target_id, action=action)
