# src/taskify_sync/widget/strings.py

"""Localized strings for the widget and notification surfaces."""

from __future__ import annotations

from collections.abc import Callable
from typing import Final

from ..tasks.task_models import Language

PluralRule = Callable[[int], str]


def _plural_bg(n: int) -> str:
    return "one" if n == 1 else "other"


def _plural_en(n: int) -> str:
    return "one" if n == 1 else "other"


_PLURAL_RULES: Final[dict[Language, PluralRule]] = {
    Language.BG: _plural_bg,
    Language.EN: _plural_en,
}

_COUNT_TITLE: Final[dict[Language, dict[str, str]]] = {
    Language.BG: {"one": "{n} задача за деня", "other": "{n} задачи за деня"},
    Language.EN: {"one": "{n} task for today", "other": "{n} tasks for today"},
}

_TEXT: Final[dict[Language, dict[str, str]]] = {
    Language.BG: {
        "empty": "Всичко е наред!",
        "notification_title": "Напомняне",
        "notification_body": "Имаш задача за изпълнение",
    },
    Language.EN: {
        "empty": "All done!",
        "notification_title": "Reminder",
        "notification_body": "You have a task to complete",
    },
}


def plural_category(language: Language, n: int) -> str:
    return _PLURAL_RULES[language](n)


def count_title(language: Language, n: int) -> str:
    forms = _COUNT_TITLE[language]
    return forms[plural_category(language, n)].format(n=n)


def text(language: Language, name: str) -> str:
    return _TEXT[language][name]
