# src/taskify_sync/cli/commands.py

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any, cast

from ..core.state import AppState
from ..notifications.intake import PushPayload
from ..tasks.snapshot_codec import pending
from ..tasks.task_models import Language
from ..widget.actions import ACTION_LAUNCH_APP

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console host (/help, /tap, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str, emit: CommandEmitter | None = None) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _parse_int(raw: str, what: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{what} must be an integer, got {raw!r}") from None


def _describe_surface(surface_id: int, data: dict[str, Any] | None) -> str:
    if not data:
        return f"  widget {surface_id}: (not drawn yet)"
    if data.get("empty_visible"):
        return f"  widget {surface_id}: {data.get('empty_text', '')}"
    lines = [f"  widget {surface_id}: {data.get('title', '')}"]
    for row in data.get("rows") or []:
        if isinstance(row, dict) and row.get("visible"):
            lines.append(f"    [{int(row.get('slot', 0)) + 1}] ☐ {row.get('title', '')}")
    return "\n".join(lines)


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    tasks = state.app.load_tasks()
    surfaces = state.widget_host.placed_surface_ids()
    return (
        "Status:\n"
        f"  Store: {state.settings.store_path} ({state.store.namespace}, {len(state.store.keys())} key(s))\n"
        f"  Tasks: {len(tasks)} total, {len(pending(tasks))} pending\n"
        f"  Language: {state.renderer.read_language().value}\n"
        f"  Widgets placed: {', '.join(str(s) for s in surfaces) or 'none'}\n"
        f"  Active notifications: {len(state.tray.active())}\n"
        f"  Matrix push: {'ON' if state.settings.matrix_enabled else 'OFF'}"
    )


def cmd_tasks(state: AppState, args: list[str]) -> str:
    tasks = state.app.load_tasks()
    if not tasks:
        return "No tasks."
    lines = ["Tasks:"]
    for t in tasks:
        mark = "x" if t.is_completed else " "
        origin = " (from widget)" if t.completed_from_widget else ""
        lines.append(f"  [{mark}] {t.key}: {t.title}{origin}")
    return "\n".join(lines)


def cmd_add(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /add <title>"
    task = state.app.add_task(" ".join(args))
    return f"Added task {task.key}: {task.title}"


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <key>"
    key = _parse_int(args[0], "key")
    return f"Task {key} completed." if state.app.set_completed(key, True) else f"No task with key {key}."


def cmd_undo(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /undo <key>"
    key = _parse_int(args[0], "key")
    return f"Task {key} reopened." if state.app.set_completed(key, False) else f"No task with key {key}."


def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <key>"
    key = _parse_int(args[0], "key")
    return f"Task {key} removed." if state.app.remove_task(key) else f"No task with key {key}."


def cmd_lang(state: AppState, args: list[str]) -> str:
    if not args:
        return f"Language is {state.app.language(state.settings.default_language).value}. Use /lang bg | /lang en."
    try:
        lang = state.app.set_language(args[0])
    except ValueError:
        return f"Unsupported language {args[0]!r}. Choose one of: {', '.join(l.value for l in Language)}."
    return f"Language set to {lang.value}."


def cmd_widgets(state: AppState, args: list[str]) -> str:
    host = state.widget_host
    ids = host.placed_surface_ids()
    if not ids:
        return "No widgets placed. Use /place."
    lines = ["Widgets:"]
    for surface_id in ids:
        lines.append(_describe_surface(surface_id, host.read_surface(surface_id)))
    return "\n".join(lines)


def cmd_place(state: AppState, args: list[str]) -> str:
    surface_id = _parse_int(args[0], "widget id") if args else None
    surface_id = state.widget_host.place_surface(surface_id)
    # The host sends the first update right after placement.
    state.relay.on_update([surface_id])
    return f"Widget {surface_id} placed."


def cmd_unplace(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /unplace <widget id>"
    surface_id = _parse_int(args[0], "widget id")
    return f"Widget {surface_id} removed." if state.widget_host.remove_surface(surface_id) else f"No widget {surface_id}."


def _open_app(emit: CommandEmitter | None) -> str:
    if emit:
        emit("[APP] launching main application")
    return "App opened."


def cmd_tap(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /tap <widget id> <row>  -> tap the check control of a row (1-based)
    """
    if len(args) < 2:
        return "Usage: /tap <widget id> <row>"
    surface_id = _parse_int(args[0], "widget id")
    slot = _parse_int(args[1], "row") - 1

    intent = state.widget_host.resolve_tap(surface_id, slot)
    if intent is None:
        return f"Nothing to tap at widget {surface_id} row {slot + 1}."
    if intent.action == ACTION_LAUNCH_APP:
        return _open_app(emit)

    state.widget_host.send_broadcast(intent)
    return _describe_surface(surface_id, state.widget_host.read_surface(surface_id))


def cmd_open(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /open <widget id>  -> tap the widget container
    """
    if not args:
        return "Usage: /open <widget id>"
    surface_id = _parse_int(args[0], "widget id")
    intent = state.widget_host.resolve_tap(surface_id, None)
    if intent is None or intent.action != ACTION_LAUNCH_APP:
        return f"Widget {surface_id} has no container action."
    return _open_app(emit)


def cmd_refresh(state: AppState, args: list[str]) -> str:
    result = state.bridge.handle_method_call("updateWidget")
    return f"updateWidget -> {result.status.value}"


def cmd_push(state: AppState, args: list[str]) -> str:
    """
    /push <json | text>  -> deliver a push payload to the background handler
    """
    payload = PushPayload.from_text(" ".join(args))
    request = asyncio.run(state.intake.on_background_message(payload))
    return f"Notification shown (tag={request.tag})."


def cmd_click(state: AppState, args: list[str]) -> str:
    """
    /click [tag]  -> click a displayed notification (latest if no tag)
    """
    active = state.tray.active()
    if not active:
        return "No notifications to click."
    notification = state.tray.get(args[0]) if args else active[-1]
    if notification is None:
        return f"No notification with tag {args[0]!r}."
    outcome = asyncio.run(state.intake.on_notification_click(notification))
    return f"Notification {notification.tag}: {outcome.value}."


def cmd_sync(state: AppState, args: list[str]) -> str:
    """
    /sync  -> pick up completions made from the widget and acknowledge them
    """
    done = state.app.widget_completions()
    if not done:
        return "No widget completions to pick up."
    state.app.acknowledge_widget_completions(t.key for t in done)
    return "Picked up widget completions: " + ", ".join(f"{t.key} ({t.title})" for t in done)


def cmd_prefs(state: AppState, args: list[str]) -> str:
    """
    /prefs            -> list keys in the shared store namespace
    /prefs rm <key>   -> delete one key (e.g. to reset a corrupt snapshot)
    """
    store = state.store
    if args and args[0].lower() == "rm":
        if len(args) < 2:
            return "Usage: /prefs rm <key>"
        key = args[1]
        if not store.contains(key):
            return f"No key {key!r} in {store.namespace}."
        store.remove(key)
        if key in (state.settings.tasks_key, state.settings.language_key):
            state.relay.on_update()
        return f"Removed {key!r}."

    keys = store.keys()
    if not keys:
        return f"No keys in {store.namespace}."
    lines = [f"Keys in {store.namespace}:"]
    for key in keys:
        lines.append(f"  {key} ({len(store.get_string(key) or '')} chars)")
    return "\n".join(lines)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show store, tasks, widgets and notifications.")
registry.register("tasks", cmd_tasks, help_text="List tasks in the shared snapshot.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <title>.")
registry.register("done", cmd_done, help_text="Complete a task in the app: /done <key>.")
registry.register("undo", cmd_undo, help_text="Reopen a task: /undo <key>.")
registry.register("rm", cmd_rm, help_text="Remove a task: /rm <key>.")
registry.register("lang", cmd_lang, help_text="Show or set language: /lang bg | /lang en.")
registry.register("widgets", cmd_widgets, help_text="Show placed widgets as drawn.")
registry.register("place", cmd_place, help_text="Place a widget: /place [id].")
registry.register("unplace", cmd_unplace, help_text="Remove a widget: /unplace <id>.")
registry.register("tap", cmd_tap, help_text="Tap a widget row check: /tap <widget id> <row>.")
registry.register("open", cmd_open, help_text="Tap a widget container: /open <widget id>.")
registry.register("refresh", cmd_refresh, help_text="Call updateWidget on the app bridge.")
registry.register("push", cmd_push, help_text="Deliver a push payload: /push <json | text>.")
registry.register("click", cmd_click, help_text="Click a notification: /click [tag].")
registry.register("sync", cmd_sync, help_text="Pick up completions made from the widget.")
registry.register("prefs", cmd_prefs, help_text="List shared store keys or delete one: /prefs [rm <key>].")
