"""Human-readable text for ``(domain, action)`` log events.

Templates live in ``event_templates.json`` next to this module, grouped by
domain: ``{"irc": {"join": "Joining {channel}"}}``.
"""

from __future__ import annotations

import json
from pathlib import Path

TEMPLATES_PATH = Path(__file__).with_name("event_templates.json")

EVENT_TEMPLATES: dict[tuple[str, str], str] = {}


def load_event_templates(path: Path | None = None) -> dict[tuple[str, str], str]:
    """Flatten the JSON catalog into ``{(domain, action): template}``.

    Non-string templates are ignored. An unreadable catalog yields a single
    ``app/load_error`` entry; events then fall back to derived text.
    """
    try:
        catalog = json.loads((path or TEMPLATES_PATH).read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {("app", "load_error"): "Event templates file missing"}
    except (OSError, ValueError) as e:
        return {("app", "load_error"): f"Event templates unreadable: {e}"}
    if not isinstance(catalog, dict):
        return {("app", "load_error"): "Event templates must be a JSON object"}
    return {
        (domain, action): template
        for domain, actions in catalog.items()
        if isinstance(actions, dict)
        for action, template in actions.items()
        if isinstance(template, str)
    }


def reload_event_templates(path: Path | None = None) -> None:
    """Replace the active catalog in place so existing references see it."""
    templates = load_event_templates(path)
    EVENT_TEMPLATES.clear()
    EVENT_TEMPLATES.update(templates)


reload_event_templates()

__all__ = ["EVENT_TEMPLATES", "load_event_templates", "reload_event_templates"]
