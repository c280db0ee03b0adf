from __future__ import annotations

import json
import logging
import re
from pathlib import Path

import ircpipe
from ircpipe.logs import logger as global_logger
from ircpipe.logs import reload_event_templates
from ircpipe.logs.event_catalog import EVENT_TEMPLATES, load_event_templates
from ircpipe.logs.logger import ChatLogger

PACKAGE_ROOT = Path(ircpipe.__file__).parent


def test_logger_template_and_fallback(caplog) -> None:  # type: ignore[no-untyped-def]
    log = ChatLogger("ircpipe.test_logger")
    caplog.set_level(logging.INFO)

    log.log_event("irc", "join", nick="tester", channel="#FOO")
    log.log_event("custom_domain", "custom_action", extra_field=123)

    msgs = [r.message for r in caplog.records]
    if not any("Joining #FOO" in m for m in msgs):
        raise AssertionError("Expected join template message in logs")
    if not any("[tester@#FOO" in m for m in msgs):
        raise AssertionError("Expected nick@channel prefix")
    if not any("custom domain: custom action" in m for m in msgs):
        raise AssertionError("Expected derived fallback for unknown template")


def test_logger_template_missing_field_falls_back_to_raw_template(caplog) -> None:  # type: ignore[no-untyped-def]
    log = ChatLogger("ircpipe.test_logger2")
    caplog.set_level(logging.INFO)
    log.log_event("irc", "connect_start")
    assert any("Connecting to {network}" in r.message for r in caplog.records)


def test_logger_debug_includes_context(caplog, monkeypatch) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.setenv("DEBUG", "1")
    log = ChatLogger("ircpipe.test_logger3")
    caplog.set_level(logging.DEBUG)
    log.log_event("irc", "ping", level=logging.DEBUG, payload="abc")
    first = caplog.records[0].message
    assert first.startswith("irc_ping")
    assert len(first.split("[")[0]) >= ChatLogger.EVENT_NAME_WIDTH
    assert "payload='abc'" in first


def test_global_logger_uses_package_name() -> None:
    assert global_logger.logger.name == "ircpipe"


def test_event_template_keys_lowercase():  # type: ignore[no-untyped-def]
    for domain, action in EVENT_TEMPLATES:
        if domain.lower() != domain or action.lower() != action:
            raise AssertionError(f"Template key not lowercase: {(domain, action)}")


_EVENT_CALL = re.compile(
    r'(?:log_event|emit)\(\s*"(?P<domain>[a-z_]+)",\s*(?:"(?P<a1>[a-z_]+)" if \w+ else "(?P<a2>[a-z_]+)"'
    r'|"(?P<action>[a-z_]+)"|(?P<var>action))'
)


def test_every_emitted_event_has_a_template():  # type: ignore[no-untyped-def]
    missing: list[tuple[str, str]] = []
    for path in PACKAGE_ROOT.rglob("*.py"):
        for match in _EVENT_CALL.finditer(path.read_text(encoding="utf-8")):
            domain = match.group("domain")
            for action in (match.group("action"), match.group("a1"), match.group("a2")):
                if action and (domain, action) not in EVENT_TEMPLATES:
                    missing.append((domain, action))
    assert not missing, f"Events without templates: {sorted(set(missing))}"


def test_missing_catalog_file_is_not_fatal(tmp_path):  # type: ignore[no-untyped-def]
    templates = load_event_templates(tmp_path / "absent.json")
    assert templates == {("app", "load_error"): "Event templates file missing"}


def test_reload_from_custom_file(tmp_path):  # type: ignore[no-untyped-def]
    path = tmp_path / "templates.json"
    path.write_text(json.dumps({"demo": {"hello": "Hello {name}", "skip": 3}}), encoding="utf-8")
    try:
        reload_event_templates(path)
        from ircpipe.logs import event_catalog

        assert event_catalog.EVENT_TEMPLATES == {("demo", "hello"): "Hello {name}"}
    finally:
        reload_event_templates()
