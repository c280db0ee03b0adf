from __future__ import annotations

import pytest

from ircpipe.errors import ParseError, ParseErrorKind
from ircpipe.irc.parser import (
    parse_irc_message,
    split_first_token,
    strip_trailing_marker,
    trailing_text,
)


@pytest.mark.parametrize(
    ("raw", "prefix", "command", "params"),
    [
        (":nick!u@h PRIVMSG #room :Hello there\n", "nick!u@h", "PRIVMSG", "#room :Hello there"),
        (":server 332 me #foo :Welcome to foo\r\n", "server", "332", "me #foo :Welcome to foo"),
        ("PING :abc123\n", "", "PING", ":abc123"),
        (":irc.example.net NOTICE * :*** Looking up your hostname\n", "irc.example.net", "NOTICE", "* :*** Looking up your hostname"),
    ],
)
def test_parse_well_formed_lines(raw, prefix, command, params):  # type: ignore[no-untyped-def]
    msg = parse_irc_message(raw)
    assert msg.raw == raw
    assert msg.prefix == prefix
    assert msg.command == command
    assert msg.params == params


def test_command_is_upper_cased():  # type: ignore[no-untyped-def]
    assert parse_irc_message(":a ping :x\n").command == "PING"
    assert parse_irc_message("privmsg #c :hi\n").command == "PRIVMSG"


def test_command_without_params():  # type: ignore[no-untyped-def]
    msg = parse_irc_message("QUIT\r\n")
    assert msg.command == "QUIT"
    assert msg.params == ""
    assert msg.prefix == ""


def test_params_keep_inner_spacing():  # type: ignore[no-untyped-def]
    msg = parse_irc_message(":n PRIVMSG #c :two  spaces \n")
    assert msg.params == "#c :two  spaces "


def test_line_without_terminator_but_with_params_parses():  # type: ignore[no-untyped-def]
    msg = parse_irc_message("PING :abc")
    assert msg.command == "PING"
    assert msg.params == ":abc"


@pytest.mark.parametrize(
    ("raw", "kind"),
    [
        ("", ParseErrorKind.EMPTY),
        (":onlyprefix\n", ParseErrorKind.MALFORMED_PREFIX),
        ("NOSPACEORNEWLINE", ParseErrorKind.UNTERMINATED),
        (":prefix NOSPACE", ParseErrorKind.UNTERMINATED),
        (" leading space\n", ParseErrorKind.MISSING_COMMAND),
        (":prefix  double\n", ParseErrorKind.MISSING_COMMAND),
        ("\n", ParseErrorKind.MISSING_COMMAND),
    ],
)
def test_parse_failures(raw, kind):  # type: ignore[no-untyped-def]
    with pytest.raises(ParseError) as exc:
        parse_irc_message(raw)
    assert exc.value.kind is kind
    assert exc.value.raw == raw
    assert exc.value.data["kind"] == kind.value


def test_message_is_immutable():  # type: ignore[no-untyped-def]
    msg = parse_irc_message("PING :x\n")
    with pytest.raises(AttributeError):
        msg.command = "PONG"  # type: ignore[misc]


def test_split_first_token():  # type: ignore[no-untyped-def]
    assert split_first_token("me #foo :topic") == ("me", "#foo :topic")
    assert split_first_token("#foo") is None
    assert split_first_token("") is None


def test_trailing_text_uses_first_delimiter():  # type: ignore[no-untyped-def]
    assert trailing_text("#c :hello: world") == "hello: world"
    assert trailing_text("#c hello") is None
    assert trailing_text("#c :") == ""


def test_strip_trailing_marker():  # type: ignore[no-untyped-def]
    assert strip_trailing_marker(":abc123") == "abc123"
    assert strip_trailing_marker("abc123") == "abc123"
    assert strip_trailing_marker("::x") == ":x"
