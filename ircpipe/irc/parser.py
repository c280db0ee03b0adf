"""IRC message parsing utilities."""

from __future__ import annotations

from ..errors import ParseError, ParseErrorKind
from .models import IRCMessage

PREFIX_MARKER = ":"
TRAILING_MARKER = ":"
_COMMAND_TERMINATORS = (" ", "\r", "\n")


def parse_irc_message(raw_line: str) -> IRCMessage:
    """Split one raw protocol line into prefix, command and params.

    Only the prefix and command are interpreted. Everything after the
    command token is kept verbatim (minus the line terminator) because its
    layout depends on the command.

    Raises:
        ParseError: ``EMPTY`` for a zero-length line, ``MALFORMED_PREFIX`` when
            a prefix is not followed by a space, ``UNTERMINATED`` when the
            command token runs to the end of the input, ``MISSING_COMMAND``
            when the command token is empty.
    """
    if not raw_line:
        raise ParseError(ParseErrorKind.EMPTY, raw_line)

    data = raw_line
    prefix = ""

    if data.startswith(PREFIX_MARKER):
        end = data.find(" ")
        if end == -1:
            raise ParseError(ParseErrorKind.MALFORMED_PREFIX, raw_line)
        prefix = data[1:end]
        data = data[end + 1 :]

    end = _find_command_end(data)
    if end == -1:
        raise ParseError(ParseErrorKind.UNTERMINATED, raw_line)
    command = data[:end].upper()
    if not command:
        raise ParseError(ParseErrorKind.MISSING_COMMAND, raw_line)

    params = ""
    if data[end] == " ":
        params = data[end + 1 :].rstrip("\r\n")

    return IRCMessage(raw=raw_line, prefix=prefix, command=command, params=params)


def _find_command_end(data: str) -> int:
    hits = [i for i in (data.find(t) for t in _COMMAND_TERMINATORS) if i != -1]
    return min(hits) if hits else -1


def split_first_token(params: str) -> tuple[str, str] | None:
    """Return ``(token, rest)`` split at the first space, or None if there is none."""
    head, sep, rest = params.partition(" ")
    if not sep:
        return None
    return head, rest


def trailing_text(params: str) -> str | None:
    """Return the segment after the first ``:`` delimiter, or None if absent."""
    _, sep, text = params.partition(TRAILING_MARKER)
    if not sep:
        return None
    return text


def strip_trailing_marker(payload: str) -> str:
    """Drop a single leading ``:`` from a lone trailing parameter."""
    if payload.startswith(TRAILING_MARKER):
        return payload[1:]
    return payload


__all__ = [
    "parse_irc_message",
    "split_first_token",
    "trailing_text",
    "strip_trailing_marker",
]
