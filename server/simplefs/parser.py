from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass
class ParsedCommand:
    name: str
    args: List[str] = field(default_factory=list)


def split_tokens(text: str) -> List[str]:
    """Split on whitespace, keeping double-quoted runs verbatim.

    Quotes are dropped; an unterminated quote runs to the end of the line and
    ``""`` yields an empty token.
    """
    tokens: List[str] = []
    current: List[str] = []
    in_token = False
    quoted = False
    for ch in text or "":
        if quoted:
            if ch == '"':
                quoted = False
            else:
                current.append(ch)
            continue
        if ch == '"':
            quoted = True
            in_token = True
            continue
        if ch.isspace():
            if in_token:
                tokens.append("".join(current))
                current = []
                in_token = False
            continue
        current.append(ch)
        in_token = True
    if in_token:
        tokens.append("".join(current))
    return tokens


def _split_head(text: str, count: int) -> Tuple[str, Optional[str]]:
    """Cut ``text`` after ``count`` whitespace-delimited words.

    Returns the head and the raw tail that follows the single separator ending
    the last head word, or ``None`` when nothing follows it.
    """
    i = 0
    n = len(text)
    for _ in range(count):
        while i < n and text[i].isspace():
            i += 1
        while i < n and not text[i].isspace():
            i += 1
    if i >= n:
        return text, None
    return text[:i], text[i + 1:]


def unquote_tail(tail: str) -> str:
    """Leading quotes are skipped and the text stops at the next quote."""
    return tail.lstrip('"').split('"', 1)[0]


def parse_command_line(line: str, raw_tails: Optional[Dict[str, int]] = None) -> Optional[ParsedCommand]:
    """Tokenize one protocol line.

    ``raw_tails`` maps a command name to the number of regular arguments it
    takes before the rest of the line becomes a single argument (the content
    of ``write``).
    """
    text = (line or "").rstrip("\r\n")
    tokens = split_tokens(text)
    if not tokens:
        return None
    name = tokens[0]
    fixed = (raw_tails or {}).get(name)
    if fixed is None:
        return ParsedCommand(name=name, args=tokens[1:])

    head, tail = _split_head(text, fixed + 1)
    args = split_tokens(head)[1:]
    if tail is not None:
        args.append(unquote_tail(tail))
    return ParsedCommand(name=name, args=args)
