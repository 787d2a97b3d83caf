"""
Rule table for tagged-string serialization.

Each exotic kind is handled by a pair of rules:

- a ``StringifyRule`` whose ``match`` recognises the runtime value and whose
  ``handler`` renders it as ``t!<kind>:<payload>``
- a ``ParseRule`` whose ``match`` recognises the ``t!<kind>:`` prefix and whose
  ``handler`` rebuilds the value from the full tagged string

Rules are tried in declaration order and the first match wins, regardless of
how specific it is. A rule table is immutable; ``extend`` and ``kind`` return
new tables.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import MAX_EMAX, MAX_PREC, Context, Decimal
from typing import Any
from urllib.parse import urlsplit

import httpx

from tson.regexp import is_pattern, parse_pattern, render_pattern
from tson.types import TAG_PREFIX, BigInt

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StringifyRule:
	match: Callable[[Any], bool]
	handler: Callable[[Any], str]

	def __post_init__(self) -> None:
		_check_callables(self.match, self.handler)


@dataclass(frozen=True, slots=True)
class ParseRule:
	match: Callable[[str], bool]
	handler: Callable[[str], Any]

	def __post_init__(self) -> None:
		_check_callables(self.match, self.handler)


def _check_callables(match: object, handler: object) -> None:
	if not callable(match):
		raise TypeError(f"Rule match must be callable, got {type(match)!r}")
	if not callable(handler):
		raise TypeError(f"Rule handler must be callable, got {type(handler)!r}")


def prefix_of(kind: str) -> str:
	if not isinstance(kind, str) or kind == "" or ":" in kind:
		raise TypeError(f"Invalid tag kind: {kind!r}")
	return f"{TAG_PREFIX}{kind}:"


def tag(kind: str, payload: str) -> str:
	return prefix_of(kind) + payload


def untag(text: str) -> tuple[str, str] | None:
	"""Split a tagged string into ``(kind, payload)``.

	Works for any kind name, registered or not. Returns ``None`` when the text
	does not carry a tag prefix.
	"""
	if not text.startswith(TAG_PREFIX):
		return None
	kind, sep, payload = text[len(TAG_PREFIX) :].partition(":")
	if not sep or kind == "":
		return None
	return kind, payload


def _prefix_rule(kind: str, decode: Callable[[str], Any]) -> ParseRule:
	prefix = prefix_of(kind)
	start = len(prefix)
	return ParseRule(
		match=lambda text: text.startswith(prefix),
		handler=lambda text: decode(text[start:]),
	)


def _tag_rule(
	kind: str, check: Callable[[Any], bool], encode: Callable[[Any], str]
) -> StringifyRule:
	prefix = prefix_of(kind)
	return StringifyRule(match=check, handler=lambda value: prefix + encode(value))


@dataclass(frozen=True, slots=True)
class Rules:
	stringify: tuple[StringifyRule, ...] = field(default=())
	parse: tuple[ParseRule, ...] = field(default=())

	def __post_init__(self) -> None:
		object.__setattr__(self, "stringify", tuple(self.stringify))
		object.__setattr__(self, "parse", tuple(self.parse))

	def extend(
		self,
		*,
		stringify: Iterable[StringifyRule] = (),
		parse: Iterable[ParseRule] = (),
		prepend: bool = False,
	) -> Rules:
		"""Return a new table with extra rules.

		Rules are appended by default. Pass ``prepend=True`` when a new rule
		must win over an existing one it overlaps with.
		"""
		extra_stringify = tuple(stringify)
		extra_parse = tuple(parse)
		logger.debug(
			"Extending rule table with %d stringify and %d parse rules (prepend=%s)",
			len(extra_stringify),
			len(extra_parse),
			prepend,
		)
		if prepend:
			return Rules(
				stringify=extra_stringify + self.stringify,
				parse=extra_parse + self.parse,
			)
		return Rules(
			stringify=self.stringify + extra_stringify,
			parse=self.parse + extra_parse,
		)

	def kind(
		self,
		name: str,
		*,
		check: Callable[[Any], bool],
		encode: Callable[[Any], str],
		decode: Callable[[str], Any],
		prepend: bool = False,
	) -> Rules:
		"""Register a new kind tagged as ``t!<name>:<payload>``.

		``encode`` returns the payload only; ``decode`` receives the payload
		with the prefix already stripped.
		"""
		return self.extend(
			stringify=[_tag_rule(name, check, encode)],
			parse=[_prefix_rule(name, decode)],
			prepend=prepend,
		)

	def match_stringify(self, value: Any) -> StringifyRule | None:
		for rule in self.stringify:
			if rule.match(value):
				return rule
		return None

	def match_parse(self, text: str) -> ParseRule | None:
		for rule in self.parse:
			if rule.match(text) is True:
				return rule
		return None


# Built-in kinds


def _is_bigint(value: Any) -> bool:
	return isinstance(value, BigInt)


_DIGITS = re.compile(r"-?\d+", re.ASCII)
_EXACT = Context(prec=MAX_PREC, Emax=MAX_EMAX)


# Decimal keeps these exact past the int/str digit limit
def _bigint_to_text(value: int) -> str:
	return format(Decimal(int(value)), "f")


def _bigint_from_text(text: str) -> BigInt:
	if _DIGITS.fullmatch(text) is None:
		raise ValueError(f"Invalid bigint payload: {text!r}")
	return BigInt(int(_EXACT.create_decimal(text)))


def _is_datetime(value: Any) -> bool:
	return isinstance(value, datetime)


def _to_utc(value: datetime) -> datetime:
	if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
		return value.replace(tzinfo=timezone.utc)
	return value.astimezone(timezone.utc)


def _datetime_to_text(value: datetime) -> str:
	value = _to_utc(value).replace(tzinfo=None)
	return value.isoformat(timespec="milliseconds") + "Z"


def _datetime_from_text(text: str) -> datetime:
	if text.endswith("Z") or text.endswith("z"):
		text = text[:-1] + "+00:00"
	return _to_utc(datetime.fromisoformat(text))


def _is_url(value: Any) -> bool:
	return isinstance(value, httpx.URL)


def _canonical_url(url: httpx.URL) -> httpx.URL:
	if url.is_absolute_url and urlsplit(str(url)).path == "":
		return url.copy_with(path="/")
	return url


def _url_to_text(value: httpx.URL) -> str:
	return str(_canonical_url(value))


def _url_from_text(text: str) -> httpx.URL:
	url = httpx.URL(text)
	if not url.is_absolute_url:
		raise httpx.InvalidURL(f"Invalid URL: {text!r} is not absolute")
	return _canonical_url(url)


def _is_bytes(value: Any) -> bool:
	return isinstance(value, bytes)


def _is_buffer(value: Any) -> bool:
	return isinstance(value, (bytearray, memoryview))


def _bytes_to_text(value: bytes | bytearray | memoryview) -> str:
	return bytes(value).decode("utf-8", errors="replace")


def _bytes_from_text(text: str) -> bytes:
	return text.encode("utf-8")


# Order is the tag vocabulary order
_BUILTINS: tuple[
	tuple[str, Callable[[Any], bool], Callable[[Any], str], Callable[[str], Any]], ...
] = (
	("bigint", _is_bigint, _bigint_to_text, _bigint_from_text),
	("Date", _is_datetime, _datetime_to_text, _datetime_from_text),
	("URL", _is_url, _url_to_text, _url_from_text),
	("RegExp", is_pattern, render_pattern, parse_pattern),
	("Uint8Array", _is_bytes, _bytes_to_text, _bytes_from_text),
	("ArrayBuffer", _is_buffer, _bytes_to_text, _bytes_from_text),
)

DEFAULT_RULES = Rules(
	stringify=tuple(
		_tag_rule(kind, check, encode) for kind, check, encode, _ in _BUILTINS
	),
	parse=tuple(_prefix_rule(kind, decode) for kind, _, _, decode in _BUILTINS),
)

TAG_KINDS: tuple[str, ...] = tuple(kind for kind, _, _, _ in _BUILTINS)


__all__ = [
	"DEFAULT_RULES",
	"ParseRule",
	"Rules",
	"StringifyRule",
	"TAG_KINDS",
	"prefix_of",
	"tag",
	"untag",
]
