"""
JavaScript-style rendering of compiled Python patterns.

A pattern renders the way a JavaScript ``RegExp`` prints itself::

    re.compile(r"\\d+", re.I | re.M)   # -> "/\\d+/im"

Only flags set explicitly on the pattern are rendered, in a fixed order.
``re.UNICODE`` is implied for str patterns and never appears in the output.
"""

from __future__ import annotations

import re

_FLAGS: tuple[tuple[str, re.RegexFlag], ...] = (
	("i", re.IGNORECASE),
	("m", re.MULTILINE),
	("s", re.DOTALL),
	("x", re.VERBOSE),
	("a", re.ASCII),
)


def is_pattern(value: object) -> bool:
	return isinstance(value, re.Pattern) and isinstance(value.pattern, str)


def render_pattern(pattern: re.Pattern[str]) -> str:
	flags = "".join(letter for letter, flag in _FLAGS if pattern.flags & flag)
	return f"/{pattern.pattern}/{flags}"


def parse_pattern(text: str) -> re.Pattern[str]:
	"""Compile ``/source/flags`` back into a pattern.

	The source may itself contain slashes; the last one ends it.
	"""
	end = text.rfind("/")
	if not text.startswith("/") or end == 0:
		raise ValueError(f"Invalid RegExp literal: {text!r}")
	source, letters = text[1:end], text[end + 1 :]
	flags = 0
	for letter in letters:
		for name, flag in _FLAGS:
			if name == letter:
				flags |= flag
				break
		else:
			raise ValueError(f"Invalid RegExp flag {letter!r} in {text!r}")
	return re.compile(source, flags)


__all__ = ["is_pattern", "parse_pattern", "render_pattern"]
