"""
Tree transformer: rewrites exotic values into tagged strings and back.

``encode`` walks an arbitrary value tree depth-first and substitutes the first
matching stringify rule's output; ``decode`` walks a plain JSON tree and
rebuilds values from strings carrying a known tag. ``stringify`` and ``parse``
wrap both around the ``json`` module.
"""

from __future__ import annotations

import json
import logging
import types
from collections.abc import Mapping
from dataclasses import fields, is_dataclass
from typing import Any

from tson.rules import DEFAULT_RULES, Rules
from tson.types import BigInt, JSONValue

logger = logging.getLogger(__name__)


class TSON:
	"""Encoder/decoder bound to one rule table and ``json`` options."""

	__slots__: tuple[str, ...] = ("_rules", "_indent", "_sort_keys")
	_rules: Rules
	_indent: int | str | None
	_sort_keys: bool

	def __init__(
		self,
		rules: Rules = DEFAULT_RULES,
		*,
		indent: int | str | None = None,
		sort_keys: bool = False,
	) -> None:
		if not isinstance(rules, Rules):
			raise TypeError(f"rules must be a Rules instance, got {type(rules)!r}")
		self._rules = rules
		self._indent = indent
		self._sort_keys = sort_keys

	@property
	def rules(self) -> Rules:
		return self._rules

	def with_rules(self, rules: Rules) -> TSON:
		return TSON(rules, indent=self._indent, sort_keys=self._sort_keys)

	def encode(self, value: Any) -> JSONValue:
		rules = self._rules

		def process(item: Any) -> Any:
			if item is None or isinstance(item, (bool, float, str)):
				return item
			if isinstance(item, int) and not isinstance(item, BigInt):
				return item

			if isinstance(item, (list, tuple)):
				return [process(entry) for entry in item]

			rule = rules.match_stringify(item)
			if rule is not None:
				return rule.handler(item)

			if isinstance(item, Mapping):
				return {key: process(entry) for key, entry in item.items()}

			if is_dataclass(item) and not isinstance(item, type):
				return {f.name: process(getattr(item, f.name)) for f in fields(item)}

			if callable(item) or isinstance(item, (type, types.ModuleType)):
				# Left for the json module to reject
				return item

			logger.debug(
				"No rule for %s; encoding its public attributes as a mapping",
				type(item).__qualname__,
			)
			return {key: process(entry) for key, entry in _attributes(item).items()}

		return process(value)

	def decode(self, value: Any) -> Any:
		rules = self._rules

		def traverse(item: Any) -> Any:
			if isinstance(item, (list, tuple)):
				return [traverse(entry) for entry in item]
			if isinstance(item, dict):
				return {key: traverse(entry) for key, entry in item.items()}
			if isinstance(item, str):
				rule = rules.match_parse(item)
				if rule is not None:
					return rule.handler(item)
			return item

		return traverse(value)

	def stringify(self, value: Any) -> str:
		return json.dumps(
			self.encode(value),
			separators=(",", ":") if self._indent is None else None,
			indent=self._indent,
			sort_keys=self._sort_keys,
			ensure_ascii=False,
			allow_nan=False,
		)

	def parse(self, text: str | bytes | bytearray) -> Any:
		return self.decode(json.loads(text))


def _attributes(item: Any) -> dict[str, Any]:
	attrs: dict[str, Any] = {}
	for cls in reversed(type(item).__mro__):
		slots = cls.__dict__.get("__slots__", ())
		if isinstance(slots, str):
			slots = (slots,)
		for name in slots:
			if not name.startswith("_") and hasattr(item, name):
				attrs[name] = getattr(item, name)
	for name, entry in getattr(item, "__dict__", {}).items():
		if not name.startswith("_"):
			attrs[name] = entry
	return attrs


_default = TSON()


def encode(value: Any) -> JSONValue:
	return _default.encode(value)


def decode(value: Any) -> Any:
	return _default.decode(value)


def stringify(value: Any) -> str:
	return _default.stringify(value)


def parse(text: str | bytes | bytearray) -> Any:
	return _default.parse(text)


__all__ = ["TSON", "decode", "encode", "parse", "stringify"]
