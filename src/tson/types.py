from __future__ import annotations

from decimal import Decimal
from typing import Any, override

Primitive = int | float | str | bool | None
JSONValue = Primitive | list["JSONValue"] | dict[str, "JSONValue"]

TAG_PREFIX = "t!"


class BigInt(int):
	"""Arbitrary-precision integer that serializes as a tagged string.

	Plain ``int`` values stay native JSON numbers. Wrap a value in ``BigInt``
	when the receiving side must not lose precision to a float.
	"""

	__slots__ = ()

	def __new__(cls, value: Any = 0) -> BigInt:
		return super().__new__(cls, value)

	@override
	def __repr__(self) -> str:
		return f"BigInt({Decimal(int(self)):f})"


__all__ = ["BigInt", "JSONValue", "Primitive", "TAG_PREFIX"]
