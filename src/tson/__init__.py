"""Tagged JSON: carry big integers, datetimes, URLs, patterns and bytes through JSON."""

from .rules import (
	DEFAULT_RULES,
	ParseRule,
	Rules,
	StringifyRule,
	TAG_KINDS,
	prefix_of,
	tag,
	untag,
)
from .transform import TSON, decode, encode, parse, stringify
from .types import TAG_PREFIX, BigInt, JSONValue

__all__ = [
	"BigInt",
	"DEFAULT_RULES",
	"JSONValue",
	"ParseRule",
	"Rules",
	"StringifyRule",
	"TAG_KINDS",
	"TAG_PREFIX",
	"TSON",
	"decode",
	"encode",
	"parse",
	"prefix_of",
	"stringify",
	"tag",
	"untag",
]
