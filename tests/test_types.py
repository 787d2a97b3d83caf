import pytest
from tson import TAG_KINDS, TAG_PREFIX, BigInt


def test_bigint_is_an_int():
	value = BigInt(10)
	assert isinstance(value, int)
	assert value == 10
	assert repr(value) == "BigInt(10)"


def test_bigint_accepts_decimal_text():
	assert BigInt("-12345678901234567890") == -12345678901234567890


def test_bigint_rejects_non_numeric_text():
	with pytest.raises(ValueError):
		BigInt("abc")


def test_tag_vocabulary():
	assert TAG_PREFIX == "t!"
	assert TAG_KINDS == (
		"bigint",
		"Date",
		"URL",
		"RegExp",
		"Uint8Array",
		"ArrayBuffer",
	)


def test_bigint_repr_beyond_int_string_digit_limit():
	assert repr(BigInt(10**5000)) == "BigInt(1" + "0" * 5000 + ")"
