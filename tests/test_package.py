"""
Tests for the top-level convenience API.
"""

import pytest

import espy
from espy import ParseError, convert


def test_convert_default_passes():
  assert convert("total.plus(delta)") == "total + delta"


def test_convert_with_explicit_passes():
  assert convert("console.log(true)", passes=["builtins"]) == "print(True)"
  assert convert("a.plus(b)", passes=[]) == "a.plus(b)"


def test_convert_keeps_sentinels_by_default():
  assert convert("typeof x") == "??x"


def test_convert_strict_rejects_sentinels():
  with pytest.raises(ValueError, match="Untranslatable"):
    convert("typeof x", strict=True)


def test_convert_raises_parse_error():
  with pytest.raises(ParseError):
    convert("if (")


def test_public_surface():
  assert espy.__version__
  for name in espy.__all__:
    assert hasattr(espy, name)
