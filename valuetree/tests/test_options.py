# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Decode options: environment parsing and the container depth limit.
"""

from __future__ import annotations

import pytest

from valuetree.config import MAX_DEPTH_ENV, STRICT_UNIT_ENV, DecodeOptions
from valuetree.decoder import decode
from valuetree.errors import DepthLimitExceeded
from valuetree.shapes import EnumShape, IntShape, StructVariant, ValueShape
from valuetree.value import I64, from_python


def test_defaults() -> None:
	options = DecodeOptions()
	assert options.max_depth is None
	assert options.null_satisfies_unit_variant


def test_from_env() -> None:
	assert DecodeOptions.from_env({}) == DecodeOptions()
	options = DecodeOptions.from_env({MAX_DEPTH_ENV: "3", STRICT_UNIT_ENV: "yes"})
	assert options.max_depth == 3
	assert not options.null_satisfies_unit_variant
	assert DecodeOptions.from_env({STRICT_UNIT_ENV: "off"}).null_satisfies_unit_variant


def test_from_env_reads_process_environment(monkeypatch) -> None:
	monkeypatch.setenv(MAX_DEPTH_ENV, "7")
	monkeypatch.delenv(STRICT_UNIT_ENV, raising=False)
	assert DecodeOptions.from_env().max_depth == 7


@pytest.mark.parametrize("env", [{MAX_DEPTH_ENV: "deep"}, {MAX_DEPTH_ENV: "-1"}, {STRICT_UNIT_ENV: "maybe"}])
def test_from_env_rejects_bad_values(env) -> None:
	with pytest.raises(ValueError):
		DecodeOptions.from_env(env)


def test_depth_limit_counts_container_levels() -> None:
	assert decode(from_python([[1]]), ValueShape(), DecodeOptions(max_depth=2)) == from_python([[1]])
	with pytest.raises(DepthLimitExceeded) as excinfo:
		decode(from_python([[1]]), ValueShape(), DecodeOptions(max_depth=1))
	assert excinfo.value.limit == 1
	assert excinfo.value.code == "depth-limit"


def test_depth_zero_allows_only_scalars() -> None:
	assert decode(I64(1), ValueShape(), DecodeOptions(max_depth=0)) == I64(1)
	with pytest.raises(DepthLimitExceeded):
		decode(from_python({}), ValueShape(), DecodeOptions(max_depth=0))


def test_enum_wrapper_counts_as_a_level() -> None:
	shape = EnumShape("Command", {"Move": StructVariant.of("Move", {"x": IntShape()})})
	tree = {"Move": {"x": 1}}
	assert decode(from_python(tree), shape, DecodeOptions(max_depth=2)) is not None
	with pytest.raises(DepthLimitExceeded):
		decode(from_python(tree), shape, DecodeOptions(max_depth=1))


def test_deep_input_without_limit() -> None:
	tree = from_python([[[[[[[[[[1]]]]]]]]]])
	assert decode(tree.clone(), ValueShape()) == tree
