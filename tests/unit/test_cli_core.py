import pytest

from locationsharing.cli import parse_args


def test_parse_args_defaults():
    args = parse_args(["people"])
    assert args.command == "people"
    assert args.config == "./config/locationsharing.yml"
    assert args.overlay_config is None
    assert args.cookies is None


def test_parse_args_find_by_nickname():
    args = parse_args(["find", "--nickname", "Ali"])
    assert args.nickname == "Ali"


def test_parse_args_find_requires_a_name():
    with pytest.raises(SystemExit):
        parse_args(["find"])
