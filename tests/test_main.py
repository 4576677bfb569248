"""Tests for the command line entry point."""

import argparse
import json
import pytest

from rescue_rewards.main import create_argument_parser, main, parse_deal_spec, parse_sale_spec


def test_parse_deal_spec_keeps_colons_in_description():
    assert parse_deal_spec("Produce:40:10:Bananas: ripe") == ("Produce", 40, "10", "Bananas: ripe")


@pytest.mark.parametrize("spec", ["Produce:40:10", "Frozen:40:1:Peas", "Produce:forty:1:Apples"])
def test_parse_deal_spec_rejects_malformed(spec):
    with pytest.raises(argparse.ArgumentTypeError):
        parse_deal_spec(spec)


def test_parse_sale_spec():
    assert parse_sale_spec("1") == (1, None, None)
    assert parse_sale_spec("2:12.5") == (2, 12.5, None)
    assert parse_sale_spec("3:12:Alice") == (3, 12.0, "Alice")
    with pytest.raises(argparse.ArgumentTypeError):
        parse_sale_spec("first")


def test_parser_defaults():
    args = create_argument_parser().parse_args([])

    assert args.deals == []
    assert args.timeframe == "month"
    assert args.json is False


def test_main_prints_json_report(capsys):
    exit_code = main([
        "--deal", "Produce:40:10:Ripe bananas",
        "--deal", "Bakery:50:6 loaves:Sourdough",
        "--sell", "1:12:Alice",
        "--donate", "2",
        "--json",
    ])

    assert exit_code == 0
    report = json.loads(capsys.readouterr().out)
    assert report["dashboard"]["rescue_deals"]["total"] == 2
    assert report["dashboard"]["revenue"]["customer_savings"] == 8
    assert report["activities"][0]["type"] == "deal_donated"
    assert report["analytics"]["rescue_deals"]["created"] == 2


def test_main_prints_text_report(capsys):
    exit_code = main(["--deal", "Meat:10:2kg:Chicken thighs", "--sell", "5"])

    assert exit_code == 0
    output = capsys.readouterr().out
    assert "Chicken thighs" in output
    assert "high priority" in output
    assert "Analytics (This Month)" in output
