"""Tests for the rule registry."""

import pytest

from abrscope.core.models import ValidationIssue
from abrscope.core.validation.rules import RuleCatalog, RuleContext, line_at


def _issue(code: str) -> ValidationIssue:
    return ValidationIssue(code=code, severity="info", message=code, spec_reference="test")


def test_catalog_collects_rules_and_codes() -> None:
    catalog = RuleCatalog("demo")

    @catalog.rule("A", "B")
    def first(ctx):
        return None

    @catalog.rule("B", "C")
    def second(ctx):
        return _issue("C")

    @catalog.rule("D")
    def third(ctx):
        return [_issue("D"), _issue("D")]

    assert len(catalog) == 3
    assert catalog.codes == ["A", "B", "C", "D"]
    assert [rule.name for rule in catalog] == ["first", "second", "third"]

    issues = catalog.run(RuleContext(content="", playlist_type="master"))
    assert [i.code for i in issues] == ["C", "D", "D"]


def test_rules_stay_callable_and_retrievable() -> None:
    catalog = RuleCatalog("demo")

    @catalog.rule("X")
    def check(ctx):
        return _issue("X")

    assert check(None).code == "X"
    assert catalog.get("check")(RuleContext(content="", playlist_type="media"))[0].code == "X"
    with pytest.raises(KeyError):
        catalog.get("missing")


def test_line_at() -> None:
    content = "a\nbb\nccc"
    assert line_at(content, 0) == 1
    assert line_at(content, content.index("bb")) == 2
    assert line_at(content, len(content)) == 3
