"""Tests for mode enforcement."""

from skill_activation.context import from_prompt
from skill_activation.enforcer import ALLOW, Decision, authorize
from skill_activation.matcher import evaluate
from skill_activation.ranking import SuggestionList, rank


class TestAuthorize:
    """Tests for authorize()."""

    def test_suggest_rules_never_block(self, make_rule):
        suggestions = rank(evaluate(from_prompt("x"), [make_rule("a", keywords=["x"], mode="suggest")]))
        decision = authorize(suggestions)

        assert decision.proceed
        assert decision.must_acknowledge == ()

    def test_block_rule_requires_acknowledgment(self, store):
        suggestions = rank(evaluate(from_prompt("write a migration for the model"), store.rules))
        decision = authorize(suggestions)

        assert not decision.proceed
        assert decision.blocking_names == ["database-migrations"]

    def test_acknowledged_block_rule_allows_proceeding(self, store):
        suggestions = rank(evaluate(from_prompt("write a migration"), store.rules))
        decision = authorize(suggestions, acknowledged=["database-migrations"])

        assert decision.proceed
        assert decision.must_acknowledge == ()

    def test_only_unacknowledged_rules_are_outstanding(self, make_rule):
        rules = [
            make_rule("first", keywords=["x"], mode="block"),
            make_rule("second", keywords=["x"], mode="block"),
        ]
        suggestions = rank(evaluate(from_prompt("x"), rules))
        decision = authorize(suggestions, acknowledged={"first"})

        assert not decision.proceed
        assert decision.blocking_names == ["second"]

    def test_stateless(self, store):
        """Acknowledgment is never remembered between calls."""
        suggestions = rank(evaluate(from_prompt("migration"), store.rules))

        authorize(suggestions, acknowledged=["database-migrations"])
        assert not authorize(suggestions).proceed

    def test_empty_suggestions(self):
        assert authorize(SuggestionList()) == ALLOW
        assert ALLOW == Decision(proceed=True)
