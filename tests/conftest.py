"""Shared fixtures for skill activation tests."""

import json
from pathlib import Path

import pytest

from skill_activation.config import ActivationConfig
from skill_activation.rule_schema import Rule
from skill_activation.rule_store import RuleStore


RAILS_RULES = {
    "rules": [
        {
            "name": "rails-dev-guidelines",
            "mode": "suggest",
            "priority": "high",
            "keywords": ["model", "controller"],
            "filePatterns": ["app/models/**/*"],
            "excludePatterns": ["spec/**/*"],
            "checks": ["run-model-specs"],
        },
        {
            "name": "rspec-testing",
            "mode": "suggest",
            "priority": "medium",
            "keywords": ["spec", "test"],
            "filePatterns": ["spec/**/*_spec.rb"],
            "checks": ["run-tests"],
        },
        {
            "name": "database-migrations",
            "mode": "block",
            "priority": "high",
            "keywords": ["migration"],
            "filePatterns": ["db/migrate/*.rb"],
            "checks": ["db-migrate-check"],
        },
        {
            "name": "frontend-styles",
            "priority": "low",
            "keywords": ["css"],
            "filePatterns": ["app/assets/**/*.css"],
            "checks": ["style-check"],
        },
    ]
}


def _make_rule(name: str = "rule", **fields) -> Rule:
    if not any(k in fields for k in ("keywords", "intentPatterns", "filePatterns")):
        fields["keywords"] = [name]
    return Rule.model_validate({"name": name, **fields})


@pytest.fixture
def make_rule():
    """Factory for a Rule with a keyword trigger unless triggers are given."""
    return _make_rule


@pytest.fixture
def rules_document() -> dict:
    return json.loads(json.dumps(RAILS_RULES))


@pytest.fixture
def store(rules_document) -> RuleStore:
    return RuleStore.load(rules_document)


@pytest.fixture
def rules_file(tmp_path: Path, rules_document) -> Path:
    path = tmp_path / "skill-rules.json"
    path.write_text(json.dumps(rules_document))
    return path


@pytest.fixture
def config(tmp_path: Path, rules_file: Path) -> ActivationConfig:
    return ActivationConfig(
        rules_path=str(rules_file),
        session_dir=str(tmp_path / "sessions"),
    )
