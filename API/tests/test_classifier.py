# tests/test_classifier.py
import pytest

from flowscope.domain.container import ServiceCategory
from flowscope.services.classifier import classify


@pytest.mark.parametrize(
    "name, expected",
    [
        ("aiml-memory", ServiceCategory.AIML),
        ("application-gateway", ServiceCategory.APPLICATION),
        ("infrastructure-postgres", ServiceCategory.INFRASTRUCTURE),
        ("frontend-dashboard", ServiceCategory.FRONTEND),
        ("monitoring-grafana", ServiceCategory.MONITORING),
        ("game-rpg-engine", ServiceCategory.GAME),
        ("val-goal-manager", ServiceCategory.VAL),
        ("valina-validator-3", ServiceCategory.BLOCKCHAIN),
        ("my-chain-faucet", ServiceCategory.BLOCKCHAIN),
        ("postgres", ServiceCategory.OTHER),
        ("", ServiceCategory.OTHER),
    ],
)
def test_classify_prefix_rules(name, expected):
    assert classify(name) is expected


def test_classify_is_case_insensitive():
    assert classify("Frontend-Dashboard") is ServiceCategory.FRONTEND
    assert classify("SIDECHAIN-node") is ServiceCategory.BLOCKCHAIN


def test_first_matching_rule_wins():
    # carries both a known prefix and the "chain" marker
    assert classify("frontend-chain-explorer") is ServiceCategory.FRONTEND
    assert classify("val-chain-bridge") is ServiceCategory.VAL


def test_prefix_must_be_at_start():
    assert classify("my-aiml-service") is ServiceCategory.OTHER
    assert classify("validator-1") is ServiceCategory.OTHER


def test_classify_is_deterministic():
    assert {classify("aiml-x") for _ in range(5)} == {ServiceCategory.AIML}
