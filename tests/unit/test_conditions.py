from agents.conditions import (
    Condition,
    ConditionContext,
    evaluate,
    parse_condition,
    rule_fires,
    trigger_fires,
)
from agents.types import ConversationState, FollowUpRule, InterruptionTrigger
from services.randomness import ScriptedRandom

from conftest import make_response


def _ctx(response=None, state=None, **kwargs):
    return ConditionContext(response=response or make_response(), state=state or ConversationState(), **kwargs)


def test_parse_known_forms():
    assert parse_condition("tone:evasive") == Condition(kind="tone", value="evasive")
    assert parse_condition("topic: climate") == Condition(kind="topic", value="climate")
    assert parse_condition("interviewer_mood:hostile") == Condition(kind="interviewer_mood", value="hostile")
    assert parse_condition("word_count > 100") == Condition(kind="word_count_gt", threshold=100)
    assert parse_condition("word_count<10") == Condition(kind="word_count_lt", threshold=10)
    assert parse_condition("contradicts:previous") == Condition(kind="contradicts_previous")
    assert parse_condition("evasion") == parse_condition("evasive")


def test_parse_rejects_unknown_or_malformed():
    for raw in ("", None, "tone:", "mystery", "word_count>=10", "weather:rainy"):
        assert parse_condition(raw) is None


def test_evaluate_response_conditions():
    response = make_response(tone="defensive", word_count=45, topic="economy", contradicts=True)
    ctx = _ctx(response)
    assert evaluate(parse_condition("tone:defensive"), ctx)
    assert not evaluate(parse_condition("tone:evasive"), ctx)
    assert evaluate(parse_condition("topic:economy"), ctx)
    assert evaluate(parse_condition("word_count>40"), ctx)
    assert not evaluate(parse_condition("word_count<40"), ctx)
    assert evaluate(parse_condition("contradicts:previous"), ctx)
    assert evaluate(parse_condition("deflection"), ctx)


def test_evaluate_performance_and_interviewer_conditions():
    state = ConversationState()
    state.performance.confidence = 30
    state.performance.consistency = 85
    ctx = _ctx(state=state, mood="skeptical", frustration=65)
    assert evaluate(parse_condition("low_confidence"), ctx)
    assert evaluate(parse_condition("high_consistency"), ctx)
    assert evaluate(parse_condition("interviewer_mood:skeptical"), ctx)
    assert evaluate(parse_condition("high_frustration"), ctx)
    assert not evaluate(parse_condition("high_frustration"), _ctx(frustration=60))


def test_repeated_evasion_looks_at_last_two_answers():
    state = ConversationState()
    state.record_response(make_response("q1", tone="evasive"))
    assert not evaluate(parse_condition("repeated_evasion"), _ctx(state=state))
    state.record_response(make_response("q2", tone="evasive"))
    assert evaluate(parse_condition("repeated_evasion"), _ctx(state=state))


def test_rule_probability_gate():
    rule = FollowUpRule.model_validate({"if": "tone:diplomatic", "then": "q2", "probability": 0.5})
    assert rule_fires(rule, _ctx(), ScriptedRandom([0.4]))
    assert not rule_fires(rule, _ctx(), ScriptedRandom([0.6]))


def test_rule_without_probability_always_fires_without_rolling():
    rng = ScriptedRandom([])
    rule = FollowUpRule(condition="tone:diplomatic", then="q2")
    assert rule_fires(rule, _ctx(), rng)
    assert rng.calls == 0


def test_zero_probability_never_fires():
    rng = ScriptedRandom([0.0])
    rule = FollowUpRule(condition="tone:diplomatic", then="q2", probability=0.0)
    assert not rule_fires(rule, _ctx(), rng)
    assert rng.calls == 0


def test_unknown_rule_condition_is_false():
    rule = FollowUpRule(condition="moon:full", then="q2")
    assert not rule_fires(rule, _ctx(), ScriptedRandom([0.0]))


def test_trigger_with_unknown_condition_fires_on_probability():
    trigger = InterruptionTrigger(condition="speaker_runs_long", message="Stop.", probability=0.3)
    assert trigger_fires(trigger, _ctx(), ScriptedRandom([0.2]))
    assert not trigger_fires(trigger, _ctx(), ScriptedRandom([0.5]))


def test_trigger_with_known_condition_is_gated():
    trigger = InterruptionTrigger(condition="tone:evasive", message="Stop.")
    assert not trigger_fires(trigger, _ctx(make_response(tone="confident")), ScriptedRandom([0.0]))
    assert trigger_fires(trigger, _ctx(make_response(tone="evasive")), ScriptedRandom([0.99]))
