from agents.evasion_detector import (
    ESCALATION_MESSAGES,
    EvasionDetector,
    average_response_length,
    count_consecutive_deflections,
    escalation_tier,
)
from agents.types import ConversationState
from services.randomness import ScriptedRandom

from conftest import make_response


def _feed(detector, state, response):
    state.record_response(response)
    detector.update_tracking(response)
    return detector.check_patterns(response, state)


def test_evasive_classification_rules():
    assert EvasionDetector.is_evasive(make_response(tone="evasive", word_count=30))
    assert EvasionDetector.is_evasive(make_response(tone="defensive", word_count=51))
    assert not EvasionDetector.is_evasive(make_response(tone="defensive", word_count=50))
    assert EvasionDetector.is_evasive(make_response(tone="confident", word_count=7))
    assert not EvasionDetector.is_evasive(make_response(tone="confident", word_count=8))


def test_counter_decays_and_topic_counter_never_drops():
    detector = EvasionDetector()
    detector.update_tracking(make_response(tone="evasive", topic="climate"))
    detector.update_tracking(make_response(tone="evasive", topic="climate"))
    detector.update_tracking(make_response(tone="confident", topic="climate"))
    assert detector.evasion_counter == 1
    assert detector.topic_evasions == {"climate": 2}
    detector.update_tracking(make_response(tone="confident"))
    detector.update_tracking(make_response(tone="confident"))
    assert detector.evasion_counter == 0
    assert detector.topic_evasions == {"climate": 2}


def test_escalation_tiers():
    assert escalation_tier(3) == "first"
    assert escalation_tier(4) == "second"
    assert escalation_tier(5) == "critical"
    assert escalation_tier(9) == "critical"


def test_three_evasions_give_first_tier_then_counter_decrements():
    detector = EvasionDetector(rng=ScriptedRandom([], default=0.0))
    state = ConversationState()
    assert _feed(detector, state, make_response("q1", tone="evasive")) is None
    assert _feed(detector, state, make_response("q2", tone="evasive")) is None
    third = _feed(detector, state, make_response("q3", tone="evasive"))
    assert third is not None
    assert third.metadata["trigger"] == "consecutive-evasions"
    assert third.metadata["escalation_tier"] == "first"
    assert third.metadata["severity"] == "major"
    assert third.content in ESCALATION_MESSAGES["first"]

    _feed(detector, state, make_response("q4", tone="confident"))
    assert detector.evasion_counter == 2


def test_critical_severity_from_five():
    detector = EvasionDetector()
    state = ConversationState()
    action = None
    for index in range(5):
        action = _feed(detector, state, make_response(f"q{index}", tone="evasive"))
    assert action.metadata["escalation_tier"] == "critical"
    assert action.metadata["severity"] == "critical"
    assert action.content in ESCALATION_MESSAGES["critical"]


def test_topic_avoidance_references_topic():
    detector = EvasionDetector()
    state = ConversationState()
    _feed(detector, state, make_response("q1", tone="evasive", topic="climate"))
    second = _feed(detector, state, make_response("q2", tone="evasive", topic="climate"))
    assert second.metadata["trigger"] == "topic-avoidance"

    third = _feed(detector, state, make_response("q3", tone="diplomatic", topic="climate"))
    assert third.metadata["trigger"] == "topic-avoidance"
    assert third.metadata["topic"] == "climate"
    assert third.metadata["avoidance_count"] == 2
    assert "climate" in third.content.lower()


def test_topic_avoidance_generic_lines_mention_topic():
    detector = EvasionDetector(rng=ScriptedRandom([0.5]))
    state = ConversationState()
    _feed(detector, state, make_response("q1", tone="evasive", topic="pensions"))
    action = _feed(detector, state, make_response("q2", tone="evasive", topic="pensions"))
    assert action.content == "This is the second time you've dodged this pensions question."


def test_filibuster_needs_long_evasive_answer():
    detector = EvasionDetector()
    state = ConversationState()
    for index in range(4):
        _feed(detector, state, make_response(f"q{index}", tone="diplomatic", word_count=20))
    action = _feed(detector, state, make_response("q9", tone="defensive", word_count=200))
    # 200 words is also a long defensive answer, but the counter is only 1
    assert action.metadata["trigger"] == "filibustering"
    assert action.metadata["average_length"] == average_response_length(state)


def test_long_confident_answer_is_not_filibustering():
    detector = EvasionDetector()
    state = ConversationState()
    for index in range(4):
        _feed(detector, state, make_response(f"q{index}", tone="diplomatic", word_count=20))
    assert _feed(detector, state, make_response("q9", tone="confident", word_count=200)) is None


def test_average_defaults_to_thirty_without_history():
    assert average_response_length(ConversationState()) == 30


def test_deflection_requires_run_of_two():
    detector = EvasionDetector()
    state = ConversationState()
    first = make_response("q1", tone="diplomatic", text="But what about the other party's record on this?", word_count=9)
    assert _feed(detector, state, first) is None

    second = make_response("q2", tone="diplomatic", text="The real issue is their failed budget, honestly.", word_count=9)
    action = _feed(detector, state, second)
    assert action.metadata["trigger"] == "deflection-pattern"
    assert action.metadata["consecutive_deflections"] == 2


def test_consecutive_deflections_stop_at_first_plain_answer():
    state = ConversationState()
    state.record_response(make_response("q1", tone="defensive"))
    state.record_response(make_response("q2", tone="diplomatic", text="A clear plain answer with numbers."))
    state.record_response(make_response("q3", tone="defensive"))
    assert count_consecutive_deflections(state) == 1


def test_reset_clears_counters():
    detector = EvasionDetector()
    detector.update_tracking(make_response(tone="evasive", topic="economy"))
    detector.reset()
    stats = detector.get_evasion_stats()
    assert stats.total_evasions == 0
    assert stats.topic_evasions == {}
