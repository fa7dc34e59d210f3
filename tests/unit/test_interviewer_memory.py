from agents.interviewer_memory import (
    ACCOUNTABILITY_CHALLENGES,
    InterviewerMemory,
    intensify_by_mood,
)
from agents.interviewer_profile import InterviewerProfile, profile_for_background
from agents.mood import derive_mood
from config.policy import FrustrationPolicy, InterviewPolicy, MemoryLimits
from services.randomness import ScriptedRandom

from conftest import make_response


def _memory(rolls=(), default=0.99, **kwargs):
    return InterviewerMemory(rng=ScriptedRandom(rolls, default=default), **kwargs)


def test_derive_mood_is_pure_and_banded():
    tones = ["confident", "confident", "confident"]
    assert derive_mood(10, tones, 0) == derive_mood(10, tones, 0) == "excited"
    assert derive_mood(85, tones, 0) == "hostile"
    assert derive_mood(65, tones, 0) == "frustrated"
    assert derive_mood(40, tones, 0) == "skeptical"
    assert derive_mood(10, tones, 2) == "skeptical"
    assert derive_mood(10, ["authentic", "diplomatic", "confident"], 0) == "sympathetic"
    assert derive_mood(25, tones, 0) == "professional"
    assert derive_mood(10, ["confident", "evasive", "confident"], 0) == "neutral"
    assert derive_mood(10, ["confident"], 0) == "neutral"


def test_one_contradiction_makes_interviewer_skeptical():
    assert derive_mood(13.0, ["diplomatic", "diplomatic", "aggressive"], 1) == "skeptical"
    assert derive_mood(10, ["confident", "confident", "confident"], 1) == "skeptical"


def test_attacking_answers_do_not_warm_the_interviewer():
    assert derive_mood(10, ["diplomatic", "diplomatic", "aggressive"], 0) == "neutral"
    assert derive_mood(10, ["confident", "confident", "confrontational"], 0) == "neutral"


def test_frustration_moves_by_policy_and_stays_in_range():
    memory = _memory()
    for index in range(12):
        memory.record_statement(make_response(f"q{index}", tone="evasive", word_count=5))
    assert memory.get_frustration_level() == 100
    assert memory.get_mood() == "hostile"

    calm = _memory()
    calm.record_statement(make_response("q1", tone="confident", word_count=30))
    assert calm.get_frustration_level() == 0


def test_custom_increment_table():
    policy = InterviewPolicy(frustration=FrustrationPolicy(tone_deltas={"defensive": 30.0}, short_response_delta=0))
    memory = _memory(policy=policy)
    memory.record_statement(make_response("q1", tone="defensive"))
    assert memory.get_frustration_level() == 30


def test_contradiction_raises_frustration_and_records_previous_statement():
    memory = _memory()
    memory.record_statement(make_response("q1", tone="confident", topic="economy", text="We will cut taxes for every family."))
    memory.record_statement(
        make_response("q2", tone="confident", topic="economy", text="Taxes must rise to fund services.", contradicts=True)
    )
    stats = memory.get_memory_stats()
    assert stats.contradictions == 1
    # first answer clamps at zero, then +15 for the contradiction and -5 for confidence
    assert memory.get_frustration_level() == 10


def test_bounded_logs():
    policy = InterviewPolicy(memory=MemoryLimits(quotes=2, evasions=3))
    memory = _memory(policy=policy)
    for index in range(6):
        memory.record_statement(make_response(f"c{index}", tone="confident", text="A quotable and confident line about policy."))
        memory.record_statement(make_response(f"e{index}", tone="evasive"))
    stats = memory.get_memory_stats()
    assert stats.quotes == 2
    assert stats.evasions == 3


def test_reference_quotes_earlier_statement_from_other_question():
    memory = _memory()
    memory.record_statement(make_response("q1", topic="housing", text="We will build fifty thousand homes a year."))
    assert memory.generate_reference("housing") is None

    memory.record_statement(make_response("q2", topic="housing", text="Housing targets are not the whole story here."))
    reference = memory.generate_reference("housing")
    assert reference.startswith('Earlier you said "We will build fifty thousand homes a year."')


def test_reference_counts_topic_evasions():
    memory = _memory()
    memory.record_statement(make_response("q1", tone="evasive", topic="crime", text="no"))
    memory.record_statement(make_response("q2", tone="evasive", topic="crime", text="pass"))
    assert memory.generate_reference("crime") == (
        "This is the second time you've avoided answering about crime. Why won't you give a straight answer?"
    )


def test_reference_quote_recall_is_gated():
    memory = _memory(rolls=[0.9])
    memory.record_statement(make_response("q1", tone="confident", text="I am proud of every single vote I cast."))
    assert memory.generate_reference("unrelated") is None

    lucky = _memory(rolls=[0.1, 0.0])
    lucky.record_statement(make_response("q1", tone="confident", text="I am proud of every single vote I cast."))
    assert lucky.generate_reference("unrelated") == (
        'You seemed so confident when you said "I am proud of every single vote I cast.". What\'s different now?'
    )


def test_contextual_follow_up_rules():
    memory = _memory(profile=profile_for_background("financial-analyst"))
    assert memory.generate_contextual_follow_up(make_response(tone="confident")) is None

    memory.record_statement(make_response("q1", tone="diplomatic", word_count=5))
    assert "seemed uncertain" in memory.generate_contextual_follow_up(make_response(tone="confident"))

    expert = _memory(profile=profile_for_background("financial-analyst"))
    line = expert.generate_contextual_follow_up(make_response(tone="evasive", topic="taxation"))
    assert line == "This should be your area of expertise. Why are you being so vague?"


def test_accountability_challenge_needs_three_problems():
    memory = _memory(default=0.0)
    memory.record_statement(make_response("q1", tone="evasive"))
    assert memory.generate_accountability_challenge() is None  # one evasion plus one weak moment
    memory.record_statement(make_response("q2", tone="diplomatic", word_count=4))
    assert memory.generate_accountability_challenge() == ACCOUNTABILITY_CHALLENGES[0]


def test_should_interrupt_uses_threshold():
    profile = InterviewerProfile(interruption_threshold=0.6)
    assert _memory(rolls=[0.3], profile=profile).should_interrupt(make_response(tone="evasive"))
    assert not _memory(rolls=[0.5], profile=profile).should_interrupt(make_response(tone="evasive"))

    rambler = InterviewerProfile(follow_up_tendency=0.9)
    assert _memory(rolls=[0.1], profile=rambler).should_interrupt(make_response(tone="diplomatic", word_count=150))


def test_generate_interruption_prefers_topic_reaction():
    memory = _memory(default=0.0, profile=profile_for_background("shell-executive"))
    line = memory.generate_interruption(make_response(topic="climate"))
    assert line == "Shell knew about climate change for decades. Did you?"
    assert memory.generate_interruption(make_response(topic="tax")) == "Corporate speak won't save the planet."


def test_intensify_by_mood():
    assert intensify_by_mood("Answer.", "hostile") == "Answer. This is unacceptable."
    assert intensify_by_mood("Answer.", "professional") == "Answer."


def test_assessment_labels():
    memory = _memory()
    assert memory.get_overall_assessment().label == "neutral"
    for index in range(8):
        memory.record_statement(make_response(f"q{index}", tone="evasive", word_count=5))
    assert memory.get_overall_assessment().label == "frustrated"


def test_reset_restores_defaults():
    memory = _memory()
    memory.record_statement(make_response("q1", tone="evasive", topic="climate"))
    memory.reset()
    assert memory.get_frustration_level() == 0
    assert memory.get_approval_level() == 50
    assert memory.get_memory_stats().evasions == 0
