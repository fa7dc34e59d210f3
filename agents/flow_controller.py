"""Turn-by-turn conversation flow for adversarial interviews."""
from __future__ import annotations

import logging
import math
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from agents.conditions import ConditionContext, rule_fires, trigger_fires
from agents.evasion_detector import EvasionDetector
from agents.interviewer_memory import InterviewerMemory, intensify_by_mood
from agents.interviewer_profile import InterviewerProfile, profile_for_background
from agents.rapid_fire import RapidFireEngine, TriggerSignals
from agents.types import (
    ControllerSnapshot,
    ConversationAction,
    ConversationAnalytics,
    ConversationState,
    DynamicQuestion,
    EvasionStats,
    PlayerResponse,
    QuestionArc,
    RapidFireStatus,
)
from config.policy import InterviewPolicy, load_policy
from config.rapid_fire import RapidFireConfig, load_rapid_fire_config
from config.settings import settings
from observability.logger import log_event
from services.clock import monotonic
from services.randomness import seeded

logger = logging.getLogger(__name__)

DYNAMIC_FOLLOW_UPS: Dict[str, List[str]] = {
    "accountability-pressure": [
        "But who's accountable when things go wrong?",
        "How do you ensure accountability in practice?",
        "What happens if your approach fails?",
    ],
    "responsibility-challenge": [
        "Where does personal responsibility end and systemic issues begin?",
        "Are you taking responsibility for your role in this?",
        "How do you balance personal and collective responsibility?",
    ],
    "experience-challenge": [
        "Does experience matter if it's the wrong kind of experience?",
        "How do we know you've learned from those experiences?",
        "Isn't this just more of the same old politics?",
    ],
    "pragmatism-test": [
        "That sounds pragmatic, but is it realistic?",
        "How do you make pragmatism work in practice?",
        "Pragmatism often means compromise. What won't you compromise on?",
    ],
    "elaborate": [
        "Can you elaborate on that?",
        "What do you mean by that exactly?",
        "How would that work in practice?",
    ],
}

CONCLUSION_MESSAGES: Dict[str, str] = {
    "impressed": "Thank you for your time. You've given us a lot to think about.",
    "frustrated": "I think our viewers can draw their own conclusions. Thank you.",
    "cautiously optimistic": "Interesting perspectives. Thank you for joining us tonight.",
    "skeptical": "We'll leave it there. Thanks for coming on the show.",
    "neutral": "That's all the time we have. Thank you for the interview.",
}

CONTRADICTION_FALLBACK = "That seems to contradict your earlier position. Can you clarify?"


class FlowDeps(BaseModel):
    """Injected sources of chance and time."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    rng: Any = Field(default_factory=lambda: seeded(settings.RANDOM_SEED))
    now: Callable[[], float] = monotonic


def _question_action(question: DynamicQuestion, **extra: Any) -> ConversationAction:
    metadata: Dict[str, Any] = {"question_id": question.id, "setup": question.setup}
    metadata.update(extra)
    return ConversationAction(type="question", content=question.question, metadata=metadata)


class ConversationFlowController:
    """Decides what the interviewer does after every answer.

    One controller serves one interview. It owns the evasion counters,
    interviewer memory, the rapid-fire engine, the interruption history and
    the follow-up queue; nothing is shared between interviews.
    """

    def __init__(
        self,
        arc: QuestionArc,
        *,
        profile: Optional[InterviewerProfile] = None,
        policy: Optional[InterviewPolicy] = None,
        rapid_fire_config: Optional[RapidFireConfig] = None,
        deps: Optional[FlowDeps] = None,
        interview_id: str = "interview",
    ) -> None:
        self.arc = arc
        self.interview_id = interview_id
        self.deps = deps or FlowDeps()
        self.policy = policy or load_policy()
        self.memory = InterviewerMemory(
            profile=profile or profile_for_background(arc.background_id),
            policy=self.policy,
            rng=self.deps.rng,
        )
        self.detector = EvasionDetector(rng=self.deps.rng)
        self.rapid_fire = RapidFireEngine(
            config=rapid_fire_config or load_rapid_fire_config(),
            clock=self.deps.now,
        )
        self.interruption_history: List[str] = []
        self.follow_up_queue: List[str] = []

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------
    def determine_next_action(self, response: PlayerResponse, state: ConversationState) -> ConversationAction:
        """Record the answer, then run the cascade; first match wins."""

        state.record_response(response)
        self.detector.update_tracking(response)
        self.memory.record_statement(response)

        if self.rapid_fire.is_active:
            action = self.rapid_fire.next_action(response, self.memory.get_mood())
            if action is None:
                log_event("rapid_fire_ended", self.interview_id, question_id=response.question_id)
                # the closed session started on an earlier turn, so a new one may open now
                action = self._cascade(response, state)
        else:
            action = self._cascade(response, state)

        log_event(
            "turn_decided",
            self.interview_id,
            question_id=response.question_id,
            tone=response.tone,
            action=action.type,
            trigger=action.metadata.get("trigger"),
            mood=self.memory.get_mood(),
            frustration=self.memory.get_frustration_level(),
            evasions=self.detector.evasion_counter,
        )
        return action

    def _cascade(
        self,
        response: PlayerResponse,
        state: ConversationState,
    ) -> ConversationAction:
        interruption = self._check_interruptions(response, state)
        if interruption is not None:
            self.interruption_history.append(response.question_id)
            return interruption

        trigger = self.rapid_fire.find_trigger(self._signals(response))
        if trigger is not None:
            self.rapid_fire.start(trigger, response)
            log_event(
                "rapid_fire_started",
                self.interview_id,
                question_id=response.question_id,
                trigger=trigger.id,
                intensity=trigger.intensity,
            )
            action = self.rapid_fire.next_action(response, self.memory.get_mood())
            if action is not None:
                return action
            log_event("rapid_fire_ended", self.interview_id, question_id=response.question_id)

        for step in (
            self._memory_follow_up,
            self._rule_follow_up,
            self._contradiction_challenge,
        ):
            action = step(response, state)
            if action is not None:
                return action

        if self.should_conclude(state):
            return self._conclusion(state)
        return self._next_planned_question(state)

    # ------------------------------------------------------------------
    # Cascade steps
    # ------------------------------------------------------------------
    def _context(self, response: PlayerResponse, state: ConversationState) -> ConditionContext:
        return ConditionContext(
            response=response,
            state=state,
            mood=self.memory.get_mood(),
            frustration=self.memory.get_frustration_level(),
        )

    def _signals(self, response: PlayerResponse) -> TriggerSignals:
        return TriggerSignals(
            evasion_count=self.detector.evasion_counter,
            topic_avoidance=self.detector.topic_avoidance(response.topic),
            interviewer_frustration=self.memory.get_frustration_level(),
            contradiction_detected=response.contradicts_previous,
        )

    def _roll(self, probability: float) -> bool:
        return self.deps.rng.random() < probability

    def _check_interruptions(self, response: PlayerResponse, state: ConversationState) -> Optional[ConversationAction]:
        detected = self.detector.check_patterns(response, state)
        if detected is not None:
            return detected

        question = self.arc.get(response.question_id)
        if question is not None:
            ctx = self._context(response, state)
            for trigger in question.interruption_triggers:
                if not trigger_fires(trigger, ctx, self.deps.rng):
                    continue
                if trigger.follow_up_action and self.arc.get(trigger.follow_up_action):
                    self.queue_follow_up(trigger.follow_up_action)
                return ConversationAction(
                    type="interruption",
                    content=trigger.message,
                    metadata={
                        "trigger": trigger.condition,
                        "follow_up_action": trigger.follow_up_action,
                    },
                )

        if self.memory.should_interrupt(response):
            mood = self.memory.get_mood()
            return ConversationAction(
                type="interruption",
                content=intensify_by_mood(self.memory.generate_interruption(response), mood),
                metadata={
                    "trigger": "personality-based",
                    "tone": response.tone,
                    "interviewer_mood": mood,
                    "evasion_count": self.detector.evasion_counter,
                },
            )
        return None

    def _memory_follow_up(self, response: PlayerResponse, state: ConversationState) -> Optional[ConversationAction]:
        contextual = self.memory.generate_contextual_follow_up(response)
        if contextual:
            return ConversationAction(
                type="follow-up",
                content=contextual,
                metadata={
                    "trigger": "memory-based",
                    "response_length": response.word_count,
                    "response_tone": response.tone,
                    "memory_stats": self.memory.get_memory_stats().model_dump(),
                },
            )

        challenge = self.memory.generate_accountability_challenge()
        if challenge and self._roll(self.policy.accountability_probability):
            return ConversationAction(
                type="follow-up",
                content=challenge,
                metadata={
                    "trigger": "accountability-pattern",
                    "severity": "high",
                    "memory_stats": self.memory.get_memory_stats().model_dump(),
                },
            )

        if response.topic:
            reference = self.memory.generate_reference(response.topic)
            if reference and self._roll(self.policy.reference_probability):
                return ConversationAction(
                    type="follow-up",
                    content=reference,
                    metadata={
                        "trigger": "memory-reference",
                        "topic": response.topic,
                        "reference_type": "topic-specific",
                    },
                )
        return None

    def _rule_follow_up(self, response: PlayerResponse, state: ConversationState) -> Optional[ConversationAction]:
        question = self.arc.get(response.question_id)
        if question is None:
            return None
        ctx = self._context(response, state)
        for rule in question.follow_up_rules:
            if not rule_fires(rule, ctx, self.deps.rng):
                continue
            target = self.arc.get(rule.then)
            if target is not None:
                return _question_action(target, is_follow_up=True, triggered_by=rule.condition)
            lines = DYNAMIC_FOLLOW_UPS.get(rule.then)
            if lines:
                return ConversationAction(
                    type="follow-up",
                    content=self.deps.rng.choice(lines),
                    metadata={
                        "action": rule.then,
                        "triggered_by": response.tone,
                        "is_dynamic": True,
                    },
                )
            logger.debug("follow-up target %r is neither a question nor a known action", rule.then)
        return None

    def _contradiction_challenge(self, response: PlayerResponse, state: ConversationState) -> Optional[ConversationAction]:
        if not response.contradicts_previous or not response.topic:
            return None
        earlier = next(
            (
                r
                for r in state.player_responses
                if r.topic == response.topic and r.question_id != response.question_id
            ),
            None,
        )
        if earlier is None:
            return None

        candidates = (
            ("memory-reference", lambda: self.memory.generate_reference(response.topic)),
            ("contextual-follow-up", lambda: self.memory.generate_contextual_follow_up(response)),
            ("accountability-challenge", self.memory.generate_accountability_challenge),
        )
        source, text = "fallback", CONTRADICTION_FALLBACK
        for name, produce in candidates:
            produced = produce()
            if produced:
                source, text = name, produced
                break

        return ConversationAction(
            type="contradiction-challenge",
            content=text,
            metadata={
                "original_question_id": earlier.question_id,
                "original_response": earlier.response_text,
                "conflicting_question_id": response.question_id,
                "topic": response.topic,
                "memory_source": source,
                "interviewer_mood": self.memory.get_mood(),
            },
        )

    def _answered_arc_questions(self, state: ConversationState) -> int:
        arc_ids = set(self.arc.ids())
        return sum(1 for qid in state.answered_questions if qid in arc_ids)

    def should_conclude(self, state: ConversationState) -> bool:
        total = len(self.arc.questions)
        answered = self._answered_arc_questions(state)
        if answered >= total:
            return True

        rules = self.policy.conclusion
        if (
            self.memory.get_frustration_level() > rules.give_up_frustration
            and len(self.interruption_history) > rules.give_up_interruptions
        ):
            return True

        perf = state.performance
        return (
            answered >= math.floor(total * rules.answered_ratio)
            and perf.overall_score > rules.min_overall_score
            and perf.consistency > rules.min_consistency
        )

    def _conclusion(self, state: ConversationState) -> ConversationAction:
        assessment = self.memory.get_overall_assessment()
        return ConversationAction(
            type="conclusion",
            content=CONCLUSION_MESSAGES.get(assessment.label, CONCLUSION_MESSAGES["neutral"]),
            metadata={
                "assessment": assessment.label,
                "interviewer_mood": assessment.mood,
                "questions_answered": self._answered_arc_questions(state),
                "total_questions": len(self.arc.questions),
                "interruption_count": len(self.interruption_history),
            },
        )

    def _next_planned_question(self, state: ConversationState) -> ConversationAction:
        while self.follow_up_queue:
            queued_id = self.follow_up_queue.pop(0)
            queued = self.arc.get(queued_id)
            if queued is not None:
                return _question_action(queued, is_queued_follow_up=True)
            logger.debug("dropping queued follow-up %r: not in the arc", queued_id)

        upcoming = next((q for q in self.arc.questions if q.id not in state.answered_questions), None)
        if upcoming is None:
            return self._conclusion(state)
        extra: Dict[str, Any] = {"type": upcoming.type}
        if upcoming.urgency is not None:
            extra["urgency"] = upcoming.urgency.model_dump()
        return _question_action(upcoming, **extra)

    # ------------------------------------------------------------------
    # Public queries
    # ------------------------------------------------------------------
    def queue_follow_up(self, question_id: str) -> None:
        if question_id not in self.follow_up_queue:
            self.follow_up_queue.append(question_id)

    def get_interruption_history(self) -> List[str]:
        return list(self.interruption_history)

    def get_pending_follow_ups(self) -> List[str]:
        return list(self.follow_up_queue)

    def get_evasion_stats(self) -> EvasionStats:
        return self.detector.get_evasion_stats()

    def get_rapid_fire_status(self) -> RapidFireStatus:
        return self.rapid_fire.status()

    def get_conversation_analytics(self) -> ConversationAnalytics:
        return ConversationAnalytics(
            memory=self.memory.get_memory_stats(),
            evasions=self.detector.get_evasion_stats(),
            interruptions=len(self.interruption_history),
            interviewer_mood=self.memory.get_mood(),
            frustration_level=self.memory.get_frustration_level(),
            pending_follow_ups=len(self.follow_up_queue),
            rapid_fire_active=self.rapid_fire.is_active,
        )

    def snapshot(self) -> ControllerSnapshot:
        status = self.rapid_fire.status()
        return ControllerSnapshot(
            evasion_counter=self.detector.evasion_counter,
            topic_evasions=dict(self.detector.topic_evasions),
            interruption_history=list(self.interruption_history),
            follow_up_queue=list(self.follow_up_queue),
            rapid_fire_session=status.session,
            last_rapid_fire_at=self.rapid_fire.last_started_at,
            frustration_level=self.memory.get_frustration_level(),
            approval_level=self.memory.get_approval_level(),
            interviewer_mood=self.memory.get_mood(),
            memory=self.memory.get_memory_stats(),
        )

    def reset(self) -> None:
        self.interruption_history = []
        self.follow_up_queue = []
        self.detector.reset()
        self.memory.reset()
        self.rapid_fire.reset()


__all__ = [
    "CONCLUSION_MESSAGES",
    "CONTRADICTION_FALLBACK",
    "DYNAMIC_FOLLOW_UPS",
    "FlowDeps",
    "ConversationFlowController",
]
