"""Interviewer dispositions keyed by the candidate's background."""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class InterviewerProfile(BaseModel):
    """Knobs that shape when and how the interviewer cuts in."""

    background_id: str = "general"
    questioning_style: str = "standard-political"
    interruption_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    follow_up_tendency: float = Field(default=0.6, ge=0.0, le=1.0)
    contextual_focus: List[str] = Field(default_factory=list)
    expertise_topics: List[str] = Field(default_factory=list)
    contextual_reactions: Dict[str, List[str]] = Field(default_factory=dict)


STYLE_INTERRUPTIONS: Dict[str, List[str]] = {
    "confrontational-accountability": [
        "Stop right there. That's not taking responsibility.",
        "You're evading again. Answer the question.",
        "The victims deserve better than these excuses.",
    ],
    "environmental-justice": [
        "Corporate speak won't save the planet.",
        "That sounds like the same greenwashing Shell always used.",
        "Climate action requires more than words.",
    ],
    "practical-exploration": [
        "Let's keep this practical. How would this actually work?",
        "That's good in theory, but what about implementation?",
        "Business experience should translate to concrete solutions.",
    ],
}

DEFAULT_INTERRUPTIONS: List[str] = [
    "Could you be more specific?",
    "That doesn't really answer the question.",
    "Let's focus on the substance.",
]

_PROFILES: Dict[str, Dict] = {
    "toeslagenaffaire-whistleblower": {
        "questioning_style": "confrontational-accountability",
        "interruption_threshold": 0.7,
        "follow_up_tendency": 0.9,
        "contextual_focus": ["accountability", "trust", "competence", "victims"],
        "expertise_topics": ["welfare", "government", "accountability"],
        "contextual_reactions": {
            "accountability": [
                "You talk about accountability, but where was yours when families were suffering?",
                "Accountability means taking responsibility, not just exposing others.",
                "The victims are still waiting for real accountability from people like you.",
            ],
            "trust": [
                "Trust? You were part of the system that destroyed trust.",
                "How do you rebuild trust when you helped break it?",
                "Trust has to be earned, especially after institutional betrayal.",
            ],
        },
    },
    "shell-executive": {
        "questioning_style": "environmental-justice",
        "interruption_threshold": 0.6,
        "follow_up_tendency": 0.8,
        "contextual_focus": ["climate", "corporate-accountability", "greenwashing", "profits-vs-planet"],
        "contextual_reactions": {
            "climate": [
                "Shell knew about climate change for decades. Did you?",
                "How do you reconcile profit maximization with climate action?",
                "Corporate climate promises are often greenwashing. How is this different?",
            ],
            "corporate-accountability": [
                "Executives always claim they were just following the board. Were you?",
                "Corporate accountability means more than shareholder returns.",
                "How do we know this isn't just another corporate rebranding?",
            ],
        },
    },
    "small-business-owner": {
        "questioning_style": "practical-exploration",
        "interruption_threshold": 0.8,
        "follow_up_tendency": 0.5,
        "contextual_focus": ["economy", "regulation", "practical-experience", "relatability"],
    },
    "financial-analyst": {
        "questioning_style": "technical-challenge",
        "interruption_threshold": 0.7,
        "follow_up_tendency": 0.7,
        "contextual_focus": ["economy", "inequality", "financial-expertise", "voter-connection"],
        "expertise_topics": ["economy", "housing", "taxation"],
    },
    "academic-researcher": {
        "questioning_style": "intellectual-accessibility",
        "interruption_threshold": 0.8,
        "follow_up_tendency": 0.6,
        "contextual_focus": ["education", "research", "theory-vs-practice", "accessibility"],
        "expertise_topics": ["education", "research", "policy"],
    },
    "tech-entrepreneur": {
        "questioning_style": "disruption-accountability",
        "interruption_threshold": 0.6,
        "follow_up_tendency": 0.7,
        "contextual_focus": ["inequality", "tech-regulation", "disruption", "wealth-responsibility"],
        "expertise_topics": ["innovation", "digital", "economy"],
    },
    "environmental-activist": {
        "questioning_style": "activist-to-leader",
        "interruption_threshold": 0.7,
        "follow_up_tendency": 0.6,
        "contextual_focus": ["climate", "compromise", "pragmatism", "governing-vs-activism"],
        "expertise_topics": ["climate", "energy", "sustainability"],
    },
    "former-politician": {
        "questioning_style": "redemption-skepticism",
        "interruption_threshold": 0.5,
        "follow_up_tendency": 0.9,
        "contextual_focus": ["failure", "second-chances", "lessons-learned", "credibility"],
    },
    "former-journalist": {
        "questioning_style": "professional-transition",
        "interruption_threshold": 0.6,
        "follow_up_tendency": 0.8,
        "contextual_focus": ["media-relations", "independence", "journalism-ethics", "role-transition"],
    },
}


def profile_for_background(background_id: Optional[str]) -> InterviewerProfile:
    """Built-in profile for a background; unknown ids get the standard one."""

    key = background_id or "general"
    data = _PROFILES.get(key)
    if data is None:
        return InterviewerProfile(background_id=key)
    return InterviewerProfile(background_id=key, **data)


def known_backgrounds() -> List[str]:
    return sorted(_PROFILES)


__all__ = [
    "InterviewerProfile",
    "STYLE_INTERRUPTIONS",
    "DEFAULT_INTERRUPTIONS",
    "profile_for_background",
    "known_backgrounds",
]
