"""
Pillar Definitions for the OT Self-Assessment

The client rates six wellness/performance pillars from 0-10 and answers two
reflection questions for each. Pillar ids are stable; the short ``key`` is
the name the LLM sees by default.
"""

from dataclasses import dataclass, field


@dataclass
class Pillar:
    """Definition of an assessment pillar."""
    id: int
    key: str
    name: str
    question: str
    reflection_questions: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "key": self.key,
            "name": self.name,
            "question": self.question,
            "reflection_questions": self.reflection_questions,
        }


_REFLECTIONS = {
    "working": "What's working well in this area?",
    "challenging": "What feels challenging right now?",
}

PILLARS: list[Pillar] = [
    Pillar(
        id=1,
        key="physical",
        name="Physical Performance Optimization",
        question="From 1-10, how energized and physically capable do you feel in your daily life?",
        reflection_questions=dict(_REFLECTIONS),
    ),
    Pillar(
        id=2,
        key="cognitive",
        name="Cognitive Function Optimization",
        question="From 1-10, how focused, clear, and mentally sharp do you feel day to day?",
        reflection_questions=dict(_REFLECTIONS),
    ),
    Pillar(
        id=3,
        key="emotional",
        name="Emotional Wellbeing Optimization",
        question="From 1-10, how calm and emotionally grounded do you feel most days?",
        reflection_questions=dict(_REFLECTIONS),
    ),
    Pillar(
        id=4,
        key="environment",
        name="Environmental Design for Optimized Performance",
        question=(
            "From 1-10, how well does your environment (home, work, school) "
            "support your focus, energy, and wellbeing?"
        ),
        reflection_questions=dict(_REFLECTIONS),
    ),
    Pillar(
        id=5,
        key="engagement",
        name="Meaningful Engagement",
        question=(
            "From 1-10, how engaged and motivated do you feel in your routines, "
            "relationships, and responsibilities?"
        ),
        reflection_questions=dict(_REFLECTIONS),
    ),
    Pillar(
        id=6,
        key="purpose",
        name="Purposeful Living",
        question="From 1-10, how aligned do your daily actions feel with your deeper goals and values?",
        reflection_questions=dict(_REFLECTIONS),
    ),
]


def get_pillar_key_map() -> dict[str, str]:
    """Map of pillar id (as a JSON key) to short pillar key."""
    return {str(p.id): p.key for p in PILLARS}
