"""
Lesson content generation.

TemplateGenerator is a deterministic stand-in for a generative service: it
fills every field from templates built around the topic. Anything with the
same async interface (LessonGenerator) can replace it.
"""

import asyncio
import logging
import os
from typing import Protocol

from core.enums import Section
from .errors import ValidationError
from .types import Activity, KeyConcept, Lesson, LessonMetadata

logger = logging.getLogger(__name__)

# Number of entries a regenerated list section always has
REGENERATED_SECTION_SIZE = 4


class LessonGenerator(Protocol):
    async def generate(self, topic: str, hint: str = "") -> Lesson:
        ...

    async def regenerate(self, topic: str, section: Section) -> str | list:
        ...


def _clean_topic(topic: str | None) -> str:
    topic = (topic or "").strip()
    if not topic:
        raise ValidationError("Topic is required")
    return topic


class TemplateGenerator:
    """Builds lessons from fixed templates."""

    def __init__(self, delay: float | None = None):
        """
        Args:
            delay: Seconds to wait before each result (simulated latency).
                   Defaults to GENERATOR_DELAY_SECONDS, or 0.
        """
        if delay is None:
            delay = float(os.environ.get("GENERATOR_DELAY_SECONDS", "0"))
        self.delay = delay

    async def _wait(self) -> None:
        if self.delay > 0:
            await asyncio.sleep(self.delay)

    async def generate(self, topic: str, hint: str = "") -> Lesson:
        """
        Generate a new lesson draft for a topic.

        Args:
            topic: Subject of the lesson
            hint: Free-text guidance (audience, aspects to cover); unused by the templates

        Returns:
            Lesson without id or created_at, with empty content

        Raises:
            ValidationError: If topic is blank
        """
        topic = _clean_topic(topic)
        await self._wait()
        logger.info("Generated lesson draft for topic %r", topic)

        return Lesson(
            topic=topic,
            title=f"Understanding {topic}",
            description=(
                f"A comprehensive introduction to {topic} designed for beginners. "
                "This lesson covers the fundamental concepts and provides practical examples."
            ),
            learning_outcomes=[
                f"Explain the core principles of {topic}",
                f"Identify key components involved in {topic}",
                f"Apply knowledge of {topic} to solve basic problems",
                f"Analyze real-world examples of {topic}",
            ],
            key_concepts=[
                KeyConcept(
                    name=f"Foundation of {topic}",
                    description=f"The basic building blocks and principles that make up {topic}.",
                ),
                KeyConcept(
                    name=f"{topic} in Practice",
                    description=f"How {topic} is applied in real-world scenarios and its practical implications.",
                ),
                KeyConcept(
                    name=f"Advanced {topic} Concepts",
                    description=f"More complex aspects of {topic} for deeper understanding.",
                ),
            ],
            activities=[
                Activity(
                    title="Group Discussion",
                    description=(
                        f"Break into small groups and discuss how {topic} affects everyday life. "
                        "Share examples and insights."
                    ),
                ),
                Activity(
                    title="Problem-Solving Exercise",
                    description=f"Complete the worksheet with problems related to {topic} and apply the concepts learned.",
                ),
                Activity(
                    title="Research Project",
                    description=f"Research a specific aspect of {topic} and prepare a short presentation for the class.",
                ),
            ],
            metadata=LessonMetadata(difficulty="Beginner", estimated_time="45 minutes", prerequisites=[]),
            content=None,
        )

    async def regenerate(self, topic: str, section: Section | str) -> str | list:
        """
        Produce a replacement value for one section.

        Scalar sections get a new string; list sections get a full new list of
        REGENERATED_SECTION_SIZE entries.
        """
        topic = _clean_topic(topic)
        section = Section(section)
        await self._wait()

        if section is Section.title:
            return f"Mastering {topic}: A Comprehensive Guide"

        if section is Section.description:
            return (
                f"An in-depth exploration of {topic} designed for learners of all levels. "
                "This lesson provides both theoretical foundations and practical applications "
                "to ensure a well-rounded understanding."
            )

        if section is Section.learningOutcomes:
            return [
                f"Comprehensively explain the theory behind {topic}",
                f"Demonstrate proficiency in applying {topic} concepts",
                f"Evaluate and critique examples of {topic} in various contexts",
                f"Create original solutions using principles of {topic}",
            ]

        if section is Section.keyConcepts:
            return [
                KeyConcept(
                    name=f"{topic} Fundamentals",
                    description=f"Essential principles and components that form the foundation of {topic}.",
                ),
                KeyConcept(
                    name=f"{topic} Methodologies",
                    description=f"Systematic approaches and frameworks used in {topic}.",
                ),
                KeyConcept(
                    name=f"{topic} Applications",
                    description=f"Practical implementations and real-world uses of {topic}.",
                ),
                KeyConcept(
                    name=f"Future of {topic}",
                    description=f"Emerging trends and developments in the field of {topic}.",
                ),
            ]

        return [
            Activity(
                title="Case Study Analysis",
                description=f"Analyze the provided case studies related to {topic} and identify key principles in action.",
            ),
            Activity(
                title="Collaborative Projects",
                description=f"Work in teams to develop a solution to a problem using {topic} concepts.",
            ),
            Activity(
                title="Reflective Journal",
                description=f"Document your learning journey with {topic}, noting challenges, insights, and applications.",
            ),
            Activity(
                title="Peer Teaching",
                description=f"Prepare a mini-lesson on an aspect of {topic} and teach it to a small group of peers.",
            ),
        ]
