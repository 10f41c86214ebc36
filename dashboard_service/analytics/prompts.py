# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Prompt Classifier and Quality Scorer

Two keyword taxonomies are kept side by side because the endpoints that use
them report different category counts for the same prompts:
- BROAD_TAXONOMY: fourteen categories, used by the prompt analysis views
- NARROW_TAXONOMY: seven categories, used by the category distribution view
"""

import re
from collections import Counter
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple

from dashboard_service.analytics.models import PromptCategory, QualityScore, Topic

TOP_TOPICS = 20

STOP_WORDS = frozenset([
    "the", "and", "a", "an", "in", "on", "at", "to", "for", "with", "by", "about",
    "as", "of", "is", "are", "was", "were", "be", "been", "being", "have", "has",
    "had", "do", "does", "did", "will", "would", "shall", "should", "may", "might",
    "must", "can", "could",
])

SPECIFICITY_KEYWORDS = ("specific", "exactly", "precisely")

# (upper bound exclusive, points, reason); the last band has no upper bound
LENGTH_BANDS: Tuple[Tuple[Optional[int], int, str], ...] = (
    (10, 20, "Very short prompt"),
    (50, 40, "Short prompt"),
    (200, 70, "Moderate length prompt"),
    (500, 90, "Detailed prompt"),
    (None, 100, "Very detailed prompt"),
)


@dataclass(frozen=True)
class Taxonomy:
    """Ordered keyword table; the first category with a matching keyword wins."""
    name: str
    categories: Tuple[Tuple[PromptCategory, Tuple[str, ...]], ...]
    fallback: PromptCategory = PromptCategory.OTHER
    empty: PromptCategory = PromptCategory.OTHER

    def categorize(self, prompt: Any) -> PromptCategory:
        if not prompt or not isinstance(prompt, str):
            return self.empty

        text = prompt.lower()
        for category, keywords in self.categories:
            if any(keyword in text for keyword in keywords):
                return category
        return self.fallback

    @property
    def category_names(self) -> List[str]:
        return [category.value for category, _ in self.categories]


BROAD_TAXONOMY = Taxonomy(
    name="broad",
    categories=(
        (PromptCategory.DEBUGGING, ("debug", "fix", "error", "issue", "problem", "not working", "bug")),
        (PromptCategory.CODE_GENERATION, ("create", "generate", "write", "code", "function", "class", "implement")),
        (PromptCategory.CODE_EXPLANATION, ("explain", "what does", "how does", "understand", "clarify")),
        (PromptCategory.DOCUMENTATION, ("document", "comment", "explain code", "documentation")),
        (PromptCategory.BEST_PRACTICES, ("best practice", "pattern", "optimize", "improve", "better way")),
        (PromptCategory.ARCHITECTURE, ("design", "architecture", "structure", "pattern", "organize")),
        (PromptCategory.TESTING, ("test", "unit test", "integration test", "mock", "stub", "testing")),
        (PromptCategory.DEVOPS, ("deploy", "ci/cd", "pipeline", "docker", "kubernetes", "aws", "cloud")),
        (PromptCategory.DATABASE, ("database", "sql", "query", "schema", "table", "nosql", "mongodb")),
        (PromptCategory.SECURITY, ("security", "authentication", "authorization", "encrypt", "vulnerability")),
        (PromptCategory.UI_UX, ("ui", "ux", "interface", "design", "css", "html", "frontend")),
        (PromptCategory.API, ("api", "rest", "graphql", "endpoint", "request", "response")),
        (PromptCategory.PERFORMANCE, ("performance", "optimize", "slow", "fast", "speed", "efficient")),
        (PromptCategory.LEARNING, ("learn", "tutorial", "guide", "how to", "example")),
    ),
)

NARROW_TAXONOMY = Taxonomy(
    name="narrow",
    categories=(
        (PromptCategory.CODE_GENERATION, ("create", "generate", "write", "implement", "code", "function", "class", "method")),
        (PromptCategory.CODE_EXPLANATION, ("explain", "describe", "clarify", "understand", "what does", "how does")),
        (PromptCategory.DEBUGGING, ("debug", "fix", "error", "issue", "problem", "not working", "fails", "exception")),
        (PromptCategory.DOCUMENTATION, ("document", "comment", "documentation", "jsdoc", "javadoc", "readme")),
        (PromptCategory.BEST_PRACTICES, ("best practice", "pattern", "convention", "standard", "optimize", "improve")),
        (PromptCategory.LEARNING, ("learn", "tutorial", "guide", "example", "how to", "teach me")),
        (PromptCategory.API_USAGE, ("api", "endpoint", "request", "response", "http", "rest", "graphql")),
    ),
    empty=PromptCategory.UNKNOWN,
)


def categorize(prompt: Any, taxonomy: Taxonomy = BROAD_TAXONOMY) -> PromptCategory:
    """Assign a prompt to exactly one category of ``taxonomy``."""
    return taxonomy.categorize(prompt)


def count_words(text: str) -> int:
    if not text or not text.strip():
        return 0
    return len(text.strip().split())


def has_code_block(prompt: str) -> bool:
    return "```" in prompt or "    " in prompt


def score_quality(prompt: Any) -> QualityScore:
    """
    Score a prompt from 0 to 100 with an additive heuristic.

    Length band (20-100), +10 for more than 15 words, +15 for a code block,
    +5 for a question, +10 for specific language; capped at 100.
    """
    if not prompt or not isinstance(prompt, str):
        return QualityScore(score=0, reasons=["Empty prompt"])

    score = 0
    reasons = []

    length = len(prompt)
    for upper, points, reason in LENGTH_BANDS:
        if upper is None or length < upper:
            score += points
            reasons.append(reason)
            break

    # Leading whitespace counts as an empty first word
    if len(re.split(r"\s+", prompt)) > 15:
        score += 10
        reasons.append("Good word count")

    if has_code_block(prompt):
        score += 15
        reasons.append("Includes code examples")

    if "?" in prompt:
        score += 5
        reasons.append("Includes a question")

    if any(keyword in prompt for keyword in SPECIFICITY_KEYWORDS):
        score += 10
        reasons.append("Uses specific language")

    return QualityScore(score=min(100, score), reasons=reasons)


def tokenize(prompt: str) -> List[str]:
    """Lower-cased words longer than three characters, stop words removed."""
    return [
        word for word in re.split(r"\W+", prompt.lower())
        if len(word) > 3 and word not in STOP_WORDS
    ]


def extract_topics(prompts: Iterable[Any], limit: int = TOP_TOPICS) -> List[Topic]:
    """Most frequent words across prompts; ties keep first-seen order."""
    counts: Counter = Counter()
    for prompt in prompts:
        if not prompt or not isinstance(prompt, str):
            continue
        counts.update(tokenize(prompt))

    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [Topic(word=word, count=count) for word, count in ranked[:limit]]
