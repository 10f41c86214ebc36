# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Prompt log statistics.

Breakdowns of logged prompts by category, trigger type, length, common
phrasing, response length, follow-up behaviour and time of day.
"""

import math
import re
from collections import Counter, defaultdict
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from dashboard_service.analytics.models import PromptRecord
from dashboard_service.analytics.prompts import (
    BROAD_TAXONOMY,
    NARROW_TAXONOMY,
    count_words,
    extract_topics,
    score_quality,
)

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

FOLLOW_UP_WINDOW = timedelta(minutes=5)

PATTERN_STOP_WORDS = frozenset([
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "with",
    "by", "about", "as", "of", "is", "are", "was", "were",
])

CHARACTER_BANDS = (
    (50, "Very Short (1-50)"),
    (100, "Short (51-100)"),
    (250, "Medium (101-250)"),
    (500, "Long (251-500)"),
    (None, "Very Long (500+)"),
)

WORD_BANDS = (
    (10, "Very Short (1-10)"),
    (20, "Short (11-20)"),
    (50, "Medium (21-50)"),
    (100, "Long (51-100)"),
    (None, "Very Long (100+)"),
)

RESPONSE_BANDS = (
    (100, "Very Short (1-100)"),
    (500, "Short (101-500)"),
    (1000, "Medium (501-1000)"),
    (2000, "Long (1001-2000)"),
    (None, "Very Long (2000+)"),
)

# Lower bounds for the quality distribution buckets
QUALITY_BANDS = (
    (90, "excellent"),
    (70, "good"),
    (50, "average"),
    (30, "poor"),
    (0, "veryPoor"),
)


def _band(value: int, bands: Sequence[Tuple[Optional[int], str]]) -> str:
    """Label of the first band whose inclusive upper bound holds ``value``."""
    for upper, label in bands:
        if upper is None or value <= upper:
            return label
    return bands[-1][1]


def _has_text(value: Optional[str]) -> bool:
    return bool(value and value.strip())


def _js_round(value: float) -> int:
    """Round half up, matching the frontend's Math.round."""
    return math.floor(value + 0.5)


def _counts_to_list(counts: Mapping[str, int], key: str) -> List[Dict[str, Any]]:
    return [{key: name, "count": count} for name, count in counts.items()]


def weekday_index(moment: datetime) -> int:
    """Day of week with Sunday as 0."""
    return (moment.weekday() + 1) % 7


def category_breakdown(items: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Broad-taxonomy categories overall, per day and per user.

    Prompts without text or user are ignored; prompts without a timestamp
    count overall and per user but not in the daily trends.
    """
    categories: Counter = Counter()
    trends: Dict[str, Counter] = defaultdict(Counter)
    user_categories: Dict[str, Counter] = defaultdict(Counter)

    for item in items:
        record = PromptRecord.coerce(item)
        if not record.prompt or not record.user_id:
            continue

        category = BROAD_TAXONOMY.categorize(record.prompt).value
        categories[category] += 1
        user_categories[record.user_id][category] += 1

        if record.timestamp is not None:
            trends[record.timestamp.date().isoformat()][category] += 1

    ranked = sorted(categories.items(), key=lambda item: item[1], reverse=True)

    return {
        "categories": [{"name": name, "count": count} for name, count in ranked],
        "trends": [
            {"date": day, "categories": _counts_to_list(trends[day], "name")}
            for day in sorted(trends)
        ],
        "userCategories": [
            {"userId": user_id, "categories": _counts_to_list(counts, "name")}
            for user_id, counts in user_categories.items()
        ],
    }


def category_distribution(items: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    """Narrow-taxonomy category counts with whole-number percentages."""
    counts: Counter = Counter()
    total = 0
    for item in items:
        record = PromptRecord.coerce(item)
        if not _has_text(record.prompt):
            continue
        total += 1
        counts[NARROW_TAXONOMY.categorize(record.prompt).value] += 1

    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return {
        "total": total,
        "categories": [
            {
                "category": category,
                "count": count,
                "percentage": _js_round(count / total * 100) if total else 0,
            }
            for category, count in ranked
        ],
    }


def type_distribution(items: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    """Prompt counts by chat trigger type."""
    items = list(items)
    counts: Counter = Counter(PromptRecord.coerce(item).chat_trigger_type or "UNKNOWN" for item in items)
    return {
        "total": len(items),
        "distribution": _counts_to_list(counts, "type"),
    }


def _length_stats(values: List[int], bands) -> Dict[str, Any]:
    distribution = {label: 0 for _, label in bands}
    for value in values:
        distribution[_band(value, bands)] += 1
    return {
        "min": min(values) if values else 0,
        "max": max(values) if values else 0,
        "avg": _js_round(sum(values) / len(values)) if values else 0,
        "distribution": distribution,
        "distributionArray": [{"range": label, "count": count} for label, count in distribution.items()],
    }


def length_distribution(items: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    """Character and word count statistics of non-empty prompts."""
    prompts = [record.prompt for record in map(PromptRecord.coerce, items) if _has_text(record.prompt)]
    return {
        "total": len(prompts),
        "lengthData": {
            "characterCount": _length_stats([len(prompt) for prompt in prompts], CHARACTER_BANDS),
            "wordCount": _length_stats([count_words(prompt) for prompt in prompts], WORD_BANDS),
        },
    }


def prompt_patterns(items: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    """Repeated opening phrases (first five words) and the most common words."""
    starting_phrases: Counter = Counter()
    common_words: Counter = Counter()
    total = 0

    for item in items:
        record = PromptRecord.coerce(item)
        if not _has_text(record.prompt):
            continue
        total += 1

        words = record.prompt.strip().split()
        starting_phrases[" ".join(words[:5]).lower()] += 1

        for word in words:
            clean = re.sub(r"[^\w]", "", word.lower())
            if len(clean) > 3 and clean not in PATTERN_STOP_WORDS:
                common_words[clean] += 1

    phrases = sorted(
        ((phrase, count) for phrase, count in starting_phrases.items() if count > 1),
        key=lambda item: item[1],
        reverse=True,
    )
    words = sorted(common_words.items(), key=lambda item: item[1], reverse=True)

    return {
        "total": total,
        "startingPhrases": [{"phrase": phrase, "count": count} for phrase, count in phrases[:10]],
        "commonWords": [{"word": word, "count": count} for word, count in words[:20]],
    }


def response_quality(items: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Response length distribution and follow-up rate.

    A prompt is a follow-up when the same user sent it within five minutes
    of their previous prompt. Each run of follow-ups counts once towards
    ``promptsWithFollowUps`` and every prompt in the run counts towards the
    follow-up rate.
    """
    prompts_by_user: Dict[str, List[PromptRecord]] = defaultdict(list)
    for item in items:
        record = PromptRecord.coerce(item)
        if record.user_id:
            prompts_by_user[record.user_id].append(record)

    distribution = {label: 0 for _, label in RESPONSE_BANDS}
    total_length = 0
    valid_responses = 0
    follow_up_count = 0
    prompts_with_follow_ups = 0

    for records in prompts_by_user.values():
        records.sort(key=lambda record: record.timestamp or datetime.min)

        index = 0
        while index < len(records):
            record = records[index]
            if not _has_text(record.response):
                index += 1
                continue

            valid_responses += 1
            total_length += len(record.response)
            distribution[_band(len(record.response), RESPONSE_BANDS)] += 1

            previous = records[index - 1] if index > 0 else None
            if previous is not None and _within_follow_up_window(previous, record):
                follow_up_count += 1
                prompts_with_follow_ups += 1
                # Absorb the rest of the run
                index += 1
                while index < len(records) and _within_follow_up_window(record, records[index]):
                    follow_up_count += 1
                    index += 1
                continue
            index += 1

    return {
        "total": valid_responses,
        "qualityMetrics": {
            "responseLength": {
                "avg": _js_round(total_length / valid_responses) if valid_responses else 0,
                "distribution": distribution,
                "distributionArray": [{"range": label, "count": count} for label, count in distribution.items()],
            },
            "followUpRate": _js_round(follow_up_count / valid_responses * 100) if valid_responses else 0,
            "promptsWithFollowUps": prompts_with_follow_ups,
        },
    }


def _within_follow_up_window(earlier: PromptRecord, later: PromptRecord) -> bool:
    if earlier.timestamp is None or later.timestamp is None:
        return False
    return later.timestamp - earlier.timestamp <= FOLLOW_UP_WINDOW


def time_analysis(items: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    """Prompt counts by date, hour of day and day of week."""
    items = list(items)
    by_date: Counter = Counter()
    by_hour = [0] * 24
    by_day = [0] * 7

    for item in items:
        timestamp = PromptRecord.coerce(item).timestamp
        if timestamp is None:
            continue
        by_date[timestamp.date().isoformat()] += 1
        by_hour[timestamp.hour] += 1
        by_day[weekday_index(timestamp)] += 1

    return {
        "total": len(items),
        "byDate": [{"date": day, "count": by_date[day]} for day in sorted(by_date)],
        "byHour": [{"hour": hour, "count": count} for hour, count in enumerate(by_hour)],
        "byDayOfWeek": [{"day": DAY_NAMES[day], "count": count} for day, count in enumerate(by_day)],
    }


def analyze_prompts(items: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    """Combined prompt analysis used by the prompt insights view."""
    items = list(items)
    records = [PromptRecord.coerce(item) for item in items]

    prompt_types: Counter = Counter()
    prompt_categories: Counter = Counter()
    quality_distribution = {label: 0 for _, label in QUALITY_BANDS}
    length_distribution_counts = {"veryShort": 0, "short": 0, "medium": 0, "long": 0, "veryLong": 0}
    by_hour = [0] * 24
    by_day = [0] * 7
    temporal: List[Dict[str, Any]] = []
    total_quality = 0

    for record in records:
        if not record.prompt:
            continue

        prompt_type = record.chat_trigger_type or "UNKNOWN"
        prompt_types[prompt_type] += 1

        category = BROAD_TAXONOMY.categorize(record.prompt).value
        prompt_categories[category] += 1

        quality = score_quality(record.prompt)
        total_quality += quality.score
        for lower, label in QUALITY_BANDS:
            if quality.score >= lower:
                quality_distribution[label] += 1
                break

        length = len(record.prompt)
        if length < 10:
            length_distribution_counts["veryShort"] += 1
        elif length < 50:
            length_distribution_counts["short"] += 1
        elif length < 200:
            length_distribution_counts["medium"] += 1
        elif length < 500:
            length_distribution_counts["long"] += 1
        else:
            length_distribution_counts["veryLong"] += 1

        if record.timestamp is None:
            continue

        hour = record.timestamp.hour
        day = weekday_index(record.timestamp)
        by_hour[hour] += 1
        by_day[day] += 1
        temporal.append({
            "date": record.timestamp.date().isoformat(),
            "hour": hour,
            "day": day,
            "category": category,
            "type": prompt_type,
            "qualityScore": quality.score,
        })

    return {
        "totalPrompts": len(records),
        "promptTypes": _counts_to_list(prompt_types, "type"),
        "promptCategories": _counts_to_list(prompt_categories, "category"),
        "promptQuality": {
            "average": total_quality / len(records) if records else 0,
            "distribution": quality_distribution,
        },
        "promptLengthDistribution": length_distribution_counts,
        "promptsByHour": [
            {"hour": hour, "label": f"{hour}:00", "count": count} for hour, count in enumerate(by_hour)
        ],
        "promptsByDay": [{"day": DAY_NAMES[day], "count": count} for day, count in enumerate(by_day)],
        "commonTopics": [topic.model_dump() for topic in extract_topics(record.prompt for record in records)],
        "temporalAnalysis": temporal,
    }


def paginate_prompts(
    items: Iterable[Mapping[str, Any]],
    page: int = 1,
    limit: int = 50,
    include_empty: bool = False,
) -> Dict[str, Any]:
    """Newest-first page of prompt items; empty prompt/response pairs dropped unless requested."""
    results = list(items)
    if not include_empty:
        results = [
            item for item in results
            if _has_text(PromptRecord.coerce(item).prompt) and _has_text(PromptRecord.coerce(item).response)
        ]

    results.sort(key=lambda item: PromptRecord.coerce(item).timestamp or datetime.min, reverse=True)

    start = (page - 1) * limit
    return {
        "total": len(results),
        "page": page,
        "limit": limit,
        "totalPages": math.ceil(len(results) / limit) if limit else 0,
        "data": results[start:start + limit],
    }
