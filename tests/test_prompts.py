"""
Tests for prompt classification, quality scoring and prompt statistics.
"""

from dashboard_service.analytics import prompt_stats
from dashboard_service.analytics.models import PromptCategory
from dashboard_service.analytics.prompts import (
    BROAD_TAXONOMY,
    NARROW_TAXONOMY,
    categorize,
    extract_topics,
    score_quality,
)


class TestCategorize:
    """Keyword taxonomies"""

    def test_debugging_first_in_broad(self):
        assert categorize("please debug this error in my function") == PromptCategory.DEBUGGING

    def test_narrow_keeps_code_generation_first(self):
        assert categorize("please debug this error in my function", NARROW_TAXONOMY) == PromptCategory.CODE_GENERATION
        assert categorize("write a method that fails", NARROW_TAXONOMY) == PromptCategory.CODE_GENERATION
        assert categorize("it fails with an exception", NARROW_TAXONOMY) == PromptCategory.DEBUGGING
        assert NARROW_TAXONOMY.category_names[:3] == ["Code Generation", "Code Explanation", "Debugging"]

    def test_case_insensitive(self):
        assert categorize("EXPLAIN this regex") == PromptCategory.CODE_EXPLANATION

    def test_fallback(self):
        assert categorize("hello there") == PromptCategory.OTHER
        assert categorize("hello there", NARROW_TAXONOMY) == PromptCategory.OTHER

    def test_empty_input(self):
        assert categorize("") == PromptCategory.OTHER
        assert categorize(None, NARROW_TAXONOMY) == PromptCategory.UNKNOWN

    def test_taxonomies_differ(self):
        assert categorize("deploy with docker") == PromptCategory.DEVOPS
        assert categorize("deploy with docker", NARROW_TAXONOMY) == PromptCategory.OTHER
        assert len(BROAD_TAXONOMY.category_names) == 14
        assert len(NARROW_TAXONOMY.category_names) == 7


class TestScoreQuality:
    """Additive quality heuristic"""

    def test_empty_prompt(self):
        quality = score_quality("")
        assert quality.score == 0
        assert quality.reasons == ["Empty prompt"]

    def test_short_question(self):
        quality = score_quality("Why?")
        assert quality.score == 25
        assert quality.reasons == ["Very short prompt", "Includes a question"]

    def test_capped_at_100(self):
        prompt = ("Please explain exactly how this specific function behaves when called? " * 10) + "```x = 1```"
        quality = score_quality(prompt)
        assert quality.score == 100
        assert "Includes code examples" in quality.reasons


class TestExtractTopics:
    """Common topic extraction"""

    def test_counts_and_stop_words(self):
        topics = extract_topics(["Python testing with pytest", "python packaging", "would python"])
        assert topics[0].word == "python"
        assert topics[0].count == 3
        assert "would" not in {topic.word for topic in topics}

    def test_ties_keep_first_seen_order(self):
        topics = extract_topics(["zeta alpha", "alpha zeta"])
        assert [topic.word for topic in topics] == ["zeta", "alpha"]

    def test_limit(self):
        prompts = [" ".join(f"word{i:03d}" for i in range(50))]
        assert len(extract_topics(prompts)) == 20


class TestPromptStats:
    """Prompt log rollups"""

    def test_category_breakdown(self, prompt_items):
        breakdown = prompt_stats.category_breakdown(prompt_items)
        names = {entry["name"]: entry["count"] for entry in breakdown["categories"]}
        assert names == {"Debugging": 1, "Code Generation": 1, "Code Explanation": 1}
        assert [entry["date"] for entry in breakdown["trends"]] == ["2024-01-01", "2024-01-03"]
        assert {entry["userId"] for entry in breakdown["userCategories"]} == {"alice", "bob"}

    def test_category_distribution_percentages(self, prompt_items):
        distribution = prompt_stats.category_distribution(prompt_items)
        assert distribution["total"] == 3
        assert distribution["categories"] == [
            {"category": "Code Generation", "count": 2, "percentage": 67},
            {"category": "Code Explanation", "count": 1, "percentage": 33},
        ]

    def test_type_distribution(self, prompt_items):
        distribution = prompt_stats.type_distribution(prompt_items)
        counts = {entry["type"]: entry["count"] for entry in distribution["distribution"]}
        assert counts == {"MANUAL": 2, "INLINE_CHAT": 1, "UNKNOWN": 1}

    def test_length_distribution_ignores_empty(self, prompt_items):
        lengths = prompt_stats.length_distribution(prompt_items)
        assert lengths["total"] == 3
        assert lengths["lengthData"]["characterCount"]["distribution"]["Very Short (1-50)"] == 2

    def test_patterns_need_repeats(self):
        items = [{"Prompt": "How do I sort a list"}, {"Prompt": "how do i sort a dict"}, {"Prompt": "other"}]
        patterns = prompt_stats.prompt_patterns(items)
        assert patterns["startingPhrases"] == [{"phrase": "how do i sort a", "count": 2}]

    def test_follow_ups(self, prompt_items):
        quality = prompt_stats.response_quality(prompt_items)
        assert quality["total"] == 3
        assert quality["qualityMetrics"]["promptsWithFollowUps"] == 1

    def test_time_analysis_sunday_first(self):
        # 2024-01-07 was a Sunday
        analysis = prompt_stats.time_analysis([{"TimeStamp": "2024-01-07T13:00:00Z"}])
        assert analysis["byDayOfWeek"][0] == {"day": "Sunday", "count": 1}
        assert analysis["byHour"][13]["count"] == 1

    def test_analyze_empty(self):
        analysis = prompt_stats.analyze_prompts([])
        assert analysis["promptQuality"]["average"] == 0
        assert analysis["commonTopics"] == []

    def test_paginate_newest_first(self, prompt_items):
        page = prompt_stats.paginate_prompts(prompt_items, page=1, limit=2)
        assert page["total"] == 3
        assert page["totalPages"] == 2
        assert page["data"][0]["UserId"] == "bob"

    def test_paginate_include_empty(self, prompt_items):
        page = prompt_stats.paginate_prompts(prompt_items, include_empty=True)
        assert page["total"] == 4
        assert page["data"][0]["TimeStamp"] == "2024-01-10T08:00:00Z"
