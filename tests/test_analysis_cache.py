"""Tests for the analysis cache service."""

import pytest

from autofill_cache.services import AnalysisCacheService, CacheStore, calculate_priority, compact_analysis
from autofill_cache.utils import KeyGenerator
from conftest import FailingBlobStore, load

FORM = "<form><input name='email'><input type='file' name='resume'></form>"
JOB_URL = "https://jobs.example.com/apply/42"


@pytest.fixture
def service(cache):
    return AnalysisCacheService(cache_store=cache, key_generator=KeyGenerator(), max_content_size=1000)


class TestCalculatePriority:
    def test_base(self):
        assert calculate_priority("https://example.com/contact") == 50

    def test_everything_valuable(self):
        assert calculate_priority(JOB_URL, complexity="high", confidence=95, has_file_uploads=True) == 100

    def test_low_value(self):
        assert calculate_priority("https://blog.example.com", complexity="low", confidence=30) == 40

    @pytest.mark.parametrize("url", ["https://example.com/CAREERS", "https://example.com/job/1"])
    def test_job_urls(self, url):
        assert calculate_priority(url) == 70

    def test_medium_complexity(self):
        assert calculate_priority("https://example.com", complexity="medium") == 60

    def test_confidence_bounds(self):
        assert calculate_priority("https://example.com", confidence=80) == 50
        assert calculate_priority("https://example.com", confidence=50) == 50


class TestCompactAnalysis:
    def test_truncates_reasoning(self):
        analysis = {
            "confidence": 90,
            "reasoning": "r" * 300,
            "instructions": [
                {"selector": "#email", "reasoning": "i" * 150},
                {"selector": "#name", "reasoning": "short"},
                "not-a-dict",
            ],
        }

        compacted = compact_analysis(analysis)

        assert compacted["reasoning"] == "r" * 200 + "..."
        assert compacted["instructions"][0]["reasoning"] == "i" * 100 + "..."
        assert compacted["instructions"][1]["reasoning"] == "short"
        assert compacted["instructions"][2] == "not-a-dict"
        assert analysis["reasoning"] == "r" * 300

    def test_non_dict_unchanged(self):
        assert compact_analysis(["a", "b"]) == ["a", "b"]


@pytest.mark.asyncio
class TestAnalysisCacheService:
    async def test_miss_then_hit(self, service):
        assert await service.get_cached_analysis(FORM, JOB_URL) is None

        key = await service.set_cached_analysis(FORM, JOB_URL, {"confidence": 90, "instructions": []})

        assert key is not None
        assert await service.get_cached_analysis(FORM, JOB_URL) == {"confidence": 90, "instructions": []}

    async def test_profile_is_part_of_key(self, service):
        await service.set_cached_analysis(FORM, JOB_URL, {"fill": "ada"}, profile_hash="ada")

        assert await service.is_cached(FORM, JOB_URL, profile_hash="ada") is True
        assert await service.is_cached(FORM, JOB_URL, profile_hash="bob") is False
        assert await service.is_cached(FORM, JOB_URL) is False

    async def test_url_is_part_of_key(self, service):
        assert service.cache_key(FORM, JOB_URL) != service.cache_key(FORM, "https://other.example.com")

    async def test_priority_stored(self, service, cache):
        key = await service.set_cached_analysis(
            FORM, JOB_URL, {"confidence": 95}, complexity="high", has_file_uploads=True
        )

        entry = (await load(cache)).entries[key]
        assert entry.priority == 100
        assert entry.source_url == JOB_URL

    async def test_compaction_applied(self, service):
        await service.set_cached_analysis(FORM, JOB_URL, {"reasoning": "x" * 500})

        cached = await service.get_cached_analysis(FORM, JOB_URL)

        assert cached["reasoning"] == "x" * 200 + "..."

    async def test_compaction_disabled(self, cache):
        service = AnalysisCacheService(cache_store=cache, key_generator=KeyGenerator(), compress=False)

        await service.set_cached_analysis(FORM, JOB_URL, {"reasoning": "x" * 500})

        assert (await service.get_cached_analysis(FORM, JOB_URL))["reasoning"] == "x" * 500

    async def test_oversized_content_skipped(self, service, blob_store):
        assert await service.set_cached_analysis("x" * 1001, JOB_URL, {"confidence": 90}) is None
        assert blob_store.writes == 0

    async def test_zero_content_limit_is_respected(self, cache, blob_store):
        service = AnalysisCacheService(cache_store=cache, key_generator=KeyGenerator(), max_content_size=0)

        assert await service.set_cached_analysis(FORM, JOB_URL, {"a": 1}) is None
        assert blob_store.writes == 0

    async def test_find_by_url(self, service):
        await service.set_cached_analysis(FORM, JOB_URL, {"a": 1})
        await service.set_cached_analysis(FORM, "https://blog.example.com", {"b": 2})

        matches = await service.find_by_url("jobs")

        assert [entry.source_url for entry in matches] == [JOB_URL]

    async def test_storage_failure_returns_none(self, clock):
        service = AnalysisCacheService.create(cache_store=CacheStore(blob_store=FailingBlobStore(), clock=clock))

        assert await service.set_cached_analysis(FORM, JOB_URL, {"a": 1}) is None
        assert await service.get_cached_analysis(FORM, JOB_URL) is None
