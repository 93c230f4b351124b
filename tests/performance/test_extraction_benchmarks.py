"""
Performance tests for date/time extraction.

Measures per-sentence extraction latency and checks that concurrent callers
sharing one extractor get consistent results.
"""

import statistics
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List

import pytest

from kordate.core.error_handler import NoMatchError
from kordate.processors.calendar_utils import FillPolicy
from kordate.processors.temporal_extractor import TemporalExtractor
from tests.conftest import FIXED_NOW, make_clock
from tests.fixtures.sample_data import BENCHMARK_SENTENCES


def _extract_everything(extractor: TemporalExtractor, text: str):
    results = {}
    for kind, call in (("dates", extractor.extract_dates), ("times", extractor.extract_times)):
        try:
            results[kind] = call(text, True)
        except NoMatchError:
            results[kind] = {}
    return results


class TestExtractionPerformance:
    """Latency and concurrency checks"""

    @pytest.fixture
    def benchmark_extractor(self):
        return TemporalExtractor("Asia/Seoul", clock=make_clock(*FIXED_NOW))

    def test_sentence_latency(self, benchmark_extractor):
        timings: List[float] = []

        for _ in range(50):
            for text in BENCHMARK_SENTENCES:
                started = time.perf_counter()
                _extract_everything(benchmark_extractor, text)
                timings.append(time.perf_counter() - started)

        p95 = statistics.quantiles(timings, n=20)[-1]
        assert statistics.mean(timings) < 0.01
        assert p95 < 0.05

    def test_concurrent_callers_agree(self, benchmark_extractor):
        expected = [_extract_everything(benchmark_extractor, text) for text in BENCHMARK_SENTENCES]

        def worker(_):
            return [_extract_everything(benchmark_extractor, text) for text in BENCHMARK_SENTENCES]

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(worker, range(32)))

        assert all(result == expected for result in results)

    def test_location_switch_under_load(self, benchmark_extractor):
        zones = ["Asia/Seoul", "UTC", "America/New_York"]

        def switcher(i):
            benchmark_extractor.set_location(zones[i % len(zones)])

        def reader(_):
            return benchmark_extractor.extract_date("오늘", True).location

        with ThreadPoolExecutor(max_workers=8) as executor:
            for i in range(30):
                executor.submit(switcher, i)
            locations = list(executor.map(reader, range(60)))

        assert set(locations) <= set(zones)

    def test_settings_switch_is_atomic(self, benchmark_extractor):
        settings = [
            ("Asia/Seoul", FillPolicy.ZERO_ON_MISSING),
            ("UTC", FillPolicy.FILL_FROM_NOW),
        ]

        def switcher(i):
            location, policy = settings[i % len(settings)]
            benchmark_extractor.apply_settings(location, policy, policy)

        def reader(_):
            value = benchmark_extractor.extract_date("11월 5일")
            return value.location, value.is_complete

        with ThreadPoolExecutor(max_workers=8) as executor:
            for i in range(30):
                executor.submit(switcher, i)
            observed = list(executor.map(reader, range(60)))

        assert set(observed) <= {("Asia/Seoul", False), ("UTC", True)}
