import json
import logging
import os
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from plant_knowledge.infra.config import DEFAULT_TREFLE_API_URL, AppConfig, get_config
from plant_knowledge.observability.logging_utils import (
    get_trace_id,
    log_event,
    summarize_text,
    trace_scope,
)
from plant_knowledge.runtime import PlantKnowledgeRuntime
from plant_fixtures import BASIL_RECORD, TOMATO_RECORD, FakeClock, FakeTrefle


_CONFIG_ENV = (
    "TREFLE_TOKEN",
    "TREFLE_API_URL",
    "RATE_LIMIT_MAX_REQUESTS",
    "REGISTRY_MAX_PLANTS",
    "TREFLE_MAX_RETRIES",
    "PLANT_CACHE_TTL_SECONDS",
)


class ConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        self._env_backup = {key: os.environ.get(key) for key in _CONFIG_ENV}
        get_config.cache_clear()

    def tearDown(self) -> None:
        for key, value in self._env_backup.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_config.cache_clear()

    def test_defaults(self) -> None:
        for key in _CONFIG_ENV:
            os.environ.pop(key, None)
        cfg = AppConfig(_env_file=None)
        self.assertIsNone(cfg.trefle_token)
        self.assertEqual(cfg.trefle_api_url, DEFAULT_TREFLE_API_URL)
        self.assertEqual(cfg.trefle_timeout_seconds, 10.0)
        self.assertEqual(cfg.trefle_max_retries, 2)
        self.assertEqual(cfg.rate_limit_max_requests, 100)
        self.assertEqual(cfg.plant_cache_ttl_seconds, 300)
        self.assertEqual(cfg.registry_max_plants, 20)
        self.assertEqual(cfg.max_plants_to_fetch, 5)
        self.assertEqual(cfg.max_plants_per_request, 3)

    def test_environment_values_are_normalized(self) -> None:
        os.environ["TREFLE_TOKEN"] = "  abc123  "
        os.environ["TREFLE_API_URL"] = "https://trefle.example/api/v1/"
        os.environ["RATE_LIMIT_MAX_REQUESTS"] = "0"
        os.environ["TREFLE_MAX_RETRIES"] = "-3"
        cfg = get_config()
        self.assertEqual(cfg.trefle_token, "abc123")
        self.assertEqual(cfg.trefle_api_url, "https://trefle.example/api/v1")
        self.assertEqual(cfg.rate_limit_max_requests, 1)
        self.assertEqual(cfg.trefle_max_retries, 0)
        self.assertIs(get_config(), cfg)

    def test_blank_token_means_unconfigured(self) -> None:
        os.environ["TREFLE_TOKEN"] = "   "
        self.assertIsNone(AppConfig(_env_file=None).trefle_token)


class RuntimeTests(unittest.TestCase):
    def setUp(self) -> None:
        self.fake = FakeTrefle()
        self.fake.add_species(TOMATO_RECORD, "tomato")
        self.fake.add_species(BASIL_RECORD, "basil")
        self.clock = FakeClock()

    def _runtime(self, **overrides) -> PlantKnowledgeRuntime:
        values = {
            "TREFLE_TOKEN": "secret-token",
            "SESSION_STORE_TTL_SECONDS": 100,
            "PLANT_CACHE_TTL_SECONDS": 1000,
        }
        values.update(overrides)
        cfg = AppConfig(_env_file=None, **values)
        return PlantKnowledgeRuntime(
            cfg,
            transport=self.fake.transport(),
            clock=self.clock,
            sleep=lambda _: None,
        )

    def test_sessions_are_reused_and_isolated(self) -> None:
        with self._runtime() as runtime:
            self.assertTrue(runtime.is_configured())
            first = runtime.session("a")
            self.assertIs(runtime.session("a"), first)
            second = runtime.session("b")
            self.assertIsNot(second.registry, first.registry)

            first.get_plant_context("my tomato plant has yellow leaves")
            self.assertEqual(len(second.registry), 0)
            calls = self.fake.call_count

            result = second.get_plant_info("tell me about tomato")
            self.assertTrue(result.text.startswith("**Tomato**"))
            self.assertEqual(self.fake.call_count, calls)

    def test_should_trigger_through_session(self) -> None:
        with self._runtime() as runtime:
            session = runtime.session("a")
            self.assertTrue(session.should_trigger_plant_info("how to grow basil"))
            self.assertFalse(session.should_trigger_plant_info("good morning"))

    def test_cleanup_expires_idle_sessions_and_cache_entries(self) -> None:
        with self._runtime() as runtime:
            runtime.session("a").get_plant_context("tell me about basil")
            self.clock.advance(1001)
            removed = runtime.cleanup()
            self.assertEqual(removed["sessions"], 1)
            self.assertGreater(removed["species"], 0)
            self.assertEqual(len(runtime.session("a").registry), 0)

    def test_unconfigured_runtime_returns_empty_results(self) -> None:
        runtime = self._runtime(TREFLE_TOKEN="")
        self.assertFalse(runtime.is_configured())
        session = runtime.session("a")
        self.assertFalse(session.is_configured())
        self.assertEqual(session.get_plant_context("my tomato plant").plant_count, 0)
        self.assertFalse(session.get_plant_info("tell me about tomato").triggered)
        self.assertFalse(session.should_trigger_plant_info("tell me about tomato"))
        self.assertEqual(self.fake.call_count, 0)
        runtime.close()


class LoggingUtilsTests(unittest.TestCase):
    def test_events_carry_trace_id(self) -> None:
        with self.assertLogs("plant_knowledge.events", level="INFO") as logs:
            with trace_scope("trace-123") as trace_id:
                self.assertEqual(get_trace_id(), "trace-123")
                log_event("plant_search", query="tomato", result_count=1)
        self.assertEqual(trace_id, "trace-123")
        self.assertEqual(get_trace_id(), "unknown")
        payload = json.loads(logs.records[0].getMessage())
        self.assertEqual(payload["event"], "plant_search")
        self.assertEqual(payload["trace_id"], "trace-123")
        self.assertEqual(payload["result_count"], 1)

    def test_warning_level_is_respected(self) -> None:
        with self.assertLogs("plant_knowledge.events", level="WARNING") as logs:
            log_event("plant_resolve_failed", level=logging.WARNING, name="x")
        self.assertEqual(logs.records[0].levelno, logging.WARNING)

    def test_summarize_text(self) -> None:
        self.assertEqual(summarize_text("abc", limit=5), "abc")
        self.assertEqual(summarize_text("abcdefgh", limit=3), "abc...")
        self.assertEqual(summarize_text(""), "")


if __name__ == "__main__":
    unittest.main()
