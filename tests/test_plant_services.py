import json
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from plant_knowledge.application.services.plant_context_service import (
    build_plant_context,
    merge_mentions,
)
from plant_knowledge.application.services.plant_info_service import (
    ASK_WHICH_PLANT,
    build_plant_info,
    should_trigger_plant_info,
)
from plant_knowledge.domain.mention_extractor import extract_mentions
from plant_knowledge.infra.plant_registry import ConversationPlantRegistry
from plant_knowledge.schemas import PlantMention
from plant_fixtures import BASIL_RECORD, TOMATO_RECORD, FakeTrefle, build_resolver


def _mention(name: str, confidence: str) -> PlantMention:
    return PlantMention(
        original_text=name, normalized_name=name, confidence=confidence, source="pattern"
    )


class PlantContextServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.fake = FakeTrefle()
        self.fake.add_species(TOMATO_RECORD, "tomato")
        self.fake.add_species(BASIL_RECORD, "basil")
        self.resolver = build_resolver(self.fake)

    def test_current_message_plant_is_resolved(self) -> None:
        result = build_plant_context(self.resolver, "my tomato plant has yellow leaves", [])
        self.assertEqual(result.plant_names, ["Tomato"])
        self.assertEqual(result.plant_scientific_names, ["Solanum lycopersicum"])
        self.assertEqual(result.plant_count, 1)
        self.assertIn("Plant: Tomato (Solanum lycopersicum)", result.text)
        self.assertTrue(result.plant_summary.startswith("**Plants in conversation:**"))
        self.assertEqual(result.plants[0]["identification"]["id"], 1)
        self.assertEqual(result.mentions[0].normalized_name, "tomato")

    def test_history_mentions_are_included(self) -> None:
        result = build_plant_context(
            self.resolver,
            "how do I keep it happy?",
            ["I planted basil yesterday", {"text": "thanks"}],
        )
        self.assertEqual(result.plant_names, ["Basil"])

    def test_failed_lookup_does_not_block_siblings(self) -> None:
        self.fake.fail("/species/search", 500)
        result = build_plant_context(self.resolver, "basil and tomato side by side", [])
        self.assertEqual(result.plant_names, ["Basil"])
        self.assertEqual(result.not_found, ["tomato"])

    def test_without_mentions_recent_registry_plants_are_returned(self) -> None:
        build_plant_context(self.resolver, "my tomato plant has yellow leaves", [])
        calls = self.fake.call_count
        result = build_plant_context(self.resolver, "thanks, that helps!", [])
        self.assertEqual(result.plant_names, ["Tomato"])
        self.assertEqual(self.fake.call_count, calls)

    def test_registry_plants_top_up_the_result(self) -> None:
        self.resolver.resolve_by_name("basil")
        result = build_plant_context(self.resolver, "my tomato plant has yellow leaves", [])
        self.assertEqual(result.plant_names, ["Tomato", "Basil"])

    def test_result_is_capped(self) -> None:
        self.resolver.resolve_by_name("basil")
        result = build_plant_context(
            self.resolver, "my tomato plant has yellow leaves", [], max_plants=1
        )
        self.assertEqual(result.plant_names, ["Tomato"])

    def test_nothing_known_yields_empty_result(self) -> None:
        result = build_plant_context(self.resolver, "hello there", None)
        self.assertEqual(result.text, "")
        self.assertEqual(result.plant_count, 0)
        self.assertEqual(self.fake.call_count, 0)

    def test_merge_keeps_best_confidence_and_first_position(self) -> None:
        merged = merge_mentions(
            [_mention("fern", "medium"), _mention("ivy", "high"), _mention("fern", "high")]
        )
        self.assertEqual([m.normalized_name for m in merged], ["fern", "ivy"])
        self.assertEqual(merged[0].confidence, "high")


class PlantInfoServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.fake = FakeTrefle()
        self.fake.add_species(TOMATO_RECORD, "tomato")
        self.fake.add_species(BASIL_RECORD, "basil")
        self.resolver = build_resolver(self.fake)

    def test_should_trigger(self) -> None:
        registry = ConversationPlantRegistry()
        self.assertTrue(should_trigger_plant_info("tell me about tomatoes", registry))
        self.assertFalse(should_trigger_plant_info("tell me about your day", registry))
        self.assertFalse(should_trigger_plant_info("", registry))
        self.assertFalse(should_trigger_plant_info("is it getting enough water?", registry))

        self.resolver.resolve_by_name("basil")
        self.assertTrue(
            should_trigger_plant_info("is it getting enough water?", self.resolver.registry)
        )

    def test_single_plant_returns_care_guide(self) -> None:
        result = build_plant_info(self.resolver, "tell me about tomato")
        self.assertTrue(result.triggered)
        self.assertTrue(result.text.startswith("**Tomato** (*Solanum lycopersicum*)"))
        self.assertEqual(len(result.plants), 1)
        self.assertEqual(result.not_found, [])

    def test_several_plants_are_numbered(self) -> None:
        result = build_plant_info(self.resolver, "how to grow tomato and basil")
        self.assertIn("## 1. Tomato\n\n**Tomato**", result.text)
        self.assertIn("\n\n---\n\n## 2. Basil\n\n**Basil**", result.text)
        self.assertEqual(len(result.plants), 2)

    def test_same_plant_named_several_ways_is_listed_once(self) -> None:
        self.resolver.resolve_by_name("tomato")
        calls = self.fake.call_count
        text = "tell me about my tomato, Solanum lycopersicum"
        names = [m.normalized_name for m in extract_mentions(text, self.resolver.registry)]
        self.assertIn("tomato", names)
        self.assertIn("solanum lycopersicum", names)

        result = build_plant_info(self.resolver, text)
        self.assertEqual([plant["identification"]["id"] for plant in result.plants], [1])
        self.assertTrue(result.text.startswith("**Tomato** (*Solanum lycopersicum*)"))
        self.assertNotIn("## 1.", result.text)
        self.assertEqual(result.not_found, [])
        self.assertEqual(self.fake.call_count, calls)

    def test_failure_is_isolated_per_mention(self) -> None:
        self.fake.fail("/species/2", 500)
        result = build_plant_info(self.resolver, "tell me about tomato and basil")
        self.assertEqual([plant["identification"]["id"] for plant in result.plants], [1])
        self.assertEqual(result.not_found, ["basil"])
        self.assertTrue(
            result.text.endswith("*Note: I couldn't find information for: basil*")
        )

    def test_auth_failure_is_logged_at_error_level(self) -> None:
        self.fake.fail("/species/search", 401)
        with self.assertLogs("plant_knowledge.events", level="ERROR") as logs:
            result = build_plant_info(self.resolver, "tell me about tomato")
        self.assertEqual(result.not_found, ["tomato"])
        payload = json.loads(logs.records[0].getMessage())
        self.assertEqual(payload["event"], "plant_resolve_failed")
        self.assertEqual(payload["error"], "PlantAuthError")

    def test_suggestions_offered_when_nothing_resolves(self) -> None:
        self.fake.searches["fern"] = [
            {"id": 77, "slug": "missing-fern", "scientific_name": "Nephrolepis exaltata",
             "common_name": "Boston fern", "family": "Lomariopsidaceae"},
        ]
        result = build_plant_info(self.resolver, "tell me about fern")
        self.assertEqual(result.not_found, ["fern"])
        self.assertIn('I couldn\'t find an exact match for "fern"', result.text)
        self.assertIn("1. Boston fern (Nephrolepis exaltata)", result.text)
        self.assertEqual(result.plants, [])

    def test_no_suggestions_when_search_is_empty(self) -> None:
        result = build_plant_info(self.resolver, "tell me about ivy")
        self.assertEqual(result.not_found, ["ivy"])
        self.assertIn('I couldn\'t find any plants matching "ivy"', result.text)

    def test_recent_plants_used_without_mentions(self) -> None:
        self.resolver.resolve_by_name("basil")
        result = build_plant_info(self.resolver, "what does it need?")
        self.assertTrue(result.text.startswith("**Basil**"))

    def test_asks_for_a_plant_when_nothing_is_known(self) -> None:
        result = build_plant_info(self.resolver, "can you help me?")
        self.assertEqual(result.text, ASK_WHICH_PLANT)
        self.assertTrue(result.triggered)
        self.assertEqual(self.fake.call_count, 0)


if __name__ == "__main__":
    unittest.main()
