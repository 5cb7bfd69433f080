import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from plant_knowledge.domain.mention_extractor import (
    assess_candidate_confidence,
    extract_mentions,
    extract_mentions_from_history,
    is_plant_related_query,
)
from plant_knowledge.domain.normalizers import normalize_plant_name
from plant_knowledge.infra.plant_registry import ConversationPlantRegistry
from plant_knowledge.schemas import CONFIDENCE_RANK, PlantMention
from plant_fixtures import make_plant


class _Message:
    def __init__(self, text: str) -> None:
        self.text = text


class MentionExtractorTests(unittest.TestCase):
    def test_tomato_plant_message_ranks_vocabulary_hit_first(self) -> None:
        mentions = extract_mentions("my tomato plant has yellow leaves")
        self.assertTrue(mentions)
        first = mentions[0]
        self.assertEqual(first.normalized_name, "tomato")
        self.assertEqual(first.confidence, "high")
        self.assertEqual(first.source, "common_name")

    def test_every_vocabulary_name_is_high_confidence(self) -> None:
        for name in ("basil", "snake plant", "fiddle leaf fig", "japanese maple"):
            mentions = extract_mentions(f"I just bought a {name} yesterday")
            by_name = {mention.normalized_name: mention for mention in mentions}
            self.assertIn(name, by_name)
            self.assertEqual(by_name[name].confidence, "high")

    def test_names_are_unique_and_confidence_never_decreases(self) -> None:
        text = (
            "Should I prune the lavender? My Lavandula angustifolia and the "
            "lavender bush both need water, and so does my blorp plant."
        )
        mentions = extract_mentions(text)
        names = [mention.normalized_name for mention in mentions]
        self.assertEqual(len(names), len(set(names)))
        ranks = [CONFIDENCE_RANK[mention.confidence] for mention in mentions]
        self.assertEqual(ranks, sorted(ranks))

    def test_longer_vocabulary_name_is_found_alongside_shorter_one(self) -> None:
        names = [mention.normalized_name for mention in extract_mentions("My bell pepper wilts")]
        self.assertIn("bell pepper", names)
        self.assertIn("pepper", names)
        self.assertLess(names.index("bell pepper"), names.index("pepper"))

    def test_empty_text_yields_nothing(self) -> None:
        self.assertEqual(extract_mentions(""), [])
        self.assertEqual(extract_mentions(None), [])

    def test_text_without_plants_yields_nothing(self) -> None:
        self.assertEqual(extract_mentions("book a meeting for monday"), [])

    def test_registry_profiles_are_matched_first(self) -> None:
        registry = ConversationPlantRegistry()
        registry.register(make_plant(7, "Monstera deliciosa", "Swiss cheese plant"))
        mentions = extract_mentions("my Monstera deliciosa looks great", registry)
        self.assertEqual(mentions[0].normalized_name, "monstera deliciosa")
        self.assertEqual(mentions[0].source, "exact_match")
        self.assertEqual(mentions[0].confidence, "high")
        genus = [m for m in mentions if m.normalized_name == "monstera"]
        self.assertEqual(len(genus), 1)
        self.assertEqual(genus[0].confidence, "medium")
        self.assertEqual(genus[0].source, "exact_match")

    def test_short_genus_is_not_matched_from_registry(self) -> None:
        registry = ConversationPlantRegistry()
        registry.register(make_plant(9, "Zea mays", "Corn", genus="Zea"))
        mentions = extract_mentions("zea is short", registry)
        self.assertNotIn("zea", [mention.normalized_name for mention in mentions])

    def test_capitalized_binomial_is_high_confidence(self) -> None:
        mentions = extract_mentions("Is Solanum lycopersicum hard to keep?")
        by_name = {mention.normalized_name: mention for mention in mentions}
        self.assertIn("solanum lycopersicum", by_name)
        self.assertEqual(by_name["solanum lycopersicum"].confidence, "high")
        self.assertEqual(by_name["solanum lycopersicum"].source, "pattern")

    def test_pattern_candidate_near_context_word_is_medium(self) -> None:
        mentions = extract_mentions("how often should I water my blorpleaf plant")
        by_name = {mention.normalized_name: mention for mention in mentions}
        self.assertIn("blorpleaf", by_name)
        self.assertEqual(by_name["blorpleaf"].confidence, "medium")
        self.assertEqual(by_name["blorpleaf"].source, "pattern")

    def test_assess_candidate_confidence(self) -> None:
        self.assertEqual(assess_candidate_confidence("Rosemary", "anything"), "high")
        self.assertEqual(assess_candidate_confidence("Ficus lyrata", "a Ficus lyrata"), "high")
        self.assertEqual(
            assess_candidate_confidence("zorblax", "the zorblax needs water"), "medium"
        )
        self.assertEqual(assess_candidate_confidence("zorblax", "the zorblax is late"), "low")

    def test_history_is_scanned_newest_first_until_limit(self) -> None:
        messages = [
            "I grow basil on the balcony",
            {"text": "my rose is wilting"},
            _Message("what about the tomato"),
        ]
        mentions = extract_mentions_from_history(messages, limit=2)
        self.assertEqual([m.normalized_name for m in mentions], ["tomato", "rose"])

    def test_history_skips_empty_messages(self) -> None:
        messages = ["", {"text": None}, _Message(""), "thyme smells nice"]
        mentions = extract_mentions_from_history(messages)
        self.assertEqual([m.normalized_name for m in mentions], ["thyme"])

    def test_is_plant_related_query(self) -> None:
        self.assertTrue(is_plant_related_query("How often should I water?"))
        self.assertTrue(is_plant_related_query("Thoughts on orchids?"))
        self.assertFalse(is_plant_related_query("Book a meeting for Monday"))
        self.assertFalse(is_plant_related_query(""))

    def test_mention_names_are_normalized(self) -> None:
        mention = PlantMention(
            original_text="  Bird  of Paradise ",
            normalized_name="  Bird  of Paradise ",
            confidence="high",
            source="common_name",
        )
        self.assertEqual(mention.normalized_name, "bird of paradise")
        self.assertEqual(normalize_plant_name("Devil’s  Ivy"), "devil's ivy")


if __name__ == "__main__":
    unittest.main()
