"""Static word lists used by the mention extractor."""

from __future__ import annotations

from typing import FrozenSet, List, Tuple


VEGETABLE_NAMES = [
    "tomato", "tomatoes", "potato", "potatoes", "carrot", "carrots", "lettuce",
    "spinach", "kale", "broccoli", "cauliflower", "cabbage", "celery",
    "cucumber", "cucumbers", "zucchini", "squash", "pumpkin", "pumpkins",
    "eggplant", "pepper", "peppers", "bell pepper", "chili", "chilies",
    "onion", "onions", "garlic", "leek", "leeks", "asparagus", "artichoke",
    "beet", "beets", "radish", "radishes", "turnip", "turnips", "parsnip",
    "parsnips", "corn", "peas", "green beans", "beans", "lentils", "chickpeas",
]
FRUIT_NAMES = [
    "apple", "apples", "orange", "oranges", "lemon", "lemons", "lime", "limes",
    "grapefruit", "banana", "bananas", "grape", "grapes", "strawberry",
    "strawberries", "blueberry", "blueberries", "raspberry", "raspberries",
    "blackberry", "blackberries", "cherry", "cherries", "peach", "peaches",
    "plum", "plums", "apricot", "apricots", "mango", "mangoes", "pineapple",
    "pineapples", "watermelon", "cantaloupe", "honeydew", "melon", "kiwi",
    "papaya", "guava", "pomegranate", "fig", "figs", "date", "dates",
    "coconut", "coconuts", "avocado", "avocados",
]
HERB_NAMES = [
    "basil", "oregano", "thyme", "rosemary", "sage", "mint", "peppermint",
    "spearmint", "parsley", "cilantro", "coriander", "dill", "chives",
    "tarragon", "marjoram", "bay leaf", "bay laurel", "lavender", "chamomile",
    "lemongrass", "fennel", "cumin", "turmeric", "ginger",
]
FLOWER_NAMES = [
    "rose", "roses", "tulip", "tulips", "daisy", "daisies", "sunflower",
    "sunflowers", "lily", "lilies", "orchid", "orchids", "carnation",
    "carnations", "chrysanthemum", "dahlia", "dahlias", "peony", "peonies",
    "hydrangea", "hydrangeas", "marigold", "marigolds", "petunia", "petunias",
    "geranium", "geraniums", "begonia", "begonias", "zinnia", "zinnias",
    "pansy", "pansies", "violet", "violets", "iris", "irises", "daffodil",
    "daffodils", "hyacinth", "crocus", "amaryllis", "hibiscus", "jasmine",
    "gardenia", "magnolia", "camellia", "azalea", "rhododendron", "wisteria",
    "bougainvillea", "plumeria", "bird of paradise",
]
HOUSEPLANT_NAMES = [
    "pothos", "philodendron", "monstera", "snake plant", "sansevieria",
    "spider plant", "peace lily", "rubber plant", "fiddle leaf fig", "ficus",
    "aloe", "aloe vera", "jade plant", "succulent", "succulents", "cactus",
    "cacti", "bamboo", "palm", "palms", "fern", "ferns", "boston fern",
    "maidenhair fern", "english ivy", "ivy", "dracaena", "zz plant",
    "chinese evergreen", "prayer plant", "calathea", "croton",
    "dieffenbachia", "anthurium", "bromeliad", "air plant", "tillandsia",
    "hoya", "string of pearls", "string of hearts",
]
TREE_NAMES = [
    "oak", "maple", "pine", "spruce", "fir", "cedar", "birch", "ash", "elm",
    "willow", "poplar", "aspen", "beech", "hickory", "walnut", "chestnut",
    "cherry tree", "apple tree", "peach tree", "pear tree", "plum tree",
    "olive", "olive tree", "eucalyptus", "cypress", "redwood", "sequoia",
    "palm tree", "coconut palm", "magnolia tree", "dogwood", "redbud",
    "crepe myrtle", "japanese maple", "bonsai",
]
SHRUB_NAMES = [
    "boxwood", "privet", "holly", "juniper", "yew", "forsythia", "lilac",
    "viburnum", "spirea", "barberry", "euonymus", "cotoneaster",
    "burning bush", "butterfly bush", "rose of sharon",
]

COMMON_PLANT_NAMES: FrozenSet[str] = frozenset(
    VEGETABLE_NAMES
    + FRUIT_NAMES
    + HERB_NAMES
    + FLOWER_NAMES
    + HOUSEPLANT_NAMES
    + TREE_NAMES
    + SHRUB_NAMES
)

# longest first so "bell pepper" is tried before "pepper"; ties broken
# alphabetically to keep the order stable between runs
PLANT_NAMES_BY_LENGTH: Tuple[str, ...] = tuple(
    sorted(COMMON_PLANT_NAMES, key=lambda name: (-len(name), name))
)

PLANT_CONTEXT_WORDS: List[str] = [
    "plant", "plants", "grow", "growing", "grew", "grown", "garden",
    "gardening", "water", "watering", "prune", "pruning", "fertilize",
    "fertilizing", "harvest", "harvesting", "seed", "seeds", "seedling",
    "seedlings", "cutting", "cuttings", "propagate", "propagating", "repot",
    "repotting", "transplant", "transplanting", "care", "caring", "leaf",
    "leaves", "flower", "flowers", "bloom", "blooming", "blossom", "fruit",
    "fruits", "vegetable", "vegetables", "herb", "herbs", "tree", "trees",
    "shrub", "shrubs", "vine", "vines", "bush", "bushes", "pot", "potted",
    "indoor", "outdoor", "houseplant", "houseplants",
]

PLANT_QUERY_KEYWORDS: List[str] = [
    "plant", "grow", "garden", "water", "prune", "fertilize", "harvest",
    "seed", "cutting", "propagate", "repot", "transplant", "leaf", "leaves",
    "flower", "bloom", "fruit", "vegetable", "herb", "tree", "shrub",
    "houseplant", "indoor plant", "outdoor", "pot", "soil", "sunlight",
    "shade", "care", "dying", "yellow", "brown", "drooping", "wilting",
]

PLANT_INFO_TRIGGERS: List[str] = [
    "tell me about", "what is", "what are", "how do i care for",
    "how to care for", "how to grow", "how do i grow", "care guide",
    "care instructions", "growing guide", "plant info", "plant information",
    "about my", "information on", "details about", "facts about",
    "learn about", "help with my", "advice for my", "tips for",
]

STOPWORDS: FrozenSet[str] = frozenset(
    [
        "the", "a", "an", "and", "or", "but", "if", "then", "else",
        "when", "where", "what", "which", "who", "how", "why",
        "is", "are", "was", "were", "be", "been", "being",
        "have", "has", "had", "do", "does", "did",
        "will", "would", "could", "should", "may", "might", "must", "can",
        "this", "that", "these", "those", "it", "its", "they", "them", "their",
        "we", "us", "our", "you", "your", "he", "him", "his", "she", "her",
        "i", "me", "my",
        "some", "any", "all", "most", "many", "much", "more", "less", "few",
        "little", "lot", "lots",
        "very", "too", "also", "just", "only", "even", "still", "already",
        "always", "never", "ever", "often", "sometimes", "usually", "really",
        "quite", "rather", "pretty",
        "about", "after", "before", "between", "during", "through", "from",
        "into", "onto", "with", "without", "for", "of", "in", "on", "at",
        "to", "by", "up", "down", "out", "off", "over", "under", "again",
        "back", "here", "there", "now", "today", "tomorrow", "yesterday",
        "thing", "things", "way", "ways", "time", "times", "day", "days",
        "year", "years", "week", "weeks", "month", "months",
        "something", "anything", "everything", "nothing",
        "someone", "anyone", "everyone", "nobody", "anybody", "everybody",
        "place", "room", "house", "home", "work", "life", "world",
        "people", "person", "child", "children", "man", "men", "woman", "women",
        "good", "bad", "new", "old", "big", "small", "long", "short", "high",
        "low", "great", "other", "same", "different", "first", "last", "next",
        "right", "left", "best",
        "want", "need", "know", "think", "see", "look", "find", "give", "take",
        "come", "go", "make", "get", "say", "tell", "ask", "use", "try",
        "help", "start", "stop", "keep", "let", "put", "set", "turn", "show",
        "hear", "leave", "call", "run", "move", "live", "believe", "feel",
        "bring",
    ]
)


def is_stopword(word: str) -> bool:
    return word.strip().lower() in STOPWORDS
