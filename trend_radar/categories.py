"""
Keyword table for meme category classification.

The table is ordered: when a trend matches terms from several categories,
the category declared first wins. Terms are matched as substrings of the
identity key joined with the lowercased keywords.
"""

from typing import Iterable, List, Tuple

from trend_radar.types import Category

CATEGORY_KEYWORDS: List[Tuple[Category, Tuple[str, ...]]] = [
    (
        Category.ANIMAL,
        (
            "doge", "dog", "puppy", "shiba", "kitten", "kitty", "meow", "hippo",
            "moodeng", "capybara", "frog", "pepe", "monkey", "gorilla", "bear",
            "duck", "goose", "hamster", "raccoon", "penguin", "crocodil",
            "shark", "otter", "pigeon", "horse",
        ),
    ),
    (
        Category.AI,
        (
            "chatgpt", "openai", "gpt", "llm", "aigenerated", "artificialintelligence",
            "deepfake", "midjourney", "sora", "gemini", "grok", "robot", "chatbot",
        ),
    ),
    (
        Category.ABSURDIST,
        (
            "brainrot", "skibidi", "italian", "tralalero", "tungtung", "sahur",
            "bombardiro", "cappuccino", "ballerina", "patapim", "sigma", "rizz",
            "gyatt", "ohio", "sixseven", "surreal", "nonsense", "npc",
        ),
    ),
    (
        Category.CRYPTO,
        (
            "crypto", "bitcoin", "btc", "ethereum", "solana", "memecoin", "token",
            "coin", "pump", "airdrop", "nft", "defi", "hodl",
        ),
    ),
]

# Position of each category in the table, unknown sorts last
CATEGORY_PRECEDENCE = {
    category: index for index, (category, _terms) in enumerate(CATEGORY_KEYWORDS)
}
CATEGORY_PRECEDENCE[Category.UNKNOWN] = len(CATEGORY_KEYWORDS)


def classify(identity_key: str, keywords: Iterable[str] = ()) -> Category:
    """
    Classify a trend into a meme category.

    Args:
        identity_key: The trend's identity key
        keywords: Free-text keywords attached to the trend

    Returns:
        First category in table order with a matching term, else UNKNOWN
    """
    text = " ".join([identity_key, *(k.lower() for k in keywords)])

    for category, terms in CATEGORY_KEYWORDS:
        if any(term in text for term in terms):
            return category

    return Category.UNKNOWN


def category_precedence(category: Category) -> int:
    """Return the table position of a category (lower wins)."""
    return CATEGORY_PRECEDENCE[category]
