"""Read-only emoji lookups for categories and ingredients."""

import json
import re
from collections.abc import Mapping
from pathlib import Path

from recipe2shop.logging_config import get_logger

OTHER_EMOJI = "📦"

DEFAULT_INGREDIENT_EMOJI_FILE = (
    Path(__file__).resolve().parents[1] / "data" / "ingredient_emojis.json"
)

logger = get_logger(__name__)

DEFAULT_CATEGORY_EMOJIS: dict[str, str] = {
    # French store aisles
    "viandes": "🥩",
    "viande": "🥩",
    "poissons": "🐟",
    "poisson": "🐟",
    "fruits et légumes frais": "🥬",
    "fruits": "🍎",
    "légumes": "🥕",
    "épicerie salée": "🧂",
    "épicerie": "🧂",
    "conserve": "🥫",
    "conserves": "🥫",
    "produits laitiers": "🥛",
    "laitier": "🥛",
    "crèmerie": "🥛",
    "fromage": "🧀",
    "fromages": "🧀",
    "boulangerie": "🍞",
    "pain": "🍞",
    "boissons": "🥤",
    "boisson": "🥤",
    "épicerie sucrée": "🍬",
    "sucré": "🍬",
    "épices": "🌶️",
    "épice": "🌶️",
    "huiles": "🫒",
    "huile": "🫒",
    "surgelé": "❄️",
    "surgelés": "❄️",
    "autres": OTHER_EMOJI,
    # English
    "meat": "🥩",
    "fish": "🐟",
    "vegetables": "🥕",
    "veg": "🥕",
    "fruit": "🍎",
    "dairy": "🥛",
    "cheese": "🧀",
    "bakery": "🍞",
    "bread": "🍞",
    "drinks": "🥤",
    "beverages": "🥤",
    "spices": "🌶️",
    "oils": "🫒",
    "frozen": "❄️",
    "canned": "🥫",
    "pantry": "🧂",
    "sweets": "🍬",
    "other": OTHER_EMOJI,
}

_WHITESPACE = re.compile(r"\s+")


def _lookup_key(key: str) -> str:
    return key.strip().lower()


class CategoryEmojiLookup:
    """
    Case-insensitive category to emoji lookup.

    Unknown or blank categories get the "other" emoji.
    """

    def __init__(self, mapping: Mapping[str, str] | None = None):
        source = DEFAULT_CATEGORY_EMOJIS if mapping is None else mapping
        self._emojis = {_lookup_key(k): v for k, v in source.items() if v}

    def get_emoji(self, category: str | None) -> str:
        if not category or not category.strip():
            return OTHER_EMOJI
        return self._emojis.get(_lookup_key(category), OTHER_EMOJI)

    def format_category(self, category: str | None, default_label: str = "Other") -> str:
        """Category label prefixed with its emoji, e.g. "🥕 Veg"."""
        label = category if category and category.strip() else default_label
        return f"{self.get_emoji(category)} {label}"


class IngredientEmojiLookup:
    """Ingredient name or word to emoji dictionary."""

    def __init__(self, mapping: Mapping[str, str] | None = None):
        self._emojis = {_lookup_key(k): v for k, v in (mapping or {}).items() if k.strip() and v}

    @classmethod
    def from_json(cls, text: str) -> "IngredientEmojiLookup":
        """
        Build a lookup from a JSON object of key to emoji.

        Raises:
            ValueError: If the text is not a JSON object.
        """
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("Emoji dictionary must be a JSON object")
        return cls({str(k): str(v) for k, v in data.items()})

    def to_json(self) -> str:
        return json.dumps(self._emojis, indent=2, ensure_ascii=False)

    def as_dict(self) -> dict[str, str]:
        return dict(self._emojis)

    def emoji_for(self, key: str) -> str | None:
        """Emoji for an exact key, compared case-insensitively."""
        return self._emojis.get(_lookup_key(key))

    def word_matches(self, name: str) -> list[str]:
        """Emojis of the words of a name, in word order."""
        words = [word for word in _WHITESPACE.split(_lookup_key(name)) if len(word) > 1]
        matches: list[str] = []
        for word in words:
            emoji = self._emojis.get(word)
            if emoji and emoji not in matches:
                matches.append(emoji)
        return matches

    def suggestions(self, name: str) -> list[str]:
        """
        Suggested emojis for an ingredient name.

        Emojis matching words of the name come first, then the rest of the
        dictionary, without duplicates.
        """
        if not name.strip():
            return []
        matches = self.word_matches(name)
        rest: list[str] = []
        for emoji in self._emojis.values():
            if emoji not in matches and emoji not in rest:
                rest.append(emoji)
        return matches + rest

    def emoji_for_name(self, name: str) -> str | None:
        """Best emoji for a shopping item name, if any word matches."""
        matches = self.word_matches(name)
        return matches[0] if matches else None


def load_ingredient_emojis(path: str | Path | None = None) -> IngredientEmojiLookup:
    """Load an ingredient emoji dictionary, the bundled default when no path is given."""
    emoji_file = Path(path) if path else DEFAULT_INGREDIENT_EMOJI_FILE
    lookup = IngredientEmojiLookup.from_json(emoji_file.read_text(encoding="utf-8"))
    logger.info(f"Loaded {len(lookup.as_dict())} ingredient emojis from {emoji_file.name}")
    return lookup
