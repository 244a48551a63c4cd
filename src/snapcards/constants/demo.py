"""Canned data served in demo mode (no network calls)."""

DEMO_WORDS: tuple[str, ...] = ("apple", "book", "adventure", "galaxy", "silence")

# Keyed by lower-cased word
DEMO_CARDS: dict[str, dict] = {
    "apple": {
        "word": "Apple",
        "meaning": "苹果",
        "pronunciation": "/ˈæp.l/",
        "sentences": [
            {
                "english": "I eat an apple every day.",
                "chinese": "我每天吃一个苹果。",
                "explanation": "Apple is a common fruit.",
            },
            {
                "english": "The apple does not fall far from the tree.",
                "chinese": "有其父必有其子。",
                "explanation": "A common idiom.",
            },
        ],
    },
    "book": {
        "word": "Book",
        "meaning": "书",
        "pronunciation": "/bʊk/",
        "sentences": [
            {
                "english": "She is reading a book.",
                "chinese": "她正在读书。",
                "explanation": "Used as a noun here.",
            },
        ],
    },
}

DEMO_PLACEHOLDER_CARD: dict = {
    "meaning": "未知含义 (Demo)",
    "pronunciation": "/.../",
    "sentences": [
        {
            "english": "This is a demo sentence.",
            "chinese": "这是一个演示句子。",
            "explanation": "Demo explanation.",
        },
    ],
}
