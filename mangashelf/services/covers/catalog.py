"""Default lookup tables for the cover resolution pipeline.

The tables are read-only mappings keyed by :func:`title_key`. Sources and
the query builder receive them at construction time, so tests can pass
their own.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Tuple

# Title key -> canonical English series titles.
DEFAULT_TITLE_ALIASES: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "one-piece": ("One Piece",),
        "naruto": ("Naruto",),
        "dragon-ball": ("Dragon Ball",),
        "attack-on-titan": ("Attack on Titan",),
        "shingeki-no-kyojin": ("Attack on Titan",),
        "my-hero-academia": ("My Hero Academia",),
        "boku-no-hero-academia": ("My Hero Academia",),
        "demon-slayer": ("Demon Slayer",),
        "kimetsu-no-yaiba": ("Demon Slayer",),
        "jujutsu-kaisen": ("Jujutsu Kaisen",),
        "chainsaw-man": ("Chainsaw Man",),
        "spy-x-family": ("Spy x Family",),
        "blue-lock": ("Blue Lock",),
        "bleach": ("Bleach",),
        "fairy-tail": ("Fairy Tail",),
        "hunter-x-hunter": ("Hunter x Hunter",),
        "fullmetal-alchemist": ("Fullmetal Alchemist",),
        "death-note": ("Death Note",),
        "tokyo-ghoul": ("Tokyo Ghoul",),
        "parasyte": ("Parasyte",),
        "vagabond": ("Vagabond",),
        "berserk": ("Berserk",),
        "monster": ("Monster",),
        "20th-century-boys": ("20th Century Boys",),
        "pluto": ("Pluto",),
        "vinland-saga": ("Vinland Saga",),
        "kingdom": ("Kingdom",),
        "one-punch-man": ("One Punch Man",),
        "mob-psycho-100": ("Mob Psycho 100",),
        "assassination-classroom": ("Assassination Classroom",),
        "food-wars": ("Food Wars",),
        "haikyu": ("Haikyu!!",),
        "kuroko-no-basket": ("Kuroko no Basket",),
        "yowamushi-pedal": ("Yowamushi Pedal",),
        "free": ("Free!",),
        "yuri-on-ice": ("Yuri on Ice",),
        "given": ("Given",),
        "orange": ("Orange",),
        "your-lie-in-april": ("Your Lie in April",),
        "a-silent-voice": ("A Silent Voice",),
        "weathering-with-you": ("Weathering with You",),
        "your-name": ("Your Name",),
        "spirited-away": ("Spirited Away",),
        "my-neighbor-totoro": ("My Neighbor Totoro",),
        "princess-mononoke": ("Princess Mononoke",),
        "akira": ("Akira",),
        "ghost-in-the-shell": ("Ghost in the Shell",),
        "neon-genesis-evangelion": ("Neon Genesis Evangelion",),
        "cowboy-bebop": ("Cowboy Bebop",),
        "trigun": ("Trigun",),
        "ranma": ("Ranma ½",),
        "urusei-yatsura": ("Urusei Yatsura",),
        "inuyasha": ("Inuyasha",),
    }
)

_STOCK_COVER = "https://images.unsplash.com/photo-1578662996442-48f60103fc96?w=200&h=300&fit=crop"
_STOCK_COVER_CENTERED = f"{_STOCK_COVER}&crop=center"

# Romanized aliases only feed the query builder.
_ROMANIZED_KEYS = frozenset({"shingeki-no-kyojin", "boku-no-hero-academia", "kimetsu-no-yaiba"})

DEFAULT_MANGA_DATABASE_IMAGES: Mapping[str, str] = MappingProxyType(
    {key: _STOCK_COVER for key in DEFAULT_TITLE_ALIASES if key not in _ROMANIZED_KEYS}
)

DEFAULT_ANIME_DATABASE_IMAGES: Mapping[str, str] = MappingProxyType(
    {
        "pluto": _STOCK_COVER_CENTERED,
        "vinland-saga": _STOCK_COVER_CENTERED,
        "kingdom": _STOCK_COVER_CENTERED,
        "one-punch-man": _STOCK_COVER_CENTERED,
        "mob-psycho-100": _STOCK_COVER_CENTERED,
        "assassination-classroom": _STOCK_COVER_CENTERED,
    }
)

DEFAULT_FALLBACK_IMAGES: Tuple[str, ...] = (
    _STOCK_COVER,
    _STOCK_COVER_CENTERED,
    f"{_STOCK_COVER}&crop=top",
    f"{_STOCK_COVER}&crop=bottom",
)

MANGA_DATABASE_SCORE = 0.8
ANIME_DATABASE_SCORE = 0.7
FALLBACK_SCORE = 0.5

PLACEHOLDER_COLORS: Tuple[str, ...] = (
    "FF6B6B",
    "4ECDC4",
    "45B7D1",
    "96CEB4",
    "FFEAA7",
    "DDA0DD",
    "98D8C8",
    "F7DC6F",
    "BB8FCE",
    "85C1E9",
)


__all__ = [
    "ANIME_DATABASE_SCORE",
    "DEFAULT_ANIME_DATABASE_IMAGES",
    "DEFAULT_FALLBACK_IMAGES",
    "DEFAULT_MANGA_DATABASE_IMAGES",
    "DEFAULT_TITLE_ALIASES",
    "FALLBACK_SCORE",
    "MANGA_DATABASE_SCORE",
    "PLACEHOLDER_COLORS",
]
