"""
mood_lexicon.py
- Curated mood keyword -> TMDB genre presets for mood match.
- Genre ids are listed in priority order (first = most relevant).
- Tables are immutable module constants; iteration order is significant.
"""
from dataclasses import dataclass
from typing import Tuple

from cinemood.services.genres import (
    ACTION, ADVENTURE, ANIMATION, COMEDY, CRIME, DOCUMENTARY, DRAMA, FAMILY,
    FANTASY, HISTORY, HORROR, MUSIC, MYSTERY, ROMANCE, SCIENCE_FICTION,
    THRILLER, WAR,
)


@dataclass(frozen=True)
class MoodLexiconEntry:
    keyword: str
    genre_ids: Tuple[int, ...]
    vibe: str


@dataclass(frozen=True)
class MoodProfile:
    """A genre preset that is not keyed by a lexicon keyword."""
    genre_ids: Tuple[int, ...]
    vibe: str


@dataclass(frozen=True)
class FallbackRule:
    """Profiles used when no lexicon keyword matched but one of `triggers` is present."""
    name: str
    triggers: Tuple[str, ...]
    profiles: Tuple[MoodProfile, ...]

    def matches(self, text: str) -> bool:
        return any(trigger in text for trigger in self.triggers)


MOOD_LEXICON: Tuple[MoodLexiconEntry, ...] = (
    # Relaxing / Comfort
    MoodLexiconEntry("cozy", (COMEDY, FAMILY, ANIMATION), "Something warm and comforting"),
    MoodLexiconEntry("relaxed", (COMEDY, FAMILY, DRAMA), "Easy-watching comfort"),
    MoodLexiconEntry("tired", (COMEDY, ANIMATION, FAMILY), "Light entertainment to unwind"),
    MoodLexiconEntry("exhausted", (COMEDY, ANIMATION), "No-brainer fun"),
    MoodLexiconEntry("comfort", (FAMILY, COMEDY, FANTASY), "Heartwarming stories"),
    MoodLexiconEntry("nostalgic", (FAMILY, ADVENTURE, FANTASY), "A trip down memory lane"),

    # Emotional / Deep
    MoodLexiconEntry("sad", (DRAMA, ROMANCE), "A cathartic emotional journey"),
    MoodLexiconEntry("cry", (DRAMA, ROMANCE), "A cathartic emotional journey that moves you deeply"),
    MoodLexiconEntry("emotional", (DRAMA, ROMANCE, FAMILY), "Deeply touching stories"),
    MoodLexiconEntry("reflective", (DRAMA, MYSTERY), "Thought-provoking cinema"),
    MoodLexiconEntry("melancholy", (DRAMA, ROMANCE), "Beautifully melancholic"),

    # Exciting / Energetic
    MoodLexiconEntry("excited", (ACTION, ADVENTURE, SCIENCE_FICTION), "High-energy thrills"),
    MoodLexiconEntry("adventurous", (ADVENTURE, ACTION, FANTASY), "Epic adventures await"),
    MoodLexiconEntry("energetic", (ACTION, COMEDY, ADVENTURE), "Fast-paced excitement"),
    MoodLexiconEntry("pumped", (ACTION, CRIME, THRILLER), "Adrenaline-pumping action"),

    # Scary / Thrilling
    MoodLexiconEntry("scared", (HORROR, THRILLER), "Spine-tingling scares"),
    MoodLexiconEntry("spooky", (HORROR, MYSTERY, THRILLER), "Delightfully creepy"),
    MoodLexiconEntry("thrilling", (THRILLER, CRIME, MYSTERY), "Edge-of-your-seat suspense"),
    MoodLexiconEntry("tense", (THRILLER, CRIME, DRAMA), "Gripping tension throughout"),

    # Romantic
    MoodLexiconEntry("romantic", (ROMANCE, COMEDY, DRAMA), "Love stories that captivate"),
    MoodLexiconEntry("love", (ROMANCE, DRAMA), "Tales of passion and love"),
    MoodLexiconEntry("date", (ROMANCE, COMEDY), "Perfect for date night"),

    # Intellectual / Mind-bending
    MoodLexiconEntry("curious", (SCIENCE_FICTION, DOCUMENTARY, MYSTERY), "Curiosity-sparking films"),
    MoodLexiconEntry("intellectual", (SCIENCE_FICTION, DRAMA, HISTORY), "Intellectually stimulating"),
    MoodLexiconEntry("mind", (SCIENCE_FICTION, THRILLER, MYSTERY), "Mind-bending narratives"),
    MoodLexiconEntry("philosophical", (SCIENCE_FICTION, DRAMA), "Philosophically rich"),

    # Fun / Social
    MoodLexiconEntry("fun", (COMEDY, ADVENTURE, ANIMATION), "Pure entertainment"),
    MoodLexiconEntry("funny", (COMEDY,), "Laugh-out-loud comedy"),
    MoodLexiconEntry("party", (COMEDY, MUSIC), "Party vibes"),
    MoodLexiconEntry("friends", (COMEDY, ADVENTURE, ACTION), "Great with friends"),

    # Inspiring
    MoodLexiconEntry("motivated", (DRAMA, HISTORY, WAR), "Stories of triumph"),
    MoodLexiconEntry("inspired", (DRAMA, DOCUMENTARY), "Uplifting inspiration"),
    MoodLexiconEntry("hopeful", (DRAMA, FAMILY, FANTASY), "Stories full of hope"),
)

_LEXICON_BY_KEYWORD = {entry.keyword: entry for entry in MOOD_LEXICON}


def lexicon_entry(keyword: str) -> MoodLexiconEntry:
    """Look up a lexicon entry by its exact keyword. Raises KeyError if unknown."""
    return _LEXICON_BY_KEYWORD[keyword]


def _as_profile(entry: MoodLexiconEntry) -> MoodProfile:
    return MoodProfile(entry.genre_ids, entry.vibe)


# Evaluated top to bottom, first match wins
FALLBACK_RULES: Tuple[FallbackRule, ...] = (
    FallbackRule("solo", ("alone", "solo"), (_as_profile(lexicon_entry("reflective")),)),
    FallbackRule("family", ("family", "kids"), (
        _as_profile(lexicon_entry("fun")),
        MoodProfile((ANIMATION, FAMILY), "Family-friendly fun"),
    )),
    FallbackRule("night", ("night", "evening"), (_as_profile(lexicon_entry("cozy")),)),
)

DEFAULT_PROFILE = MoodProfile((DRAMA, COMEDY, ACTION), "crowd-pleasers")
