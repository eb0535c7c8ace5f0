"""
Heuristic mood analyzer for mood match.
- Maps free-text mood descriptions to at most three TMDB genre ids plus an explanation.
- Keyword matching is plain substring matching on the lower-cased text, so
  "mind" also fires inside "remind"; every matching keyword contributes.
- Stateless: the same text always yields the same analysis.
"""
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple
import logging

from cinemood.core.exceptions import ClientInputError
from cinemood.services.mood_lexicon import (
    DEFAULT_PROFILE,
    FALLBACK_RULES,
    MOOD_LEXICON,
    FallbackRule,
    MoodLexiconEntry,
    MoodProfile,
)

logger = logging.getLogger(__name__)

EXPLANATION_TEMPLATE = (
    "Based on your mood, I've selected {vibes}. "
    "These films should hit just the right spot for what you're looking for."
)


@dataclass(frozen=True)
class MoodAnalysis:
    genre_ids: Tuple[int, ...]
    explanation: str
    matched_keywords: Tuple[str, ...] = field(default_factory=tuple)


def _unique_in_order(values, limit: int) -> Tuple[int, ...]:
    seen = set()
    ordered: List[int] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        ordered.append(value)
        if len(ordered) >= limit:
            break
    return tuple(ordered)


class MoodAnalyzer:
    def __init__(
        self,
        lexicon: Sequence[MoodLexiconEntry] = MOOD_LEXICON,
        fallbacks: Sequence[FallbackRule] = FALLBACK_RULES,
        default: MoodProfile = DEFAULT_PROFILE,
        max_genres: int = 3,
        max_vibes: int = 2,
    ):
        self.lexicon = tuple(lexicon)
        self.fallbacks = tuple(fallbacks)
        self.default = default
        self.max_genres = max_genres
        self.max_vibes = max_vibes

    def match_profiles(self, text: str) -> Tuple[List[MoodProfile], Tuple[str, ...]]:
        """Return the profiles that apply to already lower-cased `text`, plus matched keywords."""
        matched = [entry for entry in self.lexicon if entry.keyword in text]
        if matched:
            profiles = [MoodProfile(entry.genre_ids, entry.vibe) for entry in matched]
            return profiles, tuple(entry.keyword for entry in matched)

        for rule in self.fallbacks:
            if rule.matches(text):
                logger.debug(f"No lexicon match, using '{rule.name}' fallback")
                return list(rule.profiles), ()

        return [self.default], ()

    def analyze(self, mood_text: str) -> MoodAnalysis:
        if not isinstance(mood_text, str) or not mood_text.strip():
            raise ClientInputError("Please provide a mood description")

        text = mood_text.lower()
        profiles, keywords = self.match_profiles(text)

        genre_ids = _unique_in_order(
            (genre_id for profile in profiles for genre_id in profile.genre_ids),
            self.max_genres,
        )
        vibes = " and ".join(profile.vibe for profile in profiles[: self.max_vibes])
        explanation = EXPLANATION_TEMPLATE.format(vibes=vibes.lower())

        return MoodAnalysis(genre_ids=genre_ids, explanation=explanation, matched_keywords=keywords)


_default_analyzer = MoodAnalyzer()


def analyze_mood(mood_text: str) -> MoodAnalysis:
    """Analyze `mood_text` with the built-in lexicon and fallbacks."""
    return _default_analyzer.analyze(mood_text)
