"""Text-place consistency analysis.

Scores how well the post text supports the claimed location by lexical
matching: full POI name, POI name words, city, well-known nicknames, and
venue entities extracted from the text. Contributes 40% of the final score.

Scoring (each category capped, total capped at 1.0):
- exact POI name in text: +0.5
- POI name word (> 3 chars): +0.1 each, up to 0.3
- nickname: +0.3
- city mention: +0.2
- entity overlapping the POI name: +0.05 each, up to 0.2
- coordinates-only claim: total x 0.7 (no POI context to match against)
- nothing matched: 0.1 floor
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Union

from loguru import logger

from proof_of_place.config.scoring_tables import (
    TEXT_CITY,
    TEXT_COORDINATES_PENALTY,
    TEXT_ENTITY,
    TEXT_ENTITY_CAP,
    TEXT_EXACT_POI,
    TEXT_MIN_POI_WORD_LENGTH,
    TEXT_NICKNAME,
    TEXT_NO_MATCH_FLOOR,
    TEXT_POI_WORD,
    TEXT_POI_WORD_CAP,
    ScoringTables,
)
from proof_of_place.data_management.schemas import Coordinates, PointOfInterest

_ABBREVIATION_PATTERN = re.compile(r"\b[A-Z]{2,}\b")
_QUOTED_PATTERN = re.compile(r'"([^"]+)"')


@dataclass
class TextAnalysisResult:
    """Result of text-place analysis.

    Attributes:
        score: Text-place match score (0.0-1.0)
        entities: Venue keywords, abbreviations and quoted phrases found in text
        matches: Tagged matches against the claimed location (e.g. "exact_poi:...")
    """

    score: float
    entities: List[str] = field(default_factory=list)
    matches: List[str] = field(default_factory=list)


def _unique(items: List[str]) -> List[str]:
    return list(dict.fromkeys(items))


class TextAnalyzer:
    """
    Matches post text against a claimed location.

    Usage:
        analyzer = TextAnalyzer()
        result = analyzer.analyze("Concert at MSG tonight", poi)

    Attributes:
        tables: Lookup tables (venue keywords, nicknames, city tokens)
    """

    def __init__(self, tables: Optional[ScoringTables] = None):
        self.tables = tables or ScoringTables()
        self._city_patterns = [
            (city, re.compile(rf"\b{re.escape(city)}\b"))
            for city in self.tables.city_tokens
        ]
        self.logger = logger.bind(component="TextAnalyzer")

    def analyze(
        self,
        text: str,
        location: Union[Coordinates, PointOfInterest],
    ) -> TextAnalysisResult:
        """
        Analyze text for mentions of the claimed location.

        Args:
            text: Post text (any length)
            location: Claimed coordinates or POI

        Returns:
            TextAnalysisResult with score, entities and matches
        """
        normalized = text.lower()
        entities = self.extract_entities(text)
        matches = self._find_matches(normalized, location, entities)
        score = self._score(matches, location)

        self.logger.debug(
            f"Text score: {score:.3f}",
            matches=matches,
            entity_count=len(entities),
        )

        return TextAnalysisResult(score=score, entities=entities, matches=matches)

    def extract_entities(self, text: str) -> List[str]:
        """
        Extract location-like entities from text.

        Returns venue keywords present in the text, all-caps abbreviations
        (MSG, NYC) and quoted phrases, all lower-cased and deduplicated.
        """
        normalized = text.lower()
        entities = [kw for kw in self.tables.venue_keywords if kw in normalized]
        entities.extend(abbr.lower() for abbr in _ABBREVIATION_PATTERN.findall(text))
        entities.extend(q.lower() for q in _QUOTED_PATTERN.findall(text))
        return _unique(entities)

    def _find_matches(
        self,
        normalized: str,
        location: Union[Coordinates, PointOfInterest],
        entities: List[str],
    ) -> List[str]:
        matches: List[str] = []

        if isinstance(location, PointOfInterest):
            poi_name = location.name.lower()
            city = location.city.lower()

            if poi_name in normalized:
                matches.append(f"exact_poi:{poi_name}")

            poi_words = poi_name.split()
            for word in poi_words:
                if len(word) > TEXT_MIN_POI_WORD_LENGTH and word in normalized:
                    matches.append(f"poi_word:{word}")

            if city in normalized:
                matches.append(f"city:{city}")

            for nickname in self.tables.nicknames_for(poi_name):
                if nickname in normalized:
                    matches.append(f"nickname:{nickname}")

            first_word = poi_words[0] if poi_words else poi_name
            for entity in entities:
                if entity in poi_name or first_word in entity:
                    matches.append(f"entity:{entity}")
        else:
            # No reverse geocoding: only well-known city tokens can be checked
            for city, pattern in self._city_patterns:
                if pattern.search(normalized):
                    matches.append(f"city_mention:{city}")

        return _unique(matches)

    def _score(
        self,
        matches: List[str],
        location: Union[Coordinates, PointOfInterest],
    ) -> float:
        if not matches:
            return TEXT_NO_MATCH_FLOOR

        def count(prefix: str) -> int:
            return sum(1 for m in matches if m.startswith(prefix))

        score = 0.0
        if count("exact_poi:"):
            score += TEXT_EXACT_POI
        score += min(TEXT_POI_WORD_CAP, count("poi_word:") * TEXT_POI_WORD)
        if count("nickname:"):
            score += TEXT_NICKNAME
        if count("city:") or count("city_mention:"):
            score += TEXT_CITY
        score += min(TEXT_ENTITY_CAP, count("entity:") * TEXT_ENTITY)

        if isinstance(location, Coordinates):
            score *= TEXT_COORDINATES_PENALTY

        return min(1.0, score)


__all__ = ["TextAnalyzer", "TextAnalysisResult"]
