"""
genres.py
- TMDB genre catalog: numeric genre id -> display name.
- Read-only tables built once at import; only used for display and reason text.
"""
from types import MappingProxyType
from typing import Mapping, Optional

ACTION = 28
ADVENTURE = 12
ANIMATION = 16
COMEDY = 35
CRIME = 80
DOCUMENTARY = 99
DRAMA = 18
FAMILY = 10751
FANTASY = 14
HISTORY = 36
HORROR = 27
MUSIC = 10402
MYSTERY = 9648
ROMANCE = 10749
SCIENCE_FICTION = 878
TV_MOVIE = 10770
THRILLER = 53
WAR = 10752
WESTERN = 37

MOVIE_GENRES: Mapping[int, str] = MappingProxyType({
    ACTION: "Action",
    ADVENTURE: "Adventure",
    ANIMATION: "Animation",
    COMEDY: "Comedy",
    CRIME: "Crime",
    DOCUMENTARY: "Documentary",
    DRAMA: "Drama",
    FAMILY: "Family",
    FANTASY: "Fantasy",
    HISTORY: "History",
    HORROR: "Horror",
    MUSIC: "Music",
    MYSTERY: "Mystery",
    ROMANCE: "Romance",
    SCIENCE_FICTION: "Science Fiction",
    TV_MOVIE: "TV Movie",
    THRILLER: "Thriller",
    WAR: "War",
    WESTERN: "Western",
})


def genre_name(genre_id: int) -> Optional[str]:
    """Display name for a genre id, or None when the id is not in the catalog."""
    return MOVIE_GENRES.get(genre_id)
