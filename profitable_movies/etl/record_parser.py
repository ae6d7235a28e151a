# =========================================
# 📄 File: profitable_movies/etl/record_parser.py
# Purpose: Turn one row of the IMDB 5000 movie CSV into a typed MovieRecord
# - Strict on shape (exact field count)
# - Tolerant per field (bad numbers become 0)
# =========================================

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional, Sequence, Tuple

from profitable_movies.errors import RecordShapeError

MOVIE_FIELD_COUNT = 28     # Field count in the import movie csv file
LIST_SEPARATOR = "|"       # Separator used by the genres and plot_keywords columns
COLOR_STRING = "Color"     # Value of the color column for colour films


def _doc(name: str) -> Dict[str, str]:
    """Field metadata holding the document key used in the index."""
    return {"doc": name}


@dataclass(frozen=True)
class MovieRecord:
    actor_1_facebook_likes: int = field(default=0, metadata=_doc("actor1FacebookLikes"))
    actor_1_name: str = field(default="", metadata=_doc("actor1Name"))
    actor_2_facebook_likes: int = field(default=0, metadata=_doc("actor2FacebookLikes"))
    actor_2_name: str = field(default="", metadata=_doc("actor2Name"))
    actor_3_facebook_likes: int = field(default=0, metadata=_doc("actor3FacebookLikes"))
    actor_3_name: str = field(default="", metadata=_doc("actor3Name"))
    aspect_ratio: float = field(default=0.0, metadata=_doc("aspectRatio"))
    budget_usd: int = field(default=0, metadata=_doc("budgetUSD"))
    cast_total_facebook_likes: int = field(default=0, metadata=_doc("castTotalFacebookLikes"))
    content_rating: str = field(default="", metadata=_doc("contentRating"))
    country: str = field(default="", metadata=_doc("country"))
    critic_count: int = field(default=0, metadata=_doc("criticCount"))
    director_facebook_likes: int = field(default=0, metadata=_doc("directorFacebookLikes"))
    director_name: str = field(default="", metadata=_doc("directorName"))
    duration_minutes: int = field(default=0, metadata=_doc("durationMinutes"))
    face_number_in_poster: int = field(default=0, metadata=_doc("faceNumberInPoster"))
    genres: Tuple[str, ...] = field(default_factory=tuple, metadata=_doc("genres"))
    gross_usd: int = field(default=0, metadata=_doc("grossUSD"))
    imdb_score: float = field(default=0.0, metadata=_doc("imdbScore"))
    is_color: bool = field(default=False, metadata=_doc("isColor"))
    language: str = field(default="", metadata=_doc("language"))
    movie_facebook_likes: int = field(default=0, metadata=_doc("movieFacebookLikes"))
    movie_imdb_link: str = field(default="", metadata=_doc("movieIMDBLink"))
    movie_title: str = field(default="", metadata=_doc("movieTitle"))
    plot_keywords: Tuple[str, ...] = field(default_factory=tuple, metadata=_doc("plotKeywords"))
    title_year: str = field(default="", metadata=_doc("titleYear"))
    user_review_count: int = field(default=0, metadata=_doc("userReviewCount"))
    voted_users_count: int = field(default=0, metadata=_doc("votedUsersCount"))

    def to_document(self, doc_type: Optional[str] = None) -> Dict[str, Any]:
        """
        Build the JSON document stored in the index (camelCase keys).
        When doc_type is given it is stored as 'docType' so searches can be
        scoped to one collection inside the index.
        """
        document: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            document[f.metadata["doc"]] = list(value) if isinstance(value, tuple) else value
        if doc_type is not None:
            document["docType"] = doc_type
        return document


def _to_int(value: str) -> int:
    """Best-effort integer conversion: anything unparsable becomes 0."""
    try:
        return int(value)
    except ValueError:
        return 0


def _to_float(value: str) -> float:
    """Best-effort float conversion: anything unparsable becomes 0.0."""
    try:
        return float(value)
    except ValueError:
        return 0.0


def _split_list(value: str) -> Tuple[str, ...]:
    # "" -> ("",) on purpose: an empty column still yields one element
    return tuple(value.split(LIST_SEPARATOR))


def parse_movie(record: Sequence[str]) -> MovieRecord:
    """
    Parse one CSV row (already split into fields) into a MovieRecord.

    Raises RecordShapeError when the row does not have exactly
    MOVIE_FIELD_COUNT fields. Numeric columns that fail to parse are
    defaulted to zero instead of failing the row.
    """
    if len(record) != MOVIE_FIELD_COUNT:
        raise RecordShapeError(
            f"DataManager: unable to parse csv due to invalid field count "
            f"(expected {MOVIE_FIELD_COUNT}, got {len(record)})"
        )

    return MovieRecord(
        actor_1_facebook_likes=_to_int(record[7]),
        actor_1_name=record[10],
        actor_2_facebook_likes=_to_int(record[24]),
        actor_2_name=record[6],
        actor_3_facebook_likes=_to_int(record[5]),
        actor_3_name=record[14],
        aspect_ratio=_to_float(record[26]),
        budget_usd=_to_int(record[22]),
        cast_total_facebook_likes=_to_int(record[13]),
        content_rating=record[21],
        country=record[20],
        critic_count=_to_int(record[2]),
        director_facebook_likes=_to_int(record[4]),
        director_name=record[1],
        duration_minutes=_to_int(record[3]),
        face_number_in_poster=_to_int(record[15]),
        genres=_split_list(record[9]),
        gross_usd=_to_int(record[8]),
        imdb_score=_to_float(record[25]),
        is_color=record[0] == COLOR_STRING,
        language=record[19],
        movie_facebook_likes=_to_int(record[27]),
        movie_imdb_link=record[17],
        movie_title=record[11],
        plot_keywords=_split_list(record[16]),
        title_year=record[23],
        user_review_count=_to_int(record[18]),
        voted_users_count=_to_int(record[12]),
    )
