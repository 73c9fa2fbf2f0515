"""
Lineup recommendation for the next Cartola round.

Heuristic, not an optimiser:
- if the market exposes status ids, only "provável" athletes (status 7) are eligible
- athletes whose club plays at home come first
- then higher average (media_num), then higher price (preco_num)

The best athletes per position fill a fixed 4-4-2 formation.
"""

from typing import Any, Dict, List, Optional

from .config import FORMATION, FORMATION_NAME, PROBABLE_STATUS_ID, UNAVAILABLE
from .shapers import extract_athletes, extract_matches, field, same_id

HOME_BONUS = 1000
AVERAGE_WEIGHT = 10
PRICE_WEIGHT = 0.1

CRITERIA_WITH_STATUS = f"status_id={PROBABLE_STATUS_ID} + casa + media + preco"
CRITERIA_WITHOUT_STATUS = "casa + media + preco"


def home_away_map(matches: List[Any]) -> Dict[Any, bool]:
    """
    Map club id -> True when playing at home, False when away.
    A club listed in several matches keeps its last venue.
    """
    club_is_home: Dict[Any, bool] = {}
    for match in matches:
        home_id = field(match, "clube_casa_id")
        away_id = field(match, "clube_visitante_id")
        if home_id:
            club_is_home[home_id] = True
        if away_id:
            club_is_home[away_id] = False
    return club_is_home


def has_status(athletes: List[Any]) -> bool:
    """True when at least one athlete carries a status id."""
    return any(field(a, "status_id") is not None for a in athletes)


def eligible_athletes(athletes: List[Any]) -> List[Any]:
    if has_status(athletes):
        return [a for a in athletes if same_id(field(a, "status_id"), PROBABLE_STATUS_ID)]
    return list(athletes)


def _number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


def score(athlete: Any, club_is_home: Dict[Any, bool]) -> float:
    """home * 1000 + media * 10 + preco * 0.1"""
    home = 1 if club_is_home.get(field(athlete, "clube_id")) is True else 0
    average = _number(field(athlete, "media_num"))
    price = _number(field(athlete, "preco_num"))
    return home * HOME_BONUS + average * AVERAGE_WEIGHT + price * PRICE_WEIGHT


def _club_name(clubs: Any, club_id: Any) -> str:
    name = field(field(clubs, str(club_id)), "nome_fantasia")
    return name if name is not None else UNAVAILABLE


def _display_name(athlete: Any) -> Optional[str]:
    nickname = field(athlete, "apelido")
    return nickname if nickname is not None else field(athlete, "nome")


def shape_pick(athlete: Any, club_is_home: Dict[Any, bool], clubs: Any) -> Dict[str, Any]:
    """Compact description of a recommended athlete."""
    club_id = field(athlete, "clube_id")
    home = club_is_home.get(club_id)

    if home is True:
        venue = "Casa"
    elif home is False:
        venue = "Fora"
    else:
        venue = UNAVAILABLE

    return {
        "atleta_id": field(athlete, "atleta_id"),
        "nome": _display_name(athlete),
        "clube_id": club_id,
        "clube": _club_name(clubs, club_id),
        "casa_fora": venue,
        "preco": field(athlete, "preco_num"),
        "motivo": "Joga em casa" if home is True else "Boa opção",
    }


def pick_by_position(
    eligible: List[Any],
    position_id: int,
    n: int,
    club_is_home: Dict[Any, bool],
    clubs: Any,
) -> List[Dict[str, Any]]:
    """
    Top ``n`` athletes of a position by score.
    Ties keep upstream order; fewer candidates yield a shorter list.
    """
    candidates = [a for a in eligible if same_id(field(a, "posicao_id"), position_id)]
    ranked = sorted(candidates, key=lambda a: score(a, club_is_home), reverse=True)
    return [shape_pick(a, club_is_home, clubs) for a in ranked[:n]]


def recommend(market: Any, matches_data: Any, clubs_data: Any) -> Dict[str, Any]:
    """Build the 4-4-2 recommendation from the market, matches and clubs payloads."""
    athletes = extract_athletes(market)
    club_is_home = home_away_map(extract_matches(matches_data))
    clubs = clubs_data or {}

    with_status = has_status(athletes)
    eligible = eligible_athletes(athletes)

    team = {
        group: pick_by_position(eligible, position_id, slots, club_is_home, clubs)
        for group, position_id, slots in FORMATION
    }

    return {
        "rodada": field(market, "rodada_atual"),
        "formacao": FORMATION_NAME,
        "criterio": CRITERIA_WITH_STATUS if with_status else CRITERIA_WITHOUT_STATUS,
        "time": team,
    }
