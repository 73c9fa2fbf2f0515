"""
Response shaping for the Cartola proxy.
Selects and renames upstream fields into compact payloads and pages
through the athlete market listing.
"""

import math
import re
from typing import Any, Dict, List, Optional

from .config import DEFAULT_LIMIT, DEFAULT_OFFSET, MAX_LIMIT, MIN_LIMIT

STATUS_FIELDS = [
    "rodada_atual",
    "status_mercado",
    "temporada",
    "bola_rolando",
    "nome_rodada",
    "fechamento",
]

MATCH_FIELDS = [
    "partida_id",
    "partida_data",
    "local",
    "clube_casa_id",
    "clube_visitante_id",
    "placar_oficial_mandante",
    "placar_oficial_visitante",
    "status_transmissao_tr",
    "periodo_tr",
    "valida",
]

CLUB_FIELDS = ["id", "nome", "abreviacao", "nome_fantasia"]

ATHLETE_FIELDS = [
    "atleta_id",
    "apelido",
    "nome",
    "clube_id",
    "posicao_id",
    "status_id",
    "preco_num",
    "media_num",
    "jogos_num",
]


def field(record: Any, key: str) -> Any:
    """Value of ``key`` in ``record``, or None when either is missing."""
    if isinstance(record, dict):
        return record.get(key)
    return None


def pick_fields(record: Any, keys: List[str]) -> Dict[str, Any]:
    """Project a record onto ``keys``, filling gaps with None."""
    return {key: field(record, key) for key in keys}


def compact_status(data: Any) -> Dict[str, Any]:
    """Trim /mercado/status down to round and market state."""
    return pick_fields(data, STATUS_FIELDS)


def extract_matches(data: Any) -> List[Any]:
    """Upstream sends either {"partidas": [...]} or a bare list."""
    matches = field(data, "partidas")
    if isinstance(matches, list):
        return matches
    if isinstance(data, list):
        return data
    return []


def compact_matches(data: Any) -> Dict[str, List[Dict[str, Any]]]:
    return {"partidas": [pick_fields(m, MATCH_FIELDS) for m in extract_matches(data)]}


def compact_clubs(data: Any) -> Dict[str, Dict[str, Any]]:
    """Keep only identity and display names for each club, keyed as upstream."""
    if not isinstance(data, dict):
        return {}
    return {str(club_id): pick_fields(club, CLUB_FIELDS) for club_id, club in data.items()}


def extract_athletes(data: Any) -> List[Any]:
    athletes = field(data, "atletas")
    return athletes if isinstance(athletes, list) else []


# Accepted numeric query spellings: ASCII decimal with an optional sign and
# exponent, signed "Infinity", or unsigned 0x/0o/0b literals. Anything else
# ("inf", "nan", "1_0", non-ASCII digits) is not a number.
DECIMAL_RE = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)", re.ASCII)
RADIX_RE = re.compile(r"0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)", re.ASCII)


def _parse_number(raw: Optional[str]) -> Optional[float]:
    """Parse a query value; None when absent, NaN when not a number."""
    if raw is None or raw == "":
        return None
    text = raw.strip()
    if not text:
        return 0.0
    if RADIX_RE.fullmatch(text):
        return float(int(text, 0))
    if DECIMAL_RE.fullmatch(text):
        return float(text)
    return math.nan


def parse_id_filter(raw: Optional[str]) -> Optional[float]:
    """
    Parse an id filter (posicao_id / status_id).
    Absent, empty, zero and non-numeric values all mean "no filter".
    """
    value = _parse_number(raw)
    if value is None or math.isnan(value) or value == 0:
        return None
    return value


def parse_limit(raw: Optional[str]) -> int:
    """Page size, defaulting to 100 and clamped to [1, 200]."""
    value = _parse_number(raw)
    if value is None or not math.isfinite(value):
        return DEFAULT_LIMIT
    return int(min(max(value, MIN_LIMIT), MAX_LIMIT))


def parse_offset(raw: Optional[str]) -> int:
    """Page start, defaulting to 0 and never negative."""
    value = _parse_number(raw)
    if value is None or not math.isfinite(value):
        return DEFAULT_OFFSET
    return int(max(value, 0))


def paginate_athletes(
    data: Any,
    posicao_id: Optional[float] = None,
    status_id: Optional[float] = None,
    limit: int = DEFAULT_LIMIT,
    offset: int = DEFAULT_OFFSET,
) -> Dict[str, Any]:
    """
    Filter the market listing and return one compact page of it.

    ``total`` counts every athlete that passed the filters, not just the
    ones on the returned page.
    """
    athletes = extract_athletes(data)

    filtered = athletes
    if posicao_id:
        filtered = [a for a in filtered if same_id(field(a, "posicao_id"), posicao_id)]
    if status_id:
        filtered = [a for a in filtered if same_id(field(a, "status_id"), status_id)]

    page = filtered[offset:offset + limit]

    return {
        "rodada": field(data, "rodada_atual"),
        "total": len(filtered),
        "limit": limit,
        "offset": offset,
        "atletas": [pick_fields(a, ATHLETE_FIELDS) for a in page],
    }


def same_id(value: Any, wanted: float) -> bool:
    """Strict numeric id match: "5" or True never equal 5."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return value == wanted
