"""Shared fixtures: a fake Cartola API served through httpx.MockTransport."""

import httpx
import pytest
from fastapi.testclient import TestClient

from cartola_api import main
from cartola_api.cartola_client import CartolaClient

BASE_URL = "https://cartola.test"

MARKET_STATUS = {
    "rodada_atual": 12,
    "status_mercado": 1,
    "temporada": 2025,
    "bola_rolando": False,
    "nome_rodada": "12ª Rodada",
    "fechamento": {"dia": 14, "mes": 6, "ano": 2025, "hora": 16, "minuto": 0},
    "times_escalados": 1234567,
}

MATCHES = {
    "partidas": [
        {
            "partida_id": 1,
            "partida_data": "2025-06-14 16:00:00",
            "local": "Maracanã",
            "clube_casa_id": 262,
            "clube_visitante_id": 263,
            "placar_oficial_mandante": None,
            "placar_oficial_visitante": None,
            "status_transmissao_tr": "CRIADA",
            "periodo_tr": "PRE_JOGO",
            "valida": True,
            "aproveitamento_mandante": ["v", "v", "e"],
        },
        {
            "partida_id": 2,
            "partida_data": "2025-06-14 18:30:00",
            "local": "Allianz Parque",
            "clube_casa_id": 275,
            "clube_visitante_id": 276,
            "valida": True,
        },
    ]
}

CLUBS = {
    "262": {"id": 262, "nome": "FLA", "abreviacao": "FLA", "nome_fantasia": "Flamengo", "escudos": {}},
    "263": {"id": 263, "nome": "BOT", "abreviacao": "BOT", "nome_fantasia": "Botafogo", "escudos": {}},
    "275": {"id": 275, "nome": "PAL", "abreviacao": "PAL", "nome_fantasia": "Palmeiras", "escudos": {}},
    "276": {"id": 276, "nome": "SAO", "abreviacao": "SAO", "nome_fantasia": "São Paulo", "escudos": {}},
}


def athlete(atleta_id, posicao_id, clube_id, media=0.0, preco=5.0, status_id=7, apelido=None):
    return {
        "atleta_id": atleta_id,
        "apelido": apelido if apelido is not None else f"Atleta {atleta_id}",
        "nome": f"Nome Completo {atleta_id}",
        "clube_id": clube_id,
        "posicao_id": posicao_id,
        "status_id": status_id,
        "preco_num": preco,
        "media_num": media,
        "jogos_num": 10,
        "foto": "https://example.invalid/foto.png",
        "scout": {"G": 1},
    }


def build_market():
    """Enough athletes for a full 4-4-2 with a few extras to be discarded."""
    athletes = [
        athlete(1, 1, 263, media=8.0),
        athlete(2, 1, 262, media=3.0),
        athlete(3, 1, 275, media=9.0, status_id=6),
    ]
    athletes += [athlete(10 + i, 2, 276, media=float(i)) for i in range(3)]
    athletes += [athlete(20 + i, 3, 262, media=float(i)) for i in range(3)]
    athletes += [athlete(30 + i, 4, 275, media=float(i)) for i in range(5)]
    athletes += [athlete(40 + i, 5, 263, media=float(i)) for i in range(3)]
    return {"rodada_atual": 12, "atletas": athletes, "clubes": CLUBS, "posicoes": {}}


class FakeCartola:
    """Routes upstream paths to canned payloads and records every call."""

    def __init__(self):
        self.routes = {
            "/mercado/status": (200, MARKET_STATUS),
            "/partidas": (200, MATCHES),
            "/clubes": (200, CLUBS),
            "/atletas/mercado": (200, build_market()),
        }
        self.calls = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls.append(path)
        handler = self.routes.get(path)
        if handler is None:
            return httpx.Response(404, text="not found")
        if callable(handler):
            return handler(request)
        status, payload = handler
        if isinstance(payload, str):
            return httpx.Response(status, text=payload)
        return httpx.Response(status, json=payload)


@pytest.fixture
def fake_cartola():
    return FakeCartola()


@pytest.fixture
def cartola(fake_cartola):
    return CartolaClient(
        base_url=BASE_URL,
        timeout=1.0,
        cache_ttl=0,
        transport=httpx.MockTransport(fake_cartola),
    )


@pytest.fixture
def client(cartola, monkeypatch):
    monkeypatch.setattr(main, "cartola_client", cartola)
    with TestClient(main.app) as test_client:
        yield test_client
