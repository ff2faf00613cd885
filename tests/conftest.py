"""Shared fixtures for the strategic performance tests."""

import pytest
from sqlalchemy import create_engine

from utils.strategic_performance.models import (
    CalcMode,
    Goal,
    Indicator,
    Polarity,
)
from utils.strategic_performance.serializers import strategic_data_from_dict


def make_indicator(calc_mode=CalcMode.ISOLATED, polarity=Polarity.HIGHER_BETTER, **kwargs):
    kwargs.setdefault("id", "ind-1")
    kwargs.setdefault("name", "Receita")
    return Indicator(calc_mode=calc_mode, polarity=polarity, **kwargs)


def make_goal(planned, realized, indicator_id="ind-1", year=2025):
    return Goal.from_strings(indicator_id, year, planned, realized)


@pytest.fixture
def sample_document():
    """Stored document in the browser application's camelCase layout."""
    return {
        "identity": {"companyName": "ACME", "vision": "Ser referência"},
        "perspectives": [
            {"id": "p-fin", "name": "Financeira"},
            {"id": "p-cli", "name": "Clientes"},
        ],
        "managers": [
            {"id": "m-ana", "name": "Ana"},
            {"id": "m-bruno", "name": "Bruno"},
        ],
        "objectives": [
            {"id": "o-rec", "name": "Aumentar receita", "perspectiveId": "p-fin", "gestorId": "m-ana"},
            {"id": "o-sat", "name": "Satisfazer clientes", "perspectiveId": "p-cli", "gestorId": "m-bruno"},
        ],
        "indicators": [
            {
                "id": "i-nps",
                "name": "NPS",
                "perspectivaId": "p-cli",
                "objetivoId": "o-sat",
                "gestorId": "m-bruno",
                "unit": "pts",
                "polarity": "maior_melhor",
                "calcType": "media",
                "status": "final",
            },
            {
                "id": "i-rec",
                "name": "Receita bruta",
                "perspectivaId": "p-fin",
                "objetivoId": "o-rec",
                "gestorId": "m-ana",
                "unit": "R$",
                "polarity": "maior_melhor",
                "calcType": "isolado",
                "status": "final",
            },
            {
                "id": "i-custo",
                "name": "Custo operacional",
                "perspectivaId": "p-fin",
                "objetivoId": "o-rec",
                "gestorId": "m-ana",
                "unit": "R$",
                "polarity": "menor_melhor",
                "calcType": "acumulado",
                "status": "draft",
                "semaphore": {"green": "between 95 105", "yellow": ">= 80"},
            },
        ],
        "goals": [
            {
                "id": "g-rec",
                "indicatorId": "i-rec",
                "year": 2025,
                "monthlyValues": ["100", "100", "100", "", "", "", "", "", "", "", "", ""],
                "monthlyRealized": ["120", "95", "", "", "", "", "", "", "", "", "", ""],
            },
            {
                "id": "g-custo",
                "indicatorId": "i-custo",
                "year": 2025,
                "monthlyValues": ["50", "50", "50", "", "", "", "", "", "", "", "", ""],
                "monthlyRealized": ["50", "55", "", "", "", "", "", "", "", "", "", ""],
            },
            {
                "id": "g-nps",
                "indicatorId": "i-nps",
                "year": 2025,
                "monthlyValues": ["80", "80", "80", "", "", "", "", "", "", "", "", ""],
                "monthlyRealized": ["70", "", "90", "", "", "", "", "", "", "", "", ""],
            },
        ],
        "globalSettings": {
            "semaphore": {
                "blue": "Acima de 110%",
                "green": "De 100% a 110%",
                "yellow": "De 90% a 99%",
                "red": "Abaixo de 90%",
            }
        },
    }


@pytest.fixture
def sample_data(sample_document):
    return strategic_data_from_dict(sample_document)


@pytest.fixture
def sqlite_engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'strategic.db'}")
    yield engine
    engine.dispose()
