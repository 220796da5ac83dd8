"""Configuração do pytest para o projeto conecta-wa."""

import sys
from pathlib import Path

import pytest

# Adiciona src/ ao PYTHONPATH para permitir imports absolutos
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


@pytest.fixture(scope="session", autouse=True)
def _test_logging() -> None:
    """Logging JSON em DEBUG para toda a sessão de testes."""
    from app.bootstrap import initialize_test_app

    initialize_test_app()
