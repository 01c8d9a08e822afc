"""Seed helpers for the sample task list."""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - help type checkers without runtime import
    from flask_sqlalchemy import SQLAlchemy


TAREFAS_EXEMPLO = [
    # (titulo, descricao, status, dias desde a criacao, dias desde a conclusao)
    ("Implementar autenticação", "Criar sistema de login e autenticação JWT", "Pendente", 10, None),
    ("Configurar CI/CD", "Configurar pipeline de deploy automático", "Em Andamento", 8, None),
    ("Escrever testes unitários", "Criar testes para os controllers e serviços", "Pendente", 6, None),
    ("Documentar API", "Criar documentação Swagger completa", "Concluído", 15, 5),
    ("Otimizar queries", "Melhorar performance das consultas ao banco", "Pendente", 4, None),
    ("Implementar validações", "Adicionar validações de entrada nos endpoints", "Em Andamento", 3, None),
    ("Configurar logging", "Implementar sistema de logs estruturado", "Pendente", 2, None),
    ("Criar dashboard", "Desenvolver interface de administração", "Concluído", 12, 1),
    ("Revisar código", "Fazer code review e refatoração", "Pendente", 1, None),
    ("Preparar deploy", "Configurar ambiente de produção", "Pendente", 0, None),
]


def seed_tarefas(db: "SQLAlchemy") -> int:
    """Populate the sample tasks when the table is empty.

    Returns the number of rows inserted.
    """

    from tarefas.models.tables import Tarefa
    from tarefas.utils.datetime_utils import now_utc

    if Tarefa.query.first() is not None:
        return 0

    agora = now_utc()
    for titulo, descricao, status, criada_ha, concluida_ha in TAREFAS_EXEMPLO:
        db.session.add(
            Tarefa(
                titulo=titulo,
                descricao=descricao,
                status=status,
                concluida=concluida_ha is not None,
                criada_em=agora - timedelta(days=criada_ha),
                concluida_em=agora - timedelta(days=concluida_ha) if concluida_ha is not None else None,
            )
        )
    db.session.commit()
    return len(TAREFAS_EXEMPLO)


if __name__ == "__main__":  # pragma: no cover - manual invocation only
    from tarefas import app, db

    with app.app_context():
        seed_tarefas(db)
