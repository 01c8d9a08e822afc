"""
Conversao entre o formato JSON da API e o model Tarefa.

Nomes de campo no fio: ``id``, ``titulo``, ``descricao``, ``status``,
``concluida``/``concluido``, ``criadaEm`` e ``concluidaEm``. A leitura
ignora maiusculas/minusculas nos nomes das propriedades.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from tarefas.exceptions import InvalidRequest
from tarefas.utils.datetime_utils import parse_datetime, to_iso


# Maior inteiro aceito por colunas INTEGER/BIGINT com sinal.
ID_MAXIMO = 2**63 - 1


def id_no_intervalo(tarefa_id: int) -> bool:
    return -ID_MAXIMO - 1 <= tarefa_id <= ID_MAXIMO


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _ler_id(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        raise InvalidRequest("Campo 'id' deve ser um inteiro")
    if isinstance(value, int):
        tarefa_id = value
    elif isinstance(value, float) and value.is_integer():
        tarefa_id = int(value)
    elif isinstance(value, str) and re.fullmatch(r"-?\d{1,30}", value.strip(), re.ASCII):
        tarefa_id = int(value.strip())
    else:
        raise InvalidRequest("Campo 'id' deve ser um inteiro")
    if not id_no_intervalo(tarefa_id):
        raise InvalidRequest("Campo 'id' fora do intervalo permitido")
    return tarefa_id


def _ler_texto(campos: dict, nome: str) -> str | None:
    value = campos.get(nome.lower())
    if value is None or isinstance(value, str):
        return value
    raise InvalidRequest(f"Campo '{nome}' deve ser texto")


def _ler_data(campos: dict, nome: str) -> datetime | None:
    try:
        return parse_datetime(campos.get(nome.lower()))
    except ValueError as exc:
        raise InvalidRequest(f"Campo '{nome}' possui data inválida: {exc}") from exc


@dataclass
class TarefaDTO:
    """Representacao de entrada de uma tarefa (create/update)."""

    id: int = 0
    titulo: str | None = None
    descricao: str | None = None
    status: str | None = None
    criada_em: datetime | None = None
    concluida_em: datetime | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> "TarefaDTO":
        """
        Monta o DTO a partir de um objeto JSON ja decodificado.

        ``concluida``/``concluido`` sao aceitos e descartados: o flag e
        sempre derivado do status.

        Raises:
            InvalidRequest: Payload nao e objeto ou possui tipos invalidos.
        """
        if not isinstance(payload, dict):
            raise InvalidRequest("Corpo da requisição deve ser um objeto JSON")

        campos = {str(key).lower(): value for key, value in payload.items()}
        return cls(
            id=_ler_id(campos.get("id")),
            titulo=_ler_texto(campos, "titulo"),
            descricao=_ler_texto(campos, "descricao"),
            status=_ler_texto(campos, "status"),
            criada_em=_ler_data(campos, "criadaEm"),
            concluida_em=_ler_data(campos, "concluidaEm"),
        )

    @property
    def descricao_resolvida(self) -> str | None:
        """Descricao informada, ou o titulo quando a descricao esta vazia."""
        if not is_blank(self.descricao):
            return self.descricao
        if not is_blank(self.titulo):
            return self.titulo
        return None


def serializar_tarefa(tarefa) -> dict:
    """Return the wire representation of a persisted task."""
    return {
        "id": tarefa.id,
        "titulo": tarefa.titulo,
        "descricao": tarefa.descricao,
        "status": tarefa.status,
        "concluida": bool(tarefa.concluida),
        "criadaEm": to_iso(tarefa.criada_em),
        "concluidaEm": to_iso(tarefa.concluida_em),
    }
