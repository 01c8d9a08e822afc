"""
Regras de ciclo de vida das tarefas.

Este modulo e a unica fonte de verdade para criacao, atualizacao
parcial e exclusao de tarefas, isolando o banco das regras de negocio.

Regras principais:
    - id 0 significa "criar"; id diferente de 0 significa "atualizar"
    - descricao vazia assume o titulo; ambos vazios e erro
    - concluida e sempre derivada do status
    - timestamps sao persistidos em UTC

Falhas de persistencia fazem rollback da sessao e sao propagadas.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from tarefas import db
from tarefas.exceptions import InvalidRequest, NotFound
from tarefas.models.tables import StatusTarefa, Tarefa, normalizar_status
from tarefas.schemas import TarefaDTO, id_no_intervalo, is_blank
from tarefas.utils.datetime_utils import now_utc, to_utc
from tarefas.utils.logging_utils import log_alteracao_dados

logger = logging.getLogger(__name__)


def _commit() -> None:
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Falha ao gravar alteracoes de tarefas; rollback executado")
        raise


def listar_tarefas() -> list[Tarefa]:
    """Retorna todas as tarefas ordenadas por id."""
    return Tarefa.query.order_by(Tarefa.id).all()


def obter_tarefa(tarefa_id: int) -> Tarefa:
    """
    Busca tarefa pelo id.

    Raises:
        NotFound: Nenhuma tarefa com o id informado.
    """
    tarefa = db.session.get(Tarefa, tarefa_id) if id_no_intervalo(tarefa_id) else None
    if tarefa is None:
        raise NotFound(f"Tarefa com id {tarefa_id} não encontrada")
    return tarefa


def criar_tarefa(dto: TarefaDTO) -> Tarefa:
    """
    Cria uma nova tarefa a partir do DTO.

    Args:
        dto: Dados de entrada; ``id`` deve ser 0.

    Returns:
        Tarefa: Registro persistido, com id atribuido pelo banco.

    Raises:
        InvalidRequest: id diferente de 0 ou descricao/titulo vazios.
    """
    if dto.id != 0:
        raise InvalidRequest(
            "Id deve ser 0 para criar uma nova tarefa. Use PUT /api/tasks/update para atualizar."
        )

    descricao = dto.descricao_resolvida
    if descricao is None:
        raise InvalidRequest("Descricao ou Titulo é obrigatório")

    status = StatusTarefa.PENDENTE.value if is_blank(dto.status) else normalizar_status(dto.status)
    tarefa = Tarefa(
        titulo=dto.titulo or "",
        descricao=descricao,
        status=status,
        concluida=False,
        criada_em=to_utc(dto.criada_em) if dto.criada_em is not None else now_utc(),
    )
    db.session.add(tarefa)
    _commit()

    log_alteracao_dados("criar", "tarefa", tarefa.id, ("titulo", "descricao", "status", "criada_em"))
    return tarefa


def atualizar_tarefa(dto: TarefaDTO) -> Tarefa:
    """
    Aplica atualizacao parcial sobre uma tarefa existente.

    Apenas campos nao vazios sobrescrevem os atuais. O estado de
    conclusao e sempre reavaliado a partir do status resultante.

    Raises:
        InvalidRequest: id igual a 0.
        NotFound: Nenhuma tarefa com o id informado.
    """
    if dto.id == 0:
        raise InvalidRequest(
            "Id é obrigatório para atualizar uma tarefa. Use POST /api/tasks/create para criar."
        )

    tarefa = obter_tarefa(dto.id)
    alterados = []

    if not is_blank(dto.titulo):
        tarefa.titulo = dto.titulo
        alterados.append("titulo")

    descricao = dto.descricao_resolvida
    if descricao is not None:
        tarefa.descricao = descricao
        alterados.append("descricao")

    if not is_blank(dto.status):
        tarefa.status = normalizar_status(dto.status)
        alterados.append("status")

    if dto.criada_em is not None:
        tarefa.criada_em = to_utc(dto.criada_em)
        alterados.append("criada_em")

    tarefa.avaliar_conclusao(dto.concluida_em)
    _commit()

    log_alteracao_dados("atualizar", "tarefa", tarefa.id, alterados)
    return tarefa


def excluir_tarefa(tarefa_id: int | None) -> None:
    """
    Remove a tarefa identificada pelo id.

    Raises:
        InvalidRequest: id ausente ou igual a 0.
        NotFound: Nenhuma tarefa com o id informado.
    """
    if not tarefa_id:
        raise InvalidRequest("Id da tarefa é obrigatório para exclusão")

    tarefa = obter_tarefa(tarefa_id)
    db.session.delete(tarefa)
    _commit()

    log_alteracao_dados("excluir", "tarefa", tarefa_id, ())
