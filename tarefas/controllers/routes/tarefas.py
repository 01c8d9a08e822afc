"""
Blueprint REST de tarefas.

Rotas:
    - GET /api/tasks/getall: Lista todas as tarefas
    - GET /api/tasks/getbyid/<id>: Busca tarefa pelo id
    - POST /api/tasks/create: Cria tarefa (id 0 ou ausente)
    - PUT /api/tasks/update: Atualizacao parcial (id obrigatorio)
    - DELETE /api/tasks/delete/<id>: Exclui tarefa pelo id
    - DELETE /api/tasks/delete: Exclui tarefa lendo o id do corpo JSON

As regras de negocio ficam em ``tarefas.services.tarefas``; este modulo
apenas decodifica o corpo e serializa a resposta.
"""

import json

from flask import Blueprint, current_app, jsonify, request

from tarefas.exceptions import InvalidRequest
from tarefas.schemas import TarefaDTO, serializar_tarefa
from tarefas.services import tarefas as service

tarefas_bp = Blueprint("tarefas", __name__, url_prefix="/api/tasks")


def _payload_json(empty_message: str = "Body is null or empty"):
    """Decode the raw request body, reporting empty or malformed JSON as 400."""
    body = request.get_data(as_text=True)
    if not body or not body.strip():
        raise InvalidRequest(empty_message)
    try:
        return json.loads(body)
    except ValueError as exc:
        raise InvalidRequest(f"Invalid JSON format: {exc}") from exc


def _ack_exclusao(tarefa_id: int):
    return jsonify({"message": "Tarefa excluída com sucesso", "id": tarefa_id})


@tarefas_bp.get("/getall")
def listar():
    return jsonify([serializar_tarefa(t) for t in service.listar_tarefas()])


@tarefas_bp.get("/getbyid/<int:tarefa_id>")
def obter(tarefa_id):
    return jsonify(serializar_tarefa(service.obter_tarefa(tarefa_id)))


@tarefas_bp.post("/create")
def criar():
    dto = TarefaDTO.from_payload(_payload_json())
    current_app.logger.debug("DTO (CREATE) - titulo=%r descricao=%r", dto.titulo, dto.descricao)
    tarefa = service.criar_tarefa(dto)
    return jsonify(serializar_tarefa(tarefa))


@tarefas_bp.put("/update")
def atualizar():
    dto = TarefaDTO.from_payload(_payload_json())
    current_app.logger.debug("DTO (UPDATE) - id=%s status=%r", dto.id, dto.status)
    tarefa = service.atualizar_tarefa(dto)
    return jsonify(serializar_tarefa(tarefa))


@tarefas_bp.delete("/delete/<int:tarefa_id>")
def excluir(tarefa_id):
    service.excluir_tarefa(tarefa_id)
    return _ack_exclusao(tarefa_id)


@tarefas_bp.delete("/delete")
def excluir_por_corpo():
    """Compatibilidade com clientes que enviam a tarefa completa; so o id e usado."""
    dto = TarefaDTO.from_payload(_payload_json("Task is null"))
    service.excluir_tarefa(dto.id)
    return _ack_exclusao(dto.id)
