"""Excecoes de dominio do servico de tarefas.

Cada excecao carrega o codigo HTTP e o identificador de erro usados
pelos error handlers ao montar a resposta JSON.
"""


class TarefaError(Exception):
    """Base para erros de regra de negocio das tarefas."""

    status_code = 400
    error = "bad_request"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequest(TarefaError):
    """Corpo malformado, estado de id invalido ou campo obrigatorio vazio."""

    status_code = 400
    error = "invalid_request"


class NotFound(TarefaError):
    """Nenhuma tarefa corresponde ao id informado."""

    status_code = 404
    error = "not_found"
