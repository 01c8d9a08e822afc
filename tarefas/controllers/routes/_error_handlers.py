"""
Handlers de erro centralizados para a API.

Todas as respostas de erro seguem o mesmo formato JSON:
``{"error": ..., "status": ..., "message": ...}``.

Error Handlers:
    - TarefaError: InvalidRequest (400) e NotFound (404)
    - 404 / 405: Rota ou metodo inexistente
    - RequestEntityTooLarge: Corpo acima de MAX_CONTENT_LENGTH (413)
    - SQLAlchemyError: Erros de banco de dados (rollback + 500)
    - 500: Erro interno do servidor
"""

from flask import Flask, Response, current_app, g, jsonify, request
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import RequestEntityTooLarge

from tarefas import db
from tarefas.exceptions import TarefaError
from tarefas.utils.logging_config import log_exception


def api_error_response(error: str, status_code: int, message: str | None = None) -> tuple[Response, int]:
    """
    Cria resposta JSON padronizada para erros de API.

    Args:
        error: Tipo do erro (ex: "not_found", "invalid_request").
        status_code: Codigo HTTP do erro.
        message: Mensagem descritiva opcional.

    Returns:
        tuple[Response, int]: Resposta JSON e codigo de status.
    """
    response_data = {
        "error": error,
        "status": status_code,
    }
    if message:
        response_data["message"] = message

    return jsonify(response_data), status_code


def register_error_handlers(app: Flask) -> None:
    """
    Registra todos os error handlers na aplicacao Flask.

    Args:
        app: Instancia da aplicacao Flask.
    """

    @app.errorhandler(TarefaError)
    def handle_tarefa_error(e):
        current_app.logger.warning(
            "%s %s -> %s: %s",
            request.method,
            request.path,
            e.status_code,
            e.message,
            extra={"request_id": getattr(g, "request_id", None)},
        )
        return api_error_response(e.error, e.status_code, e.message)

    @app.errorhandler(404)
    def handle_not_found(e):
        return api_error_response("not_found", 404, "Resource not found")

    @app.errorhandler(405)
    def handle_method_not_allowed(e):
        return api_error_response("method_not_allowed", 405, "Method not allowed")

    @app.errorhandler(RequestEntityTooLarge)
    def handle_large_payload(e):
        """Retorna mensagem com limite de tamanho configurado."""
        current_app.logger.warning(
            "%s %s -> 413: corpo excede MAX_CONTENT_LENGTH",
            request.method,
            request.path,
            extra={"request_id": getattr(g, "request_id", None)},
        )
        max_len = current_app.config.get("MAX_CONTENT_LENGTH")
        if max_len:
            message = f"Corpo da requisição excede o tamanho permitido ({max_len} bytes)."
        else:
            message = "Corpo da requisição excede o tamanho permitido."
        return api_error_response("payload_too_large", 413, message)

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(e):
        """Registra excecao, faz rollback da transacao falha e responde 500."""
        log_exception(e, request, getattr(g, "request_id", None))
        db.session.rollback()
        return api_error_response("database_error", 500, "A database error occurred. Please try again.")

    @app.errorhandler(500)
    def handle_internal_error(e):
        log_exception(e, request, getattr(g, "request_id", None))
        db.session.rollback()
        return api_error_response(
            "internal_error",
            500,
            "An unexpected error occurred. Please try again later.",
        )
