"""Registro centralizado dos blueprints e error handlers da API."""

from flask import Flask


def register_blueprints(app: Flask) -> None:
    """
    Registra blueprints e error handlers na aplicacao Flask.

    Args:
        app: Instancia da aplicacao Flask.
    """
    from tarefas.controllers.routes.tarefas import tarefas_bp
    from tarefas.controllers.routes._error_handlers import register_error_handlers

    app.register_blueprint(tarefas_bp)
    register_error_handlers(app)
