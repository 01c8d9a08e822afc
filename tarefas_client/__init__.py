"""Python client for the Tarefas REST API."""

from tarefas_client.client import ListagemResultado, TarefasClient, TarefasClientError

__all__ = ["ListagemResultado", "TarefasClient", "TarefasClientError"]
