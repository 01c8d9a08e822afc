"""HTTP client for the Tarefas API.

Each call is a single round trip: no retries, no caching. Transport
failures and non-2xx answers raise :class:`TarefasClientError`, except
:meth:`TarefasClient.listar`, which reports them through
:class:`ListagemResultado` so callers can tell "empty" from "failed".
"""

import logging
import os
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://127.0.0.1:5000/api/tasks"


class TarefasClientError(Exception):
    """Network failure or non-2xx response from the Tarefas API."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, detail: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


@dataclass
class ListagemResultado:
    """Outcome of a list call: the tasks, or the error that prevented them."""

    tarefas: List[Dict[str, Any]] = field(default_factory=list)
    erro: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.erro is None


def _response_detail(resp: requests.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text or None


class TarefasClient:
    """HTTP client for the Tarefas API."""

    def __init__(self, base_url: str, *, timeout: int = 15) -> None:
        self.base_url = base_url.rstrip('/')
        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        self.timeout = timeout

    @classmethod
    def from_env(cls, **kwargs) -> "TarefasClient":
        return cls(os.getenv("TAREFAS_API_URL", DEFAULT_BASE_URL), **kwargs)

    # ------------------------------------------------------------------
    # internal helpers
    def _request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        url = urljoin(self.base_url + '/', endpoint.lstrip('/'))
        start = time.time()
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.warning("tarefas_request_failed", extra={"endpoint": endpoint, "error": str(exc)})
            raise TarefasClientError(f"Falha de comunicação com a API: {exc}") from exc

        logger.info(
            "tarefas_request",
            extra={
                "request_id": resp.headers.get('X-Request-ID'),
                "endpoint": endpoint,
                "status": resp.status_code,
                "latency": time.time() - start,
            },
        )
        if not 200 <= resp.status_code < 300:
            raise TarefasClientError(
                f"HTTP error! status: {resp.status_code}",
                status_code=resp.status_code,
                detail=_response_detail(resp),
            )
        return resp

    @staticmethod
    def _json(resp: requests.Response) -> Any:
        try:
            return resp.json()
        except ValueError as exc:
            raise TarefasClientError(
                "Resposta da API não é JSON válido", status_code=resp.status_code
            ) from exc

    # ------------------------------------------------------------------
    # public API
    def listar(self) -> ListagemResultado:
        try:
            data = self._json(self._request("GET", "/getall"))
        except TarefasClientError as exc:
            logger.error("Erro ao buscar tarefas: %s", exc)
            return ListagemResultado(erro=exc)
        if not isinstance(data, list):
            return ListagemResultado(erro=TarefasClientError("Resposta inesperada ao listar tarefas"))
        return ListagemResultado(tarefas=data)

    def obter(self, tarefa_id: int) -> Dict[str, Any]:
        return self._json(self._request("GET", f"/getbyid/{tarefa_id}"))

    def criar(self, dados: Dict[str, Any]) -> Dict[str, Any]:
        return self._json(self._request("POST", "/create", json=dados))

    def atualizar(self, dados: Dict[str, Any]) -> Dict[str, Any]:
        return self._json(self._request("PUT", "/update", json=dados))

    def excluir(self, tarefa_id: int) -> None:
        self._request("DELETE", f"/delete/{tarefa_id}")
