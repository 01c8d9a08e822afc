"""Flask application and shared extensions for the Tarefas API."""

import logging
import secrets
import time
import uuid

import click
from flask import Flask, request, g
from flask_compress import Compress
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from dotenv import load_dotenv
from sqlalchemy.exc import SQLAlchemyError

load_dotenv()

from tarefas.config import Config  # noqa: E402

app = Flask(__name__)

logger = logging.getLogger(__name__)

app.config.from_object(Config)
app.config['SQLALCHEMY_DATABASE_URI'] = Config.database_uri(app.instance_path)
app.config['SQLALCHEMY_ENGINE_OPTIONS'] = Config.engine_options(app.config['SQLALCHEMY_DATABASE_URI'])

if not app.config['SECRET_KEY']:
    app.config['SECRET_KEY'] = secrets.token_urlsafe(32)
    logger.warning("SECRET_KEY não definida; gerando valor temporário apenas para ambiente local.")

db = SQLAlchemy(app)
migrate = Migrate(app, db)

rate_limit_storage = Config.rate_limit_storage()
limiter = Limiter(
    app=app,
    key_func=get_remote_address,
    default_limits=Config.default_limits() or None,
    storage_uri=rate_limit_storage,
    strategy="fixed-window",
    headers_enabled=True,
)

# Compressão HTTP para respostas JSON grandes (listagens)
compress = Compress(app)


@app.before_request
def _start_request_timer():
    """Store the request id and high-resolution start time."""
    g.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
    g.request_started_at = time.perf_counter()


@app.after_request
def _log_request_end(response):
    """Log request completion with timing information."""
    started_at = getattr(g, 'request_started_at', None)
    duration_ms = (time.perf_counter() - started_at) * 1000 if started_at is not None else 0.0
    request_id = getattr(g, "request_id", None)
    if request_id:
        response.headers.setdefault("X-Request-ID", request_id)
    log_request_info(
        request,
        response,
        duration_ms,
        request_id=request_id,
        threshold_ms=app.config.get('SLOW_REQUEST_THRESHOLD_MS', 0) or 0,
    )
    return response


@app.after_request
def _set_security_headers(response):
    """Apply security-related HTTP headers to responses."""
    response.headers.setdefault('X-Content-Type-Options', 'nosniff')
    response.headers['X-Frame-Options'] = 'DENY'
    response.headers.setdefault('Referrer-Policy', 'strict-origin-when-cross-origin')
    response.headers.setdefault('Cross-Origin-Resource-Policy', 'same-origin')
    return response


# Importa rotas e modelos depois da criação do db
from tarefas.models import tables  # noqa: E402,F401
from tarefas.controllers import routes, health  # noqa: E402,F401
from tarefas.seeds import seed_tarefas  # noqa: E402
from tarefas.utils.logging_config import setup_logging, log_request_info  # noqa: E402

routes.register_blueprints(app)


@app.cli.command("seed-tarefas")
def _seed_tarefas_command():
    """Insere as tarefas de exemplo quando a tabela está vazia."""
    inserted = seed_tarefas(db)
    click.echo(f"{inserted} tarefa(s) inserida(s).")


with app.app_context():
    db.create_all()

    if app.config['SEED_ON_STARTUP']:
        try:
            seed_tarefas(db)
        except SQLAlchemyError as exc:
            db.session.rollback()
            app.logger.warning("Não foi possível popular tarefas de exemplo: %s", exc)

setup_logging(app)
