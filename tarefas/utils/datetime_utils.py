"""
Utilitários centralizados para manipulação de datas e horas.

Padrões da aplicação:
    - Armazenamento: DATETIME sem timezone (naive), sempre em UTC
    - Entrada: strings ISO-8601; sufixo ``Z`` aceito
    - Saída JSON: ISO-8601 com sufixo ``Z``

Datetimes naive recebidos de clientes são tratados como UTC, o formato
mais comum em strings ISO geradas por navegadores.
"""

from datetime import datetime, timezone


def now_utc() -> datetime:
    """
    Retorna datetime atual em UTC, sem timezone (naive).

    Example:
        >>> criada_em = db.Column(db.DateTime, default=now_utc)
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc(dt: datetime | None) -> datetime | None:
    """
    Normaliza datetime para UTC naive.

    Datetimes aware são convertidos; naive são assumidos como UTC.

    Args:
        dt: Datetime a ser normalizado.

    Returns:
        datetime | None: Datetime naive em UTC, ou None.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def parse_datetime(value) -> datetime | None:
    """
    Converte valor recebido em JSON para datetime UTC naive.

    Args:
        value: String ISO-8601, datetime ou None.

    Returns:
        datetime | None: Datetime normalizado, ou None para vazio.

    Raises:
        ValueError: Se o valor não for uma data reconhecível.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_utc(value)
    if not isinstance(value, str):
        raise ValueError(f"data inválida: {value!r}")
    text = value.strip()
    if not text:
        return None
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return to_utc(datetime.fromisoformat(text))


def to_iso(dt: datetime | None) -> str | None:
    """Serializa datetime UTC naive como ISO-8601 com sufixo ``Z``."""
    if dt is None:
        return None
    return to_utc(dt).isoformat() + "Z"
