import unicodedata
from enum import Enum

from tarefas import db
from tarefas.utils.datetime_utils import now_utc, to_utc


def _chave_status(label: str) -> str:
    """Normalize a status label for comparison (accents, case, spacing)."""
    decomposed = unicodedata.normalize("NFKD", label)
    sem_acento = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return " ".join(sem_acento.replace("_", " ").replace("-", " ").split()).casefold()


class StatusTarefa(Enum):
    """Recognized task states. Any other label is kept as free text."""
    PENDENTE = "Pendente"
    EM_ANDAMENTO = "Em Andamento"
    CONCLUIDO = "Concluído"

    @classmethod
    def from_label(cls, label: str | None) -> "StatusTarefa | None":
        """Return the matching member, or ``None`` for free-text labels."""
        if not label:
            return None
        return _STATUS_POR_CHAVE.get(_chave_status(label))


_STATUS_POR_CHAVE = {
    "pendente": StatusTarefa.PENDENTE,
    "em andamento": StatusTarefa.EM_ANDAMENTO,
    "andamento": StatusTarefa.EM_ANDAMENTO,
    "concluido": StatusTarefa.CONCLUIDO,
    "concluida": StatusTarefa.CONCLUIDO,
}


def normalizar_status(label: str) -> str:
    """Return the canonical spelling for recognized labels, else the trimmed text."""
    status = StatusTarefa.from_label(label)
    if status is not None:
        return status.value
    return label.strip()


class Tarefa(db.Model):
    """A to-do item with a status-driven completion flag."""
    __tablename__ = "tarefas"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    titulo = db.Column(db.String(200), nullable=False, default="")
    descricao = db.Column(db.Text, nullable=False)
    status = db.Column(
        db.String(50), nullable=False, default=StatusTarefa.PENDENTE.value, index=True
    )
    concluida = db.Column(
        db.Boolean, nullable=False, default=False, server_default=db.text("0")
    )
    criada_em = db.Column(db.DateTime, nullable=False, default=now_utc)
    concluida_em = db.Column(db.DateTime)

    def __repr__(self):
        return f"<Tarefa {self.id} {self.status!r}>"

    @property
    def status_tarefa(self) -> StatusTarefa | None:
        return StatusTarefa.from_label(self.status)

    def avaliar_conclusao(self, concluida_em=None) -> None:
        """Derive ``concluida``/``concluida_em`` from the current status.

        Completed tasks take ``concluida_em`` when given, keep an earlier
        completion time when already completed, and fall back to now.
        Any other status clears ``concluida`` and leaves ``concluida_em``
        untouched.
        """
        if self.status_tarefa is StatusTarefa.CONCLUIDO:
            if concluida_em is not None:
                self.concluida_em = to_utc(concluida_em)
            elif not (self.concluida and self.concluida_em):
                self.concluida_em = now_utc()
            self.concluida = True
        else:
            self.concluida = False
