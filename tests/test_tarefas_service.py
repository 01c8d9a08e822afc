import os
import tempfile
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import SQLAlchemyError

os.environ['DATABASE_URL'] = 'sqlite:///:memory:'
os.environ['APP_LOG_DIR'] = os.path.join(tempfile.gettempdir(), 'tarefas-test-logs')

from tarefas import app, db
from tarefas.exceptions import InvalidRequest, NotFound
from tarefas.models.tables import Tarefa
from tarefas.schemas import TarefaDTO
from tarefas.seeds import TAREFAS_EXEMPLO, seed_tarefas
from tarefas.services import tarefas as service
from tarefas.utils.datetime_utils import now_utc


def setup_function(function):
    with app.app_context():
        db.drop_all()
        db.create_all()


def _criar(**kwargs):
    return service.criar_tarefa(TarefaDTO(**kwargs))


def test_listar_sem_tarefas_retorna_lista_vazia():
    with app.app_context():
        assert service.listar_tarefas() == []


def test_listar_ordena_por_id():
    with app.app_context():
        ids = [_criar(titulo=f"T{i}").id for i in range(3)]
        assert [t.id for t in service.listar_tarefas()] == ids


def test_criar_com_id_falha():
    with app.app_context():
        with pytest.raises(InvalidRequest):
            _criar(id=7, titulo="Comprar pão")
        assert Tarefa.query.count() == 0


@pytest.mark.parametrize("titulo, descricao", [(None, None), ("", ""), ("   ", " ")])
def test_criar_sem_titulo_e_descricao_falha(titulo, descricao):
    with app.app_context():
        with pytest.raises(InvalidRequest):
            _criar(titulo=titulo, descricao=descricao)


def test_criar_apenas_com_titulo_usa_titulo_como_descricao():
    with app.app_context():
        antes = now_utc()
        tarefa = _criar(titulo="Buy milk")
        assert tarefa.id
        assert tarefa.descricao == "Buy milk"
        assert tarefa.status == "Pendente"
        assert tarefa.concluida is False
        assert tarefa.concluida_em is None
        assert antes <= tarefa.criada_em <= now_utc()


def test_criar_apenas_com_descricao_deixa_titulo_vazio():
    with app.app_context():
        tarefa = _criar(descricao="Só descrição")
        assert tarefa.titulo == ""
        assert tarefa.descricao == "Só descrição"


def test_criar_nunca_marca_concluida():
    with app.app_context():
        tarefa = _criar(titulo="Pronta", status="Concluído")
        assert tarefa.status == "Concluído"
        assert tarefa.concluida is False
        assert tarefa.concluida_em is None


def test_criar_normaliza_criada_em_para_utc():
    brasilia = timezone(timedelta(hours=-3))
    with app.app_context():
        tarefa = _criar(titulo="Fuso", criada_em=datetime(2024, 1, 1, 12, 0, tzinfo=brasilia))
        assert tarefa.criada_em == datetime(2024, 1, 1, 15, 0)


def test_atualizar_com_id_zero_falha():
    with app.app_context():
        with pytest.raises(InvalidRequest):
            service.atualizar_tarefa(TarefaDTO(id=0, status="Concluído"))


def test_atualizar_tarefa_inexistente_falha():
    with app.app_context():
        with pytest.raises(NotFound):
            service.atualizar_tarefa(TarefaDTO(id=999, status="Concluído"))


def test_concluir_e_reabrir_tarefa():
    with app.app_context():
        tarefa_id = _criar(titulo="Lavar louça").id

        concluida = service.atualizar_tarefa(TarefaDTO(id=tarefa_id, status="Concluído"))
        assert concluida.concluida is True
        assert concluida.concluida_em is not None
        concluida_em = concluida.concluida_em

        reaberta = service.atualizar_tarefa(TarefaDTO(id=tarefa_id, status="Pendente"))
        assert reaberta.concluida is False
        assert reaberta.status == "Pendente"
        assert reaberta.concluida_em == concluida_em


def test_conclusao_usa_concluida_em_informado_e_nao_criada_em():
    with app.app_context():
        tarefa = _criar(titulo="Relatório", criada_em=datetime(2024, 1, 1))
        atualizada = service.atualizar_tarefa(
            TarefaDTO(
                id=tarefa.id,
                status="Concluído",
                criada_em=datetime(2024, 2, 1),
                concluida_em=datetime(2024, 3, 1, tzinfo=timezone.utc),
            )
        )
        assert atualizada.criada_em == datetime(2024, 2, 1)
        assert atualizada.concluida_em == datetime(2024, 3, 1)


def test_salvar_tarefa_ja_concluida_preserva_data_de_conclusao():
    with app.app_context():
        tarefa_id = _criar(titulo="Backup").id
        primeira = service.atualizar_tarefa(
            TarefaDTO(id=tarefa_id, status="Concluído", concluida_em=datetime(2024, 5, 5))
        ).concluida_em
        segunda = service.atualizar_tarefa(TarefaDTO(id=tarefa_id, descricao="Backup semanal"))
        assert segunda.concluida is True
        assert segunda.concluida_em == primeira


def test_status_reconhecido_ignora_acento_e_caixa():
    with app.app_context():
        tarefa_id = _criar(titulo="Deploy").id
        tarefa = service.atualizar_tarefa(TarefaDTO(id=tarefa_id, status="  CONCLUIDO "))
        assert tarefa.status == "Concluído"
        assert tarefa.concluida is True


def test_status_livre_mantem_texto_e_nao_conclui():
    with app.app_context():
        tarefa_id = _criar(titulo="Revisão").id
        tarefa = service.atualizar_tarefa(TarefaDTO(id=tarefa_id, status="Aguardando cliente"))
        assert tarefa.status == "Aguardando cliente"
        assert tarefa.concluida is False


def test_atualizacao_parcial_com_status_preserva_demais_campos():
    with app.app_context():
        tarefa = _criar(titulo="Título", descricao="Descrição", criada_em=datetime(2023, 6, 1, 8, 30))
        atualizada = service.atualizar_tarefa(TarefaDTO(id=tarefa.id, status="Em Andamento"))
        assert atualizada.titulo == "Título"
        assert atualizada.descricao == "Descrição"
        assert atualizada.criada_em == datetime(2023, 6, 1, 8, 30)
        assert atualizada.status == "Em Andamento"


def test_atualizar_sem_descricao_usa_titulo():
    with app.app_context():
        tarefa = _criar(titulo="Antigo", descricao="Descrição antiga")
        atualizada = service.atualizar_tarefa(TarefaDTO(id=tarefa.id, titulo="Novo", descricao="  "))
        assert atualizada.titulo == "Novo"
        assert atualizada.descricao == "Novo"


def test_criar_e_obter_retornam_mesmos_campos():
    with app.app_context():
        criada = _criar(titulo="Ida e volta", descricao="Mesmos campos", status="Em andamento")
        campos = {c: getattr(criada, c) for c in ("id", "titulo", "descricao", "status", "concluida", "criada_em", "concluida_em")}
        tarefa_id = criada.id
    with app.app_context():
        obtida = service.obter_tarefa(tarefa_id)
        assert {c: getattr(obtida, c) for c in campos} == campos


def test_excluir_e_obter_falha():
    with app.app_context():
        tarefa_id = _criar(titulo="Temporária").id
        service.excluir_tarefa(tarefa_id)
        with pytest.raises(NotFound):
            service.obter_tarefa(tarefa_id)


def test_excluir_sem_id_ou_inexistente():
    with app.app_context():
        with pytest.raises(InvalidRequest):
            service.excluir_tarefa(0)
        with pytest.raises(InvalidRequest):
            service.excluir_tarefa(None)
        with pytest.raises(NotFound):
            service.excluir_tarefa(123)


def test_falha_ao_gravar_nao_aplica_criacao(monkeypatch):
    def _falha():
        raise SQLAlchemyError("disk full")

    with app.app_context():
        monkeypatch.setattr(db.session, "commit", _falha)
        with pytest.raises(SQLAlchemyError):
            _criar(titulo="Não persiste")
        monkeypatch.undo()
        assert Tarefa.query.count() == 0


def test_falha_ao_gravar_nao_aplica_atualizacao(monkeypatch):
    def _falha():
        raise SQLAlchemyError("deadlock")

    with app.app_context():
        tarefa_id = _criar(titulo="Estável").id
        monkeypatch.setattr(db.session, "commit", _falha)
        with pytest.raises(SQLAlchemyError):
            service.atualizar_tarefa(TarefaDTO(id=tarefa_id, status="Concluído"))
        monkeypatch.undo()
        tarefa = db.session.get(Tarefa, tarefa_id)
        assert tarefa.status == "Pendente"
        assert tarefa.concluida is False


def test_seed_popula_apenas_tabela_vazia():
    with app.app_context():
        assert seed_tarefas(db) == len(TAREFAS_EXEMPLO)
        assert seed_tarefas(db) == 0
        concluidas = Tarefa.query.filter_by(concluida=True).all()
        assert {t.status for t in concluidas} == {"Concluído"}
        assert all(t.concluida_em is not None for t in concluidas)


def test_atualizar_apenas_titulo_altera_titulo_e_descricao():
    with app.app_context():
        tarefa = _criar(titulo="Antigo", descricao="Descrição antiga", status="Em Andamento",
                        criada_em=datetime(2023, 6, 1, 8, 30))
        atualizada = service.atualizar_tarefa(TarefaDTO(id=tarefa.id, titulo="Novo título"))
        assert atualizada.titulo == "Novo título"
        assert atualizada.descricao == "Novo título"
        assert atualizada.status == "Em Andamento"
        assert atualizada.criada_em == datetime(2023, 6, 1, 8, 30)
        assert atualizada.concluida is False
        assert atualizada.concluida_em is None


def test_obter_id_fora_do_intervalo_nao_encontrado():
    with app.app_context():
        with pytest.raises(NotFound):
            service.obter_tarefa(2**70)
        with pytest.raises(NotFound):
            service.excluir_tarefa(-(2**70))
