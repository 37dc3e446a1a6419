"""
Testes da varredura de escalonamento de SLA.

Cenário: chamados abertos segunda 18/03/2024 08:00 (UTC-3).
URGENTE: primeira resposta 09:00, resolução 16:00.
ALTA:    primeira resposta 12:00, resolução quarta 12:00.
"""

from datetime import datetime, timedelta

import pytest

from intranet.core.notificacoes.entities import TIPO_STATUS_CHAMADO
from intranet.core.notificacoes.use_cases import DefinirConfiguracaoNotificacaoService
from intranet.core.shared.exceptions import AuthorizationError, ValidationError
from intranet.core.sla.calendario import FUSO_HORARIO
from intranet.core.sla.entities import CicloSlaEntity, Prioridade, TipoAlertaSla
from intranet.core.sla.ports import InMemoryCicloSlaRepository
from intranet.core.sla.use_cases import VarreduraEscalonamentoSlaService
from intranet.core.tickets.entities import TicketEntity, TicketStatus


def local(dia, hora, minuto=0):
    return datetime(2024, 3, dia, hora, minuto, tzinfo=FUSO_HORARIO)


ABERTURA = local(18, 8)


@pytest.fixture
def novo_ticket(ticket_repo, ciclo_repo, resolvedor_politica):
    """Cria chamado com ciclo 1 aberto em ABERTURA."""

    def criar(prioridade=Prioridade.URGENTE, responsaveis=("tec-1",), titulo="Sistema de ponto fora do ar"):
        ticket = TicketEntity.criar(
            titulo=titulo,
            descricao="O sistema de ponto está inacessível para todos",
            criador_id="user-1",
            setor_destino_id="s-tech",
            agora=ABERTURA,
            prioridade=prioridade,
        )
        ticket.definir_responsaveis(list(responsaveis), ABERTURA)
        ticket_repo.save(ticket)

        prazos = resolvedor_politica.calcular_prazos(ABERTURA, prioridade)
        ciclo = CicloSlaEntity.abrir(ticket.id, 1, ABERTURA, prazos)
        ciclo_repo.adicionar(ciclo)
        return ticket, ciclo

    return criar


@pytest.fixture
def varredura(ticket_repo, ciclo_repo, dedup_repo, notificacao_repo, config_repo, diretorio, relogio, uow):
    diretorio.adicionar_usuario("admin-ferias", e_admin=True, ativo=False)
    return VarreduraEscalonamentoSlaService(
        ticket_repo=ticket_repo,
        ciclo_repo=ciclo_repo,
        dedup_repo=dedup_repo,
        notificacao_repo=notificacao_repo,
        config_repo=config_repo,
        diretorio=diretorio,
        relogio=relogio,
        uow=uow,
    )


class TestVarreduraAlertas:

    def test_violacoes_geram_notificacoes(self, varredura, novo_ticket, relogio, notificacao_repo, uow):
        """Responsáveis + admins ativos recebem um registro por alerta."""
        ticket, _ = novo_ticket()
        relogio.definir(local(18, 17))

        resultado = varredura.execute()

        assert resultado.tickets_avaliados == 1
        assert resultado.alertas_disparados == 2
        assert resultado.notificacoes_criadas == 4
        assert resultado.erros == 0

        destinatarios = {n.usuario_id for n in notificacao_repo.list_all()}
        assert destinatarios == {"tec-1", "admin-1"}
        assert "admin-ferias" not in destinatarios

        tipos = sorted(n.dados["alertType"] for n in notificacao_repo.list_all())
        assert tipos == ["FIRST_BREACH"] * 2 + ["RES_BREACH"] * 2

        eventos = uow.do_tipo("AlertaSlaDisparadoEvent")
        assert [e.tipo_alerta for e in eventos] == ["FIRST_BREACH", "RES_BREACH"]
        assert all(e.aggregate_id == ticket.id for e in eventos)

    def test_conteudo_da_notificacao(self, varredura, novo_ticket, relogio, notificacao_repo):
        ticket, _ = novo_ticket(responsaveis=())
        relogio.definir(local(18, 8, 30))

        varredura.execute()

        [notificacao] = notificacao_repo.listar_por_usuario("admin-1")
        assert notificacao.tipo == TIPO_STATUS_CHAMADO
        assert notificacao.titulo == "SLA em risco: Primeira resposta"
        assert ticket.titulo in notificacao.mensagem
        assert notificacao.link_url == f"/tickets/{ticket.id}"
        assert notificacao.dados == {"alertType": "FIRST_RISK"}
        assert notificacao.criado_em == local(18, 8, 30)

    def test_segunda_execucao_nao_repete(self, varredura, novo_ticket, relogio, notificacao_repo, dedup_repo):
        """A guarda (chamado, ciclo, tipo) impede alertas repetidos."""
        novo_ticket()
        relogio.definir(local(18, 17))

        varredura.execute()
        total = len(notificacao_repo.list_all())
        segunda = varredura.execute()

        assert segunda.alertas_disparados == 0
        assert segunda.notificacoes_criadas == 0
        assert len(notificacao_repo.list_all()) == total
        assert len(dedup_repo) == 2

    def test_risco_depois_violacao(self, varredura, novo_ticket, relogio):
        """Risco e violação são alertas distintos."""
        novo_ticket()

        relogio.definir(local(18, 8, 30))
        assert varredura.execute().alertas_disparados == 1

        relogio.definir(local(18, 17))
        assert varredura.execute().alertas_disparados == 2

    def test_guarda_ja_existente(self, varredura, novo_ticket, relogio, dedup_repo, notificacao_repo, uow):
        """Outra execução concorrente já gravou a guarda."""
        ticket, ciclo = novo_ticket()
        dedup_repo.inserir_se_ausente(ticket.id, ciclo.numero_ciclo, TipoAlertaSla.FIRST_RISK)
        relogio.definir(local(18, 8, 30))

        resultado = varredura.execute()

        assert resultado.alertas_disparados == 0
        assert notificacao_repo.list_all() == []
        assert uow.do_tipo("AlertaSlaDisparadoEvent") == []

    def test_cada_alerta_trava_o_chamado(self, varredura, novo_ticket, relogio, ticket_repo,
                                         notificacao_repo, monkeypatch):
        """O alerta é gravado sob a trava do chamado, com os responsáveis lidos nela."""
        ticket, _ = novo_ticket()
        atual = ticket_repo.get_by_id(ticket.id)
        atual.definir_responsaveis(["user-2"], ABERTURA)
        travas = []

        def travar(ticket_id):
            travas.append(ticket_id)
            return atual

        monkeypatch.setattr(ticket_repo, "get_by_id_para_atualizacao", travar)
        relogio.definir(local(18, 17))

        resultado = varredura.execute()

        assert travas == [ticket.id, ticket.id]
        assert resultado.notificacoes_criadas == 6
        assert len(notificacao_repo.listar_por_usuario("user-2")) == 2

    def test_chamado_removido_antes_da_trava(self, varredura, novo_ticket, relogio, ticket_repo, monkeypatch):
        ticket, _ = novo_ticket()
        monkeypatch.setattr(ticket_repo, "get_by_id_para_atualizacao", lambda ticket_id: None)
        relogio.definir(local(18, 17))

        resultado = varredura.execute()

        assert resultado.alertas_disparados == 0
        assert resultado.erros == 0

    def test_dentro_do_prazo_sem_alertas(self, varredura, novo_ticket, relogio):
        novo_ticket(prioridade=Prioridade.BAIXA)
        relogio.definir(local(18, 9))

        resultado = varredura.execute()

        assert resultado.tickets_avaliados == 1
        assert resultado.alertas_disparados == 0


class TestVarreduraEscopo:

    def test_notificacoes_desabilitadas(self, varredura, novo_ticket, relogio, config_repo, dedup_repo, notificacao_repo):
        """Com a chave ticket_status desligada a varredura não faz nada."""
        novo_ticket()
        config_repo.definir(TIPO_STATUS_CHAMADO, False)
        relogio.definir(local(18, 17))

        resultado = varredura.execute()

        assert resultado.ignorada is True
        assert resultado.tickets_avaliados == 0
        assert len(dedup_repo) == 0
        assert notificacao_repo.list_all() == []

    def test_ignora_chamados_encerrados(self, varredura, novo_ticket, relogio, ticket_repo, ciclo_repo):
        ticket, ciclo = novo_ticket()
        ticket.transicionar(TicketStatus.RESOLVIDO, local(18, 10))
        ticket_repo.save(ticket)
        ciclo.resolver(local(18, 10))
        relogio.definir(local(18, 17))

        resultado = varredura.execute()

        assert resultado.tickets_avaliados == 0

    def test_pausa_de_48h_nao_gera_alertas_de_resolucao(self, varredura, novo_ticket, relogio, notificacao_repo):
        """
        Ciclo pausado na abertura (aprovação pendente) e retomado 48h depois.

        Durante a pausa nada é avaliado; na retomada os prazos andam
        1200 minutos úteis e nenhum alerta de resolução é devido.
        """
        _, ciclo = novo_ticket(prioridade=Prioridade.ALTA)
        ciclo.pausar(ABERTURA)

        relogio.definir(ABERTURA + timedelta(hours=48))
        pausado = varredura.execute()
        assert pausado.tickets_avaliados == 0

        assert ciclo.retomar(relogio.agora()) == 1200
        assert ciclo.resolucao_ate == local(22, 12)

        retomado = varredura.execute()
        assert retomado.tickets_avaliados == 1
        alertas = {n.dados["alertType"] for n in notificacao_repo.list_all()}
        assert not alertas & {"RES_RISK", "RES_BREACH"}
        assert retomado.alertas_disparados == 0


class CicloRepoComFalha(InMemoryCicloSlaRepository):

    def __init__(self, ticket_com_falha: str):
        super().__init__()
        self.ticket_com_falha = ticket_com_falha

    def obter_ultimo(self, ticket_id):
        if ticket_id == self.ticket_com_falha:
            raise RuntimeError("banco indisponível")
        return super().obter_ultimo(ticket_id)


class TestVarreduraErros:

    def test_erro_em_um_chamado_nao_interrompe(self, ticket_repo, dedup_repo, notificacao_repo,
                                               config_repo, diretorio, relogio, uow, resolvedor_politica):
        """Falha num chamado é contada e a varredura segue para os demais."""
        tickets = []
        for titulo in ("Chamado com falha", "Chamado saudável"):
            ticket = TicketEntity.criar(
                titulo=titulo,
                descricao="Descrição com pelo menos dez caracteres",
                criador_id="user-1",
                setor_destino_id="s-tech",
                agora=ABERTURA,
                prioridade=Prioridade.URGENTE,
            )
            ticket_repo.save(ticket)
            tickets.append(ticket)

        ciclo_repo = CicloRepoComFalha(ticket_com_falha=tickets[0].id)
        for ticket in tickets:
            prazos = resolvedor_politica.calcular_prazos(ABERTURA, ticket.prioridade)
            ciclo_repo.adicionar(CicloSlaEntity.abrir(ticket.id, 1, ABERTURA, prazos))

        relogio.definir(local(18, 17))
        varredura = VarreduraEscalonamentoSlaService(
            ticket_repo=ticket_repo,
            ciclo_repo=ciclo_repo,
            dedup_repo=dedup_repo,
            notificacao_repo=notificacao_repo,
            config_repo=config_repo,
            diretorio=diretorio,
            relogio=relogio,
            uow=uow,
        )

        resultado = varredura.execute()

        assert resultado.erros == 1
        assert resultado.tickets_com_erro == [tickets[0].id]
        assert resultado.tickets_avaliados == 1
        assert resultado.alertas_disparados == 2
        assert resultado.to_dict()["erros"] == 1


class TestDefinirConfiguracaoNotificacao:

    @pytest.fixture
    def service(self, config_repo, auditoria):
        return DefinirConfiguracaoNotificacaoService(config_repo=config_repo, auditoria=auditoria)

    def test_desligar_interrompe_varredura(self, service, varredura, novo_ticket, relogio, admin, auditoria):
        novo_ticket()
        relogio.definir(local(18, 17))

        saida = service.execute(" ticket_status ", False, admin)

        assert saida == {"tipo": "ticket_status", "habilitada": False}
        assert varredura.execute().ignorada is True
        assert auditoria.acoes() == ["notification_setting_update"]

    def test_apenas_admin(self, service, usuario):
        with pytest.raises(AuthorizationError):
            service.execute(TIPO_STATUS_CHAMADO, False, usuario)

    def test_tipo_vazio(self, service, admin):
        with pytest.raises(ValidationError) as exc_info:
            service.execute("  ", True, admin)

        assert exc_info.value.field == "tipo"
