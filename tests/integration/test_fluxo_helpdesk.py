"""
Testes de Integração End-to-End.

Fluxo completo pelo container DI real:
- Use Case → Repository Django → SQLite
- Unit of Work → Event Store → Publisher (após commit)
- Varredura de SLA → guarda de alerta → notificações

Linha do tempo (UTC-3): segunda 18/03/2024 08:00 em diante.
"""

import json
from datetime import datetime

import pytest
from django.test import RequestFactory

from intranet.adapters.django_app.tickets.api_views import TicketAPIListView
from intranet.core.shared.dtos import AtorDTO
from intranet.core.shared.exceptions import AuthorizationError, ValidationError
from intranet.core.sla.calendario import FUSO_HORARIO
from intranet.core.tickets.dtos import (
    AdicionarComentarioInputDTO,
    AtualizarTicketInputDTO,
    CriarTicketInputDTO,
    DecidirAprovacaoInputDTO,
)

pytestmark = [pytest.mark.integration, pytest.mark.django_db(transaction=True)]


def local(dia, hora, minuto=0):
    return datetime(2024, 3, dia, hora, minuto, tzinfo=FUSO_HORARIO)


@pytest.fixture
def admin(usuarios):
    return AtorDTO(id=str(usuarios['admin'].pk), e_admin=True)


@pytest.fixture
def solicitante(usuarios):
    return AtorDTO(id=str(usuarios['solicitante'].pk))


@pytest.fixture
def pedido_de_compra(container, cadastro, solicitante):
    """Chamado URGENTE que exige aprovação, aberto segunda 08:00."""
    return container.criar_ticket_service().execute(
        CriarTicketInputDTO(
            titulo='Notebook para novo colaborador',
            descricao='Colaborador do RH começa na próxima segunda e precisa de notebook',
            prioridade='URGENTE',
            categoria_id=cadastro['categoria_id'],
        ),
        solicitante,
    )


class TestFluxoComAprovacao:

    def test_criacao_pausa_o_sla(self, pedido_de_compra, container, admin):
        assert pedido_de_compra.status == 'AGUARDANDO_APROVACAO'
        assert pedido_de_compra.setor_destino_id == 's-tech'
        assert pedido_de_compra.estado_sla == 'PAUSADO'
        assert pedido_de_compra.ciclo_sla.numero_ciclo == 1
        assert pedido_de_compra.ciclo_sla.primeira_resposta_ate == local(18, 9)
        assert pedido_de_compra.ciclo_sla.resolucao_ate == local(18, 16)

        aprovacao = container.obter_aprovacao_service().execute(pedido_de_compra.id, admin)
        assert aprovacao.e_aprovador is True
        assert aprovacao.aprovadores_ids == [admin.id]

    def test_ciclo_de_vida_completo(self, pedido_de_compra, container, relogio, publisher, admin, solicitante):
        ticket_id = pedido_de_compra.id

        # Quarta 08:00: aprovação depois de 48h de pausa (1200 min úteis)
        relogio.definir(local(20, 8))
        assert container.varredura_sla_service().execute().tickets_avaliados == 0

        aprovado = container.decidir_aprovacao_service().execute(
            DecidirAprovacaoInputDTO(ticket_id=ticket_id, aprovar=True), admin
        )
        assert aprovado.status == 'EM_ANDAMENTO'
        assert aprovado.ciclo_sla.minutos_pausados == 1200
        assert aprovado.ciclo_sla.primeira_resposta_ate == local(20, 9)
        assert aprovado.ciclo_sla.resolucao_ate == local(20, 16)

        # Quarta 09:30: primeira resposta estourada, resolução ainda longe
        relogio.definir(local(20, 9, 30))
        resultado = container.varredura_sla_service().execute()
        assert resultado.to_dict() == {
            'tickets_avaliados': 1,
            'alertas_disparados': 1,
            'notificacoes_criadas': 1,
            'erros': 0,
            'ignorada': False,
        }
        assert container.varredura_sla_service().execute().alertas_disparados == 0

        [notificacao] = container.notificacao_repository().listar_por_usuario(admin.id)
        assert notificacao.dados == {'alertType': 'FIRST_BREACH'}
        assert notificacao.link_url == f'/tickets/{ticket_id}'

        # Resposta pública da TI registra a primeira resposta (atrasada)
        container.adicionar_comentario_service().execute(
            AdicionarComentarioInputDTO(ticket_id=ticket_id, corpo='Pedido aprovado, separando o equipamento'),
            admin,
        )

        # Quarta 10:00: resolvido dentro do prazo de resolução
        relogio.definir(local(20, 10))
        resolvido = container.atualizar_ticket_service().execute(
            AtualizarTicketInputDTO(ticket_id=ticket_id, status='RESOLVIDO'), admin
        )
        assert resolvido.status == 'RESOLVIDO'
        assert resolvido.estado_sla == 'ENCERRADO'
        assert resolvido.ciclo_sla.primeira_resposta_violada is True
        assert resolvido.ciclo_sla.resolucao_violada is False

        # Quinta 08:00: reabertura abre o ciclo 2 com prazos novos
        relogio.definir(local(21, 8))
        reaberto = container.atualizar_ticket_service().execute(
            AtualizarTicketInputDTO(ticket_id=ticket_id, status='ABERTO'), admin
        )
        assert reaberto.status == 'ABERTO'
        assert reaberto.fechado_em is None
        assert reaberto.ciclo_sla.numero_ciclo == 2
        assert reaberto.ciclo_sla.resolucao_ate == local(21, 16)

        ciclos = container.ciclo_repository().listar_por_ticket(ticket_id)
        assert [c.numero_ciclo for c in ciclos] == [1, 2]
        assert ciclos[0].resolvido_em == local(20, 10)

        # Leitura pelo solicitante
        lido = container.obter_ticket_service().execute(ticket_id, solicitante)
        assert lido.ciclo_sla.numero_ciclo == 2

        # Event Store: sequência contínua por chamado; publicação após commit
        eventos = container.event_store().get_events_for_aggregate(ticket_id)
        assert [e['sequence'] for e in eventos] == list(range(1, len(eventos) + 1))
        tipos = [e['event_type'] for e in eventos]
        assert tipos[:2] == ['TicketCriadoEvent', 'AprovacaoSolicitadaEvent']
        assert tipos[-1] == 'TicketReabertoEvent'
        assert 'AlertaSlaDisparadoEvent' in tipos
        assert 'PrimeiraRespostaRegistradaEvent' in tipos
        assert [e.event_type for e in publisher.published_events] == tipos

    def test_rejeicao_cancela_e_encerra_ciclo(self, pedido_de_compra, container, relogio, admin, solicitante):
        relogio.definir(local(18, 10))

        with pytest.raises(AuthorizationError):
            container.decidir_aprovacao_service().execute(
                DecidirAprovacaoInputDTO(ticket_id=pedido_de_compra.id, aprovar=True), solicitante
            )

        with pytest.raises(ValidationError):
            container.decidir_aprovacao_service().execute(
                DecidirAprovacaoInputDTO(ticket_id=pedido_de_compra.id, aprovar=False), admin
            )

        rejeitado = container.decidir_aprovacao_service().execute(
            DecidirAprovacaoInputDTO(ticket_id=pedido_de_compra.id, aprovar=False, observacao='Use o estoque'),
            admin,
        )

        assert rejeitado.status == 'CANCELADO'
        assert rejeitado.estado_sla == 'ENCERRADO'
        assert rejeitado.ciclo_sla.minutos_pausados == 120

    def test_notificacoes_desligadas(self, pedido_de_compra, container, relogio, admin):
        container.definir_configuracao_notificacao_service().execute('ticket_status', False, admin)
        relogio.definir(local(25, 8))

        assert container.varredura_sla_service().execute().ignorada is True


class TestApiComContainerReal:

    def test_abrir_chamado_pela_api(self, container, cadastro, usuarios):
        request = RequestFactory().post(
            '/tickets/api/',
            data=json.dumps({
                'titulo': 'Monitor piscando',
                'descricao': 'O monitor da recepção pisca a cada poucos segundos',
                'prioridade': 'ALTA',
            }),
            content_type='application/json',
        )
        request.user = usuarios['solicitante']

        response = TicketAPIListView().post(request)

        assert response.status_code == 201
        dados = json.loads(response.content)['data']
        assert dados['status'] == 'ABERTO'
        assert dados['estado_sla'] == 'OK'
        assert dados['ciclo_sla']['primeira_resposta_ate'] == local(18, 12).isoformat()

        listados = container.listar_tickets_service().execute(AtorDTO(id=str(usuarios['solicitante'].pk)))
        assert [t.id for t in listados] == [dados['id']]
