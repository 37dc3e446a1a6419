"""
Testes dos publishers e das tasks Celery.

As tasks são chamadas diretamente (sem broker); `.delay` dos
handlers é substituído por mocks.
"""

import logging
from unittest.mock import Mock, patch

import pytest

from intranet.adapters.django_app.events import handlers
from intranet.adapters.django_app.events.publishers import (
    CeleryEventPublisher,
    InMemoryEventPublisher,
    LoggingEventPublisher,
    get_event_publisher,
)
from intranet.core.tickets.events import (
    AlertaSlaDisparadoEvent,
    TicketCriadoEvent,
    TicketReabertoEvent,
)

HANDLERS = 'intranet.adapters.django_app.events.handlers'


class TestPublishers:

    def test_get_event_publisher(self):
        assert isinstance(get_event_publisher('celery'), CeleryEventPublisher)
        assert isinstance(get_event_publisher('sync'), LoggingEventPublisher)
        assert isinstance(get_event_publisher(), LoggingEventPublisher)

    def test_logging_publisher_despacha_handlers(self, caplog):
        publisher = LoggingEventPublisher()
        recebidos = []
        publisher.register_handler('TicketReabertoEvent', recebidos.append)

        with caplog.at_level(logging.INFO):
            publisher.publish(TicketReabertoEvent(aggregate_id='ticket-1', de='RESOLVIDO', numero_ciclo=2))
            publisher.publish(TicketCriadoEvent(aggregate_id='ticket-1'))

        assert [e.numero_ciclo for e in recebidos] == [2]
        assert '[EVENT] TicketReabertoEvent' in caplog.text

    def test_erro_em_handler_nao_propaga(self, caplog):
        publisher = InMemoryEventPublisher()
        publisher.register_handler('TicketCriadoEvent', Mock(side_effect=RuntimeError("quebrou")))

        publisher.publish(TicketCriadoEvent(aggregate_id='ticket-1'))

        assert len(publisher.published_events) == 1
        assert 'Erro em handler para TicketCriadoEvent' in caplog.text

    def test_in_memory_por_tipo(self):
        publisher = InMemoryEventPublisher()
        publisher.publish_batch([
            TicketCriadoEvent(aggregate_id='ticket-1'),
            TicketReabertoEvent(aggregate_id='ticket-1'),
        ])

        assert len(publisher.get_events_by_type('TicketReabertoEvent')) == 1

        publisher.clear()
        assert publisher.published_events == []

    def test_celery_publisher_envia_dict(self):
        evento = AlertaSlaDisparadoEvent(aggregate_id='ticket-1', numero_ciclo=1, tipo_alerta='RES_BREACH')

        with patch(f'{HANDLERS}.dispatch_domain_event') as dispatch:
            CeleryEventPublisher().publish(evento)

        dispatch.delay.assert_called_once_with('AlertaSlaDisparadoEvent', evento.to_dict())

    def test_celery_publisher_falha_de_envio_logada(self, caplog):
        with patch(f'{HANDLERS}.dispatch_domain_event') as dispatch:
            dispatch.delay.side_effect = ConnectionError("broker fora")
            CeleryEventPublisher(also_log=False).publish(TicketCriadoEvent(aggregate_id='ticket-1'))

        assert 'Falha ao publicar evento no Celery' in caplog.text


class TestDispatcher:

    @pytest.mark.parametrize("event_type,handler", [
        ('TicketReabertoEvent', 'handle_ticket_reaberto'),
        ('TicketResolvidoEvent', 'handle_ticket_resolvido'),
        ('AlertaSlaDisparadoEvent', 'handle_alerta_sla'),
    ])
    def test_roteamento(self, event_type, handler):
        dados = {'aggregate_id': 'ticket-1', 'data': {}}

        with patch(f'{HANDLERS}.{handler}') as task:
            handlers.dispatch_domain_event(event_type, dados)

        task.delay.assert_called_once_with(dados)

    def test_evento_sem_handler(self):
        with patch(f'{HANDLERS}.handle_ticket_reaberto') as task:
            handlers.dispatch_domain_event('TicketComentarioAdicionadoEvent', {})

        task.delay.assert_not_called()


class TestHandlers:

    def test_resolvido_registra_metrica_de_sla(self):
        evento = {'aggregate_id': 'ticket-1', 'data': {'numero_ciclo': 1, 'resolucao_violada': True}}

        with patch(f'{HANDLERS}.record_metric') as metrica:
            handlers.handle_ticket_resolvido(evento)

        metrica.delay.assert_called_once_with(
            metric_name='tickets_resolved', value=1, tags={'sla': 'violado'}
        )

    def test_reaberto(self):
        evento = {'aggregate_id': 'ticket-1', 'data': {'de': 'RESOLVIDO', 'numero_ciclo': 2}}

        with patch(f'{HANDLERS}.record_metric') as metrica:
            handlers.handle_ticket_reaberto(evento)

        metrica.delay.assert_called_once_with(
            metric_name='tickets_reopened', value=1, tags={'de': 'RESOLVIDO'}
        )

    def test_alerta_sla(self):
        evento = AlertaSlaDisparadoEvent(
            aggregate_id='ticket-1', numero_ciclo=1, tipo_alerta='FIRST_BREACH', destinatarios=3
        ).to_dict()

        with patch(f'{HANDLERS}.record_metric') as metrica:
            handlers.handle_alerta_sla(evento)

        metrica.delay.assert_called_once_with(
            metric_name='sla_alerts', value=1, tags={'tipo': 'FIRST_BREACH'}
        )


class TestVarreduraAgendada:

    def test_executar_varredura_usa_container(self):
        resumo = {'tickets_avaliados': 3, 'alertas_disparados': 1, 'erros': 0}

        with patch('intranet.config.container.get_container') as get_container:
            servico = get_container.return_value.varredura_sla_service.return_value
            servico.execute.return_value.to_dict.return_value = resumo

            assert handlers.executar_varredura_sla() == resumo

        servico.execute.assert_called_once_with()

    def test_task_agendada_loga_falha(self, caplog):
        with patch(f'{HANDLERS}.executar_varredura_sla', side_effect=RuntimeError("banco fora")):
            assert handlers.varrer_sla() == {}

        assert 'Erro na varredura de SLA' in caplog.text


class TestAgendaBeat:

    def test_intervalo_vem_do_settings(self):
        from intranet.config.celery import app

        agenda = app.conf.beat_schedule['varredura-escalonamento-sla']

        assert agenda['schedule'] == 120.0
        assert agenda['task'] == 'intranet.adapters.django_app.events.handlers.varrer_sla'

    def test_intervalo_alterado(self, settings):
        from intranet.config.celery import agenda_beat

        settings.SLA_SCAN_INTERVAL_SECONDS = 45

        assert agenda_beat()['varredura-escalonamento-sla']['schedule'] == 45.0
