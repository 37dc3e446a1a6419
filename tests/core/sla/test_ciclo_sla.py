"""
Testes Unitários para CicloSlaEntity e SlaPoliticaEntity.

Coverage:
- Abertura, primeira resposta e resolução do ciclo
- Pausa/retomada com deslocamento dos prazos
- Prazo manual e imutabilidade de ciclo encerrado
- Avaliação de alertas e estado resumido
"""

from datetime import datetime, timedelta

import pytest

from intranet.core.shared.exceptions import BusinessRuleViolationError, ValidationError
from intranet.core.sla.calendario import FUSO_HORARIO
from intranet.core.sla.entities import (
    CicloSlaEntity,
    EstadoSla,
    PrazosSla,
    Prioridade,
    SlaPoliticaEntity,
    TipoAlertaSla,
)


def local(dia, hora, minuto=0):
    return datetime(2024, 3, dia, hora, minuto, tzinfo=FUSO_HORARIO)


@pytest.fixture
def ciclo():
    """Ciclo aberto segunda 08:00; primeira resposta até 12:00, resolução até 17:00."""
    return CicloSlaEntity.abrir(
        ticket_id="ticket-1",
        numero_ciclo=1,
        aberto_em=local(18, 8),
        prazos=PrazosSla(primeira_resposta_ate=local(18, 12), resolucao_ate=local(18, 17)),
    )


class TestCicloSlaAbertura:

    def test_abrir_ciclo(self, ciclo):
        assert ciclo.esta_ativo
        assert not ciclo.esta_pausado
        assert ciclo.primeira_resposta_em is None
        assert ciclo.minutos_pausados == 0
        assert ciclo.prazo_manual is False

    def test_numero_ciclo_zero_erro(self):
        """Deve rejeitar ciclo 0."""
        with pytest.raises(ValidationError) as exc_info:
            CicloSlaEntity.abrir("ticket-1", 0, local(18, 8), PrazosSla(local(18, 9), local(18, 10)))

        assert exc_info.value.field == "numero_ciclo"


class TestPrimeiraRespostaEResolucao:

    def test_primeira_resposta_no_prazo(self, ciclo):
        assert ciclo.registrar_primeira_resposta(local(18, 10)) is True
        assert ciclo.primeira_resposta_em == local(18, 10)
        assert ciclo.primeira_resposta_violada is False

    def test_primeira_resposta_atrasada(self, ciclo):
        ciclo.registrar_primeira_resposta(local(18, 13))
        assert ciclo.primeira_resposta_violada is True

    def test_primeira_resposta_nao_sobrescreve(self, ciclo):
        """Respostas seguintes não alteram o momento registrado."""
        ciclo.registrar_primeira_resposta(local(18, 10))

        assert ciclo.registrar_primeira_resposta(local(18, 11)) is False
        assert ciclo.primeira_resposta_em == local(18, 10)

    def test_resolver_no_prazo(self, ciclo):
        assert ciclo.resolver(local(18, 16)) is True
        assert not ciclo.esta_ativo
        assert ciclo.resolucao_violada is False

    def test_resolver_atrasado(self, ciclo):
        ciclo.resolver(local(18, 17, 1))
        assert ciclo.resolucao_violada is True

    def test_resolver_duas_vezes(self, ciclo):
        """Ciclo encerrado não muda mais, e a violação nunca é limpa."""
        ciclo.resolver(local(19, 9))

        assert ciclo.resolver(local(18, 10)) is False
        assert ciclo.resolvido_em == local(19, 9)
        assert ciclo.resolucao_violada is True

    def test_resposta_depois_de_encerrado_ignorada(self, ciclo):
        ciclo.resolver(local(18, 11))
        assert ciclo.registrar_primeira_resposta(local(18, 11, 30)) is False

    def test_resolver_durante_pausa_finaliza_pausa(self, ciclo):
        ciclo.pausar(local(18, 9))
        ciclo.resolver(local(18, 10))

        assert ciclo.pausado_em is None
        assert ciclo.minutos_pausados == 60
        assert ciclo.resolucao_ate == local(18, 17)


class TestPausaERetomada:

    def test_retomar_desloca_prazos(self, ciclo):
        """Duas horas úteis pausadas empurram os dois prazos."""
        ciclo.pausar(local(18, 9))
        pausados = ciclo.retomar(local(18, 11))

        assert pausados == 120
        assert ciclo.minutos_pausados == 120
        assert ciclo.primeira_resposta_ate == local(18, 14)
        assert ciclo.resolucao_ate == local(19, 9)
        assert not ciclo.esta_pausado

    def test_pausa_no_fim_de_semana_nao_desloca(self):
        ciclo = CicloSlaEntity.abrir(
            "ticket-1", 1, local(15, 16), PrazosSla(local(18, 9), local(18, 12))
        )
        ciclo.pausar(local(15, 17, 30))

        assert ciclo.retomar(local(18, 8)) == 0
        assert ciclo.resolucao_ate == local(18, 12)

    def test_retomar_nao_desloca_prazo_manual(self, ciclo):
        ciclo.definir_prazo_manual(local(22, 12), "admin-1", local(18, 8, 30))
        ciclo.pausar(local(18, 9))
        ciclo.retomar(local(18, 11))

        assert ciclo.resolucao_ate == local(22, 12)
        assert ciclo.primeira_resposta_ate == local(18, 14)

    def test_retomar_nao_desloca_primeira_resposta_ja_dada(self, ciclo):
        ciclo.registrar_primeira_resposta(local(18, 8, 30))
        ciclo.pausar(local(18, 9))
        ciclo.retomar(local(18, 11))

        assert ciclo.primeira_resposta_ate == local(18, 12)
        assert ciclo.resolucao_ate == local(19, 9)

    def test_retomar_sem_pausa(self, ciclo):
        assert ciclo.retomar(local(18, 11)) == 0
        assert ciclo.resolucao_ate == local(18, 17)

    def test_pausar_ciclo_encerrado_erro(self, ciclo):
        ciclo.resolver(local(18, 10))

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            ciclo.pausar(local(18, 11))

        assert exc_info.value.rule == "ciclo_encerrado_imutavel"


class TestPrazoManual:

    def test_definir_prazo_manual(self, ciclo):
        ciclo.definir_prazo_manual(local(22, 12), "admin-1", local(18, 9), motivo="  Aguarda fornecedor ")

        assert ciclo.resolucao_ate == local(22, 12)
        assert ciclo.prazo_manual is True
        assert ciclo.motivo_prazo_manual == "Aguarda fornecedor"
        assert ciclo.prazo_manual_por_id == "admin-1"
        assert ciclo.prazo_manual_em == local(18, 9)

    def test_prazo_sem_timezone_erro(self, ciclo):
        with pytest.raises(ValidationError) as exc_info:
            ciclo.definir_prazo_manual(datetime(2024, 3, 22, 12), "admin-1", local(18, 9))

        assert exc_info.value.field == "resolucao_ate"

    def test_prazo_em_ciclo_encerrado_erro(self, ciclo):
        """Ciclo encerrado é imutável."""
        ciclo.resolver(local(18, 10))

        with pytest.raises(BusinessRuleViolationError):
            ciclo.definir_prazo_manual(local(22, 12), "admin-1", local(18, 11))


class TestAvaliacaoDeAlertas:
    """Limiar de risco padrão: 4 horas."""

    def test_primeira_resposta_em_risco(self, ciclo):
        assert ciclo.avaliar_alertas(local(18, 9)) == [TipoAlertaSla.FIRST_RISK]
        assert ciclo.estado(local(18, 9)) == EstadoSla.EM_RISCO

    def test_primeira_resposta_violada(self, ciclo):
        assert ciclo.avaliar_alertas(local(18, 12, 30)) == [TipoAlertaSla.FIRST_BREACH]
        assert ciclo.estado(local(18, 12, 30)) == EstadoSla.VIOLADO

    def test_primeira_violada_e_resolucao_em_risco(self, ciclo):
        assert ciclo.avaliar_alertas(local(18, 13, 30)) == [
            TipoAlertaSla.FIRST_BREACH,
            TipoAlertaSla.RES_RISK,
        ]

    def test_resolucao_violada(self, ciclo):
        ciclo.registrar_primeira_resposta(local(18, 10))
        assert ciclo.avaliar_alertas(local(18, 17, 5)) == [TipoAlertaSla.RES_BREACH]

    def test_limiar_personalizado(self, ciclo):
        assert ciclo.avaliar_alertas(local(18, 9), limiar_risco=timedelta(hours=1)) == []
        assert ciclo.estado(local(18, 9), limiar_risco=timedelta(hours=1)) == EstadoSla.OK

    def test_ciclo_pausado_nao_gera_alertas(self, ciclo):
        ciclo.pausar(local(18, 9))

        assert ciclo.avaliar_alertas(local(20, 9)) == []
        assert ciclo.estado(local(20, 9)) == EstadoSla.PAUSADO

    def test_ciclo_encerrado_nao_gera_alertas(self, ciclo):
        ciclo.resolver(local(18, 10))

        assert ciclo.avaliar_alertas(local(20, 9)) == []
        assert ciclo.estado(local(20, 9)) == EstadoSla.ENCERRADO


class TestSlaPolitica:

    def test_criar_politica(self):
        politica = SlaPoliticaEntity.criar(Prioridade.ALTA, 120, 960)

        assert politica.nome == "SLA ALTA"
        assert politica.minutos_primeira_resposta == 120
        assert politica.minutos_resolucao == 960
        assert politica.ativa is True
        assert politica.atualizado_em is not None

    @pytest.mark.parametrize("resposta,resolucao,campo", [
        (0, 480, "minutos_primeira_resposta"),
        (60, -1, "minutos_resolucao"),
    ])
    def test_metas_nao_positivas_erro(self, resposta, resolucao, campo):
        with pytest.raises(ValidationError) as exc_info:
            SlaPoliticaEntity.criar(Prioridade.URGENTE, resposta, resolucao)

        assert exc_info.value.field == campo

    def test_prioridade_from_string(self):
        assert Prioridade.from_string("alta") == Prioridade.ALTA
        assert Prioridade.from_string(" URGENTE ") == Prioridade.URGENTE
        assert Prioridade.from_string(Prioridade.BAIXA) == Prioridade.BAIXA

    def test_prioridade_invalida(self):
        with pytest.raises(ValidationError) as exc_info:
            Prioridade.from_string("CRITICA")

        assert exc_info.value.field == "prioridade"
