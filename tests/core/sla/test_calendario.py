"""
Testes do relógio de horário comercial.

Calendário (UTC-3, sem feriados):
    Segunda a quinta 08:00-18:00, sexta 08:00-17:00, fim de semana fechado.

Datas de referência (março/2024):
    15 = sexta, 16 = sábado, 17 = domingo, 18 = segunda
"""

from datetime import datetime, timedelta, timezone
import random

import pytest

from intranet.core.sla.calendario import (
    FUSO_HORARIO,
    adicionar_minutos_uteis,
    minutos_uteis_entre,
)


def local(dia, hora, minuto=0, segundo=0):
    return datetime(2024, 3, dia, hora, minuto, segundo, tzinfo=FUSO_HORARIO)


class TestAdicionarMinutosUteis:
    """Testes para adicionar_minutos_uteis()."""

    def test_sexta_a_tarde_alta_prioridade(self):
        """Deve levar 240 min de sexta 16:30 para segunda 11:30."""
        assert adicionar_minutos_uteis(local(15, 16, 30), 240) == local(18, 11, 30)

    def test_resolucao_alta_prioridade_a_partir_de_sexta(self):
        """1440 min a partir de sexta 16:30 terminam quarta 11:30."""
        assert adicionar_minutos_uteis(local(15, 16, 30), 1440) == local(20, 11, 30)

    def test_entrada_em_utc(self):
        """Instante em UTC é avaliado no fuso do calendário."""
        inicio = datetime(2024, 3, 15, 19, 30, tzinfo=timezone.utc)  # 16:30 local

        resultado = adicionar_minutos_uteis(inicio, 240)

        assert resultado == local(18, 11, 30)
        assert resultado.utcoffset() == timedelta(hours=-3)

    def test_termino_exato_no_fechamento_vai_para_proxima_abertura(self):
        """Minutos que acabam às 17:00 de sexta caem na segunda 08:00."""
        assert adicionar_minutos_uteis(local(15, 8), 540) == local(18, 8)

    def test_inicio_no_fim_de_semana(self):
        """Início no sábado conta a partir da abertura de segunda."""
        assert adicionar_minutos_uteis(local(16, 10), 60) == local(18, 9)

    def test_inicio_antes_da_abertura(self):
        assert adicionar_minutos_uteis(local(18, 6), 30) == local(18, 8, 30)

    def test_inicio_depois_do_fechamento(self):
        """Terça 19:00 + 60 min = quarta 09:00."""
        assert adicionar_minutos_uteis(local(19, 19), 60) == local(20, 9)

    def test_zero_minutos_retorna_o_proprio_instante(self):
        inicio = local(16, 10)
        assert adicionar_minutos_uteis(inicio, 0) == inicio

    def test_instante_sem_timezone_erro(self):
        """Deve rejeitar datetime ingênuo."""
        with pytest.raises(ValueError):
            adicionar_minutos_uteis(datetime(2024, 3, 18, 9, 0), 60)


class TestMinutosUteisEntre:
    """Testes para minutos_uteis_entre()."""

    def test_atravessa_fim_de_semana(self):
        assert minutos_uteis_entre(local(15, 16, 30), local(18, 11, 30)) == 240

    def test_semana_inteira(self):
        """Segunda 00:00 até a segunda seguinte = 4 x 600 + 540."""
        inicio = local(18, 0)
        assert minutos_uteis_entre(inicio, inicio + timedelta(days=7)) == 2940

    def test_fim_de_semana_inteiro_conta_zero(self):
        assert minutos_uteis_entre(local(15, 17), local(18, 8)) == 0

    def test_fim_antes_do_inicio_conta_zero(self):
        assert minutos_uteis_entre(local(18, 12), local(18, 10)) == 0

    def test_arredonda_para_o_minuto_mais_proximo(self):
        """40 segundos arredondam para 1 minuto; 20 segundos para 0."""
        assert minutos_uteis_entre(local(18, 8), local(18, 8, 0, 40)) == 1
        assert minutos_uteis_entre(local(18, 8), local(18, 8, 0, 20)) == 0

    def test_mesmo_dia_dentro_do_expediente(self):
        assert minutos_uteis_entre(local(19, 9, 15), local(19, 10, 45)) == 90


class TestOperacoesInversas:
    """minutos_uteis_entre(s, adicionar_minutos_uteis(s, n)) == n"""

    @pytest.mark.parametrize("inicio", [
        local(15, 16, 30),
        local(16, 10),
        local(18, 6),
        local(19, 19),
        local(20, 12, 15),
    ])
    @pytest.mark.parametrize("minutos", [1, 59, 600, 1440, 10080])
    def test_inversas(self, inicio, minutos):
        """Deve recuperar os minutos somados."""
        fim = adicionar_minutos_uteis(inicio, minutos)
        assert minutos_uteis_entre(inicio, fim) == minutos


def instantes_com_segundos(quantidade, semente=20240318):
    """Instantes espalhados por duas semanas, com segundos, dentro e fora do expediente."""
    gerador = random.Random(semente)
    base = local(15, 0)
    return [base + timedelta(seconds=gerador.randrange(14 * 24 * 3600)) for _ in range(quantidade)]


class TestPropriedades:

    @pytest.mark.parametrize("inicio", instantes_com_segundos(12) + [local(15, 16, 59, 30), local(21, 17, 59, 59)])
    @pytest.mark.parametrize("minutos", [1, 37, 540, 601, 2940])
    def test_inversas_com_segundos(self, inicio, minutos):
        fim = adicionar_minutos_uteis(inicio, minutos)
        assert minutos_uteis_entre(inicio, fim) == minutos

    @pytest.mark.parametrize("inicio", instantes_com_segundos(6, semente=7) + [local(18, 8)])
    def test_monotonica_no_fim(self, inicio):
        """Avançar o fim nunca reduz a contagem."""
        passos = [timedelta(seconds=s) for s in (0, 1, 29, 30, 31, 59, 60, 90, 3599, 3600, 36000)]
        fins = sorted({inicio + timedelta(hours=h) + p for h in range(0, 80, 7) for p in passos})

        contagens = [minutos_uteis_entre(inicio, fim) for fim in fins]

        assert contagens == sorted(contagens)
        assert contagens[0] == 0
