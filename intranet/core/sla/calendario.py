"""
Relógio de horário comercial.

Converte entre instantes de parede e "minutos úteis" segundo um
calendário semanal fixo, avaliado no fuso fixo UTC-3 (sem horário de
verão e sem feriados):

    Segunda a quinta: 08:00-18:00
    Sexta:            08:00-17:00
    Sábado/domingo:   fechado

As duas operações públicas são inversas para o mesmo calendário:

    minutos_uteis_entre(s, adicionar_minutos_uteis(s, n)) == n
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, Optional, Tuple


FUSO_HORARIO = timezone(timedelta(hours=-3), "UTC-03:00")

# weekday() -> (hora de abertura, hora de fechamento)
EXPEDIENTE: Dict[int, Tuple[int, int]] = {
    0: (8, 18),
    1: (8, 18),
    2: (8, 18),
    3: (8, 18),
    4: (8, 17),
}


def _para_local(instante: datetime) -> datetime:
    if instante.tzinfo is None:
        raise ValueError("Instante sem timezone não pode ser convertido para o calendário")
    return instante.astimezone(FUSO_HORARIO)


def _janela(dia: date) -> Optional[Tuple[datetime, datetime]]:
    """Janela de expediente do dia, ou None se o dia é fechado."""
    horario = EXPEDIENTE.get(dia.weekday())
    if horario is None:
        return None
    abertura, fechamento = horario
    return (
        datetime.combine(dia, time(abertura), tzinfo=FUSO_HORARIO),
        datetime.combine(dia, time(fechamento), tzinfo=FUSO_HORARIO),
    )


def _proxima_meia_noite(instante: datetime) -> datetime:
    return datetime.combine(instante.date() + timedelta(days=1), time(0), tzinfo=FUSO_HORARIO)


def minutos_uteis_entre(inicio: datetime, fim: datetime) -> int:
    """
    Minutos de expediente decorridos entre dois instantes.

    Percorre dia a dia a partir do horário local de `inicio`: dias
    fechados são pulados, instantes antes da abertura são levados à
    abertura, instantes depois do fechamento seguem para o dia
    seguinte. O total é arredondado para o minuto mais próximo.

    Returns:
        0 se fim <= inicio
    """
    if fim <= inicio:
        return 0

    atual = _para_local(inicio)
    limite = _para_local(fim)
    acumulado = timedelta(0)

    while atual < limite:
        janela = _janela(atual.date())
        if janela is None or atual >= janela[1]:
            atual = _proxima_meia_noite(atual)
            continue

        abertura, fechamento = janela
        if atual < abertura:
            atual = abertura
            continue

        fim_trecho = min(limite, fechamento)
        acumulado += fim_trecho - atual
        atual = _proxima_meia_noite(atual) if fim_trecho == fechamento else fim_trecho

    return round(acumulado.total_seconds() / 60)


def adicionar_minutos_uteis(inicio: datetime, minutos: int) -> datetime:
    """
    Instante que fica `minutos` de expediente depois de `inicio`.

    Quando os minutos acabam exatamente no fechamento de uma janela, o
    resultado é a abertura da próxima janela útil (sexta 17:00 vira
    segunda 08:00). O retorno está no fuso do calendário.
    """
    atual = _para_local(inicio)
    if minutos <= 0:
        return atual

    restante = timedelta(minutes=minutos)

    while True:
        janela = _janela(atual.date())
        if janela is None or atual >= janela[1]:
            atual = _proxima_meia_noite(atual)
            continue

        abertura, fechamento = janela
        if atual < abertura:
            atual = abertura

        if restante <= timedelta(0):
            return atual

        disponivel = fechamento - atual
        if restante < disponivel:
            return atual + restante

        restante -= disponivel
        atual = _proxima_meia_noite(atual)
