"""
Entidades do Domínio de SLA.

Entidades:
- SlaPoliticaEntity: metas de primeira resposta/resolução por prioridade
- CicloSlaEntity: uma "tentativa" de resolver um chamado
- TipoAlertaSla / EstadoSla: enums de avaliação

Regras de Negócio Encapsuladas:
- Ciclo encerrado (resolvido_em preenchido) é imutável
- Flags de violação são gravadas uma única vez e nunca limpas
- Prazo manual vale só para o ciclo em que foi definido
- Pausa exclui o período da avaliação de risco e, na retomada,
  empurra os prazos pendentes pelos minutos úteis pausados
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import List, Optional
import uuid

from intranet.core.shared.exceptions import (
    ValidationError,
    BusinessRuleViolationError,
)

from .calendario import adicionar_minutos_uteis, minutos_uteis_entre


LIMIAR_RISCO_PADRAO = timedelta(hours=4)


class Prioridade(Enum):
    """Prioridade do chamado (valores persistidos em maiúsculas)."""

    BAIXA = "BAIXA"
    MEDIA = "MEDIA"
    ALTA = "ALTA"
    URGENTE = "URGENTE"

    @classmethod
    def from_string(cls, value: str) -> "Prioridade":
        """
        Converte string (nome ou valor, sem diferenciar caixa) para enum.

        Raises:
            ValidationError: Se valor inválido
        """
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            raise ValidationError(f"Prioridade inválida: {value}", field="prioridade")


class TipoAlertaSla(Enum):
    FIRST_RISK = "FIRST_RISK"
    FIRST_BREACH = "FIRST_BREACH"
    RES_RISK = "RES_RISK"
    RES_BREACH = "RES_BREACH"


class EstadoSla(Enum):
    """Situação resumida do ciclo ativo para exibição."""

    OK = "OK"
    EM_RISCO = "EM_RISCO"
    VIOLADO = "VIOLADO"
    PAUSADO = "PAUSADO"
    ENCERRADO = "ENCERRADO"


@dataclass
class PrazosSla:
    """Par de prazos calculados para um ciclo."""

    primeira_resposta_ate: datetime
    resolucao_ate: datetime


@dataclass
class SlaPoliticaEntity:
    """
    Política de SLA para uma prioridade.

    Administrada pelos admins do portal; quando não há política ativa
    para a prioridade, vale a tabela padrão em `politicas.py`.
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    nome: str = ""
    prioridade: Prioridade = Prioridade.MEDIA
    minutos_primeira_resposta: int = 0
    minutos_resolucao: int = 0
    ativa: bool = True
    atualizado_em: Optional[datetime] = None

    @classmethod
    def criar(
        cls,
        prioridade: Prioridade,
        minutos_primeira_resposta: int,
        minutos_resolucao: int,
        nome: str = "",
        ativa: bool = True,
    ) -> "SlaPoliticaEntity":
        politica = cls(
            nome=nome.strip() or f"SLA {prioridade.value}",
            prioridade=prioridade,
            ativa=ativa,
        )
        politica.alterar_metas(minutos_primeira_resposta, minutos_resolucao)
        return politica

    def alterar_metas(self, minutos_primeira_resposta: int, minutos_resolucao: int) -> None:
        if int(minutos_primeira_resposta) <= 0:
            raise ValidationError(
                "Meta de primeira resposta deve ser positiva",
                field="minutos_primeira_resposta",
            )
        if int(minutos_resolucao) <= 0:
            raise ValidationError(
                "Meta de resolução deve ser positiva",
                field="minutos_resolucao",
            )
        self.minutos_primeira_resposta = int(minutos_primeira_resposta)
        self.minutos_resolucao = int(minutos_resolucao)
        self.atualizado_em = datetime.now(timezone.utc)


@dataclass
class CicloSlaEntity:
    """
    Entidade de Domínio: ciclo de SLA de um chamado.

    Cada chamado tem um histórico append-only de ciclos. No máximo um
    ciclo por chamado está ativo (resolvido_em is None), e ele é sempre
    o de maior numero_ciclo.

    Attributes:
        ticket_id: Chamado dono do ciclo
        numero_ciclo: 1, 2, 3... (cresce a cada reabertura)
        aberto_em: Início do ciclo
        primeira_resposta_ate / resolucao_ate: Prazos
        primeira_resposta_em / resolvido_em: Momentos reais
        primeira_resposta_violada / resolucao_violada: Flags de violação
        pausado_em: Início da pausa corrente (aprovação pendente)
        minutos_pausados: Total de minutos úteis já pausados no ciclo
        prazo_manual: Se resolucao_ate foi definido por um admin
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    ticket_id: str = ""
    numero_ciclo: int = 1
    aberto_em: datetime = None
    primeira_resposta_ate: datetime = None
    primeira_resposta_em: Optional[datetime] = None
    primeira_resposta_violada: bool = False
    resolucao_ate: datetime = None
    resolvido_em: Optional[datetime] = None
    resolucao_violada: bool = False
    pausado_em: Optional[datetime] = None
    minutos_pausados: int = 0
    prazo_manual: bool = False
    motivo_prazo_manual: Optional[str] = None
    prazo_manual_por_id: Optional[str] = None
    prazo_manual_em: Optional[datetime] = None

    @classmethod
    def abrir(
        cls,
        ticket_id: str,
        numero_ciclo: int,
        aberto_em: datetime,
        prazos: PrazosSla,
    ) -> "CicloSlaEntity":
        if numero_ciclo < 1:
            raise ValidationError("Número do ciclo começa em 1", field="numero_ciclo")
        return cls(
            ticket_id=ticket_id,
            numero_ciclo=numero_ciclo,
            aberto_em=aberto_em,
            primeira_resposta_ate=prazos.primeira_resposta_ate,
            resolucao_ate=prazos.resolucao_ate,
        )

    @property
    def esta_ativo(self) -> bool:
        return self.resolvido_em is None

    @property
    def esta_pausado(self) -> bool:
        return self.pausado_em is not None

    def _garantir_ativo(self) -> None:
        if not self.esta_ativo:
            raise BusinessRuleViolationError(
                f"Ciclo {self.numero_ciclo} já foi encerrado e não pode ser alterado",
                rule="ciclo_encerrado_imutavel",
            )

    def registrar_primeira_resposta(self, agora: datetime) -> bool:
        """
        Captura a primeira resposta do ciclo.

        Idempotente: respostas seguintes não sobrescrevem.

        Returns:
            True se esta chamada registrou a resposta
        """
        if not self.esta_ativo or self.primeira_resposta_em is not None:
            return False
        self.primeira_resposta_em = agora
        self.primeira_resposta_violada = agora > self.primeira_resposta_ate
        return True

    def resolver(self, agora: datetime) -> bool:
        """
        Encerra o ciclo como resolvido.

        Uma pausa em aberto é finalizada sem deslocar prazos.

        Returns:
            True se esta chamada encerrou o ciclo
        """
        if not self.esta_ativo:
            return False
        if self.pausado_em is not None:
            self.minutos_pausados += minutos_uteis_entre(self.pausado_em, agora)
            self.pausado_em = None
        self.resolvido_em = agora
        self.resolucao_violada = agora > self.resolucao_ate
        return True

    def pausar(self, agora: datetime) -> None:
        self._garantir_ativo()
        if self.pausado_em is None:
            self.pausado_em = agora

    def retomar(self, agora: datetime) -> int:
        """
        Encerra a pausa e empurra os prazos pendentes.

        O prazo de resolução manual não é deslocado; o de primeira
        resposta só é deslocado se ainda não houve resposta.

        Returns:
            Minutos úteis pausados nesta pausa
        """
        self._garantir_ativo()
        if self.pausado_em is None:
            return 0

        pausados = minutos_uteis_entre(self.pausado_em, agora)
        self.pausado_em = None
        self.minutos_pausados += pausados

        if pausados > 0:
            if self.primeira_resposta_em is None:
                self.primeira_resposta_ate = adicionar_minutos_uteis(
                    self.primeira_resposta_ate, pausados
                )
            if not self.prazo_manual:
                self.resolucao_ate = adicionar_minutos_uteis(self.resolucao_ate, pausados)

        return pausados

    def definir_prazo_manual(
        self,
        resolucao_ate: datetime,
        ator_id: str,
        agora: datetime,
        motivo: Optional[str] = None,
    ) -> None:
        """Sobrescreve o prazo de resolução deste ciclo."""
        self._garantir_ativo()
        if resolucao_ate.tzinfo is None:
            raise ValidationError("Prazo precisa de timezone", field="resolucao_ate")
        self.resolucao_ate = resolucao_ate
        self.prazo_manual = True
        self.motivo_prazo_manual = (motivo or "").strip() or None
        self.prazo_manual_por_id = ator_id
        self.prazo_manual_em = agora

    def avaliar_alertas(
        self,
        agora: datetime,
        limiar_risco: timedelta = LIMIAR_RISCO_PADRAO,
    ) -> List[TipoAlertaSla]:
        """
        Alertas devidos para o ciclo no instante `agora`.

        Ciclos encerrados ou pausados não geram alertas.
        """
        if not self.esta_ativo or self.esta_pausado:
            return []

        alertas = []
        if self.primeira_resposta_em is None:
            if agora > self.primeira_resposta_ate:
                alertas.append(TipoAlertaSla.FIRST_BREACH)
            elif self.primeira_resposta_ate - agora < limiar_risco:
                alertas.append(TipoAlertaSla.FIRST_RISK)

        if agora > self.resolucao_ate:
            alertas.append(TipoAlertaSla.RES_BREACH)
        elif self.resolucao_ate - agora < limiar_risco:
            alertas.append(TipoAlertaSla.RES_RISK)

        return alertas

    def estado(
        self,
        agora: datetime,
        limiar_risco: timedelta = LIMIAR_RISCO_PADRAO,
    ) -> EstadoSla:
        if not self.esta_ativo:
            return EstadoSla.ENCERRADO
        if self.esta_pausado:
            return EstadoSla.PAUSADO

        alertas = self.avaliar_alertas(agora, limiar_risco)
        if TipoAlertaSla.FIRST_BREACH in alertas or TipoAlertaSla.RES_BREACH in alertas:
            return EstadoSla.VIOLADO
        if alertas:
            return EstadoSla.EM_RISCO
        return EstadoSla.OK

    def __repr__(self) -> str:
        return (
            f"CicloSlaEntity("
            f"ticket_id={self.ticket_id[:8]}..., "
            f"numero={self.numero_ciclo}, "
            f"ativo={self.esta_ativo}"
            f")"
        )
