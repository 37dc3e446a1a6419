"""
Testes Unitários para Entidades do Domínio de Tickets.

Testa todas as regras de negócio encapsuladas nas entidades,
incluindo validações e transições de estado.

Coverage:
- TicketEntity.criar(): Validações de criação
- TicketEntity.transicionar(): Tabela de transições
- TicketEntity.definir_responsaveis(): Diferença de responsáveis
- Visibilidade do chamado
- ComentarioEntity / AnexoEntity / CategoriaEntity
"""

import pytest
from datetime import datetime, timedelta

from intranet.core.aprovacoes.entities import ModoAprovacao
from intranet.core.shared.exceptions import (
    ValidationError,
    BusinessRuleViolationError,
)
from intranet.core.sla.calendario import FUSO_HORARIO
from intranet.core.sla.entities import Prioridade
from intranet.core.tickets.entities import (
    AnexoEntity,
    CategoriaEntity,
    ComentarioEntity,
    STATUS_ATIVOS,
    TRANSICOES,
    TicketEntity,
    TicketStatus,
)


AGORA = datetime(2024, 3, 18, 9, 0, tzinfo=FUSO_HORARIO)


def criar_ticket(**kwargs):
    dados = dict(
        titulo="Impressora do RH não imprime",
        descricao="A impressora do segundo andar mostra erro de papel",
        criador_id="user-1",
        setor_destino_id="s-tech",
        agora=AGORA,
    )
    dados.update(kwargs)
    return TicketEntity.criar(**dados)


class TestTicketEntityCriacao:
    """Testes para criação de chamados."""

    def test_criar_ticket_valido(self):
        """Deve criar chamado com dados válidos."""
        ticket = criar_ticket(
            prioridade=Prioridade.ALTA,
            setor_solicitante_id="s-rh",
            categoria_id="cat-geral",
        )

        assert len(ticket.id) == 36  # UUID
        assert ticket.titulo == "Impressora do RH não imprime"
        assert ticket.status == TicketStatus.ABERTO
        assert ticket.prioridade == Prioridade.ALTA
        assert ticket.setor_solicitante_id == "s-rh"
        assert ticket.setor_destino_id == "s-tech"
        assert ticket.responsaveis_ids == []
        assert ticket.criado_em == AGORA
        assert ticket.fechado_em is None

    def test_prioridade_padrao_media(self):
        assert criar_ticket().prioridade == Prioridade.MEDIA

    def test_tags_normalizadas(self):
        """Tags em minúsculas, sem vazias nem repetidas."""
        ticket = criar_ticket(tags=[" Rede ", "rede", "", "VPN"])

        assert ticket.tags == ["rede", "vpn"]

    def test_espacos_removidos(self):
        ticket = criar_ticket(titulo="  VPN caiu  ", descricao="   Sem conexão desde cedo   ")

        assert ticket.titulo == "VPN caiu"
        assert ticket.descricao == "Sem conexão desde cedo"

    @pytest.mark.parametrize("titulo", ["", "   ", "ab", "x" * 201])
    def test_titulo_invalido_erro(self, titulo):
        """Deve rejeitar título vazio, curto ou longo demais."""
        with pytest.raises(ValidationError) as exc_info:
            criar_ticket(titulo=titulo)

        assert exc_info.value.field == "titulo"

    @pytest.mark.parametrize("descricao", ["", "curta", "x" * 5001])
    def test_descricao_invalida_erro(self, descricao):
        with pytest.raises(ValidationError) as exc_info:
            criar_ticket(descricao=descricao)

        assert exc_info.value.field == "descricao"

    def test_sem_criador_erro(self):
        with pytest.raises(ValidationError) as exc_info:
            criar_ticket(criador_id="")

        assert exc_info.value.field == "criador_id"


TODAS_AS_TRANSICOES = [(origem, destino) for origem in TicketStatus for destino in TicketStatus]


class TestTicketTransicoes:

    @pytest.mark.parametrize("origem,destino", TODAS_AS_TRANSICOES)
    def test_tabela_de_transicoes(self, origem, destino):
        """Só pares presentes em TRANSICOES são aceitos."""
        ticket = criar_ticket()
        ticket.status = origem

        if destino in TRANSICOES[origem]:
            assert ticket.transicionar(destino, AGORA) == origem
            assert ticket.status == destino
        else:
            with pytest.raises(BusinessRuleViolationError) as exc_info:
                ticket.transicionar(destino, AGORA)
            assert exc_info.value.rule == "transicao_status_invalida"
            assert ticket.status == origem

    def test_aprovacao_so_sai_para_andamento_ou_cancelado(self):
        assert TRANSICOES[TicketStatus.AGUARDANDO_APROVACAO] == {
            TicketStatus.EM_ANDAMENTO,
            TicketStatus.CANCELADO,
        }

    def test_resolver_preenche_fechado_em(self):
        ticket = criar_ticket()
        depois = AGORA + timedelta(hours=2)

        ticket.transicionar(TicketStatus.RESOLVIDO, depois)

        assert ticket.fechado_em == depois
        assert ticket.atualizado_em == depois

    def test_reabrir_limpa_fechado_em(self):
        ticket = criar_ticket()
        ticket.transicionar(TicketStatus.RESOLVIDO, AGORA)

        assert ticket.e_reabertura(TicketStatus.ABERTO)
        ticket.transicionar(TicketStatus.ABERTO, AGORA + timedelta(days=1))

        assert ticket.fechado_em is None
        assert ticket.status == TicketStatus.ABERTO

    def test_aguardando_usuario_para_aberto_nao_e_reabertura(self):
        ticket = criar_ticket()
        ticket.transicionar(TicketStatus.AGUARDANDO_USUARIO, AGORA)

        assert not ticket.e_reabertura(TicketStatus.ABERTO)

    def test_status_ativos(self):
        assert TicketStatus.AGUARDANDO_APROVACAO.e_ativo
        assert not TicketStatus.RESOLVIDO.e_ativo
        assert TicketStatus.CANCELADO.e_terminal
        assert len(STATUS_ATIVOS) == 4

    def test_status_from_string(self):
        assert TicketStatus.from_string("em andamento") == TicketStatus.EM_ANDAMENTO
        assert TicketStatus.from_string("resolvido") == TicketStatus.RESOLVIDO

    def test_status_invalido(self):
        with pytest.raises(ValidationError) as exc_info:
            TicketStatus.from_string("FECHADO")

        assert exc_info.value.field == "status"


class TestTicketAlteracoes:

    def test_alterar_prioridade(self):
        ticket = criar_ticket()

        assert ticket.alterar_prioridade(Prioridade.URGENTE, AGORA) == Prioridade.MEDIA
        assert ticket.prioridade == Prioridade.URGENTE

    def test_alterar_prioridade_igual_nao_muda(self):
        ticket = criar_ticket()
        assert ticket.alterar_prioridade(Prioridade.MEDIA, AGORA) is None

    def test_definir_responsaveis_retorna_diferenca(self):
        ticket = criar_ticket()
        ticket.definir_responsaveis(["tec-1", "tec-2"], AGORA)

        adicionados, removidos = ticket.definir_responsaveis(["tec-3", "tec-1", "tec-3", ""], AGORA)

        assert adicionados == ["tec-3"]
        assert removidos == ["tec-2"]
        assert ticket.responsaveis_ids == ["tec-3", "tec-1"]

    def test_definir_mesmos_responsaveis(self):
        ticket = criar_ticket()
        ticket.definir_responsaveis(["tec-1"], AGORA)

        assert ticket.definir_responsaveis(["tec-1"], AGORA) == ([], [])

    @pytest.mark.parametrize("usuario_id,e_admin,esperado", [
        ("user-1", False, True),   # criador
        ("tec-1", False, True),    # responsável
        ("user-2", False, False),
        ("user-2", True, True),    # admin
    ])
    def test_pode_ser_acessado_por(self, usuario_id, e_admin, esperado):
        ticket = criar_ticket()
        ticket.definir_responsaveis(["tec-1"], AGORA)

        assert ticket.pode_ser_acessado_por(usuario_id, e_admin) is esperado


class TestComentarioEAnexo:

    def test_comentario_valido(self):
        comentario = ComentarioEntity.criar("t-1", "admin-1", "  Verificando  ", AGORA, interno=True)

        assert comentario.corpo == "Verificando"
        assert comentario.interno is True

    @pytest.mark.parametrize("corpo", ["", "   ", None, "x" * 10001])
    def test_comentario_invalido(self, corpo):
        with pytest.raises(ValidationError) as exc_info:
            ComentarioEntity.criar("t-1", "admin-1", corpo, AGORA)

        assert exc_info.value.field == "corpo"

    def test_anexo_valido(self):
        anexo = AnexoEntity.criar("t-1", "user-1", " log.txt ", "/uploads/log.txt", 2048, AGORA, "text/plain")

        assert anexo.nome_arquivo == "log.txt"
        assert anexo.tamanho_bytes == 2048

    @pytest.mark.parametrize("nome,caminho,tamanho,campo", [
        ("", "/uploads/a", 1, "nome_arquivo"),
        ("a.txt", " ", 1, "caminho"),
        ("a.txt", "/uploads/a", -1, "tamanho_bytes"),
    ])
    def test_anexo_invalido(self, nome, caminho, tamanho, campo):
        with pytest.raises(ValidationError) as exc_info:
            AnexoEntity.criar("t-1", "user-1", nome, caminho, tamanho, AGORA)

        assert exc_info.value.field == campo


class TestCategoria:

    def test_aprovacao_sem_modo_usa_ti_admin(self):
        categoria = CategoriaEntity(nome="Compras", requer_aprovacao=True)
        assert categoria.modo_aprovacao == ModoAprovacao.TI_ADMIN

    def test_sem_aprovacao_sem_modo(self):
        assert CategoriaEntity(nome="Geral").modo_aprovacao is None
