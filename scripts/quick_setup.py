#!/usr/bin/env python
"""
Setup rápido para desenvolvimento local.

Este script:
1. Configura Django settings
2. Cria banco de dados SQLite
3. Executa migrations
4. Cria o setor de destino, as políticas de SLA padrão e categorias
5. Cria dados de exemplo (opcional)

Uso:
    python scripts/quick_setup.py
    python scripts/quick_setup.py --with-sample-data
"""

import argparse
import os
import sys
import uuid

# Adicionar raiz do projeto ao path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def setup_django(postgres: bool = False):
    """Configura Django para uso standalone."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'intranet.config.settings')

    # SQLite local, a menos que --postgres seja usado
    if not postgres:
        os.environ['DATABASE_HOST'] = ''

    import django
    django.setup()


def run_migrations():
    from django.core.management import call_command

    print("📦 Executando migrations...")
    call_command('migrate', verbosity=1)
    print("✅ Migrations concluídas!")


def create_base_data():
    """Setor de destino, políticas de SLA padrão e categorias."""
    from django.conf import settings

    from intranet.adapters.django_app.tickets.models import SetorModel, TicketCategoriaModel
    from intranet.adapters.django_app.tickets.sla_repositories import DjangoSlaPoliticaRepository
    from intranet.core.sla.entities import SlaPoliticaEntity
    from intranet.core.sla.politicas import METAS_PADRAO, NOMES_POLITICAS_PADRAO

    print("🏢 Criando setor de destino...")
    setor, _ = SetorModel.objects.get_or_create(
        nome=settings.TICKETS_TARGET_SECTOR_NAME,
        defaults={'id': str(uuid.uuid4())},
    )
    print(f"   ✓ {setor.nome}")

    print("⏱️  Criando políticas de SLA...")
    repo = DjangoSlaPoliticaRepository()
    for prioridade, (primeira_resposta, resolucao) in METAS_PADRAO.items():
        if repo.get_por_prioridade(prioridade) is not None:
            continue
        repo.save(SlaPoliticaEntity.criar(
            prioridade=prioridade,
            minutos_primeira_resposta=primeira_resposta,
            minutos_resolucao=resolucao,
            nome=NOMES_POLITICAS_PADRAO[prioridade],
        ))
        print(f"   ✓ {NOMES_POLITICAS_PADRAO[prioridade]}")

    print("🗂️  Criando categorias...")
    categorias = [
        ('Suporte geral', False, None),
        ('Acesso a sistemas', True, 'REQUESTER_COORDINATOR'),
        ('Compra de equipamento', True, 'TI_ADMIN'),
    ]
    for nome, requer_aprovacao, modo in categorias:
        TicketCategoriaModel.objects.get_or_create(
            nome=nome,
            defaults={
                'id': str(uuid.uuid4()),
                'requer_aprovacao': requer_aprovacao,
                'modo_aprovacao': modo,
            },
        )
        print(f"   ✓ {nome}")

    return setor


def create_sample_data(setor):
    """Admin de exemplo, membro do setor de destino, e alguns chamados."""
    from django.contrib.auth import get_user_model

    from intranet.adapters.django_app.tickets.models import MembroSetorModel
    from intranet.config.container import get_container
    from intranet.core.shared.dtos import AtorDTO
    from intranet.core.tickets.dtos import CriarTicketInputDTO

    User = get_user_model()
    admin, criado = User.objects.get_or_create(
        username='admin',
        defaults={'is_staff': True, 'is_superuser': True},
    )
    if criado:
        admin.set_password('admin')
        admin.save()

    MembroSetorModel.objects.get_or_create(
        setor=setor,
        usuario_id=str(admin.pk),
        defaults={'papel': 'ADMIN'},
    )

    criar = get_container().criar_ticket_service()
    ator = AtorDTO(id=str(admin.pk), e_admin=True)

    sample_tickets = [
        ('Impressora do 2º andar sem toner', 'A impressora do 2º andar mostra aviso de toner vazio desde ontem.', 'BAIXA'),
        ('VPN não conecta fora do escritório', 'Ao conectar na VPN de casa, o cliente retorna erro de autenticação.', 'ALTA'),
        ('Sistema de ponto fora do ar', 'O sistema de ponto está inacessível para todos os colaboradores.', 'URGENTE'),
    ]

    print("📝 Criando chamados de exemplo...")
    for titulo, descricao, prioridade in sample_tickets:
        output = criar.execute(
            CriarTicketInputDTO(titulo=titulo, descricao=descricao, prioridade=prioridade),
            ator,
        )
        print(f"   ✓ {output.titulo[:50]} (resolução até {output.ciclo_sla.resolucao_ate:%d/%m %H:%M})")

    print(f"✅ {len(sample_tickets)} chamados criados! (login: admin / admin)")


def check_connection():
    """Verifica conexão com o banco."""
    from django.db import connection

    print("🔍 Verificando conexão com o banco...")

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        print("✅ Conexão OK!")
        return True
    except Exception as e:
        print(f"❌ Erro de conexão: {e}")
        return False


def show_info():
    from django.conf import settings

    print("\n" + "=" * 60)
    print("📊 Informações do Setup")
    print("=" * 60)
    print(f"  Database Engine: {settings.DATABASES['default']['ENGINE']}")
    print(f"  Database Name: {settings.DATABASES['default']['NAME']}")
    print(f"  Setor de destino: {settings.TICKETS_TARGET_SECTOR_NAME}")
    print(f"  Debug Mode: {settings.DEBUG}")
    print("=" * 60)
    print("\n🚀 Próximos passos:")
    print("   1. python -m django runserver --settings=intranet.config.settings")
    print("   2. Acesse: http://localhost:8000/admin/")
    print("   3. Varredura de SLA: python scripts/run_sla_scan.py")
    print("\n")


def main():
    parser = argparse.ArgumentParser(description='Setup rápido para desenvolvimento')
    parser.add_argument(
        '--with-sample-data',
        action='store_true',
        help='Criar dados de exemplo'
    )
    parser.add_argument(
        '--check-only',
        action='store_true',
        help='Apenas verificar conexão'
    )
    parser.add_argument(
        '--postgres',
        action='store_true',
        help='Usar o PostgreSQL das variáveis DATABASE_*'
    )

    args = parser.parse_args()

    print("\n" + "=" * 60)
    print("🔧 Intranet Helpdesk - Quick Setup")
    print("=" * 60 + "\n")

    setup_django(postgres=args.postgres)

    if args.check_only:
        check_connection()
        return

    if not check_connection():
        print("\n⚠️  Certifique-se de que o banco de dados está rodando.")
        print("   Sem --postgres o setup usa SQLite (db.sqlite3).")
        return

    run_migrations()

    setor = create_base_data()

    if args.with_sample_data:
        create_sample_data(setor)

    show_info()


if __name__ == '__main__':
    main()
