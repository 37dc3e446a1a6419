#!/usr/bin/env python
"""
Executa uma varredura de escalonamento de SLA.

Alternativa ao Celery Beat para ambientes com cron:

    */5 * * * * cd /srv/intranet && python scripts/run_sla_scan.py

Sai com código 1 quando algum chamado falhou na avaliação.
"""

import json
import logging
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def main() -> int:
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'intranet.config.settings')

    import django
    django.setup()

    from intranet.adapters.django_app.events.handlers import executar_varredura_sla

    resultado = executar_varredura_sla()
    logging.getLogger('intranet.scripts').info(f"Varredura de SLA: {resultado}")
    print(json.dumps(resultado, ensure_ascii=False))
    return 1 if resultado.get('erros') else 0


if __name__ == '__main__':
    sys.exit(main())
