"""
Core Domain Layer - O Hexágono.

Lógica de negócio pura do portal, sem dependências de frameworks:
- shared: exceções, eventos, unit of work, relógio, auditoria
- sla: relógio de horário comercial, políticas e ciclos de SLA
- tickets: ciclo de vida dos chamados
- aprovacoes: portão de aprovação por categoria
- notificacoes: registros de notificação e chaves por tipo
"""
