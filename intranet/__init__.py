"""Helpdesk da intranet: chamados, SLA em horário comercial, aprovações e escalonamento."""
