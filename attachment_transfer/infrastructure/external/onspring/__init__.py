"""
Integracion con la API REST de Onspring.

- client: HTTP (requests) con backoff
- parsers: JSON -> entidades de dominio
- http_executor: pool de threads para llamar al cliente desde asyncio
- gateway: implementacion de OnspringGateway con resultados explicitos
"""
