"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan adaptadores concretos.
- El motor depende del contrato de persistencia, no del fichero de dnsmasq.
"""
