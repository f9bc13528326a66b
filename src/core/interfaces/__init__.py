"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que consumen adaptadores concretos.
- Permite invertir dependencias: los exportadores dependen de abstracciones.
"""
