"""Contrato de una fuente de objetos OCPI paginada.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Los exportadores aceptan cualquier fuente pull (un `PageStream` real o un
  doble de test) sin acoplarse a la implementación HTTP.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ObjectStream(Protocol):
    """Contrato mínimo de una secuencia pull de objetos.

    Reglas de diseño:
    - `pull` es asíncrono porque típicamente hará I/O (HTTP).
    - Una vez `exhausted`, `pull` devuelve `[]` sin efectos.
    """

    @property
    def exhausted(self) -> bool:
        ...

    async def pull(self, size: int | None = None) -> list[dict[str, Any]]:
        """Devuelve el siguiente lote de objetos en el orden del servidor."""

        ...
