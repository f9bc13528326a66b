"""Exportación NDJSON de los objetos de un módulo.

Por qué NDJSON:
- Interoperabilidad con `jq` y pipelines: un objeto por línea.
- Se escribe a medida que llegan las páginas, sin cargar el módulo entero
  en memoria.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, TextIO

from core.interfaces.object_stream import ObjectStream


def dumps_object(obj: dict[str, Any]) -> str:
    return json.dumps(obj, ensure_ascii=False, sort_keys=True)


async def write_ndjson(stream: ObjectStream, out: TextIO, *, batch_size: int | None = None) -> int:
    """Vacía `stream` en `out`, una línea por objeto. Devuelve el número de objetos."""

    count = 0
    while not stream.exhausted:
        for obj in await stream.pull(batch_size):
            out.write(dumps_object(obj) + "\n")
            count += 1
    return count


async def export_objects_ndjson(
    *,
    stream: ObjectStream,
    output_path: Path,
    batch_size: int | None = None,
) -> int:
    """Exporta `stream` a un fichero NDJSON UTF-8."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as fh:
        return await write_ndjson(stream, fh, batch_size=batch_size)
