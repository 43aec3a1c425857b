"""
Despacho de unidades de trabajo (registros, campos, archivos).

La logica del procesador se escribe una sola vez; la politica de concurrencia
la decide el dispatcher que se le inyecta:

- SequentialDispatcher: una unidad a la vez, en orden estricto.
- ConcurrentDispatcher: todas las unidades a la vez (asyncio.gather), sin
  orden garantizado. `max_concurrency` acota cuantas corren juntas en cada
  nivel de despacho; None significa sin limite.
"""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Iterable, Optional, Protocol, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class Dispatcher(Protocol):
    """Ejecuta `worker` sobre cada item y devuelve los resultados en el orden de entrada."""

    async def map(self, worker: Callable[[T], Awaitable[R]], items: Iterable[T]) -> list[R]:
        ...


class SequentialDispatcher:
    """Procesa los items uno detras de otro."""

    async def map(self, worker: Callable[[T], Awaitable[R]], items: Iterable[T]) -> list[R]:
        results: list[R] = []
        for item in items:
            results.append(await worker(item))
        return results


class ConcurrentDispatcher:
    """Procesa todos los items concurrentemente."""

    def __init__(self, max_concurrency: Optional[int] = None) -> None:
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError("max_concurrency debe ser >= 1")
        self._max_concurrency = max_concurrency

    async def map(self, worker: Callable[[T], Awaitable[R]], items: Iterable[T]) -> list[R]:
        items = list(items)
        if not items:
            return []
        if self._max_concurrency is None:
            return list(await asyncio.gather(*(worker(item) for item in items)))

        # Un semaforo por llamada: los niveles anidados (registro -> campo ->
        # archivo) no comparten cupo, asi un padre nunca bloquea a sus hijos.
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _bounded(item: T) -> R:
            async with semaphore:
                return await worker(item)

        return list(await asyncio.gather(*(_bounded(item) for item in items)))


def build_dispatcher(parallel: bool, max_concurrency: Optional[int] = None) -> Dispatcher:
    if parallel:
        return ConcurrentDispatcher(max_concurrency)
    return SequentialDispatcher()
