"""
Ejecutor de llamadas HTTP bloqueantes en threads separados.

El cliente de Onspring usa requests (sincrono). Para que el pipeline pueda
despachar registros, campos y archivos en paralelo sobre asyncio, cada llamada
se ejecuta en un ThreadPoolExecutor dedicado con limite explicito de workers.

Caracteristicas:
- ThreadPoolExecutor propio (no compite con el executor por defecto del loop)
- El numero de workers acota las llamadas HTTP en vuelo
- Threads con nombre prefijado para facil identificacion en logs/debugging

Uso:
    executor = HttpExecutor(max_workers=8)
    payload = await executor.run(client.get_field, 123)
    executor.shutdown()
"""
import asyncio
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any, Callable, TypeVar

T = TypeVar("T")

DEFAULT_MAX_WORKERS = 8
THREAD_NAME_PREFIX = "onspring-http-"


class HttpExecutor:
    """Pool de threads para las llamadas al cliente HTTP."""

    def __init__(self, max_workers: int = DEFAULT_MAX_WORKERS) -> None:
        self._max_workers = max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix=THREAD_NAME_PREFIX,
        )

    async def run(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """
        Ejecuta `func` en un thread del pool y espera el resultado.

        Propaga cualquier excepcion que la funcion original lance.
        """
        if kwargs:
            # run_in_executor no acepta kwargs
            func = partial(func, **kwargs)
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, func, *args)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)
