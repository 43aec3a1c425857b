"""
CLI: transferencia de adjuntos entre apps de Onspring.

Ejecución:
  attachment-transfer --config config.json
  attachment-transfer -c config.json --parallel --page-size 100
  attachment-transfer                      (pide la configuración por consola)
  attachment-transfer --estimate 500 2 3   (solo estima requests)

Códigos de salida:
  0  corrida completa
  1  configuración inválida
  2  campos de match inválidos
  3  campo de checkpoint inválido
  4  corrida abortada (no se pudieron obtener páginas)
"""

from __future__ import annotations

import argparse
import asyncio
from typing import Optional, Sequence

from loguru import logger

from attachment_transfer.application.services.run_context import RunContext
from attachment_transfer.application.use_cases.request_estimator import estimate_request_count
from attachment_transfer.application.use_cases.transfer_use_cases import RunSummary, TransferUseCases
from attachment_transfer.application.use_cases.validation_use_cases import ValidationUseCases
from attachment_transfer.core.config import Settings, settings as default_settings
from attachment_transfer.core.log_setup import configure_logging, get_log_path, shutdown_logging
from attachment_transfer.core.run_config import load_transfer_config
from attachment_transfer.domain.entities.transfer_config import RunOptions, TransferConfig
from attachment_transfer.infrastructure.external.onspring.gateway import HttpOnspringGateway
from attachment_transfer.prompts import prompt_transfer_config
from attachment_transfer.shared.exceptions import EXIT_RUN_ABORTED, TransferException

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def _positive_int(value: str) -> int:
    parsed = int(value)
    if parsed < 1:
        raise argparse.ArgumentTypeError(f"{value} debe ser >= 1")
    return parsed


def _page_size(value: str) -> int:
    parsed = _positive_int(value)
    if parsed > 1000:
        raise argparse.ArgumentTypeError("el tamaño de página máximo es 1000")
    return parsed


def build_parser(settings: Settings = default_settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="attachment-transfer",
        description="Copia adjuntos de registros de una app Onspring a los registros que coinciden en otra.",
    )
    parser.add_argument("--config", "-c", default=None, help="Ruta al archivo JSON de configuración.")
    parser.add_argument(
        "--log-level",
        "-l",
        default=settings.LOG_LEVEL.upper(),
        type=str.upper,
        choices=LOG_LEVELS,
        help="Nivel mínimo de log en consola (el archivo siempre guarda DEBUG).",
    )
    parser.add_argument("--page-size", "-ps", type=_page_size, default=50, help="Registros por página.")
    parser.add_argument(
        "--page-number-limit",
        "-pn",
        type=_positive_int,
        default=None,
        help="Cantidad máxima de páginas a procesar.",
    )
    parser.add_argument(
        "--parallel",
        "-pp",
        action="store_true",
        help="Procesa registros, campos y archivos concurrentemente.",
    )
    parser.add_argument(
        "--max-concurrency",
        type=_positive_int,
        default=None,
        help="Con --parallel, máximo de unidades simultáneas por nivel (sin límite por defecto).",
    )
    parser.add_argument(
        "--estimate",
        nargs=3,
        type=int,
        metavar=("RECORDS", "FIELDS", "FILES"),
        default=None,
        help="Solo imprime cuántos requests haría una corrida y termina.",
    )
    return parser


async def run_transfer(context: RunContext) -> RunSummary:
    """Valida, resuelve el checkpoint y recorre todas las páginas."""
    validation = ValidationUseCases(context)
    await validation.validate_match_fields()
    checkpoint = await validation.resolve_checkpoint()
    return await TransferUseCases(context.with_checkpoint(checkpoint)).run()


def _log_summary(summary: RunSummary) -> None:
    logger.info(
        f"Resumen: páginas={summary.state.pages_processed}, "
        f"registros procesados={summary.records_processed}, "
        f"registros saltados={summary.records_skipped}, "
        f"archivos transferidos={summary.files_transferred}, "
        f"archivos fallidos={summary.files_failed}, "
        f"registros marcados={summary.records_checkpointed}"
    )


def main(argv: Optional[Sequence[str]] = None, settings: Settings = default_settings) -> int:
    parser = build_parser(settings)
    args = parser.parse_args(argv)

    if args.estimate is not None:
        records, fields, files = args.estimate
        try:
            total = estimate_request_count(records, fields, files, args.page_size)
        except ValueError as e:
            parser.error(str(e))
        print(f"Requests estimados: {total}")
        return 0

    log_path = get_log_path(settings.LOG_DIR)
    configure_logging(args.log_level, log_path)
    logger.info(f"{settings.APP_NAME} v{settings.APP_VERSION} iniciado.")

    options = RunOptions(
        page_size=args.page_size,
        page_limit=args.page_number_limit,
        parallel=args.parallel,
        max_concurrency=args.max_concurrency,
        retry_delay_seconds=settings.PAGE_FETCH_RETRY_DELAY_SECONDS,
        log_level=args.log_level,
    )

    gateway: Optional[HttpOnspringGateway] = None
    try:
        config: TransferConfig = (
            load_transfer_config(args.config) if args.config else prompt_transfer_config()
        )
        gateway = HttpOnspringGateway(settings)
        context = RunContext(config=config, gateway=gateway, options=options)
        summary = asyncio.run(run_transfer(context))
        _log_summary(summary)
        if summary.aborted:
            logger.error("La corrida terminó antes de tiempo.")
            return EXIT_RUN_ABORTED
        logger.success(f"{settings.APP_NAME} finalizado.")
        return 0
    except TransferException as e:
        logger.error(f"{e.error_code}: {e.message}")
        return e.exit_code
    finally:
        if gateway is not None:
            gateway.close()
        logger.info(f"Log completo en: {log_path}")
        shutdown_logging()


if __name__ == "__main__":
    raise SystemExit(main())
