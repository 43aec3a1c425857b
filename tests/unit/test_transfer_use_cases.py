"""
Tests unitarios para transfer_use_cases.py (paginación y reintentos).

Incluye escenarios de punta a punta contra el gateway en memoria.
"""
from __future__ import annotations

from typing import Optional
from uuid import UUID

import pytest

from conftest import (
    FLAG_FIELD_ID,
    PROCESS_VALUE_ID,
    PROCESSED_VALUE_ID,
    SOURCE_APP_ID,
    SOURCE_ATTACHMENT_FIELD_ID,
    SOURCE_MATCH_FIELD_ID,
    TARGET_ATTACHMENT_FIELD_ID,
    TARGET_MATCH_FIELD_ID,
    make_checkpoint,
    make_config,
    make_context,
    target_record,
)

from attachment_transfer.application.use_cases.transfer_use_cases import (
    MAX_CONSECUTIVE_FAILURES,
    ControllerState,
    PageState,
    TransferUseCases,
)
from attachment_transfer.domain.entities.field_values import (
    AttachmentEntry,
    AttachmentListValue,
    FileListValue,
    GuidValue,
    StringValue,
)
from attachment_transfer.domain.entities.records import FileContent, FileInfo, SourceRecord
from attachment_transfer.domain.entities.transfer_config import RunOptions


def _source(record_id: int, match: str, file_ids=(), flag: Optional[UUID] = None) -> SourceRecord:
    fields = {
        SOURCE_MATCH_FIELD_ID: StringValue(match),
        SOURCE_ATTACHMENT_FIELD_ID: FileListValue(tuple(file_ids)),
    }
    if flag is not None:
        fields[FLAG_FIELD_ID] = GuidValue(flag)
    return SourceRecord(app_id=SOURCE_APP_ID, record_id=record_id, fields=fields)


def _sources(count: int) -> list[SourceRecord]:
    return [_source(i, f"M{i}") for i in range(1, count + 1)]


class TestPageState:
    """Tests para PageState."""

    def test_defaults(self) -> None:
        state = PageState()

        assert state.page_number == 1
        assert state.total_pages == 1
        assert state.consecutive_failures == 0
        assert state.status is ControllerState.IDLE

    def test_exhausted(self) -> None:
        assert PageState(page_number=3, total_pages=2).exhausted is True
        assert PageState(page_number=2, total_pages=2).exhausted is False

    def test_limit_reached(self) -> None:
        assert PageState(page_limit=2, pages_processed=2).limit_reached is True
        assert PageState(page_limit=None, pages_processed=99).limit_reached is False


class TestRetries:
    """Tests del límite de fallos consecutivos."""

    @pytest.mark.asyncio
    async def test_aborts_after_three_consecutive_failures(self, gateway) -> None:
        """Verifica exactamente 3 intentos, siempre sobre la página 1."""
        gateway.page_failures = 10
        gateway.source_records = _sources(3)

        summary = await TransferUseCases(make_context(gateway)).run()

        assert summary.aborted
        assert summary.state.status is ControllerState.ABORTED
        assert summary.fetch_attempts == MAX_CONSECUTIVE_FAILURES == 3
        assert [r["page_number"] for r in gateway.page_requests] == [1, 1, 1]
        assert summary.records_processed == 0

    @pytest.mark.asyncio
    async def test_success_resets_failure_counter(self, gateway) -> None:
        gateway.page_failures = 2
        gateway.source_records = _sources(2)

        summary = await TransferUseCases(make_context(gateway)).run()

        assert not summary.aborted
        assert summary.state.status is ControllerState.DONE
        assert summary.state.consecutive_failures == 0
        assert summary.fetch_attempts == 3
        assert summary.records_skipped == 2

    @pytest.mark.asyncio
    async def test_failures_on_later_page_retry_same_page(self, gateway) -> None:
        gateway.source_records = _sources(4)
        context = make_context(gateway, options=RunOptions(page_size=2))
        use_cases = TransferUseCases(context)

        original = gateway.get_page_of_records
        calls = {"n": 0}

        async def flaky(*args, **kwargs):
            calls["n"] += 1
            if calls["n"] == 2:
                gateway.page_failures = 1
            return await original(*args, **kwargs)

        gateway.get_page_of_records = flaky

        summary = await use_cases.run()

        assert [r["page_number"] for r in gateway.page_requests] == [1, 2, 2]
        assert summary.state.status is ControllerState.DONE


class TestPagination:
    """Tests del recorrido de páginas."""

    @pytest.mark.asyncio
    async def test_walks_all_pages(self, gateway) -> None:
        gateway.source_records = _sources(5)

        summary = await TransferUseCases(make_context(gateway, options=RunOptions(page_size=2))).run()

        assert [r["page_number"] for r in gateway.page_requests] == [1, 2, 3]
        assert summary.state.pages_processed == 3
        assert summary.state.total_pages == 3
        assert summary.records_skipped == 5

    @pytest.mark.asyncio
    async def test_page_limit(self, gateway) -> None:
        gateway.source_records = _sources(10)
        options = RunOptions(page_size=2, page_limit=2)

        summary = await TransferUseCases(make_context(gateway, options=options)).run()

        assert [r["page_number"] for r in gateway.page_requests] == [1, 2]
        assert summary.state.status is ControllerState.DONE
        assert summary.records_skipped == 4

    @pytest.mark.asyncio
    async def test_empty_app(self, gateway) -> None:
        summary = await TransferUseCases(make_context(gateway)).run()

        assert summary.state.status is ControllerState.DONE
        assert summary.fetch_attempts == 1

    @pytest.mark.asyncio
    async def test_checkpoint_filters_page_requests(self, gateway) -> None:
        config = make_config(with_flag=True)
        await TransferUseCases(make_context(gateway, config=config, checkpoint=make_checkpoint())).run()

        assert gateway.page_requests[0]["filter"] == f"{FLAG_FIELD_ID} contains '{PROCESS_VALUE_ID}'"

    @pytest.mark.asyncio
    async def test_parallel_records(self, gateway) -> None:
        gateway.source_records = _sources(6)
        options = RunOptions(page_size=3, parallel=True)

        summary = await TransferUseCases(make_context(gateway, options=options)).run()

        assert summary.records_skipped == 6
        assert sorted(summary.skipped_record_ids) == [1, 2, 3, 4, 5, 6]


class TestEndToEnd:
    """Escenarios completos contra el gateway en memoria."""

    @pytest.mark.asyncio
    async def test_single_match_copies_internal_files(self, gateway) -> None:
        record = SourceRecord(
            app_id=SOURCE_APP_ID,
            record_id=1,
            fields={
                SOURCE_MATCH_FIELD_ID: StringValue("ABC123"),
                SOURCE_ATTACHMENT_FIELD_ID: AttachmentListValue(
                    (
                        AttachmentEntry(file_id=11, file_name="A"),
                        AttachmentEntry(file_id=12, file_name="B", storage_location="GoogleDrive"),
                        AttachmentEntry(file_id=13, file_name="C"),
                    )
                ),
            },
        )
        gateway.source_records = [record]
        gateway.target_records = [target_record(500, "ABC123")]
        for file_id, name in ((11, "A"), (13, "C")):
            gateway.files[(1, SOURCE_ATTACHMENT_FIELD_ID, file_id)] = (
                FileInfo(name=name, notes=f"nota {name}"),
                FileContent(content_type="text/plain", content=name.encode()),
            )

        summary = await TransferUseCases(make_context(gateway)).run()

        assert summary.records_processed == 1
        assert summary.files_transferred == 2
        assert [(f["record_id"], f["field_id"], f["file_name"]) for f in gateway.saved_files] == [
            (500, TARGET_ATTACHMENT_FIELD_ID, "A"),
            (500, TARGET_ATTACHMENT_FIELD_ID, "C"),
        ]

    @pytest.mark.asyncio
    async def test_duplicate_target_is_skipped(self, gateway) -> None:
        gateway.source_records = [_source(1, "DUP", file_ids=(11,))]
        gateway.target_records = [target_record(600, "DUP"), target_record(601, "DUP")]
        gateway.files[(1, SOURCE_ATTACHMENT_FIELD_ID, 11)] = (
            FileInfo(name="x"),
            FileContent(content_type="text/plain", content=b"x"),
        )

        summary = await TransferUseCases(make_context(gateway)).run()

        assert summary.records_skipped == 1
        assert summary.skipped_record_ids == [1]
        assert gateway.saved_files == []

    @pytest.mark.asyncio
    async def test_checkpoint_excludes_processed_records(self, gateway) -> None:
        """Verifica que los registros ya marcados no vuelven a procesarse."""
        gateway.source_records = [
            _source(1, "ABC123", flag=PROCESS_VALUE_ID),
            _source(2, "XYZ", flag=PROCESSED_VALUE_ID),
        ]
        gateway.target_records = [target_record(500, "ABC123"), target_record(501, "XYZ")]
        context = make_context(gateway, config=make_config(with_flag=True), checkpoint=make_checkpoint())

        first = await TransferUseCases(context).run()
        second = await TransferUseCases(context).run()

        assert first.records_processed == 1
        assert first.records_checkpointed == 1
        assert [r["record_id"] for r in gateway.saved_records] == [1]
        assert second.records_processed == 0
        assert gateway.match_queries == [f"{TARGET_MATCH_FIELD_ID} eq 'ABC123'"]
