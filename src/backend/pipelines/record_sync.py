from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from adapters.records.document_model import build_document_model, select_template
from common.documents.company import DEFAULT_COMPANY, CompanyProfile
from common.documents.models import DocumentModel, DocumentTemplate
from common.documents.renderer import DocumentRenderer
from common.reconciliation.mapping import ChannelConfig
from common.reconciliation.models import ChannelOutcome, Record
from common.reconciliation.reconciler import reconcile
from connectors.smtp.mailer import DispatchResult

from .dispatch import DocumentDispatcher
from .enrichment import ReferenceEnricher
from .gateways import RecordStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconcileReport:
    record: Record
    outcomes: tuple[ChannelOutcome, ...] = ()
    subtotal_updates: dict[str, str] = field(default_factory=dict)

    @property
    def rows_synced(self) -> int:
        return sum(len(outcome.result.rows_to_sync) for outcome in self.outcomes)


@dataclass(frozen=True)
class SyncReport:
    record: Record
    enriched: Record
    template: DocumentTemplate
    model: DocumentModel
    document: bytes
    outcomes: tuple[ChannelOutcome, ...] = ()
    dispatch: Optional[DispatchResult] = None


class RecordSynchronizer:
    """
    One record per call: fetch -> reconcile -> update -> re-fetch -> enrich -> render -> dispatch.

    Gateway errors during fetch/update propagate to the caller. Dispatch
    outcomes are reported on the SyncReport.
    """

    def __init__(
        self,
        store: RecordStore,
        channels: Sequence[ChannelConfig],
        *,
        enricher: Optional[ReferenceEnricher] = None,
        renderer: Optional[DocumentRenderer] = None,
        dispatcher: Optional[DocumentDispatcher] = None,
        template: str = "invoice",
        company: CompanyProfile = DEFAULT_COMPANY,
    ) -> None:
        self._store = store
        self._channels = tuple(channels)
        self._enricher = enricher
        self._renderer = renderer or DocumentRenderer(company=company)
        self._dispatcher = dispatcher
        self._template = template
        self._company = company

    def reconcile_record(self, record_id: str) -> ReconcileReport:
        record = self._store.fetch_record(record_id)

        outcomes: list[ChannelOutcome] = []
        subtotal_updates: dict[str, str] = {}
        for channel in self._channels:
            if channel.table_attribute not in record.attributes:
                continue
            result = reconcile(record.attributes[channel.table_attribute], channel.mapping)
            if result.rows_to_sync:
                self._push_rows(record.id, channel, result.rows_to_sync)
            if result.subtotal is not None:
                subtotal_updates[channel.subtotal_attribute] = result.subtotal
            outcomes.append(
                ChannelOutcome(
                    channel=channel.name,
                    table_field_id=channel.table_field_id,
                    subtotal_attribute=channel.subtotal_attribute,
                    result=result,
                )
            )

        if subtotal_updates:
            logger.info("Updating subtotals on record %s: %s", record.id, subtotal_updates)
            self._store.update_record(record.id, subtotal_updates)
            # Downstream rendering must see the values just written.
            record = self._store.fetch_record(record.id)

        return ReconcileReport(record=record, outcomes=tuple(outcomes), subtotal_updates=subtotal_updates)

    def synchronize(self, record_id: str) -> SyncReport:
        reconciled = self.reconcile_record(record_id)
        record = reconciled.record

        attributes = self._enricher.enrich(record.attributes) if self._enricher else dict(record.attributes)
        enriched = Record(id=record.id, attributes=attributes)

        template = select_template(enriched.attributes, self._template)
        model = build_document_model(enriched, template, company=self._company)
        document = self._renderer.render(model)
        logger.info("Rendered %s for record %s (%d bytes)", template.value, record.id, len(document))

        dispatch_result = None
        if self._dispatcher is not None:
            dispatch_result = self._dispatcher.dispatch(enriched, document, template)

        return SyncReport(
            record=record,
            enriched=enriched,
            template=template,
            model=model,
            document=document,
            outcomes=reconciled.outcomes,
            dispatch=dispatch_result,
        )

    def _push_rows(self, record_id: str, channel: ChannelConfig, rows: Sequence[Any]) -> None:
        if not channel.table_field_id:
            logger.warning(
                "Channel %s has %d changed row(s) but no table field id; rows not pushed.",
                channel.name,
                len(rows),
            )
            return
        logger.info("Syncing %d %s row(s) on record %s", len(rows), channel.name, record_id)
        self._store.update_table_rows(record_id, channel.table_field_id, rows)
