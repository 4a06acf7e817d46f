from __future__ import annotations

from pydantic import BaseModel


class FieldMapping(BaseModel):
    """Role -> attribute key associations for one line-item channel."""

    quantity: str
    price: str
    amount: str
    description: str
    uom: str
    part_number: str


class ChannelConfig(BaseModel):
    name: str
    table_attribute: str
    subtotal_attribute: str
    mapping: FieldMapping
    # Remote id of the table field; the table-update endpoint is keyed by it.
    table_field_id: str = ""

    def with_table_field_id(self, table_field_id: str) -> "ChannelConfig":
        return self.model_copy(update={"table_field_id": table_field_id})


INTERNAL_MAPPING = FieldMapping(
    quantity="cf_order_qty_int",
    price="cf_price_per_unit_int",
    amount="cf_dollar_amount_internal",
    description="cf_item_desc_int",
    uom="cf_uom_int",
    part_number="cf_item_part_num_int",
)

EXTERNAL_MAPPING = FieldMapping(
    quantity="cf_order_qty_ext",
    price="cf_price_per_unit_ext",
    amount="cf_dollar_amount_external",
    description="cf_item_desc_ext",
    uom="cf_uom_ext",
    part_number="cf_item_part_num_ext",
)

INTERNAL_CHANNEL = ChannelConfig(
    name="internal",
    table_attribute="cf_items_btpo",
    subtotal_attribute="cf_subtotal_n",
    mapping=INTERNAL_MAPPING,
)

EXTERNAL_CHANNEL = ChannelConfig(
    name="external",
    table_attribute="cf_items_btpo_api2",
    subtotal_attribute="cf_subtotal_external",
    mapping=EXTERNAL_MAPPING,
)


def default_channels(*, internal_table_id: str, external_table_id: str) -> tuple[ChannelConfig, ...]:
    return (
        INTERNAL_CHANNEL.with_table_field_id(internal_table_id),
        EXTERNAL_CHANNEL.with_table_field_id(external_table_id),
    )
