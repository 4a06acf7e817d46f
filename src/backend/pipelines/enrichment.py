from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from connectors.ace.config import ObjectTypeIds

from .gateways import Directory

logger = logging.getLogger(__name__)

GROUP_NAME_QUERY = "select name from __main__ where id eq {id}"
OBJECT_NAME_QUERY = "SELECT name FROM __main__ where id eq {id}"

USER_ATTRIBUTES: tuple[str, ...] = (
    "cf_requisitioner",
    "cf_project_manager",
    "cf_received_by",
    "cf_accounting_personnel",
)


@dataclass(frozen=True)
class ObjectLookup:
    attribute: str
    # None searches groups instead of an object type.
    object_type_id: Optional[str] = None

    def query(self, value: Any) -> str:
        template = GROUP_NAME_QUERY if self.object_type_id is None else OBJECT_NAME_QUERY
        return template.format(id=value)


def default_object_lookups(object_type_ids: ObjectTypeIds) -> tuple[ObjectLookup, ...]:
    return (
        ObjectLookup("cf_client"),
        ObjectLookup("cf_department_btop", object_type_ids.department),
        ObjectLookup("cf_project_psc", object_type_ids.project),
        ObjectLookup("cf_supplier_company_nam", object_type_ids.supplier),
        ObjectLookup("cf_receiving_company", object_type_ids.receiving),
        ObjectLookup("cf_bill_to_company", object_type_ids.bill_to),
    )


class ReferenceEnricher:
    """
    Replace reference ids on a record with human-readable names.

    - object references: one-match search, name written back to the same attribute
    - user references: user -> linked person "First Last" (username when unlinked);
      lists are resolved element-wise and joined with ", ", dropping misses

    A reference that cannot be resolved keeps its stored value.
    """

    def __init__(
        self,
        directory: Directory,
        object_type_ids: Optional[ObjectTypeIds] = None,
        *,
        user_attributes: tuple[str, ...] = USER_ATTRIBUTES,
    ) -> None:
        self._directory = directory
        self._object_lookups = default_object_lookups(object_type_ids or ObjectTypeIds())
        self._user_attributes = user_attributes

    def enrich(self, attributes: dict[str, Any]) -> dict[str, Any]:
        enriched = dict(attributes)
        for lookup in self._object_lookups:
            value = enriched.get(lookup.attribute)
            if not value:
                continue
            name = self._lookup_name(lookup, value)
            if name:
                enriched[lookup.attribute] = name
            else:
                logger.debug("No name found for %s=%r", lookup.attribute, value)

        for attribute in self._user_attributes:
            value = enriched.get(attribute)
            if not value:
                continue
            if isinstance(value, list):
                names = [name for name in (self._directory.resolve_user_name(user_id) for user_id in value) if name]
                if names:
                    enriched[attribute] = ", ".join(names)
                else:
                    logger.debug("No users found for %s=%r", attribute, value)
            else:
                name = self._directory.resolve_user_name(value)
                if name:
                    enriched[attribute] = name
                else:
                    logger.debug("No user found for %s=%r", attribute, value)
        return enriched

    def _lookup_name(self, lookup: ObjectLookup, value: Any) -> Optional[str]:
        query = lookup.query(value)
        if lookup.object_type_id is None:
            return self._directory.lookup_group_name(query)
        return self._directory.lookup_object_name(lookup.object_type_id, query)
