from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

from .client import AceHttpError, ace_request
from .config import AceConfig

logger = logging.getLogger(__name__)


def fetch_user(config: AceConfig, user_id: str) -> dict[str, Any]:
    return _attributes(ace_request(config, "GET", f"/users/{quote(str(user_id), safe='')}"))


def fetch_person(config: AceConfig, person_id: str) -> dict[str, Any]:
    return _attributes(ace_request(config, "GET", f"/people/{quote(str(person_id), safe='')}"))


def search_group(config: AceConfig, aql: str) -> Optional[dict[str, Any]]:
    return _first_match(ace_request(config, "POST", "/groups/search", body={"aql": aql}))


def search_object(config: AceConfig, object_type_id: str, aql: str) -> Optional[dict[str, Any]]:
    path = f"/objects/{quote(str(object_type_id), safe='')}/search"
    return _first_match(ace_request(config, "POST", path, body={"aql": aql}))


class AceDirectory:
    """
    Directory lookups used for display labels and recipient e-mails.

    Every lookup answers None instead of raising when the remote side has no
    answer (missing record, failed request, empty name).
    """

    def __init__(self, config: AceConfig) -> None:
        self._config = config

    def lookup_group_name(self, aql: str) -> Optional[str]:
        try:
            match = search_group(self._config, aql)
        except AceHttpError as exc:
            logger.debug("Group search failed (%s): %s", aql, exc)
            return None
        return _match_name(match)

    def lookup_object_name(self, object_type_id: str, aql: str) -> Optional[str]:
        try:
            match = search_object(self._config, object_type_id, aql)
        except AceHttpError as exc:
            logger.debug("Object %s search failed (%s): %s", object_type_id, aql, exc)
            return None
        return _match_name(match)

    def resolve_user_name(self, user_id: Any) -> Optional[str]:
        """User -> linked person "First Last"; users without a person fall back to username."""
        if not user_id:
            return None
        try:
            user = fetch_user(self._config, user_id)
            person_id = user.get("person_id")
            if not person_id:
                return _text(user.get("username"))
            person = fetch_person(self._config, person_id)
        except AceHttpError as exc:
            logger.debug("Failed to resolve user %s: %s", user_id, exc)
            return None
        full_name = f"{person.get('first_name') or ''} {person.get('last_name') or ''}".strip()
        return full_name or None

    def resolve_user_email(self, user_id: Any) -> Optional[str]:
        if not user_id:
            return None
        try:
            user = fetch_user(self._config, user_id)
        except AceHttpError as exc:
            logger.debug("Failed to fetch user %s: %s", user_id, exc)
            return None

        person_id = user.get("person_id")
        if person_id:
            try:
                email = _text(fetch_person(self._config, person_id).get("email"))
            except AceHttpError as exc:
                logger.debug("Failed to fetch person %s: %s", person_id, exc)
                email = None
            if email:
                return email
        return _text(user.get("email"))


def _attributes(payload: Any) -> dict[str, Any]:
    data = payload.get("data") if isinstance(payload, dict) else None
    if isinstance(data, dict) and isinstance(data.get("attributes"), dict):
        return data["attributes"]
    return {}


def _first_match(payload: Any) -> Optional[dict[str, Any]]:
    data = payload.get("data") if isinstance(payload, dict) else None
    if isinstance(data, list) and data and isinstance(data[0], dict):
        return data[0]
    return None


def _match_name(match: Optional[dict[str, Any]]) -> Optional[str]:
    if not match:
        return None
    attributes = match.get("attributes")
    if not isinstance(attributes, dict):
        return None
    return _text(attributes.get("name"))


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
