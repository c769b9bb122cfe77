"""
Character store backed by a PostgREST-style HTTP table (Supabase and friends).

Rows are ``{"id": <text>, "data": <json>}``.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from opdnd.errors import PersistenceFailure

logger = logging.getLogger(__name__)

TRANSIENT_STATUS = {408, 425, 429}


def _is_transient(status_code: int) -> bool:
    return status_code in TRANSIENT_STATUS or status_code >= 500


class RemoteCharacterStore:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        table: str = "characters",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.url = f"{base_url.rstrip('/')}/rest/v1/{table}"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            }
        )

    def _request(self, method: str, action: str, **kwargs) -> requests.Response:
        try:
            response = self.session.request(method, self.url, timeout=self.timeout, **kwargs)
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            raise PersistenceFailure(f"{action}: {e}", transient=True) from e
        except requests.exceptions.RequestException as e:
            raise PersistenceFailure(f"{action}: {e}", transient=False) from e

        if response.status_code >= 400:
            detail = response.text[:200]
            raise PersistenceFailure(
                f"{action}: HTTP {response.status_code} {detail}",
                transient=_is_transient(response.status_code),
            )
        return response

    def list_characters(self) -> List[Dict[str, Any]]:
        response = self._request("GET", "list characters", params={"select": "*"})
        try:
            rows = response.json()
        except ValueError as e:
            raise PersistenceFailure(f"list characters: unreadable response: {e}") from e

        records = []
        for row in rows or []:
            data = row.get("data") if isinstance(row, dict) else None
            if isinstance(data, dict):
                records.append(data)
            else:
                logger.warning(f"Skipping remote row without data: {str(row)[:80]}")
        return records

    def upsert(self, character_id: str, record: Dict[str, Any]) -> None:
        self._request(
            "POST",
            f"upsert character:{character_id}",
            json={"id": character_id, "data": record},
            headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
        )

    def insert(self, character_id: str, record: Dict[str, Any]) -> None:
        # A 409 (duplicate key) falls through _request as a permanent failure
        self._request(
            "POST",
            f"insert character:{character_id}",
            json={"id": character_id, "data": record},
            headers={"Prefer": "return=minimal"},
        )

    def delete(self, character_id: str) -> None:
        self._request("DELETE", f"delete character:{character_id}", params={"id": f"eq.{character_id}"})
