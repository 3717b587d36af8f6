"""Remote record store reached over HTTP (spreadsheet web-app endpoint)."""

from __future__ import annotations

import json
from typing import Dict, List, Optional

import requests

from .base import PersistenceGateway, RecordKind

READ_ACTIONS = {
    RecordKind.SCHEDULE: "getSchedules",
    RecordKind.ASSESSMENT: "getAssessments",
}

WRITE_ACTIONS = {
    RecordKind.SCHEDULE: "saveSchedule",
    RecordKind.ASSESSMENT: "saveAssessment",
}


class RemoteGateway(PersistenceGateway):
    """
    HTTP store with silent read fallback for schedules.

    Reads: GET {url}?action=<read action>, expecting a JSON list.
    Writes: POST {url} with form fields action=<write action> and data=<json>,
    expecting {"success": true}.

    A failed schedule read falls back to the local store; a failed assessment
    read yields an empty list. A failed write is reported as False and is never
    retried or redirected to the local store.
    """

    def __init__(
        self,
        url: str,
        fallback: Optional[PersistenceGateway] = None,
        timeout: float = 30.0,
        http: Optional[requests.Session] = None,
    ):
        self.url = url
        self.fallback = fallback
        self.timeout = timeout
        self.http = http or requests.Session()

    def list(self, kind: RecordKind) -> List[Dict]:
        try:
            resp = self.http.get(self.url, params={"action": READ_ACTIONS[kind]}, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            print(f"[WARN] Remote read of {kind.value} records failed: {e}")
            if kind == RecordKind.SCHEDULE and self.fallback is not None:
                print("[WARN] Using local schedule store")
                return self.fallback.list(kind)
            return []
        return data if isinstance(data, list) else []

    def upsert(self, kind: RecordKind, record: Dict) -> bool:
        form = {
            "action": WRITE_ACTIONS[kind],
            "data": json.dumps(record, ensure_ascii=False),
        }
        try:
            resp = self.http.post(self.url, data=form, timeout=self.timeout)
            resp.raise_for_status()
            result = resp.json()
        except (requests.RequestException, ValueError) as e:
            print(f"[ERROR] Remote save of {kind.value} failed: {e}")
            return False

        if not isinstance(result, dict) or result.get("success") is not True:
            print(f"[ERROR] Remote store rejected {kind.value}: {result!r}")
            return False
        return True
