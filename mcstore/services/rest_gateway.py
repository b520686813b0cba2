# mcstore/services/rest_gateway.py
import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Tuple
from urllib.parse import quote

import requests
from requests import RequestException

from mcstore.domain.errors import RemoteError
from mcstore.utils import settings
from mcstore.utils.logging import get_logger

logger = get_logger(__name__)

RETURN_MINIMAL = "return=minimal"
RETURN_REPRESENTATION = "return=representation"
MERGE_DUPLICATES = "resolution=merge-duplicates"
IGNORE_DUPLICATES = "resolution=ignore-duplicates"


@dataclass(frozen=True)
class BackendConfig:
    base_url: str
    api_key: str
    timeout: float | None = None

    @classmethod
    def from_settings(cls) -> "BackendConfig":
        return cls(
            base_url=settings.SUPABASE_URL,
            api_key=settings.SUPABASE_SERVICE_KEY,
            timeout=settings.BACKEND_TIMEOUT_SECONDS,
        )


def prefer(*options: str) -> Dict[str, str]:
    return {"Prefer": ",".join(options)}


def eq(field: str, value: Any) -> Tuple[str, str]:
    if isinstance(value, bool):
        value = "true" if value else "false"
    return field, f"eq.{quote(str(value), safe='')}"


def ilike(field: str, pattern: str) -> Tuple[str, str]:
    return field, "ilike." + quote(f"%{pattern}%", safe="")


def build_query(
    table: str,
    select: str | None = "*",
    filters: Iterable[Tuple[str, str]] = (),
    order: str | None = None,
    limit: int | None = None,
    on_conflict: str | None = None,
) -> str:
    """
    Sklada sciezke w skladni PostgREST, np.
    products?select=*&is_active=eq.true&order=created_at.desc&limit=10
    """
    parts = []
    if select:
        parts.append(f"select={select}")
    for field, expr in filters:
        parts.append(f"{field}={expr}")
    if order:
        parts.append(f"order={order}")
    if limit:
        parts.append(f"limit={int(limit)}")
    if on_conflict:
        parts.append(f"on_conflict={on_conflict}")

    return f"{table}?{'&'.join(parts)}" if parts else table


class RestGateway:
    """
    Jedno wywolanie HTTP do hostowanego REST API.
    - doklada naglowki z kluczem serwisowym
    - serializuje body do JSON
    - pusta odpowiedz -> None
    - status spoza 2xx -> RemoteError z surowym body
    Bez retry i bez backoff, jedna proba na wywolanie.
    """

    def __init__(self, config: BackendConfig, session: requests.Session | None = None):
        self.config = config
        self.base_url = f"{config.base_url.rstrip('/')}/rest/v1"
        self.session = session or requests.Session()

    def _headers(self, extra: Dict[str, str] | None) -> Dict[str, str]:
        headers = {
            "apikey": self.config.api_key,
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    def request(
        self,
        path: str,
        method: str = "GET",
        body: Any = None,
        headers: Dict[str, str] | None = None,
    ) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        data = json.dumps(body) if body is not None else None
        logger.debug(f"RestGateway {method} {url}")

        try:
            resp = self.session.request(
                method,
                url,
                data=data,
                headers=self._headers(headers),
                timeout=self.config.timeout,
            )
        except RequestException as e:
            raise RemoteError(0, str(e)) from e

        text = resp.text
        if not 200 <= resp.status_code < 300:
            raise RemoteError(resp.status_code, text or f"Backend error {resp.status_code}")

        return json.loads(text) if text else None

    def get(self, path: str) -> Any:
        return self.request(path)

    def post(self, path: str, body: Any, *prefs: str) -> Any:
        return self.request(path, "POST", body, prefer(*prefs) if prefs else None)

    def patch(self, path: str, body: Any, *prefs: str) -> Any:
        return self.request(path, "PATCH", body, prefer(*prefs) if prefs else None)

    def delete(self, path: str) -> Any:
        return self.request(path, "DELETE")

    def rpc(self, function: str, params: Dict[str, Any]) -> Any:
        return self.request(f"rpc/{function}", "POST", params)
