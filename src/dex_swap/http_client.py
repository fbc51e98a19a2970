from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter, Retry


class HttpClient:
    """JSON-over-HTTP session with retries disabled; every request is sent once.

    Status handling is left to the caller.
    """

    def __init__(self, timeout: float, user_agent: str, session: Optional[requests.Session] = None) -> None:
        self.timeout = timeout
        self.session = session or requests.Session()
        adapter = HTTPAdapter(max_retries=Retry(total=0, raise_on_status=False), pool_connections=1, pool_maxsize=2)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)
        self.session.headers.update({"User-Agent": user_agent, "Content-Type": "application/json"})

    def get(self, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        return self.session.get(url, params=params, timeout=self.timeout)

    def post_json(self, url: str, payload: Dict[str, Any]) -> requests.Response:
        return self.session.post(url, json=payload, timeout=self.timeout)
