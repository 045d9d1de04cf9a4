from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
import typer

from cli.config import CLIConfig

_PREFIX = "/api/heart-rate"


class ApiClient:
    """Minimal HTTP client for the heart rate service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def submit_reading(self, pulse: int, spo2: Optional[float] = None) -> Dict[str, Any]:
        body: Dict[str, Any] = {"pulse": pulse}
        if spo2 is not None:
            body["spo2"] = spo2
        return self._request("POST", f"{_PREFIX}/reading", json=body)

    def get_stats(self) -> Dict[str, Any]:
        return self._request("GET", f"{_PREFIX}/stats")

    def get_current(self) -> Dict[str, Any]:
        return self._request("GET", f"{_PREFIX}/current")

    def get_statistics(self) -> Dict[str, Any]:
        return self._request("GET", f"{_PREFIX}/statistics")

    def get_readings(self, limit: int, since: Optional[str] = None) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"limit": limit}
        if since:
            params["since"] = since
        return self._request("GET", f"{_PREFIX}/readings", params=params)

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.TransportError as exc:
            typer.secho(
                f"Could not reach {self._config.base_url}: {exc}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1) from exc
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: Any = None
        try:
            detail = exc.response.json().get("detail")
        except ValueError:
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
