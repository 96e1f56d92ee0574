from __future__ import annotations
import logging
import httpx
from typing import Any, Dict, Optional
from .settings import settings

logger = logging.getLogger(__name__)


class CompletionClient:
	"""Chat-completions adapter for an OpenAI-compatible endpoint.

	One request per call. Transport and HTTP errors propagate to the caller
	unchanged; there is no retry and no provider fallback.
	"""

	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		timeout: Optional[float] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.api_key = api_key or settings.openai_api_key
		if not self.api_key:
			raise ValueError("OPENAI_API_KEY is not configured")
		self.model = model or settings.openai_model
		root = (base_url or settings.openai_base_url).rstrip("/")
		self.base_url = f"{root}/chat/completions"
		self._headers = {
			"Authorization": f"Bearer {self.api_key}",
			"Content-Type": "application/json",
		}
		self._client = httpx.AsyncClient(
			timeout=timeout if timeout is not None else settings.openai_timeout,
			transport=transport,
		)

	async def complete(
		self,
		system: str,
		user: str,
		*,
		model: Optional[str] = None,
		temperature: float,
	) -> str:
		payload: Dict[str, Any] = {
			"model": model or self.model,
			"messages": [
				{"role": "system", "content": system},
				{"role": "user", "content": user},
			],
			"temperature": temperature,
		}
		r = await self._client.post(self.base_url, headers=self._headers, json=payload)
		r.raise_for_status()
		data = r.json()
		choices = data.get("choices") or []
		if not choices:
			logger.warning("Completion response had no choices (model=%s)", payload["model"])
			return ""
		message = choices[0].get("message") or {}
		return message.get("content") or ""

	async def aclose(self) -> None:
		await self._client.aclose()
