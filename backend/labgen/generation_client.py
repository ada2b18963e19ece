from __future__ import annotations
import httpx
from typing import Any, Dict, Optional
from .errors import GenerationUnavailable
from .prompts import PromptPair
from .settings import settings

PROVIDERS = ("ai_studio", "vertex", "openai")


class GenerationClient:
	"""Single-shot text generation against Gemini or an OpenAI-compatible endpoint.

	No retry happens here; every failure surfaces as ``GenerationUnavailable``.
	"""

	def __init__(
		self,
		*,
		provider: Optional[str] = None,
		api_key: Optional[str] = None,
		model: Optional[str] = None,
		base_url: Optional[str] = None,
		temperature: Optional[float] = None,
		max_tokens: Optional[int] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.provider = provider or settings.llm_provider
		if self.provider not in PROVIDERS:
			raise ValueError(f"LLM_PROVIDER must be one of {PROVIDERS}")
		self.temperature = settings.generation_temperature if temperature is None else temperature
		self.max_tokens = max_tokens or settings.generation_max_tokens
		if self.provider == "openai":
			self.api_key = api_key or settings.openai_api_key
			self.model = model or settings.openai_model
			self.base_url = base_url or settings.openai_base_url
		elif self.provider == "vertex":
			self.api_key = api_key or settings.gemini_api_key
			self.model = model or settings.gemini_model
			region = settings.vertex_region
			project = settings.vertex_project or "placeholder-project"
			# Vertex AI Generative REST endpoint (API key via header)
			self.base_url = base_url or (
				f"https://{region}-aiplatform.googleapis.com/v1/projects/{project}/locations/{region}/publishers/google/models/{self.model}:generateContent"
			)
		else:
			# Google AI Studio (Generative Language API)
			self.api_key = api_key or settings.gemini_api_key
			self.model = model or settings.gemini_model
			self.base_url = base_url or f"https://generativelanguage.googleapis.com/v1beta/models/{self.model}:generateContent"
		self._client = httpx.AsyncClient(timeout=settings.llm_timeout_seconds, transport=transport)

	async def generate(self, prompt: PromptPair) -> str:
		if not self.api_key:
			raise GenerationUnavailable(f"no API key configured for provider {self.provider!r}")
		if self.provider == "openai":
			request = self._openai_request(prompt)
		else:
			request = self._gemini_request(prompt)
		try:
			r = await self._client.post(self.base_url, **request)
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			raise GenerationUnavailable(
				f"{self.provider} returned HTTP {http_err.response.status_code}"
			) from http_err
		except httpx.RequestError as net_err:
			raise GenerationUnavailable(f"{self.provider} request failed: {net_err}") from net_err
		except httpx.InvalidURL as url_err:
			raise GenerationUnavailable(f"{self.provider} endpoint is not a valid URL: {url_err}") from url_err
		try:
			text = self._extract_text(r.json())
		except (ValueError, KeyError, IndexError, TypeError, RecursionError) as err:
			raise GenerationUnavailable(f"Unexpected {self.provider} response: {r.text[:200]}") from err
		if not isinstance(text, str) or not text.strip():
			raise GenerationUnavailable(f"{self.provider} returned empty content")
		return text

	def _gemini_request(self, prompt: PromptPair) -> Dict[str, Any]:
		params: Dict[str, Any] = {}
		headers: Dict[str, str] = {}
		if self.provider == "ai_studio":
			params["key"] = self.api_key
		else:
			headers["x-goog-api-key"] = self.api_key
		payload: Dict[str, Any] = {
			"systemInstruction": {"parts": [{"text": prompt.system}]},
			"contents": [{"role": "user", "parts": [{"text": prompt.user}]}],
			"generationConfig": {
				"temperature": self.temperature,
				"maxOutputTokens": self.max_tokens,
			},
		}
		return {"params": params, "headers": headers, "json": payload}

	def _openai_request(self, prompt: PromptPair) -> Dict[str, Any]:
		headers = {
			"Authorization": f"Bearer {self.api_key}",
			"Content-Type": "application/json",
		}
		payload: Dict[str, Any] = {
			"model": self.model,
			"messages": [
				{"role": "system", "content": prompt.system},
				{"role": "user", "content": prompt.user},
			],
			"temperature": self.temperature,
			"max_tokens": self.max_tokens,
		}
		return {"headers": headers, "json": payload}

	def _extract_text(self, data: Dict[str, Any]) -> str:
		if self.provider == "openai":
			return data["choices"][0]["message"]["content"]
		return data["candidates"][0]["content"]["parts"][0]["text"]

	async def aclose(self) -> None:
		await self._client.aclose()


async def get_generation_client():
	client = GenerationClient()
	try:
		yield client
	finally:
		await client.aclose()
