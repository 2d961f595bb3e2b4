"""Adapters around chat-completion backends (OpenAI, Azure OpenAI, Ollama)."""

from __future__ import annotations

import json
import os
import subprocess
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Protocol, Sequence
from urllib.error import HTTPError, URLError
from urllib.parse import quote, urlencode
from urllib.request import Request, urlopen

from ..logging import get_logger

_AUTO = object()

DEFAULT_SYSTEM_PROMPT = (
    "You are a technical writer producing accurate Markdown documentation for Java projects."
)


class LLMError(RuntimeError):
    """Raised when the generation backend cannot produce a response."""


class GenerationBackend(Protocol):
    """Anything that turns a rendered prompt into generated text."""

    def generate(self, prompt: str) -> str:
        ...


@dataclass
class LLMRequest:
    """Represents a single inference request."""

    prompt: str
    system: Optional[str]
    model: str
    temperature: Optional[float]
    max_tokens: Optional[int]
    executable: Optional[str]
    base_url: Optional[str]
    api_key: Optional[str]
    api_version: Optional[str]
    request_timeout: Optional[float]


class LLMRunner:
    """Executes prompts against the configured model endpoint."""

    DEFAULT_MODEL = "gpt-4o-mini"
    ENV_MODEL_KEYS = ("REPODOC_LLM_MODEL", "OPENAI_MODEL")
    ENV_BASE_URL_KEYS = ("REPODOC_LLM_BASE_URL", "OPENAI_BASE_URL")
    ENV_API_KEY_KEYS = ("REPODOC_LLM_API_KEY", "OPENAI_API_KEY")
    ENV_API_VERSION_KEYS = ("REPODOC_LLM_API_VERSION", "OPENAI_API_VERSION")

    def __init__(
        self,
        model: str | None = None,
        *,
        base_url: str | None | object = _AUTO,
        api_key: str | None | object = _AUTO,
        api_version: str | None | object = _AUTO,
        executable: str = "ollama",
        system: str | None = DEFAULT_SYSTEM_PROMPT,
        temperature: Optional[float] = 0.2,
        max_tokens: Optional[int] = None,
        request_timeout: Optional[float] = 120.0,
        runner: Callable[[LLMRequest], str] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._environ = os.environ if environ is None else environ
        self.model = model or self._first_env_value(self.ENV_MODEL_KEYS) or self.DEFAULT_MODEL
        base = self._resolve(base_url, self.ENV_BASE_URL_KEYS)
        self.base_url = base.rstrip("/") if base else None
        self.api_key = self._resolve(api_key, self.ENV_API_KEY_KEYS)
        self.api_version = self._resolve(api_version, self.ENV_API_VERSION_KEYS)
        self.executable = executable
        self.system = system
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.request_timeout = request_timeout
        self.logger = get_logger("llm.runner")
        if runner is not None:
            self._runner = runner
        else:
            self._runner = self._http_runner if self.base_url else self._cli_runner

    def generate(self, prompt: str) -> str:
        """Send the prompt to the configured model and return the response text."""
        request = LLMRequest(
            prompt=prompt,
            system=self.system,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            executable=self.executable,
            base_url=self.base_url,
            api_key=self.api_key,
            api_version=self.api_version,
            request_timeout=self.request_timeout,
        )
        self.logger.debug("Sending %d character prompt to %s", len(prompt), self.model)
        return self._runner(request)

    @staticmethod
    def _cli_runner(request: LLMRequest) -> str:
        args = [request.executable or "ollama", "run", request.model]
        prompt = request.prompt
        if request.system:
            prompt = f"{request.system}\n\n{prompt}"
        args.append(prompt)
        try:
            completed = subprocess.run(
                args,
                check=True,
                capture_output=True,
                text=True,
                timeout=request.request_timeout,
            )
        except FileNotFoundError as exc:
            raise LLMError(
                f"Unable to locate '{request.executable}'. Install Ollama or configure llm.base_url."
            ) from exc
        except subprocess.CalledProcessError as exc:
            raise LLMError(
                f"LLM runner failed with exit code {exc.returncode}: {(exc.stderr or '').strip()}"
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise LLMError(f"LLM runner timed out after {exc.timeout} seconds") from exc
        output = completed.stdout.strip()
        if not output:
            raise LLMError("LLM runner returned an empty response")
        return output

    @staticmethod
    def _http_runner(request: LLMRequest) -> str:
        if not request.base_url:
            raise LLMError("HTTP runner requires a base_url to be configured.")
        payload: dict[str, object] = {
            "messages": LLMRunner._build_messages(request.system, request.prompt),
        }
        headers = {"Content-Type": "application/json"}
        if request.api_version:
            endpoint = LLMRunner._azure_endpoint(request)
            if request.api_key:
                headers["api-key"] = request.api_key
        else:
            endpoint = f"{request.base_url}/chat/completions"
            payload["model"] = request.model
            if request.api_key:
                headers["Authorization"] = f"Bearer {request.api_key}"
        if request.temperature is not None:
            payload["temperature"] = request.temperature
        if request.max_tokens is not None:
            payload["max_tokens"] = request.max_tokens

        data = json.dumps(payload).encode("utf-8")
        http_request = Request(endpoint, data=data, headers=headers, method="POST")
        timeout = request.request_timeout or 120.0

        try:
            with urlopen(http_request, timeout=timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore") if hasattr(exc, "read") else ""
            message = detail.strip() or exc.reason
            raise LLMError(f"LLM HTTP runner failed with status {exc.code}: {message}") from exc
        except URLError as exc:
            raise LLMError(f"LLM HTTP runner failed: {exc.reason}") from exc
        except OSError as exc:
            raise LLMError(f"LLM HTTP runner failed: {exc}") from exc

        try:
            response_payload = json.loads(raw.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise LLMError("LLM HTTP runner returned invalid JSON") from exc

        content = LLMRunner._extract_content(response_payload)
        if not content:
            raise LLMError("LLM HTTP runner returned an empty response")
        return content.strip()

    @staticmethod
    def _azure_endpoint(request: LLMRequest) -> str:
        deployment = quote(request.model, safe="")
        query = urlencode({"api-version": request.api_version})
        return f"{request.base_url}/openai/deployments/{deployment}/chat/completions?{query}"

    @staticmethod
    def _build_messages(system: str | None, prompt: str) -> list[dict[str, str]]:
        messages: list[dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return messages

    @staticmethod
    def _extract_content(payload: object) -> str:
        if not isinstance(payload, dict):
            return ""
        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices:
            return ""
        first = choices[0]
        if not isinstance(first, dict):
            return ""
        message = first.get("message")
        if isinstance(message, dict):
            content = message.get("content")
            if isinstance(content, str):
                return content
        text = first.get("text")
        if isinstance(text, str):
            return text
        return ""

    def _resolve(self, value: str | None | object, keys: Sequence[str]) -> str | None:
        if value is _AUTO:
            return self._first_env_value(keys)
        return value  # type: ignore[return-value]

    def _first_env_value(self, keys: Sequence[str]) -> str | None:
        for key in keys:
            value = self._environ.get(key)
            if value:
                return value
        return None


__all__ = ["DEFAULT_SYSTEM_PROMPT", "GenerationBackend", "LLMError", "LLMRequest", "LLMRunner"]
