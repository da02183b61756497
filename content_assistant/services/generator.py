"""
Generative Text Service using Groq.

Sends prompts to Groq's OpenAI-compatible chat completions API and returns
either free text or parsed JSON. Failures are raised as UpstreamServiceError;
retrying is left to the caller.
"""

import json
import re
import requests
from typing import Any, Dict, Optional

from content_assistant.config import GROQ_API_KEY, GROQ_MODEL, REQUEST_TIMEOUT
from content_assistant.errors import UpstreamServiceError


_JSON_TYPES = {
    "array": list,
    "object": dict,
    "string": str,
}

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class TextGenerator:
    """LLM text generation using the Groq API."""
    
    API_URL = "https://api.groq.com/openai/v1/chat/completions"
    
    SYSTEM_PROMPT = (
        "You are an expert content writer for small-business communities. "
        "Follow the requested structure and output format exactly."
    )
    
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: int = REQUEST_TIMEOUT,
    ):
        self.api_key = api_key if api_key is not None else GROQ_API_KEY
        self.model = model or GROQ_MODEL
        self.timeout = timeout
    
    def is_available(self) -> bool:
        """Check if generation is available (API key configured)."""
        return bool(self.api_key)
    
    def generate(
        self,
        prompt: str,
        structured: bool = False,
        schema: Optional[Dict[str, Any]] = None,
        max_tokens: int = 2048,
    ) -> Any:
        """
        Generate text (or JSON) for a prompt.
        
        Args:
            prompt: The prompt for the model.
            structured: If True, request JSON and return the parsed value.
            schema: JSON schema describing the expected structured output.
            max_tokens: Completion token limit.
            
        Returns:
            Generated text, or the parsed JSON value when structured.
            
        Raises:
            UpstreamServiceError: If not configured, the request fails,
                or the response has an unexpected shape.
        """
        if not self.is_available():
            raise UpstreamServiceError("AI generation not configured. Add GROQ_API_KEY to .env")
        
        if structured:
            prompt = self._structured_prompt(prompt, schema)
        
        text = self._call_api(prompt, max_tokens=max_tokens, temperature=0.7)
        
        if not structured:
            return text
        
        return self._parse_structured(text, schema)
    
    @staticmethod
    def _structured_prompt(prompt: str, schema: Optional[Dict[str, Any]]) -> str:
        instructions = "\n\nRespond with ONLY valid JSON (no markdown, no extra text)."
        if schema:
            instructions += f"\nThe JSON must match this schema:\n{json.dumps(schema)}"
        return prompt + instructions
    
    @staticmethod
    def _parse_structured(text: str, schema: Optional[Dict[str, Any]]) -> Any:
        text = text.strip()
        fenced = _FENCE_RE.match(text)
        if fenced:
            text = fenced.group(1)
        
        try:
            value = json.loads(text)
        except json.JSONDecodeError as e:
            raise UpstreamServiceError(f"Malformed JSON from generator: {e}") from e
        
        expected = _JSON_TYPES.get((schema or {}).get("type", ""))
        if expected is not None and not isinstance(value, expected):
            raise UpstreamServiceError(
                f"Unexpected JSON from generator: expected {schema['type']}, "
                f"got {type(value).__name__}"
            )
        
        return value
    
    def _call_api(self, prompt: str, max_tokens: int, temperature: float) -> str:
        """Make API call to Groq and return the message content."""
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        
        payload = {
            "model": self.model,
            "messages": [
                {
                    "role": "system",
                    "content": self.SYSTEM_PROMPT,
                },
                {
                    "role": "user",
                    "content": prompt,
                },
            ],
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        
        try:
            response = requests.post(
                self.API_URL,
                headers=headers,
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            print(f"[groq] Request failed: {e}")
            raise UpstreamServiceError(f"API request failed: {e}") from e
        
        if response.status_code != 200:
            try:
                error_msg = response.json().get("error", {}).get("message") or response.text
            except ValueError:
                error_msg = response.text
            print(f"[groq] API error ({response.status_code}): {error_msg}")
            raise UpstreamServiceError(f"API error ({response.status_code}): {error_msg}")
        
        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise UpstreamServiceError("Unexpected response from generation API") from e
        
        if not isinstance(content, str) or not content.strip():
            raise UpstreamServiceError("Unexpected response from generation API")
        
        return content.strip()


# Singleton instance
_generator: Optional[TextGenerator] = None


def get_generator() -> TextGenerator:
    """Get the singleton text generator instance."""
    global _generator
    if _generator is None:
        _generator = TextGenerator()
    return _generator
