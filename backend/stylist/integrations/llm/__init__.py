from .openai_client import LLMClient, parse_json_response
from .errors import LLMError, LLMResponseError


__all__ = ["LLMClient", "parse_json_response", "LLMError", "LLMResponseError"]
