
"""
   LLM integration exception types.
   Transport errors from the openai SDK (openai.APIError and subclasses) are not
   wrapped; these cover responses the SDK accepted but we cannot use.
"""

class LLMError(Exception):
    """Base for LLM integration errors (also: missing API key)."""

class LLMResponseError(LLMError):
    """Empty completion, non-JSON content in JSON mode, or an empty embedding."""
