"""
AI Providers - upstream LLM services the API forwards to.
"""

from familyhub.ai.providers.anthropic_provider import AnthropicProvider, ProxyResponse

__all__ = ["AnthropicProvider", "ProxyResponse"]
