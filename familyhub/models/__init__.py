from familyhub.models.token_set import TokenSet, now_ms

__all__ = ["TokenSet", "now_ms"]
