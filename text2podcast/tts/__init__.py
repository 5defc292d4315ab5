"""Speech engine registry and factory."""

from text2podcast.tts.base import TTSEngine

ENGINE_REGISTRY: dict[str, type[TTSEngine]] = {}


def register_engine(name: str):
    """Decorator to register a TTS engine class under ``name``."""
    def decorator(cls):
        ENGINE_REGISTRY[name] = cls
        return cls
    return decorator


def get_engine(name: str, **kwargs) -> TTSEngine:
    """Instantiate a registered engine by name, forwarding constructor kwargs."""
    if name not in ENGINE_REGISTRY:
        available = ", ".join(sorted(ENGINE_REGISTRY)) or "(none)"
        raise ValueError(f"Unknown engine '{name}'. Available: {available}")
    return ENGINE_REGISTRY[name](**kwargs)


def list_engines() -> list[str]:
    """Return names of all registered engines."""
    return sorted(ENGINE_REGISTRY)


def load_builtin_engines() -> None:
    """Import the bundled engine modules so they register themselves."""
    import text2podcast.tts.edge_engine  # noqa: F401
    import text2podcast.tts.openai_engine  # noqa: F401
