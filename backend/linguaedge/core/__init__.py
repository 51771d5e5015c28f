"""Core package - edge orchestration, injectors, caches and the translation engine."""
