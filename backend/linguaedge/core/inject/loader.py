"""Asset loader for the emitted HTML/JS/CSS fragments.

Assets live in ``assets/`` next to this module and use ``{{variable}}``
placeholders. Variables missing from the render call are left in place.
"""

import json
import re
from functools import lru_cache
from pathlib import Path
from typing import Any


class AssetLoader:
    """Load and render fragment templates."""

    ASSETS_DIR = Path(__file__).parent / "assets"

    # Simple variable pattern: {{var}}
    VARIABLE_PATTERN = re.compile(r"\{\{(\w+)\}\}")

    @classmethod
    @lru_cache(maxsize=None)
    def load(cls, name: str) -> str:
        """Read an asset by file name (cached for the process lifetime)."""
        return (cls.ASSETS_DIR / name).read_text(encoding="utf-8")

    @classmethod
    def render(cls, name: str, **variables: Any) -> str:
        """Render an asset, substituting ``{{var}}`` placeholders."""
        template = cls.load(name)

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            if var_name not in variables:
                return match.group(0)
            return str(variables[var_name])

        return cls.VARIABLE_PATTERN.sub(replace_var, template)


def js_literal(value: Any) -> str:
    """Serialize ``value`` as a JS literal safe to embed inside <script>."""
    return (
        json.dumps(value, ensure_ascii=False)
        .replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
        .replace("\u2028", "\\u2028")
        .replace("\u2029", "\\u2029")
    )
