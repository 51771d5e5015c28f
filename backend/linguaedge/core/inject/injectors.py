"""HTML injectors for translated and default-language pages.

Each injector is a pure ``str -> str`` transformation guarded by its own
marker string: when the marker is already present the HTML is returned
unchanged, so applying an injector twice equals applying it once.
"""

import html as html_lib
import re
from typing import Mapping, Optional

from linguaedge.core.engine.engine import PRERENDERED_ATTRIBUTE
from linguaedge.core.engine.prerender import BLUR_STYLE_ID, TRANSLATED_CLASS
from linguaedge.core.inject.loader import AssetLoader, js_literal
from linguaedge.models.schemas import ProjectConfig

ENGINE_MARKER = "__LE_AUTO_TRANSLATE__"
CONTEXT_MARKER = "__LE_CONTEXT__"
HREFLANG_MARKER = "hreflang="
SWITCHER_MARKER = "le-lang-switcher"
AUTO_DETECT_MARKER = "__LE_AUTO_LANG_DETECT__"

SWITCHER_SELECT_ID = "le-lang-select"
SESSION_DETECTED_KEY = "le_lang_detected"

_HEAD_OPEN_RE = re.compile(r"<head(?:\s[^>]*)?>", re.IGNORECASE)
_HEAD_CLOSE_RE = re.compile(r"</head\s*>", re.IGNORECASE)
_BODY_CLOSE_RE = re.compile(r"</body\s*>", re.IGNORECASE)


def _after_head_open(html: str, fragment: str) -> str:
    return _HEAD_OPEN_RE.sub(lambda m: m.group(0) + fragment, html, count=1)


def _before(pattern: re.Pattern[str], html: str, fragment: str) -> str:
    return pattern.sub(lambda m: f"{fragment}\n{m.group(0)}", html, count=1)


def _language_name(code: str, names: Mapping[str, str]) -> str:
    return names.get(code) or code.upper()


def inject_translation_engine(
    html: str,
    language: str,
    api_key: str,
    translate_url: str,
    fold_buffer: int = 200,
    reveal_delay_ms: int = 300,
    timeout_ms: int = 10000,
    prerendered: bool = False,
) -> str:
    """Inject the blur overlay and the client translation engine before </head>.

    A prerendered page already shows translated text: it gets no blur and
    the engine only translates content inserted after load.
    """
    if ENGINE_MARKER in html:
        return html

    config = {
        "lang": language,
        "apiKey": api_key,
        "translateUrl": translate_url,
        "foldBuffer": fold_buffer,
        "revealDelay": reveal_delay_ms,
        "timeoutMs": timeout_ms,
        "blurId": BLUR_STYLE_ID,
        "translatedClass": TRANSLATED_CLASS,
        "prerendered": prerendered,
        "prerenderedAttribute": PRERENDERED_ATTRIBUTE,
    }
    script = AssetLoader.render("engine.js", marker=ENGINE_MARKER, config=js_literal(config))
    if prerendered:
        return _before(_HEAD_CLOSE_RE, html, f"\n{script}")

    style = AssetLoader.render(
        "engine.css",
        blur_id=BLUR_STYLE_ID,
        translated_class=TRANSLATED_CLASS,
    )
    return _before(_HEAD_CLOSE_RE, html, f"\n{style}\n{script}")


def inject_language_context(html: str, language: str) -> str:
    """Expose the active language to page scripts and set <html lang>."""
    if CONTEXT_MARKER in html:
        return html

    script = AssetLoader.render("context.js", marker=CONTEXT_MARKER, lang=js_literal(language))
    return _after_head_open(html, f"\n{script}")


def add_hreflang_links(
    html: str,
    pathname: str,
    project_config: ProjectConfig,
    origin: str,
) -> str:
    """Add <link rel="alternate"> tags for every language plus x-default."""
    if HREFLANG_MARKER in html:
        return html

    origin = origin.rstrip("/")
    default_language = project_config.default_language

    def link(hreflang: str, href: str) -> str:
        return (
            f'<link rel="alternate" hreflang="{html_lib.escape(hreflang)}" '
            f'href="{html_lib.escape(href)}" />'
        )

    tags = [link(default_language, f"{origin}{pathname}")]
    for code in project_config.enabled_languages:
        tags.append(link(code, f"{origin}/{code}{pathname}"))
    tags.append(link("x-default", f"{origin}{pathname}"))

    return _before(_HEAD_CLOSE_RE, html, "\n" + "\n".join(tags))


def inject_language_switcher(
    html: str,
    project_config: ProjectConfig,
    language_names: Optional[Mapping[str, str]] = None,
) -> str:
    """Add the fixed-position language <select> before </body>."""
    if SWITCHER_MARKER in html:
        return html

    names = language_names or {}
    default_language = project_config.default_language
    codes = [default_language] + [
        code for code in project_config.enabled_languages if code != default_language
    ]
    options = "".join(
        f'<option value="{html_lib.escape(code)}">'
        f"{html_lib.escape(_language_name(code, names))}</option>"
        for code in codes
    )

    switcher = AssetLoader.render(
        "switcher.html",
        marker=SWITCHER_MARKER,
        select_id=SWITCHER_SELECT_ID,
        select_id_json=js_literal(SWITCHER_SELECT_ID),
        options=options,
        default_language=js_literal(default_language),
    )
    return _before(_BODY_CLOSE_RE, html, f"\n{switcher}")


def inject_auto_language_detection(html: str, project_config: ProjectConfig) -> str:
    """Add the once-per-session browser-language redirect right after <head>."""
    if AUTO_DETECT_MARKER in html:
        return html

    script = AssetLoader.render(
        "auto_detect.js",
        marker=AUTO_DETECT_MARKER,
        session_key=js_literal(SESSION_DETECTED_KEY),
        target_languages=js_literal(project_config.enabled_languages),
        default_language=js_literal(project_config.default_language),
    )
    return _after_head_open(html, f"\n{script}")
