"""
Prompts for landing page generation.

The system prompt carries the non-negotiable constraints. User prompts are
built deterministically from the Brief: the same brief always yields the
same primary prompt. Asset payloads never appear here, only presence flags
and placeholder tokens.
"""

from typing import List

from ..assets import BACKGROUND_PLACEHOLDER, LOGO_PLACEHOLDER
from .contracts import Brief


PROMPT_VARIANT_PRIMARY = "primary"
PROMPT_VARIANT_REVISION = "revision"


# Repeated verbatim in the system prompt and in every revision prompt
NON_NEGOTIABLE_RULES: List[str] = [
    "Return ONE complete HTML document and nothing else: no Markdown fences, no commentary.",
    "The very first characters must be <!DOCTYPE html>.",
    "Inline all CSS and JS. No external stylesheets, scripts, web fonts, CDNs, @import or iframes.",
    "Use a system UI font stack; never load fonts from Google Fonts or any other host.",
    "Every section heading must be specific to this project. Never use a bare generic "
    "heading such as 'Fast', 'Customizable' or 'Reliable'.",
    f"Keep the literal placeholders {LOGO_PLACEHOLDER} and {BACKGROUND_PLACEHOLDER} exactly "
    "as instructed; real assets are inserted later.",
]


SYSTEM_PROMPT = "\n".join([
    "You are a senior front-end designer & developer.",
    "Return a COMPLETE, VALID single-file index.html for a crypto project landing page.",
    "Use semantic HTML5, accessibility (landmarks, alt, aria-label), responsive design.",
    "Use CSS variables; subtle shadows & animation.",
    "Respect the requested theme (dark/light) and the --primary / --accent colors.",
    "No analytics, no external scripts, no iframes, no webfonts.",
    "Include sections: Hero, About, Token/Ticker, Highlights, Roadmap, Social/CTA.",
    "Add a \"Copy Ticker\" button and a back-to-top link (smooth scroll).",
    "Add <title>, meta description, Open Graph tags; tiny inline SVG or base64 favicon in <head>.",
    "Avoid big opaque overlays that hide the page background.",
    "",
    "Non-negotiable rules:",
    *[f"- {rule}" for rule in NON_NEGOTIABLE_RULES],
])


def _social_lines(brief: Brief) -> List[str]:
    lines = []
    if brief.telegram:
        lines.append(f"Telegram: {brief.telegram}")
    if brief.twitter:
        lines.append(f"X/Twitter: {brief.twitter}")
    if not lines:
        lines.append("Social links: none provided (omit social buttons)")
    return lines


def _asset_lines(brief: Brief) -> List[str]:
    lines = [f"- Include {LOGO_PLACEHOLDER} inside the hero where the logo belongs."]
    if brief.has_logo:
        lines.append("- Logo: PROVIDED (it will replace the placeholder; leave room for a ~96px square image).")
    else:
        lines.append("- Logo: not provided (the placeholder will be removed; hero must still look complete).")

    if brief.has_background:
        lines.append(
            f"- Background image: PROVIDED. Set the body background-image to "
            f"url('{BACKGROUND_PLACEHOLDER}') with background-size: cover."
        )
    else:
        lines.append("- Background image: not provided. Use gradients built from the color variables.")
    return lines


def build_primary_prompt(brief: Brief) -> str:
    """
    Build the first-attempt user prompt from the brief.

    Args:
        brief: Project brief

    Returns:
        Formatted user prompt string
    """
    ticker = brief.ticker_symbol or "N/A"
    lines = [
        f"Project Name: {brief.display_name}",
        f"Ticker: {ticker}",
        f"Theme: {brief.theme}",
        *_social_lines(brief),
        "",
        "Color variables:",
        f"  --primary: {brief.colors.primary};",
        f"  --accent: {brief.colors.accent};",
        "",
        "Description:",
        (brief.description or "").strip() or "(no description provided; infer a tasteful one from the name)",
        "",
        "Assets:",
        *_asset_lines(brief),
        "",
        "Strict:",
        "- ONE FILE ONLY, pure HTML (no Markdown fences).",
        f"- Define CSS variables --primary with {brief.colors.primary} and --accent with {brief.colors.accent}.",
        "- Body should look good even without a background asset.",
    ]
    if brief.ticker_symbol:
        lines.append(f"- The Copy Ticker button copies ${brief.ticker_symbol} to the clipboard.")
    return "\n".join(lines)


def build_revision_prompt(brief: Brief, failure_reason: str) -> str:
    """
    Build a retry prompt that restates the most recent failure.

    Only the latest reason is included, never a history of failures.
    The full brief is repeated because each provider call is stateless.
    """
    lines = [
        "Your previous answer was rejected by automated checks.",
        f"Reason: the page {failure_reason}",
        "Produce a corrected page from scratch. Rules that must hold:",
        *[f"- {rule}" for rule in NON_NEGOTIABLE_RULES],
        "",
        "Brief (unchanged):",
        build_primary_prompt(brief),
    ]
    return "\n".join(lines)
