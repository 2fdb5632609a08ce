"""
AI Module - landing page generation.

Architecture Overview:
=====================

┌──────────────┐     ┌──────────────────┐     ┌──────────────────┐
│    Brief     │ ──▶ │  SiteGenerator   │ ──▶ │   Quality gate   │
│ (name, ...)  │     │ (one LLM call)   │     │ (3 fixed rules)  │
└──────────────┘     └──────────────────┘     └────────┬─────────┘
                              ▲                        │
                              │  revision prompt       │ failed, attempts left
                              └────────────────────────┘
                                                       │ passed
                                                       ▼
                                              ┌──────────────────┐
                                              │ inject_assets()  │
                                              └──────────────────┘

Module Structure:
================
- providers/: AI provider clients (OpenAI, Anthropic, Gemini)
- site/: prompts, the generation loop, validation rules, assets, fallback
- monitoring/: structured logging
"""

# Version of the AI module
__version__ = "0.1.0"
