"""
App layer: HTTP server (FastAPI).

- Studio editing sessions, save echo endpoint, chat proxy
- AI provider access (Gemini) behind providers.base.AIProvider
- Form/image rules live in lingofy.core
"""
