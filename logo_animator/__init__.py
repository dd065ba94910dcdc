"""
AI Logo Animator - Modular Components

This package contains the core modules for the AI Logo Animator:
- config: Configuration, constants, enums and settings
- utils: Logging and image/data-URL helpers
- media: Owned video resources and download actions
- session: Session state and the observable session store
- gemini_client: Gemini client initialization and the Imagen/Veo backend
- orchestrator: Logo and animation jobs (submit, poll, fetch)
- presentation: Tab switching, uploads, downloads and share links
- cli: Headless command-line runner
"""

# Lazy imports to avoid circular dependencies and hot-reload issues
_EXPORTS = {
    # Config
    "AspectRatio": "config",
    "Tab": "config",
    "VideoFormat": "config",
    "SharePlatform": "config",
    "Settings": "config",
    "PROGRESS_MESSAGES": "config",
    # Utils
    "get_logger": "utils",
    "load_image_bytes": "utils",
    "to_data_url": "utils",
    "split_data_url": "utils",
    # Media
    "VideoResource": "media",
    "DownloadAction": "media",
    "ResourceReleasedError": "media",
    # Session
    "Session": "session",
    "SessionStore": "session",
    "Status": "session",
    # Gemini Client
    "get_api_key": "gemini_client",
    "get_genai_client": "gemini_client",
    "GeminiBackend": "gemini_client",
    "VideoOperation": "gemini_client",
    "MissingApiKeyError": "gemini_client",
    # Orchestrator
    "JobOrchestrator": "orchestrator",
    "EmptyResultError": "orchestrator",
    "PollTimeoutError": "orchestrator",
    # Presentation
    "Presentation": "presentation",
    "build_share_url": "presentation",
}

__all__ = list(_EXPORTS)


def __getattr__(name):
    """Lazy import to avoid circular dependencies and streamlit hot-reload issues."""
    module_name = _EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
    from importlib import import_module
    module = import_module(f".{module_name}", __name__)
    return getattr(module, name)
