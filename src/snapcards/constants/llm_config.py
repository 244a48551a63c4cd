"""LLM configuration constants."""

# =============================================================================
# Provider settings
# =============================================================================

DEFAULT_PROVIDER = "openai"
DEFAULT_TEMPERATURE = 0.0

# DashScope exposes an OpenAI-compatible endpoint; the openai SDK talks to it
# directly through base_url.
DASHSCOPE_BASE_URL = "https://dashscope.aliyuncs.com/compatible-mode/v1"

DEFAULT_VISION_MODEL = "qwen-vl-plus"
DEFAULT_TEXT_MODEL = "qwen-turbo"

DEFAULT_MODEL_ANTHROPIC = "claude-3-5-haiku-20241022"
DEFAULT_MODEL_GEMINI = "gemini-2.5-flash"

DEFAULT_MAX_TOKENS = 2048

# =============================================================================
# Credentials
# =============================================================================

# Shipped in sample configs; never a usable key
PLACEHOLDER_API_KEY = "sk-YOUR_KEY_HERE"

# =============================================================================
# Retry settings
# =============================================================================

DEFAULT_MAX_RETRIES = 0  # Single attempt
DEFAULT_RETRY_DELAY = 1.0

# =============================================================================
# Demo mode
# =============================================================================

DEMO_RECOGNITION_DELAY = 1.5  # seconds
DEMO_ENRICHMENT_DELAY = 1.0  # seconds
