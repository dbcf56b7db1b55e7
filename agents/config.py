"""
Configuration settings for the agents package.
"""

import os

from dotenv import load_dotenv

load_dotenv()

#==============================================================================
# LLM PROVIDER CONFIGURATION
#==============================================================================

# Which gateway handles segmentation/layout calls: "openrouter" or "gemini"
LLM_PROVIDER = os.getenv('LLM_PROVIDER', 'openrouter')

OPENROUTER_BASE_URL = os.getenv('OPENROUTER_BASE_URL', 'https://openrouter.ai/api/v1')
OPENROUTER_MODEL = os.getenv('OPENROUTER_MODEL', 'qwen/qwen3-235b-a22b:free')

GEMINI_BASE_URL = os.getenv('GEMINI_BASE_URL', 'https://generativelanguage.googleapis.com/v1beta')
GEMINI_MODEL = os.getenv('GEMINI_MODEL', 'gemini-2.5-flash')

# Sampling controls shared by every provider
LLM_TEMPERATURE = float(os.getenv('LLM_TEMPERATURE', '0.7'))
LLM_MAX_TOKENS = int(os.getenv('LLM_MAX_TOKENS', '2000'))

#==============================================================================
# TIMEOUTS
#==============================================================================

# Per-request timeout for LLM calls (seconds); a timeout counts as a provider failure
LLM_REQUEST_TIMEOUT = float(os.getenv('LLM_REQUEST_TIMEOUT', '60'))
IMAGE_SEARCH_TIMEOUT = float(os.getenv('IMAGE_SEARCH_TIMEOUT', '30'))

#==============================================================================
# PIPELINE CONFIGURATION
#==============================================================================

# Prompt bundle: "classic" or "design_trends"
PROMPT_PROFILE = os.getenv('PROMPT_PROFILE', 'classic')

CANVAS_WIDTH = 1600
CANVAS_HEIGHT = 900

# Score stamped on slides when refinement is skipped
DEFAULT_QUALITY_SCORE = 85

# Ask the model to critique each slide in the batch pipeline (one extra call per slide)
ENABLE_REFINEMENT = os.getenv('ENABLE_REFINEMENT', 'false').lower() == 'true'

# Clamp planned element boxes into the canvas before asset generation
ENABLE_LAYOUT_VALIDATION = os.getenv('ENABLE_LAYOUT_VALIDATION', 'true').lower() == 'true'

# Render the grain texture server-side; disabled yields an empty placeholder
ENABLE_TEXTURE_RENDERING = os.getenv('ENABLE_TEXTURE_RENDERING', 'true').lower() == 'true'
GRAIN_TEXTURE_OPACITY = 0.2

# Whole-pipeline attempts at the API boundary (1 retry)
PIPELINE_MAX_ATTEMPTS = int(os.getenv('PIPELINE_MAX_ATTEMPTS', '2'))
