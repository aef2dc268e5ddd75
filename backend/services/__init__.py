"""Services module - Business logic layer"""

from .chat_service import ChatService
from .code_extractor import extract_code_and_description
from .config_manager import ConfigManager
from .errors import ConfigurationError, LLMServiceError
from .indentation import common_leading_space_count
from .llm_service import LLMService
from .prompt_to_code_service import PromptToCodeService
from .snapshot_stream import stream_snapshots

__all__ = [
    "ChatService",
    "ConfigManager",
    "ConfigurationError",
    "LLMService",
    "LLMServiceError",
    "PromptToCodeService",
    "common_leading_space_count",
    "extract_code_and_description",
    "stream_snapshots",
]
