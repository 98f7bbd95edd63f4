"""
Prompt builder for LLM requests.

Responsible for:
- Loading and rendering Jinja2 templates (system + user prompts)
- Embedding a batch of snippets as a JSON list
- Constructing the complete LLMGenerationRequest
"""

import json
from pathlib import Path
from typing import Optional, Sequence
from jinja2 import Environment, FileSystemLoader
import structlog

from transcript_labeler.models.enums import CategoryEnum
from transcript_labeler.models.llm_models import LLMGenerationRequest


logger = structlog.get_logger(__name__)


class PromptBuilder:
    """
    Build labeling prompts for a batch of transcript snippets.

    The user prompt carries the PROB/SOLN definitions and the batch as an
    indented JSON list of {"text": ...} objects; the system prompt constrains
    the answer to a JSON array of {text, category}.
    """

    SYSTEM_TEMPLATE = "system_prompt.txt"
    USER_TEMPLATE = "user_prompt_template.txt"

    def __init__(
        self,
        templates_dir: Path,
        default_model: str = "claude-3-5-sonnet-20240620",
        default_max_tokens: int = 500,
        default_temperature: Optional[float] = None,
    ):
        """
        Initialize prompt builder.

        Args:
            templates_dir: Directory containing prompt templates
            default_model: Default model name
            default_max_tokens: Default max tokens
            default_temperature: Default temperature (None leaves the provider default)
        """
        self.templates_dir = Path(templates_dir)
        self.default_model = default_model
        self.default_max_tokens = default_max_tokens
        self.default_temperature = default_temperature

        self.jinja_env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False,  # Prompts, not HTML
            keep_trailing_newline=False,
        )

        try:
            self.system_template = self.jinja_env.get_template(self.SYSTEM_TEMPLATE)
            self.user_template = self.jinja_env.get_template(self.USER_TEMPLATE)
            logger.info("Loaded prompt templates", templates_dir=str(self.templates_dir))
        except Exception as e:
            logger.error("Failed to load prompt templates", error=str(e), templates_dir=str(self.templates_dir))
            raise

    def build_system_prompt(self) -> str:
        """Render the system prompt listing the allowed categories."""
        return self.system_template.render(categories=CategoryEnum.values()).strip()

    def build_user_prompt(self, batch: Sequence[str]) -> str:
        """
        Render the labeling instruction for one batch.

        Args:
            batch: Snippets in order

        Returns:
            Rendered prompt with the batch embedded as indented JSON
        """
        snippets_json = json.dumps(
            [{"text": text} for text in batch],
            indent=2,
            ensure_ascii=False,
        )
        return self.user_template.render(snippets_json=snippets_json).strip()

    def build_full_request(
        self,
        batch: Sequence[str],
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ) -> LLMGenerationRequest:
        """
        Build complete LLMGenerationRequest for a batch.

        Args:
            batch: Snippets in order
            model: Override default model
            max_tokens: Override default max_tokens

        Returns:
            LLMGenerationRequest with system and user prompts
        """
        user_prompt = self.build_user_prompt(batch)
        final_model = model or self.default_model
        final_max_tokens = max_tokens or self.default_max_tokens

        logger.debug(
            "LLM request built",
            model=final_model,
            batch_size=len(batch),
            batch_chars=sum(len(text) for text in batch),
            prompt_length=len(user_prompt),
        )

        return LLMGenerationRequest(
            prompt=user_prompt,
            system_prompt=self.build_system_prompt(),
            model=final_model,
            max_tokens=final_max_tokens,
            temperature=self.default_temperature,
        )
