"""Document analysis agent for birth and baptism records.

This module sends a document image to a multimodal chat model together with a
fixed instruction and a response schema, then parses the reply into
``ExtractedRecord`` objects. The call is single-shot and all-or-nothing.
"""

import json
import logging
from pathlib import Path

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langchain_openai import ChatOpenAI
from pydantic import SecretStr, ValidationError

from appphoto_ai.agents._content import message_text
from appphoto_ai.config import Settings, get_settings
from appphoto_ai.errors import AnalysisError
from appphoto_ai.ingestion.images import encode_image_part
from appphoto_ai.schemas.extraction import ExtractedRecord, normalize_records, response_format

logger = logging.getLogger(__name__)

PROMPT_PATH = Path(__file__).parent.parent / "prompts" / "extraction.md"


def parse_records(text: str) -> list[ExtractedRecord]:
    """Parse a model reply into extracted records.

    Args:
        text: Raw reply text

    Returns:
        Records in the order the model listed them

    Raises:
        AnalysisError: If the text is not JSON or an entry is not a record object
    """
    text = text.strip()
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse JSON response: %s", text)
        raise AnalysisError("Could not parse AI response.") from e

    try:
        return [ExtractedRecord.model_validate(item) for item in normalize_records(payload)]
    except ValidationError as e:
        logger.error("Response is not a list of records: %s", text)
        raise AnalysisError("AI response does not contain records.") from e


class DocumentAnalyzer:
    """Extract genealogical records from a document image using a chat model."""

    def __init__(
        self,
        llm: BaseChatModel | None = None,
        settings: Settings | None = None,
        model_name: str | None = None,
    ):
        """Initialize the document analyzer.

        Args:
            llm: Optional pre-built chat model (used as is)
            settings: Optional settings (defaults to the process-wide settings)
            model_name: Optional model name override
        """
        with PROMPT_PATH.open(encoding="utf-8") as f:
            self.instruction = f.read().strip()

        if llm is None:
            settings = settings or get_settings()
            llm = ChatOpenAI(
                model=model_name or settings.openai_model,
                temperature=settings.extraction_temperature,
                api_key=SecretStr(settings.get_api_key()),
            )
        self.llm = llm

        # Constrain replies to the record schema
        self.chain = self.llm.bind(response_format=response_format())

    async def build_message(self, image: bytes, mime_type: str) -> HumanMessage:
        """Combine the encoded image and the fixed instruction into one message."""
        image_part = await encode_image_part(image, mime_type)
        return HumanMessage(content=[image_part, {"type": "text", "text": self.instruction}])

    async def analyze_document(self, image: bytes, mime_type: str) -> list[ExtractedRecord]:
        """Extract every person found in a document image.

        Args:
            image: Raw image bytes
            mime_type: MIME type of the image

        Returns:
            One record per detected person (possibly empty)

        Raises:
            AnalysisError: If the reply cannot be parsed into records
            Exception: Transport and service errors propagate unchanged
        """
        message = await self.build_message(image, mime_type)
        logger.info("Analyzing %s image (%d bytes)", mime_type, len(image))

        response = await self.chain.ainvoke([message])
        records = parse_records(message_text(response))

        logger.info("Extracted %d record(s)", len(records))
        return records
