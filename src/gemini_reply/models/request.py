"""Request payload models for the generateContent endpoint."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..config import LLMConfig


HARM_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)

BLOCK_MEDIUM_AND_ABOVE = "BLOCK_MEDIUM_AND_ABOVE"


class GenerationConfig(BaseModel):
    """Sampling parameters sent with every request."""

    model_config = ConfigDict(populate_by_name=True)

    temperature: float = Field(default=0.7, description="Sampling temperature")
    top_k: int = Field(default=40, alias="topK", description="Top-K sampling cutoff")
    top_p: float = Field(default=0.95, alias="topP", description="Nucleus sampling mass")
    max_output_tokens: int = Field(
        default=1024, alias="maxOutputTokens", description="Maximum tokens in the reply"
    )
    stop_sequences: list[str] = Field(
        default_factory=list, alias="stopSequences", description="Stop sequences"
    )

    @classmethod
    def from_llm_config(cls, config: LLMConfig) -> "GenerationConfig":
        """Build generation parameters from client configuration."""
        return cls(
            temperature=config.temperature,
            top_k=config.top_k,
            top_p=config.top_p,
            max_output_tokens=config.max_tokens,
        )


class SafetySetting(BaseModel):
    """Blocking threshold for one harm category."""

    category: str = Field(..., description="Harm category name")
    threshold: str = Field(default=BLOCK_MEDIUM_AND_ABOVE, description="Block threshold")


def default_safety_settings() -> list[SafetySetting]:
    return [SafetySetting(category=category) for category in HARM_CATEGORIES]


class Part(BaseModel):
    text: str


class Content(BaseModel):
    parts: list[Part]


class GenerateContentRequest(BaseModel):
    """JSON body of a generateContent call."""

    model_config = ConfigDict(populate_by_name=True)

    contents: list[Content] = Field(..., description="Conversation contents")
    generation_config: GenerationConfig = Field(
        default_factory=GenerationConfig, alias="generationConfig"
    )
    safety_settings: list[SafetySetting] = Field(
        default_factory=default_safety_settings, alias="safetySettings"
    )

    @classmethod
    def from_text(
        cls,
        text: str,
        generation_config: Optional[GenerationConfig] = None,
    ) -> "GenerateContentRequest":
        """Build a request holding the user text as a single content part."""
        return cls(
            contents=[Content(parts=[Part(text=text)])],
            generation_config=generation_config or GenerationConfig(),
        )

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the camelCase wire format."""
        return self.model_dump(by_alias=True)
