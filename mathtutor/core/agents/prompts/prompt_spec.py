from pydantic import BaseModel, ConfigDict, Field


class PromptSpec(BaseModel):
    """A fixed prompt template together with its sampling parameters."""

    model_config = ConfigDict(frozen=True)

    template: str = Field(..., description="str.format template with named fields")
    temperature: float = Field(..., ge=0.0, le=2.0)
    max_output_size: int = Field(..., ge=1)

    def render(self, **fields: str) -> str:
        """Fill the template without modifying this PromptSpec."""
        return self.template.format(**fields)
