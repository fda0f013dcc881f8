from pydantic import BaseModel, ConfigDict, Field


class GenerateRequest(BaseModel):
    """Request body for a non-streaming generate call."""

    model_config = ConfigDict(frozen=True)

    model: str = Field(description="Name of the model installed on the server")
    prompt: str = Field(description="Prompt text")
    stream: bool = Field(default=False, description="Always false, the reply arrives in one body")


class GenerateResponse(BaseModel):
    """Response body of a non-streaming generate call."""

    model_config = ConfigDict(frozen=True)

    response: str = Field(description="Generated text")
    done: bool = Field(description="Whether generation finished")
