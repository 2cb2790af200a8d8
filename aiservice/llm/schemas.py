"""
Structured output schemas the model is bound to.
"""

from typing import Dict, Optional

from pydantic import BaseModel, Field


class GenerateCurlResult(BaseModel):
    """A curl command answering the user's request against an API service."""

    curl: str = Field(
        ...,
        min_length=1,
        description="The curl command that the user could run to call the endpoint",
    )
    metadata: Optional[Dict[str, str]] = Field(
        default=None,
        description="Additional metadata about the command and the endpoint it calls",
    )
