"""Pydantic models returned by the PDF split endpoint."""

from __future__ import annotations

from typing import List, Union

from pydantic import BaseModel, ConfigDict, Field


class InlinePart(BaseModel):
    """A split output returned directly as base64 encoded bytes."""

    file_name: str = Field(..., alias="fileName")
    page_count: int = Field(..., alias="pageCount")
    content: str

    model_config = ConfigDict(populate_by_name=True)


class DownloadLink(BaseModel):
    """A split output stored for a single later download."""

    file_name: str = Field(..., alias="fileName")
    token: str
    url: str

    model_config = ConfigDict(populate_by_name=True)


class SplitResponse(BaseModel):
    """Both halves of a split PDF, in page order."""

    mode: str
    parts: List[Union[InlinePart, DownloadLink]]

    model_config = ConfigDict(populate_by_name=True)


__all__ = ["DownloadLink", "InlinePart", "SplitResponse"]
