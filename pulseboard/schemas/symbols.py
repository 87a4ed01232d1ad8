from typing import Optional

from pydantic import BaseModel, Field


class SymbolSearchResultSchema(BaseModel):
    symbol: str = Field(..., examples=["ERIC-B.ST"])
    name: str
    region: Optional[str] = None
    currency: Optional[str] = None


class SymbolSearchResponse(BaseModel):
    symbols: list[SymbolSearchResultSchema]


__all__ = ["SymbolSearchResponse", "SymbolSearchResultSchema"]
