from pydantic import BaseModel, Field


class SearchResultItem(BaseModel):
    title: str
    link: str
    snippet: str = ""
    position: int | None = Field(default=None, ge=1)  # 1-based organic rank

    @property
    def text(self) -> str:
        return f"{self.title} {self.snippet}"


class SearchBatch(BaseModel):
    query: str
    items: list[SearchResultItem] = []
    error: str | None = None  # set when the fetch for this query failed


class BasePriceRecord(BaseModel):
    name: str
    amount: float = Field(gt=0)
    currency: str = "USD"
    rating: float | None = None
    property_token: str | None = None
