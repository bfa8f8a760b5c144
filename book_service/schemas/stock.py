"""
Stock Pydantic Schemas

Stock tracks copies per book. On the wire the fields use the names
other services already speak: {bookID, totalStock, lentStock,
availableStock}. In Python they are snake_case; populate_by_name lets
either spelling in.

Only available_stock is changed by deltas. total_stock and lent_stock
are informational and are never recomputed.
"""

from pydantic import BaseModel, ConfigDict, Field


class Stock(BaseModel):
    """
    Stock record for one book.

    Example:
    {
        "bookID": "2",
        "totalStock": 5,
        "lentStock": 0,
        "availableStock": 5
    }
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    book_id: str = Field(
        ...,
        alias="bookID",
        min_length=1,
        description="Id of the book this record counts (not validated against the book store)",
    )

    total_stock: int = Field(
        default=0,
        alias="totalStock",
        ge=0,
        description="Nominal number of copies owned",
    )

    lent_stock: int = Field(
        default=0,
        alias="lentStock",
        ge=0,
        description="Copies currently checked out",
    )

    available_stock: int = Field(
        default=0,
        alias="availableStock",
        ge=0,
        description="Copies that can be handed out; never negative",
    )

    def with_delta(self, delta: int) -> "Stock":
        """
        Return a copy with ``delta`` added to available_stock.

        No validation happens here; callers check the floor first.
        """
        return self.model_copy(update={"available_stock": self.available_stock + delta})


class StockChange(BaseModel):
    """Request body for adjusting available stock: {"delta": -1}."""

    delta: int = Field(
        ...,
        description="Signed adjustment applied to availableStock",
        examples=[3, -1],
    )
