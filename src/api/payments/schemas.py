from pydantic import BaseModel, ConfigDict, Field


class PaddleVerifyRequest(BaseModel):
    """Body sent by the client after a Paddle checkout closes."""

    model_config = ConfigDict(populate_by_name=True)

    transaction_id: str = Field(
        alias="transactionId",
        min_length=1,
        max_length=128,
        pattern=r"^[A-Za-z0-9_-]+$",
    )
