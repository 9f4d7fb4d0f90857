from .output_builder import (
    CommunicatedDatum,
    RawDatum,
    SingleOutputBuilderResult,
    TransactionOutputAmountBuilder,
    TransactionOutputBuilder,
)

__all__ = [
    "CommunicatedDatum",
    "RawDatum",
    "SingleOutputBuilderResult",
    "TransactionOutputAmountBuilder",
    "TransactionOutputBuilder",
]
