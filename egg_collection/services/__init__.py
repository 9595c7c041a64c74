from .exports import export_collection_data, export_collection_workbook
from .market_prices import MarketPriceProvider, MarketPrices
from .payments import BatchPaymentFailure, BatchPaymentResult, process_batch_payment
from .recording import (
    EggCollectionService,
    RecordingOutcome,
    SideEffectResult,
    build_collection_service,
)
from .reporting import (
    CollectionSummary,
    DailyCollectionReport,
    get_collection_summary,
    get_daily_collection_report,
)
from .requests import EggCollectionRequest
from .routes import RouteOptimization, optimize_route
from .validation import CollectionValidator, ValidatedCollection, ValidationReport

__all__ = [
    "BatchPaymentFailure",
    "BatchPaymentResult",
    "CollectionSummary",
    "CollectionValidator",
    "DailyCollectionReport",
    "EggCollectionRequest",
    "EggCollectionService",
    "MarketPriceProvider",
    "MarketPrices",
    "RecordingOutcome",
    "RouteOptimization",
    "SideEffectResult",
    "ValidatedCollection",
    "ValidationReport",
    "build_collection_service",
    "export_collection_data",
    "export_collection_workbook",
    "get_collection_summary",
    "get_daily_collection_report",
    "optimize_route",
    "process_batch_payment",
]
