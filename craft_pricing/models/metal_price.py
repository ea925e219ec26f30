from sqlalchemy import Column, DateTime, Float, Integer, String

from craft_pricing.core.timezone import local_date_label, utcnow
from craft_pricing.database.connection import Base
from craft_pricing.enums.metals import Metal


class MetalPriceMixin:
    """One row per local trading day; updated in place, never deleted."""

    id = Column(Integer, primary_key=True, index=True)
    price_per_tola = Column(Float, nullable=False)
    # UTC instant of local midnight for the trading day
    effective_date = Column(DateTime, nullable=False, index=True)
    last_scraped_at = Column(DateTime, nullable=False)
    daily_change = Column(String, nullable=True)  # "+120", "-45"; display only
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    @property
    def trading_day(self) -> str:
        return local_date_label(self.effective_date)

    def __repr__(self):
        return (
            f"<{type(self).__name__}(day={self.trading_day}, "
            f"price={self.price_per_tola}, scraped={self.last_scraped_at})>"
        )


class SilverPrice(MetalPriceMixin, Base):
    __tablename__ = "silver_prices"


class GoldPrice(MetalPriceMixin, Base):
    __tablename__ = "gold_prices"


LEDGER_MODELS = {
    Metal.silver: SilverPrice,
    Metal.gold: GoldPrice,
}


def ledger_model(metal: Metal):
    return LEDGER_MODELS[Metal(metal)]
