"""
Price service
Room rates and nightly price resolution
"""
import logging
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional
from sqlalchemy.orm import Session
from tropicana.config import settings
from tropicana.models.hotel import RoomRate, RoomType
from tropicana.models.schemas import RoomRateCreate, RoomRateUpdate
from tropicana.services.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def money(value) -> Decimal:
    """Round to two decimals, half up"""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def count_nights(check_in: date, check_out: date) -> int:
    return (check_out - check_in).days


class PriceService:
    """Price service"""

    def __init__(self, db: Session):
        self.db = db

    # ============== Rates ==============

    def get_rates(self, room_type_id: int, is_active: Optional[bool] = None) -> List[RoomRate]:
        query = self.db.query(RoomRate).filter(RoomRate.room_type_id == room_type_id)
        if is_active is not None:
            query = query.filter(RoomRate.is_active == is_active)
        return query.order_by(RoomRate.priority.asc(), RoomRate.id.asc()).all()

    def require_rate(self, rate_id: int) -> RoomRate:
        rate = self.db.query(RoomRate).filter(RoomRate.id == rate_id).first()
        if not rate:
            raise NotFoundError("Rate not found")
        return rate

    def create_rate(self, data: RoomRateCreate) -> RoomRate:
        room_type = self.db.query(RoomType).filter(RoomType.id == data.room_type_id).first()
        if not room_type:
            raise NotFoundError("Room type not found")

        rate = RoomRate(**data.model_dump())
        self.db.add(rate)
        self.db.commit()
        self.db.refresh(rate)
        return rate

    def update_rate(self, rate_id: int, data: RoomRateUpdate) -> RoomRate:
        rate = self.require_rate(rate_id)

        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(rate, key, value)

        if rate.valid_to < rate.valid_from:
            raise ValidationError("valid_to must not be before valid_from")
        if rate.max_stay is not None and rate.max_stay < (rate.min_stay or 1):
            raise ValidationError("max_stay must not be less than min_stay")

        self.db.commit()
        self.db.refresh(rate)
        return rate

    def delete_rate(self, rate_id: int) -> None:
        rate = self.require_rate(rate_id)
        self.db.delete(rate)
        self.db.commit()

    # ============== Pricing ==============

    @staticmethod
    def _rate_applies(rate: RoomRate, night: date, nights: int, lead_days: int) -> bool:
        if not (rate.valid_from <= night <= rate.valid_to):
            return False
        if not rate.applies_on_weekday(night.weekday()):
            return False
        if rate.min_stay and nights < rate.min_stay:
            return False
        if rate.max_stay and nights > rate.max_stay:
            return False
        if rate.min_advance is not None and lead_days < rate.min_advance:
            return False
        if rate.max_advance is not None and lead_days > rate.max_advance:
            return False
        return True

    def resolve_nightly_rate(self, room_type: RoomType, night: date, nights: int = 1,
                             booked_on: Optional[date] = None,
                             rates: Optional[List[RoomRate]] = None):
        """
        Rate for one night of a stay

        The highest-priority applicable active rate wins, ties going to the
        most recently created one. Falls back to the room type's base rate.

        Returns:
            (amount, rate or None)
        """
        if rates is None:
            rates = self.get_rates(room_type.id, is_active=True)
        lead_days = (night - (booked_on or date.today())).days

        candidates = [r for r in rates if r.is_active and self._rate_applies(r, night, nights, lead_days)]
        if not candidates:
            return Decimal(room_type.base_rate), None

        best = max(candidates, key=lambda r: (r.priority or 0, r.created_at, r.id))
        return Decimal(best.base_rate), best

    def get_nightly_rates(self, room_type: RoomType, check_in: date, check_out: date,
                          booked_on: Optional[date] = None) -> List[dict]:
        nights = count_nights(check_in, check_out)
        rates = self.get_rates(room_type.id, is_active=True)
        result = []
        for offset in range(nights):
            night = check_in + timedelta(days=offset)
            amount, rate = self.resolve_nightly_rate(room_type, night, nights, booked_on, rates)
            result.append({
                "night": night,
                "rate": money(amount),
                "rate_id": rate.id if rate else None,
                "rate_name": rate.name if rate else None,
            })
        return result

    def calculate_subtotal(self, room_type: RoomType, check_in: date, check_out: date,
                           room_count: int = 1) -> Decimal:
        nightly = self.get_nightly_rates(room_type, check_in, check_out)
        return money(sum((n["rate"] for n in nightly), Decimal("0")) * room_count)

    def quote(self, room_type_id: int, check_in: date, check_out: date,
              booked_on: Optional[date] = None) -> dict:
        """
        Full price quote for a stay in one room

        taxes and service fee use the property's rates, falling back to the
        platform defaults.
        """
        room_type = self.db.query(RoomType).filter(RoomType.id == room_type_id).first()
        if not room_type:
            raise NotFoundError("Room type not found")

        nights = count_nights(check_in, check_out)
        if nights < 1:
            raise ValidationError("check_out must be after check_in")

        prop = room_type.hotel
        nightly = self.get_nightly_rates(room_type, check_in, check_out, booked_on)
        subtotal = money(sum((n["rate"] for n in nightly), Decimal("0")))

        tax_rate = prop.tax_rate if prop.tax_rate is not None else settings.DEFAULT_TAX_RATE
        fee_rate = prop.service_fee_rate if prop.service_fee_rate is not None else settings.DEFAULT_SERVICE_FEE_RATE
        taxes = money(subtotal * Decimal(tax_rate))
        service_fee = money(subtotal * Decimal(fee_rate))

        return {
            "room_type_id": room_type.id,
            "check_in": check_in,
            "check_out": check_out,
            "nights": nights,
            "currency": prop.primary_currency or settings.DEFAULT_CURRENCY,
            "nightly_rates": nightly,
            "subtotal": subtotal,
            "taxes": taxes,
            "service_fee": service_fee,
            "total_amount": money(subtotal + taxes + service_fee),
        }
