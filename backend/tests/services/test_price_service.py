"""
Tests for tropicana/services/price_service.py
Covers: money, rate CRUD, resolve_nightly_rate, get_nightly_rates, quote
"""
import pytest
from datetime import date, datetime, timedelta
from decimal import Decimal

from tropicana.models.hotel import RoomRate
from tropicana.models.schemas import RoomRateCreate, RoomRateUpdate
from tropicana.services.exceptions import NotFoundError, ValidationError
from tropicana.services.price_service import PriceService, money

MONDAY = date(2030, 1, 7)
FRIDAY = date(2030, 1, 11)
SATURDAY = date(2030, 1, 12)


# ── helpers ──────────────────────────────────────────────────────────

def _make_rate(db, room_type, name="Peak", base_rate="1500.00", valid_from=MONDAY,
               valid_to=MONDAY + timedelta(days=30), priority=0, created_at=None, **extra):
    rate = RoomRate(
        room_type_id=room_type.id,
        name=name,
        base_rate=Decimal(base_rate),
        valid_from=valid_from,
        valid_to=valid_to,
        priority=priority,
        **extra,
    )
    if created_at:
        rate.created_at = created_at
    db.add(rate)
    db.commit()
    return rate


# ── money ────────────────────────────────────────────────────────────

class TestMoney:

    def test_rounds_half_up(self):
        assert money("10.005") == Decimal("10.01")
        assert money(Decimal("2.675")) == Decimal("2.68")

    def test_keeps_two_places(self):
        assert str(money(1000)) == "1000.00"


# ── rate CRUD ────────────────────────────────────────────────────────

class TestRateCrud:

    def test_create_for_unknown_room_type(self, db_session):
        data = RoomRateCreate(room_type_id=99, name="Ghost", base_rate=Decimal("10"),
                              valid_from=MONDAY, valid_to=FRIDAY)
        with pytest.raises(NotFoundError):
            PriceService(db_session).create_rate(data)

    def test_update_rejects_inverted_window(self, db_session, sample_room_type):
        rate = _make_rate(db_session, sample_room_type)
        with pytest.raises(ValidationError):
            PriceService(db_session).update_rate(rate.id, RoomRateUpdate(valid_to=MONDAY - timedelta(days=1)))

    def test_update_rejects_max_stay_below_min_stay(self, db_session, sample_room_type):
        rate = _make_rate(db_session, sample_room_type, min_stay=3)
        with pytest.raises(ValidationError):
            PriceService(db_session).update_rate(rate.id, RoomRateUpdate(max_stay=2))

    def test_list_active_only(self, db_session, sample_room_type):
        _make_rate(db_session, sample_room_type, name="On")
        _make_rate(db_session, sample_room_type, name="Off", is_active=False)
        rates = PriceService(db_session).get_rates(sample_room_type.id, is_active=True)
        assert [r.name for r in rates] == ["On"]


# ── nightly resolution ───────────────────────────────────────────────

class TestResolveNightlyRate:

    def test_falls_back_to_base_rate(self, db_session, sample_room_type):
        amount, rate = PriceService(db_session).resolve_nightly_rate(sample_room_type, MONDAY, booked_on=MONDAY)
        assert amount == Decimal("1000.00")
        assert rate is None

    def test_weekday_restricted_rate(self, db_session, sample_room_type):
        _make_rate(db_session, sample_room_type, name="Weekend", base_rate="1200.00",
                   monday=False, tuesday=False, wednesday=False, thursday=False, friday=False)
        service = PriceService(db_session)

        assert service.resolve_nightly_rate(sample_room_type, FRIDAY, booked_on=MONDAY)[0] == Decimal("1000.00")
        assert service.resolve_nightly_rate(sample_room_type, SATURDAY, booked_on=MONDAY)[0] == Decimal("1200.00")

    def test_highest_priority_wins(self, db_session, sample_room_type):
        _make_rate(db_session, sample_room_type, name="Season", base_rate="1500.00", priority=1)
        _make_rate(db_session, sample_room_type, name="Festival", base_rate="2500.00", priority=5)

        amount, rate = PriceService(db_session).resolve_nightly_rate(sample_room_type, MONDAY, booked_on=MONDAY)
        assert rate.name == "Festival"
        assert amount == Decimal("2500.00")

    def test_priority_tie_goes_to_newest(self, db_session, sample_room_type):
        _make_rate(db_session, sample_room_type, name="Old", base_rate="1100.00",
                   created_at=datetime(2029, 1, 1))
        _make_rate(db_session, sample_room_type, name="New", base_rate="1300.00",
                   created_at=datetime(2029, 6, 1))

        _, rate = PriceService(db_session).resolve_nightly_rate(sample_room_type, MONDAY, booked_on=MONDAY)
        assert rate.name == "New"

    def test_min_stay_restriction(self, db_session, sample_room_type):
        _make_rate(db_session, sample_room_type, name="Long stay", base_rate="800.00", min_stay=3)
        service = PriceService(db_session)

        assert service.resolve_nightly_rate(sample_room_type, MONDAY, nights=2, booked_on=MONDAY)[1] is None
        assert service.resolve_nightly_rate(sample_room_type, MONDAY, nights=3, booked_on=MONDAY)[1] is not None

    def test_advance_purchase_window(self, db_session, sample_room_type):
        _make_rate(db_session, sample_room_type, name="Early bird", base_rate="850.00", min_advance=30)
        service = PriceService(db_session)

        early = MONDAY - timedelta(days=45)
        late = MONDAY - timedelta(days=5)
        assert service.resolve_nightly_rate(sample_room_type, MONDAY, booked_on=early)[0] == Decimal("850.00")
        assert service.resolve_nightly_rate(sample_room_type, MONDAY, booked_on=late)[0] == Decimal("1000.00")

    def test_inactive_rate_ignored(self, db_session, sample_room_type):
        _make_rate(db_session, sample_room_type, is_active=False)
        _, rate = PriceService(db_session).resolve_nightly_rate(sample_room_type, MONDAY, booked_on=MONDAY)
        assert rate is None

    def test_window_edges_are_inclusive(self, db_session, sample_room_type):
        _make_rate(db_session, sample_room_type, valid_from=MONDAY, valid_to=MONDAY)
        service = PriceService(db_session)
        assert service.resolve_nightly_rate(sample_room_type, MONDAY, booked_on=MONDAY)[1] is not None
        assert service.resolve_nightly_rate(sample_room_type, MONDAY + timedelta(days=1),
                                            booked_on=MONDAY)[1] is None


# ── quotes ───────────────────────────────────────────────────────────

class TestQuote:

    def test_mixed_nights(self, db_session, sample_room_type):
        _make_rate(db_session, sample_room_type, name="Weekend", base_rate="1200.00",
                   monday=False, tuesday=False, wednesday=False, thursday=False, friday=False)

        quote = PriceService(db_session).quote(sample_room_type.id, FRIDAY, FRIDAY + timedelta(days=2),
                                               booked_on=MONDAY)
        assert [n["rate"] for n in quote["nightly_rates"]] == [Decimal("1000.00"), Decimal("1200.00")]
        assert quote["subtotal"] == Decimal("2200.00")
        assert quote["taxes"] == Decimal("264.00")
        assert quote["service_fee"] == Decimal("110.00")
        assert quote["total_amount"] == Decimal("2574.00")

    def test_platform_default_rates(self, db_session, sample_property, sample_room_type):
        sample_property.tax_rate = None
        sample_property.service_fee_rate = None
        sample_property.primary_currency = None
        db_session.commit()

        quote = PriceService(db_session).quote(sample_room_type.id, MONDAY, MONDAY + timedelta(days=1))
        assert quote["taxes"] == Decimal("120.00")
        assert quote["service_fee"] == Decimal("50.00")
        assert quote["currency"] == "PHP"

    def test_same_day_stay(self, db_session, sample_room_type):
        with pytest.raises(ValidationError):
            PriceService(db_session).quote(sample_room_type.id, MONDAY, MONDAY)

    def test_unknown_room_type(self, db_session):
        with pytest.raises(NotFoundError):
            PriceService(db_session).quote(42, MONDAY, FRIDAY)
