"""
Report service
Dashboard figures and revenue series
"""
from typing import List, Optional
from datetime import date, datetime, timedelta
from decimal import Decimal
from sqlalchemy.orm import Session
from sqlalchemy import func
from tropicana.models.hotel import Property, Room
from tropicana.models.booking import Guest, Reservation, Payment
from tropicana.models.enums import RoomStatus, ReservationStatus, PaymentStatus
from tropicana.services.exceptions import ValidationError
from tropicana.services.price_service import money

REVENUE_STATUSES = (PaymentStatus.PAID, PaymentStatus.SUCCEEDED)
IN_HOUSE_STATUSES = (ReservationStatus.CONFIRMED, ReservationStatus.CHECKED_IN)
PAID_ON = func.coalesce(Payment.processed_at, Payment.transaction_date, Payment.created_at)


class ReportService:
    """Report service"""

    def __init__(self, db: Session):
        self.db = db

    def _payments_query(self, property_id: Optional[int], since: Optional[datetime] = None,
                        until: Optional[datetime] = None):
        query = self.db.query(Payment).filter(Payment.status.in_(REVENUE_STATUSES))
        if since:
            query = query.filter(PAID_ON >= since)
        if until:
            query = query.filter(PAID_ON < until)
        if property_id:
            query = query.join(Reservation).filter(Reservation.property_id == property_id)
        return query

    @staticmethod
    def _paid_on(payment: Payment) -> datetime:
        return payment.processed_at or payment.transaction_date or payment.created_at

    def get_dashboard_stats(self, property_id: Optional[int] = None, today: Optional[date] = None) -> dict:
        """Figures for the back-office dashboard, optionally for one property"""
        today = today or date.today()

        property_query = self.db.query(Property)
        room_query = self.db.query(Room)
        guest_query = self.db.query(Guest)
        reservation_query = self.db.query(Reservation)
        if property_id:
            property_query = property_query.filter(Property.id == property_id)
            room_query = room_query.filter(Room.property_id == property_id)
            guest_query = guest_query.filter(Guest.property_id == property_id)
            reservation_query = reservation_query.filter(Reservation.property_id == property_id)

        # Rooms
        rooms = room_query.all()
        rooms_by_status = {s.value: 0 for s in RoomStatus}
        for room in rooms:
            rooms_by_status[room.status.value] += 1
        active_rooms = [r for r in rooms if r.is_active]
        occupied = len([r for r in active_rooms if r.status == RoomStatus.OCCUPIED])
        occupancy_rate = round(occupied / len(active_rooms) * 100, 1) if active_rooms else 0.0

        # Arrivals and departures
        today_arrivals = reservation_query.filter(
            Reservation.check_in == today,
            Reservation.status.in_(IN_HOUSE_STATUSES)
        ).count()
        today_departures = reservation_query.filter(
            Reservation.check_out == today,
            Reservation.status.in_(IN_HOUSE_STATUSES)
        ).count()

        reservations_by_status = {s.value: 0 for s in ReservationStatus}
        for status, count in (reservation_query.with_entities(Reservation.status, func.count(Reservation.id))
                              .group_by(Reservation.status).all()):
            reservations_by_status[status.value] = count

        # Revenue
        since = datetime.combine(today - timedelta(days=30), datetime.min.time())
        revenue = self._payments_query(property_id, since=since).with_entities(func.sum(Payment.amount)).scalar()

        recent = reservation_query.order_by(Reservation.created_at.desc(), Reservation.id.desc()).limit(10).all()

        return {
            'total_properties': property_query.count(),
            'total_rooms': len(rooms),
            'total_guests': guest_query.count(),
            'rooms_by_status': rooms_by_status,
            'occupancy_rate': occupancy_rate,
            'today_arrivals': today_arrivals,
            'today_departures': today_departures,
            'reservations_by_status': reservations_by_status,
            'revenue_last_30_days': money(revenue or 0),
            'recent_reservations': recent,
        }

    def get_revenue_series(self, start: date, end: date, property_id: Optional[int] = None) -> List[dict]:
        """Daily revenue from settled payments, one point per day from start to end"""
        if end < start:
            raise ValidationError("start must not be after end")
        points = {}
        current = start
        while current <= end:
            points[current] = {'day': current, 'revenue': Decimal("0.00"), 'payments': 0}
            current += timedelta(days=1)

        until = datetime.combine(end + timedelta(days=1), datetime.min.time())
        for payment in self._payments_query(property_id, since=datetime.combine(start, datetime.min.time()),
                                            until=until).all():
            point = points[self._paid_on(payment).date()]
            point['revenue'] = money(point['revenue'] + Decimal(payment.amount))
            point['payments'] += 1

        return list(points.values())
