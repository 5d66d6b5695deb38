"""
Tests for tropicana/services/availability_service.py
"""
import pytest
from datetime import timedelta
from decimal import Decimal

from tropicana.models.hotel import Room, RoomType
from tropicana.models.enums import ReservationStatus, RoomCategory
from tropicana.services.availability_service import AvailabilityService
from tropicana.services.exceptions import NotFoundError, ValidationError


class TestCountAvailable:

    def test_all_rooms_free(self, db_session, sample_rooms, sample_room_type, stay_dates):
        assert AvailabilityService(db_session).count_available(sample_room_type.id, *stay_dates) == 2

    def test_overlapping_reservation_holds_a_room(self, db_session, sample_rooms, sample_room_type,
                                                  make_reservation, stay_dates):
        make_reservation()
        assert AvailabilityService(db_session).count_available(sample_room_type.id, *stay_dates) == 1

    def test_back_to_back_stays_do_not_overlap(self, db_session, sample_rooms, sample_room_type,
                                               make_reservation, stay_dates):
        make_reservation()
        make_reservation()
        check_in, check_out = stay_dates
        service = AvailabilityService(db_session)

        assert service.count_available(sample_room_type.id, check_in, check_out) == 0
        assert service.count_available(sample_room_type.id, check_out, check_out + timedelta(days=1)) == 2
        assert service.count_available(sample_room_type.id, check_in - timedelta(days=2), check_in) == 2

    @pytest.mark.parametrize("status", [ReservationStatus.CANCELLED, ReservationStatus.NO_SHOW])
    def test_released_reservations_free_inventory(self, db_session, sample_rooms, sample_room_type,
                                                  make_reservation, stay_dates, status):
        make_reservation(status=status)
        assert AvailabilityService(db_session).count_available(sample_room_type.id, *stay_dates) == 2

    def test_exclude_reservation(self, db_session, sample_rooms, sample_room_type,
                                 make_reservation, stay_dates):
        reservation = make_reservation()
        count = AvailabilityService(db_session).count_available(
            sample_room_type.id, *stay_dates, exclude_reservation_id=reservation.id
        )
        assert count == 2

    def test_inactive_rooms_not_counted(self, db_session, sample_rooms, sample_room_type, stay_dates):
        sample_rooms[0].is_active = False
        db_session.commit()
        assert AvailabilityService(db_session).count_available(sample_room_type.id, *stay_dates) == 1

    def test_never_negative(self, db_session, sample_rooms, sample_room_type, make_reservation, stay_dates):
        for _ in range(3):
            make_reservation()
        assert AvailabilityService(db_session).count_available(sample_room_type.id, *stay_dates) == 0

    def test_unknown_room_type(self, db_session, stay_dates):
        with pytest.raises(NotFoundError):
            AvailabilityService(db_session).count_available(404, *stay_dates)


class TestIsRoomFree:

    def test_assigned_room(self, db_session, sample_rooms, make_reservation, stay_dates):
        reservation = make_reservation(room=sample_rooms[0])
        service = AvailabilityService(db_session)

        assert service.is_room_free(sample_rooms[0].id, *stay_dates) is False
        assert service.is_room_free(sample_rooms[1].id, *stay_dates) is True
        assert service.is_room_free(sample_rooms[0].id, *stay_dates,
                                    exclude_reservation_id=reservation.id) is True

    def test_cancelled_assignment(self, db_session, sample_rooms, make_reservation, stay_dates):
        make_reservation(status=ReservationStatus.CANCELLED, room=sample_rooms[0])
        assert AvailabilityService(db_session).is_room_free(sample_rooms[0].id, *stay_dates) is True


class TestSearch:

    @pytest.fixture
    def family_suite(self, db_session, sample_property):
        suite = RoomType(
            property_id=sample_property.id,
            name="family",
            display_name="Family Suite",
            category=RoomCategory.SUITE,
            base_rate=Decimal("2500.00"),
            max_occupancy=5,
            max_adults=4,
            max_children=3,
        )
        db_session.add(suite)
        db_session.flush()
        db_session.add(Room(property_id=sample_property.id, room_type_id=suite.id, room_number="301", floor=3))
        db_session.commit()
        return suite

    def test_lists_room_types_with_counts(self, db_session, sample_property, sample_rooms,
                                          family_suite, make_reservation, stay_dates):
        make_reservation()
        results = AvailabilityService(db_session).search(sample_property.id, *stay_dates, adults=2)

        by_name = {r["name"]: r for r in results}
        assert set(by_name) == {"deluxe", "family"}
        assert by_name["deluxe"]["total_rooms"] == 2
        assert by_name["deluxe"]["booked_rooms"] == 1
        assert by_name["deluxe"]["available_count"] == 1
        assert by_name["family"]["available_count"] == 1

    def test_party_size_filters_room_types(self, db_session, sample_property, sample_rooms,
                                           family_suite, stay_dates):
        results = AvailabilityService(db_session).search(sample_property.id, *stay_dates, adults=3, children=1)
        assert [r["name"] for r in results] == ["family"]

    def test_sold_out_type_omitted(self, db_session, sample_property, sample_rooms,
                                   make_reservation, stay_dates):
        make_reservation()
        make_reservation()
        assert AvailabilityService(db_session).search(sample_property.id, *stay_dates, adults=1) == []

    def test_inactive_room_type_omitted(self, db_session, sample_property, sample_rooms,
                                        sample_room_type, stay_dates):
        sample_room_type.is_active = False
        db_session.commit()
        assert AvailabilityService(db_session).search(sample_property.id, *stay_dates, adults=1) == []

    def test_validation(self, db_session, sample_property, stay_dates):
        service = AvailabilityService(db_session)
        check_in, check_out = stay_dates
        with pytest.raises(ValidationError):
            service.search(sample_property.id, check_in, check_out, adults=0)
        with pytest.raises(ValidationError):
            service.search(sample_property.id, check_out, check_in, adults=1)
        with pytest.raises(NotFoundError):
            service.search(999, check_in, check_out, adults=1)
