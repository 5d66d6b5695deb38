"""
Guest service
Guest profiles are scoped to a property and unique by email
"""
from typing import List, Optional
from sqlalchemy import or_, func
from sqlalchemy.orm import Session
from tropicana.models.booking import Guest, Reservation
from tropicana.models.hotel import Property
from tropicana.models.schemas import GuestCreate, GuestUpdate
from tropicana.services.exceptions import NotFoundError, ConflictError


class GuestService:
    """Guest service"""

    def __init__(self, db: Session):
        self.db = db

    def get_guest(self, guest_id: int) -> Optional[Guest]:
        return self.db.query(Guest).filter(Guest.id == guest_id).first()

    def require_guest(self, guest_id: int) -> Guest:
        guest = self.get_guest(guest_id)
        if not guest:
            raise NotFoundError("Guest not found")
        return guest

    def find_by_email(self, property_id: int, email: str) -> Optional[Guest]:
        return self.db.query(Guest).filter(
            Guest.property_id == property_id,
            func.lower(Guest.email) == email.lower()
        ).first()

    def get_guests(self, property_id: int, search: Optional[str] = None) -> List[Guest]:
        query = self.db.query(Guest).filter(Guest.property_id == property_id)
        if search:
            pattern = f"%{search.lower()}%"
            query = query.filter(or_(
                func.lower(Guest.first_name).like(pattern),
                func.lower(Guest.last_name).like(pattern),
                func.lower(Guest.email).like(pattern),
            ))
        return query.order_by(Guest.last_name, Guest.first_name).all()

    def create_guest(self, data: GuestCreate) -> Guest:
        if not self.db.query(Property).filter(Property.id == data.property_id).first():
            raise NotFoundError("Property not found")
        if self.find_by_email(data.property_id, data.email):
            raise ConflictError("A guest with this email already exists for this property")

        guest = Guest(**data.model_dump())
        guest.email = guest.email.lower()
        self.db.add(guest)
        self.db.commit()
        self.db.refresh(guest)
        return guest

    def upsert_website_guest(self, property_id: int, first_name: str, last_name: str,
                             email: str, phone: Optional[str] = None) -> Guest:
        """Find the guest by email and refresh their name, or create one; flushes only"""
        guest = self.find_by_email(property_id, email)
        if guest:
            guest.first_name = first_name
            guest.last_name = last_name
            if phone:
                guest.phone = phone
        else:
            guest = Guest(
                property_id=property_id,
                first_name=first_name,
                last_name=last_name,
                email=email.lower(),
                phone=phone,
                source="WEBSITE",
            )
            self.db.add(guest)
        self.db.flush()
        return guest

    def update_guest(self, guest_id: int, data: GuestUpdate) -> Guest:
        guest = self.require_guest(guest_id)
        update_data = data.model_dump(exclude_unset=True)

        new_email = update_data.get("email")
        if new_email:
            update_data["email"] = new_email.lower()
            clash = self.find_by_email(guest.property_id, new_email)
            if clash and clash.id != guest.id:
                raise ConflictError("A guest with this email already exists for this property")

        for key, value in update_data.items():
            setattr(guest, key, value)

        self.db.commit()
        self.db.refresh(guest)
        return guest

    def delete_guest(self, guest_id: int) -> None:
        guest = self.require_guest(guest_id)
        if self.db.query(Reservation).filter(Reservation.guest_id == guest_id).count() > 0:
            raise ConflictError("Guest has reservations and cannot be deleted")
        self.db.delete(guest)
        self.db.commit()

    def get_guest_reservations(self, guest_id: int) -> List[Reservation]:
        self.require_guest(guest_id)
        return self.db.query(Reservation).filter(
            Reservation.guest_id == guest_id
        ).order_by(Reservation.created_at.desc(), Reservation.id.desc()).all()
