# API Routers
from tropicana.routers import (
    auth, properties, room_types, rooms, rates, availability, guests, reservations,
    payments, webhooks, stays, tasks, content, site, public, analytics
)

__all__ = [
    'auth', 'properties', 'room_types', 'rooms', 'rates', 'availability', 'guests', 'reservations',
    'payments', 'webhooks', 'stays', 'tasks', 'content', 'site', 'public', 'analytics'
]
