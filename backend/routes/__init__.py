"""API routers, in the order they are mounted."""

from backend.routes import admin_hours, admin_requests, admin_staff, auth, collaborator, content, notifications

ROUTERS = [
    auth.router,
    collaborator.router,
    admin_staff.router,
    admin_hours.router,
    admin_requests.router,
    content.router,
    notifications.router,
]
