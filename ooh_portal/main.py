import logging

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from ooh_portal.config import settings
from ooh_portal.db import SessionLocal
from ooh_portal.errors import install_error_handlers
from ooh_portal.routers import auth, bookings, campaigns, dashboard, documents, inventory, invoices, seed, suppliers, users
from ooh_portal.security.headers import install_security_headers
from ooh_portal.security.sessions import install_auth_session_middleware

logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)

app = FastAPI(title='OOH Booking Portal')
app.state.session_factory = SessionLocal

install_error_handlers(app)
install_auth_session_middleware(app)
install_security_headers(app)

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(suppliers.router)
app.include_router(campaigns.router)
app.include_router(bookings.router)
app.include_router(documents.router)
app.include_router(invoices.router)
app.include_router(inventory.router)
app.include_router(dashboard.router)
app.include_router(seed.router)


@app.get('/robots.txt', response_class=PlainTextResponse)
def robots_txt() -> str:
    return 'User-agent: *\nDisallow: /\n'
