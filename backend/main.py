# backend/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

load_dotenv()

from config import settings
from store import build_scheduler
from utils.exceptions import ConfigurationError, EmailError, MalformedCellError, SheetsError, SheetStructureError

# Router imports
from routes.auth import router as auth_router
from routes.clients import router as clients_router
from routes.inventory import router as inventory_router
from routes.purchases import router as purchases_router
from routes.sales import router as sales_router
from routes.suppliers import router as suppliers_router
from routes.sheets import router as sheets_router
from routes.dashboard import router as dashboard_router
from routes.email import router as email_router
from routes.scheduler import router as scheduler_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.scheduler = build_scheduler()
    if settings.ENABLE_SCHEDULER:
        app.state.scheduler.start()
    yield
    app.state.scheduler.stop()


app = FastAPI(title="Inventory Sheets API", version="1.0.0", lifespan=lifespan)

# CORS Configuration
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
if settings.FRONTEND_URL and settings.FRONTEND_URL not in origins:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==========================================
#  ERROR TRANSLATION
# ==========================================
@app.exception_handler(SheetsError)
async def sheets_error_handler(request: Request, exc: SheetsError):
    if exc.permission_denied:
        logger.warning(f"Sheets permission denied on {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=403,
            content={"detail": f"Permission denied: {exc.message}. "
                               "Please ensure the service account has access to this sheet."},
        )
    logger.error(f"Sheets request failed on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=500, content={"detail": "Failed to access Google Sheets", "details": exc.message})


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error(f"Configuration error on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.exception_handler(SheetStructureError)
async def sheet_structure_error_handler(request: Request, exc: SheetStructureError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(MalformedCellError)
async def malformed_cell_handler(request: Request, exc: MalformedCellError):
    logger.warning(f"Rejected write on {request.url.path}: {exc}")
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(EmailError)
async def email_error_handler(request: Request, exc: EmailError):
    return JSONResponse(status_code=500, content={"detail": "Failed to send email", "details": str(exc)})


# Router registration
app.include_router(auth_router)
app.include_router(clients_router)
app.include_router(inventory_router)
app.include_router(purchases_router)
app.include_router(sales_router)
app.include_router(suppliers_router)
app.include_router(sheets_router)
app.include_router(dashboard_router)
app.include_router(email_router)
app.include_router(scheduler_router)


@app.get("/")
def read_root():
    return {"message": "Inventory Sheets API is running"}
