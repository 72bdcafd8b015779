from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import OAuth2PasswordBearer
from pymongo.database import Database
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

import services
from database import ensure_indexes, get_db
from errors import Forbidden, ShopError, Unauthorized
from logger import get_logger
from schemas import LoginRequest, OrderFields, ProductFields, Role, SignupRequest, StatusChange
from security import create_access_token, decode_access_token
from settings import settings

logger = get_logger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/login", auto_error=False)


@asynccontextmanager
async def lifespan(app: FastAPI):
    db = get_db()
    try:
        ensure_indexes(db)
        services.ensure_default_admin(db)
    except PyMongoError:
        logger.exception("Error creating default admin; serving without it")
    yield


app = FastAPI(title="Saree Shop API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ----- Error mapping -----

@app.exception_handler(ShopError)
async def shop_error_handler(request: Request, exc: ShopError):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message}, headers=headers)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{field}: {first.get('msg', 'invalid input')}" if field else first.get("msg", "Invalid request body")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": str(exc) or "Internal server error"})


# ----- Auth helpers -----

async def require_admin(token: Optional[str] = Depends(oauth2_scheme)):
    """Admin gate for catalog and order management; a no-op unless ENFORCE_ADMIN_AUTH is set."""
    if not settings.ENFORCE_ADMIN_AUTH:
        return None
    if not token:
        raise Unauthorized("Not authenticated")
    payload = decode_access_token(token)
    if payload.get("role") != Role.admin.value:
        raise Forbidden("Admin access required")
    return payload


@app.get("/")
def root():
    return {"message": "Saree Shop Backend Running"}


@app.get("/health")
def health(db: Database = Depends(get_db)):
    try:
        db.command("ping")
        database = "ok"
    except Exception as e:
        database = f"error: {str(e)[:80]}"
    return {"status": "ok", "database": database}


# Auth endpoints
@app.post("/api/signup", status_code=status.HTTP_201_CREATED)
def signup(payload: SignupRequest, db: Database = Depends(get_db)):
    user_id = services.signup(db, payload)
    return {"message": "User created successfully", "id": user_id}


@app.post("/api/login")
def login(payload: LoginRequest, db: Database = Depends(get_db)):
    user = services.login(db, payload)
    access_token = create_access_token(data={"sub": user["id"], "role": user["role"]})
    return {"user": user, "access_token": access_token, "token_type": "bearer"}


# Products
@app.get("/api/products")
def list_products(db: Database = Depends(get_db)) -> List[dict]:
    return services.list_products(db)


@app.get("/api/products/{product_id}")
def get_product(product_id: str, db: Database = Depends(get_db)):
    return services.get_product(db, product_id)


@app.post("/api/products", status_code=status.HTTP_201_CREATED)
def create_product(payload: ProductFields, db: Database = Depends(get_db), admin=Depends(require_admin)):
    return services.create_product(db, payload)


@app.put("/api/products/{product_id}")
def update_product(product_id: str, payload: ProductFields, db: Database = Depends(get_db), admin=Depends(require_admin)):
    return services.update_product(db, product_id, payload)


@app.delete("/api/products/{product_id}")
def delete_product(product_id: str, db: Database = Depends(get_db), admin=Depends(require_admin)):
    services.delete_product(db, product_id)
    return {"message": "Product deleted successfully"}


# Orders
@app.post("/api/orders", status_code=status.HTTP_201_CREATED)
def place_order(payload: OrderFields, db: Database = Depends(get_db)):
    order_id = services.place_order(db, payload)
    return {"message": "Order placed successfully", "orderId": order_id}


@app.get("/api/orders")
def list_orders(db: Database = Depends(get_db), admin=Depends(require_admin)) -> List[dict]:
    return services.list_orders(db)


@app.get("/api/orders/customer/{email}")
def list_customer_orders(email: str, db: Database = Depends(get_db)) -> List[dict]:
    return services.list_orders_by_customer(db, email)


@app.get("/api/orders/{order_id}")
def get_order(order_id: str, db: Database = Depends(get_db)):
    return services.get_order(db, order_id)


@app.put("/api/orders/{order_id}/status")
def update_order_status(order_id: str, payload: StatusChange, db: Database = Depends(get_db), admin=Depends(require_admin)):
    return services.update_order_status(db, order_id, payload.status)


@app.delete("/api/orders/{order_id}")
def delete_order(order_id: str, db: Database = Depends(get_db), admin=Depends(require_admin)):
    services.delete_order(db, order_id)
    return {"message": "Order deleted successfully"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
