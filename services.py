"""
Auth, catalog and order services.

Every function takes the Mongo ``Database`` handle first and raises the
errors from ``errors`` for the HTTP layer to report. Nothing here retries;
each operation is a single document read or write.
"""
from typing import List, Optional

from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from database import (
    ORDERS,
    PRODUCTS,
    USERS,
    create_document,
    get_documents,
    now,
    serialize_doc,
    to_object_id,
)
from errors import Conflict, InvalidCredentials, NotFound, ValidationError
from logger import get_logger
from schemas import (
    MIN_SUB_IMAGES,
    ORDER_STATUS_TRANSITIONS,
    LoginRequest,
    Order,
    OrderFields,
    OrderStatus,
    Product,
    ProductFields,
    Role,
    SignupRequest,
    User,
)
from security import get_password_hash, verify_password
from settings import settings

logger = get_logger(__name__)

REQUIRED_PRODUCT_FIELDS = ("name", "description", "detailedDescription", "mainImage", "price")

REQUIRED_ORDER_FIELDS = (
    "productId",
    "productName",
    "price",
    "customerName",
    "customerEmail",
    "phone",
    "address",
    "pincode",
    "city",
    "taluka",
)


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _first_missing(data: dict, required) -> str:
    for field in required:
        if _is_blank(data.get(field)):
            return field
    return ""


def public_user(user: dict) -> dict:
    return {
        "id": str(user["_id"]),
        "name": user["name"],
        "email": user["email"],
        "role": user.get("role", Role.customer.value),
    }


# ----- Auth -----

def signup(db: Database, payload: SignupRequest) -> str:
    if db[USERS].find_one({"email": payload.email}):
        raise Conflict("User already exists")
    user = User(
        name=payload.name,
        email=payload.email,
        password=get_password_hash(payload.password),
        role=payload.role,
    )
    try:
        user_id = create_document(db, USERS, user)
    except DuplicateKeyError:
        # lost a race with a concurrent signup for the same email
        raise Conflict("User already exists")
    logger.info("Registered %s user %s", user.role, user.email)
    return user_id


def login(db: Database, payload: LoginRequest) -> dict:
    query = {"email": payload.email}
    if payload.role:
        query["role"] = payload.role
    user = db[USERS].find_one(query)
    if not user or not verify_password(payload.password, user.get("password", "")):
        raise InvalidCredentials()
    return public_user(user)


def ensure_default_admin(db: Database) -> bool:
    """Seed the administrator account unless a user with ADMIN_EMAIL already exists."""
    if db[USERS].find_one({"email": settings.ADMIN_EMAIL}):
        return False
    admin = User(
        name=settings.ADMIN_NAME,
        email=settings.ADMIN_EMAIL,
        password=get_password_hash(settings.ADMIN_PASSWORD),
        role=Role.admin,
    )
    try:
        create_document(db, USERS, admin)
    except DuplicateKeyError:
        return False
    logger.info("Default admin user created (%s)", settings.ADMIN_EMAIL)
    return True


# ----- Catalog -----

def list_products(db: Database) -> List[dict]:
    return [serialize_doc(p) for p in get_documents(db, PRODUCTS)]


def get_product(db: Database, product_id: str) -> dict:
    oid = to_object_id(product_id)
    doc = db[PRODUCTS].find_one({"_id": oid}) if oid else None
    if not doc:
        raise NotFound("Product not found")
    return serialize_doc(doc)


def _check_sub_images(sub_images) -> List[str]:
    images = [img for img in (sub_images or []) if not _is_blank(img)]
    if len(images) < MIN_SUB_IMAGES:
        raise ValidationError(f"At least {MIN_SUB_IMAGES} sub images are required")
    return images


def create_product(db: Database, payload: ProductFields) -> dict:
    data = payload.model_dump(by_alias=True)
    missing = _first_missing(data, REQUIRED_PRODUCT_FIELDS)
    if missing:
        raise ValidationError(f"{missing} is required")
    data["subImages"] = _check_sub_images(data.get("subImages"))

    product_id = create_document(db, PRODUCTS, Product.model_validate(data))
    logger.info("Created product %s (%s)", product_id, data["name"])
    return get_product(db, product_id)


def update_product(db: Database, product_id: str, payload: ProductFields) -> dict:
    oid = to_object_id(product_id)
    if oid is None:
        raise NotFound("Product not found")

    data = payload.model_dump(by_alias=True, exclude_unset=True)
    if not data:
        raise ValidationError("No fields to update")
    for field, value in data.items():
        if field != "subImages" and _is_blank(value):
            raise ValidationError(f"{field} cannot be empty")
    if "subImages" in data:
        data["subImages"] = _check_sub_images(data["subImages"])
    data["updatedAt"] = now()

    res = db[PRODUCTS].update_one({"_id": oid}, {"$set": data})
    if res.matched_count == 0:
        raise NotFound("Product not found")
    logger.info("Updated product %s", product_id)
    return get_product(db, product_id)


def delete_product(db: Database, product_id: str) -> None:
    oid = to_object_id(product_id)
    res = db[PRODUCTS].delete_one({"_id": oid}) if oid else None
    if res is None or res.deleted_count == 0:
        raise NotFound("Product not found")
    logger.info("Deleted product %s", product_id)


# ----- Orders -----

def place_order(db: Database, payload: OrderFields) -> str:
    data = payload.model_dump(by_alias=True)
    missing = _first_missing(data, REQUIRED_ORDER_FIELDS)
    if missing:
        raise ValidationError(f"{missing} is required")

    order = Order.model_validate({k: v for k, v in data.items() if v is not None})
    order_id = create_document(db, ORDERS, order)
    logger.info("Order %s placed by %s for product %s", order_id, order.customer_email, order.product_id)
    return order_id


def list_orders(db: Database) -> List[dict]:
    return [serialize_doc(o) for o in get_documents(db, ORDERS)]


def list_orders_by_customer(db: Database, email: str) -> List[dict]:
    return [serialize_doc(o) for o in get_documents(db, ORDERS, {"customerEmail": email})]


def get_order(db: Database, order_id: str) -> dict:
    oid = to_object_id(order_id)
    doc = db[ORDERS].find_one({"_id": oid}) if oid else None
    if not doc:
        raise NotFound("Order not found")
    return serialize_doc(doc)


def _check_transition(current: str, new: str) -> None:
    try:
        target = OrderStatus(new)
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise ValidationError(f"Unknown status '{new}' (expected one of: {allowed})")
    try:
        source = OrderStatus(current)
    except ValueError:
        raise ValidationError(f"Order has unknown status '{current}'")
    if target not in ORDER_STATUS_TRANSITIONS[source]:
        raise ValidationError(f"Cannot change status from {source.value} to {target.value}")


def update_order_status(db: Database, order_id: str, status: Optional[str]) -> dict:
    current = get_order(db, order_id)
    if status is None:
        raise ValidationError("status is required")
    if settings.STRICT_ORDER_STATUS:
        _check_transition(current["status"], status)

    oid = to_object_id(order_id)
    res = db[ORDERS].update_one({"_id": oid}, {"$set": {"status": status, "updatedAt": now()}}) if oid else None
    if res is None or res.matched_count == 0:
        raise NotFound("Order not found")
    logger.info("Order %s status -> %s", order_id, status)
    return get_order(db, order_id)


def delete_order(db: Database, order_id: str) -> None:
    oid = to_object_id(order_id)
    res = db[ORDERS].delete_one({"_id": oid}) if oid else None
    if res is None or res.deleted_count == 0:
        raise NotFound("Order not found")
    logger.info("Deleted order %s", order_id)
