import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_NAME", "shop_test")

import mongomock
import pytest
from fastapi.testclient import TestClient

import database
from main import app

SAMPLE_IMAGE = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk"


@pytest.fixture
def db(monkeypatch):
    mock_db = mongomock.MongoClient()["shop_test"]
    monkeypatch.setattr(database, "db", mock_db)
    return mock_db


@pytest.fixture
def client(db):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def product_payload():
    def make(name="Saree", price=500, sub_images=3, **extra):
        payload = {
            "name": name,
            "description": "Silk saree",
            "detailedDescription": "Handwoven Kanjeevaram silk with zari border",
            "mainImage": SAMPLE_IMAGE,
            "subImages": [SAMPLE_IMAGE] * sub_images,
            "price": price,
        }
        payload.update(extra)
        return payload

    return make


@pytest.fixture
def order_payload():
    def make(product_id="64b7f0c2a1b2c3d4e5f60718", **extra):
        payload = {
            "productId": product_id,
            "productName": "Saree",
            "price": 500,
            "customerName": "Mom",
            "customerEmail": "mom@shop.in",
            "phone": "9876543210",
            "altPhone": "9123456780",
            "address": "12 Temple Road",
            "pincode": "413001",
            "city": "Solapur",
            "taluka": "North Solapur",
        }
        payload.update(extra)
        return payload

    return make
