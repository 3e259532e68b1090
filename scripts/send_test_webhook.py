#!/usr/bin/env python3
"""
Send a signed checkout.session.completed event to a running API.

Usage:
    python scripts/send_test_webhook.py <product_id> <store_id> [product_type] [url]

Signs the payload with STRIPE_WEBHOOK_SECRET using the provider's
"t=...,v1=..." scheme, so it passes verification with either gateway.
"""
import sys
import os
import json
import uuid

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import httpx

from app.core.config import settings
from app.services.payment_gateway import sign_payload


def send_test_webhook(product_id, store_id, product_type="digital", url="http://localhost:8000/webhooks/payment"):
    if not settings.STRIPE_WEBHOOK_SECRET:
        print("❌ STRIPE_WEBHOOK_SECRET is not set.")
        return

    event = {
        "id": f"evt_test_{uuid.uuid4().hex[:16]}",
        "type": "checkout.session.completed",
        "data": {
            "object": {
                "id": f"cs_test_{uuid.uuid4().hex[:16]}",
                "customer_email": "buyer@example.com",
                "customer_details": {"name": "Test Buyer", "email": "buyer@example.com"},
                "amount_total": 2900,
                "payment_intent": f"pi_test_{uuid.uuid4().hex[:16]}",
                "metadata": {"productId": product_id, "storeId": store_id, "productType": product_type},
            }
        },
    }
    payload = json.dumps(event).encode()
    headers = {
        "Content-Type": "application/json",
        "stripe-signature": sign_payload(payload, settings.STRIPE_WEBHOOK_SECRET),
    }

    response = httpx.post(url, content=payload, headers=headers, timeout=10.0)
    print(f"{'✅' if response.status_code == 200 else '❌'} {response.status_code}: {response.text}")


if __name__ == "__main__":
    if len(sys.argv) < 3:
        print(__doc__)
        sys.exit(1)
    send_test_webhook(*sys.argv[1:5])
