#!/usr/bin/env python3
"""
Debug script to check if environment variables are loaded correctly.
Run this inside the backend container to verify .env file is being read.
"""
import os
import sys

# Add parent directory to path to import app modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.config import settings


def _masked(value):
    return '***' + value[-4:] if value else '(not set)'


print("=" * 60)
print("Environment Variables Check")
print("=" * 60)
print()

print("Storefront:")
print(f"  APP_URL: {settings.APP_URL}")
print(f"  Default success URL: {settings.default_success_url()}")
print(f"  Default cancel URL: {settings.default_cancel_url()}")
print()

print("Payments:")
print(f"  PAYMENT_BACKEND: {settings.PAYMENT_BACKEND}")
print(f"  STRIPE_SECRET_KEY: {_masked(settings.STRIPE_SECRET_KEY)}")
print(f"  STRIPE_PUBLISHABLE_KEY: {settings.STRIPE_PUBLISHABLE_KEY or '(not set)'}")
print(f"  STRIPE_WEBHOOK_SECRET: {_masked(settings.STRIPE_WEBHOOK_SECRET)}")
print()

print("Database:")
print(f"  DATABASE_URL: {'(set)' if settings.DATABASE_URL else '(not set)'}")
print(f"  DATABASE_KEY: {_masked(settings.DATABASE_KEY)}")
print(f"  ORDER_IDEMPOTENCY_CHECK: {settings.ORDER_IDEMPOTENCY_CHECK}")
print()

problems = []
if settings.PAYMENT_BACKEND == "stripe" and not settings.STRIPE_SECRET_KEY:
    problems.append("STRIPE_SECRET_KEY is not set: POST /checkout will return 503")
if not settings.STRIPE_WEBHOOK_SECRET:
    problems.append("STRIPE_WEBHOOK_SECRET is not set: POST /webhooks/payment will return 503")
    problems.append("   For local development: run 'stripe listen --forward-to localhost:8000/webhooks/payment'")
    problems.append("   and copy the signing secret (whsec_...) into .env")
if not settings.DATABASE_URL:
    problems.append("DATABASE_URL is not set: POST /webhooks/payment will return 503")

if problems:
    for line in problems:
        print(line if line.startswith(" ") else f"⚠️  WARNING: {line}")
else:
    print("✅ Payment and database configuration present")

print("=" * 60)
